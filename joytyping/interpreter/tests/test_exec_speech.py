import pytest

from joytyping.core.types import speech_input
from joytyping.interpreter.speech.exec_speech import ExecSpeech, MappingError, map_words
from joytyping.interpreter.speech.executors import (
    TAG_CAMEL,
    Delay,
    ExecutorParseError,
    Hotkey,
    Repeat,
    Replace,
    Shell,
    Typing,
    WordDecorator,
    DelayDynFactory,
    HotkeyDynFactory,
    parse_duration,
    to_camel,
    to_snake,
    to_title,
    to_upper,
)
from joytyping.interpreter.speech.word_tree import WordTree

MAPPING = {
    "programming": [
        "repeat -> [repeat]",
        'space -> " "',
        "camel -> [camel]",
        "snake -> [snake]",
        "upper -> [upper]",
        "title -> [title]",
        "elephant -> [camel] [title]",
        'dot -> "."',
    ],
    "application": [
        "run terminal -> [hotkey] t control alt",
        'run brave -> [shell] "brave-browser" "--no-sandbox"',
        "hotkey -> [hotkey]",
        "delay -> [delay]",
        "nap -> [delay] 1m30s",
    ],
}


def speech(ctx, **kw):
    kw.setdefault("mapping_ids", ["programming", "application"])
    return ExecSpeech(ctx, word_mapping=MAPPING, **kw)


def typed_words(executors):
    return [e.words for e in executors if isinstance(e, Typing)]


def test_mapping_substitution():
    tree = WordTree()
    tree.set(["hello", "world"], Replace(("good", "night")))
    tree.set(["super", "awesome"], Replace(("nice",)))
    words = ["aaa", "hello", "world", "super", "awesome"]
    assert map_words(tree, words) == ["aaa", "good", "night", "nice"]


def test_mapping_to_space_keeps_each_space():
    tree = WordTree()
    tree.set(["space"], Replace((" ",)))
    assert map_words(tree, ["space", "space"]) == [" ", " "]


def test_consecutive_words_group_into_one_typing(ctx):
    ex = speech(ctx).compile("hello big world")
    assert ex == [Typing(words=["hello", "big", "world"], no_space=True)]


def test_space_token_does_not_group(ctx):
    ex = speech(ctx).compile("hello space world")
    assert typed_words(ex) == [["hello"], [" "], ["world"]]


def test_numbers_cast_before_typing(ctx):
    ex = speech(ctx).compile("version two thousand n twenty two")
    assert typed_words(ex) == [["version", "2022"]]

    ex = speech(ctx, cast_number=False).compile("version two")
    assert typed_words(ex) == [["version", "two"]]


def test_decorator_precedes_grouped_phrase(ctx):
    ex = speech(ctx).compile("camel hello world")
    assert isinstance(ex[0], WordDecorator)
    assert ex[0].name == TAG_CAMEL
    assert typed_words(ex) == [["hello", "world"]]


def test_fixed_executors(ctx):
    ex = speech(ctx).compile("run terminal run brave nap")
    assert ex == [
        Hotkey(("t", "control", "alt")),
        Shell(("brave-browser", "--no-sandbox")),
        Delay(90.0),
    ]


def test_dynamic_hotkey_consumes_modifiers_and_key(ctx):
    ex = speech(ctx).compile("hotkey control shift t hello")
    assert ex[0] == Hotkey(("t", "control", "shift"))
    assert typed_words(ex) == [["hello"]]


def test_dynamic_delay_consumes_number_and_unit(ctx):
    ex = speech(ctx).compile("delay three seconds hello")
    assert ex[0] == Delay(3.0)
    assert typed_words(ex) == [["hello"]]

    ex = speech(ctx).compile("delay five hundred milliseconds")
    assert len(ex) == 1
    assert ex[0].seconds == pytest.approx(0.5)


def test_unparsable_dynamic_executor_is_skipped(ctx):
    # "delay" without a unit: the phrase is dropped and the rest is typed
    ex = speech(ctx).compile("delay soon")
    assert ex == [Typing(words=["soon"], no_space=True)]


def test_without_typing_unmatched_words_are_dropped(ctx):
    ex = speech(ctx, typing=False).compile("hello run terminal world")
    assert ex == [Hotkey(("t", "control", "alt"))]


def test_compile_is_idempotent(ctx):
    es = speech(ctx)
    text = "elephant hello world run terminal space delay two seconds dot"
    assert es.compile(text) == es.compile(text)


def test_last_speech_kept_unless_repeating(ctx):
    es = speech(ctx)
    es.compile("hello world")
    assert ctx.last_speech == "hello world"

    ex = es.compile("repeat")
    assert ex == [Repeat("hello world")]
    assert ctx.last_speech == "hello world"


def test_unknown_mapping_id(ctx):
    with pytest.raises(MappingError):
        speech(ctx, mapping_ids=["nope"])


@pytest.mark.parametrize(
    "line",
    [
        "broken line without arrow",
        "a -> b -> c",
        "shell -> [shell]",
        "wait -> [delay] soon",
        "wait -> [delay] 1s 2s",
        '-> "x"',
    ],
)
def test_bad_mapping_lines(ctx, line):
    with pytest.raises(MappingError):
        ExecSpeech(ctx, mapping_ids=["m"], word_mapping={"m": [line]})


def test_run_types_with_decorators(ctx, settle):
    es = speech(ctx)
    for text in ("camel hello world", "snake hello world", "upper hi dot", "elephant hello world"):
        es.do(speech_input(text))
    settle()
    assert ctx.keyboard.typed == ["helloWorld", "hello_world", "HI.", "HelloWorld"]


def test_repeat_replays_the_utterance_before_it(ctx):
    es = speech(ctx)
    # all three are compiled before the speech worker runs any of them
    for text in ("hello", "repeat", "world"):
        es.do(speech_input(text))
    ctx.speech_worker.drain()

    assert ctx.keyboard.typed == ["hello", "world"]
    assert [args[0].speech.text for _, args in ctx.pool.queue] == ["hello"]


def test_run_space_mode_joins_with_spaces(ctx, settle):
    speech(ctx, no_space=False).do(speech_input("upper hello world"))
    settle()
    assert ctx.keyboard.typed == ["HELLO WORLD"]


def test_run_hotkey_normalizes_control(ctx, settle):
    speech(ctx).do(speech_input("run terminal"))
    settle()
    assert ctx.keyboard.taps == [["t", "ctrl", "alt"]]


def test_case_functions():
    assert to_camel(["hello", "world"]) == ["helloWorld"]
    assert to_camel(["HelloWorld"]) == ["helloWorld"]
    assert to_snake(["hello", "world"]) == ["hello_world"]
    assert to_snake(["helloWorld"]) == ["hello_world"]
    assert to_upper(["ab", "c"]) == ["AB", "C"]
    assert to_title(["hello world", "x"]) == ["Hello World", "x"]
    assert to_title(["hELLO"]) == ["HELLO"]


@pytest.mark.parametrize(
    "s,seconds",
    [("500ms", 0.5), ("1s", 1.0), ("1.5s", 1.5), ("1m30s", 90.0), ("2h", 7200.0)],
)
def test_parse_duration(s, seconds):
    assert parse_duration(s) == pytest.approx(seconds)


@pytest.mark.parametrize("s", ["", "soon", "10", "5 s", "1x"])
def test_parse_duration_rejects(s):
    with pytest.raises(ValueError):
        parse_duration(s)


def test_dynamic_factories_reject_garbage():
    with pytest.raises(ExecutorParseError):
        HotkeyDynFactory().parse(["control"])
    with pytest.raises(ExecutorParseError):
        HotkeyDynFactory().parse(["control", "banana"])
    with pytest.raises(ExecutorParseError):
        DelayDynFactory().parse(["3", "weeks"])
    with pytest.raises(ExecutorParseError):
        DelayDynFactory().parse([])
    with pytest.raises(ExecutorParseError):
        DelayDynFactory().parse(["²", "seconds"])


def test_superscript_digit_after_delay_is_typed(ctx):
    ex = speech(ctx).compile("delay ² seconds hello")
    assert typed_words(ex) == [["²", "seconds", "hello"]]
