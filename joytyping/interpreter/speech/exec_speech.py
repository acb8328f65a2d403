"""
joytyping — SPEECH COMMAND COMPILER

Turns one utterance into an ordered list of executors, then runs them.

    "camel hello world hotkey control a"
      -> [camel] hello world hotkey control a          (word mapping)
      -> [decorator(camel), typing(hello world), hotkey(a, control)]
      -> types "helloWorld", taps ctrl+a

Word mapping lines without an executor tag ("space -> \" \"") are plain
replacements and live in the mapping tree. Lines tagged [shell], [hotkey] or
[delay] build executor factories in the execution tree.
"""

from __future__ import annotations

import logging
import shlex
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Dict, List, Sequence, Tuple

from joytyping.core.types import Input, InputType
from joytyping.interpreter.actions import Action
from joytyping.interpreter.speech.executors import (
    CASE_DECORATORS,
    TAG_REPEAT,
    DelayDynFactory,
    DelayFixFactory,
    Executor,
    ExecutorFactory,
    ExecutorParseError,
    HotkeyDynFactory,
    HotkeyFixFactory,
    Replace,
    RepeatFactory,
    ShellFactory,
    Typing,
    TypingFactory,
    WordDecoratorFactory,
    parse_duration,
    run_executors,
)
from joytyping.interpreter.speech.numbers import replace_numbers
from joytyping.interpreter.speech.word_tree import FallbackWordTree, WordTree

if TYPE_CHECKING:
    from joytyping.interpreter.context import EngineContext

logger = logging.getLogger(__name__)


class MappingError(ValueError):
    """A word mapping line could not be compiled."""


def split_arrow_line(line: str) -> Tuple[List[str], List[str]]:
    """Split `left words -> right words` with shell quoting on both sides."""
    parts = line.split("->")
    if len(parts) != 2:
        raise MappingError(f"expected exactly one '->': {line}")
    try:
        return shlex.split(parts[0]), shlex.split(parts[1])
    except ValueError as e:
        raise MappingError(f"{e}: {line}") from e


def map_words(tree: WordTree[Replace], words: Sequence[str]) -> List[str]:
    out: List[str] = []
    i = 0
    while i < len(words):
        cost, leaf, matched = tree.scan(words[i:])
        if matched and leaf is not None:
            leaf.apply(out)
            i += cost
        else:
            out.append(words[i])
            i += 1
    return out


@dataclass
class ExecSpeech(Action):
    ctx: "EngineContext" = field(repr=False, compare=False)
    # "twenty twenty two" -> "2022"
    cast_number: bool = True
    # join typed words without spaces, for programming
    no_space: bool = True
    # type words that match nothing
    typing: bool = True
    mapping_ids: List[str] = field(default_factory=list)
    word_mapping: Dict[str, List[str]] = field(default_factory=dict, repr=False)

    mapping_tree: WordTree[Replace] = field(init=False, repr=False)
    exec_tree: FallbackWordTree[ExecutorFactory] = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self.mapping_tree = WordTree()
        self.exec_tree = FallbackWordTree()
        if self.typing:
            self.exec_tree.set_fallback(TypingFactory(no_space=self.no_space))

        for map_id in self.mapping_ids:
            lines = self.word_mapping.get(map_id)
            if lines is None:
                raise MappingError(f"mapping id not exist in word_mapping: {map_id}")
            for line in lines:
                self._add_line(line)

        for tag, fn in CASE_DECORATORS.items():
            self.exec_tree.set([tag], WordDecoratorFactory(tag, fn))
        self.exec_tree.set([TAG_REPEAT], RepeatFactory(lambda: self.ctx.last_speech))

    def _add_line(self, line: str) -> None:
        lefts, rights = split_arrow_line(line)
        if not lefts or not rights:
            raise MappingError(f"wrong format: {line}")

        tag, args = rights[0], rights[1:]
        if tag == "[shell]":
            if not args:
                raise MappingError(f"wrong '[shell]', missing command: {line}")
            self.exec_tree.set(lefts, ShellFactory(tuple(args)))
        elif tag == "[hotkey]":
            if args:
                self.exec_tree.set(lefts, HotkeyFixFactory(tuple(args)))
            else:
                self.exec_tree.set(lefts, HotkeyDynFactory())
        elif tag == "[delay]":
            if not args:
                self.exec_tree.set(lefts, DelayDynFactory())
            elif len(args) == 1:
                try:
                    seconds = parse_duration(args[0])
                except ValueError as e:
                    raise MappingError(f"wrong '[delay]' duration: {line}") from e
                self.exec_tree.set(lefts, DelayFixFactory(seconds))
            else:
                raise MappingError(f"wrong '[delay]': {line}")
        else:
            self.mapping_tree.set(lefts, Replace(tuple(rights)))

    def compile(self, text: str) -> List[Executor]:
        words = self.mapped(text)

        # [repeat] itself must not become the thing to repeat
        if TAG_REPEAT not in words:
            self.ctx.last_speech = text

        executors: List[Executor] = []
        i = 0
        while i < len(words):
            cost, factory, matched = self.exec_tree.scan(words[i:])
            if not matched or factory is None:
                i += 1
                continue
            i += cost

            try:
                used, ex = factory.parse(words[i:])
            except ExecutorParseError as e:
                logger.warning("speech %r: %s", text, e)
                continue

            # group typed words so one decorator can act on the phrase,
            # "[camel] hello world" -> "helloWorld"
            prev = executors[-1] if executors else None
            if (
                isinstance(prev, Typing) and not prev.is_space()
                and isinstance(ex, Typing) and not ex.is_space()
            ):
                prev.group(ex)
                i += 1
                continue

            i += used
            executors.append(ex)
        return executors

    def do(self, inp: Input) -> None:
        if inp.type != InputType.SPEECH or inp.speech is None:
            return
        logger.info("💬 %s", inp.speech.text)
        executors = self.compile(inp.speech.text)
        self.ctx.run_speech(run_executors, self.ctx, executors)

    def mapped(self, text: str) -> List[str]:
        """Token stream after number casting and word mapping, for debugging configs."""
        words: List[str] = text.split()
        if self.cast_number:
            words = replace_numbers(words)
        return map_words(self.mapping_tree, words)

