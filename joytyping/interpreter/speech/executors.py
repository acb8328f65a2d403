"""
Speech executors.

An executor is one compiled side effect (type text, tap a hotkey, run a
shell command, sleep, repeat the last speech, change the case of the next
typed words). A factory sits on a WordTree leaf and builds its executor from
the words that follow the matched phrase.
"""

from __future__ import annotations

import logging
import re
import subprocess
import time
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Callable, List, Sequence, Tuple

from joytyping.core.types import speech_input
from joytyping.injector import keys as keynames
from joytyping.interpreter.speech.numbers import number_until

if TYPE_CHECKING:
    from joytyping.interpreter.context import EngineContext

logger = logging.getLogger(__name__)

TAG_REPEAT = "[repeat]"
TAG_CAMEL = "[camel]"
TAG_TITLE = "[title]"
TAG_UPPER = "[upper]"
TAG_SNAKE = "[snake]"


class ExecutorParseError(ValueError):
    """A dynamic factory could not build its executor from the following words."""


class Executor:
    def run(self, ctx: "EngineContext") -> None:
        raise NotImplementedError


class ExecutorFactory:
    def parse(self, words: Sequence[str]) -> Tuple[int, Executor]:
        """Return (words consumed after the matched phrase, executor)."""
        raise NotImplementedError


# ============================================================
# Case decorators
# ============================================================

_WORD_SPLIT = re.compile(r"[\s_\-.]+")
_CASE_BOUNDARY = re.compile(r"(?<=[a-z0-9])(?=[A-Z])")


def _split_words(words: List[str]) -> List[str]:
    parts: List[str] = []
    for chunk in _WORD_SPLIT.split(" ".join(words)):
        parts.extend(p for p in _CASE_BOUNDARY.split(chunk) if p)
    return parts


def to_camel(words: List[str]) -> List[str]:
    parts = _split_words(words)
    if not parts:
        return [""]
    head = parts[0][:1].lower() + parts[0][1:]
    return [head + "".join(p[:1].upper() + p[1:] for p in parts[1:])]


def to_snake(words: List[str]) -> List[str]:
    return ["_".join(p.lower() for p in _split_words(words))]


def to_upper(words: List[str]) -> List[str]:
    return [w.upper() for w in words]


def to_title(words: List[str]) -> List[str]:
    if not words:
        return words
    first = " ".join(w[:1].upper() + w[1:] for w in words[0].split(" "))
    return [first] + words[1:]


@dataclass(frozen=True)
class WordDecorator(Executor):
    """Changes the case of the next Typing executor; never runs on its own."""
    name: str
    fn: Callable[[List[str]], List[str]] = field(compare=False)

    def apply(self, words: List[str]) -> List[str]:
        return self.fn(words)

    def run(self, ctx: "EngineContext") -> None:
        pass


@dataclass(frozen=True)
class WordDecoratorFactory(ExecutorFactory):
    name: str
    fn: Callable[[List[str]], List[str]] = field(compare=False)

    def parse(self, words: Sequence[str]) -> Tuple[int, Executor]:
        return 0, WordDecorator(self.name, self.fn)


CASE_DECORATORS = {
    TAG_CAMEL: to_camel,
    TAG_UPPER: to_upper,
    TAG_SNAKE: to_snake,
    TAG_TITLE: to_title,
}


# ============================================================
# Typing
# ============================================================

@dataclass
class Typing(Executor):
    """Types words literally; the fallback for anything not configured."""
    words: List[str]
    no_space: bool = True
    decorators: List[WordDecorator] = field(default_factory=list)

    def is_space(self) -> bool:
        return len(self.words) == 1 and self.words[0] == " "

    def group(self, other: "Typing") -> None:
        self.words.extend(other.words)

    def text(self) -> str:
        words = list(self.words)
        for dec in self.decorators:
            words = dec.apply(words)
        return ("" if self.no_space else " ").join(words)

    def run(self, ctx: "EngineContext") -> None:
        if not self.words:
            return
        s = self.text()
        if s:
            ctx.keyboard.type_text(s)


@dataclass(frozen=True)
class TypingFactory(ExecutorFactory):
    no_space: bool = True

    def parse(self, words: Sequence[str]) -> Tuple[int, Executor]:
        return 1, Typing(words=[words[0]], no_space=self.no_space)


# ============================================================
# Hotkey
# ============================================================

@dataclass(frozen=True)
class Hotkey(Executor):
    """keys[0] is tapped while keys[1:] are held, e.g. ("t", "ctrl", "alt")."""
    keys: Tuple[str, ...]

    def run(self, ctx: "EngineContext") -> None:
        if self.keys:
            ctx.keyboard.tap([keynames.normalize_key(k) for k in self.keys])


@dataclass(frozen=True)
class HotkeyFixFactory(ExecutorFactory):
    keys: Tuple[str, ...]

    def parse(self, words: Sequence[str]) -> Tuple[int, Executor]:
        return 0, Hotkey(self.keys)


@dataclass(frozen=True)
class HotkeyDynFactory(ExecutorFactory):
    """Spoken form: "hotkey control alt t", modifiers first, then one key."""

    def parse(self, words: Sequence[str]) -> Tuple[int, Executor]:
        modifiers: List[str] = []
        i = 0
        while i < len(words) and keynames.is_modifier(words[i]):
            modifiers.append(words[i])
            i += 1
        if i >= len(words):
            raise ExecutorParseError('"hotkey" needs a key, like: "hotkey control a"')
        key = words[i]
        if not keynames.is_key_name(key):
            raise ExecutorParseError(f"unknown hotkey: {key}")
        return i + 1, Hotkey(tuple([key] + modifiers))


# ============================================================
# Delay
# ============================================================

_DURATION_PART = re.compile(r"(\d+(?:\.\d*)?|\.\d+)(ns|us|µs|ms|s|m|h)")
_DURATION_UNITS = {
    "ns": 1e-9,
    "us": 1e-6,
    "µs": 1e-6,
    "ms": 1e-3,
    "s": 1.0,
    "m": 60.0,
    "h": 3600.0,
}


def parse_duration(s: str) -> float:
    """Parse "1s", "500ms", "1m30s" into seconds."""
    pos = 0
    total = 0.0
    while pos < len(s):
        m = _DURATION_PART.match(s, pos)
        if m is None:
            raise ValueError(f"invalid duration: {s!r}")
        total += float(m.group(1)) * _DURATION_UNITS[m.group(2)]
        pos = m.end()
    if pos == 0:
        raise ValueError(f"invalid duration: {s!r}")
    return total


@dataclass(frozen=True)
class Delay(Executor):
    seconds: float

    def run(self, ctx: "EngineContext") -> None:
        time.sleep(self.seconds)


@dataclass(frozen=True)
class DelayFixFactory(ExecutorFactory):
    seconds: float

    def parse(self, words: Sequence[str]) -> Tuple[int, Executor]:
        return 0, Delay(self.seconds)


_DELAY_UNITS = {
    "second": 1.0,
    "seconds": 1.0,
    "millisecond": 1e-3,
    "milliseconds": 1e-3,
}


@dataclass(frozen=True)
class DelayDynFactory(ExecutorFactory):
    """Spoken form: "delay three seconds" or "delay 500 milliseconds"."""

    def parse(self, words: Sequence[str]) -> Tuple[int, Executor]:
        if not words:
            raise ExecutorParseError('"delay" needs a number and a unit, like: "delay three seconds"')
        if words[0].isdecimal():
            number, cost = int(words[0]), 1
        else:
            number, cost, ok = number_until(words)
            if not ok:
                raise ExecutorParseError(f"not a number: {words[0]}")
        if cost >= len(words):
            raise ExecutorParseError('"delay" is missing its unit: second|millisecond')
        unit = _DELAY_UNITS.get(words[cost].lower())
        if unit is None:
            raise ExecutorParseError(f"unknown delay unit: {words[cost]}")
        return cost + 1, Delay(number * unit)


# ============================================================
# Shell
# ============================================================

@dataclass(frozen=True)
class Shell(Executor):
    cmd: Tuple[str, ...]

    def run(self, ctx: "EngineContext") -> None:
        try:
            proc = subprocess.run(list(self.cmd), capture_output=True)
        except OSError as e:
            logger.error("shell %s failed: %s", self.cmd, e)
            ctx.notifier.alert("shell failed", f"{' '.join(self.cmd)}: {e}")
            return
        if proc.returncode != 0:
            out = (proc.stderr or proc.stdout or b"").decode(errors="replace").strip()
            logger.warning("shell %s exited with %d: %s", self.cmd, proc.returncode, out)
            ctx.notifier.alert("shell failed", f"{' '.join(self.cmd)} exited with {proc.returncode}")


@dataclass(frozen=True)
class ShellFactory(ExecutorFactory):
    cmd: Tuple[str, ...]

    def parse(self, words: Sequence[str]) -> Tuple[int, Executor]:
        return 0, Shell(self.cmd)


# ============================================================
# Replace (mapping tree leaf) and Repeat
# ============================================================

@dataclass(frozen=True)
class Replace:
    to: Tuple[str, ...]

    def apply(self, out: List[str]) -> None:
        out.extend(self.to)


@dataclass(frozen=True)
class Repeat(Executor):
    """Re-dispatches `text`, the utterance heard before the one that said "repeat"."""
    text: str = ""

    def run(self, ctx: "EngineContext") -> None:
        if self.text:
            ctx.submit(ctx.manager.handle, speech_input(self.text))


@dataclass(frozen=True)
class RepeatFactory(ExecutorFactory):
    # read at compile time; the executors run later on the speech worker
    last_speech: Callable[[], str] = field(compare=False)

    def parse(self, words: Sequence[str]) -> Tuple[int, Executor]:
        return 0, Repeat(self.last_speech())


def run_executors(ctx: "EngineContext", executors: Sequence[Executor]) -> None:
    """Run compiled executors in order; decorators wait for the next Typing."""
    pending: List[WordDecorator] = []
    for ex in executors:
        if isinstance(ex, WordDecorator):
            pending.append(ex)
        elif isinstance(ex, Typing):
            ex.decorators = pending
            pending = []
            ex.run(ctx)
        else:
            ex.run(ctx)
