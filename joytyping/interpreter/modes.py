"""
Modes.

A mode does nothing by itself. It holds the switches (each optionally
bound to a modifier) and the triggers, and passes every input to them.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Callable, List, Optional, Protocol, Tuple

from joytyping.core.types import Input, speech_input
from joytyping.interpreter.modifiers import Modifier
from joytyping.interpreter.switches import Switch, Trigger

if TYPE_CHECKING:
    from joytyping.interpreter.context import EngineContext

logger = logging.getLogger(__name__)

DEFAULT_SPEECH_HOST = "localhost:2701"


class RecognitionEngine(Protocol):
    """Speech recognizer connection, e.g. a vosk websocket server."""

    def dial(self, host: str) -> None: ...
    def close(self) -> None: ...
    def set_callback(self, cb: Callable[[str], None]) -> None: ...
    def is_alive(self) -> bool: ...
    def send_binary(self, data: bytes) -> None: ...
    def set_phrase_list(self, words: List[str]) -> None: ...
    def flush(self) -> None: ...


@dataclass
class Mode:
    id: str
    # order matters: a modifier applied here is seen by the triggers below
    switches: List[Tuple[Switch, Optional[Modifier]]] = field(default_factory=list)
    triggers: List[Trigger] = field(default_factory=list)

    def on_enter(self, inp: Optional[Input]) -> None:
        for sw, mod in self.switches:
            sw.reset()
            if mod is not None:
                mod.reset()

    def on_exit(self, inp: Optional[Input]) -> None:
        pass

    def handle(self, inp: Input) -> None:
        for sw, mod in self.switches:
            # some switches run actions on change, some only latch state
            sw.handle(inp)
            if sw.is_on and mod is not None:
                mod.modify(inp)

        for trig in self.triggers:
            trig.handle(inp)


@dataclass
class IdleMode(Mode):
    """Does nothing on its own; the usual default mode."""


@dataclass
class GyroMode(Mode):
    """Streams gyro frames from the controller only while active."""
    ctx: Optional["EngineContext"] = field(default=None, repr=False, compare=False)

    def _enable_gyro(self, inp: Optional[Input], on: bool) -> None:
        if inp is None or inp.device is None or self.ctx is None:
            return
        self.ctx.submit(inp.device.enable_gyro, on)

    def on_enter(self, inp: Optional[Input]) -> None:
        self._enable_gyro(inp, True)
        super().on_enter(inp)

    def on_exit(self, inp: Optional[Input]) -> None:
        self._enable_gyro(inp, False)
        super().on_exit(inp)


@dataclass
class SpeechMode(Mode):
    """
    Routes recognizer results into the manager while active.

    Audio reaches the engine through `feed_audio`, which drops data while
    the mode is paused, so one shared microphone can serve several speech
    modes with different phrase lists.
    """
    ctx: Optional["EngineContext"] = field(default=None, repr=False, compare=False)
    engine: Optional[RecognitionEngine] = field(default=None, repr=False, compare=False)
    host: str = DEFAULT_SPEECH_HOST
    phrase_list: List[str] = field(default_factory=list)
    # works well with a short phrase list, poorly with the full vocabulary
    flush_on_exit: bool = False
    paused: bool = True

    def _report(self, what: str, e: Exception) -> None:
        logger.error("speech mode %s: %s: %s", self.id, what, e)
        if self.ctx is not None:
            self.ctx.submit(self.ctx.notifier.alert, f"speech mode {self.id}", f"{what}: {e}")

    def _on_result(self, text: str) -> None:
        if text and self.ctx is not None:
            self.ctx.submit(self.ctx.manager.handle, speech_input(text))

    def _background(self, fn: Callable[[], None]) -> None:
        # enter/exit run under the manager lock; recognizer I/O must not
        if self.ctx is not None:
            self.ctx.submit(fn)
        else:
            fn()

    def connect(self) -> None:
        """Dial the recognizer if the link is down, then push this mode's phrase list."""
        if self.engine is None:
            return
        try:
            if not self.engine.is_alive():
                self.engine.close()
                self.engine.set_callback(self._on_result)
                self.engine.dial(self.host)
            self.engine.set_phrase_list(self.phrase_list)
        except Exception as e:
            self._report("failed to connect recognizer", e)

    def on_enter(self, inp: Optional[Input]) -> None:
        if self.engine is not None:
            self._background(self.connect)
        self.paused = False
        super().on_enter(inp)

    def on_exit(self, inp: Optional[Input]) -> None:
        if self.flush_on_exit and self.engine is not None:
            self._background(self.flush)
        self.paused = True
        super().on_exit(inp)

    def feed_audio(self, data: bytes) -> None:
        if self.paused or self.engine is None:
            return
        try:
            self.engine.send_binary(data)
        except Exception as e:
            self._report("failed to send audio", e)

    def flush(self) -> None:
        if self.engine is None:
            return
        try:
            self.engine.flush()
        except Exception as e:
            self._report("failed to flush recognizer", e)
