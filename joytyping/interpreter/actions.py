"""
Actions bound to triggers.

Dispatch runs under the manager lock, so anything that touches the OS
(pointer moves, notifications, re-dispatching speech) is handed to the
context's worker pool instead of running inline.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Tuple

from joytyping.core.types import Input, InputType, speech_input
from joytyping.interpreter.mode_manager import ModeError
from joytyping.interpreter.modes import SpeechMode
from joytyping.interpreter.speech.executors import Hotkey

if TYPE_CHECKING:
    from joytyping.interpreter.context import EngineContext

logger = logging.getLogger(__name__)

# accepted by [click] and [mouse_toggle]
MOUSE_BUTTONS = ("left", "center", "right", "wheelUp", "wheelDown", "wheelLeft", "wheelRight")


class Action:
    def do(self, inp: Input) -> None:
        raise NotImplementedError


@dataclass
class MoveCursor(Action):
    ctx: "EngineContext" = field(repr=False, compare=False)
    speed: float = 0.01

    def do(self, inp: Input) -> None:
        if inp.type == InputType.STICK and inp.stick is not None:
            # stick y grows upward, screen y grows downward
            dx = int(inp.stick.ratio.x * self.speed)
            dy = int(-inp.stick.ratio.y * self.speed)
        elif inp.type == InputType.GYRO and inp.gyro is not None:
            dx = int(inp.gyro.frame.yaw * self.speed)
            dy = int(-inp.gyro.frame.pitch * self.speed)
        else:
            return
        self.ctx.submit(self.ctx.mouse.move, dx, dy)


@dataclass
class MouseClick(Action):
    ctx: "EngineContext" = field(repr=False, compare=False)
    button: str = "left"
    double: bool = False

    def do(self, inp: Input) -> None:
        self.ctx.mouse.click(self.button, self.double)


@dataclass
class MouseToggle(Action):
    """Presses (down=True) or releases a pointer button, used for dragging."""
    ctx: "EngineContext" = field(repr=False, compare=False)
    button: str = "left"
    down: bool = True

    def do(self, inp: Input) -> None:
        self.ctx.submit(self.ctx.mouse.toggle, self.button, self.down)


@dataclass
class SwitchMode(Action):
    ctx: "EngineContext" = field(repr=False, compare=False)
    mode_id: str = ""

    def do(self, inp: Input) -> None:
        try:
            self.ctx.manager.switch_to(self.mode_id, inp)
        except ModeError as e:
            logger.error("failed to switch to mode %s: %s", self.mode_id, e)
            self.ctx.submit(self.ctx.notifier.alert, f"failed to switch to mode {self.mode_id}", str(e))


@dataclass
class RestoreMode(Action):
    ctx: "EngineContext" = field(repr=False, compare=False)

    def do(self, inp: Input) -> None:
        mgr = self.ctx.manager
        if mgr.default_mode is not None:
            mgr.switch_to(mgr.default_mode.id, inp)


@dataclass
class EnableGyro(Action):
    ctx: "EngineContext" = field(repr=False, compare=False)
    enable: bool = True

    def do(self, inp: Input) -> None:
        if inp.device is None:
            return
        self.ctx.submit(inp.device.enable_gyro, self.enable)


@dataclass
class SysNotify(Action):
    ctx: "EngineContext" = field(repr=False, compare=False)
    title: str = ""
    text: str = ""
    icon: str = ""

    def do(self, inp: Input) -> None:
        if inp.type == InputType.SPEECH and inp.speech is not None:
            # echoes what was heard, handy when tuning phrase lists
            self.ctx.submit(self.ctx.notifier.notify, "speech", inp.speech.text, self.icon)
        else:
            self.ctx.submit(self.ctx.notifier.notify, self.title, self.text, self.icon)


@dataclass
class FlushVoice(Action):
    """Makes the recognizer return its pending result without waiting for silence."""
    ctx: "EngineContext" = field(repr=False, compare=False)

    def do(self, inp: Input) -> None:
        mode = self.ctx.manager.current_mode
        if isinstance(mode, SpeechMode):
            self.ctx.submit(mode.flush)


@dataclass
class Speak(Action):
    """
    Feeds `text` back in as if it had been spoken. Lets a button run a
    macro made of word mappings, e.g. "c_o de" in vim.
    """
    ctx: "EngineContext" = field(repr=False, compare=False)
    text: str = ""

    def do(self, inp: Input) -> None:
        self.ctx.submit(self.ctx.manager.handle, speech_input(self.text))


@dataclass
class HotkeyAction(Action):
    ctx: "EngineContext" = field(repr=False, compare=False)
    keys: Tuple[str, ...] = ()

    def do(self, inp: Input) -> None:
        Hotkey(self.keys).run(self.ctx)


@dataclass
class RepeatSpeech(Action):
    ctx: "EngineContext" = field(repr=False, compare=False)

    def do(self, inp: Input) -> None:
        text = self.ctx.last_speech
        if text:
            self.ctx.submit(self.ctx.manager.handle, speech_input(text))
