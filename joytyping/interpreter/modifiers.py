from __future__ import annotations

from dataclasses import dataclass

from joytyping.core.types import Input, InputType


class Modifier:
    """Mutates an Input in place while the owning switch is on."""

    def modify(self, inp: Input) -> None:
        raise NotImplementedError

    def reset(self) -> None:
        pass


@dataclass
class TextPrefix(Modifier):
    """
    Prepends a tag to speech text. The speech compiler reads tags like
    "[upper]" back as case decorators, so holding a button while speaking
    changes the case of what gets typed.
    """
    prefix: str
    space: bool = True

    def modify(self, inp: Input) -> None:
        if inp.type != InputType.SPEECH or inp.speech is None:
            return
        pre = self.prefix + " " if self.space else self.prefix
        inp.speech.text = pre + inp.speech.text


@dataclass
class CursorBoost(Modifier):
    """Speeds up (or slows down) the cursor for stick and gyro inputs."""
    multiplier: float

    def modify(self, inp: Input) -> None:
        if inp.type == InputType.STICK and inp.stick is not None:
            inp.stick.ratio.x *= self.multiplier
            inp.stick.ratio.y *= self.multiplier
        elif inp.type == InputType.GYRO and inp.gyro is not None:
            f = inp.gyro.frame
            f.x = int(f.x * self.multiplier)
            f.y = int(f.y * self.multiplier)
            f.z = int(f.z * self.multiplier)
            f.roll = int(f.roll * self.multiplier)
            f.pitch = int(f.pitch * self.multiplier)
            f.yaw = int(f.yaw * self.multiplier)
