from __future__ import annotations

from dataclasses import dataclass

from joytyping.core.types import ButtonId, Input, InputType, SpinDirection, StickSide


class Condition:
    """Pure predicate over an Input."""

    def satisfy(self, inp: Input) -> bool:
        raise NotImplementedError


@dataclass(frozen=True)
class ButtonCondition(Condition):
    button: ButtonId
    # True reacts to the press, False to the release
    when_down: bool = True

    def satisfy(self, inp: Input) -> bool:
        if inp.type != InputType.BUTTON or inp.button is None:
            return False
        mask = inp.button.down if self.when_down else inp.button.up
        return mask.has(self.button)


@dataclass(frozen=True)
class StickMoveCondition(Condition):
    """Any stick movement on `side` that crossed no edge."""
    side: StickSide

    def satisfy(self, inp: Input) -> bool:
        return (
            inp.type == InputType.STICK
            and inp.stick is not None
            and inp.stick.side == self.side
            and inp.stick.direction == SpinDirection.NONE
        )


@dataclass(frozen=True)
class StickDirectionCondition(Condition):
    side: StickSide
    direction: SpinDirection

    def satisfy(self, inp: Input) -> bool:
        return (
            inp.type == InputType.STICK
            and inp.stick is not None
            and inp.stick.side == self.side
            and inp.stick.direction == self.direction
        )


@dataclass(frozen=True)
class SpeechCondition(Condition):
    def satisfy(self, inp: Input) -> bool:
        return inp.type == InputType.SPEECH and inp.speech is not None and len(inp.speech.text) > 0


@dataclass(frozen=True)
class GyroCondition(Condition):
    def satisfy(self, inp: Input) -> bool:
        return inp.type == InputType.GYRO
