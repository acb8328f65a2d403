"""
Triggers and switches.

A Trigger runs its action when its condition holds. A Switch latches on/off
state from a pair of triggers; the pair for a button is (down, up), for a stick
direction it is (enter, leave).
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Optional

from joytyping.core.types import REVERSE_DIRECTION, ButtonId, Input, SpinDirection, StickSide
from joytyping.interpreter.conditions import ButtonCondition, Condition, StickDirectionCondition

if TYPE_CHECKING:
    from joytyping.interpreter.actions import Action


class TriggerResult(Enum):
    TRIGGERED = "triggered"
    NOT_TRIGGERED = "not_triggered"


class SwitchResult(Enum):
    SWITCHED_ON = "on"
    SWITCHED_OFF = "off"
    NO_CHANGE = "no_change"


@dataclass
class Trigger:
    condition: Condition
    action: Optional["Action"] = None

    def handle(self, inp: Input) -> TriggerResult:
        if not self.condition.satisfy(inp):
            return TriggerResult.NOT_TRIGGERED
        if self.action is not None:
            self.action.do(inp)
        return TriggerResult.TRIGGERED


@dataclass
class Switch:
    on_trigger: Trigger
    off_trigger: Trigger
    is_on: bool = False

    def reset(self) -> None:
        self.is_on = False

    def handle(self, inp: Input) -> SwitchResult:
        if self.on_trigger.handle(inp) == TriggerResult.TRIGGERED:
            self.is_on = True
            return SwitchResult.SWITCHED_ON
        if self.off_trigger.handle(inp) == TriggerResult.TRIGGERED:
            self.is_on = False
            return SwitchResult.SWITCHED_OFF
        return SwitchResult.NO_CHANGE


def button_switch(button: ButtonId) -> Switch:
    return Switch(
        on_trigger=Trigger(ButtonCondition(button, when_down=True)),
        off_trigger=Trigger(ButtonCondition(button, when_down=False)),
    )


def stick_direction_switch(side: StickSide, direction: SpinDirection) -> Switch:
    # "Up" turns on, "UpLeave" turns off
    return Switch(
        on_trigger=Trigger(StickDirectionCondition(side, direction)),
        off_trigger=Trigger(StickDirectionCondition(side, REVERSE_DIRECTION[direction])),
    )
