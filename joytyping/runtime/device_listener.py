from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Callable, Optional

from joytyping.core.config import Settings
from joytyping.core.types import (
    ButtonInput,
    ButtonState,
    Controller,
    GyroFrame,
    GyroInput,
    REVERSE_DIRECTION,
    Input,
    InputType,
    Ratio,
    SpinDirection,
    StickInput,
    StickSide,
)
from joytyping.interpreter.context import Notifier

logger = logging.getLogger(__name__)

EDGES = (SpinDirection.UP, SpinDirection.RIGHT, SpinDirection.DOWN, SpinDirection.LEFT)


def render_battery(level: int, charging: bool) -> str:
    return f"🔋{level}, ⚡ Charging" if charging else f"🔋{level}"


@dataclass
class ControllerListener:
    """
    Receives decoded controller reports and turns them into Inputs.

    Every stick report gives a movement input; crossing an edge or the
    neutral zone gives one more input carrying that direction.
    """
    dispatch: Callable[[Input], None]
    notifier: Notifier
    settings: Settings = Settings()

    def _edge_direction(self, curr: Ratio, prev: Ratio) -> SpinDirection:
        th = self.settings.spin_edge_threshold
        for d in EDGES:
            was, now = prev.at_edge(d, th), curr.at_edge(d, th)
            if now and not was:
                return d
            if was and not now:
                return REVERSE_DIRECTION[d]

        nth = self.settings.spin_neutral_threshold
        was, now = prev.at_neutral(nth), curr.at_neutral(nth)
        if now and not was:
            return SpinDirection.NEUTRAL
        if was and not now:
            return SpinDirection.NEUTRAL_LEAVE
        return SpinDirection.NONE

    def on_button(self, device: Optional[Controller], down: ButtonState, up: ButtonState, curr: ButtonState) -> None:
        logger.debug("button down=%s up=%s", down.raw, up.raw)
        self.dispatch(Input(
            type=InputType.BUTTON,
            device=device,
            button=ButtonInput(down=down, up=up, curr=curr),
        ))

    def on_stick(self, device: Optional[Controller], side: StickSide, curr: Ratio, prev: Ratio) -> None:
        logger.debug("stick %s x=%.3f y=%.3f", side.value, curr.x, curr.y)
        self.dispatch(Input(
            type=InputType.STICK,
            device=device,
            stick=StickInput(side=side, ratio=curr.copy()),
        ))

        d = self._edge_direction(curr, prev)
        if d is not SpinDirection.NONE:
            self.dispatch(Input(
                type=InputType.STICK,
                device=device,
                stick=StickInput(side=side, ratio=curr.copy(), direction=d),
            ))

    def on_gyro(self, device: Optional[Controller], frame: GyroFrame) -> None:
        logger.debug("gyro %s", frame)
        self.dispatch(Input(type=InputType.GYRO, device=device, gyro=GyroInput(frame=frame)))

    def on_battery(self, device: Controller, level: int, charging: bool) -> None:
        name = device.side().value
        batt = render_battery(level, charging)
        logger.info("battery: %s %s", name, batt)
        self.notifier.notify(name, batt)

    def on_stick_calibrated(self, device: Controller, data: Any) -> None:
        name = device.side().value
        logger.info("🔧 <%s> calibrated: %s", name, data)
        self.notifier.notify("🔧 Calibrated", name)

    def on_read_write_error(self, device: Controller, error: Exception) -> None:
        name = device.side().value
        logger.error("%s (%s): %s", name, device.mac(), error)
        self.notifier.notify("R/W error", name)
        # the link is broken; drop it so the collaborator can reconnect
        device.disconnect()
