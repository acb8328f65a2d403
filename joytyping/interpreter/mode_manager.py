"""
joytyping — MODE MANAGER

Single serialization point for every input. Holds all modes by id, the
global mode switches (evaluated only while the default mode is active) and
the pending exit trigger recorded when a mode switch turned on.

Switching from the default mode by ZR-down records ZR-up as the exit
trigger; while the other mode is active only that trigger is checked for
leaving it.
"""

from __future__ import annotations

import logging
from threading import Lock
from typing import Callable, Dict, List, Optional

from joytyping.core.types import Input
from joytyping.interpreter.modes import Mode
from joytyping.interpreter.switches import Switch, SwitchResult, Trigger, TriggerResult

logger = logging.getLogger(__name__)


class ModeError(LookupError):
    """Raised when switching to a mode id that does not exist."""


class ModeManager:
    def __init__(self) -> None:
        self.lock = Lock()
        self.modes: Dict[str, Mode] = {}
        self.mode_switches: List[Switch] = []
        self.trig_exit: Optional[Trigger] = None
        self.default_mode: Optional[Mode] = None
        self.current_mode: Optional[Mode] = None
        # called with the new mode id after every switch (tray title)
        self.on_switch: Optional[Callable[[str], None]] = None

    def set_modes(self, modes: List[Mode], mode_switches: List[Switch]) -> None:
        """Install compiled modes; the first one becomes the default and is entered."""
        if not modes:
            raise ModeError("no mode configured")
        by_id: Dict[str, Mode] = {}
        for m in modes:
            if m.id in by_id:
                raise ModeError(f"duplicated mode id: {m.id}")
            by_id[m.id] = m

        with self.lock:
            if self.current_mode is not None:
                self.current_mode.on_exit(None)
                self.current_mode = None
            self.modes = by_id
            self.mode_switches = list(mode_switches)
            self.trig_exit = None
            self.default_mode = modes[0]
            self.switch_to(self.default_mode.id, None)

    def handle(self, inp: Input) -> None:
        with self.lock:
            if self.current_mode is None:
                return

            if self.current_mode is self.default_mode:
                for sw in self.mode_switches:
                    if sw.handle(inp) == SwitchResult.SWITCHED_ON:
                        # the switch's action already changed the mode
                        self.trig_exit = sw.off_trigger
                        return
            elif self.trig_exit is not None:
                if self.trig_exit.handle(inp) == TriggerResult.TRIGGERED:
                    self.trig_exit = None
                    return

            self.current_mode.handle(inp)

    def switch_to(self, mode_id: str, inp: Optional[Input]) -> None:
        """Leave the current mode and enter `mode_id`. The caller holds the lock."""
        m = self.modes.get(mode_id)
        if m is None:
            raise ModeError(f"mode '{mode_id}' not exists")

        if self.current_mode is not None:
            self.current_mode.on_exit(inp)
        prev = self.current_mode.id if self.current_mode is not None else None
        self.current_mode = m
        m.on_enter(inp)
        logger.info("mode %s -> %s", prev, m.id)
        if self.on_switch is not None:
            self.on_switch(m.id)

    def current_mode_id(self) -> str:
        with self.lock:
            return self.current_mode.id if self.current_mode is not None else ""
