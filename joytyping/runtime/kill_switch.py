from __future__ import annotations

import logging
from dataclasses import dataclass, field
from threading import Lock

from joytyping.core.control import ControlState
from joytyping.core.types import Input
from joytyping.interpreter.context import Pointer
from joytyping.interpreter.mode_manager import ModeManager

logger = logging.getLogger(__name__)


@dataclass
class KillSwitch:
    """
    Central safety gate.
    If ControlState is OFF, we:
      - drop every input before it reaches the modes
      - release pointer buttons held by [mouse_toggle]
    """
    state: ControlState
    manager: ModeManager
    mouse: Pointer

    _last_enabled: bool = True
    _lock: Lock = field(default_factory=Lock)

    def guard(self) -> bool:
        """Apply an ON/OFF transition if one happened; return whether input may pass."""
        enabled = self.state.is_enabled()
        with self._lock:
            if enabled == self._last_enabled:
                return enabled
            self._last_enabled = enabled

        if not enabled:
            # Transition -> OFF: make absolutely sure nothing is stuck down
            logger.info("OFF, releasing pointer buttons")
            self.mouse.release_all()
        else:
            logger.info("ON")
        return enabled

    def dispatch(self, inp: Input) -> None:
        if not self.guard():
            return
        self.manager.handle(inp)
