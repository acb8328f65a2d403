from __future__ import annotations
from dataclasses import dataclass, field
from threading import Lock


@dataclass
class ControlState:
    """
    Shared control plane between the dispatcher, hotkeys and tray.
    enabled=False means joytyping is OFF (no input reaches the modes,
    held pointer buttons are released).
    """
    _enabled: bool = True
    _mode_id: str = ""
    _lock: Lock = field(default_factory=Lock)

    def is_enabled(self) -> bool:
        with self._lock:
            return self._enabled

    def set_enabled(self, value: bool) -> None:
        with self._lock:
            self._enabled = value

    def toggle(self) -> bool:
        with self._lock:
            self._enabled = not self._enabled
            return self._enabled

    def mode_id(self) -> str:
        with self._lock:
            return self._mode_id

    def set_mode_id(self, mode_id: str) -> None:
        with self._lock:
            self._mode_id = mode_id
