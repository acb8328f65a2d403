from __future__ import annotations

from dataclasses import dataclass, field
from threading import Lock

from evdev import UInput, ecodes as e

BUTTON_CODES = {
    "left": e.BTN_LEFT,
    "center": e.BTN_MIDDLE,
    "right": e.BTN_RIGHT,
}

# one wheel tick each
WHEEL_TICKS = {
    "wheelUp": (e.REL_WHEEL, 1),
    "wheelDown": (e.REL_WHEEL, -1),
    "wheelLeft": (e.REL_HWHEEL, -1),
    "wheelRight": (e.REL_HWHEEL, 1),
}


@dataclass
class UInputMouse:
    """
    Pointer injector using Linux uinput.
    Every call holds `lock`; two writers at once confuse the device.
    """
    ui: UInput
    lock: Lock = field(default_factory=Lock)

    @classmethod
    def create(cls) -> "UInputMouse":
        caps = {
            e.EV_KEY: list(BUTTON_CODES.values()),
            e.EV_REL: [e.REL_X, e.REL_Y, e.REL_WHEEL, e.REL_HWHEEL],
        }
        ui = UInput(caps, name="joytyping Virtual Mouse")
        return cls(ui=ui)

    def move(self, dx: int, dy: int) -> None:
        with self.lock:
            if dx:
                self.ui.write(e.EV_REL, e.REL_X, int(dx))
            if dy:
                self.ui.write(e.EV_REL, e.REL_Y, int(dy))
            self.ui.syn()

    def _button(self, button: str, down: bool) -> None:
        code = BUTTON_CODES.get(button)
        if code is None:
            raise ValueError(f"unknown mouse button: {button}")
        self.ui.write(e.EV_KEY, code, 1 if down else 0)
        self.ui.syn()

    def click(self, button: str = "left", double: bool = False) -> None:
        with self.lock:
            for _ in range(2 if double else 1):
                wheel = WHEEL_TICKS.get(button)
                if wheel is not None:
                    axis, value = wheel
                    self.ui.write(e.EV_REL, axis, value)
                    self.ui.syn()
                    continue
                self._button(button, True)
                self._button(button, False)

    def toggle(self, button: str, down: bool) -> None:
        with self.lock:
            self._button(button, down)

    def release_all(self) -> None:
        # drop everything, held or not, so nothing stays stuck after OFF
        with self.lock:
            for button in BUTTON_CODES:
                self._button(button, False)

    def close(self) -> None:
        with self.lock:
            self.ui.close()


class NullMouse:
    """Stand-in when /dev/uinput is not writable; pointer rules become no-ops."""

    def move(self, dx: int, dy: int) -> None:
        pass

    def click(self, button: str = "left", double: bool = False) -> None:
        pass

    def toggle(self, button: str, down: bool) -> None:
        pass

    def release_all(self) -> None:
        pass

    def close(self) -> None:
        pass
