from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Union

from pynput import keyboard

from joytyping.injector.keys import normalize_key


def _to_key(name: str) -> Union[keyboard.Key, str]:
    key = normalize_key(name)
    if len(key) == 1:
        return key
    return getattr(keyboard.Key, key)


@dataclass
class PynputKeyboard:
    """
    Keystroke injector. tap(["t", "ctrl", "alt"]) holds ctrl+alt and taps t.
    """
    ctl: keyboard.Controller = field(default_factory=keyboard.Controller)

    def type_text(self, text: str) -> None:
        self.ctl.type(text)

    def tap(self, keys: List[str]) -> None:
        if not keys:
            return
        main = _to_key(keys[0])
        mods = [_to_key(k) for k in keys[1:]]
        for m in mods:
            self.ctl.press(m)
        try:
            self.ctl.tap(main)
        finally:
            for m in reversed(mods):
                self.ctl.release(m)
