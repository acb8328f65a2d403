"""
Key names accepted by [hotkey] rules and the spoken "hotkey ..." form.

Names follow pynput's Key members (`page_up`, `esc`, `f5`); a few spoken
aliases are folded in by `normalize_key`.
"""

from __future__ import annotations

MODIFIERS = {"ctrl", "shift", "alt", "cmd"}

ALIASES = {
    "control": "ctrl",
    "ctl": "ctrl",
    "option": "alt",
    "meta": "cmd",
    "super": "cmd",
    "win": "cmd",
    "command": "cmd",
    "escape": "esc",
    "return": "enter",
    "del": "delete",
    "pageup": "page_up",
    "pagedown": "page_down",
    "capslock": "caps_lock",
    "printscreen": "print_screen",
}

NAMED_KEYS = {
    "enter", "esc", "tab", "space", "backspace", "delete", "insert",
    "up", "down", "left", "right", "home", "end", "page_up", "page_down",
    "caps_lock", "num_lock", "scroll_lock", "print_screen", "pause", "menu",
    "media_play_pause", "media_next", "media_previous",
    "media_volume_up", "media_volume_down", "media_volume_mute",
} | {f"f{i}" for i in range(1, 21)}


def normalize_key(name: str) -> str:
    """Map a configured or spoken key name to pynput's name; single characters pass through."""
    if len(name) == 1:
        return name
    low = name.lower()
    return ALIASES.get(low, low)


def is_modifier(name: str) -> bool:
    return normalize_key(name) in MODIFIERS


def is_key_name(name: str) -> bool:
    key = normalize_key(name)
    return len(key) == 1 or key in NAMED_KEYS or key in MODIFIERS
