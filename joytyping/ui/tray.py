from __future__ import annotations

import threading
import zlib

import pystray
from PIL import Image, ImageDraw

from joytyping.core.control import ControlState

# badge colours, picked per mode id so each mode keeps its colour across runs
BADGE_COLORS = [
    (66, 165, 245),
    (102, 187, 106),
    (255, 167, 38),
    (171, 71, 188),
    (239, 83, 80),
    (38, 198, 218),
]


def badge_color(mode_id: str):
    return BADGE_COLORS[zlib.crc32(mode_id.encode("utf-8")) % len(BADGE_COLORS)]


def _make_icon(enabled: bool, mode_id: str) -> Image.Image:
    img = Image.new("RGBA", (64, 64), (0, 0, 0, 0))
    d = ImageDraw.Draw(img)

    alpha = 230 if enabled else 90
    # controller body with the right stick
    d.rounded_rectangle((6, 14, 58, 50), radius=12, outline=(255, 255, 255, alpha), width=3)
    d.ellipse((34, 22, 46, 34), fill=(255, 255, 255, alpha))

    if mode_id:
        r, g, b = badge_color(mode_id)
        d.ellipse((12, 30, 28, 46), fill=(r, g, b, alpha))
    if not enabled:
        d.line((10, 54, 54, 10), fill=(239, 83, 80, 255), width=4)
    return img


def tray_title(enabled: bool, mode_id: str) -> str:
    status = "ON" if enabled else "OFF"
    return f"joytyping ({status}, {mode_id})" if mode_id else f"joytyping ({status})"


def run_tray(state: ControlState, stop_flag: threading.Event) -> None:
    """Show ON/OFF and the active mode in the system tray until `stop_flag` is set."""
    icon = pystray.Icon("joytyping")
    shown = [None]

    def refresh():
        cur = (state.is_enabled(), state.mode_id())
        if cur == shown[0]:
            return
        shown[0] = cur
        icon.icon = _make_icon(*cur)
        icon.title = tray_title(*cur)
        icon.update_menu()

    def set_enabled(on: bool):
        def handler(_icon, _item):
            state.set_enabled(on)
            refresh()
        return handler

    def on_toggle(_icon, _item):
        state.toggle()
        refresh()

    def quit_(_icon, _item):
        stop_flag.set()
        icon.stop()

    icon.menu = pystray.Menu(
        pystray.MenuItem(lambda _item: f"Mode: {state.mode_id() or '-'}", None, enabled=False),
        pystray.MenuItem("Enabled", on_toggle, checked=lambda _item: state.is_enabled(), default=True),
        pystray.MenuItem("Turn ON", set_enabled(True)),
        pystray.MenuItem("Turn OFF", set_enabled(False)),
        pystray.Menu.SEPARATOR,
        pystray.MenuItem("Quit", quit_),
    )
    refresh()

    # hotkeys and mode switches change state behind the tray's back
    def poll():
        while not stop_flag.wait(0.2):
            refresh()

    threading.Thread(target=poll, daemon=True).start()
    try:
        icon.run()
    except Exception as e:
        # hotkeys and speech keep working without a tray
        print(f"[joytyping] Tray backend crashed: {e}")
