from __future__ import annotations

import logging
import sys
import threading
from pathlib import Path
from typing import Optional, TextIO

from joytyping.core.config import config_path, load_config
from joytyping.injector.keyboard import PynputKeyboard
from joytyping.injector.notify import PlyerNotifier
from joytyping.injector.uinput_mouse import NullMouse, UInputMouse
from joytyping.interpreter.context import EngineContext
from joytyping.interpreter.rules import CompileError
from joytyping.runtime.config_watch import start_config_watcher
from joytyping.runtime.engine import build_runtime

logger = logging.getLogger(__name__)


def _create_mouse():
    try:
        return UInputMouse.create()
    except Exception as e:
        # usually missing permission on /dev/uinput
        logger.error("pointer unavailable, cursor rules disabled: %s", e)
        return NullMouse()


def run(path: Optional[Path] = None, log_level: Optional[str] = None, source: TextIO = sys.stdin) -> int:
    path = path or config_path()
    cfg = load_config(path)

    level = (log_level or cfg.settings.log_level).upper()
    logging.basicConfig(level=level, format="%(asctime)s %(levelname)s %(name)s: %(message)s")

    mouse = _create_mouse()
    ctx = EngineContext(mouse=mouse, keyboard=PynputKeyboard(), notifier=PlyerNotifier())
    try:
        rt = build_runtime(ctx, cfg)
    except CompileError as e:
        print(f"[joytyping] config error in {path}: {e}")
        ctx.shutdown()
        mouse.close()
        return 1

    stop = threading.Event()
    start_config_watcher(path, rt.reload, stop)

    from joytyping.ui.hotkeys import run_hotkeys
    threading.Thread(target=run_hotkeys, args=(rt.state, stop), daemon=True).start()

    try:
        from joytyping.ui.tray import run_tray
    except Exception as e:
        print(f"[joytyping] Tray unavailable ({e}). Hotkeys only.")
    else:
        threading.Thread(target=run_tray, args=(rt.state, stop), daemon=True).start()

    print(f"[joytyping] running, config: {path}")
    print("  - Ctrl+Alt+Space toggles")
    print("  - Ctrl+Alt+Esc PANIC OFF")
    print("  - type a line to speak it, Ctrl+D to exit")

    # stdin blocks, so it gets its own thread; EOF or tray Quit sets `stop`
    threading.Thread(target=rt.read_speech, args=(source, stop), daemon=True).start()

    try:
        while not stop.wait(0.5):
            pass
    except KeyboardInterrupt:
        print("\n[joytyping] exiting")
    finally:
        stop.set()
        # always drop buttons on exit
        rt.state.set_enabled(False)
        rt.kill_switch.guard()
        ctx.shutdown()
        mouse.close()
    return 0
