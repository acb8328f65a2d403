from __future__ import annotations

import logging
import threading
from pathlib import Path
from typing import Callable, Optional

from joytyping.core.config import Config, load_config

logger = logging.getLogger(__name__)


def file_mtime(path: Path) -> Optional[float]:
    try:
        return path.stat().st_mtime
    except FileNotFoundError:
        return None


def watch_config(
    path: Path,
    on_change: Callable[[Config], None],
    stop_flag: threading.Event,
    interval: float = 1.0,
) -> None:
    """
    Poll `path` and call `on_change` with the reloaded config whenever its
    mtime changes. A config that fails to load or compile is logged and the
    running modes stay in place.
    """
    last = file_mtime(path)
    while not stop_flag.wait(interval):
        cur = file_mtime(path)
        if cur is None or cur == last:
            continue
        last = cur
        try:
            on_change(load_config(path))
        except Exception as e:
            logger.error("config reload failed, keeping the previous one: %s", e)
        else:
            logger.info("config reloaded: %s", path)


def start_config_watcher(
    path: Path,
    on_change: Callable[[Config], None],
    stop_flag: threading.Event,
    interval: float = 1.0,
) -> threading.Thread:
    t = threading.Thread(
        target=watch_config, args=(path, on_change, stop_flag, interval), daemon=True, name="config-watch"
    )
    t.start()
    return t
