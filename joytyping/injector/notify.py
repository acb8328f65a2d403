from __future__ import annotations

import logging
from dataclasses import dataclass

from plyer import notification

logger = logging.getLogger(__name__)


@dataclass
class PlyerNotifier:
    """Desktop notifications. Failures are logged; a missing popup never stops dispatch."""
    app_name: str = "joytyping"
    timeout: int = 6

    def notify(self, title: str, text: str, icon: str = "") -> None:
        try:
            notification.notify(
                title=title,
                message=text,
                app_name=self.app_name,
                app_icon=icon,
                timeout=self.timeout,
            )
        except Exception as e:
            logger.warning("notification %r failed: %s", title, e)

    def alert(self, title: str, text: str) -> None:
        logger.warning("%s: %s", title, text)
        self.notify(f"[{self.app_name}] {title}", text)
