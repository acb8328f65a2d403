from __future__ import annotations

import logging
from concurrent.futures import Future, ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional, Protocol

from joytyping.interpreter.mode_manager import ModeManager
from joytyping.interpreter.modes import RecognitionEngine

logger = logging.getLogger(__name__)


class Pointer(Protocol):
    def move(self, dx: int, dy: int) -> None: ...
    def click(self, button: str, double: bool) -> None: ...
    def toggle(self, button: str, down: bool) -> None: ...
    def release_all(self) -> None: ...


class Keyboard(Protocol):
    def type_text(self, text: str) -> None: ...
    def tap(self, keys: List[str]) -> None: ...


class Notifier(Protocol):
    def notify(self, title: str, text: str, icon: str = "") -> None: ...
    def alert(self, title: str, text: str) -> None: ...


class Pool(Protocol):
    def submit(self, fn: Callable[..., Any], *args: Any) -> Any: ...


def _log_failure(fut: Future) -> None:
    e = fut.exception()
    if e is not None:
        logger.error("background task failed: %r", e)


@dataclass
class EngineContext:
    """
    Everything dispatch needs, owned by one instance for the process lifetime.

    `pool` takes fire-and-forget work. `speech_worker` runs the compiled
    executors of each utterance; with one worker, utterances are typed in
    the order they were recognized.
    """
    mouse: Pointer
    keyboard: Keyboard
    notifier: Notifier
    pool: Pool = field(default_factory=lambda: ThreadPoolExecutor(max_workers=4, thread_name_prefix="joytyping"))
    speech_worker: Pool = field(
        default_factory=lambda: ThreadPoolExecutor(max_workers=1, thread_name_prefix="joytyping-speech")
    )
    # engine name -> factory, filled by the runtime
    speech_engines: Dict[str, Callable[[], RecognitionEngine]] = field(default_factory=dict)
    last_speech: str = ""
    manager: ModeManager = field(init=False)

    def __post_init__(self) -> None:
        self.manager = ModeManager()

    def submit(self, fn: Callable[..., Any], *args: Any) -> None:
        fut = self.pool.submit(fn, *args)
        if isinstance(fut, Future):
            fut.add_done_callback(_log_failure)

    def run_speech(self, fn: Callable[..., Any], *args: Any) -> None:
        fut = self.speech_worker.submit(fn, *args)
        if isinstance(fut, Future):
            fut.add_done_callback(_log_failure)

    def new_speech_engine(self, name: str) -> Optional[RecognitionEngine]:
        factory = self.speech_engines.get(name)
        return factory() if factory is not None else None

    def shutdown(self) -> None:
        for p in (self.pool, self.speech_worker):
            if isinstance(p, ThreadPoolExecutor):
                p.shutdown(wait=False)
