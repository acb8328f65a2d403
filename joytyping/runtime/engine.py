from __future__ import annotations

import threading
from dataclasses import dataclass
from typing import Iterable

from joytyping.core.config import Config
from joytyping.core.control import ControlState
from joytyping.core.types import speech_input
from joytyping.interpreter.context import EngineContext
from joytyping.interpreter.rules import install
from joytyping.runtime.device_listener import ControllerListener
from joytyping.runtime.kill_switch import KillSwitch


@dataclass
class Runtime:
    """The wired engine. A controller driver feeds `listener`, speech sources call `dispatch_speech`."""
    ctx: EngineContext
    state: ControlState
    kill_switch: KillSwitch
    listener: ControllerListener

    def dispatch_speech(self, text: str) -> None:
        text = text.strip()
        if text:
            self.kill_switch.dispatch(speech_input(text))

    def read_speech(self, source: Iterable[str], stop: threading.Event) -> None:
        """Dispatch each line of `source` as speech; setting `stop` at EOF ends the app."""
        try:
            for line in source:
                if stop.is_set():
                    return
                self.dispatch_speech(line)
        finally:
            stop.set()

    def reload(self, cfg: Config) -> None:
        install(cfg, self.ctx)
        self.listener.settings = cfg.settings


def build_runtime(ctx: EngineContext, cfg: Config) -> Runtime:
    """Compile `cfg` into `ctx` and wire the gate and controller listener around it."""
    state = ControlState()
    ctx.manager.on_switch = state.set_mode_id
    install(cfg, ctx)
    ks = KillSwitch(state=state, manager=ctx.manager, mouse=ctx.mouse)
    listener = ControllerListener(dispatch=ks.dispatch, notifier=ctx.notifier, settings=cfg.settings)
    return Runtime(ctx=ctx, state=state, kill_switch=ks, listener=listener)
