import pytest

from joytyping.core.config import Config, ModeConfig
from joytyping.core.types import StickSide
from joytyping.interpreter.context import EngineContext


class FakeMouse:
    def __init__(self):
        self.calls = []

    def move(self, dx, dy):
        self.calls.append(("move", dx, dy))

    def click(self, button, double):
        self.calls.append(("click", button, double))

    def toggle(self, button, down):
        self.calls.append(("toggle", button, down))

    def release_all(self):
        self.calls.append(("release_all",))

    def close(self):
        pass


class FakeKeyboard:
    def __init__(self):
        self.typed = []
        self.taps = []

    def type_text(self, text):
        self.typed.append(text)

    def tap(self, keys):
        self.taps.append(list(keys))


class FakeNotifier:
    def __init__(self):
        self.notes = []
        self.alerts = []

    def notify(self, title, text, icon=""):
        self.notes.append((title, text))

    def alert(self, title, text):
        self.alerts.append((title, text))


class DeferredPool:
    """Queues submitted work; drain() runs it on the calling thread."""

    def __init__(self):
        self.queue = []

    def submit(self, fn, *args):
        self.queue.append((fn, args))

    def drain(self):
        # work may queue more work, e.g. [speak] re-dispatching speech
        while self.queue:
            fn, args = self.queue.pop(0)
            fn(*args)


class FakeDevice:
    def __init__(self):
        self.gyro = []
        self.disconnected = False

    def mac(self):
        return "70:48:f7:76:bc:87"

    def side(self):
        return StickSide.RIGHT

    def enable_gyro(self, on):
        self.gyro.append(on)

    def disconnect(self):
        self.disconnected = True


@pytest.fixture
def ctx():
    return EngineContext(
        mouse=FakeMouse(),
        keyboard=FakeKeyboard(),
        notifier=FakeNotifier(),
        pool=DeferredPool(),
        speech_worker=DeferredPool(),
    )


@pytest.fixture
def device():
    return FakeDevice()


@pytest.fixture
def settle(ctx):
    """Run everything queued on both pools until nothing is left."""
    def _settle():
        while ctx.pool.queue or ctx.speech_worker.queue:
            ctx.pool.drain()
            ctx.speech_worker.drain()
    return _settle


@pytest.fixture
def make_config():
    def _make(*blocks, phrase_list=None, word_mapping=None):
        return Config(
            modes=[ModeConfig(mode=m, rules=list(rules)) for m, rules in blocks],
            phrase_list=phrase_list or {},
            word_mapping=word_mapping or {},
        )
    return _make
