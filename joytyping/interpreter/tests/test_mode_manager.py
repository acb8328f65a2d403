import pytest

from joytyping.core.types import ButtonId, ButtonInput, ButtonState, Input, InputType, speech_input
from joytyping.interpreter.actions import RestoreMode, SwitchMode
from joytyping.interpreter.conditions import ButtonCondition, SpeechCondition
from joytyping.interpreter.mode_manager import ModeError
from joytyping.interpreter.modes import GyroMode, IdleMode, Mode
from joytyping.interpreter.switches import Trigger, button_switch


def press(b, device=None):
    s = ButtonState.of(b)
    return Input(type=InputType.BUTTON, device=device, button=ButtonInput(down=s, up=ButtonState(), curr=s))


def release(b, device=None):
    s = ButtonState.of(b)
    return Input(type=InputType.BUTTON, device=device, button=ButtonInput(down=ButtonState(), up=s, curr=ButtonState()))


class Recorder:
    def __init__(self):
        self.seen = []

    def do(self, inp):
        self.seen.append(inp)


def mode_switch(ctx, button, mode_id):
    sw = button_switch(button)
    sw.on_trigger.action = SwitchMode(ctx, mode_id=mode_id)
    sw.off_trigger.action = RestoreMode(ctx)
    return sw


@pytest.fixture
def setup(ctx):
    """Default mode records X presses; ZR held switches to `word` which records speech."""
    default_rec, word_rec = Recorder(), Recorder()
    default = IdleMode("id1", triggers=[Trigger(ButtonCondition(ButtonId.X), default_rec)])
    word = Mode("word", triggers=[
        Trigger(SpeechCondition(), word_rec),
        Trigger(ButtonCondition(ButtonId.X), word_rec),
    ])
    ctx.manager.set_modes([default, word], [mode_switch(ctx, ButtonId.ZR, "word")])
    return ctx.manager, default_rec, word_rec


def test_first_mode_is_default_and_entered(setup):
    mgr, _, _ = setup
    assert mgr.current_mode_id() == "id1"
    assert mgr.default_mode is mgr.modes["id1"]


def test_hold_to_switch_and_release_to_restore(setup):
    mgr, default_rec, word_rec = setup

    mgr.handle(press(ButtonId.ZR))
    assert mgr.current_mode_id() == "word"
    assert mgr.trig_exit is not None

    mgr.handle(speech_input("hello"))
    assert [i.speech.text for i in word_rec.seen] == ["hello"]

    mgr.handle(release(ButtonId.ZR))
    assert mgr.current_mode_id() == "id1"
    assert mgr.trig_exit is None
    # the switching inputs never reach a mode
    assert default_rec.seen == []


def test_mode_switches_ignored_outside_default(ctx, setup):
    mgr, default_rec, word_rec = setup
    other = mode_switch(ctx, ButtonId.R, "id1")
    mgr.mode_switches.append(other)

    mgr.handle(press(ButtonId.ZR))
    # R is only a mode switch in the default mode, here it does nothing
    mgr.handle(press(ButtonId.R))
    assert mgr.current_mode_id() == "word"


def test_switch_input_is_consumed(setup):
    mgr, default_rec, word_rec = setup
    inp = press(ButtonId.X)
    mgr.handle(inp)
    assert default_rec.seen == [inp]
    assert word_rec.seen == []

    mgr.handle(press(ButtonId.ZR))
    mgr.handle(press(ButtonId.X))
    assert len(default_rec.seen) == 1
    assert len(word_rec.seen) == 1


def test_unknown_mode_id(ctx, setup):
    mgr, _, _ = setup
    with pytest.raises(ModeError):
        mgr.switch_to("nope", None)
    assert mgr.current_mode_id() == "id1"


def test_switch_to_unknown_mode_alerts(ctx, settle):
    sw = mode_switch(ctx, ButtonId.ZR, "missing")
    ctx.manager.set_modes([IdleMode("id1")], [sw])
    ctx.manager.handle(press(ButtonId.ZR))
    settle()
    assert ctx.manager.current_mode_id() == "id1"
    assert ctx.notifier.alerts[0][0] == "failed to switch to mode missing"


def test_set_modes_validation(ctx):
    with pytest.raises(ModeError):
        ctx.manager.set_modes([], [])
    with pytest.raises(ModeError):
        ctx.manager.set_modes([IdleMode("a"), IdleMode("a")], [])


def test_set_modes_replaces_running_modes(ctx):
    ctx.manager.set_modes([IdleMode("a"), IdleMode("b")], [])
    ctx.manager.switch_to("b", None)
    ctx.manager.set_modes([IdleMode("c")], [])
    assert ctx.manager.current_mode_id() == "c"
    assert list(ctx.manager.modes) == ["c"]


def test_on_switch_callback(ctx, setup):
    mgr, _, _ = setup
    seen = []
    mgr.on_switch = seen.append
    mgr.handle(press(ButtonId.ZR))
    mgr.handle(release(ButtonId.ZR))
    assert seen == ["word", "id1"]


def test_entering_resets_mode_switch_state(ctx):
    sw = button_switch(ButtonId.R)
    word = Mode("word", switches=[(sw, None)])
    ctx.manager.set_modes([IdleMode("id1"), word], [mode_switch(ctx, ButtonId.ZR, "word")])

    ctx.manager.handle(press(ButtonId.ZR))
    ctx.manager.handle(press(ButtonId.R))
    assert sw.is_on
    ctx.manager.handle(release(ButtonId.ZR))
    ctx.manager.handle(press(ButtonId.ZR))
    assert not sw.is_on


def test_gyro_mode_streams_only_while_active(ctx, device, settle):
    mouse = GyroMode("mouse", ctx=ctx)
    ctx.manager.set_modes([IdleMode("id1"), mouse], [mode_switch(ctx, ButtonId.PLUS, "mouse")])

    ctx.manager.handle(press(ButtonId.PLUS, device))
    ctx.manager.handle(release(ButtonId.PLUS, device))
    settle()
    assert device.gyro == [True, False]
