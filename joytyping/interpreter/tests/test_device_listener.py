import pytest

from joytyping.core.config import Settings
from joytyping.core.types import ButtonId, ButtonState, GyroFrame, InputType, Ratio, SpinDirection, StickSide
from joytyping.runtime.device_listener import ControllerListener, render_battery


@pytest.fixture
def captured(ctx):
    seen = []
    listener = ControllerListener(dispatch=seen.append, notifier=ctx.notifier, settings=Settings())
    return listener, seen


def directions(seen):
    return [i.stick.direction for i in seen]


@pytest.mark.parametrize(
    "prev,curr,expected",
    [
        (Ratio(0.0, 0.5), Ratio(0.0, 0.9), SpinDirection.UP),
        (Ratio(0.0, 0.9), Ratio(0.0, 0.5), SpinDirection.UP_LEAVE),
        (Ratio(0.5, 0.0), Ratio(0.8, 0.0), SpinDirection.RIGHT),
        (Ratio(0.0, -0.2), Ratio(0.0, -0.75), SpinDirection.DOWN),
        (Ratio(-0.9, 0.0), Ratio(-0.2, 0.0), SpinDirection.LEFT_LEAVE),
        (Ratio(0.3, 0.3), Ratio(0.01, -0.02), SpinDirection.NEUTRAL),
        (Ratio(0.0, 0.0), Ratio(0.3, 0.0), SpinDirection.NEUTRAL_LEAVE),
    ],
)
def test_edge_inputs_follow_movement(captured, prev, curr, expected):
    listener, seen = captured
    listener.on_stick(None, StickSide.RIGHT, curr, prev)
    assert directions(seen) == [SpinDirection.NONE, expected]
    assert all(i.stick.side == StickSide.RIGHT for i in seen)


def test_no_edge_input_inside_a_zone(captured):
    listener, seen = captured
    listener.on_stick(None, StickSide.LEFT, Ratio(0.4, 0.1), Ratio(0.3, 0.2))
    assert directions(seen) == [SpinDirection.NONE]


def test_each_input_owns_its_ratio(captured):
    listener, seen = captured
    curr = Ratio(0.0, 0.9)
    listener.on_stick(None, StickSide.RIGHT, curr, Ratio(0.0, 0.5))

    seen[0].stick.ratio.y *= 3
    assert seen[1].stick.ratio == Ratio(0.0, 0.9)
    assert curr == Ratio(0.0, 0.9)


def test_thresholds_come_from_settings(ctx):
    seen = []
    listener = ControllerListener(seen.append, ctx.notifier, Settings(spin_edge_threshold=0.95))
    listener.on_stick(None, StickSide.RIGHT, Ratio(0.0, 0.9), Ratio(0.0, 0.5))
    assert directions(seen) == [SpinDirection.NONE]


def test_button_and_gyro_inputs(captured, device):
    listener, seen = captured
    down = ButtonState.of(ButtonId.A)
    listener.on_button(device, down, ButtonState(), down)
    listener.on_gyro(device, GyroFrame(yaw=4))

    assert [i.type for i in seen] == [InputType.BUTTON, InputType.GYRO]
    assert seen[0].button.down.has(ButtonId.A)
    assert seen[1].gyro.frame.yaw == 4
    assert all(i.device is device for i in seen)


def test_battery_notifies(captured, device, ctx):
    listener, _ = captured
    listener.on_battery(device, 3, True)
    listener.on_battery(device, 2, False)
    assert ctx.notifier.notes == [("Right", "🔋3, ⚡ Charging"), ("Right", "🔋2")]


def test_render_battery():
    assert render_battery(4, False) == "🔋4"


def test_read_write_error_disconnects(captured, device, ctx):
    listener, _ = captured
    listener.on_read_write_error(device, OSError("broken pipe"))
    assert device.disconnected
    assert ctx.notifier.notes == [("R/W error", "Right")]


def test_calibration_notifies(captured, device, ctx):
    listener, _ = captured
    listener.on_stick_calibrated(device, {"x": [1, 2, 3]})
    assert ctx.notifier.notes == [("🔧 Calibrated", "Right")]
