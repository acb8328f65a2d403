"""
joytyping — CORE CONTRACTS

Shared event shapes between the controller/speech collaborators and the
interpreter. Every other package builds on these types.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, IntEnum
from typing import Optional, Protocol


# ============================================================
# Buttons (3 bytes: right cluster, shared cluster, left cluster)
# ============================================================

class ButtonId(IntEnum):
    # byte 0
    Y = 0x001
    X = 0x002
    B = 0x004
    A = 0x008
    R_SR = 0x010
    R_SL = 0x020
    R = 0x040
    ZR = 0x080
    # byte 1
    MINUS = 0x101
    PLUS = 0x102
    R_STICK = 0x104
    L_STICK = 0x108
    HOME = 0x110
    CAPTURE = 0x120
    UNUSED1 = 0x140
    CHARGING_GRIP = 0x180
    # byte 2
    DOWN = 0x201
    UP = 0x202
    RIGHT = 0x204
    LEFT = 0x208
    L_SR = 0x210
    L_SL = 0x220
    L = 0x240
    ZL = 0x280

    @property
    def byte_index(self) -> int:
        return (self.value & 0x300) >> 8

    @property
    def mask(self) -> int:
        return self.value & 0xFF


BUTTON_NAMES: dict[str, ButtonId] = {
    "Y": ButtonId.Y,
    "X": ButtonId.X,
    "B": ButtonId.B,
    "A": ButtonId.A,
    "R-SR": ButtonId.R_SR,
    "R-SL": ButtonId.R_SL,
    "R": ButtonId.R,
    "ZR": ButtonId.ZR,
    "-": ButtonId.MINUS,
    "+": ButtonId.PLUS,
    "RStick": ButtonId.R_STICK,
    "LStick": ButtonId.L_STICK,
    "Home": ButtonId.HOME,
    "Capture": ButtonId.CAPTURE,
    "Unused1": ButtonId.UNUSED1,
    "ChargingGrip": ButtonId.CHARGING_GRIP,
    "Down": ButtonId.DOWN,
    "Up": ButtonId.UP,
    "Right": ButtonId.RIGHT,
    "Left": ButtonId.LEFT,
    "L-SR": ButtonId.L_SR,
    "L-SL": ButtonId.L_SL,
    "L": ButtonId.L,
    "ZL": ButtonId.ZL,
}


@dataclass(frozen=True)
class ButtonState:
    """Raw 3-byte button bitset as reported by the controller."""
    raw: tuple[int, int, int] = (0, 0, 0)

    @classmethod
    def of(cls, *buttons: ButtonId) -> "ButtonState":
        raw = [0, 0, 0]
        for b in buttons:
            raw[b.byte_index] |= b.mask
        return cls(raw=(raw[0], raw[1], raw[2]))

    def has(self, button: ButtonId) -> bool:
        return self.raw[button.byte_index] & button.mask != 0

    def down_mask(self, other: "ButtonState") -> "ButtonState":
        """Buttons released in self and pressed in other."""
        a, b = self.raw, other.raw
        return ButtonState(raw=(~a[0] & b[0] & 0xFF, ~a[1] & b[1] & 0xFF, ~a[2] & b[2] & 0xFF))

    def up_mask(self, other: "ButtonState") -> "ButtonState":
        """Buttons pressed in self and released in other."""
        a, b = self.raw, other.raw
        return ButtonState(raw=(a[0] & ~b[0] & 0xFF, a[1] & ~b[1] & 0xFF, a[2] & ~b[2] & 0xFF))

    def is_zero(self) -> bool:
        return self.raw == (0, 0, 0)


# ============================================================
# Sticks
# ============================================================

class StickSide(str, Enum):
    LEFT = "Left"
    RIGHT = "Right"


class SpinDirection(str, Enum):
    NONE = "None"   # plain movement, no edge crossed
    NEUTRAL = "Neutral"
    NEUTRAL_LEAVE = "NeutralLeave"
    UP = "Up"
    UP_LEAVE = "UpLeave"
    RIGHT = "Right"
    RIGHT_LEAVE = "RightLeave"
    DOWN = "Down"
    DOWN_LEAVE = "DownLeave"
    LEFT = "Left"
    LEFT_LEAVE = "LeftLeave"


SIDE_NAMES: dict[str, StickSide] = {s.value: s for s in StickSide}

# directions accepted by rule lines (NONE is internal only)
DIRECTION_NAMES: dict[str, SpinDirection] = {
    d.value: d for d in SpinDirection if d is not SpinDirection.NONE
}

REVERSE_DIRECTION: dict[SpinDirection, SpinDirection] = {
    SpinDirection.UP: SpinDirection.UP_LEAVE,
    SpinDirection.RIGHT: SpinDirection.RIGHT_LEAVE,
    SpinDirection.DOWN: SpinDirection.DOWN_LEAVE,
    SpinDirection.LEFT: SpinDirection.LEFT_LEAVE,
    SpinDirection.NEUTRAL: SpinDirection.NEUTRAL_LEAVE,
    SpinDirection.UP_LEAVE: SpinDirection.UP,
    SpinDirection.RIGHT_LEAVE: SpinDirection.RIGHT,
    SpinDirection.DOWN_LEAVE: SpinDirection.DOWN,
    SpinDirection.LEFT_LEAVE: SpinDirection.LEFT,
    SpinDirection.NEUTRAL_LEAVE: SpinDirection.NEUTRAL,
}


@dataclass
class Ratio:
    """Calibrated stick position, both axes roughly in [-1.0, 1.0]."""
    x: float = 0.0
    y: float = 0.0

    def copy(self) -> "Ratio":
        return Ratio(self.x, self.y)

    def at_neutral(self, threshold: float) -> bool:
        return abs(self.x) <= threshold and abs(self.y) <= threshold

    def at_edge(self, direction: SpinDirection, threshold: float) -> bool:
        if direction is SpinDirection.UP:
            return self.y >= threshold
        if direction is SpinDirection.DOWN:
            return -self.y >= threshold
        if direction is SpinDirection.LEFT:
            return -self.x >= threshold
        if direction is SpinDirection.RIGHT:
            return self.x >= threshold
        return False


# ============================================================
# Gyro
# ============================================================

@dataclass
class GyroFrame:
    """Offset-adjusted 6-axis sample: gyroscope x/y/z, accelerometer roll/pitch/yaw."""
    x: int = 0
    y: int = 0
    z: int = 0
    roll: int = 0
    pitch: int = 0
    yaw: int = 0


# ============================================================
# Controller capability (implemented by the hardware collaborator)
# ============================================================

class Controller(Protocol):
    def mac(self) -> str: ...
    def side(self) -> StickSide: ...
    def enable_gyro(self, on: bool) -> None: ...
    def disconnect(self) -> None: ...


# ============================================================
# Collaborators → Interpreter
# ============================================================

class InputType(str, Enum):
    NONE = "NONE"
    BUTTON = "BUTTON"
    STICK = "STICK"
    GYRO = "GYRO"
    SPEECH = "SPEECH"


@dataclass
class ButtonInput:
    down: ButtonState
    up: ButtonState
    curr: ButtonState


@dataclass
class StickInput:
    side: StickSide
    ratio: Ratio
    direction: SpinDirection = SpinDirection.NONE


@dataclass
class GyroInput:
    frame: GyroFrame


@dataclass
class SpeechInput:
    text: str


@dataclass
class Input:
    """
    One classified event.

    Exactly ONE payload field is non-None depending on `type`.
    Modifiers mutate payloads in place, so an Input is never shared
    between two dispatches.
    """
    type: InputType
    device: Optional[Controller] = None
    button: Optional[ButtonInput] = None
    stick: Optional[StickInput] = None
    gyro: Optional[GyroInput] = None
    speech: Optional[SpeechInput] = None


def speech_input(text: str, device: Optional[Controller] = None) -> Input:
    return Input(type=InputType.SPEECH, device=device, speech=SpeechInput(text=text))
