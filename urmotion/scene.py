"""Scene-side helpers: pose conversion to the robot frame and gizmo key bindings."""

from __future__ import annotations

import enum
import logging
import math
from dataclasses import dataclass, field
from typing import Sequence

_log = logging.getLogger(__name__)

Vector3 = tuple[float, float, float]

X_AXIS: Vector3 = (1.0, 0.0, 0.0)


@dataclass(frozen=True)
class Quaternion:
    """A rotation quaternion with components ``x, y, z, w``."""

    x: float = 0.0
    y: float = 0.0
    z: float = 0.0
    w: float = 1.0

    @staticmethod
    def from_axis_angle(axis: Sequence[float], angle: float) -> "Quaternion":
        """Rotation of ``angle`` radians about ``axis``; the axis is normalized first."""
        ax, ay, az = (float(c) for c in axis)
        norm = math.sqrt(ax * ax + ay * ay + az * az)
        if norm == 0.0:
            raise ValueError("rotation axis must not be the zero vector")
        s = math.sin(angle / 2.0) / norm
        return Quaternion(ax * s, ay * s, az * s, math.cos(angle / 2.0))

    def multiply(self, other: "Quaternion") -> "Quaternion":
        """Hamilton product ``self * other``: apply ``other`` first, then ``self``."""
        ax, ay, az, aw = self.x, self.y, self.z, self.w
        bx, by, bz, bw = other.x, other.y, other.z, other.w
        return Quaternion(
            ax * bw + aw * bx + ay * bz - az * by,
            ay * bw + aw * by + az * bx - ax * bz,
            az * bw + aw * bz + ax * by - ay * bx,
            aw * bw - ax * bx - ay * by - az * bz,
        )

    def __matmul__(self, other: "Quaternion") -> "Quaternion":
        return self.multiply(other)


@dataclass(frozen=True)
class Pose:
    """A position and an orientation."""

    position: Vector3 = (0.0, 0.0, 0.0)
    orientation: Quaternion = field(default_factory=Quaternion)


@dataclass(frozen=True)
class PoseStamped:
    """A pose in a named frame at a point in time (seconds)."""

    pose: Pose
    frame_id: str = "base_link"
    stamp: float = 0.0


class TransformMode(enum.Enum):
    """What dragging the gizmo changes."""

    TRANSLATE = "translate"
    ROTATE = "rotate"
    SCALE = "scale"


class TransformSpace(enum.Enum):
    """The frame the gizmo axes are drawn in."""

    LOCAL = "local"
    WORLD = "world"


class Key(enum.Enum):
    """Keys the gizmo listener may receive."""

    Q = "q"
    W = "w"
    E = "e"
    R = "r"


@dataclass
class TransformControls:
    """State of a transform gizmo."""

    mode: TransformMode = TransformMode.TRANSLATE
    space: TransformSpace = TransformSpace.WORLD


class TransformKeyListener:
    """Switches gizmo space with Q, translate mode with W and rotate mode with E."""

    def __init__(self, controls: TransformControls) -> None:
        self.controls = controls

    def on_key_pressed(self, key: Key) -> None:
        if key is Key.Q:
            self.controls.space = (
                TransformSpace.WORLD
                if self.controls.space is TransformSpace.LOCAL
                else TransformSpace.LOCAL
            )
            _log.info("TransformControls space: %s", self.controls.space.value)
        elif key is Key.W:
            self.controls.mode = TransformMode.TRANSLATE
            _log.info("TransformControls mode: translate")
        elif key is Key.E:
            self.controls.mode = TransformMode.ROTATE
            _log.info("TransformControls mode: rotate")


def scene_to_ros_pose(
    position: Sequence[float],
    quaternion: Quaternion,
    frame_id: str = "base_link",
    stamp: float = 0.0,
) -> PoseStamped:
    """Convert a pose in the Y-up scene into the Z-up robot frame.

    The robot is shown rotated by -pi/2 about X, so scene Z maps to robot -Y,
    scene Y to robot Z, and the orientation is corrected by +pi/2 about X.
    """
    x, y, z = (float(c) for c in position)
    correction = Quaternion.from_axis_angle(X_AXIS, math.pi / 2)
    orientation = correction.multiply(quaternion)
    return PoseStamped(
        pose=Pose(position=(x, -z, y), orientation=orientation),
        frame_id=frame_id,
        stamp=stamp,
    )


def grid_size(robot_size: Sequence[float]) -> int:
    """Size of the floor grid: twice the robot's largest extent, rounded."""
    largest = max(float(c) for c in robot_size)
    rounded = int(math.floor(abs(largest) + 0.5))
    return max(rounded, 0) * 2 if largest >= 0 else 0