"""Joint trajectories, their validation and interpolation between waypoints."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, Sequence


class GoalRejected(ValueError):
    """Raised when a trajectory goal cannot be accepted."""


@dataclass(frozen=True)
class TrajectoryPoint:
    """A single waypoint: joint positions, optional velocities and a time offset in seconds."""

    positions: tuple[float, ...]
    velocities: tuple[float, ...] = ()
    time_from_start: float = 0.0

    def __post_init__(self) -> None:
        object.__setattr__(self, "positions", tuple(float(p) for p in self.positions))
        object.__setattr__(self, "velocities", tuple(float(v) for v in self.velocities))
        object.__setattr__(self, "time_from_start", float(self.time_from_start))


@dataclass(frozen=True)
class JointTrajectory:
    """Named joints and the waypoints that move them."""

    joint_names: tuple[str, ...]
    points: tuple[TrajectoryPoint, ...] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        object.__setattr__(self, "joint_names", tuple(self.joint_names))
        object.__setattr__(self, "points", tuple(self.points))

    def has_velocities(self) -> bool:
        """True when every waypoint carries one velocity per joint."""
        count = len(self.joint_names)
        return all(len(point.velocities) == count for point in self.points)

    def segment_at(self, t: float, start: int = 0) -> int:
        """Index of the waypoint that starts the segment active at time ``t``.

        The search moves forward from ``start`` and never goes back.
        """
        seg = start
        while seg + 1 < len(self.points) and self.points[seg + 1].time_from_start <= t:
            seg += 1
        return seg


def lerp(q0: float, q1: float, alpha: float) -> float:
    """Linear interpolation between two values."""
    return (1.0 - alpha) * q0 + alpha * q1


def cubic_hermite(q0: float, v0: float, q1: float, v1: float, dt: float, alpha: float) -> float:
    """Cubic Hermite position from endpoint positions and velocities at normalized time ``alpha``."""
    if dt <= 0.0:
        return q1
    s = alpha
    s2 = s * s
    s3 = s2 * s
    h00 = 2.0 * s3 - 3.0 * s2 + 1.0
    h10 = s3 - 2.0 * s2 + s
    h01 = -2.0 * s3 + 3.0 * s2
    h11 = s3 - s2
    return h00 * q0 + h10 * (v0 * dt) + h01 * q1 + h11 * (v1 * dt)


def cubic_hermite_velocity(
    q0: float, v0: float, q1: float, v1: float, dt: float, alpha: float
) -> float:
    """Time derivative of :func:`cubic_hermite`; zero for a segment without duration."""
    if dt <= 0.0:
        return 0.0
    s = alpha
    ds_dt = 1.0 / dt
    dh00 = (6.0 * s * s - 6.0 * s) * ds_dt
    dh10 = (3.0 * s * s - 4.0 * s + 1.0) * ds_dt
    dh01 = (-6.0 * s * s + 6.0 * s) * ds_dt
    dh11 = (3.0 * s * s - 2.0 * s) * ds_dt
    return dh00 * q0 + dh10 * (v0 * dt) + dh01 * q1 + dh11 * (v1 * dt)


def fd_velocity(q_prev: float, q_next: float, dt: float) -> float:
    """Finite-difference velocity; zero when ``dt`` is not positive."""
    return (q_next - q_prev) / dt if dt > 0.0 else 0.0


def validate_trajectory(trajectory: JointTrajectory, known_joints: Iterable[str]) -> list[int]:
    """Check a trajectory goal and map its joints onto ``known_joints``.

    Returns, for each joint of the trajectory, its index in ``known_joints``.
    Raises :class:`GoalRejected` describing the first problem found.
    """
    index_by_name = {name: i for i, name in enumerate(known_joints)}

    if not trajectory.joint_names or not trajectory.points:
        raise GoalRejected("empty joint_names or points")

    for name in trajectory.joint_names:
        if name not in index_by_name:
            raise GoalRejected(f"unknown joint '{name}'")

    expected = len(trajectory.joint_names)
    previous: TrajectoryPoint | None = None
    for i, point in enumerate(trajectory.points):
        if len(point.positions) != expected:
            raise GoalRejected(
                f"point {i} has {len(point.positions)} positions (expected {expected})"
            )
        if previous is not None and point.time_from_start < previous.time_from_start:
            raise GoalRejected(
                f"time_from_start is not monotonically increasing at point {i}"
            )
        previous = point

    return [index_by_name[name] for name in trajectory.joint_names]


def interpolate_segment(
    p0: TrajectoryPoint, p1: TrajectoryPoint, t: float, use_cubic: bool
) -> tuple[list[float], list[float]]:
    """Positions and velocities at time ``t`` on the segment from ``p0`` to ``p1``.

    Cubic interpolation needs velocities on both points; otherwise the segment
    is interpolated linearly with a constant velocity.
    """
    t0 = p0.time_from_start
    t1 = p1.time_from_start
    dt = t1 - t0
    alpha = min(max((t - t0) / dt, 0.0), 1.0) if dt > 0.0 else 1.0

    positions: list[float] = []
    velocities: list[float] = []
    if use_cubic:
        for q0, v0, q1, v1 in zip(p0.positions, p0.velocities, p1.positions, p1.velocities):
            positions.append(cubic_hermite(q0, v0, q1, v1, dt, alpha))
            velocities.append(cubic_hermite_velocity(q0, v0, q1, v1, dt, alpha))
    else:
        for q0, q1 in zip(p0.positions, p1.positions):
            positions.append(lerp(q0, q1, alpha))
            velocities.append(fd_velocity(q0, q1, dt))
    return positions, velocities