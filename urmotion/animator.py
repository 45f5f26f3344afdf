"""Playback of a planned trajectory on a ghost robot."""

from __future__ import annotations

import threading
from dataclasses import dataclass, field
from typing import Sequence

from urmotion.trajectory import JointTrajectory


@dataclass
class Ghost:
    """A robot model whose joints and visibility the animator drives."""

    visible: bool = False
    joint_values: dict[int, float] = field(default_factory=dict)

    def set_joint_value(self, index: int, value: float) -> None:
        self.joint_values[index] = value


class TrajectoryAnimator:
    """Animates the last trajectory of a planned path, optionally looping it."""

    def __init__(self, ghost: Ghost, loop_delay: float = 1.0) -> None:
        self._ghost = ghost
        self._loop_delay = loop_delay
        self._lock = threading.Lock()
        self._points: list[tuple[float, ...]] = []
        self._times: list[float] = []
        self._elapsed = 0.0
        self._visible = False
        self._playing = False
        self._loop_wait = 0.0

    def load_trajectory(self, trajectories: Sequence[JointTrajectory]) -> None:
        """Load the last of ``trajectories`` and start playing it from the beginning."""
        with self._lock:
            self._points = []
            self._times = []
            self._visible = False
            self._elapsed = 0.0
            self._loop_wait = 0.0
            self._playing = False

            if not trajectories:
                return
            joint_traj = trajectories[-1]
            if not joint_traj.points:
                return

            self._points = [tuple(p.positions) for p in joint_traj.points]
            self._times = [p.time_from_start for p in joint_traj.points]
            self._visible = True
            self._playing = True

    def update(self, dt: float, loop: bool) -> None:
        """Advance playback by ``dt`` seconds and pose the ghost."""
        with self._lock:
            self._ghost.visible = self._visible

            if self._visible and self._playing and len(self._points) >= 2 and self._times:
                self._elapsed += dt
                duration = self._times[-1]

                if self._elapsed >= duration:
                    if loop:
                        self._loop_wait += dt
                        if self._loop_wait >= self._loop_delay:
                            self._elapsed = 0.0
                            self._loop_wait = 0.0
                        else:
                            self._apply_joints(self._points[-1])
                            return
                    else:
                        self._elapsed = duration
                        self._playing = False

                self._interpolate_and_apply()
            elif self._visible and self._points and not self._playing:
                self._apply_joints(self._points[-1])

    def stop(self) -> None:
        """Hide the ghost and stop playback."""
        with self._lock:
            self._visible = False
            self._playing = False

    def is_visible(self) -> bool:
        with self._lock:
            return self._visible

    def is_playing(self) -> bool:
        with self._lock:
            return self._playing

    def _apply_joints(self, joints: Sequence[float]) -> None:
        for i, value in enumerate(joints):
            self._ghost.set_joint_value(i, value)

    def _interpolate_and_apply(self) -> None:
        next_idx = next(
            (i for i in range(1, len(self._times)) if self._times[i] >= self._elapsed),
            len(self._times) - 1,
        )
        prev_idx = next_idx - 1

        t0 = self._times[prev_idx]
        t1 = self._times[next_idx]
        alpha = (self._elapsed - t0) / (t1 - t0) if t1 > t0 else 0.0
        alpha = min(max(alpha, 0.0), 1.0)

        prev = self._points[prev_idx]
        nxt = self._points[next_idx]
        for i, (a, b) in enumerate(zip(prev, nxt)):
            self._ghost.set_joint_value(i, a + alpha * (b - a))