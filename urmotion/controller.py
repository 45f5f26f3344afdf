"""A simulated joint trajectory controller that follows trajectory goals."""

from __future__ import annotations

import enum
import logging
import threading
import time
from dataclasses import dataclass, field
from typing import Callable, Optional, Sequence

from urmotion.trajectory import (
    GoalRejected,
    JointTrajectory,
    interpolate_segment,
    validate_trajectory,
)

_log = logging.getLogger(__name__)

FeedbackCallback = Callable[["Feedback"], None]


class Interpolation(enum.Enum):
    """How positions between waypoints are computed."""

    LINEAR = "linear"
    CUBIC = "cubic"

    @classmethod
    def _missing_(cls, value: object) -> "Interpolation":
        # Anything other than "cubic" falls back to linear interpolation.
        return cls.LINEAR


class ResultCode(enum.IntEnum):
    """Result codes of a trajectory goal."""

    SUCCESSFUL = 0
    INVALID_GOAL = -1
    INVALID_JOINTS = -2
    OLD_HEADER_TIMESTAMP = -3
    PATH_TOLERANCE_VIOLATED = -4
    GOAL_TOLERANCE_VIOLATED = -5


@dataclass(frozen=True)
class JointState:
    """A snapshot of the simulated joints."""

    names: tuple[str, ...]
    positions: tuple[float, ...]
    velocities: tuple[float, ...]
    efforts: tuple[float, ...]


@dataclass(frozen=True)
class Feedback:
    """Progress reported while a trajectory is followed."""

    joint_names: tuple[str, ...]
    desired_positions: tuple[float, ...]
    desired_velocities: tuple[float, ...]
    desired_time: float
    actual_positions: tuple[float, ...]
    actual_velocities: tuple[float, ...]
    actual_time: float
    error_positions: tuple[float, ...] = field(default=())
    error_velocities: tuple[float, ...] = field(default=())
    error_time: float = 0.0


@dataclass(frozen=True)
class ExecutionResult:
    """Outcome of following one trajectory goal."""

    code: ResultCode
    canceled: bool = False
    aborted: bool = False
    duration: float = 0.0

    @property
    def succeeded(self) -> bool:
        return not self.canceled and not self.aborted


class FakeController:
    """Follows joint trajectories instantly and exactly, reporting joint states.

    ``clock`` returns the current time in seconds and ``sleep`` waits for a
    number of seconds; both may be replaced to drive the controller in tests.
    """

    def __init__(
        self,
        joint_names: Sequence[str] = (),
        controller_name: str = "fake_ur_manipulator_controller",
        publish_rate_hz: float = 50.0,
        execution_rate_hz: float = 125.0,
        interpolation: str | Interpolation = "cubic",
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self.joint_names: tuple[str, ...] = tuple(joint_names)
        self.controller_name = controller_name
        self.publish_rate_hz = float(publish_rate_hz)
        self.execution_rate_hz = float(execution_rate_hz)
        self.interpolation = Interpolation(interpolation)
        self._clock = clock
        self._sleep = sleep

        if not self.joint_names:
            _log.warning("No joint_names provided; the controller won't publish anything useful.")

        self._lock = threading.Lock()
        self._positions = [0.0] * len(self.joint_names)
        self._velocities = [0.0] * len(self.joint_names)

        self._cancel = threading.Event()
        self._shutdown = threading.Event()
        self._thread: Optional[threading.Thread] = None
        self._last_result: Optional[ExecutionResult] = None

        _log.info(
            "FakeController ready: action %s, joints %d, publish %.0f Hz, exec %.0f Hz, interp %s",
            self.action_name,
            len(self.joint_names),
            self.publish_rate_hz,
            self.execution_rate_hz,
            self.interpolation.value,
        )

    @property
    def action_name(self) -> str:
        return f"/{self.controller_name}/follow_joint_trajectory"

    @property
    def publish_period(self) -> float:
        return 1.0 / self.publish_rate_hz

    def joint_state(self) -> JointState:
        """Current positions and velocities of all joints; efforts are zero."""
        with self._lock:
            return JointState(
                names=self.joint_names,
                positions=tuple(self._positions),
                velocities=tuple(self._velocities),
                efforts=(0.0,) * len(self.joint_names),
            )

    def handle_goal(self, trajectory: JointTrajectory) -> list[int]:
        """Accept or reject a goal.

        Returns the index of each trajectory joint among the controller's
        joints; raises :class:`GoalRejected` when the goal is invalid.
        """
        try:
            index_map = validate_trajectory(trajectory, self.joint_names)
        except GoalRejected as exc:
            _log.error("Rejected goal: %s", exc)
            raise
        _log.info(
            "Accepted goal with %d joints, %d waypoints",
            len(trajectory.joint_names),
            len(trajectory.points),
        )
        return index_map

    def handle_cancel(self) -> bool:
        """Request cancellation of the running goal; always accepted."""
        _log.info("Cancel requested")
        self._cancel.set()
        return True

    def handle_accepted(
        self, trajectory: JointTrajectory, on_feedback: Optional[FeedbackCallback] = None
    ) -> None:
        """Preempt any running goal and follow ``trajectory`` in a worker thread."""
        self._cancel.set()
        self._join()
        self._cancel.clear()
        self._last_result = None

        def run() -> None:
            self._last_result = self.execute(trajectory, on_feedback)

        self._thread = threading.Thread(target=run, name="fake-controller-exec", daemon=True)
        self._thread.start()

    def wait(self, timeout: Optional[float] = None) -> Optional[ExecutionResult]:
        """Wait for the running goal; its result, or None if none finished in time."""
        thread = self._thread
        if thread is not None:
            thread.join(timeout)
            if thread.is_alive():
                return None
        return self._last_result

    def shutdown(self) -> None:
        """Stop the controller; a running goal is aborted."""
        self._shutdown.set()
        self._cancel.set()
        self._join()

    def _join(self) -> None:
        thread = self._thread
        if thread is not None and thread is not threading.current_thread():
            thread.join()

    def _apply_state(
        self, index_map: Sequence[int], positions: Sequence[float], velocities: Sequence[float]
    ) -> None:
        with self._lock:
            for idx, pos, vel in zip(index_map, positions, velocities):
                self._positions[idx] = pos
                self._velocities[idx] = vel

    def execute(
        self, trajectory: JointTrajectory, on_feedback: Optional[FeedbackCallback] = None
    ) -> ExecutionResult:
        """Follow ``trajectory`` in the calling thread until done, canceled or shut down."""
        index_map = validate_trajectory(trajectory, self.joint_names)
        points = trajectory.points
        n_joints = len(trajectory.joint_names)
        n_points = len(points)
        zero_vel = (0.0,) * n_joints

        have_velocities = trajectory.has_velocities()
        use_cubic = self.interpolation is Interpolation.CUBIC and have_velocities

        first = points[0]
        self._apply_state(index_map, first.positions, first.velocities if have_velocities else zero_vel)

        start = self._clock()
        last_tick = start
        period = 1.0 / self.execution_rate_hz
        seg = 0
        t_final = points[-1].time_from_start

        while not self._shutdown.is_set():
            if self._cancel.is_set():
                with self._lock:
                    self._velocities = [0.0] * len(self._velocities)
                _log.info("Goal canceled")
                return ExecutionResult(
                    code=ResultCode.SUCCESSFUL,
                    canceled=True,
                    duration=self._clock() - start,
                )

            elapsed = self._clock() - start
            seg = trajectory.segment_at(elapsed, seg)

            if seg >= n_points - 1 and elapsed >= t_final:
                last = points[-1]
                self._apply_state(
                    index_map, last.positions, last.velocities if have_velocities else zero_vel
                )
                total = self._clock() - start
                _log.info("Goal succeeded (%.3f s, %d waypoints)", total, n_points)
                return ExecutionResult(code=ResultCode.SUCCESSFUL, duration=total)

            p0 = points[seg]
            p1 = points[min(seg + 1, n_points - 1)]
            positions, velocities = interpolate_segment(p0, p1, elapsed, use_cubic)
            self._apply_state(index_map, positions, velocities)

            if on_feedback is not None:
                on_feedback(
                    Feedback(
                        joint_names=trajectory.joint_names,
                        desired_positions=p1.positions,
                        desired_velocities=p1.velocities if have_velocities else (),
                        desired_time=p1.time_from_start,
                        actual_positions=tuple(positions),
                        actual_velocities=tuple(velocities),
                        actual_time=elapsed,
                        error_positions=zero_vel,
                        error_velocities=zero_vel,
                        error_time=0.0,
                    )
                )

            target = last_tick + period
            remaining = target - self._clock()
            if remaining > 0.0:
                self._sleep(remaining)
                last_tick = target
            else:
                last_tick = self._clock()

        _log.warning("Goal aborted: controller shutting down")
        return ExecutionResult(
            code=ResultCode.INVALID_GOAL,
            aborted=True,
            duration=self._clock() - start,
        )