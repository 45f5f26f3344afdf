"""Plans motions to target poses and executes the last successful plan."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Optional, Protocol

from urmotion.scene import Pose, PoseStamped

_log = logging.getLogger(__name__)

SUCCESS = 1


@dataclass(frozen=True)
class PlannerSettings:
    """Planning group and tolerances used by the planner."""

    group_name: str = "ur_manipulator"
    end_effector_link: str = "tool0"
    planning_time: float = 10.0
    goal_position_tolerance: float = 0.01
    goal_orientation_tolerance: float = 0.1
    max_velocity_scaling: float = 1.0
    max_acceleration_scaling: float = 1.0


class MoveGroup(Protocol):
    """The motion planning interface the planner drives.

    ``plan`` and ``execute`` return an error code, where ``SUCCESS`` (1) means success.
    """

    def set_planning_time(self, seconds: float) -> None:
        """Limit the time spent planning."""

    def set_goal_position_tolerance(self, tolerance: float) -> None:
        """Set the allowed position error at the goal."""

    def set_goal_orientation_tolerance(self, tolerance: float) -> None:
        """Set the allowed orientation error at the goal."""

    def set_max_velocity_scaling_factor(self, factor: float) -> None:
        """Scale the maximum joint velocities."""

    def set_max_acceleration_scaling_factor(self, factor: float) -> None:
        """Scale the maximum joint accelerations."""

    def set_pose_target(self, pose: Pose, link: str) -> None:
        """Set the target pose of ``link``."""

    def plan(self) -> tuple[int, Any]:
        """Plan to the current target; returns the error code and the plan."""

    def execute(self, plan: Any) -> int:
        """Execute a plan; returns the error code."""


class PlanningError(RuntimeError):
    """Raised when planning or execution fails, or there is nothing to execute."""

    def __init__(self, message: str, code: Optional[int] = None) -> None:
        super().__init__(message)
        self.code = code


class TargetPlanner:
    """Plans to target poses and executes the last plan on request."""

    def __init__(self, move_group: MoveGroup, settings: Optional[PlannerSettings] = None) -> None:
        self.move_group = move_group
        self.settings = settings if settings is not None else PlannerSettings()
        self._plan: Any = None
        self._has_plan = False

    def configure(self) -> None:
        """Apply planning time, tolerances and scaling to the move group."""
        s = self.settings
        self.move_group.set_planning_time(s.planning_time)
        self.move_group.set_goal_position_tolerance(s.goal_position_tolerance)
        self.move_group.set_goal_orientation_tolerance(s.goal_orientation_tolerance)
        self.move_group.set_max_velocity_scaling_factor(s.max_velocity_scaling)
        self.move_group.set_max_acceleration_scaling_factor(s.max_acceleration_scaling)
        _log.info("TargetPlanner ready")

    def has_plan(self) -> bool:
        return self._has_plan

    def plan(self, target: PoseStamped) -> Any:
        """Plan to ``target`` and keep the plan for :meth:`execute`.

        Returns the plan; raises :class:`PlanningError` if planning fails.
        """
        pos = target.pose.position
        ori = target.pose.orientation
        _log.info(
            "Planning to: pos=(%.3f, %.3f, %.3f) ori=(%.3f, %.3f, %.3f, %.3f)",
            pos[0], pos[1], pos[2], ori.x, ori.y, ori.z, ori.w,
        )
        self.move_group.set_pose_target(target.pose, self.settings.end_effector_link)
        code, plan = self.move_group.plan()
        if code != SUCCESS:
            self._has_plan = False
            self._plan = None
            _log.warning("Planning failed (error code: %d)", code)
            raise PlanningError(f"planning failed (error code: {code})", code)
        self._plan = plan
        self._has_plan = True
        _log.info("Plan succeeded. Request execution to run it.")
        return plan

    def execute(self) -> None:
        """Execute the last plan once; raises :class:`PlanningError` on failure."""
        if not self._has_plan:
            _log.warning("No valid plan to execute")
            raise PlanningError("no valid plan to execute")

        _log.info("Executing plan...")
        plan = self._plan
        self._has_plan = False
        self._plan = None
        code = self.move_group.execute(plan)
        if code != SUCCESS:
            _log.error("Execution failed (error code: %d)", code)
            raise PlanningError(f"execution failed (error code: {code})", code)
        _log.info("Execution succeeded")