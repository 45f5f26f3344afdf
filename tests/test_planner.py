import pytest

from urmotion.planner import PlannerSettings, PlanningError, TargetPlanner
from urmotion.scene import Pose, PoseStamped, Quaternion


class FakeMoveGroup:
    def __init__(self, plan_code=1, execute_code=1):
        self.plan_code = plan_code
        self.execute_code = execute_code
        self.settings = {}
        self.targets = []
        self.executed = []

    def set_planning_time(self, seconds):
        self.settings["planning_time"] = seconds

    def set_goal_position_tolerance(self, tolerance):
        self.settings["position_tolerance"] = tolerance

    def set_goal_orientation_tolerance(self, tolerance):
        self.settings["orientation_tolerance"] = tolerance

    def set_max_velocity_scaling_factor(self, factor):
        self.settings["velocity"] = factor

    def set_max_acceleration_scaling_factor(self, factor):
        self.settings["acceleration"] = factor

    def set_pose_target(self, pose, link):
        self.targets.append((pose, link))

    def plan(self):
        return self.plan_code, {"points": len(self.targets)}

    def execute(self, plan):
        self.executed.append(plan)
        return self.execute_code


def _target():
    return PoseStamped(pose=Pose(position=(0.3, -0.2, 0.5), orientation=Quaternion()))


def test_configure_applies_default_settings():
    group = FakeMoveGroup()
    TargetPlanner(group).configure()
    assert group.settings == {
        "planning_time": 10.0,
        "position_tolerance": 0.01,
        "orientation_tolerance": 0.1,
        "velocity": 1.0,
        "acceleration": 1.0,
    }


def test_configure_applies_custom_settings():
    group = FakeMoveGroup()
    TargetPlanner(group, PlannerSettings(planning_time=2.0)).configure()
    assert group.settings["planning_time"] == 2.0


def test_plan_targets_end_effector_and_keeps_plan():
    group = FakeMoveGroup()
    planner = TargetPlanner(group)
    target = _target()
    plan = planner.plan(target)
    assert group.targets == [(target.pose, "tool0")]
    assert plan == {"points": 1}
    assert planner.has_plan() is True


def test_failed_plan_raises_and_clears_plan():
    group = FakeMoveGroup()
    planner = TargetPlanner(group)
    planner.plan(_target())
    group.plan_code = -1
    with pytest.raises(PlanningError) as info:
        planner.plan(_target())
    assert info.value.code == -1
    assert planner.has_plan() is False


def test_execute_without_plan_raises():
    group = FakeMoveGroup()
    planner = TargetPlanner(group)
    with pytest.raises(PlanningError):
        planner.execute()
    assert group.executed == []


def test_execute_runs_plan_once():
    group = FakeMoveGroup()
    planner = TargetPlanner(group)
    plan = planner.plan(_target())
    planner.execute()
    assert group.executed == [plan]
    assert planner.has_plan() is False
    with pytest.raises(PlanningError):
        planner.execute()


def test_failed_execution_raises_and_clears_plan():
    group = FakeMoveGroup(execute_code=-4)
    planner = TargetPlanner(group)
    planner.plan(_target())
    with pytest.raises(PlanningError) as info:
        planner.execute()
    assert info.value.code == -4
    assert planner.has_plan() is False