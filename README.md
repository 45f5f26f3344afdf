# urmotion

A library for moving a robot arm through joint trajectories in software:
it interpolates waypoints, simulates a trajectory-following controller,
plays planned paths on a "ghost" model and drives a motion planner
through an interface you supply. It has no dependencies outside the
standard library.

## Modules

- **`urmotion.trajectory`**: trajectory data and interpolation.
  - `TrajectoryPoint` holds positions, optional velocities and
    `time_from_start` in seconds.
  - `JointTrajectory` holds joint names and points. `has_velocities()` is
    true when every point has one velocity per joint. `segment_at(t, start)`
    finds the active segment, searching forward only.
  - The interpolation functions are `lerp`, `cubic_hermite`,
    `cubic_hermite_velocity`, `fd_velocity` and `interpolate_segment`.
  - `validate_trajectory(trajectory, known_joints)` returns the index of
    each trajectory joint among `known_joints`. It raises `GoalRejected` (a
    `ValueError`) in these cases:
    - there are no joints or no points;
    - a joint is unknown;
    - a point has the wrong number of positions;
    - `time_from_start` decreases.
- **`urmotion.controller`**: `FakeController`, a simulated
  follow-joint-trajectory controller.
  - It follows goals exactly at its execution rate.
  - It uses cubic Hermite interpolation when `interpolation` is `"cubic"`
    and every point has velocities. Otherwise it interpolates linearly.
    Any value other than `"cubic"` means linear.
  - It reports `Feedback` through an optional callback.
  - It finishes with an `ExecutionResult`, which has `code` (a
    `ResultCode`), `canceled`, `aborted`, `duration` and `succeeded`.
- **`urmotion.animator`**: `TrajectoryAnimator` plays the last trajectory
  of a planned path on a `Ghost`. A `Ghost` is a dataclass with `visible`
  and `joint_values`, set through `set_joint_value`. When looping, the
  animator holds the last frame for `loop_delay` seconds (default 1.0)
  before it starts again. Without looping it stops and holds the last
  frame. `stop()` hides the ghost.
- **`urmotion.scene`**: geometry and key bindings for a goal editor.
  - `Quaternion` offers `from_axis_angle`, `multiply` and the `@` operator.
    Also here are `Pose` and `PoseStamped`.
  - `scene_to_ros_pose` converts a pose from a Y-up scene, in which the
    robot is drawn rotated by -π/2 about X, into the robot's Z-up frame.
  - `grid_size` returns twice the largest extent, rounded.
  - `TransformControls` and `TransformKeyListener`: Q toggles local/world
    space, W selects translate and E selects rotate. Other keys do nothing.
- **`urmotion.planner`**: `TargetPlanner` drives any object that follows
  the `MoveGroup` protocol.
  - `configure()` applies the `PlannerSettings`: planning time, goal
    tolerances and velocity/acceleration scaling.
  - `plan(target)` keeps the plan if it succeeds.
  - `execute()` runs the kept plan once and then forgets it.
  - Both raise `PlanningError` (with a `code`) on failure, or when there is
    no plan to run. An error code of `1` means success.

## Interpolation

```python
from urmotion.trajectory import lerp, cubic_hermite

lerp(0.0, 2.0, 0.25)                          # 0.5
cubic_hermite(0.0, 0.0, 1.0, 0.0, 1.0, 0.5)   # 0.5, halfway along a rest-to-rest move
```

A segment whose duration is zero or less jumps to its end position, and
its velocity is zero.

## Running the simulated controller

```python
from urmotion.controller import FakeController
from urmotion.trajectory import JointTrajectory, TrajectoryPoint

controller = FakeController(joint_names=["shoulder", "elbow"])
trajectory = JointTrajectory(
    ("shoulder", "elbow"),
    (
        TrajectoryPoint((0.0, 0.0), time_from_start=0.0),
        TrajectoryPoint((1.0, 0.5), time_from_start=0.5),
    ),
)
controller.handle_goal(trajectory)      # raises GoalRejected if invalid
controller.handle_accepted(trajectory)  # runs in a worker thread, preempting any running goal
result = controller.wait()
result.succeeded                        # True
controller.joint_state().positions      # (1.0, 0.5)
```

- `execute(trajectory, on_feedback)` follows a trajectory in the calling
  thread instead of a worker thread.
- `handle_cancel()` ends the running goal. The goal finishes as canceled
  with `ResultCode.SUCCESSFUL`, and all joint velocities are set to zero.
- `shutdown()` aborts a running goal with `ResultCode.INVALID_GOAL`.
- `clock` and `sleep` can be replaced, so runs can use virtual time.

The defaults are:
- controller name: `fake_ur_manipulator_controller`, which gives the
  `action_name` `/fake_ur_manipulator_controller/follow_joint_trajectory`;
- publish rate: 50 Hz, exposed as `publish_period`;
- execution rate: 125 Hz;
- interpolation: cubic.

## What it does not do

The package is a library only. It has:
- no commands to run;
- no network or middleware transport, so joint states are read with
  `joint_state()` and not published;
- no 3D viewer or window;
- no robot description loading;
- no motion planner of its own, because planning and execution are done
  by the `MoveGroup` object you pass to `TargetPlanner`.

## Tests

The tests use pytest, declared in the `test` extra:

```
pip install -e .[test]
pytest
```