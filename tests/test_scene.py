import math

import pytest

from urmotion.scene import (
    Key,
    Pose,
    PoseStamped,
    Quaternion,
    TransformControls,
    TransformKeyListener,
    TransformMode,
    TransformSpace,
    grid_size,
    scene_to_ros_pose,
)

HALF_SQRT2 = math.sqrt(0.5)


def test_identity_is_neutral_for_multiply():
    q = Quaternion.from_axis_angle((0.0, 1.0, 0.0), 0.7)
    expected = (0.0, math.sin(0.35), 0.0, math.cos(0.35))
    right = q.multiply(Quaternion())
    left = Quaternion().multiply(q)
    assert (right.x, right.y, right.z, right.w) == pytest.approx(expected, abs=1e-9)
    assert (left.x, left.y, left.z, left.w) == pytest.approx(expected, abs=1e-9)


def test_multiply_with_conjugate_gives_identity():
    q = Quaternion.from_axis_angle((1.0, 2.0, 3.0), 1.1)
    conj = Quaternion(-q.x, -q.y, -q.z, q.w)
    product = q.multiply(conj)
    assert (product.x, product.y, product.z, product.w) == pytest.approx(
        (0.0, 0.0, 0.0, 1.0), abs=1e-9
    )


def test_from_axis_angle_is_unit_length():
    q = Quaternion.from_axis_angle((3.0, 0.0, 4.0), 2.0)
    assert math.isclose(q.x**2 + q.y**2 + q.z**2 + q.w**2, 1.0)
    # the vector part stays parallel to the axis
    assert math.isclose(q.x * 4.0, q.z * 3.0)


def test_half_turns_compose_to_full_angle():
    half = Quaternion.from_axis_angle((1.0, 0.0, 0.0), math.pi / 4)
    composed = half @ half
    assert (composed.x, composed.y, composed.z, composed.w) == pytest.approx(
        (HALF_SQRT2, 0.0, 0.0, HALF_SQRT2), abs=1e-9
    )


def test_zero_axis_is_rejected():
    with pytest.raises(ValueError):
        Quaternion.from_axis_angle((0.0, 0.0, 0.0), 1.0)


def test_scene_to_ros_pose_maps_axes():
    stamped = scene_to_ros_pose((1.0, 2.0, 3.0), Quaternion(), "base_link", 5.0)
    assert stamped.pose.position == (1.0, -3.0, 2.0)
    assert stamped.frame_id == "base_link"
    assert stamped.stamp == 5.0


def test_scene_to_ros_pose_corrects_orientation():
    stamped = scene_to_ros_pose((0.0, 0.0, 0.0), Quaternion())
    o = stamped.pose.orientation
    assert (o.x, o.y, o.z, o.w) == pytest.approx(
        (HALF_SQRT2, 0.0, 0.0, HALF_SQRT2), abs=1e-9
    )


def test_scene_rotation_is_undone():
    scene_rotation = Quaternion.from_axis_angle((1.0, 0.0, 0.0), -math.pi / 2)
    stamped = scene_to_ros_pose((0.0, 0.0, 0.0), scene_rotation)
    o = stamped.pose.orientation
    assert (o.x, o.y, o.z, o.w) == pytest.approx((0.0, 0.0, 0.0, 1.0), abs=1e-9)


def test_pose_stamped_defaults():
    stamped = PoseStamped(pose=Pose())
    assert stamped.frame_id == "base_link"
    assert stamped.pose.orientation == Quaternion(0.0, 0.0, 0.0, 1.0)


def test_grid_size_doubles_rounded_largest_extent():
    assert grid_size((0.4, 1.2, 0.6)) == 2
    assert grid_size((2.5, 0.1, 0.1)) == 6


def test_grid_size_is_even():
    for size in [(0.3, 0.2, 0.1), (1.7, 0.9, 3.4), (10.0, 2.0, 4.0)]:
        assert grid_size(size) % 2 == 0


def test_controls_defaults():
    controls = TransformControls()
    assert controls.mode is TransformMode.TRANSLATE
    assert controls.space is TransformSpace.WORLD


def test_q_toggles_space():
    controls = TransformControls()
    listener = TransformKeyListener(controls)
    listener.on_key_pressed(Key.Q)
    assert controls.space is TransformSpace.LOCAL
    listener.on_key_pressed(Key.Q)
    assert controls.space is TransformSpace.WORLD


def test_w_and_e_set_mode():
    controls = TransformControls()
    listener = TransformKeyListener(controls)
    listener.on_key_pressed(Key.E)
    assert controls.mode is TransformMode.ROTATE
    listener.on_key_pressed(Key.W)
    assert controls.mode is TransformMode.TRANSLATE


def test_other_keys_change_nothing():
    controls = TransformControls(mode=TransformMode.ROTATE, space=TransformSpace.LOCAL)
    TransformKeyListener(controls).on_key_pressed(Key.R)
    assert controls == TransformControls(mode=TransformMode.ROTATE, space=TransformSpace.LOCAL)