from __future__ import annotations

import math

import numpy as np

from hand_skeleton_sdk import (
    HTS_JOINT_MAP,
    HandSide,
    HTSFrameBuilder,
    JointIndex,
    RigidTransform,
    convert_transform_unity_left_to_right,
    unity_left_to_right_position,
    unity_left_to_right_quaternion,
)


def _quat_close(a: tuple[float, float, float, float], b: tuple[float, float, float, float]) -> bool:
    return all(math.isclose(x, y, abs_tol=1e-6) for x, y in zip(a, b, strict=True))


def _quat_equivalent(
    a: tuple[float, float, float, float], b: tuple[float, float, float, float]
) -> bool:
    # q and -q represent the same rotation.
    if _quat_close(a, b):
        return True
    return _quat_close(a, (-b[0], -b[1], -b[2], -b[3]))


def test_position_conversion_flips_y() -> None:
    assert unity_left_to_right_position(1.0, 2.0, 3.0) == (1.0, -2.0, 3.0)


def test_quaternion_identity_is_preserved() -> None:
    converted = unity_left_to_right_quaternion(0.0, 0.0, 0.0, 1.0)
    assert _quat_equivalent(converted, (0.0, 0.0, 0.0, 1.0))


def test_zero_quaternion_maps_to_identity() -> None:
    assert unity_left_to_right_quaternion(0.0, 0.0, 0.0, 0.0) == (0.0, 0.0, 0.0, 1.0)


def test_quaternion_x_rotation_flips_sign() -> None:
    angle = math.pi / 2.0
    source = (math.sin(angle / 2.0), 0.0, 0.0, math.cos(angle / 2.0))
    converted = unity_left_to_right_quaternion(*source)
    expected = (-math.sin(angle / 2.0), 0.0, 0.0, math.cos(angle / 2.0))
    assert _quat_equivalent(converted, expected)


def test_quaternion_y_rotation_is_preserved() -> None:
    angle = math.pi / 3.0
    source = (0.0, math.sin(angle / 2.0), 0.0, math.cos(angle / 2.0))
    assert _quat_equivalent(unity_left_to_right_quaternion(*source), source)


def test_transform_conversion() -> None:
    transform = RigidTransform(x=1.0, y=2.0, z=3.0)
    converted = convert_transform_unity_left_to_right(transform)

    assert converted.position == (1.0, -2.0, 3.0)
    assert _quat_equivalent(converted.orientation, (0.0, 0.0, 0.0, 1.0))


def _unity_wrist() -> RigidTransform:
    half = math.pi / 8.0
    return RigidTransform(
        x=0.1, y=0.2, z=0.3, qx=math.sin(half), qy=0.0, qz=0.0, qw=math.cos(half)
    )


def _wrist_line(side: str, wrist: RigidTransform) -> str:
    values = ", ".join(str(value) for value in (*wrist.position, *wrist.orientation))
    return f"{side} wrist:, {values}"


def test_adapter_places_landmarks_like_converted_wrist() -> None:
    wrist = _unity_wrist()
    local_points = [(0.01 * i, -0.002 * i, -0.005 * i) for i in range(21)]
    builder = HTSFrameBuilder()
    builder.push_line(_wrist_line("Left", wrist))
    builder.push_line(
        "Left landmarks:, " + ", ".join(str(v) for point in local_points for v in point)
    )

    states = builder.tracking_states(HandSide.LEFT)
    converted_wrist = convert_transform_unity_left_to_right(wrist)

    for joint, point in zip(HTS_JOINT_MAP, local_points, strict=True):
        transform = states[joint].transform
        assert transform is not None
        expected = converted_wrist.transform_point(unity_left_to_right_position(*point))
        assert np.allclose(transform.position, expected)


def test_adapter_falls_back_to_converted_wrist_orientation() -> None:
    wrist = _unity_wrist()
    builder = HTSFrameBuilder()
    builder.push_line(_wrist_line("Right", wrist))
    builder.push_line("Right landmarks:, " + ", ".join(["0"] * 63))

    state = builder.tracking_states(HandSide.RIGHT)[JointIndex.WRIST]
    converted = convert_transform_unity_left_to_right(wrist)

    assert state.transform is not None
    assert state.transform.is_close(converted)
