from __future__ import annotations

import numpy as np
import pytest

from hand_skeleton_sdk import (
    HTS_CAPABILITIES,
    HTS_JOINT_MAP,
    ConfigurationError,
    HandSide,
    HandSkeleton,
    HTSAdapterConfig,
    HTSFrameBuilder,
    HTSLandmarksPacket,
    HTSWristPacket,
    InputSource,
    JointIndex,
    ParseError,
    SessionFeatures,
    parse_hts_line,
)

_FINGER_OFFSETS = (-0.02, 0.0, 0.015, 0.03)
_FINGER_DEPTHS = (-0.08, -0.11, -0.13, -0.15)

# Wrist at the origin, fingers along -Z with the palm facing -Y.
_RIGHT_HAND_POINTS: tuple[tuple[float, float, float], ...] = (
    (0.0, 0.0, 0.0),
    (-0.03, 0.0, -0.02),
    (-0.05, 0.0, -0.04),
    (-0.06, 0.0, -0.06),
    (-0.07, 0.0, -0.08),
    *((x, 0.0, z) for x in _FINGER_OFFSETS for z in _FINGER_DEPTHS),
)


def _wrist_line(side: str = "Right") -> str:
    return f"{side} wrist:, 0, 0, 0, 0, 0, 0, 1"


def _landmarks_line(side: str = "Right") -> str:
    values = ", ".join(str(value) for point in _RIGHT_HAND_POINTS for value in point)
    return f"{side} landmarks:, {values}"


def _right_hand() -> HandSkeleton:
    source = InputSource.create(
        HandSide.RIGHT,
        HTS_CAPABILITIES,
        features=SessionFeatures(hand_tracking=True),
    )
    assert source.hand is not None
    return source.hand


def test_parse_wrist_packet() -> None:
    packet = parse_hts_line("Right wrist:, 0.1, 0.2, 0.3, 0.0, 0.0, 0.0, 1.0")

    assert isinstance(packet, HTSWristPacket)
    assert packet.side == HandSide.RIGHT
    assert packet.pose.position == (0.1, 0.2, 0.3)
    assert packet.pose.qw == 1.0


def test_parse_landmarks_packet() -> None:
    values = ", ".join(str(i / 100.0) for i in range(63))
    packet = parse_hts_line(f"Left landmarks:, {values}")

    assert isinstance(packet, HTSLandmarksPacket)
    assert packet.side == HandSide.LEFT
    assert len(packet.points) == 21
    assert packet.points[0] == (0.0, 0.01, 0.02)


def test_parse_trailing_comma_and_spaces() -> None:
    packet = parse_hts_line(" Left wrist: 1, 2, 3, 4, 5, 6, 7, ")

    assert isinstance(packet, HTSWristPacket)
    assert packet.side == HandSide.LEFT
    assert packet.pose.qw == 7.0


@pytest.mark.parametrize(
    "line",
    [
        "",
        "Left wrist 1,2,3",
        "Middle wrist:, 1,2,3,4,5,6,7",
        "Right unknown:, 1,2,3",
        "Right wrist:, 1,2,3",
        "Left landmarks:, 1,2,3",
        "Right wrist:, 1,2,3,4,5,6,foo",
    ],
)
def test_parse_invalid_lines_raise(line: str) -> None:
    with pytest.raises(ParseError):
        parse_hts_line(line)


def test_hts_capabilities_skip_finger_metacarpals() -> None:
    hand = _right_hand()

    assert len(HTS_JOINT_MAP) == 21
    assert hand[JointIndex.THUMB_METACARPAL] is not None
    assert hand[JointIndex.INDEX_METACARPAL] is None
    assert hand[JointIndex.LITTLE_METACARPAL] is None
    assert len(hand.supported_joints()) == 21


def test_incomplete_sample_leaves_joints_untracked() -> None:
    builder = HTSFrameBuilder()
    hand = _right_hand()
    builder.push_line(_wrist_line())

    assert not builder.has_sample(HandSide.RIGHT)
    assert builder.tracking_states(HandSide.RIGHT) == {}

    with builder.build_frame([hand]) as frame:
        assert frame.get_joint_pose(hand[0], builder.base_space) is None  # type: ignore[arg-type]


def test_synthesized_orientations_follow_bone_and_palm() -> None:
    builder = HTSFrameBuilder(HTSAdapterConfig(convert_to_right_handed=False))
    hand = _right_hand()
    builder.push_line(_wrist_line())
    builder.push_line(_landmarks_line())

    with builder.build_frame([hand]) as frame:
        wrist = frame.get_joint_pose(hand[JointIndex.WRIST], builder.base_space)  # type: ignore[arg-type]
        proximal = frame.get_joint_pose(
            hand[JointIndex.INDEX_PHALANX_PROXIMAL],  # type: ignore[arg-type]
            builder.base_space,
        )

        assert wrist is not None and proximal is not None
        assert np.allclose(wrist.transform.axis((0.0, 0.0, -1.0)), (0.0, 0.0, -1.0))
        assert np.allclose(wrist.transform.axis((0.0, -1.0, 0.0)), (0.0, -1.0, 0.0))
        assert np.allclose(proximal.transform.position, (-0.02, 0.0, -0.08))
        assert np.allclose(proximal.transform.axis((0.0, 0.0, -1.0)), (0.0, 0.0, -1.0))


def test_tip_inherits_distal_orientation_and_config_radii() -> None:
    config = HTSAdapterConfig(
        convert_to_right_handed=False, wrist_radius=0.03, joint_radius=0.012, tip_radius=0.007
    )
    builder = HTSFrameBuilder(config)
    hand = _right_hand()
    builder.push_line(_wrist_line())
    builder.push_line(_landmarks_line())

    states = builder.tracking_states(HandSide.RIGHT)
    assert not states[JointIndex.RING_PHALANX_TIP].orientation_reported
    assert states[JointIndex.RING_PHALANX_DISTAL].orientation_reported

    with builder.build_frame([hand]) as frame:
        tip = frame.get_joint_pose(hand[JointIndex.RING_PHALANX_TIP], builder.base_space)  # type: ignore[arg-type]
        distal = frame.get_joint_pose(
            hand[JointIndex.RING_PHALANX_DISTAL],  # type: ignore[arg-type]
            builder.base_space,
        )
        wrist = frame.get_joint_pose(hand[JointIndex.WRIST], builder.base_space)  # type: ignore[arg-type]

        assert tip is not None and distal is not None and wrist is not None
        assert np.allclose(tip.transform.position, (0.015, 0.0, -0.15))
        assert tip.transform.orientation == distal.transform.orientation
        assert tip.radius == pytest.approx(0.007)
        assert distal.radius == pytest.approx(0.012)
        assert wrist.radius == pytest.approx(0.03)


def test_landmarks_are_placed_by_wrist_pose() -> None:
    builder = HTSFrameBuilder(HTSAdapterConfig(convert_to_right_handed=False))
    builder.push_line("Right wrist:, 1, 2, 3, 0, 0, 0, 1")
    builder.push_line(_landmarks_line())

    states = builder.tracking_states(HandSide.RIGHT)
    middle_tip = states[JointIndex.MIDDLE_PHALANX_TIP].transform

    assert middle_tip is not None
    assert np.allclose(middle_tip.position, (1.0, 2.0, 2.85))


def test_right_handed_conversion_flips_y() -> None:
    builder = HTSFrameBuilder()
    builder.push_line("Right wrist:, 0, 0.5, 0, 0, 0, 0, 1")
    builder.push_line(_landmarks_line())

    wrist = builder.tracking_states(HandSide.RIGHT)[JointIndex.WRIST].transform

    assert wrist is not None
    assert np.allclose(wrist.position, (0.0, -0.5, 0.0))


def test_build_frame_increments_sequence_and_reset_clears_side() -> None:
    builder = HTSFrameBuilder()
    hand = _right_hand()
    builder.push_line(_wrist_line())
    builder.push_line(_landmarks_line())

    first = builder.build_frame([hand], timestamp_ns=10)
    second = builder.build_frame([hand])

    assert (first.sequence_id, second.sequence_id) == (0, 1)
    assert first.timestamp_ns == 10
    assert builder.has_sample(HandSide.RIGHT)
    assert not builder.has_sample(HandSide.LEFT)

    builder.reset(HandSide.RIGHT)
    assert not builder.has_sample(HandSide.RIGHT)


def test_adapter_config_rejects_negative_radius() -> None:
    with pytest.raises(ConfigurationError):
        HTSAdapterConfig(tip_radius=-0.1)
