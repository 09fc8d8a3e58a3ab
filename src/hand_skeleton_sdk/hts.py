"""Tracking pipeline adapter for Hand Tracking Streamer (HTS) telemetry.

HTS streams two UTF-8 CSV packet kinds per hand side:

* ``Right wrist:, x, y, z, qx, qy, qz, qw``
* ``Right landmarks:, x0, y0, z0, ..., x20, y20, z20``

Coordinates are Unity left-handed and landmarks are wrist-relative. HTS
reports no metacarpals for the index to little fingers and no per-joint
orientations, so joint orientations are synthesized from bone directions and
the palm normal.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from enum import StrEnum

import numpy as np
from scipy.spatial.transform import Rotation

from hand_skeleton_sdk.catalog import JointIndex, bone_target, is_tip
from hand_skeleton_sdk.constants import (
    HTS_LANDMARK_COUNT,
    HTS_LANDMARK_VALUE_COUNT,
    HTS_WRIST_VALUE_COUNT,
)
from hand_skeleton_sdk.convert import (
    convert_transform_unity_left_to_right,
    unity_left_to_right_position,
)
from hand_skeleton_sdk.exceptions import ConfigurationError, ParseError
from hand_skeleton_sdk.frame import FrameContext
from hand_skeleton_sdk.models import HandSide, JointTrackingState
from hand_skeleton_sdk.resolver import PoseResolver
from hand_skeleton_sdk.skeleton import HandSkeleton
from hand_skeleton_sdk.spaces import ReferenceSpace, ReferenceSpaceType
from hand_skeleton_sdk.support import DeviceCapabilities
from hand_skeleton_sdk.transforms import RigidTransform

# Catalog joint for each streamed landmark, in HTS landmark order.
HTS_JOINT_MAP: tuple[JointIndex, ...] = (
    JointIndex.WRIST,
    JointIndex.THUMB_METACARPAL,
    JointIndex.THUMB_PHALANX_PROXIMAL,
    JointIndex.THUMB_PHALANX_DISTAL,
    JointIndex.THUMB_PHALANX_TIP,
    JointIndex.INDEX_PHALANX_PROXIMAL,
    JointIndex.INDEX_PHALANX_INTERMEDIATE,
    JointIndex.INDEX_PHALANX_DISTAL,
    JointIndex.INDEX_PHALANX_TIP,
    JointIndex.MIDDLE_PHALANX_PROXIMAL,
    JointIndex.MIDDLE_PHALANX_INTERMEDIATE,
    JointIndex.MIDDLE_PHALANX_DISTAL,
    JointIndex.MIDDLE_PHALANX_TIP,
    JointIndex.RING_PHALANX_PROXIMAL,
    JointIndex.RING_PHALANX_INTERMEDIATE,
    JointIndex.RING_PHALANX_DISTAL,
    JointIndex.RING_PHALANX_TIP,
    JointIndex.LITTLE_PHALANX_PROXIMAL,
    JointIndex.LITTLE_PHALANX_INTERMEDIATE,
    JointIndex.LITTLE_PHALANX_DISTAL,
    JointIndex.LITTLE_PHALANX_TIP,
)

HTS_CAPABILITIES = DeviceCapabilities(
    supported_joints=frozenset(HTS_JOINT_MAP),
    name="hand-tracking-streamer",
)

_MIN_AXIS_NORM = 1e-9


class HTSPacketType(StrEnum):
    """Packet data category emitted by HTS."""

    WRIST = "wrist"
    LANDMARKS = "landmarks"


@dataclass(frozen=True, slots=True)
class HTSWristPacket:
    """Parsed wrist packet, Unity left-handed."""

    side: HandSide
    pose: RigidTransform


@dataclass(frozen=True, slots=True)
class HTSLandmarksPacket:
    """Parsed landmark packet with 21 ``(x, y, z)`` points, Unity left-handed."""

    side: HandSide
    points: tuple[tuple[float, float, float], ...]


HTSPacket = HTSWristPacket | HTSLandmarksPacket


def parse_hts_line(line: str) -> HTSPacket:
    """Parse one HTS CSV line into a typed packet.

    :param line:
        Raw UTF-8 decoded line, for example ``"Left wrist:, 0, 0, 0, 0, 0, 0, 1"``.
    :returns:
        Wrist or landmarks packet.
    :raises ParseError:
        If the line is empty, malformed, has an unsupported label, includes
        non-float values, or does not match expected value counts.
    """
    stripped = line.strip()
    if not stripped:
        raise ParseError("Empty line.")

    head, sep, tail = stripped.partition(":")
    if not sep:
        raise ParseError("Missing ':' separator.")

    parts = head.split()
    if len(parts) != 2:
        raise ParseError(f"Invalid label: {head.strip()!r}")
    side_raw, kind_raw = parts
    try:
        side = HandSide(side_raw)
    except ValueError as exc:
        raise ParseError(f"Unsupported hand side: {side_raw!r}") from exc
    try:
        kind = HTSPacketType(kind_raw.lower())
    except ValueError as exc:
        raise ParseError(f"Unsupported packet type: {kind_raw!r}") from exc

    chunks = [chunk.strip() for chunk in tail.split(",") if chunk.strip()]
    try:
        values = [float(value) for value in chunks]
    except ValueError as exc:
        raise ParseError("Payload contains non-float values.") from exc

    if kind == HTSPacketType.WRIST:
        if len(values) != HTS_WRIST_VALUE_COUNT:
            raise ParseError(
                f"Wrist packet must contain {HTS_WRIST_VALUE_COUNT} values, got {len(values)}"
            )
        return HTSWristPacket(side=side, pose=RigidTransform(*values))

    if len(values) != HTS_LANDMARK_VALUE_COUNT:
        raise ParseError(
            f"Landmarks packet must contain {HTS_LANDMARK_VALUE_COUNT} values, got {len(values)}"
        )
    points = tuple(
        (values[i], values[i + 1], values[i + 2]) for i in range(0, HTS_LANDMARK_COUNT * 3, 3)
    )
    return HTSLandmarksPacket(side=side, points=points)


@dataclass(frozen=True, slots=True)
class HTSAdapterConfig:
    """Configuration for :class:`HTSFrameBuilder`.

    :param landmarks_are_wrist_relative:
        If ``True``, landmark points are wrist-local and are transformed by the
        wrist pose before use.
    :param convert_to_right_handed:
        If ``True``, Unity left-handed data are converted to right-handed
        coordinates.
    :param wrist_radius:
        Radius reported for the wrist joint, in meters.
    :param joint_radius:
        Radius reported for metacarpal and phalanx joints, in meters.
    :param tip_radius:
        Radius reported for fingertip joints, in meters.
    """

    landmarks_are_wrist_relative: bool = True
    convert_to_right_handed: bool = True
    wrist_radius: float = 0.02
    joint_radius: float = 0.01
    tip_radius: float = 0.008

    def __post_init__(self) -> None:
        """Validate configuration constraints.

        :raises ConfigurationError:
            If any radius is negative.
        """
        for name in ("wrist_radius", "joint_radius", "tip_radius"):
            if getattr(self, name) < 0:
                raise ConfigurationError(f"{name} must be non-negative.")

    def radius_for(self, joint: JointIndex) -> float:
        if joint is JointIndex.WRIST:
            return self.wrist_radius
        if is_tip(joint):
            return self.tip_radius
        return self.joint_radius


@dataclass(slots=True)
class _SideSample:
    """Latest packets received for one hand side."""

    wrist: RigidTransform | None = None
    points: tuple[tuple[float, float, float], ...] | None = None


class HTSFrameBuilder:
    """Collect HTS packets and build frame snapshots from the latest sample.

    A side contributes tracked joints only once both its wrist and landmark
    packets have been received.
    """

    def __init__(self, config: HTSAdapterConfig | None = None) -> None:
        self._config = config or HTSAdapterConfig()
        self._samples: dict[HandSide, _SideSample] = {
            HandSide.LEFT: _SideSample(),
            HandSide.RIGHT: _SideSample(),
        }
        self._next_sequence_id = 0
        self.base_space = ReferenceSpace(ReferenceSpaceType.LOCAL)

    def reset(self, side: HandSide | None = None) -> None:
        """Drop buffered packets for one side, or both sides if omitted."""
        if side is None:
            self._samples[HandSide.LEFT] = _SideSample()
            self._samples[HandSide.RIGHT] = _SideSample()
            return
        self._samples[side] = _SideSample()

    def push_packet(self, packet: HTSPacket) -> None:
        sample = self._samples[packet.side]
        if isinstance(packet, HTSWristPacket):
            sample.wrist = packet.pose
        else:
            sample.points = packet.points

    def push_line(self, line: str) -> None:
        """Parse and buffer one raw HTS line.

        :raises ParseError:
            If the line cannot be parsed.
        """
        self.push_packet(parse_hts_line(line))

    def has_sample(self, side: HandSide) -> bool:
        sample = self._samples[side]
        return sample.wrist is not None and sample.points is not None

    def tracking_states(self, side: HandSide) -> dict[JointIndex, JointTrackingState]:
        """Return tracking entries for one side from its latest sample.

        :returns:
            Entries for every streamed joint, or an empty mapping when the
            side has no complete sample (all joints untracked).
        """
        sample = self._samples[side]
        if sample.wrist is None or sample.points is None:
            return {}

        wrist = sample.wrist
        points = [self._world_point(wrist, point) for point in sample.points]
        if self._config.convert_to_right_handed:
            wrist = convert_transform_unity_left_to_right(wrist)
            points = [unity_left_to_right_position(*point) for point in points]

        positions = {
            joint: np.asarray(point, dtype=float)
            for joint, point in zip(HTS_JOINT_MAP, points, strict=True)
        }
        rotations = _synthesize_rotations(positions, side=side, fallback=_safe_rotation(wrist))

        states: dict[JointIndex, JointTrackingState] = {}
        for joint, position in positions.items():
            rotation = rotations.get(joint)
            states[joint] = JointTrackingState(
                transform=RigidTransform.from_position_rotation(
                    position, rotation if rotation is not None else Rotation.identity()
                ),
                radius=self._config.radius_for(joint),
                orientation_reported=rotation is not None,
            )
        return states

    def build_frame(
        self,
        skeletons: Sequence[HandSkeleton],
        *,
        spaces: Mapping[ReferenceSpace, RigidTransform | None] | None = None,
        resolver: PoseResolver | None = None,
        timestamp_ns: int | None = None,
    ) -> FrameContext:
        """Build a frame snapshot for the given skeletons.

        :param skeletons:
            Skeletons of the input sources to populate, matched by side.
        :param spaces:
            Root reference spaces of the frame. Defaults to
            :attr:`base_space` at identity.
        :param resolver:
            Resolver attached to the frame.
        :param timestamp_ns:
            Optional frame timestamp.
        :returns:
            New active frame with a fresh sequence id.
        """
        sequence_id = self._next_sequence_id
        self._next_sequence_id += 1
        return FrameContext(
            sequence_id=sequence_id,
            hands={skeleton: self.tracking_states(skeleton.side) for skeleton in skeletons},
            spaces=spaces if spaces is not None else {self.base_space: RigidTransform.identity()},
            resolver=resolver,
            timestamp_ns=timestamp_ns,
        )

    def _world_point(
        self,
        wrist: RigidTransform,
        point: tuple[float, float, float],
    ) -> tuple[float, float, float]:
        if not self._config.landmarks_are_wrist_relative:
            return point
        return _safe_rotation_transform(wrist).transform_point(point)


def _synthesize_rotations(
    positions: Mapping[JointIndex, np.ndarray],
    *,
    side: HandSide,
    fallback: Rotation,
) -> dict[JointIndex, Rotation]:
    """Derive joint rotations from landmark positions.

    -Z follows the bone toward the next streamed joint and -Y follows the
    outward palm normal. Tips are left out so the resolver inherits their
    orientation from the distal joint.
    """
    wrist = positions[JointIndex.WRIST]
    palm_out = np.cross(
        positions[JointIndex.INDEX_PHALANX_PROXIMAL] - wrist,
        positions[JointIndex.LITTLE_PHALANX_PROXIMAL] - wrist,
    )
    if side == HandSide.LEFT:
        palm_out = -palm_out

    rotations: dict[JointIndex, Rotation] = {}
    for joint, position in positions.items():
        if is_tip(joint):
            continue
        target = _streamed_bone_target(joint, positions)
        if target is None:
            rotations[joint] = fallback
            continue
        rotations[joint] = _frame_from_axes(
            bone=positions[target] - position,
            palm_out=palm_out,
            fallback=fallback,
        )
    return rotations


def _streamed_bone_target(
    joint: JointIndex,
    positions: Mapping[JointIndex, np.ndarray],
) -> JointIndex | None:
    target = bone_target(joint)
    while target is not None and target not in positions:
        target = bone_target(target)
    return target


def _frame_from_axes(*, bone: np.ndarray, palm_out: np.ndarray, fallback: Rotation) -> Rotation:
    bone_norm = np.linalg.norm(bone)
    if bone_norm < _MIN_AXIS_NORM:
        return fallback
    z_axis = -bone / bone_norm

    y_axis = -palm_out - np.dot(-palm_out, z_axis) * z_axis
    y_norm = np.linalg.norm(y_axis)
    if y_norm < _MIN_AXIS_NORM:
        return fallback
    y_axis = y_axis / y_norm

    x_axis = np.cross(y_axis, z_axis)
    return Rotation.from_matrix(np.column_stack([x_axis, y_axis, z_axis]))


def _safe_rotation(transform: RigidTransform) -> Rotation:
    if transform.orientation == (0.0, 0.0, 0.0, 0.0):
        return Rotation.identity()
    return transform.rotation


def _safe_rotation_transform(transform: RigidTransform) -> RigidTransform:
    return RigidTransform.from_position_rotation(transform.position, _safe_rotation(transform))
