"""Pose resolution for joint and reference spaces against one frame snapshot."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, replace
from enum import StrEnum
from typing import TYPE_CHECKING

from hand_skeleton_sdk.catalog import JointIndex, bone_parent
from hand_skeleton_sdk.exceptions import ConfigurationError, UnknownSpaceError
from hand_skeleton_sdk.models import JointPose, Pose
from hand_skeleton_sdk.spaces import JointSpace, ReferenceSpace, Space
from hand_skeleton_sdk.transforms import RigidTransform

if TYPE_CHECKING:
    from hand_skeleton_sdk.frame import FrameContext


class TipOrientationPolicy(StrEnum):
    """How tip joints obtain their orientation."""

    INHERIT = "inherit"
    PREFER_REPORTED = "prefer_reported"


class ResolverEventKind(StrEnum):
    """Structured log event kinds emitted by :class:`PoseResolver`."""

    POSE_RESOLVED = "pose_resolved"
    JOINT_UNTRACKED = "joint_untracked"
    SPACE_UNAVAILABLE = "space_unavailable"
    TIP_ORIENTATION_SYNTHESIZED = "tip_orientation_synthesized"
    TIP_ORIENTATION_UNAVAILABLE = "tip_orientation_unavailable"


@dataclass(frozen=True, slots=True)
class ResolverLogEvent:
    """Structured resolver log event for observability hooks.

    :param kind:
        Event kind discriminator.
    :param message:
        Human-readable event message.
    :param frame_sequence_id:
        Sequence id of the frame being queried.
    :param joint:
        Optional joint associated with the event.
    :param space:
        Optional space associated with the event.
    """

    kind: ResolverEventKind
    message: str
    frame_sequence_id: int
    joint: JointIndex | None = None
    space: Space | None = None


@dataclass(frozen=True, slots=True)
class ResolverStats:
    """Observable counters for :class:`PoseResolver` runtime behavior."""

    poses_resolved: int = 0
    joint_poses_resolved: int = 0
    untracked_queries: int = 0
    unavailable_spaces: int = 0
    tips_synthesized: int = 0


@dataclass(frozen=True, slots=True)
class PoseResolverConfig:
    """Configuration for :class:`PoseResolver`.

    :param tip_orientation:
        ``inherit`` always gives tips the orientation of the distal joint of
        the same finger. ``prefer_reported`` keeps device-reported tip
        orientations and only synthesizes missing ones.
    :param log_hook:
        Optional structured log callback invoked for resolution events.
    """

    tip_orientation: TipOrientationPolicy = TipOrientationPolicy.INHERIT
    log_hook: Callable[[ResolverLogEvent], None] | None = None

    def __post_init__(self) -> None:
        """Validate configuration constraints.

        :raises ConfigurationError:
            If ``tip_orientation`` is not a known policy.
        """
        try:
            policy = TipOrientationPolicy(self.tip_orientation)
        except ValueError as exc:
            raise ConfigurationError(
                f"Unknown tip orientation policy: {self.tip_orientation!r}"
            ) from exc
        object.__setattr__(self, "tip_orientation", policy)
        if self.log_hook is not None and not callable(self.log_hook):
            raise ConfigurationError("log_hook must be callable.")


class PoseResolver:
    """Resolve poses of spaces relative to reference spaces for one frame.

    Support and tracking are gated independently: a supported joint that is
    untracked this frame resolves to ``None``.
    """

    def __init__(self, config: PoseResolverConfig | None = None) -> None:
        self._config = config or PoseResolverConfig()
        self._stats = ResolverStats()

    @property
    def config(self) -> PoseResolverConfig:
        return self._config

    def resolve_pose(
        self,
        space: Space,
        relative_to: Space,
        frame: FrameContext,
    ) -> Pose | None:
        """Resolve the pose of any space relative to a reference space.

        :param space:
            Joint or reference space to locate.
        :param relative_to:
            Space the pose is expressed in.
        :param frame:
            Active frame snapshot.
        :returns:
            Pose, or ``None`` when either space has no valid transform this
            frame.
        :raises UnknownSpaceError:
            If either space is not known to ``frame``.
        :raises InactiveFrameError:
            If ``frame`` has ended.
        """
        frame.ensure_active()
        space_base = self._base_transform(space, frame)
        reference_base = self._base_transform(relative_to, frame)
        if space_base is None or reference_base is None:
            return None

        self._stats = self._stats_with(poses_resolved=self._stats.poses_resolved + 1)
        self._emit_log(
            ResolverLogEvent(
                kind=ResolverEventKind.POSE_RESOLVED,
                message="Resolved pose.",
                frame_sequence_id=frame.sequence_id,
                space=space,
            )
        )
        return Pose(frame, space_base.relative_to(reference_base))

    def resolve_joint_pose(
        self,
        joint: JointSpace,
        relative_to: Space,
        frame: FrameContext,
    ) -> JointPose | None:
        """Resolve a joint pose and its radius relative to a reference space.

        :param joint:
            Joint space produced by a skeleton that ``frame`` tracks.
        :param relative_to:
            Space the pose is expressed in.
        :param frame:
            Active frame snapshot.
        :returns:
            Joint pose with radius, or ``None`` when the joint is untracked
            (or the reference space is unavailable) this frame.
        :raises UnknownSpaceError:
            If ``joint`` is not a joint space of a skeleton in ``frame``.
        """
        if not isinstance(joint, JointSpace):
            raise UnknownSpaceError(f"Expected a JointSpace, got {type(joint).__name__}")

        frame.ensure_active()
        joint_base = self._joint_transform(joint, frame)
        reference_base = self._base_transform(relative_to, frame)
        if joint_base is None or reference_base is None:
            return None

        state = frame.joint_state(joint)
        self._stats = self._stats_with(
            joint_poses_resolved=self._stats.joint_poses_resolved + 1
        )
        self._emit_log(
            ResolverLogEvent(
                kind=ResolverEventKind.POSE_RESOLVED,
                message="Resolved joint pose.",
                frame_sequence_id=frame.sequence_id,
                joint=joint.index,
                space=joint,
            )
        )
        return JointPose(frame, joint_base.relative_to(reference_base), state.radius)

    def get_stats(self) -> ResolverStats:
        """Return a snapshot of current resolver counters."""
        return self._stats

    def reset_stats(self) -> None:
        """Reset resolver counters to zero values."""
        self._stats = ResolverStats()

    def _base_transform(self, space: Space, frame: FrameContext) -> RigidTransform | None:
        """Return the transform of ``space`` relative to the pipeline base frame."""
        if isinstance(space, JointSpace):
            return self._joint_transform(space, frame)

        if isinstance(space, ReferenceSpace):
            if space.parent is None:
                root = frame.root_transform(space)
                if root is None:
                    self._stats = self._stats_with(
                        unavailable_spaces=self._stats.unavailable_spaces + 1
                    )
                    self._emit_log(
                        ResolverLogEvent(
                            kind=ResolverEventKind.SPACE_UNAVAILABLE,
                            message="Reference space has no transform this frame.",
                            frame_sequence_id=frame.sequence_id,
                            space=space,
                        )
                    )
                return root

            parent = self._base_transform(space.parent, frame)
            if parent is None:
                return None
            return parent.compose(space.origin_offset)

        raise UnknownSpaceError(f"Unsupported space type: {type(space).__name__}")

    def _joint_transform(self, joint: JointSpace, frame: FrameContext) -> RigidTransform | None:
        state = frame.joint_state(joint)
        if state.transform is None:
            self._stats = self._stats_with(untracked_queries=self._stats.untracked_queries + 1)
            self._emit_log(
                ResolverLogEvent(
                    kind=ResolverEventKind.JOINT_UNTRACKED,
                    message="Joint is not tracked this frame.",
                    frame_sequence_id=frame.sequence_id,
                    joint=joint.index,
                    space=joint,
                )
            )
            return None

        if not joint.convention.inherits_bone:
            return state.transform

        if (
            self._config.tip_orientation == TipOrientationPolicy.PREFER_REPORTED
            and state.orientation_reported
        ):
            return state.transform

        source = self._inherited_orientation(joint, frame)
        if source is None:
            if state.orientation_reported:
                return state.transform
            self._emit_log(
                ResolverLogEvent(
                    kind=ResolverEventKind.TIP_ORIENTATION_UNAVAILABLE,
                    message="No tracked joint to inherit tip orientation from.",
                    frame_sequence_id=frame.sequence_id,
                    joint=joint.index,
                    space=joint,
                )
            )
            return None

        self._stats = self._stats_with(tips_synthesized=self._stats.tips_synthesized + 1)
        self._emit_log(
            ResolverLogEvent(
                kind=ResolverEventKind.TIP_ORIENTATION_SYNTHESIZED,
                message="Tip orientation inherited from the distal segment.",
                frame_sequence_id=frame.sequence_id,
                joint=joint.index,
                space=joint,
            )
        )
        return state.transform.with_orientation(source)

    def _inherited_orientation(
        self,
        joint: JointSpace,
        frame: FrameContext,
    ) -> RigidTransform | None:
        """Return the orientation source of a tip joint.

        A tracked distal joint is used as is, reported or not, so the tip
        continues exactly the transform that joint resolves to. Otherwise the
        walk continues toward the wrist for a tracked, reported orientation.
        """
        distal = joint.convention.bone_source
        distal_state = frame.joint_state_at(joint.skeleton, distal)
        if distal_state.transform is not None:
            return distal_state.transform

        current = bone_parent(distal)
        while current is not None:
            state = frame.joint_state_at(joint.skeleton, current)
            if state.transform is not None and state.orientation_reported:
                return state.transform
            current = bone_parent(current)
        return None

    def _stats_with(self, **changes: int) -> ResolverStats:
        """Return updated stats snapshot with selected counter changes."""
        return replace(self._stats, **changes)

    def _emit_log(self, event: ResolverLogEvent) -> None:
        """Emit one structured log event if a hook is configured."""
        if self._config.log_hook is not None:
            self._config.log_hook(event)
