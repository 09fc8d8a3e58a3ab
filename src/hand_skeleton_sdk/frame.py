"""Frame-scoped tracking snapshot and per-frame pose queries."""

from __future__ import annotations

from collections.abc import Callable, Hashable, Mapping, Sequence
from types import MappingProxyType
from typing import Any, TypeVar

import numpy as np

from hand_skeleton_sdk.catalog import JointIndex, check_index
from hand_skeleton_sdk.exceptions import ConfigurationError, InactiveFrameError, UnknownSpaceError
from hand_skeleton_sdk.models import JointPose, JointTrackingState, Pose
from hand_skeleton_sdk.resolver import PoseResolver
from hand_skeleton_sdk.skeleton import HandSkeleton
from hand_skeleton_sdk.spaces import JointSpace, ReferenceSpace, Space
from hand_skeleton_sdk.transforms import RigidTransform

_UNTRACKED = JointTrackingState.untracked()
_MISSING = object()
_T = TypeVar("_T")


class FrameContext:
    """Immutable tracking snapshot for one frame callback.

    The tracking pipeline builds one context per frame and ends it when the
    callback returns. Every query, and every read of a pose produced by this
    frame, checks that the frame is still active.
    """

    def __init__(
        self,
        *,
        sequence_id: int = 0,
        hands: Mapping[HandSkeleton, Mapping[int, JointTrackingState]] | None = None,
        spaces: Mapping[ReferenceSpace, RigidTransform | None] | None = None,
        resolver: PoseResolver | None = None,
        timestamp_ns: int | None = None,
    ) -> None:
        """Create a frame snapshot.

        :param sequence_id:
            Monotonic frame number supplied by the pipeline.
        :param hands:
            Per-skeleton joint tracking entries keyed by joint index. Joints
            without an entry are untracked this frame.
        :param spaces:
            Transforms of root reference spaces relative to the pipeline base
            frame. ``None`` marks a root without a valid transform this frame.
        :param resolver:
            Resolver used for pose queries. A default resolver is created when
            omitted.
        :param timestamp_ns:
            Optional predicted display time of the frame.
        :raises JointIndexError:
            If a tracking entry uses an index outside the catalog.
        :raises ConfigurationError:
            If ``spaces`` contains an offset space instead of a root.
        """
        self._sequence_id = sequence_id
        self._timestamp_ns = timestamp_ns
        self._resolver = resolver or PoseResolver()
        self._active = True
        self._cache: dict[Hashable, Any] = {}

        self._hands: dict[HandSkeleton, Mapping[JointIndex, JointTrackingState]] = {}
        for skeleton, states in (hands or {}).items():
            self._hands[skeleton] = MappingProxyType(
                {check_index(index): state for index, state in states.items()}
            )

        self._spaces: dict[ReferenceSpace, RigidTransform | None] = {}
        for space, transform in (spaces or {}).items():
            if space.parent is not None:
                raise ConfigurationError("Frame spaces must be root reference spaces.")
            self._spaces[space] = transform

    @property
    def sequence_id(self) -> int:
        return self._sequence_id

    @property
    def timestamp_ns(self) -> int | None:
        return self._timestamp_ns

    @property
    def active(self) -> bool:
        return self._active

    @property
    def resolver(self) -> PoseResolver:
        return self._resolver

    @property
    def skeletons(self) -> tuple[HandSkeleton, ...]:
        return tuple(self._hands)

    def end(self) -> None:
        """Invalidate the frame and every pose it produced."""
        self._active = False
        self._cache.clear()

    def ensure_active(self) -> None:
        """Raise :class:`InactiveFrameError` if the frame has ended."""
        if not self._active:
            raise InactiveFrameError(f"Frame {self._sequence_id} is no longer active.")

    def __enter__(self) -> FrameContext:
        return self

    def __exit__(self, *_: object) -> None:
        self.end()

    def joint_state(self, joint: JointSpace) -> JointTrackingState:
        """Return this frame's tracking entry for one joint space.

        :raises UnknownSpaceError:
            If the joint's skeleton is not part of this frame or the joint is
            not the space its skeleton holds for that index.
        """
        if not joint.skeleton.owns(joint):
            raise UnknownSpaceError(f"{joint!r} was not produced by its skeleton.")
        return self.joint_state_at(joint.skeleton, joint.index)

    def joint_state_at(self, skeleton: HandSkeleton, index: int) -> JointTrackingState:
        """Return the tracking entry for one skeleton slot, untracked if absent."""
        states = self._hands.get(skeleton)
        if states is None:
            raise UnknownSpaceError(f"{skeleton!r} is not tracked by frame {self._sequence_id}.")
        return states.get(check_index(index), _UNTRACKED)

    def root_transform(self, space: ReferenceSpace) -> RigidTransform | None:
        """Return the base-frame transform of a root reference space.

        :raises UnknownSpaceError:
            If the space is not provided by this frame.
        """
        transform = self._spaces.get(space, _MISSING)
        if transform is _MISSING:
            raise UnknownSpaceError(f"{space!r} is not provided by frame {self._sequence_id}.")
        return transform  # type: ignore[return-value]

    def get_pose(self, space: Space, base_space: Space) -> Pose | None:
        """Return the pose of any space relative to ``base_space``, or ``None``.

        Repeated queries within the frame return the same result.
        """
        self.ensure_active()
        return self._memoized(
            ("pose", space, base_space),
            lambda: self._resolver.resolve_pose(space, base_space, self),
        )

    def get_joint_pose(self, joint: JointSpace, base_space: Space) -> JointPose | None:
        """Return the pose and radius of a joint relative to ``base_space``, or ``None``."""
        self.ensure_active()
        return self._memoized(
            ("joint", joint, base_space),
            lambda: self._resolver.resolve_joint_pose(joint, base_space, self),
        )

    def fill_poses(
        self,
        spaces: Sequence[Space],
        base_space: Space,
        transforms: np.ndarray,
    ) -> bool:
        """Write column-major 4x4 matrices for many spaces into one buffer.

        :param spaces:
            Spaces to locate.
        :param base_space:
            Space the poses are expressed in.
        :param transforms:
            Contiguous float array with ``16 * len(spaces)`` elements. Slots of
            spaces without a pose are filled with NaN.
        :returns:
            ``True`` when every space had a pose.
        :raises ValueError:
            If ``transforms`` has the wrong size or is not contiguous.
        """
        flat = _flat_view(transforms, 16 * len(spaces))
        complete = True
        for slot, space in enumerate(spaces):
            pose = self.get_pose(space, base_space)
            target = flat[slot * 16 : (slot + 1) * 16]
            if pose is None:
                target[:] = np.nan
                complete = False
                continue
            target[:] = pose.matrix.ravel(order="F")
        return complete

    def fill_joint_radii(self, joints: Sequence[JointSpace], radii: np.ndarray) -> bool:
        """Write joint radii into one buffer, NaN for joints without a pose this frame.

        A joint counts as present exactly when :meth:`get_joint_pose` resolves it.

        :returns:
            ``True`` when every joint resolved.
        """
        self.ensure_active()
        flat = _flat_view(radii, len(joints))
        complete = True
        for slot, joint in enumerate(joints):
            pose = self.get_joint_pose(joint, joint)
            if pose is None:
                flat[slot] = np.nan
                complete = False
                continue
            flat[slot] = pose.radius
        return complete

    def _memoized(self, key: Hashable, compute: Callable[[], _T]) -> _T:
        if key not in self._cache:
            self._cache[key] = compute()
        return self._cache[key]

    def __repr__(self) -> str:
        state = "active" if self._active else "ended"
        return f"FrameContext(sequence_id={self._sequence_id}, {state}, hands={len(self._hands)})"


def _flat_view(values: np.ndarray, expected_size: int) -> np.ndarray:
    if values.size != expected_size:
        raise ValueError(f"Expected buffer of {expected_size} values, got {values.size}")
    flat = values.reshape(-1)
    if not np.shares_memory(flat, values):
        raise ValueError("Buffer must be contiguous.")
    return flat
