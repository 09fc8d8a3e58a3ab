"""Per input-source hand skeleton: 25 joint slots backed by a support registry."""

from __future__ import annotations

from collections.abc import Iterator

from hand_skeleton_sdk.catalog import JointIndex, check_index, joint_index
from hand_skeleton_sdk.constants import JOINT_COUNT, JOINT_NAMES
from hand_skeleton_sdk.models import HandSide
from hand_skeleton_sdk.spaces import JointSpace
from hand_skeleton_sdk.support import JointSupportRegistry


class HandSkeleton:
    """Fixed-length collection of joint spaces for one input source.

    Slot ``i`` holds a :class:`JointSpace` when the registry supports joint
    ``i`` and ``None`` otherwise. The verdict and the space identity never
    change for the lifetime of the skeleton.
    """

    __slots__ = ("_registry", "_side", "_slots")

    def __init__(self, registry: JointSupportRegistry, side: HandSide) -> None:
        """Create a skeleton and its joint spaces.

        :param registry:
            Support verdicts computed once for the owning input source.
        :param side:
            Hand side of the owning input source.
        """
        self._registry = registry
        self._side = side
        self._slots: tuple[JointSpace | None, ...] = tuple(
            JointSpace(index=joint, skeleton=self) if registry.is_supported(joint) else None
            for joint in JointIndex
        )

    @property
    def side(self) -> HandSide:
        return self._side

    @property
    def registry(self) -> JointSupportRegistry:
        return self._registry

    def joint_space(self, index: int) -> JointSpace | None:
        """Return the joint space for one catalog index.

        :param index:
            Joint index in ``[0, 24]``.
        :returns:
            The memoized :class:`JointSpace`, or ``None`` if unsupported.
        :raises JointIndexError:
            If ``index`` is outside the catalog.
        """
        return self._slots[check_index(index)]

    def __getitem__(self, index: int) -> JointSpace | None:
        return self.joint_space(index)

    def __len__(self) -> int:
        return JOINT_COUNT

    def __iter__(self) -> Iterator[JointSpace | None]:
        return iter(self._slots)

    def get(self, name: JointIndex | str) -> JointSpace | None:
        """Return the joint space for a canonical joint name.

        :raises ValueError:
            If the name is unknown.
        """
        return self._slots[joint_index(name)]

    def keys(self) -> tuple[str, ...]:
        return JOINT_NAMES

    def items(self) -> Iterator[tuple[str, JointSpace | None]]:
        return zip(JOINT_NAMES, self._slots, strict=True)

    def supported_joints(self) -> tuple[JointSpace, ...]:
        return tuple(space for space in self._slots if space is not None)

    def owns(self, space: JointSpace) -> bool:
        """Return whether ``space`` is the space this skeleton holds in its slot."""
        return space.skeleton is self and self._slots[space.index] is space

    def __repr__(self) -> str:
        return (
            f"HandSkeleton(side={self._side.value}, "
            f"supported={len(self.supported_joints())}/{JOINT_COUNT})"
        )
