"""Coordinate space handles: reference spaces and joint spaces."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum
from typing import TYPE_CHECKING

from hand_skeleton_sdk.catalog import JointIndex, bone_source, bone_target, check_index, joint_name
from hand_skeleton_sdk.models import HandSide
from hand_skeleton_sdk.transforms import RigidTransform

if TYPE_CHECKING:
    from hand_skeleton_sdk.skeleton import HandSkeleton


class Space:
    """Base class for every queryable coordinate frame.

    Spaces are handles: they compare and hash by identity and carry no
    per-frame data.
    """

    __slots__ = ()


class ReferenceSpaceType(StrEnum):
    """Root reference space kinds a tracking pipeline may provide."""

    VIEWER = "viewer"
    LOCAL = "local"
    LOCAL_FLOOR = "local-floor"
    BOUNDED_FLOOR = "bounded-floor"
    UNBOUNDED = "unbounded"


@dataclass(frozen=True, slots=True, eq=False)
class ReferenceSpace(Space):
    """Reference space, either a pipeline root or an offset of another space.

    :param type:
        Root kind. Offset spaces inherit the kind of their parent.
    :param parent:
        Parent space for offset spaces, ``None`` for roots.
    :param origin_offset:
        Transform of this space's origin in the parent space.
    """

    type: ReferenceSpaceType = ReferenceSpaceType.LOCAL
    parent: ReferenceSpace | None = None
    origin_offset: RigidTransform = field(default_factory=RigidTransform.identity)

    @property
    def root(self) -> ReferenceSpace:
        space = self
        while space.parent is not None:
            space = space.parent
        return space

    def offset(self, origin_offset: RigidTransform) -> ReferenceSpace:
        """Return a derived space whose origin sits at ``origin_offset`` in this space."""
        return ReferenceSpace(type=self.type, parent=self, origin_offset=origin_offset)


@dataclass(frozen=True, slots=True)
class OrientationConvention:
    """Local axis semantics of a joint space.

    Local -Y points outward from the palm, perpendicular to the skin. Local
    -Z points away from the wrist along the bone of :attr:`bone_source`.

    :param joint:
        Joint the convention belongs to.
    :param bone_source:
        Joint whose bone defines -Z. Tips use the distal joint of the same
        finger.
    :param bone_target:
        Next joint toward the fingertip, ``None`` for tips.
    """

    joint: JointIndex
    bone_source: JointIndex
    bone_target: JointIndex | None
    palm_outward_axis: tuple[float, float, float] = (0.0, -1.0, 0.0)
    bone_axis: tuple[float, float, float] = (0.0, 0.0, -1.0)

    @classmethod
    def for_joint(cls, index: int) -> OrientationConvention:
        joint = check_index(index)
        return cls(joint=joint, bone_source=bone_source(joint), bone_target=bone_target(joint))

    @property
    def inherits_bone(self) -> bool:
        """Whether -Z continues the previous segment instead of a bone of its own."""
        return self.bone_source != self.joint


@dataclass(frozen=True, slots=True, eq=False)
class JointSpace(Space):
    """Coordinate frame bound to one catalog joint of one skeleton.

    Instances are created by :class:`~hand_skeleton_sdk.HandSkeleton` only and
    keep the same identity for the lifetime of the skeleton.
    """

    index: JointIndex
    skeleton: HandSkeleton = field(repr=False)
    convention: OrientationConvention = field(init=False, repr=False)

    def __post_init__(self) -> None:
        joint = check_index(self.index)
        object.__setattr__(self, "index", joint)
        object.__setattr__(self, "convention", OrientationConvention.for_joint(joint))

    @property
    def name(self) -> str:
        return joint_name(self.index)

    @property
    def side(self) -> HandSide:
        return self.skeleton.side
