"""Typed value models for tracking snapshots and resolved poses."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import StrEnum
from typing import TYPE_CHECKING, Any

import numpy as np

from hand_skeleton_sdk.transforms import RigidTransform

if TYPE_CHECKING:
    from hand_skeleton_sdk.frame import FrameContext


class HandSide(StrEnum):
    """Logical side for a tracked hand."""

    LEFT = "Left"
    RIGHT = "Right"


@dataclass(frozen=True, slots=True)
class JointTrackingState:
    """Per-frame tracking entry for one joint.

    :param transform:
        Raw joint transform relative to the pipeline base frame, or ``None``
        when the joint is not tracked this frame.
    :param radius:
        Distance from the joint center to the skin surface, in meters.
    :param orientation_reported:
        ``False`` when the pipeline produced only a position and the
        orientation part of ``transform`` carries no information.
    """

    transform: RigidTransform | None = None
    radius: float = 0.0
    orientation_reported: bool = True

    def __post_init__(self) -> None:
        if self.radius < 0.0 or not np.isfinite(self.radius):
            raise ValueError(f"radius must be a finite value >= 0, got {self.radius!r}")

    @property
    def tracked(self) -> bool:
        return self.transform is not None

    @classmethod
    def untracked(cls) -> JointTrackingState:
        return cls()

    def to_dict(self) -> dict[str, Any]:
        return {
            "transform": None if self.transform is None else self.transform.to_dict(),
            "radius": self.radius,
            "orientation_reported": self.orientation_reported,
        }

    @classmethod
    def from_dict(cls, values: Mapping[str, Any]) -> JointTrackingState:
        raw_transform = values.get("transform")
        return cls(
            transform=None if raw_transform is None else RigidTransform.from_dict(raw_transform),
            radius=float(values.get("radius", 0.0)),
            orientation_reported=bool(values.get("orientation_reported", True)),
        )


@dataclass(frozen=True, slots=True)
class Pose:
    """Pose of one space relative to a reference space, valid for one frame.

    The transform is re-validated on every read: once the producing frame has
    ended, accessing it raises :class:`~hand_skeleton_sdk.InactiveFrameError`.
    """

    frame: FrameContext = field(repr=False, compare=False)
    _transform: RigidTransform

    @property
    def transform(self) -> RigidTransform:
        self.frame.ensure_active()
        return self._transform

    @property
    def matrix(self) -> np.ndarray:
        """Homogeneous 4x4 matrix of :attr:`transform`."""
        return self.transform.as_matrix()


@dataclass(frozen=True, slots=True)
class JointPose(Pose):
    """Joint pose with the joint radius attached."""

    radius: float
