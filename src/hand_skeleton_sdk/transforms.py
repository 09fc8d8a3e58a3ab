"""Rigid transform value type backed by numpy and scipy rotations."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from typing import Any

import numpy as np
from scipy.spatial.transform import Rotation


@dataclass(frozen=True, slots=True)
class RigidTransform:
    """Cartesian position and unit orientation quaternion ``(qx, qy, qz, qw)``.

    A transform maps points from its local frame into its parent frame:
    ``p_parent = R * p_local + t``.
    """

    x: float = 0.0
    y: float = 0.0
    z: float = 0.0
    qx: float = 0.0
    qy: float = 0.0
    qz: float = 0.0
    qw: float = 1.0

    @classmethod
    def identity(cls) -> RigidTransform:
        return cls()

    @classmethod
    def from_position_rotation(
        cls,
        position: Sequence[float] | np.ndarray,
        rotation: Rotation,
    ) -> RigidTransform:
        """Build a transform from a position vector and a scipy rotation.

        :param position:
            ``(x, y, z)`` translation.
        :param rotation:
            Orientation of the local frame in the parent frame.
        :returns:
            Transform with a normalized quaternion.
        """
        qx, qy, qz, qw = (float(value) for value in rotation.as_quat())
        px, py, pz = (float(value) for value in position)
        return cls(x=px, y=py, z=pz, qx=qx, qy=qy, qz=qz, qw=qw)

    @classmethod
    def from_matrix(cls, matrix: np.ndarray) -> RigidTransform:
        """Build a transform from a homogeneous 4x4 matrix."""
        values = np.asarray(matrix, dtype=float)
        if values.shape != (4, 4):
            raise ValueError(f"Expected a 4x4 matrix, got shape {values.shape}")
        return cls.from_position_rotation(values[:3, 3], Rotation.from_matrix(values[:3, :3]))

    @property
    def position(self) -> tuple[float, float, float]:
        return (self.x, self.y, self.z)

    @property
    def orientation(self) -> tuple[float, float, float, float]:
        return (self.qx, self.qy, self.qz, self.qw)

    @property
    def rotation(self) -> Rotation:
        return Rotation.from_quat(self.orientation)

    def as_matrix(self) -> np.ndarray:
        """Return the homogeneous 4x4 matrix of this transform."""
        matrix = np.eye(4)
        matrix[:3, :3] = self.rotation.as_matrix()
        matrix[:3, 3] = self.position
        return matrix

    def compose(self, other: RigidTransform) -> RigidTransform:
        """Return ``self * other``: apply ``other`` first, then ``self``."""
        rotation = self.rotation
        position = rotation.apply(other.position) + np.asarray(self.position)
        return RigidTransform.from_position_rotation(position, rotation * other.rotation)

    def inverse(self) -> RigidTransform:
        inverse_rotation = self.rotation.inv()
        position = -inverse_rotation.apply(self.position)
        return RigidTransform.from_position_rotation(position, inverse_rotation)

    def relative_to(self, reference: RigidTransform) -> RigidTransform:
        """Express this transform in the local frame of ``reference``.

        Both transforms must be relative to the same parent frame.
        """
        return reference.inverse().compose(self)

    def transform_point(self, point: Sequence[float]) -> tuple[float, float, float]:
        px, py, pz = self.rotation.apply(point) + np.asarray(self.position)
        return (float(px), float(py), float(pz))

    def axis(self, local_axis: Sequence[float]) -> tuple[float, float, float]:
        """Return a local direction vector expressed in the parent frame."""
        dx, dy, dz = self.rotation.apply(local_axis)
        return (float(dx), float(dy), float(dz))

    def with_orientation(self, other: RigidTransform) -> RigidTransform:
        """Return a transform with this position and the orientation of ``other``."""
        return RigidTransform(
            x=self.x, y=self.y, z=self.z, qx=other.qx, qy=other.qy, qz=other.qz, qw=other.qw
        )

    def is_close(self, other: RigidTransform, *, atol: float = 1e-6) -> bool:
        """Return whether two transforms describe the same pose.

        Quaternions ``q`` and ``-q`` are treated as the same rotation.
        """
        if not np.allclose(self.position, other.position, atol=atol):
            return False
        dot = abs(float(np.dot(self.orientation, other.orientation)))
        return bool(np.isclose(dot, 1.0, atol=atol))

    def to_dict(self) -> dict[str, float]:
        """Serialize transform into a mapping-friendly dictionary."""
        return {
            "x": self.x,
            "y": self.y,
            "z": self.z,
            "qx": self.qx,
            "qy": self.qy,
            "qz": self.qz,
            "qw": self.qw,
        }

    @classmethod
    def from_dict(cls, values: Mapping[str, Any]) -> RigidTransform:
        """Build :class:`RigidTransform` from serialized mapping data.

        :param values:
            Mapping containing ``x, y, z, qx, qy, qz, qw``.
        """
        return cls(
            x=float(values["x"]),
            y=float(values["y"]),
            z=float(values["z"]),
            qx=float(values["qx"]),
            qy=float(values["qy"]),
            qz=float(values["qz"]),
            qw=float(values["qw"]),
        )
