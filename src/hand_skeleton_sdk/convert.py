"""Coordinate conversion utilities for Unity-sourced tracking data."""

from __future__ import annotations

import numpy as np
from scipy.spatial.transform import Rotation

from hand_skeleton_sdk.transforms import RigidTransform

# Basis reflection matrix for Y-axis flip.
_FLIP_Y = np.diag([1.0, -1.0, 1.0])


def unity_left_to_right_position(x: float, y: float, z: float) -> tuple[float, float, float]:
    """Convert a Unity left-handed position into a right-handed position.

    :param x:
        Position X in Unity left-handed coordinates.
    :param y:
        Position Y in Unity left-handed coordinates.
    :param z:
        Position Z in Unity left-handed coordinates.
    :returns:
        Converted ``(x, y, z)`` in right-handed coordinates.
    """
    return (x, -y, z)


def unity_left_to_right_quaternion(
    qx: float,
    qy: float,
    qz: float,
    qw: float,
) -> tuple[float, float, float, float]:
    """Convert quaternion orientation from Unity left-handed to right-handed.

    The conversion applies basis transform ``R' = S * R * S`` with
    ``S = diag(1, -1, 1)``. A zero quaternion maps to identity.

    :returns:
        Converted normalized quaternion ``(qx, qy, qz, qw)``.
    """
    if qx == qy == qz == qw == 0.0:
        return (0.0, 0.0, 0.0, 1.0)
    matrix = Rotation.from_quat([qx, qy, qz, qw]).as_matrix()
    converted = Rotation.from_matrix(_FLIP_Y @ matrix @ _FLIP_Y).as_quat()
    return (float(converted[0]), float(converted[1]), float(converted[2]), float(converted[3]))


def convert_transform_unity_left_to_right(transform: RigidTransform) -> RigidTransform:
    """Convert one rigid transform from Unity left-handed to right-handed."""
    x, y, z = unity_left_to_right_position(transform.x, transform.y, transform.z)
    qx, qy, qz, qw = unity_left_to_right_quaternion(
        transform.qx, transform.qy, transform.qz, transform.qw
    )
    return RigidTransform(x=x, y=y, z=z, qx=qx, qy=qy, qz=qz, qw=qw)
