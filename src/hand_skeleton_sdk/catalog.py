"""Canonical joint catalog: indices, names and finger chains."""

from __future__ import annotations

import operator
from enum import IntEnum, StrEnum

from hand_skeleton_sdk.constants import JOINT_COUNT, JOINT_NAMES
from hand_skeleton_sdk.exceptions import JointIndexError


class JointIndex(IntEnum):
    """Frozen joint identifiers. Values are never reassigned."""

    WRIST = 0
    THUMB_METACARPAL = 1
    THUMB_PHALANX_PROXIMAL = 2
    THUMB_PHALANX_DISTAL = 3
    THUMB_PHALANX_TIP = 4
    INDEX_METACARPAL = 5
    INDEX_PHALANX_PROXIMAL = 6
    INDEX_PHALANX_INTERMEDIATE = 7
    INDEX_PHALANX_DISTAL = 8
    INDEX_PHALANX_TIP = 9
    MIDDLE_METACARPAL = 10
    MIDDLE_PHALANX_PROXIMAL = 11
    MIDDLE_PHALANX_INTERMEDIATE = 12
    MIDDLE_PHALANX_DISTAL = 13
    MIDDLE_PHALANX_TIP = 14
    RING_METACARPAL = 15
    RING_PHALANX_PROXIMAL = 16
    RING_PHALANX_INTERMEDIATE = 17
    RING_PHALANX_DISTAL = 18
    RING_PHALANX_TIP = 19
    LITTLE_METACARPAL = 20
    LITTLE_PHALANX_PROXIMAL = 21
    LITTLE_PHALANX_INTERMEDIATE = 22
    LITTLE_PHALANX_DISTAL = 23
    LITTLE_PHALANX_TIP = 24


class FingerName(StrEnum):
    """Finger groups of the catalog. ``wrist`` is a group of its own."""

    WRIST = "wrist"
    THUMB = "thumb"
    INDEX = "index"
    MIDDLE = "middle"
    RING = "ring"
    LITTLE = "little"


_FINGER_JOINTS: dict[FingerName, tuple[JointIndex, ...]] = {
    FingerName.WRIST: (JointIndex.WRIST,),
    FingerName.THUMB: (
        JointIndex.THUMB_METACARPAL,
        JointIndex.THUMB_PHALANX_PROXIMAL,
        JointIndex.THUMB_PHALANX_DISTAL,
        JointIndex.THUMB_PHALANX_TIP,
    ),
}
for _finger, _start in (
    (FingerName.INDEX, JointIndex.INDEX_METACARPAL),
    (FingerName.MIDDLE, JointIndex.MIDDLE_METACARPAL),
    (FingerName.RING, JointIndex.RING_METACARPAL),
    (FingerName.LITTLE, JointIndex.LITTLE_METACARPAL),
):
    _FINGER_JOINTS[_finger] = tuple(JointIndex(_start + offset) for offset in range(5))

_FINGER_BY_JOINT: dict[JointIndex, FingerName] = {
    joint: finger for finger, joints in _FINGER_JOINTS.items() for joint in joints
}

_JOINT_INDEX_BY_NAME: dict[str, JointIndex] = {
    name: JointIndex(index) for index, name in enumerate(JOINT_NAMES)
}

TIP_JOINTS: tuple[JointIndex, ...] = tuple(
    joints[-1] for finger, joints in _FINGER_JOINTS.items() if finger is not FingerName.WRIST
)


def check_index(index: int) -> JointIndex:
    """Validate a raw joint index against the catalog.

    :param index:
        Integer joint index, including numpy integer scalars. Booleans and
        negative values are rejected.
    :returns:
        Matching :class:`JointIndex`.
    :raises JointIndexError:
        If the index is not an integer in ``[0, 24]``.
    """
    if isinstance(index, JointIndex):
        return index
    if isinstance(index, bool):
        raise JointIndexError("Joint index must be an integer, got bool")
    try:
        index = operator.index(index)
    except TypeError as exc:
        raise JointIndexError(
            f"Joint index must be an integer, got {type(index).__name__}"
        ) from exc
    if index < 0 or index >= JOINT_COUNT:
        raise JointIndexError(f"Joint index out of range [0, {JOINT_COUNT - 1}]: {index}")
    return JointIndex(index)


def joint_name(index: int) -> str:
    """Return the canonical name for one joint index."""
    return JOINT_NAMES[check_index(index)]


def joint_index(name: JointIndex | str) -> JointIndex:
    """Return the joint index for a canonical name.

    :param name:
        Canonical joint name (for example ``"index-phalanx-tip"``) or an
        existing :class:`JointIndex`.
    :raises ValueError:
        If the name is unknown.
    """
    if isinstance(name, JointIndex):
        return name
    index = _JOINT_INDEX_BY_NAME.get(name)
    if index is None:
        raise ValueError(f"Unknown joint name: {name!r}")
    return index


def finger_of(index: int) -> FingerName:
    """Return the finger group that owns a joint."""
    return _FINGER_BY_JOINT[check_index(index)]


def finger_joints(finger: FingerName | str) -> tuple[JointIndex, ...]:
    """Return joints of one finger group ordered from wrist toward fingertip.

    :raises ValueError:
        If the finger group is unknown.
    """
    finger_name = finger.value if isinstance(finger, FingerName) else finger.lower()
    try:
        return _FINGER_JOINTS[FingerName(finger_name)]
    except ValueError as exc:
        raise ValueError(f"Unknown finger name: {finger_name!r}") from exc


def is_tip(index: int) -> bool:
    return check_index(index) in TIP_JOINTS


def bone_source(index: int) -> JointIndex:
    """Return the joint whose bone defines the -Z axis of ``index``.

    Tips have no bone of their own and continue the distal segment of the
    same finger.
    """
    joint = check_index(index)
    if joint in TIP_JOINTS:
        return JointIndex(joint - 1)
    return joint


def bone_target(index: int) -> JointIndex | None:
    """Return the next joint toward the fingertip, or ``None`` for tips.

    The wrist bone points at the middle metacarpal.
    """
    joint = check_index(index)
    if joint is JointIndex.WRIST:
        return JointIndex.MIDDLE_METACARPAL
    if joint in TIP_JOINTS:
        return None
    return JointIndex(joint + 1)


def bone_parent(index: int) -> JointIndex | None:
    """Return the previous joint toward the wrist, or ``None`` for the wrist."""
    joint = check_index(index)
    if joint is JointIndex.WRIST:
        return None
    chain = finger_joints(finger_of(joint))
    position = chain.index(joint)
    return JointIndex.WRIST if position == 0 else chain[position - 1]
