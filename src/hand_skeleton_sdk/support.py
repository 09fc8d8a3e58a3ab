"""Joint support computation for one input source."""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass, field
from types import MappingProxyType

from hand_skeleton_sdk.catalog import JointIndex, check_index, joint_index
from hand_skeleton_sdk.exceptions import DeviceCapabilityError, JointIndexError


@dataclass(frozen=True, slots=True)
class DeviceCapabilities:
    """Description of what a tracking pipeline can produce.

    :param supported_joints:
        Joints the pipeline can ever produce, as indices or canonical names.
    :param name:
        Human-readable pipeline or device name.
    """

    supported_joints: frozenset[JointIndex | int | str] = field(default_factory=frozenset)
    name: str = "unknown"

    def __post_init__(self) -> None:
        if not isinstance(self.supported_joints, frozenset):
            object.__setattr__(self, "supported_joints", frozenset(self.supported_joints))

    @classmethod
    def full_hand(cls, *, name: str = "full-hand") -> DeviceCapabilities:
        """Capabilities for a pipeline that produces every catalog joint."""
        return cls(supported_joints=frozenset(JointIndex), name=name)


class JointSupportRegistry:
    """Total, immutable ``JointIndex -> bool`` support mapping.

    Built once per input source by :func:`compute_support` and never
    recomputed.
    """

    __slots__ = ("_support", "_capabilities")

    def __init__(
        self,
        support: Mapping[JointIndex, bool],
        capabilities: DeviceCapabilities,
    ) -> None:
        self._support: Mapping[JointIndex, bool] = MappingProxyType(
            {joint: bool(support.get(joint, False)) for joint in JointIndex}
        )
        self._capabilities = capabilities

    @property
    def capabilities(self) -> DeviceCapabilities:
        return self._capabilities

    def is_supported(self, index: int) -> bool:
        """Return the fixed support verdict for one joint.

        :raises JointIndexError:
            If ``index`` is outside the catalog.
        """
        return self._support[check_index(index)]

    def supported_joints(self) -> tuple[JointIndex, ...]:
        return tuple(joint for joint, supported in self._support.items() if supported)

    def as_mapping(self) -> Mapping[JointIndex, bool]:
        return self._support

    def __getitem__(self, index: int) -> bool:
        return self.is_supported(index)

    def __iter__(self) -> Iterator[JointIndex]:
        return iter(self._support)

    def __len__(self) -> int:
        return len(self._support)

    def __repr__(self) -> str:
        return (
            f"JointSupportRegistry(device={self._capabilities.name!r}, "
            f"supported={len(self.supported_joints())}/{len(self)})"
        )


def compute_support(capabilities: DeviceCapabilities) -> JointSupportRegistry:
    """Decide which catalog joints an input source can realize as spaces.

    :param capabilities:
        Pipeline description supplied when the input source is created.
    :returns:
        Registry with a verdict for all 25 joints. Joints not listed are
        unsupported.
    :raises DeviceCapabilityError:
        If capabilities name a joint outside the catalog.
    """
    support: dict[JointIndex, bool] = {}
    for joint in _normalize_joints(capabilities.supported_joints):
        support[joint] = True
    return JointSupportRegistry(support, capabilities)


def _normalize_joints(joints: Iterable[JointIndex | int | str]) -> Iterator[JointIndex]:
    for joint in joints:
        try:
            if isinstance(joint, str):
                yield joint_index(joint)
            else:
                yield check_index(joint)
        except (JointIndexError, ValueError) as exc:
            raise DeviceCapabilityError(f"Unsupported joint in capabilities: {joint!r}") from exc
