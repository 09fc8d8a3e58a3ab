"""Input sources and the hand-tracking feature gate."""

from __future__ import annotations

from dataclasses import dataclass

from hand_skeleton_sdk.models import HandSide
from hand_skeleton_sdk.skeleton import HandSkeleton
from hand_skeleton_sdk.support import DeviceCapabilities, compute_support


@dataclass(frozen=True, slots=True)
class SessionFeatures:
    """Feature verdicts negotiated by the session layer.

    :param hand_tracking:
        Whether hand tracking was requested and granted for the session.
    """

    hand_tracking: bool = False


@dataclass(frozen=True, slots=True, eq=False)
class InputSource:
    """One tracked input source.

    :param handedness:
        Hand side of the source.
    :param hand:
        Hand skeleton, present only when the device supports hand tracking
        and the session enabled it. Never changes after creation.
    :param profile:
        Device or pipeline name the source was created from.
    """

    handedness: HandSide
    hand: HandSkeleton | None = None
    profile: str = "unknown"

    @classmethod
    def create(
        cls,
        handedness: HandSide,
        capabilities: DeviceCapabilities | None,
        *,
        features: SessionFeatures,
    ) -> InputSource:
        """Create an input source and, when allowed, its hand skeleton.

        Support is computed exactly once here.

        :param handedness:
            Hand side of the new source.
        :param capabilities:
            Hand capabilities of the device, ``None`` when it has none.
        :param features:
            Session feature verdicts, accepted as given.
        :returns:
            Input source whose ``hand`` is ``None`` when the feature was not
            requested or the device cannot produce any joint.
        """
        if capabilities is None:
            return cls(handedness=handedness)

        profile = capabilities.name
        if not features.hand_tracking:
            return cls(handedness=handedness, profile=profile)

        registry = compute_support(capabilities)
        if not registry.supported_joints():
            return cls(handedness=handedness, profile=profile)
        return cls(
            handedness=handedness,
            hand=HandSkeleton(registry, handedness),
            profile=profile,
        )
