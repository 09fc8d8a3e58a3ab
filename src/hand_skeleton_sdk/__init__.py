"""Public API surface for the Hand Skeleton SDK."""

from hand_skeleton_sdk.__about__ import __version__
from hand_skeleton_sdk.catalog import (
    TIP_JOINTS,
    FingerName,
    JointIndex,
    bone_parent,
    bone_source,
    bone_target,
    check_index,
    finger_joints,
    finger_of,
    is_tip,
    joint_index,
    joint_name,
)
from hand_skeleton_sdk.constants import JOINT_COUNT, JOINT_NAMES
from hand_skeleton_sdk.convert import (
    convert_transform_unity_left_to_right,
    unity_left_to_right_position,
    unity_left_to_right_quaternion,
)
from hand_skeleton_sdk.exceptions import (
    ConfigurationError,
    DeviceCapabilityError,
    HandSkeletonError,
    InactiveFrameError,
    JointIndexError,
    ParseError,
    UnknownSpaceError,
    VisualizationDependencyError,
)
from hand_skeleton_sdk.frame import FrameContext
from hand_skeleton_sdk.hts import (
    HTS_CAPABILITIES,
    HTS_JOINT_MAP,
    HTSAdapterConfig,
    HTSFrameBuilder,
    HTSLandmarksPacket,
    HTSPacket,
    HTSPacketType,
    HTSWristPacket,
    parse_hts_line,
)
from hand_skeleton_sdk.input_source import InputSource, SessionFeatures
from hand_skeleton_sdk.models import HandSide, JointPose, JointTrackingState, Pose
from hand_skeleton_sdk.resolver import (
    PoseResolver,
    PoseResolverConfig,
    ResolverEventKind,
    ResolverLogEvent,
    ResolverStats,
    TipOrientationPolicy,
)
from hand_skeleton_sdk.skeleton import HandSkeleton
from hand_skeleton_sdk.spaces import (
    JointSpace,
    OrientationConvention,
    ReferenceSpace,
    ReferenceSpaceType,
    Space,
)
from hand_skeleton_sdk.support import DeviceCapabilities, JointSupportRegistry, compute_support
from hand_skeleton_sdk.transforms import RigidTransform
from hand_skeleton_sdk.visualization import (
    RerunVisualizer,
    RerunVisualizerConfig,
    VisualizationFrame,
)

__all__ = [
    "ConfigurationError",
    "DeviceCapabilities",
    "DeviceCapabilityError",
    "FingerName",
    "FrameContext",
    "HTSAdapterConfig",
    "HTSFrameBuilder",
    "HTSLandmarksPacket",
    "HTSPacket",
    "HTSPacketType",
    "HTSWristPacket",
    "HTS_CAPABILITIES",
    "HTS_JOINT_MAP",
    "HandSide",
    "HandSkeleton",
    "HandSkeletonError",
    "InactiveFrameError",
    "InputSource",
    "JOINT_COUNT",
    "JOINT_NAMES",
    "JointIndex",
    "JointIndexError",
    "JointPose",
    "JointSpace",
    "JointSupportRegistry",
    "JointTrackingState",
    "OrientationConvention",
    "ParseError",
    "Pose",
    "PoseResolver",
    "PoseResolverConfig",
    "ReferenceSpace",
    "ReferenceSpaceType",
    "RerunVisualizer",
    "RerunVisualizerConfig",
    "ResolverEventKind",
    "ResolverLogEvent",
    "ResolverStats",
    "RigidTransform",
    "SessionFeatures",
    "Space",
    "TIP_JOINTS",
    "TipOrientationPolicy",
    "UnknownSpaceError",
    "VisualizationDependencyError",
    "VisualizationFrame",
    "__version__",
    "bone_parent",
    "bone_source",
    "bone_target",
    "check_index",
    "compute_support",
    "convert_transform_unity_left_to_right",
    "finger_joints",
    "finger_of",
    "is_tip",
    "joint_index",
    "joint_name",
    "parse_hts_line",
    "unity_left_to_right_position",
    "unity_left_to_right_quaternion",
]
