"""Custom exception hierarchy for skeleton, frame and pose resolution errors."""


class HandSkeletonError(Exception):
    """Base exception for SDK errors."""


class JointIndexError(HandSkeletonError, IndexError):
    """Raised when a joint index falls outside the canonical catalog."""


class UnknownSpaceError(HandSkeletonError, ValueError):
    """Raised when a space is queried against a frame that does not know it."""


class InactiveFrameError(HandSkeletonError):
    """Raised when reading from a frame (or one of its poses) after the frame ended."""


class ConfigurationError(HandSkeletonError, ValueError):
    """Raised when configuration values are invalid for runtime operation."""


class DeviceCapabilityError(ConfigurationError):
    """Raised when device capabilities name joints outside the catalog."""


class ParseError(HandSkeletonError):
    """Raised when incoming HTS lines cannot be parsed."""


class VisualizationDependencyError(HandSkeletonError):
    """Raised when optional visualization dependencies are not installed."""
