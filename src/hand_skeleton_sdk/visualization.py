"""Optional real-time visualization helpers."""

from __future__ import annotations

import importlib
from dataclasses import dataclass
from enum import StrEnum
from types import ModuleType

from hand_skeleton_sdk.catalog import FingerName, JointIndex, finger_joints
from hand_skeleton_sdk.exceptions import ConfigurationError, VisualizationDependencyError
from hand_skeleton_sdk.frame import FrameContext
from hand_skeleton_sdk.models import HandSide, JointPose
from hand_skeleton_sdk.skeleton import HandSkeleton
from hand_skeleton_sdk.spaces import Space


class VisualizationFrame(StrEnum):
    """Output frame convention used for visualization points."""

    SDK = "sdk"
    FLU = "flu"


@dataclass(frozen=True, slots=True)
class RerunVisualizerConfig:
    """Configuration for :class:`RerunVisualizer`.

    :param application_id:
        Application identifier displayed in Rerun.
    :param spawn:
        If ``True``, spawn a local Rerun viewer on initialization.
    :param left_joint_color:
        RGB color for left-hand joint markers.
    :param right_joint_color:
        RGB color for right-hand joint markers.
    :param bone_color:
        RGB color for finger bone strips.
    :param show_bone_axes:
        If ``True``, log each joint's -Z bone axis as an arrow.
    :param axis_length:
        Arrow length for bone axes in meters.
    :param background_color:
        Optional RGB background color for the Rerun 3D view.
    :param visualization_frame:
        Point frame convention for visualization output.
        ``flu`` means ``x=forward, y=left, z=up``.
    """

    application_id: str = "hand-skeleton-sdk"
    spawn: bool = True
    left_joint_color: tuple[int, int, int] = (64, 128, 255)
    right_joint_color: tuple[int, int, int] = (255, 64, 64)
    bone_color: tuple[int, int, int] = (200, 200, 200)
    show_bone_axes: bool = True
    axis_length: float = 0.02
    background_color: tuple[int, int, int] | None = (18, 22, 30)
    visualization_frame: VisualizationFrame = VisualizationFrame.FLU

    def __post_init__(self) -> None:
        if not self.application_id:
            raise ConfigurationError("application_id must not be empty.")
        if self.axis_length < 0:
            raise ConfigurationError("axis_length must be non-negative.")


class RerunVisualizer:
    """Visualizer that logs resolved hand joint poses to `rerun`.

    This component is optional and requires installing the visualization extra.
    """

    def __init__(self, config: RerunVisualizerConfig | None = None) -> None:
        """Create a Rerun visualizer.

        :param config:
            Optional visualizer configuration.
        :raises VisualizationDependencyError:
            If `rerun-sdk` is not installed.
        """
        self._config = config or RerunVisualizerConfig()
        self._rr = self._import_rerun()
        self._rr.init(self._config.application_id, spawn=self._config.spawn)
        self._apply_view_background()

    def log_hand(self, frame: FrameContext, skeleton: HandSkeleton, base_space: Space) -> int:
        """Log joints, bones and bone axes of one hand for one frame.

        Joints that are unsupported or untracked this frame are skipped.

        :param frame:
            Active frame snapshot.
        :param skeleton:
            Skeleton to draw.
        :param base_space:
            Space the hand is drawn in.
        :returns:
            Number of joints logged.
        """
        poses: dict[JointIndex, JointPose] = {}
        for joint in skeleton.supported_joints():
            pose = frame.get_joint_pose(joint, base_space)
            if pose is not None:
                poses[joint.index] = pose

        side_path = f"hands/{skeleton.side.value.lower()}"
        if not poses:
            self._rr.log(side_path, self._rr.Clear(recursive=True))
            return 0

        points = [self._map_point_frame(*pose.transform.position) for pose in poses.values()]
        self._rr.log(
            f"{side_path}/joints",
            self._rr.Points3D(
                [list(point) for point in points],
                radii=[pose.radius for pose in poses.values()],
                colors=[list(self._joint_color(skeleton.side))] * len(points),
            ),
        )

        strips = self._bone_strips(poses)
        if strips:
            self._rr.log(
                f"{side_path}/bones",
                self._rr.LineStrips3D(strips, colors=[list(self._config.bone_color)] * len(strips)),
            )

        if self._config.show_bone_axes:
            origins = []
            vectors = []
            for pose in poses.values():
                transform = pose.transform
                # The frame mapping is linear, so directions map like points.
                axis = transform.axis((0.0, 0.0, -self._config.axis_length))
                origins.append(list(self._map_point_frame(*transform.position)))
                vectors.append(list(self._map_point_frame(*axis)))
            self._rr.log(
                f"{side_path}/bone_axes",
                self._rr.Arrows3D(origins=origins, vectors=vectors),
            )
        return len(poses)

    def log_frame(self, frame: FrameContext, base_space: Space) -> int:
        """Log every hand in a frame.

        :returns:
            Total number of joints logged.
        """
        return sum(self.log_hand(frame, skeleton, base_space) for skeleton in frame.skeletons)

    def _bone_strips(self, poses: dict[JointIndex, JointPose]) -> list[list[list[float]]]:
        strips: list[list[list[float]]] = []
        for finger in FingerName:
            if finger is FingerName.WRIST:
                continue
            chain = (JointIndex.WRIST, *finger_joints(finger))
            strip = [
                list(self._map_point_frame(*poses[joint].transform.position))
                for joint in chain
                if joint in poses
            ]
            if len(strip) >= 2:
                strips.append(strip)
        return strips

    def _import_rerun(self) -> ModuleType:
        try:
            module = importlib.import_module("rerun")
        except ModuleNotFoundError as exc:
            raise VisualizationDependencyError(
                "rerun is not installed. Install with: pip install hand-skeleton-sdk[visualization]"
            ) from exc

        return module

    def _apply_view_background(self) -> None:
        """Apply optional background color to the default 3D view."""
        if self._config.background_color is None:
            return

        if not hasattr(self._rr, "send_blueprint"):
            return

        try:
            blueprint_module = importlib.import_module("rerun.blueprint")
        except ModuleNotFoundError:
            return

        blueprint = blueprint_module.Blueprint(
            blueprint_module.Spatial3DView(
                origin="/",
                name="3D Scene",
                background=list(self._config.background_color),
            )
        )
        self._rr.send_blueprint(blueprint)

    def _joint_color(self, side: HandSide) -> tuple[int, int, int]:
        if side == HandSide.LEFT:
            return self._config.left_joint_color
        return self._config.right_joint_color

    def _map_point_frame(self, x: float, y: float, z: float) -> tuple[float, float, float]:
        if self._config.visualization_frame == VisualizationFrame.SDK:
            return (x, y, z)

        # Right-handed SDK basis (x right, y down, z forward) to FLU.
        return (z, -x, -y)
