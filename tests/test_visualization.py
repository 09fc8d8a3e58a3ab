from __future__ import annotations

from types import ModuleType

import pytest

from hand_skeleton_sdk import (
    ConfigurationError,
    DeviceCapabilities,
    FrameContext,
    HandSide,
    HandSkeleton,
    JointIndex,
    JointTrackingState,
    ReferenceSpace,
    RerunVisualizer,
    RerunVisualizerConfig,
    RigidTransform,
    VisualizationDependencyError,
    VisualizationFrame,
    compute_support,
)


class _FakeRerun(ModuleType):
    def __init__(self) -> None:
        super().__init__("rerun")
        self.inits: list[tuple[str, bool]] = []
        self.logs: list[tuple[str, object]] = []
        self.blueprints: list[object] = []

    def init(self, application_id: str, *, spawn: bool) -> None:
        self.inits.append((application_id, spawn))

    def log(self, path: str, payload: object) -> None:
        self.logs.append((path, payload))

    def send_blueprint(self, blueprint: object) -> None:
        self.blueprints.append(blueprint)

    class Points3D:
        def __init__(
            self,
            points: list[list[float]],
            *,
            radii: list[float] | None = None,
            colors: list[list[int]] | None = None,
        ) -> None:
            self.points = points
            self.radii = radii
            self.colors = colors

    class LineStrips3D:
        def __init__(
            self,
            strips: list[list[list[float]]],
            *,
            colors: list[list[int]] | None = None,
        ) -> None:
            self.strips = strips
            self.colors = colors

    class Arrows3D:
        def __init__(self, *, origins: list[list[float]], vectors: list[list[float]]) -> None:
            self.origins = origins
            self.vectors = vectors

    class Clear:
        def __init__(self, *, recursive: bool) -> None:
            self.recursive = recursive


class _FakeBlueprint(ModuleType):
    class Spatial3DView:
        def __init__(
            self,
            *,
            origin: str,
            name: str,
            background: list[int],
        ) -> None:
            self.origin = origin
            self.name = name
            self.background = background

    class Blueprint:
        def __init__(self, view: object) -> None:
            self.view = view


@pytest.fixture
def fake_rerun(monkeypatch: pytest.MonkeyPatch) -> _FakeRerun:
    fake = _FakeRerun()
    fake_blueprint = _FakeBlueprint("rerun.blueprint")

    def _import(module_name: str) -> ModuleType:
        if module_name == "rerun":
            return fake
        if module_name == "rerun.blueprint":
            return fake_blueprint
        raise ModuleNotFoundError(module_name)

    monkeypatch.setattr("importlib.import_module", _import)
    return fake


def _frame(
    side: HandSide, states: dict[JointIndex, JointTrackingState]
) -> tuple[FrameContext, HandSkeleton, ReferenceSpace]:
    skeleton = HandSkeleton(compute_support(DeviceCapabilities.full_hand()), side)
    local = ReferenceSpace()
    frame = FrameContext(
        hands={skeleton: states},
        spaces={local: RigidTransform.identity()},
    )
    return frame, skeleton, local


def _payload(fake: _FakeRerun, path: str) -> object:
    return next(payload for logged_path, payload in fake.logs if logged_path == path)


def test_rerun_visualizer_requires_optional_dependency(monkeypatch: pytest.MonkeyPatch) -> None:
    def _raise_module_not_found(_: str) -> ModuleType:
        raise ModuleNotFoundError("rerun")

    monkeypatch.setattr("importlib.import_module", _raise_module_not_found)

    with pytest.raises(VisualizationDependencyError):
        RerunVisualizer()


def test_visualizer_initializes_and_sends_background(fake_rerun: _FakeRerun) -> None:
    RerunVisualizer(RerunVisualizerConfig(application_id="skeleton-test", spawn=False))

    assert fake_rerun.inits == [("skeleton-test", False)]
    assert len(fake_rerun.blueprints) == 1


def test_log_hand_logs_joints_bones_and_axes(fake_rerun: _FakeRerun) -> None:
    frame, skeleton, local = _frame(
        HandSide.LEFT,
        {
            JointIndex.WRIST: JointTrackingState(transform=RigidTransform(), radius=0.02),
            JointIndex.INDEX_METACARPAL: JointTrackingState(
                transform=RigidTransform(z=-0.05), radius=0.01
            ),
        },
    )
    visualizer = RerunVisualizer(
        RerunVisualizerConfig(spawn=False, visualization_frame=VisualizationFrame.SDK)
    )

    assert visualizer.log_hand(frame, skeleton, local) == 2

    joints = _payload(fake_rerun, "hands/left/joints")
    assert isinstance(joints, _FakeRerun.Points3D)
    assert joints.points == [[0.0, 0.0, 0.0], [0.0, 0.0, -0.05]]
    assert joints.radii == [0.02, 0.01]
    assert joints.colors == [[64, 128, 255], [64, 128, 255]]

    bones = _payload(fake_rerun, "hands/left/bones")
    assert isinstance(bones, _FakeRerun.LineStrips3D)
    assert bones.strips == [[[0.0, 0.0, 0.0], [0.0, 0.0, -0.05]]]

    axes = _payload(fake_rerun, "hands/left/bone_axes")
    assert isinstance(axes, _FakeRerun.Arrows3D)
    assert axes.vectors[0] == pytest.approx([0.0, 0.0, -0.02])


def test_flu_frame_maps_points(fake_rerun: _FakeRerun) -> None:
    frame, skeleton, local = _frame(
        HandSide.RIGHT,
        {JointIndex.WRIST: JointTrackingState(transform=RigidTransform(x=1.0, y=2.0, z=3.0))},
    )
    visualizer = RerunVisualizer(RerunVisualizerConfig(spawn=False, show_bone_axes=False))

    assert visualizer.log_frame(frame, local) == 1

    joints = _payload(fake_rerun, "hands/right/joints")
    assert isinstance(joints, _FakeRerun.Points3D)
    assert joints.points == [[3.0, -1.0, -2.0]]
    assert joints.colors == [[255, 64, 64]]
    assert all(path != "hands/right/bone_axes" for path, _ in fake_rerun.logs)


def test_untracked_hand_is_cleared(fake_rerun: _FakeRerun) -> None:
    frame, skeleton, local = _frame(HandSide.LEFT, {})
    visualizer = RerunVisualizer(RerunVisualizerConfig(spawn=False))

    assert visualizer.log_hand(frame, skeleton, local) == 0

    cleared = _payload(fake_rerun, "hands/left")
    assert isinstance(cleared, _FakeRerun.Clear)
    assert cleared.recursive


def test_visualizer_config_validation() -> None:
    with pytest.raises(ConfigurationError):
        RerunVisualizerConfig(application_id="")
    with pytest.raises(ConfigurationError):
        RerunVisualizerConfig(axis_length=-1.0)
