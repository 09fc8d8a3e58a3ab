"""Replay recorded HTS lines as a resolved hand skeleton in rerun.

Example:
    uv run --with rerun-sdk python examples/visualize_rerun.py --path runs/hts.txt
"""

from __future__ import annotations

import argparse
from pathlib import Path

from hand_skeleton_sdk import (
    HTS_CAPABILITIES,
    HandSide,
    HTSFrameBuilder,
    InputSource,
    ParseError,
    RerunVisualizer,
    RerunVisualizerConfig,
    SessionFeatures,
    VisualizationFrame,
)


def _parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Visualize resolved HTS hand skeletons in rerun.")
    parser.add_argument("--path", required=True, help="Recorded HTS text file.")
    parser.add_argument(
        "--frame",
        choices=[value.value for value in VisualizationFrame],
        default=VisualizationFrame.FLU.value,
        help="Point frame convention for visualization output.",
    )
    parser.add_argument(
        "--application-id",
        default="hand-skeleton-sdk",
        help="Rerun application id.",
    )
    parser.add_argument(
        "--no-spawn",
        action="store_true",
        help="Do not auto-spawn rerun viewer.",
    )
    parser.add_argument(
        "--no-axes",
        action="store_true",
        help="Do not draw joint bone axes.",
    )
    return parser.parse_args()


def _main() -> int:
    args = _parse_args()
    features = SessionFeatures(hand_tracking=True)
    hands = [
        source.hand
        for source in (
            InputSource.create(side, HTS_CAPABILITIES, features=features) for side in HandSide
        )
        if source.hand is not None
    ]
    builder = HTSFrameBuilder()
    visualizer = RerunVisualizer(
        RerunVisualizerConfig(
            application_id=args.application_id,
            spawn=not args.no_spawn,
            show_bone_axes=not args.no_axes,
            visualization_frame=VisualizationFrame(args.frame),
        )
    )

    with Path(args.path).open(encoding="utf-8") as handle:
        for line in handle:
            try:
                builder.push_line(line)
            except ParseError:
                continue
            with builder.build_frame(hands) as frame:
                visualizer.log_frame(frame, builder.base_space)
    return 0


if __name__ == "__main__":
    raise SystemExit(_main())
