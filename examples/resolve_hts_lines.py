"""Resolve joint poses from recorded HTS lines and print a concise summary.

Example:
    uv run python examples/resolve_hts_lines.py --path runs/hts.txt --joint index-phalanx-tip
"""

from __future__ import annotations

import argparse
import sys
from collections.abc import Iterator
from pathlib import Path

from hand_skeleton_sdk import (
    HTS_CAPABILITIES,
    HandSide,
    HTSFrameBuilder,
    InputSource,
    ParseError,
    SessionFeatures,
    joint_index,
)


def _parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Resolve joint poses from HTS lines.")
    parser.add_argument("--path", help="Recorded HTS text file. Reads stdin when omitted.")
    parser.add_argument(
        "--joint",
        default="index-phalanx-tip",
        help="Joint name to report besides the wrist.",
    )
    parser.add_argument(
        "--strict",
        action="store_true",
        help="Stop on the first malformed line instead of skipping it.",
    )
    return parser.parse_args()


def _lines(path: str | None) -> Iterator[str]:
    if path is None:
        yield from sys.stdin
        return
    with Path(path).open(encoding="utf-8") as handle:
        yield from handle


def _main() -> int:
    args = _parse_args()
    joint = joint_index(args.joint)
    features = SessionFeatures(hand_tracking=True)
    hands = [
        source.hand
        for source in (
            InputSource.create(side, HTS_CAPABILITIES, features=features) for side in HandSide
        )
        if source.hand is not None
    ]
    builder = HTSFrameBuilder()

    parse_errors = 0
    for line in _lines(args.path):
        try:
            builder.push_line(line)
        except ParseError:
            if args.strict:
                raise
            parse_errors += 1
            continue

        with builder.build_frame(hands) as frame:
            for hand in hands:
                wrist = hand[0]
                target = hand[joint]
                if wrist is None or target is None:
                    continue
                wrist_pose = frame.get_joint_pose(wrist, builder.base_space)
                target_pose = frame.get_joint_pose(target, builder.base_space)
                if wrist_pose is None or target_pose is None:
                    continue
                x, y, z = target_pose.transform.relative_to(wrist_pose.transform).position
                print(
                    "frame"
                    f" seq={frame.sequence_id}"
                    f" side={hand.side.value}"
                    f" {args.joint}_in_wrist=({x:.3f}, {y:.3f}, {z:.3f})"
                    f" radius={target_pose.radius:.3f}"
                )

    print(f"done parse_errors={parse_errors}")
    return 0


if __name__ == "__main__":
    raise SystemExit(_main())
