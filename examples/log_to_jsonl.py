"""Convert recorded HTS lines into per-frame joint tracking JSON Lines.

Example:
    uv run python examples/log_to_jsonl.py --input runs/hts.txt --path runs/joints.jsonl
"""

from __future__ import annotations

import argparse
import json
from pathlib import Path
from typing import Any

from hand_skeleton_sdk import HandSide, HTSFrameBuilder, ParseError, joint_name, parse_hts_line


def _parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Log HTS joint tracking states to JSONL.")
    parser.add_argument("--input", required=True, help="Recorded HTS text file.")
    parser.add_argument(
        "--path",
        default="runs/hand_joints.jsonl",
        help="Output JSONL file path.",
    )
    return parser.parse_args()


def _sample_to_dict(builder: HTSFrameBuilder, side: HandSide, line_number: int) -> dict[str, Any]:
    return {
        "line": line_number,
        "side": side.value,
        "joints": {
            joint_name(joint): state.to_dict()
            for joint, state in builder.tracking_states(side).items()
        },
    }


def _main() -> int:
    args = _parse_args()
    path = Path(args.path)
    path.parent.mkdir(parents=True, exist_ok=True)
    builder = HTSFrameBuilder()

    written = 0
    parse_errors = 0
    with (
        Path(args.input).open(encoding="utf-8") as source,
        path.open("w", encoding="utf-8") as sink,
    ):
        for line_number, line in enumerate(source, start=1):
            try:
                packet = parse_hts_line(line)
            except ParseError:
                parse_errors += 1
                continue
            builder.push_packet(packet)
            if not builder.has_sample(packet.side):
                continue
            payload = _sample_to_dict(builder, packet.side, line_number)
            sink.write(json.dumps(payload, separators=(",", ":")) + "\n")
            written += 1

    print(f"wrote {written} sample(s) to {path} parse_errors={parse_errors}")
    return 0


if __name__ == "__main__":
    raise SystemExit(_main())
