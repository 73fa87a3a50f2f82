#!/usr/bin/env python3
"""Decode a capture of XVIZ timeslice messages.

The input is either one JSON document (a single message or a list of
messages) or JSON lines, one message per line.  Each message is decoded
and summarized: snapshot type, timestamp and stream names.

Usage
-----
    python scripts/decode_dump.py capture.json
    python scripts/decode_dump.py --blacklist /lidar,/camera capture.jsonl
    python scripts/decode_dump.py --json capture.jsonl

Options::

    --blacklist A,B      Extra stream names to drop (added to XVIZ_STREAM_BLACKLIST)
    --json               Output decoded snapshots as JSON
    --verbose / -v       Enable debug logging
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any

from pyxviz import XvizConfig, XvizError, parse_timeslice_data
from pyxviz.models import DecodedSnapshot


def _load_messages(path: Path) -> list[Any]:
    text = path.read_text(encoding="utf-8")
    try:
        document = json.loads(text)
    except json.JSONDecodeError:
        return [json.loads(line) for line in text.splitlines() if line.strip()]
    return document if isinstance(document, list) else [document]


def _summarize(index: int, snapshot: DecodedSnapshot) -> str:
    if snapshot.is_incomplete:
        return f"[{index}] {snapshot.type}"
    streams = sorted(snapshot.streams or {})
    return f"[{index}] {snapshot.type} t={snapshot.timestamp} streams={len(streams)}: {', '.join(streams)}"


def main() -> None:
    parser = argparse.ArgumentParser(description="Decode a capture of XVIZ timeslice messages.")
    parser.add_argument("capture", help="JSON or JSON-lines capture file")
    parser.add_argument("--blacklist", default="", help="Comma-separated stream names to drop")
    parser.add_argument("--json", action="store_true", dest="json_mode", help="Output decoded snapshots as JSON")
    parser.add_argument("--verbose", "-v", action="store_true")
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    base = XvizConfig.from_env()
    extra = {name.strip() for name in args.blacklist.split(",") if name.strip()}
    config = XvizConfig(stream_blacklist=base.stream_blacklist | extra)

    failures = 0
    for index, message in enumerate(_load_messages(Path(args.capture))):
        try:
            snapshot = parse_timeslice_data(message, config=config)
        except XvizError as exc:
            failures += 1
            print(f"[{index}] ERROR {type(exc).__name__}: {exc}", file=sys.stderr)
            continue
        if args.json_mode:
            print(snapshot.model_dump_json())
        else:
            print(_summarize(index, snapshot))

    if failures:
        sys.exit(1)


if __name__ == "__main__":
    main()
