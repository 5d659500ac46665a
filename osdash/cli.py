"""
Offline renderer for saved simulator payloads.

Examples:
  python -m osdash.cli render snapshot.json
  python -m osdash.cli render snapshot.json --schedule schedule.json
  python -m osdash.cli render snapshot.json --output views.json
"""

from __future__ import annotations
import argparse
import json
import logging
import sys
from pathlib import Path
from typing import List, Optional

from .pipeline import RenderPipeline


def _load(path: Path):
    with path.open(encoding="utf-8") as f:
        return json.load(f)


def render(snapshot: Optional[Path], schedule: Optional[Path]) -> dict:
    pipeline = RenderPipeline()
    views = {}
    if snapshot is not None:
        views["deadlock"] = pipeline.render_deadlock(_load(snapshot)).to_dict()
    if schedule is not None:
        views["schedule"] = pipeline.render_schedule(_load(schedule)).to_dict()
    return views


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(
        prog="osdash",
        description="Render saved OS simulator payloads into laid-out dashboard views",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    parser.add_argument('--verbose', '-v', action='store_true', help='Log dropped items')
    sub = parser.add_subparsers(dest='command', required=True)

    render_parser = sub.add_parser('render', help='Render payload files as JSON views')
    render_parser.add_argument('snapshot', nargs='?', type=Path,
                               help='Saved /os/deadlock/visualize response')
    render_parser.add_argument('--schedule', '-s', type=Path,
                               help='Saved scheduling result (/os/processes)')
    render_parser.add_argument('--output', '-o', type=Path,
                               help='Write JSON here instead of stdout')

    args = parser.parse_args(argv)
    logging.basicConfig(
        level=logging.INFO if args.verbose else logging.ERROR,
        format="%(levelname)s %(name)s: %(message)s",
    )

    if args.snapshot is None and args.schedule is None:
        parser.error("nothing to render: give a snapshot and/or --schedule")

    try:
        views = render(args.snapshot, args.schedule)
    except (OSError, json.JSONDecodeError) as e:
        print(f"[!] Cannot read payload: {e}", file=sys.stderr)
        return 1

    text = json.dumps(views, indent=2, ensure_ascii=False)
    if args.output:
        args.output.write_text(text + "\n", encoding="utf-8")
        print(f"[*] Views written to {args.output}")
    else:
        print(text)
    return 0


if __name__ == "__main__":
    sys.exit(main())
