"""Split-time analysis script: build Markdown results tables from a JSON event file.

Usage:
  python scripts/analyze_event.py event.json \\
      --class M21E --class M20E \\
      --output results.md \\
      --commentary

The event file has the same shape as the ``event`` field of the web API
requests.  Commentary needs ``SPLITS_LLM_API_KEY`` (without it, rule-based
commentary is used).
"""

from __future__ import annotations

import argparse
import json
import logging
import sys

from dotenv import load_dotenv
from pydantic import ValidationError

from splits_analysis.analysis.course_class_set import CourseClassSet
from splits_analysis.analysis.data_repair import prepare_event
from splits_analysis.model.errors import InvalidDataError
from splits_analysis.reporting.aggregator import ClassReportAggregator
from splits_analysis.reporting.formatter import MarkdownFormatter
from splits_analysis.reporting.llm_client import CommentaryClient
from splits_analysis.web.schemas import EventPayload
from splits_analysis.web.service import build_event


def _fail(message: str) -> None:
    print(f"  [!] {message}", file=sys.stderr)
    sys.exit(1)


def main() -> None:
    load_dotenv()
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")

    ap = argparse.ArgumentParser(description="Generate split-time results tables for an event")
    ap.add_argument("event", help="JSON event file")
    ap.add_argument(
        "--class",
        dest="class_names",
        action="append",
        help="Class to include (repeat to compare classes together); default: every class separately",
    )
    ap.add_argument("--no-repair", action="store_true", help="Keep the data as read, without repair")
    ap.add_argument("--output", default="results.md", help="Output Markdown file path")
    ap.add_argument("--commentary", action="store_true", help="Add LLM (or rule-based) commentary")
    args = ap.parse_args()

    print(f"Event file: {args.event}")
    print(f"Repair    : {'off' if args.no_repair else 'on'}")
    print()

    # ------------------------------------------------------------------
    # 1. Load and build the event
    # ------------------------------------------------------------------
    print("1/4  Loading event...")
    try:
        with open(args.event, encoding="utf-8") as f:
            payload = EventPayload.model_validate(json.load(f))
        event = build_event(payload)
    except (OSError, json.JSONDecodeError, ValidationError, InvalidDataError) as exc:
        _fail(f"Cannot read {args.event}: {exc}")
    print(f"     {len(event.classes)} class(es), {len(event.courses)} course(s)")

    # ------------------------------------------------------------------
    # 2. Repair and time losses
    # ------------------------------------------------------------------
    print("2/4  Repairing data and determining time losses...")
    prepare_event(event, repair=not args.no_repair)
    dubious = [c.name for c in event.classes if c.has_dubious_data]
    if dubious:
        print(f"     Dubious times removed in: {', '.join(dubious)}")

    # ------------------------------------------------------------------
    # 3. Rank and aggregate
    # ------------------------------------------------------------------
    print("3/4  Ranking results...")
    class_map = {c.name: c for c in event.classes}
    if args.class_names:
        missing = [n for n in args.class_names if n not in class_map]
        if missing:
            _fail(f"Unknown class(es): {', '.join(missing)}")
        selections = [[class_map[n] for n in args.class_names]]
    else:
        selections = [[c] for c in event.classes]

    try:
        reports = [ClassReportAggregator().aggregate(CourseClassSet(classes)) for classes in selections]
    except InvalidDataError as exc:
        _fail(str(exc))

    if args.commentary:
        client = CommentaryClient()
        reports = [client.analyze(r) for r in reports]

    # ------------------------------------------------------------------
    # 4. Write Markdown
    # ------------------------------------------------------------------
    print(f"4/4  Writing report -> {args.output}")
    formatter = MarkdownFormatter()
    with open(args.output, "w", encoding="utf-8") as f:
        f.write("\n".join(formatter.format(r) for r in reports))
    print(f"\n[OK] Done: {args.output}")


if __name__ == "__main__":
    main()
