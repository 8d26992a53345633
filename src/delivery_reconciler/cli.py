"""Command-line interface for the plan versus delivery comparison."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path

from .plan_store import JsonPlanStore
from .runner import read_plan_source, run_delivery_comparison


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        description="Compare a distribution plan with a delivery report"
    )
    parser.add_argument(
        "--delivery",
        required=True,
        help="Text file containing the delivery report",
    )
    parser.add_argument(
        "--plan",
        help="Plan as a text file or Excel workbook (defaults to the stored plan)",
    )
    parser.add_argument("--directory", help="Client directory (JSON or Excel)")
    parser.add_argument("--output", help="Optional JSON output path")
    parser.add_argument("--plan-store", help="JSON file used to remember plans")
    parser.add_argument(
        "--text", action="store_true", help="Print the text report to stdout"
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")

    args = parser.parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        delivery_text = Path(args.delivery).read_text(encoding="utf-8")
        plan_text = read_plan_source(Path(args.plan)) if args.plan else None
    except (OSError, ValueError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    store = JsonPlanStore(args.plan_store) if args.plan_store else None
    path = run_delivery_comparison(
        plan_text,
        delivery_text,
        directory_path=args.directory,
        output_path=args.output,
        plan_store=store,
    )

    payload = json.loads(path.read_text(encoding="utf-8"))
    if payload["status"] != "success":
        print(f"Error: {payload['error']}", file=sys.stderr)
        return 1

    if args.text:
        print(payload["formattedOutput"])
    print(f"Report written to {path}")
    return 0


if __name__ == "__main__":  # pragma: no cover - manual invocation
    sys.exit(main())
