from __future__ import annotations

import logging
from datetime import date
from pathlib import Path
from typing import List, Sequence

from delivery_reconciler import compare, directory, excel_reader
from delivery_reconciler.delivery_parser import parse_delivery
from delivery_reconciler.errors import (
    InputEmptyError,
    NoRecordsParsedError,
    PlanNotFoundError,
    ReconciliationError,
)
from delivery_reconciler.model import ComparisonReport, DirectoryEntry
from delivery_reconciler.plan_parser import parse_plan
from delivery_reconciler.plan_store import PlanStore
from delivery_reconciler.report import (
    build_error_payload,
    build_metrics,
    build_report_payload,
    format_report,
    write_payload,
)
from delivery_reconciler.text_utils import extract_date_from_text

logger = logging.getLogger(__name__)

DEFAULT_REPORT_NAME = "delivery_report.json"
NO_DATE = "Date not specified"
NOTHING_MATCHED = "Nothing matched: no planned client was found in the delivery report"

EXCEL_SUFFIXES = {".xlsx", ".xlsm"}


def date_label(value: date | None) -> str:
    return value.strftime("%a %b %d %Y") if value else NO_DATE


def read_plan_source(path: Path) -> str:
    """Plan text from a text file or the first sheet of a workbook."""
    path = Path(path)
    if path.suffix.lower() in EXCEL_SUFFIXES:
        return excel_reader.extract_plan_text(path)
    if not path.exists():
        raise FileNotFoundError(f"Plan file not found: {path}")
    return path.read_text(encoding="utf-8")


def load_directory_file(path: Path) -> List[DirectoryEntry]:
    """Directory entries from a JSON export or a ``clients`` worksheet."""
    path = Path(path)
    if path.suffix.lower() in EXCEL_SUFFIXES:
        return excel_reader.extract_directory(path)
    return directory.load_directory(path)


def compare_texts(
    plan_text: str | None,
    delivery_text: str | None,
    directory_entries: Sequence[DirectoryEntry] = (),
    *,
    plan_date: date | None = None,
    delivery_date: date | None = None,
) -> ComparisonReport:
    """Parse both texts, reconcile them and format the result.

    Raises :class:`InputEmptyError` for blank input and
    :class:`NoRecordsParsedError` when a text holds no usable rows.
    """

    # 1. Validate input
    if not plan_text or not plan_text.strip():
        raise InputEmptyError("plan")
    if not delivery_text or not delivery_text.strip():
        raise InputEmptyError("delivery")

    # 2. Parse both sides
    planned = parse_plan(plan_text)
    if not planned:
        raise NoRecordsParsedError("plan")
    delivered = parse_delivery(delivery_text)
    if not delivered:
        raise NoRecordsParsedError("delivery")

    # 3. Reconcile
    rows, stats = compare.reconcile(planned, delivered, directory_entries)

    # 4. Format
    plan_label = date_label(plan_date or extract_date_from_text(plan_text))
    delivery_label = date_label(delivery_date or extract_date_from_text(delivery_text))
    report = ComparisonReport(
        rows=rows,
        stats=stats,
        metrics=build_metrics(rows),
        text=format_report(rows, plan_label, delivery_label),
        plan_date=plan_label,
        delivery_date=delivery_label,
    )
    if stats.delivered == 0:
        report.warning = NOTHING_MATCHED
        logger.warning(NOTHING_MATCHED)
    return report


def resolve_plan_text(
    plan_text: str | None, delivery_text: str, plan_store: PlanStore | None
) -> str | None:
    """Save a fresh plan, or fall back to the stored plan for the delivery date."""
    if plan_store is None:
        return plan_text
    if plan_text and plan_text.strip():
        plan_store.save_plan(plan_text)
        return plan_text

    delivery_day = extract_date_from_text(delivery_text) or date.today()
    stored = plan_store.get_plan_for_date(delivery_day)
    if stored is None:
        raise PlanNotFoundError()
    logger.info("Using stored plan for %s", stored.plan_date)
    return stored.plan_text


def run_delivery_comparison(
    plan_text: str | None,
    delivery_text: str | None,
    *,
    directory_path: str | None = None,
    output_path: str | None = None,
    plan_store: PlanStore | None = None,
) -> Path:
    """Compare a plan with a delivery report and write a JSON report."""

    report_path = Path(output_path) if output_path else Path(DEFAULT_REPORT_NAME)

    try:
        if not delivery_text or not delivery_text.strip():
            raise InputEmptyError("delivery")
        plan_text = resolve_plan_text(plan_text, delivery_text, plan_store)
        entries = load_directory_file(Path(directory_path)) if directory_path else []

        report = compare_texts(plan_text, delivery_text, entries)
        write_payload(build_report_payload(report), report_path)

    except ReconciliationError as exc:
        logger.error("Comparison not produced: %s", exc)
        write_payload(build_error_payload(str(exc)), report_path)
    except (OSError, ValueError) as exc:
        logger.exception("Comparison failed")
        write_payload(build_error_payload(str(exc)), report_path)

    return report_path


__all__ = [
    "DEFAULT_REPORT_NAME",
    "compare_texts",
    "date_label",
    "load_directory_file",
    "read_plan_source",
    "resolve_plan_text",
    "run_delivery_comparison",
]
