from __future__ import annotations

import json
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Iterable, Sequence

from delivery_reconciler.compare import summarise
from delivery_reconciler.model import (
    PRODUCT_CODES,
    PRODUCT_LABELS,
    ComparisonReport,
    QuantitySet,
    ReconciliationMetrics,
    ReconciliationRow,
)

FREEZER_MARK = "🧊"


def iso_timestamp() -> str:
    return datetime.now(timezone.utc).isoformat()


def _signed(value: int) -> str:
    return f"+{value}" if value > 0 else str(value)


def format_quantities(quantities: QuantitySet, *, signed: bool = False) -> str:
    render = _signed if signed else str
    return ", ".join(
        f"{PRODUCT_LABELS[code]}:{render(quantities.get(code))}" for code in PRODUCT_CODES
    )


def _client_heading(row: ReconciliationRow, suffix: str) -> str:
    freezer = f" {FREEZER_MARK}" if row.has_freezer else ""
    return f"• {row.client_name}{freezer} - {suffix}"


def _delivered_lines(row: ReconciliationRow) -> list[str]:
    return [
        _client_heading(row, row.zone),
        f"  Planned: {format_quantities(row.planned)}",
        f"  Delivered: {format_quantities(row.delivered)}",
        f"  Variance: {format_quantities(row.variance, signed=True)}",
    ]


def _missed_lines(row: ReconciliationRow) -> list[str]:
    return [
        _client_heading(row, row.zone),
        f"  Planned: {format_quantities(row.planned)} - NOT DELIVERED",
    ]


def _unplanned_lines(row: ReconciliationRow) -> list[str]:
    return [
        _client_heading(row, "Not in Plan"),
        f"  Delivered: {format_quantities(row.delivered)}",
    ]


def format_report(
    rows: Sequence[ReconciliationRow],
    plan_date: str = "Date not specified",
    delivery_date: str = "Date not specified",
) -> str:
    """Render a reconciliation as a plain-text report.

    Sections appear in a fixed order: delivered, missed, unplanned (only when
    there are any), summary, then urgent follow-ups (only when there are any).
    """
    delivered = [r for r in rows if r.status == "Delivered"]
    missed = [r for r in rows if r.status == "Missed"]
    unplanned = [r for r in rows if r.status == "Unplanned"]
    urgent = [r for r in rows if r.follow_up_action == "urgent_followup"]
    stats = summarise(rows)

    lines = [
        "📊 Plan vs Actual Delivery Comparison",
        f"📅 Plan Date: {plan_date} | Delivery Date: {delivery_date}",
        "",
        f"✅ DELIVERED CLIENTS ({len(delivered)}):",
    ]
    for row in delivered:
        lines.extend(_delivered_lines(row))
    if not delivered:
        lines.append("• None")

    lines += ["", f"❌ MISSED CLIENTS ({len(missed)}):"]
    for row in missed:
        lines.extend(_missed_lines(row))
    if not missed:
        lines.append("• None")

    if unplanned:
        lines += ["", f"🆕 UNPLANNED DELIVERIES ({len(unplanned)}):"]
        for row in unplanned:
            lines.extend(_unplanned_lines(row))

    lines += [
        "",
        "📈 SUMMARY:",
        f"• Total planned clients: {stats.delivered + stats.missed}",
        f"• Successfully delivered: {stats.delivered}",
        f"• Missed deliveries: {stats.missed}",
        f"• Unplanned deliveries: {stats.unplanned}",
        f"• Fulfillment rate: {stats.fulfillment_rate}%",
        f"• Planned totals: {format_quantities(stats.planned_totals)}",
        f"• Delivered totals: {format_quantities(stats.delivered_totals)}",
    ]

    if urgent:
        lines += ["", f"🚨 URGENT FOLLOW-UPS ({len(urgent)}):"]
        for row in urgent:
            lines.append(
                f"• {row.client_name} {FREEZER_MARK} - {row.zone}: freezer client missed delivery"
            )

    return "\n".join(lines)


def build_metrics(rows: Iterable[ReconciliationRow]) -> ReconciliationMetrics:
    stats = summarise(rows)
    return ReconciliationMetrics(
        total_planned=stats.delivered + stats.missed,
        total_delivered=stats.delivered,
        missed=stats.missed,
        extras=stats.unplanned,
        fulfillment_rate=stats.fulfillment_rate,
    )


def _serialise_row(row: ReconciliationRow) -> Dict[str, Any]:
    return {
        "clientName": row.client_name,
        "status": row.status,
        "planned": row.planned.as_dict(),
        "delivered": row.delivered.as_dict(),
        "variance": row.variance.as_dict(),
        "hasFreezer": row.has_freezer,
        "zone": row.zone,
        "followUpAction": row.follow_up_action,
        "matchedName": row.matched_name,
        "matchScore": row.match_score,
    }


def build_report_payload(report: ComparisonReport) -> Dict[str, Any]:
    """Build the JSON payload for a finished comparison."""

    metrics = report.metrics or build_metrics(report.rows)
    by_status = {
        status: [_serialise_row(r) for r in report.rows if r.status == status]
        for status in ("Delivered", "Missed", "Unplanned")
    }
    return {
        "status": "success",
        "timestamp": iso_timestamp(),
        "planDate": report.plan_date,
        "deliveryDate": report.delivery_date,
        "summary": metrics.as_dict(),
        "plannedTotals": report.stats.planned_totals.as_dict(),
        "deliveredTotals": report.stats.delivered_totals.as_dict(),
        "deliveredClients": by_status["Delivered"],
        "missedClients": by_status["Missed"],
        "unplannedDeliveries": by_status["Unplanned"],
        "urgentFollowUps": [_serialise_row(r) for r in report.urgent_follow_ups],
        "formattedOutput": report.text,
        "warning": report.warning,
        "error": None,
    }


def build_error_payload(message: str) -> Dict[str, Any]:
    return {
        "status": "error",
        "timestamp": iso_timestamp(),
        "summary": ReconciliationMetrics(0, 0, 0, 0, 0).as_dict(),
        "deliveredClients": [],
        "missedClients": [],
        "unplannedDeliveries": [],
        "urgentFollowUps": [],
        "error": message,
    }


def write_payload(payload: Dict[str, Any], output_path: Path) -> Path:
    output_path.parent.mkdir(parents=True, exist_ok=True)
    with output_path.open("w", encoding="utf-8") as f:
        json.dump(payload, f, indent=2, ensure_ascii=False)

    return output_path


def write_report_to_json(report: ComparisonReport, output_path: Path) -> Path:
    return write_payload(build_report_payload(report), output_path)


__all__ = [
    "build_error_payload",
    "build_metrics",
    "build_report_payload",
    "format_quantities",
    "format_report",
    "iso_timestamp",
    "write_payload",
    "write_report_to_json",
]
