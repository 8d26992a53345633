from __future__ import annotations

import logging
from typing import Iterable, Sequence

from delivery_reconciler.matching import MATCH_THRESHOLD, best_match, find_directory_entry
from delivery_reconciler.model import (
    DeliveredRecord,
    DirectoryEntry,
    PlannedRecord,
    QuantitySet,
    ReconciliationRow,
    ReconciliationStats,
)

logger = logging.getLogger(__name__)

UNKNOWN_ZONE = "Unknown"


def fulfillment_rate(delivered: int, missed: int) -> int:
    """Percentage of planned clients served, rounded half up; 0 when none."""
    considered = delivered + missed
    if considered == 0:
        return 0
    return (200 * delivered + considered) // (2 * considered)


def _directory_status(
    names: Iterable[str], directory: Sequence[DirectoryEntry]
) -> tuple[bool, str]:
    for name in names:
        entry = find_directory_entry(name, directory)
        if entry is not None:
            return entry.is_freezer_client, entry.location or UNKNOWN_ZONE
    return False, UNKNOWN_ZONE


def reconcile(
    planned: Sequence[PlannedRecord],
    delivered: Sequence[DeliveredRecord],
    directory: Sequence[DirectoryEntry] = (),
) -> tuple[list[ReconciliationRow], ReconciliationStats]:
    """Classify every planned and delivered record as Delivered, Missed or Unplanned."""

    delivered_names = [d.client_name for d in delivered]
    claimed: set[int] = set()  # Delivered indices already paired with a plan row
    rows: list[ReconciliationRow] = []

    for plan in planned:
        index, score = best_match(plan.client_name, delivered_names, claimed)

        if index is not None and score >= MATCH_THRESHOLD:
            claimed.add(index)
            actual = delivered[index]
            has_freezer, zone = _directory_status(
                (plan.client_name, actual.client_name), directory
            )
            rows.append(
                ReconciliationRow(
                    client_name=plan.client_name,
                    status="Delivered",
                    planned=plan.quantities,
                    delivered=actual.quantities,
                    variance=actual.quantities - plan.quantities,
                    has_freezer=has_freezer,
                    zone=zone,
                    follow_up_action="none",
                    matched_name=actual.client_name,
                    match_score=score,
                )
            )
            continue

        # Planned but not delivered
        has_freezer, zone = _directory_status((plan.client_name,), directory)
        rows.append(
            ReconciliationRow(
                client_name=plan.client_name,
                status="Missed",
                planned=plan.quantities,
                delivered=QuantitySet(),
                variance=plan.quantities.negated(),
                has_freezer=has_freezer,
                zone=zone,
                follow_up_action="urgent_followup" if has_freezer else "followup",
            )
        )

    # Delivered but never planned
    for idx, actual in enumerate(delivered):
        if idx in claimed:
            continue
        has_freezer, zone = _directory_status((actual.client_name,), directory)
        rows.append(
            ReconciliationRow(
                client_name=actual.client_name,
                status="Unplanned",
                planned=QuantitySet(),
                delivered=actual.quantities,
                variance=actual.quantities,
                has_freezer=has_freezer,
                zone=zone,
                follow_up_action="review",
            )
        )

    stats = summarise(rows)
    logger.info(
        "Reconciled %d planned vs %d delivered: %d delivered, %d missed, %d unplanned",
        len(planned),
        len(delivered),
        stats.delivered,
        stats.missed,
        stats.unplanned,
    )
    return rows, stats


def summarise(rows: Iterable[ReconciliationRow]) -> ReconciliationStats:
    """Counts per status, fulfillment rate and per-product totals."""
    stats = ReconciliationStats()
    for row in rows:
        if row.status == "Delivered":
            stats.delivered += 1
        elif row.status == "Missed":
            stats.missed += 1
        else:
            stats.unplanned += 1
        stats.planned_totals = stats.planned_totals + row.planned
        stats.delivered_totals = stats.delivered_totals + row.delivered
    stats.fulfillment_rate = fulfillment_rate(stats.delivered, stats.missed)
    return stats


__all__ = ["fulfillment_rate", "reconcile", "summarise"]
