"""Storage for uploaded distribution plans.

The reconciliation itself never reads or writes plans. Callers that receive
a plan ahead of the delivery report (the plan is usually sent the night
before) save it here and look it up again when the report arrives. The most
recent plan for a date wins.
"""

from __future__ import annotations

import json
import logging
from dataclasses import asdict, dataclass, field
from datetime import date, datetime, timedelta, timezone
from pathlib import Path
from typing import Dict, List, Protocol

from delivery_reconciler.plan_parser import parse_plan
from delivery_reconciler.text_utils import extract_date_from_text

logger = logging.getLogger(__name__)

DEFAULT_PLAN_STORE = "distribution_plans.json"
MAX_STORED_PLANS = 30


@dataclass(slots=True)
class StoredPlan:
    plan_id: int
    plan_date: str  # ISO date the plan is for
    saved_at: str
    plan_text: str
    client_count: int = 0
    total_products: Dict[str, int] = field(default_factory=dict)


class PlanStore(Protocol):
    def save_plan(self, plan_text: str, plan_date: date | None = None) -> StoredPlan: ...

    def get_latest_plan(self) -> StoredPlan | None: ...

    def get_plan_for_date(self, target: date) -> StoredPlan | None: ...


def build_stored_plan(plan_text: str, plan_date: date | None = None) -> StoredPlan:
    """Parse ``plan_text`` for its summary figures and date it."""
    records = parse_plan(plan_text)
    totals: Dict[str, int] = {}
    for record in records:
        for code, count in record.quantities.as_dict().items():
            totals[code] = totals.get(code, 0) + count

    now = datetime.now(timezone.utc)
    plan_date = plan_date or extract_date_from_text(plan_text) or now.date()
    return StoredPlan(
        plan_id=int(now.timestamp() * 1000),
        plan_date=plan_date.isoformat(),
        saved_at=now.isoformat(),
        plan_text=plan_text,
        client_count=len(records),
        total_products=totals,
    )


class InMemoryPlanStore:
    """Plans kept newest first, at most ``max_plans`` of them."""

    def __init__(self, max_plans: int = MAX_STORED_PLANS) -> None:
        self.max_plans = max_plans
        self._plans: List[StoredPlan] = []

    def _load(self) -> List[StoredPlan]:
        return list(self._plans)

    def _dump(self, plans: List[StoredPlan]) -> None:
        self._plans = plans

    def save_plan(self, plan_text: str, plan_date: date | None = None) -> StoredPlan:
        plan = build_stored_plan(plan_text, plan_date)
        # A new plan replaces any plan saved for the same date
        plans = [p for p in self._load() if p.plan_date != plan.plan_date]
        plans.insert(0, plan)
        self._dump(plans[: self.max_plans])
        logger.info("Saved plan for %s with %d clients", plan.plan_date, plan.client_count)
        return plan

    def get_latest_plan(self) -> StoredPlan | None:
        plans = self._load()
        return plans[0] if plans else None

    def get_plan_for_date(self, target: date) -> StoredPlan | None:
        """Exact date, else the previous day's plan, else the latest plan."""
        plans = self._load()
        for wanted in (target, target - timedelta(days=1)):
            for plan in plans:
                if plan.plan_date == wanted.isoformat():
                    return plan
        return plans[0] if plans else None


class JsonPlanStore(InMemoryPlanStore):
    """Plan store persisted to a JSON file."""

    def __init__(self, path: Path | str = DEFAULT_PLAN_STORE, max_plans: int = MAX_STORED_PLANS) -> None:
        super().__init__(max_plans)
        self.path = Path(path)

    def _load(self) -> List[StoredPlan]:
        if not self.path.exists():
            return []
        data = json.loads(self.path.read_text(encoding="utf-8"))
        return [StoredPlan(**item) for item in data.get("plans", [])]

    def _dump(self, plans: List[StoredPlan]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with self.path.open("w", encoding="utf-8") as f:
            json.dump({"plans": [asdict(p) for p in plans]}, f, indent=2, ensure_ascii=False)


__all__ = [
    "DEFAULT_PLAN_STORE",
    "InMemoryPlanStore",
    "JsonPlanStore",
    "MAX_STORED_PLANS",
    "PlanStore",
    "StoredPlan",
    "build_stored_plan",
]
