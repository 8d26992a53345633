"""Domain models for plan versus delivery reconciliation.

These dataclasses represent the core entities shared throughout the tool:
product quantities, planned and delivered client records, the client
directory, and the rows and statistics produced by a reconciliation.
"""

from __future__ import annotations  # Postponed evaluation of annotations (PEP 563)

from dataclasses import dataclass, field  # Dataclass utilities
from typing import Iterable, Literal, Mapping  # Constrained string types for clarity

ProductCode = Literal["SMALL", "LARGE", "VARIANT", "CUP"]  # Tracked product units
RowStatus = Literal["Delivered", "Missed", "Unplanned"]  # Outcome of a client row
FollowUpAction = Literal[
    "none", "followup", "urgent_followup", "review"
]  # What the operator should do next

PRODUCT_CODES: tuple[ProductCode, ...] = ("SMALL", "LARGE", "VARIANT", "CUP")

# Labels used by the business for each code (3KG bag, 5KG bag, V00 bag, cup)
PRODUCT_LABELS: dict[str, str] = {
    "SMALL": "3KG",
    "LARGE": "5KG",
    "VARIANT": "V00",
    "CUP": "Cup",
}


@dataclass(frozen=True, slots=True)
class QuantitySet:
    """Per-product counts. Every code is always present and defaults to 0.

    Parsed quantities are never negative; a variance set (``delivered -
    planned``) may hold negative values.
    """

    small: int = 0
    large: int = 0
    variant: int = 0
    cup: int = 0

    @classmethod
    def from_mapping(cls, values: Mapping[str, int]) -> "QuantitySet":
        """Build a set from a ``{code: count}`` mapping; missing codes are 0."""
        unknown = set(values) - set(PRODUCT_CODES)
        if unknown:
            raise ValueError(f"Unknown product codes: {sorted(unknown)}")
        return cls(**{code.lower(): int(values.get(code, 0)) for code in PRODUCT_CODES})

    @classmethod
    def from_values(cls, numbers: Iterable[int]) -> "QuantitySet":
        """Map positional numbers onto SMALL, LARGE, VARIANT, CUP in that order."""
        counts = list(numbers)[: len(PRODUCT_CODES)]
        return cls(*counts)

    def get(self, code: str) -> int:
        if code not in PRODUCT_CODES:
            raise KeyError(code)
        return getattr(self, code.lower())

    @property
    def total(self) -> int:
        return self.small + self.large + self.variant + self.cup

    def is_empty(self) -> bool:
        return not any(self.as_dict().values())

    def as_dict(self) -> dict[str, int]:
        return {code: self.get(code) for code in PRODUCT_CODES}

    def negated(self) -> "QuantitySet":
        return QuantitySet(-self.small, -self.large, -self.variant, -self.cup)

    def __add__(self, other: "QuantitySet") -> "QuantitySet":
        return QuantitySet(
            self.small + other.small,
            self.large + other.large,
            self.variant + other.variant,
            self.cup + other.cup,
        )

    def __sub__(self, other: "QuantitySet") -> "QuantitySet":
        return self + other.negated()

    def __str__(self) -> str:
        return ", ".join(
            f"{PRODUCT_LABELS[code]}:{self.get(code)}" for code in PRODUCT_CODES
        )


@dataclass(frozen=True, slots=True)
class PlannedRecord:
    """One client's expected quantities, taken from a single plan line."""

    client_name: str  # Cleaned, non-empty client name
    quantities: QuantitySet
    source_line: str = ""  # Original plan line

    @property
    def total_quantity(self) -> int:
        return self.quantities.total


@dataclass(frozen=True, slots=True)
class DeliveredRecord:
    """One client's actual quantities, taken from a delivery report line."""

    client_name: str
    quantities: QuantitySet
    source_line: str = ""  # Original report line kept for audit

    @property
    def total_delivered(self) -> int:
        return self.quantities.total


@dataclass(frozen=True, slots=True)
class DirectoryEntry:
    """A known client from the master directory (read only)."""

    name: str
    location: str = "Unknown"  # Zone / district
    is_freezer_client: bool = False
    notes: str = ""


@dataclass(slots=True)
class ReconciliationRow:
    """Outcome for one planned client or one unplanned delivery."""

    client_name: str
    status: RowStatus
    planned: QuantitySet
    delivered: QuantitySet
    variance: QuantitySet  # delivered - planned, per code
    has_freezer: bool = False
    zone: str = "Unknown"
    follow_up_action: FollowUpAction = "none"
    matched_name: str | None = None  # Delivery-side name for Delivered rows
    match_score: int = 0


@dataclass(slots=True)
class ReconciliationStats:
    """Aggregate counts for a reconciliation."""

    delivered: int = 0
    missed: int = 0
    unplanned: int = 0
    fulfillment_rate: int = 0  # 0-100
    planned_totals: QuantitySet = field(default_factory=QuantitySet)
    delivered_totals: QuantitySet = field(default_factory=QuantitySet)


@dataclass(slots=True)
class ReconciliationMetrics:
    """Machine readable metrics for programmatic consumers.

    Unplanned deliveries are reported twice: as ``unplanned`` and as
    ``extras``, the key existing JSON consumers already read.
    """

    total_planned: int
    total_delivered: int
    missed: int
    extras: int  # Unplanned deliveries
    fulfillment_rate: int

    def as_dict(self) -> dict[str, int]:
        return {
            "totalPlanned": self.total_planned,
            "totalDelivered": self.total_delivered,
            "missed": self.missed,
            "unplanned": self.extras,
            "extras": self.extras,
            "fulfillmentRate": self.fulfillment_rate,
        }


@dataclass(slots=True)
class ComparisonReport:
    """Groups comparison outcomes for later processing."""

    rows: list[ReconciliationRow] = field(default_factory=list)
    stats: ReconciliationStats = field(default_factory=ReconciliationStats)
    metrics: ReconciliationMetrics | None = None
    text: str = ""  # Human readable summary
    plan_date: str = ""
    delivery_date: str = ""
    warning: str | None = None  # e.g. nothing matched

    @property
    def urgent_follow_ups(self) -> list[ReconciliationRow]:
        return [r for r in self.rows if r.follow_up_action == "urgent_followup"]


__all__ = [
    "ComparisonReport",
    "DeliveredRecord",
    "DirectoryEntry",
    "FollowUpAction",
    "PRODUCT_CODES",
    "PRODUCT_LABELS",
    "PlannedRecord",
    "ProductCode",
    "QuantitySet",
    "ReconciliationMetrics",
    "ReconciliationRow",
    "ReconciliationStats",
    "RowStatus",
]
