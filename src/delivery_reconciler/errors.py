"""Errors reported to the operator when a comparison cannot be produced.

Parsers and the reconciliation engine never raise these; they are raised by
the runner before or after parsing so the caller can tell "no plan provided"
apart from "nothing usable in the plan".
"""

from __future__ import annotations

from typing import Literal

InputKind = Literal["plan", "delivery"]


class ReconciliationError(ValueError):
    """Base class for user-actionable comparison failures."""

    user_message = "Comparison failed"

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or self.user_message)


class InputEmptyError(ReconciliationError):
    """Plan or delivery text is missing or blank."""

    def __init__(self, kind: InputKind) -> None:
        self.kind = kind
        self.user_message = (
            "No plan provided" if kind == "plan" else "No deliveries provided"
        )
        super().__init__(self.user_message)


class NoRecordsParsedError(ReconciliationError):
    """Non-empty input produced zero usable records."""

    def __init__(self, kind: InputKind) -> None:
        self.kind = kind
        self.user_message = (
            "No valid clients found in the plan"
            if kind == "plan"
            else "No valid deliveries found in the report"
        )
        super().__init__(self.user_message)


class PlanNotFoundError(ReconciliationError):
    user_message = "No distribution plan found. Please upload a plan first."


__all__ = [
    "InputEmptyError",
    "InputKind",
    "NoRecordsParsedError",
    "PlanNotFoundError",
    "ReconciliationError",
]
