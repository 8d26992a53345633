"""Plan versus delivery reconciliation toolkit.

Exposes the high-level ``compare_texts`` and ``run_delivery_comparison``
APIs for programmatic use.
"""

from .compare import reconcile  # Matching engine
from .delivery_parser import parse_delivery
from .plan_parser import parse_plan
from .runner import compare_texts, run_delivery_comparison  # Public API

__all__ = [
    "compare_texts",
    "parse_delivery",
    "parse_plan",
    "reconcile",
    "run_delivery_comparison",
]
