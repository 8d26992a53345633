"""Ordered line-parsing strategies.

Both parsers describe their fallbacks as a table of named strategies. The
first strategy whose result is usable wins; later entries are fallbacks only.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Sequence

from delivery_reconciler.model import QuantitySet
from delivery_reconciler.text_utils import is_sentinel_name

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class ParseResult:
    """Client name and quantities extracted from one line."""

    name: str = ""
    quantities: QuantitySet = QuantitySet()

    @property
    def ok(self) -> bool:
        return (
            len(self.name) > 1
            and self.quantities.total > 0
            and not is_sentinel_name(self.name)
        )


NO_RESULT = ParseResult()


@dataclass(frozen=True, slots=True)
class ParseStrategy:
    name: str
    parse: Callable[[str], ParseResult]


def run_strategies(
    line: str, strategies: Sequence[ParseStrategy]
) -> tuple[str, ParseResult] | None:
    """Try ``strategies`` in order and return the first usable result."""
    for strategy in strategies:
        result = strategy.parse(line)
        if result.ok:
            logger.debug("Parsed %r with %s strategy", line, strategy.name)
            return strategy.name, result
    logger.debug("No strategy produced a record for %r", line)
    return None


__all__ = ["NO_RESULT", "ParseResult", "ParseStrategy", "run_strategies"]
