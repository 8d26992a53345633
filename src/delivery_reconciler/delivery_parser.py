"""Turn a free-text delivery report into :class:`DeliveredRecord` objects.

Reports are written by drivers, one client per line, usually as a name, a
separator and a list of quantity phrases::

    سبوتشو أركان - 12ص + 8ك + 2كوب
    Acme - 10small + 5large

Report metadata (dates, times, phone numbers, driver / supervisor labels)
is skipped.
"""

from __future__ import annotations

import logging
import re
from typing import Iterable, Sequence

from delivery_reconciler.model import PRODUCT_CODES, DeliveredRecord, QuantitySet
from delivery_reconciler.quantities import (
    DEFAULT_MARKERS,
    QuantityTokenizer,
    UnitMarker,
    normalize_digits,
)
from delivery_reconciler.strategies import (
    NO_RESULT,
    ParseResult,
    ParseStrategy,
    run_strategies,
)
from delivery_reconciler.text_utils import SENTINEL_TERMS, clean_client_name, contains_term

logger = logging.getLogger(__name__)

ROLE_LABELS: tuple[str, ...] = (
    "مندوب",
    "المندوب",
    "سائق",
    "السائق",
    "مشرف",
    "المشرف",
    "تاريخ",
    "التاريخ",
    "driver",
    "rep",
    "supervisor",
    "salesman",
    "date",
)

METADATA_PATTERNS: tuple[re.Pattern[str], ...] = (
    re.compile(r"\b\d{1,2}:\d{2}\b"),  # 14:30
    re.compile(r"\b\d{1,2}/\d{1,2}/\d{2,4}\b"),  # 5/3/2025
    re.compile(r"\b\d{4}-\d{1,2}-\d{1,2}\b"),  # 2025-03-05
    re.compile(r"(?<!\d)\+?\d{7,}(?!\d)"),  # 01012345678, +201012345678
    re.compile(r"(?<!\d)\d{3,4}[\s-]\d{3,4}[\s-]\d{3,4}(?!\d)"),  # 010 1234 5678
)

# Hyphen-like separators between the client name and the quantities, in
# order of preference. A spaced separator wins anywhere in the line, so
# "Store-2 - 5small" splits after "Store-2"; a bare one ("Acme-10ص") only
# counts when a number follows it.
SEPARATORS: tuple[re.Pattern[str], ...] = (
    re.compile(r"\s+[-–—:]\s*"),
    re.compile(r"[-–—:]\s*(?=\d)"),
)


def is_metadata_line(line: str, role_labels: Iterable[str] = ROLE_LABELS) -> bool:
    text = normalize_digits(line)
    if any(p.search(text) for p in METADATA_PATTERNS):
        return True
    return contains_term(text, role_labels) or contains_term(text, SENTINEL_TERMS)


def split_name(line: str) -> tuple[str, str] | None:
    """Split ``line`` into (name candidate, quantity text) on the first separator."""
    for separator in SEPARATORS:
        match = separator.search(line)
        if match:
            return line[: match.start()], line[match.end() :]
    return None


class DeliveryLineParser:
    """Line strategies bound to one marker table."""

    def __init__(self, markers: Sequence[UnitMarker] = DEFAULT_MARKERS) -> None:
        self.tokenizer = QuantityTokenizer(markers)
        self._code_patterns = dict(self.tokenizer.patterns_by_code())
        self.strategies: tuple[ParseStrategy, ...] = (
            ParseStrategy("separator", self.parse_separated),
            ParseStrategy("marker_anchor", self.parse_marker_anchored),
        )

    def parse_separated(self, line: str) -> ParseResult:
        parts = split_name(line)
        if parts is None:
            return NO_RESULT
        name, quantity_text = parts
        return ParseResult(clean_client_name(name), self.tokenizer.tokenize(quantity_text))

    def parse_marker_anchored(self, line: str) -> ParseResult:
        """Run each unit's pattern over the whole line on its own."""
        text = normalize_digits(line)
        counts = dict.fromkeys(PRODUCT_CODES, 0)
        spans: list[tuple[int, int]] = []
        for code in PRODUCT_CODES:
            pattern = self._code_patterns.get(code)
            if pattern is None:
                continue
            for match in pattern.finditer(text):
                counts[code] += int(match.group(1))
                spans.append(match.span())
        if not spans:
            return NO_RESULT

        name = ""
        parts = split_name(text)
        if parts is not None and self.tokenizer.tokenize(parts[0]).is_empty():
            name = clean_client_name(parts[0])
        if not name:
            name = clean_client_name(text[: min(start for start, _ in spans)])
        if not name:
            name = clean_client_name(text[max(end for _, end in spans) :])
        return ParseResult(name, QuantitySet.from_mapping(counts))

    def parse_line(self, line: str) -> ParseResult | None:
        parsed = run_strategies(line, self.strategies)
        return parsed[1] if parsed else None


DEFAULT_LINE_PARSER = DeliveryLineParser()
DELIVERY_STRATEGIES = DEFAULT_LINE_PARSER.strategies


def parse_delivery(
    text: str,
    markers: Sequence[UnitMarker] | None = None,
    role_labels: Iterable[str] = ROLE_LABELS,
) -> list[DeliveredRecord]:
    """Return one :class:`DeliveredRecord` per delivery line in ``text``.

    Unparsable lines are skipped. Empty text yields an empty list.
    """
    if text is None:
        raise TypeError("delivery text is required")

    line_parser = DEFAULT_LINE_PARSER if markers is None else DeliveryLineParser(markers)
    role_labels = tuple(role_labels)
    records: list[DeliveredRecord] = []
    for raw_line in text.splitlines():
        line = raw_line.strip()
        if not line:
            continue
        if is_metadata_line(line, role_labels):
            logger.debug("Skipping report metadata: %r", line)
            continue

        result = line_parser.parse_line(line)
        if result is None:
            continue
        records.append(
            DeliveredRecord(
                client_name=result.name,
                quantities=result.quantities,
                source_line=line,
            )
        )

    logger.info("Parsed %d delivered clients", len(records))
    return records


__all__ = [
    "DEFAULT_LINE_PARSER",
    "DELIVERY_STRATEGIES",
    "DeliveryLineParser",
    "METADATA_PATTERNS",
    "ROLE_LABELS",
    "SEPARATORS",
    "is_metadata_line",
    "parse_delivery",
    "split_name",
]
