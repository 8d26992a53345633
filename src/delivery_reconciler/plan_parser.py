"""Turn distribution plan text into :class:`PlannedRecord` objects.

Plans arrive as pasted spreadsheet rows or OCR output: tab, pipe or
space separated columns with header and total rows mixed in. The expected
column order is ``client name | 3KG | 5KG | V00 | Cup | comment``.
"""

from __future__ import annotations

import logging
import re
from typing import Iterable, Sequence

from delivery_reconciler.model import PlannedRecord, QuantitySet
from delivery_reconciler.quantities import normalize_digits
from delivery_reconciler.strategies import (
    NO_RESULT,
    ParseResult,
    ParseStrategy,
    run_strategies,
)
from delivery_reconciler.text_utils import (
    clean_client_name,
    contains_term,
    strip_dates,
)

logger = logging.getLogger(__name__)

MIN_LINE_LENGTH = 4  # Shorter lines cannot hold a name and a quantity

# Column titles and total labels; any line containing one is skipped
PLAN_HEADER_TERMS: tuple[str, ...] = (
    "اسم العميل",
    "إسم العميل",
    "client name",
    "comment",
    "comments",
    "ملاحظات",
    "اجمالي",
    "إجمالي",
    "الاجمالي",
    "الإجمالي",
    "total",
    "3 kg",
    "5 kg",
    "3kg",
    "5kg",
    "v00",
    "cup",
)

_NUMBER = re.compile(r"\d+(?:\.0+)?")
_LETTER = re.compile(r"[^\W\d_]")
_NAME_RUN = re.compile(r"[A-Za-z][A-Za-z'&.\- ]*|[ء-ي][ء-ي ]*")
_STANDALONE_INT = re.compile(r"(?<![\w.])\d+(?![\w.])")


def _as_int(cell: str) -> int | None:
    cell = normalize_digits(cell.strip())
    if _NUMBER.fullmatch(cell):
        return int(float(cell))
    return None


def _has_letters(cell: str) -> bool:
    return bool(_LETTER.search(cell))


def _from_columns(cells: Sequence[str]) -> ParseResult:
    """Name is the first cell with letters; the next cells are positional."""
    cells = [c.strip() for c in cells]
    for idx, cell in enumerate(cells):
        if _has_letters(cell):
            break
    else:
        return NO_RESULT

    # A blank or textual cell keeps its position but counts as zero
    numbers = [_as_int(c) or 0 for c in cells[idx + 1 : idx + 5]]
    return ParseResult(clean_client_name(cells[idx]), QuantitySet.from_values(numbers))


def parse_tab_columns(line: str) -> ParseResult:
    if "\t" not in line:
        return NO_RESULT
    return _from_columns(line.split("\t"))


def parse_pipe_columns(line: str) -> ParseResult:
    if "|" not in line:
        return NO_RESULT
    cells = line.strip().strip("|").split("|")
    return _from_columns(cells)


def parse_spaced_columns(line: str) -> ParseResult:
    """``1 Acme Market 10 5 0 2`` - leading row numbers are skipped."""
    tokens = line.split()
    name_tokens: list[str] = []
    numbers: list[int] = []
    for token in tokens:
        value = _as_int(token)
        if value is None:
            if numbers:
                break  # Trailing comment
            name_tokens.append(token)
        elif name_tokens:
            numbers.append(value)
    if not name_tokens or not numbers:
        return NO_RESULT
    name = clean_client_name(" ".join(name_tokens))
    return ParseResult(name, QuantitySet.from_values(numbers))


def parse_name_and_integers(line: str) -> ParseResult:
    """Last resort: first run of letters plus every standalone integer."""
    text = normalize_digits(line)
    run = _NAME_RUN.search(text)
    if not run:
        return NO_RESULT
    numbers = [int(n) for n in _STANDALONE_INT.findall(text[run.end() :])]
    return ParseResult(clean_client_name(run.group()), QuantitySet.from_values(numbers))


PLAN_STRATEGIES: tuple[ParseStrategy, ...] = (
    ParseStrategy("tab", parse_tab_columns),
    ParseStrategy("pipe", parse_pipe_columns),
    ParseStrategy("spaced", parse_spaced_columns),
    ParseStrategy("regex", parse_name_and_integers),
)


def is_plan_header(line: str, header_terms: Iterable[str] = PLAN_HEADER_TERMS) -> bool:
    return contains_term(line, header_terms)


def parse_plan(
    text: str,
    header_terms: Iterable[str] = PLAN_HEADER_TERMS,
    strategies: Sequence[ParseStrategy] = PLAN_STRATEGIES,
) -> list[PlannedRecord]:
    """Return one :class:`PlannedRecord` per client row in ``text``.

    Lines that do not look like a client row (headers, totals, a dated
    title) are skipped, never reported as errors. Empty text yields an
    empty list.
    """
    if text is None:
        raise TypeError("plan text is required")

    header_terms = tuple(header_terms)
    records: list[PlannedRecord] = []
    for raw_line in text.splitlines():
        line = raw_line.strip()
        if len(line) < MIN_LINE_LENGTH or is_plan_header(line, header_terms):
            continue
        # Dates (the plan title, a dated comment) never count as quantities
        parsed = run_strategies(strip_dates(line), strategies)
        if parsed is None:
            continue
        _, result = parsed
        records.append(
            PlannedRecord(
                client_name=result.name,
                quantities=result.quantities,
                source_line=line,
            )
        )

    logger.info("Parsed %d planned clients", len(records))
    return records


__all__ = [
    "MIN_LINE_LENGTH",
    "PLAN_HEADER_TERMS",
    "PLAN_STRATEGIES",
    "is_plan_header",
    "parse_name_and_integers",
    "parse_pipe_columns",
    "parse_plan",
    "parse_spaced_columns",
    "parse_tab_columns",
]
