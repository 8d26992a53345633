"""Text helpers shared by the plan and delivery parsers."""

from __future__ import annotations

import re
from datetime import date
from typing import Iterable, Iterator

from delivery_reconciler.quantities import normalize_digits

# Total / summary labels that never name a client, in either language
SENTINEL_TERMS: tuple[str, ...] = (
    "total",
    "grand total",
    "اجمالي",
    "إجمالي",
    "الاجمالي",
    "الإجمالي",
    "المجموع",
)

_LEADING_NOISE = re.compile(r"^[\W\d_]+")
# Separators and whitespace-delimited numbers; "Store-2" keeps its digit
_TRAILING_NOISE = re.compile(r"(?:\s+\d+|[\s\-–—:|.,+*#/\\])+$")
_WHITESPACE = re.compile(r"\s+")

_EN_MONTHS = {
    "jan": 1, "feb": 2, "mar": 3, "apr": 4, "may": 5, "jun": 6,
    "jul": 7, "aug": 8, "sep": 9, "oct": 10, "nov": 11, "dec": 12,
}
_AR_MONTHS = {
    "يناير": 1, "فبراير": 2, "مارس": 3, "أبريل": 4, "ابريل": 4, "مايو": 5,
    "يونيو": 6, "يوليو": 7, "أغسطس": 8, "اغسطس": 8, "سبتمبر": 9,
    "أكتوبر": 10, "اكتوبر": 10, "نوفمبر": 11, "ديسمبر": 12,
}
_EN_MONTH_NAMES = (
    r"jan(?:uary)?|feb(?:ruary)?|mar(?:ch)?|apr(?:il)?|may|june?|july?"
    r"|aug(?:ust)?|sep(?:t(?:ember)?)?|oct(?:ober)?|nov(?:ember)?|dec(?:ember)?"
)
# Whole words only: "Omar" and "Mayar" are names, not months
_MONTH_NAMES = rf"(?<![^\W\d_])(?:{'|'.join(_AR_MONTHS)}|{_EN_MONTH_NAMES})(?![^\W\d_])"

_DAY_FIRST = re.compile(r"\b(\d{1,2})[/\-.](\d{1,2})[/\-.](\d{4})\b")
_YEAR_FIRST = re.compile(r"\b(\d{4})[/\-.](\d{1,2})[/\-.](\d{1,2})\b")
_DAY_MONTH_NAME = re.compile(
    rf"(?<!\d)(\d{{1,2}})\s*({_MONTH_NAMES})\s*,?\s*(\d{{4}})(?!\d)", re.IGNORECASE
)
_MONTH_NAME_DAY = re.compile(
    rf"({_MONTH_NAMES})\s*(\d{{1,2}})\s*,?\s*(\d{{4}})(?!\d)", re.IGNORECASE
)

# Pattern and the order of its (day, month, year) groups, tried in turn
_DATE_PATTERNS: tuple[tuple[re.Pattern[str], str], ...] = (
    (_DAY_FIRST, "dmy"),
    (_YEAR_FIRST, "ymd"),
    (_DAY_MONTH_NAME, "dmy"),
    (_MONTH_NAME_DAY, "mdy"),
)


def collapse_whitespace(text: str) -> str:
    return _WHITESPACE.sub(" ", text).strip()


def contains_term(text: str, terms: Iterable[str]) -> bool:
    """Case-insensitive whole-word check against a vocabulary.

    ``"Total"`` matches ``"Total: 40"`` but not ``"Totally Fresh"``.
    """
    for term in terms:
        pattern = rf"(?<!\w){re.escape(term)}(?!\w)"
        if re.search(pattern, text, re.IGNORECASE):
            return True
    return False


def is_sentinel_name(name: str) -> bool:
    """True for header/total labels that reduce to a client-like name."""
    return collapse_whitespace(name).lower() in SENTINEL_TERMS


def clean_client_name(raw: str) -> str:
    """Strip row numbers, punctuation noise and trailing stray digits.

    >>> clean_client_name("12- Acme Store 3")
    'Acme Store'
    """
    name = normalize_digits(raw or "")
    name = _LEADING_NOISE.sub("", name)
    name = _TRAILING_NOISE.sub("", name)
    return collapse_whitespace(name)


def _month_number(token: str) -> int | None:
    if token.isdigit():
        return int(token)
    token = token.lower()
    if token in _AR_MONTHS:
        return _AR_MONTHS[token]
    return _EN_MONTHS.get(token[:3])


def _safe_date(year: int, month: int | None, day: int) -> date | None:
    if month is None:
        return None
    try:
        return date(year, month, day)
    except ValueError:
        return None


def _find_dates(text: str) -> Iterator[tuple[re.Match[str], date]]:
    for pattern, order in _DATE_PATTERNS:
        for match in pattern.finditer(text):
            parts = dict(zip(order, match.groups()))
            found = _safe_date(int(parts["y"]), _month_number(parts["m"]), int(parts["d"]))
            if found:
                yield match, found


def extract_date_from_text(text: str | None) -> date | None:
    """Return the first recognisable date in ``text`` (day-first for D/M/Y)."""
    if not text:
        return None
    for _, found in _find_dates(normalize_digits(text)):
        return found
    return None


def strip_dates(text: str) -> str:
    """Blank out every recognisable date so its digits are not read as counts.

    >>> strip_dates("Acme, 10, 5, due 5/3/2025")
    'Acme, 10, 5, due  '
    """
    text = normalize_digits(text)
    covered = [False] * len(text)
    for match, _ in _find_dates(text):
        for idx in range(*match.span()):
            covered[idx] = True
    pieces: list[str] = []
    for idx, char in enumerate(text):
        if not covered[idx]:
            pieces.append(char)
        elif idx == 0 or not covered[idx - 1]:
            pieces.append(" ")
    return "".join(pieces)


__all__ = [
    "SENTINEL_TERMS",
    "clean_client_name",
    "collapse_whitespace",
    "contains_term",
    "extract_date_from_text",
    "is_sentinel_name",
    "strip_dates",
]
