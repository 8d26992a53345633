"""Extract product quantities from a text fragment.

A quantity is written as an integer followed by a unit marker, e.g. ``12ص``,
``8 ك``, ``2كوب`` or ``10small``. Each marker maps to a product code.

Several Arabic markers overlap: the large-bag marker ``ك`` is the first
letter of the cup marker ``كوب``. Markers are therefore tried longest first,
so ``3كوب`` is read as three cups and never as three large bags.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Iterable, Sequence

from delivery_reconciler.model import PRODUCT_CODES, QuantitySet

# Arabic-Indic and extended Arabic-Indic digits -> ASCII
_DIGIT_TABLE = str.maketrans("٠١٢٣٤٥٦٧٨٩۰۱۲۳۴۵۶۷۸۹", "01234567890123456789")

_ARABIC_LETTERS = "ء-ي"


@dataclass(frozen=True, slots=True)
class UnitMarker:
    """A textual unit marker and the product code it stands for."""

    marker: str
    code: str

    def __post_init__(self) -> None:
        if self.code not in PRODUCT_CODES:
            raise ValueError(f"Unknown product code: {self.code}")
        if not self.marker.strip():
            raise ValueError("Unit marker cannot be blank")


DEFAULT_MARKERS: tuple[UnitMarker, ...] = (
    UnitMarker("صغير", "SMALL"),
    UnitMarker("ص", "SMALL"),
    UnitMarker("small", "SMALL"),
    UnitMarker("كبير", "LARGE"),
    UnitMarker("ك", "LARGE"),
    UnitMarker("large", "LARGE"),
    UnitMarker("فو", "VARIANT"),
    UnitMarker("v00", "VARIANT"),
    UnitMarker("variant", "VARIANT"),
    UnitMarker("كوب", "CUP"),
    UnitMarker("cups", "CUP"),
    UnitMarker("cup", "CUP"),
)


def normalize_digits(text: str) -> str:
    """Replace Arabic-Indic digits with their ASCII equivalents."""
    return text.translate(_DIGIT_TABLE)


def order_markers(markers: Iterable[UnitMarker]) -> list[UnitMarker]:
    """Return markers longest first; equal lengths keep their table order."""
    return sorted(markers, key=lambda m: len(m.marker), reverse=True)


def _marker_regex(marker: str) -> str:
    # A marker must not run into a longer word of the same script
    # ("5 larger" is not "5 large", "10 كيس" is not "10 ك").
    escaped = re.escape(marker)
    if marker.isascii():
        return escaped + r"(?![a-z])"
    return escaped + f"(?![{_ARABIC_LETTERS}])"


def marker_pattern(markers: Sequence[UnitMarker]) -> re.Pattern[str]:
    """Compile ``<integer><optional whitespace><marker>`` for the given markers."""
    alternation = "|".join(_marker_regex(m.marker) for m in order_markers(markers))
    return re.compile(rf"(\d+)\s*({alternation})", re.IGNORECASE)


class QuantityTokenizer:
    """Scans text for quantities using an ordered marker table."""

    def __init__(self, markers: Sequence[UnitMarker] = DEFAULT_MARKERS) -> None:
        self.markers = order_markers(markers)
        self._pattern = marker_pattern(self.markers)
        self._codes = {m.marker.lower(): m.code for m in self.markers}

    def tokenize(self, text: str | None) -> QuantitySet:
        """Sum every quantity found in ``text``; unmatched numbers are ignored."""
        if not text:
            return QuantitySet()

        counts = dict.fromkeys(PRODUCT_CODES, 0)
        for match in self._pattern.finditer(normalize_digits(text)):
            amount, marker = match.groups()
            counts[self._codes[marker.lower()]] += int(amount)
        return QuantitySet.from_mapping(counts)

    def patterns_by_code(self) -> list[tuple[str, re.Pattern[str]]]:
        """One discrete pattern per product code, in marker-table order."""
        seen: list[str] = []
        for marker in self.markers:
            if marker.code not in seen:
                seen.append(marker.code)
        return [
            (code, marker_pattern([m for m in self.markers if m.code == code]))
            for code in seen
        ]


DEFAULT_TOKENIZER = QuantityTokenizer()


def tokenize_quantities(
    text: str | None, markers: Sequence[UnitMarker] | None = None
) -> QuantitySet:
    """Return the quantities written in ``text``.

    Empty or marker-less input yields an all-zero set.
    """
    tokenizer = DEFAULT_TOKENIZER if markers is None else QuantityTokenizer(markers)
    return tokenizer.tokenize(text)


__all__ = [
    "DEFAULT_MARKERS",
    "DEFAULT_TOKENIZER",
    "QuantityTokenizer",
    "UnitMarker",
    "marker_pattern",
    "normalize_digits",
    "order_markers",
    "tokenize_quantities",
]
