"""Approximate client-name matching.

Scores are tiered and fixed so results are reproducible:

* 100 - identical after lower-casing and removing whitespace
* 80  - one normalised name contains the other
* 60  - the first three normalised characters agree
* 0   - anything else

Containment can pair short, common fragments with longer names; this is a
known precision/recall tradeoff and is kept as is.
"""

from __future__ import annotations

import logging
import re
from typing import Iterable, Sequence

from delivery_reconciler.model import DirectoryEntry

logger = logging.getLogger(__name__)

EXACT_SCORE = 100
CONTAINS_SCORE = 80
PREFIX_SCORE = 60
MATCH_THRESHOLD = 60  # Minimum score for a planned/delivered pair
PREFIX_LENGTH = 3

_WHITESPACE = re.compile(r"\s+")


def normalize_name(name: str | None) -> str:
    return _WHITESPACE.sub("", name or "").lower()


def name_similarity(first: str, second: str) -> int:
    """Return the tiered similarity score of two client names."""
    a = normalize_name(first)
    b = normalize_name(second)
    if not a or not b:
        return 0
    if a == b:
        return EXACT_SCORE
    if a in b or b in a:
        return CONTAINS_SCORE
    if a[:PREFIX_LENGTH] == b[:PREFIX_LENGTH]:
        return PREFIX_SCORE
    return 0


def best_match(
    name: str,
    candidates: Sequence[str],
    claimed: Iterable[int] = (),
) -> tuple[int | None, int]:
    """Index and score of the best unclaimed candidate.

    Ties keep the first candidate in iteration order.
    """
    claimed = set(claimed)
    best_index: int | None = None
    best_score = -1
    for idx, candidate in enumerate(candidates):
        if idx in claimed:
            continue
        score = name_similarity(name, candidate)
        if score > best_score:
            best_index, best_score = idx, score
    if best_index is None:
        return None, 0
    return best_index, best_score


def names_overlap(first: str, second: str) -> bool:
    """Containment in either direction, used for directory lookups."""
    a = normalize_name(first)
    b = normalize_name(second)
    if not a or not b:
        return False
    return a in b or b in a


def find_directory_entry(
    name: str, directory: Iterable[DirectoryEntry]
) -> DirectoryEntry | None:
    """First directory entry whose name overlaps ``name``."""
    for entry in directory:
        if names_overlap(name, entry.name):
            return entry
    logger.debug("Client %r not found in directory", name)
    return None


__all__ = [
    "CONTAINS_SCORE",
    "EXACT_SCORE",
    "MATCH_THRESHOLD",
    "PREFIX_SCORE",
    "best_match",
    "find_directory_entry",
    "name_similarity",
    "names_overlap",
    "normalize_name",
]
