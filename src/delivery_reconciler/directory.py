"""Load the master client directory from a JSON export.

The directory has been exported by several tools over time, so a few field
spellings are accepted for each attribute.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Iterable, List, Mapping

from delivery_reconciler.model import DirectoryEntry

logger = logging.getLogger(__name__)

NAME_KEYS = ("name", "clientName", "client_name")
LOCATION_KEYS = ("location", "area", "address", "zone")
FREEZER_KEYS = ("isFreezr", "isFreezer", "freezer", "is_freezer_client")

_TRUE_STRINGS = {"1", "2", "true", "yes", "y", "نعم"}


def _first(record: Mapping[str, Any], keys: Iterable[str]) -> Any:
    for key in keys:
        value = record.get(key)
        if value not in (None, ""):
            return value
    return None


def parse_flag(value: Any) -> bool:
    """Interpret spreadsheet-style freezer flags (``1``, ``"yes"``, ``True``)."""
    if isinstance(value, bool):
        return value
    if value is None:
        return False
    if isinstance(value, (int, float)):
        return value > 0
    return str(value).strip().lower() in _TRUE_STRINGS


def entries_from_records(records: Iterable[Mapping[str, Any]]) -> List[DirectoryEntry]:
    """Normalise raw records; nameless and duplicate names are skipped."""
    entries: List[DirectoryEntry] = []
    seen: set[str] = set()
    for record in records:
        name = _first(record, NAME_KEYS)
        if name is None or not str(name).strip():
            continue
        name = str(name).strip()
        key = name.lower()
        if key in seen:
            logger.debug("Skipping duplicate directory entry %r", name)
            continue
        seen.add(key)

        location = _first(record, LOCATION_KEYS)
        entries.append(
            DirectoryEntry(
                name=name,
                location=str(location).strip() if location is not None else "Unknown",
                is_freezer_client=parse_flag(_first(record, FREEZER_KEYS)),
                notes=str(record.get("notes") or ""),
            )
        )
    return entries


def load_directory(path: Path) -> List[DirectoryEntry]:
    """Read a directory JSON file (a list, or an object with ``clients``)."""

    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Client directory not found: {path}")

    data = json.loads(path.read_text(encoding="utf-8"))
    if isinstance(data, dict) and isinstance(data.get("clients"), list):
        data = data["clients"]
    if not isinstance(data, list):
        raise ValueError(
            "Invalid directory format. Expected a list of clients or an object with a clients list."
        )

    entries = entries_from_records(r for r in data if isinstance(r, dict))
    logger.info("Loaded %d directory entries from %s", len(entries), path)
    return entries


__all__ = ["entries_from_records", "load_directory", "parse_flag"]
