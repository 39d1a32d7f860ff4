"""Stored entry serialization for dataset records.

This module converts records to flat store entries and back.
It is reused by the persistence sink and the recovery loader.
"""

from __future__ import annotations

from typing import Any, Mapping, Sequence

from core.constants import ROW_INDEX_FIELD
from core.types import CellValue, Record


def record_to_entry(record: Record) -> dict[str, Any]:
    """Serialize a record into a flat store entry.

    Args:
        record: Dataset record.

    Returns:
        All record fields plus the sequence position field.
    """
    entry: dict[str, Any] = dict(record.as_dict())
    entry[ROW_INDEX_FIELD] = record.position
    return entry


def entry_position(entry: Mapping[str, Any]) -> int | float:
    """Return an entry's stored sequence position; missing values count as 0."""
    value = entry.get(ROW_INDEX_FIELD)
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return 0
    return value


def sort_entries(entries: Sequence[Mapping[str, Any]]) -> list[Mapping[str, Any]]:
    """Order entries by sequence position; ties keep scan order."""
    return sorted(entries, key=entry_position)


def entry_labels(entry: Mapping[str, Any]) -> list[str]:
    """Return an entry's field labels without internal fields."""
    return [label for label in entry if label != ROW_INDEX_FIELD]


def record_from_entry(entry: Mapping[str, Any], headers: Sequence[str]) -> Record:
    """Deserialize a store entry against the dataset header schema.

    Args:
        entry: Stored entry fields.
        headers: Authoritative header list for the dataset.

    Returns:
        Record whose fields follow ``headers``; absent labels become ``""``.
    """
    fields: list[tuple[str, CellValue]] = []
    for label in headers:
        value = entry.get(label)
        fields.append((label, "" if value is None else value))
    return Record(position=int(entry_position(entry)), fields=tuple(fields))
