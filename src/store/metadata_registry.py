"""Metadata registry model.

The registry is one store document holding the known dataset names
under ``names`` and each dataset's header list under ``<name>_headers``.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Mapping, Sequence

from core.constants import METADATA_HEADERS_SUFFIX, METADATA_NAMES_FIELD


@dataclass(frozen=True)
class RegistrySnapshot:
    """Parsed view of the metadata registry document.

    Attributes:
        names: Known dataset names in stored order.
        headers: Stored header lists by dataset name.
    """

    names: tuple[str, ...] = ()
    headers: Mapping[str, tuple[str, ...]] = field(default_factory=dict)

    def headers_for(self, dataset_name: str) -> tuple[str, ...]:
        """Return stored headers for a dataset, or an empty tuple."""
        return self.headers.get(dataset_name, ())


def headers_field(dataset_name: str) -> str:
    """Return the registry field holding a dataset's headers."""
    return f"{dataset_name}{METADATA_HEADERS_SUFFIX}"


def registry_from_fields(fields: Mapping[str, Any] | None) -> RegistrySnapshot:
    """Parse raw registry fields into a snapshot.

    Args:
        fields: Registry document fields, or None when absent.

    Returns:
        Snapshot with invalid or non-list values ignored.
    """
    if not fields:
        return RegistrySnapshot()
    raw_names = fields.get(METADATA_NAMES_FIELD)
    names = tuple(str(name) for name in raw_names) if isinstance(raw_names, list) else ()
    headers: dict[str, tuple[str, ...]] = {}
    for key, value in fields.items():
        if key.endswith(METADATA_HEADERS_SUFFIX) and isinstance(value, list):
            headers[key[: -len(METADATA_HEADERS_SUFFIX)]] = tuple(str(label) for label in value)
    return RegistrySnapshot(names=names, headers=headers)


def merge_registry_fields(
    current: Mapping[str, Any] | None,
    fields: Mapping[str, Any],
    union_names: Sequence[str] = (),
) -> dict[str, Any]:
    """Apply a merge-write to registry fields.

    Args:
        current: Existing registry fields, or None.
        fields: Fields to upsert; other fields are left untouched.
        union_names: Names added to ``names`` with set-union semantics.

    Returns:
        New registry fields.
    """
    merged: dict[str, Any] = dict(current or {})
    merged.update(fields)
    if union_names:
        existing = merged.get(METADATA_NAMES_FIELD)
        names = list(existing) if isinstance(existing, list) else []
        for name in union_names:
            if name not in names:
                names.append(name)
        merged[METADATA_NAMES_FIELD] = names
    return merged
