"""Document store contract.

This module defines the four operations the ingest and recovery flows
need from a remote key-value document store, plus payload helpers
shared by the concrete implementations.
"""

from __future__ import annotations

import json
import re
from typing import Any, Mapping, Protocol, Sequence

from core.errors import SheetkeepStoreError

_NAMESPACE_PATTERN = re.compile(r"[A-Za-z0-9_\-]+")


class DocumentStore(Protocol):
    """Namespace-per-dataset key-value document store."""

    def commit_batch(self, namespace: str, entries: Mapping[str, Mapping[str, Any]]) -> None:
        """Atomically upsert all entries into a namespace, or none of them."""

    def read_metadata(self) -> dict[str, Any] | None:
        """Return the metadata registry fields, or None when absent."""

    def merge_metadata(
        self,
        fields: Mapping[str, Any],
        union_names: Sequence[str] = (),
    ) -> None:
        """Upsert registry fields and set-union names into the name list."""

    def scan_namespace(self, namespace: str) -> list[dict[str, Any]]:
        """Return every entry stored in a namespace."""


def validate_namespace(namespace: str) -> str:
    """Reject namespaces that are not safe file and object names.

    Raises:
        SheetkeepStoreError: If the namespace has unsupported characters.
    """
    if not _NAMESPACE_PATTERN.fullmatch(namespace):
        raise SheetkeepStoreError(
            f"Invalid namespace '{namespace}': only letters, digits, '_' and '-' are allowed."
        )
    return namespace


def merge_namespace_entries(
    current: Mapping[str, Any] | None,
    entries: Mapping[str, Mapping[str, Any]],
) -> dict[str, Any]:
    """Return a namespace document with ``entries`` upserted by key."""
    current_entries = (current or {}).get("entries")
    merged = dict(current_entries) if isinstance(current_entries, dict) else {}
    for key, fields in entries.items():
        merged[key] = dict(fields)
    return {"entries": merged}


def namespace_entries(document: Mapping[str, Any] | None) -> list[dict[str, Any]]:
    """Return entry field mappings from a namespace document."""
    entries = (document or {}).get("entries")
    if not isinstance(entries, dict):
        return []
    return [dict(fields) for fields in entries.values() if isinstance(fields, dict)]


def encode_document(document: Mapping[str, Any], location: str) -> bytes:
    """Encode a document as UTF-8 JSON.

    Raises:
        SheetkeepStoreError: If a value is not JSON serializable.
    """
    try:
        return (json.dumps(document, indent=2, ensure_ascii=False) + "\n").encode("utf-8")
    except (TypeError, ValueError) as error:
        raise SheetkeepStoreError(
            f"Failed to encode document for {location}: {error}. "
            "Only strings and numbers can be stored."
        ) from error


def decode_document(payload: bytes, location: str) -> dict[str, Any]:
    """Decode a JSON document payload.

    Raises:
        SheetkeepStoreError: If the payload is not a JSON object.
    """
    try:
        document = json.loads(payload.decode("utf-8"))
    except (UnicodeDecodeError, json.JSONDecodeError) as error:
        raise SheetkeepStoreError(
            f"Failed to parse stored document at {location}: {error}. "
            "Remove or repair the corrupted document."
        ) from error
    if not isinstance(document, dict):
        raise SheetkeepStoreError(
            f"Failed to parse stored document at {location}: "
            "expected JSON object at top level."
        )
    return document
