"""Filesystem-backed document store.

Each namespace is one JSON document replaced atomically, so a batch
commit is all-or-nothing for concurrent readers.
"""

from __future__ import annotations

import os
import tempfile
import threading
from pathlib import Path
from typing import Any, Mapping, Sequence

from core.constants import COLLECTIONS_DIR_NAME, METADATA_DIR_NAME, METADATA_DOCUMENT_NAME
from core.errors import SheetkeepStoreError
from core.logging_config import get_logger
from store.document_store import (
    decode_document,
    encode_document,
    merge_namespace_entries,
    namespace_entries,
    validate_namespace,
)
from store.metadata_registry import merge_registry_fields

_LOGGER = get_logger(__name__)


class LocalDocumentStore:
    """Document store rooted at a local data directory."""

    def __init__(self, data_root: Path) -> None:
        self._collections_root = data_root / COLLECTIONS_DIR_NAME
        self._metadata_path = data_root / METADATA_DIR_NAME / f"{METADATA_DOCUMENT_NAME}.json"
        self._lock = threading.Lock()

    def commit_batch(self, namespace: str, entries: Mapping[str, Mapping[str, Any]]) -> None:
        """Upsert entries into a namespace with one atomic file replace.

        Raises:
            SheetkeepStoreError: If the namespace document cannot be written.
        """
        path = self._namespace_path(namespace)
        with self._lock:
            document = merge_namespace_entries(_read_document(path), entries)
            _write_document(path, document)
        _LOGGER.info("batch_committed", namespace=namespace, entry_count=len(entries))

    def read_metadata(self) -> dict[str, Any] | None:
        """Return registry fields, or None when no registry exists."""
        return _read_document(self._metadata_path)

    def merge_metadata(
        self,
        fields: Mapping[str, Any],
        union_names: Sequence[str] = (),
    ) -> None:
        """Merge fields into the registry document."""
        with self._lock:
            merged = merge_registry_fields(_read_document(self._metadata_path), fields, union_names)
            _write_document(self._metadata_path, merged)

    def scan_namespace(self, namespace: str) -> list[dict[str, Any]]:
        """Return all entries of a namespace; unknown namespaces are empty."""
        return namespace_entries(_read_document(self._namespace_path(namespace)))

    def _namespace_path(self, namespace: str) -> Path:
        return self._collections_root / f"{validate_namespace(namespace)}.json"


def _read_document(path: Path) -> dict[str, Any] | None:
    """Read a JSON document, returning None when the file is absent."""
    try:
        payload = path.read_bytes()
    except FileNotFoundError:
        return None
    except OSError as error:
        raise SheetkeepStoreError(f"Failed to read document at {path}: {error}.") from error
    return decode_document(payload, str(path))


def _write_document(path: Path, document: Mapping[str, Any]) -> None:
    """Write a JSON document via a temporary file and atomic rename."""
    payload = encode_document(document, str(path))
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        with tempfile.NamedTemporaryFile(
            "wb", dir=path.parent, prefix=f".{path.stem}-", suffix=".tmp", delete=False
        ) as handle:
            handle.write(payload)
            temp_path = Path(handle.name)
        os.replace(temp_path, path)
    except OSError as error:
        raise SheetkeepStoreError(
            f"Failed to write document at {path}: {error}. "
            "Check that the data root is writable."
        ) from error
