"""Persistence sink for uploaded datasets.

This module writes a dataset's records as one atomic batch and then
records the dataset name and header list in the metadata registry,
verifying the header write once and retrying it at most once.
"""

from __future__ import annotations

from typing import Any, Sequence

from core.errors import SheetkeepNamingError, SheetkeepStoreError
from core.logging_config import get_logger
from core.naming import derive_dataset_name, document_key
from core.types import PersistenceOutcome, Record
from store.document_store import DocumentStore
from store.metadata_registry import headers_field, registry_from_fields
from store.record_payload import record_to_entry

_LOGGER = get_logger(__name__)


def persist_dataset(
    store: DocumentStore,
    records: Sequence[Record],
    file_name: str,
    id_column: str,
    headers: Sequence[str],
) -> PersistenceOutcome:
    """Write filtered records and header metadata to the document store.

    Args:
        store: Document store handle.
        records: Filtered records in sequence order.
        file_name: Original upload file name; the dataset name derives from it.
        id_column: Identifier column label; its values key the entries.
        headers: Dataset header list stored in the registry.

    Returns:
        Outcome describing whether the dataset was persisted.
    """
    try:
        dataset_name = derive_dataset_name(file_name)
    except SheetkeepNamingError as error:
        _LOGGER.error("dataset_name_invalid", file_name=file_name, error=str(error))
        return PersistenceOutcome(dataset_name="", status="failed", message=str(error))
    if not records:
        _LOGGER.info("dataset_upload_skipped", dataset_name=dataset_name, reason="no_records")
        return PersistenceOutcome(
            dataset_name=dataset_name,
            status="skipped",
            message=f"No rows to upload for {dataset_name}.",
        )
    entries = build_batch_entries(records, id_column)
    try:
        store.commit_batch(dataset_name, entries)
        headers_verified = write_headers_with_verification(store, dataset_name, headers)
    except SheetkeepStoreError as error:
        _LOGGER.error("dataset_upload_failed", dataset_name=dataset_name, error=str(error))
        return PersistenceOutcome(
            dataset_name=dataset_name,
            status="failed",
            message=f"Upload failed for {dataset_name}: {error}",
        )
    _LOGGER.info(
        "dataset_uploaded",
        dataset_name=dataset_name,
        record_count=len(records),
        entry_count=len(entries),
        headers_verified=headers_verified,
    )
    return PersistenceOutcome(
        dataset_name=dataset_name,
        status="persisted",
        record_count=len(entries),
        headers_verified=headers_verified,
    )


def build_batch_entries(records: Sequence[Record], id_column: str) -> dict[str, dict[str, Any]]:
    """Key each record's entry by its identifier; unusable identifiers are skipped."""
    entries: dict[str, dict[str, Any]] = {}
    for record in records:
        raw_id = record.value(id_column)
        if not isinstance(raw_id, str) or not raw_id.strip():
            _LOGGER.warning(
                "record_skipped_invalid_identifier",
                id_column=id_column,
                position=record.position,
            )
            continue
        entries[document_key(raw_id)] = record_to_entry(record)
    return entries


def write_headers_with_verification(
    store: DocumentStore,
    dataset_name: str,
    headers: Sequence[str],
) -> bool:
    """Register the dataset and its headers, retrying the header write once.

    Args:
        store: Document store handle.
        dataset_name: Dataset name added to the known-name set.
        headers: Header list stored under the dataset's registry field.

    Returns:
        Whether the headers were read back successfully.

    Raises:
        SheetkeepStoreError: If a registry read or write fails.
    """
    header_fields = {headers_field(dataset_name): list(headers)}
    store.merge_metadata(header_fields, union_names=(dataset_name,))
    if _headers_saved(store, dataset_name):
        return True
    _LOGGER.error("headers_verification_failed", dataset_name=dataset_name)
    store.merge_metadata(header_fields)
    if _headers_saved(store, dataset_name):
        _LOGGER.info("headers_saved_on_retry", dataset_name=dataset_name)
        return True
    _LOGGER.error("metadata_inconsistent", dataset_name=dataset_name, header_count=len(headers))
    return False


def _headers_saved(store: DocumentStore, dataset_name: str) -> bool:
    registry = registry_from_fields(store.read_metadata())
    return len(registry.headers_for(dataset_name)) > 0
