"""Recovery loader for previously stored datasets.

This module rebuilds in-memory datasets from the document store at
start-up. When a dataset's header list is missing from the registry it
is rebuilt from the first stored entry and written back once, in a
single registry merge covering every recovered dataset.
"""

from __future__ import annotations

import re
from typing import Any, Mapping, Sequence

from core.constants import PLACEHOLDER_COLUMN_PREFIX
from core.errors import SheetkeepStoreError
from core.logging_config import get_logger
from core.naming import recovered_file_name
from core.types import Dataset, RecoveryResult
from store.document_store import DocumentStore
from store.metadata_registry import RegistrySnapshot, headers_field, registry_from_fields
from store.record_payload import entry_labels, record_from_entry, sort_entries

_LOGGER = get_logger(__name__)
_NUMERIC_LABEL_PATTERN = re.compile(r"[0-9]+")


def recover_datasets(store: DocumentStore) -> RecoveryResult:
    """Load every dataset listed in the metadata registry.

    Args:
        store: Document store handle.

    Returns:
        Reconstructed datasets and the initially active dataset name.

    Raises:
        SheetkeepStoreError: If the metadata registry cannot be read.
    """
    registry = registry_from_fields(store.read_metadata())
    if not registry.names:
        _LOGGER.info("no_datasets_to_recover")
        return RecoveryResult()
    datasets: dict[str, Dataset] = {}
    recovered_headers: dict[str, tuple[str, ...]] = {}
    skipped: list[str] = []
    for dataset_name in registry.names:
        dataset = _recover_dataset(store, registry, dataset_name, recovered_headers)
        if dataset is None:
            skipped.append(dataset_name)
            continue
        datasets[dataset_name] = dataset
    _write_back_recovered_headers(store, recovered_headers)
    active_name = min(datasets) if datasets else None
    _LOGGER.info(
        "datasets_recovered",
        dataset_count=len(datasets),
        skipped_count=len(skipped),
        recovered_header_count=len(recovered_headers),
        active_name=active_name,
    )
    return RecoveryResult(
        datasets=datasets,
        active_name=active_name,
        recovered_headers=recovered_headers,
        skipped_names=tuple(skipped),
    )


def recover_headers(entry: Mapping[str, Any]) -> tuple[str, ...]:
    """Rebuild a header list from one stored entry.

    Non-numeric labels come first and purely numeric labels (year
    columns) last; each group is sorted lexicographically.
    """
    labels = entry_labels(entry)
    return tuple(sorted(labels, key=lambda label: (_is_numeric_label(label), label)))


def _recover_dataset(
    store: DocumentStore,
    registry: RegistrySnapshot,
    dataset_name: str,
    recovered_headers: dict[str, tuple[str, ...]],
) -> Dataset | None:
    """Load one dataset, recording auto-recovered headers."""
    try:
        entries = store.scan_namespace(dataset_name)
    except SheetkeepStoreError as error:
        _LOGGER.warning("dataset_scan_failed", dataset_name=dataset_name, error=str(error))
        return None
    if not entries:
        _LOGGER.warning("dataset_namespace_empty", dataset_name=dataset_name)
        return None
    ordered_entries = sort_entries(entries)
    headers = registry.headers_for(dataset_name)
    if not headers:
        headers = recover_headers(ordered_entries[0])
        recovered_headers[dataset_name] = headers
        _LOGGER.warning(
            "headers_auto_recovered",
            dataset_name=dataset_name,
            headers=list(headers),
        )
    return Dataset(
        name=dataset_name,
        headers=headers,
        records=tuple(record_from_entry(entry, headers) for entry in ordered_entries),
        file_name=recovered_file_name(dataset_name),
        id_column=headers[0] if headers else f"{PLACEHOLDER_COLUMN_PREFIX}1",
    )


def _write_back_recovered_headers(
    store: DocumentStore,
    recovered_headers: Mapping[str, Sequence[str]],
) -> None:
    """Save all auto-recovered header lists in one registry merge."""
    if not recovered_headers:
        return
    updates = {headers_field(name): list(headers) for name, headers in recovered_headers.items()}
    try:
        store.merge_metadata(updates)
    except SheetkeepStoreError as error:
        _LOGGER.error(
            "recovered_headers_save_failed",
            dataset_names=sorted(recovered_headers),
            error=str(error),
        )
        return
    _LOGGER.info("recovered_headers_saved", dataset_names=sorted(recovered_headers))


def _is_numeric_label(label: str) -> bool:
    return _NUMERIC_LABEL_PATTERN.fullmatch(label) is not None
