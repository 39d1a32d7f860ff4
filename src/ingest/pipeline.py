"""Ingest orchestration for spreadsheet uploads.

This module coordinates sheet parsing, normalization, in-memory
workspace updates and detached persistence. Each upload updates the
workspace as soon as it is parsed; its persistence outcome is reported
later through a callback and ``wait_for_persistence``.
"""

from __future__ import annotations

import asyncio
from typing import Callable, Sequence

from core.errors import SheetkeepDependencyError, SheetkeepIngestError, SheetkeepStoreError
from core.logging_config import get_logger
from core.types import Dataset, IngestResult, PersistenceOutcome, RecoveryResult, SheetUpload
from core.workspace import DatasetWorkspace
from ingest.normalizer import normalize_rows
from ingest.sheet_reader import read_sheet_rows
from store.document_store import DocumentStore
from store.persistence import persist_dataset
from store.recovery import recover_datasets

_LOGGER = get_logger(__name__)

PersistenceCallback = Callable[[PersistenceOutcome], None]


class IngestSession:
    """Async upload and reload workflow over one workspace and store."""

    def __init__(
        self,
        store: DocumentStore,
        workspace: DatasetWorkspace | None = None,
        on_persisted: PersistenceCallback | None = None,
    ) -> None:
        self._store = store
        self._workspace = workspace if workspace is not None else DatasetWorkspace()
        self._on_persisted = on_persisted
        self._pending: list[asyncio.Task[PersistenceOutcome]] = []

    @property
    def workspace(self) -> DatasetWorkspace:
        """Return the workspace updated by this session."""
        return self._workspace

    async def ingest_file(self, upload: SheetUpload) -> IngestResult:
        """Parse one upload, show it, and schedule its persistence.

        Args:
            upload: Uploaded file name and bytes.

        Returns:
            Ingest result; malformed files carry an error instead of a dataset.
        """
        try:
            raw_rows = await asyncio.to_thread(read_sheet_rows, upload.content, upload.file_name)
            dataset = normalize_rows(raw_rows, upload.file_name)
        except (SheetkeepIngestError, SheetkeepDependencyError) as error:
            _LOGGER.warning("file_ingest_failed", file_name=upload.file_name, error=str(error))
            return IngestResult(file_name=upload.file_name, error=str(error))
        self._workspace.put(dataset)
        self._pending.append(asyncio.create_task(self._persist(dataset)))
        _LOGGER.info(
            "file_ingested",
            file_name=upload.file_name,
            dataset_name=dataset.name,
            header_count=len(dataset.headers),
            record_count=len(dataset.records),
        )
        return IngestResult(file_name=upload.file_name, dataset=dataset)

    async def ingest_files(self, uploads: Sequence[SheetUpload]) -> list[IngestResult]:
        """Ingest several uploads concurrently; failures stay per file."""
        return list(await asyncio.gather(*(self.ingest_file(upload) for upload in uploads)))

    async def wait_for_persistence(self) -> list[PersistenceOutcome]:
        """Wait for every scheduled persistence task and return the outcomes."""
        pending, self._pending = self._pending, []
        return list(await asyncio.gather(*pending))

    async def load_existing(self) -> RecoveryResult:
        """Reload stored datasets into the workspace.

        Returns:
            Recovery result; an unreadable registry yields an empty result.
        """
        try:
            result = await asyncio.to_thread(recover_datasets, self._store)
        except SheetkeepStoreError as error:
            _LOGGER.error("datasets_load_failed", error=str(error))
            return RecoveryResult()
        self._workspace.replace_all(result.datasets, result.active_name)
        return result

    async def _persist(self, dataset: Dataset) -> PersistenceOutcome:
        outcome = await asyncio.to_thread(
            persist_dataset,
            self._store,
            dataset.records,
            dataset.file_name,
            dataset.id_column,
            dataset.headers,
        )
        if self._on_persisted is not None:
            self._on_persisted(outcome)
        return outcome


async def ingest_uploads(
    store: DocumentStore,
    uploads: Sequence[SheetUpload],
    workspace: DatasetWorkspace | None = None,
) -> tuple[list[IngestResult], list[PersistenceOutcome]]:
    """Ingest uploads and wait until every persistence attempt finishes.

    Args:
        store: Document store handle.
        uploads: Files to ingest.
        workspace: Optional workspace to update.

    Returns:
        Per-file ingest results and persistence outcomes.
    """
    session = IngestSession(store, workspace)
    results = await session.ingest_files(uploads)
    outcomes = await session.wait_for_persistence()
    return results, outcomes
