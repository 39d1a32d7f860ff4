"""Python SDK for dataset operations.

This module exposes high-level APIs for uploading spreadsheets,
reloading stored datasets, and previewing them, backed by the
configured document store.
"""

from __future__ import annotations

import asyncio
from dataclasses import replace
from pathlib import Path
from typing import Sequence

from core.config import SheetkeepConfig
from core.errors import SheetkeepIngestError, SheetkeepStoreError
from core.types import Dataset, IngestResult, RecoveryResult, SheetUpload, UploadReport
from core.workspace import DatasetWorkspace
from ingest.pipeline import IngestSession, PersistenceCallback
from ingest.sheet_reader import read_upload
from serve.preview import DatasetPreview, build_preview
from store.document_store import DocumentStore
from store.store_factory import create_document_store


class SheetkeepClient:
    """Primary SDK entry point for upload, reload and preview workflows."""

    def __init__(
        self,
        config: SheetkeepConfig | None = None,
        store: DocumentStore | None = None,
    ) -> None:
        """Create SDK client.

        Args:
            config: Optional runtime configuration.
            store: Optional document store; built from config when omitted.
        """
        self._config = config or SheetkeepConfig.from_env()
        self._store = store if store is not None else create_document_store(self._config)

    @property
    def config(self) -> SheetkeepConfig:
        """Return the runtime configuration."""
        return self._config

    def session(
        self,
        workspace: DatasetWorkspace | None = None,
        on_persisted: PersistenceCallback | None = None,
    ) -> IngestSession:
        """Open an async ingest session over this client's store."""
        return IngestSession(self._store, workspace, on_persisted)

    def upload(
        self,
        paths: Sequence[str | Path],
        on_persisted: PersistenceCallback | None = None,
    ) -> UploadReport:
        """Ingest local spreadsheet files and wait for persistence.

        Args:
            paths: Spreadsheet files to upload.
            on_persisted: Optional callback invoked per persistence outcome.

        Returns:
            Per-file ingest results and persistence outcomes.
        """
        return asyncio.run(self._upload(paths, on_persisted))

    def load(self) -> RecoveryResult:
        """Reload every stored dataset.

        Returns:
            Recovered datasets and the initially active dataset name.
        """
        return asyncio.run(self.session().load_existing())

    def dataset(self, dataset_name: str) -> Dataset:
        """Reload and return one stored dataset.

        Raises:
            SheetkeepStoreError: If the dataset is not in the store.
        """
        result = self.load()
        dataset = result.datasets.get(dataset_name)
        if dataset is None:
            known = ", ".join(sorted(result.datasets)) or "none"
            raise SheetkeepStoreError(
                f"Dataset '{dataset_name}' not found. Known datasets: {known}. "
                "Upload the file before previewing it."
            )
        return dataset

    def preview(self, dataset_name: str, rows: int | None = None) -> DatasetPreview:
        """Build a preview of a stored dataset.

        Args:
            dataset_name: Dataset to preview.
            rows: Row count; the configured default when omitted.

        Returns:
            Preview of the first rows.
        """
        rows_to_show = rows if rows is not None else self._config.preview_rows
        return build_preview(self.dataset(dataset_name), rows_to_show)

    def with_data_root(self, data_root: str) -> "SheetkeepClient":
        """Clone the client with a different local data root.

        Args:
            data_root: New data root path.

        Returns:
            New SDK client instance.
        """
        resolved_root = Path(data_root).expanduser().resolve()
        return SheetkeepClient(replace(self._config, data_root=resolved_root))

    async def _upload(
        self,
        paths: Sequence[str | Path],
        on_persisted: PersistenceCallback | None,
    ) -> UploadReport:
        session = self.session(on_persisted=on_persisted)
        uploads: list[SheetUpload] = []
        failures: dict[int, IngestResult] = {}
        for index, path in enumerate(paths):
            try:
                uploads.append(read_upload(Path(path).expanduser()))
            except SheetkeepIngestError as error:
                failures[index] = IngestResult(file_name=Path(path).name, error=str(error))
        ingested = iter(await session.ingest_files(uploads))
        results = tuple(
            failures[index] if index in failures else next(ingested) for index in range(len(paths))
        )
        outcomes = await session.wait_for_persistence()
        return UploadReport(results=results, outcomes=tuple(outcomes))
