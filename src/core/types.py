"""Shared typed models.

This module defines immutable data models used by ingest, store,
SDK, and preview layers to keep interfaces explicit and stable.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Literal, Mapping, Union

CellValue = Union[str, int, float]
PersistenceStatus = Literal["persisted", "skipped", "failed"]


@dataclass(frozen=True)
class Record:
    """One spreadsheet row keyed by its dataset's header labels.

    Attributes:
        position: Zero-based index among the dataset's filtered rows.
        fields: Ordered ``(label, value)`` pairs following the header list.
    """

    position: int
    fields: tuple[tuple[str, CellValue], ...]

    def value(self, label: str) -> CellValue | None:
        """Return the value stored under ``label``, or None when absent."""
        found: CellValue | None = None
        for field_label, field_value in self.fields:
            if field_label == label:
                found = field_value
        return found

    def as_dict(self) -> dict[str, CellValue]:
        """Return fields as a label-to-value mapping."""
        return {label: value for label, value in self.fields}


@dataclass(frozen=True)
class Dataset:
    """Named, header-tagged collection of records from one upload.

    Attributes:
        name: Derived dataset name (slug).
        headers: Ordered column labels; the authoritative record schema.
        records: Records ordered by sequence position.
        file_name: Originating file name.
        id_column: Label of the identifier column.
    """

    name: str
    headers: tuple[str, ...]
    records: tuple[Record, ...]
    file_name: str
    id_column: str


@dataclass(frozen=True)
class SheetUpload:
    """Raw spreadsheet content handed over by the file input surface.

    Attributes:
        file_name: Original file name including extension.
        content: Raw file bytes.
    """

    file_name: str
    content: bytes


@dataclass(frozen=True)
class PersistenceOutcome:
    """Result of pushing one dataset to the document store.

    Attributes:
        dataset_name: Dataset the outcome refers to.
        status: ``persisted``, ``skipped`` or ``failed``.
        record_count: Number of entries committed in the batch.
        message: User-facing failure or skip reason.
        headers_verified: Whether the header read-back check passed.
    """

    dataset_name: str
    status: PersistenceStatus
    record_count: int = 0
    message: str | None = None
    headers_verified: bool = False

    @property
    def ok(self) -> bool:
        """Return whether the dataset was not lost to a failure."""
        return self.status != "failed"


@dataclass(frozen=True)
class IngestResult:
    """Per-file ingest result, independent of the persistence outcome.

    Attributes:
        file_name: Uploaded file name.
        dataset: Parsed dataset, or None when ingest failed.
        error: User-facing error message when ingest failed.
    """

    file_name: str
    dataset: Dataset | None = None
    error: str | None = None

    @property
    def ok(self) -> bool:
        """Return whether the file produced a dataset."""
        return self.dataset is not None


@dataclass(frozen=True)
class RecoveryResult:
    """Datasets reconstructed from the document store.

    Attributes:
        datasets: Mapping from dataset name to reconstructed dataset.
        active_name: Initially active dataset, or None when nothing loaded.
        recovered_headers: Header lists rebuilt by auto-recovery, by dataset.
        skipped_names: Known names that produced no dataset.
    """

    datasets: Mapping[str, Dataset] = field(default_factory=dict)
    active_name: str | None = None
    recovered_headers: Mapping[str, tuple[str, ...]] = field(default_factory=dict)
    skipped_names: tuple[str, ...] = ()


@dataclass(frozen=True)
class UploadReport:
    """Combined outcome of one multi-file upload.

    Attributes:
        results: Per-file ingest results in request order.
        outcomes: Persistence outcomes in scheduling order.
    """

    results: tuple[IngestResult, ...] = ()
    outcomes: tuple[PersistenceOutcome, ...] = ()

    @property
    def ok(self) -> bool:
        """Return whether every file was ingested and persisted."""
        return all(result.ok for result in self.results) and all(
            outcome.ok for outcome in self.outcomes
        )
