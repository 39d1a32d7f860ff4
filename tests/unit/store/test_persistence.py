"""Unit tests for the dataset persistence sink."""

from __future__ import annotations

from typing import Any, Mapping, Sequence

from core.errors import SheetkeepStoreError
from core.types import Record
from store.local_store import LocalDocumentStore
from store.persistence import build_batch_entries, persist_dataset

HEADERS = ("Country", "2020", "2021")


def _records() -> tuple[Record, ...]:
    return (
        Record(position=0, fields=(("Country", "USA"), ("2020", 10), ("2021", 0))),
        Record(position=1, fields=(("Country", "HONG KONG / MACAU"), ("2020", 3), ("2021", 4))),
    )


class _HeaderDroppingStore(LocalDocumentStore):
    """Store whose first ``drops`` header merges lose their fields."""

    def __init__(self, data_root, drops: int) -> None:
        super().__init__(data_root)
        self.drops = drops
        self.merge_calls = 0

    def merge_metadata(self, fields: Mapping[str, Any], union_names: Sequence[str] = ()) -> None:
        self.merge_calls += 1
        if self.drops > 0:
            self.drops -= 1
            fields = {}
        super().merge_metadata(fields, union_names)


class _FailingBatchStore(LocalDocumentStore):
    def commit_batch(self, namespace: str, entries: Mapping[str, Mapping[str, Any]]) -> None:
        raise SheetkeepStoreError("permission denied")


def test_persist_dataset_writes_entries_and_registry(local_store: LocalDocumentStore) -> None:
    """Persisted entries are keyed by identifier and registered with headers."""
    outcome = persist_dataset(local_store, _records(), "Emigrants 2020.xlsx", "Country", HEADERS)

    assert outcome.status == "persisted"
    assert outcome.dataset_name == "emigrants_2020"
    assert outcome.record_count == 2
    assert outcome.headers_verified is True
    metadata = local_store.read_metadata()
    assert metadata["names"] == ["emigrants_2020"]
    assert metadata["emigrants_2020_headers"] == list(HEADERS)
    entries = local_store.scan_namespace("emigrants_2020")
    assert {"Country": "HONG KONG / MACAU", "2020": 3, "2021": 4, "_rowIndex": 1} in entries


def test_build_batch_entries_replaces_slashes_in_keys() -> None:
    """Identifier slashes become dashes in entry keys only."""
    entries = build_batch_entries(_records(), "Country")

    assert list(entries) == ["USA", "HONG KONG - MACAU"]
    assert entries["HONG KONG - MACAU"]["Country"] == "HONG KONG / MACAU"


def test_build_batch_entries_skips_unusable_identifiers() -> None:
    """Records with blank or non-text identifiers are not written."""
    records = (
        Record(position=0, fields=(("Country", "  "), ("2020", 1))),
        Record(position=1, fields=(("Country", 5), ("2020", 2))),
        Record(position=2, fields=(("Country", "PH"), ("2020", 3))),
    )

    assert list(build_batch_entries(records, "Country")) == ["PH"]


def test_persist_dataset_skips_empty_record_list(local_store: LocalDocumentStore) -> None:
    """No records means nothing is written and the outcome is skipped."""
    outcome = persist_dataset(local_store, (), "empty.csv", "Country", HEADERS)

    assert outcome.status == "skipped"
    assert outcome.ok is True
    assert local_store.read_metadata() is None


def test_persist_dataset_fails_for_unnameable_file(local_store: LocalDocumentStore) -> None:
    """A file name with no usable characters fails before any write."""
    outcome = persist_dataset(local_store, _records(), "@@@.csv", "Country", HEADERS)

    assert outcome.status == "failed"
    assert outcome.dataset_name == ""
    assert local_store.read_metadata() is None


def test_persist_dataset_reports_batch_failure(config) -> None:
    """A rejected batch yields a failed outcome naming the dataset."""
    store = _FailingBatchStore(config.data_root)

    outcome = persist_dataset(store, _records(), "emigrants.csv", "Country", HEADERS)

    assert outcome.status == "failed"
    assert outcome.message.startswith("Upload failed for emigrants:")
    assert store.read_metadata() is None


def test_headers_are_rewritten_once_when_first_write_is_lost(config) -> None:
    """A missing header field triggers exactly one retry."""
    store = _HeaderDroppingStore(config.data_root, drops=1)

    outcome = persist_dataset(store, _records(), "emigrants.csv", "Country", HEADERS)

    assert outcome.headers_verified is True
    assert store.merge_calls == 2
    assert store.read_metadata()["emigrants_headers"] == list(HEADERS)


def test_persistence_completes_when_retry_also_fails(config) -> None:
    """Metadata inconsistency is reported but does not fail the upload."""
    store = _HeaderDroppingStore(config.data_root, drops=2)

    outcome = persist_dataset(store, _records(), "emigrants.csv", "Country", HEADERS)

    assert outcome.status == "persisted"
    assert outcome.headers_verified is False
    assert store.merge_calls == 2
    assert store.read_metadata()["names"] == ["emigrants"]
