"""Integration tests for uploading sheets and reloading them from the store."""

from __future__ import annotations

import asyncio

from core.workspace import DatasetWorkspace
from ingest.pipeline import IngestSession, ingest_uploads
from store.dataset_sdk import SheetkeepClient
from store.local_store import LocalDocumentStore
from tests.fixture_paths import fixture_path, fixture_upload


def test_uploaded_datasets_reload_with_same_schema_and_order(config) -> None:
    """A reload reproduces headers, record order and values."""
    store = LocalDocumentStore(config.data_root)
    workspace = DatasetWorkspace()
    uploads = [fixture_upload("emigrants_by_country.csv"), fixture_upload("emigrants_by_sex.csv")]

    results, outcomes = asyncio.run(ingest_uploads(store, uploads, workspace))
    reloaded = asyncio.run(IngestSession(store).load_existing())

    assert all(result.ok for result in results)
    assert [outcome.status for outcome in outcomes] == ["persisted", "persisted"]
    for name in ("emigrants_by_country", "emigrants_by_sex"):
        original = workspace.get(name)
        restored = reloaded.datasets[name]
        assert restored.headers == original.headers
        assert [record.as_dict() for record in restored.records] == [
            record.as_dict() for record in original.records
        ]
    assert reloaded.active_name == "emigrants_by_country"


def test_reupload_keeps_single_registry_entry(config) -> None:
    """Uploading the same file twice does not duplicate its name."""
    client = SheetkeepClient(config)
    path = fixture_path("emigrants_by_sex.csv")

    client.upload([path])
    client.upload([path])

    assert LocalDocumentStore(config.data_root).read_metadata()["names"] == ["emigrants_by_sex"]
    assert len(client.dataset("emigrants_by_sex").records) == 2


def test_reload_recovers_headers_written_by_older_clients(config) -> None:
    """Entries without registry headers reload with rebuilt headers saved back."""
    store = LocalDocumentStore(config.data_root)
    store.commit_batch("legacy", {"NCR": {"Region": "NCR", "2020": 12, "_rowIndex": 0}})
    store.merge_metadata({}, union_names=("legacy",))

    first = SheetkeepClient(config, store=store).load()
    second = SheetkeepClient(config, store=store).load()

    assert first.datasets["legacy"].headers == ("Region", "2020")
    assert dict(first.recovered_headers) == {"legacy": ("Region", "2020")}
    assert dict(second.recovered_headers) == {}
    assert second.datasets["legacy"].records[0].as_dict() == {"Region": "NCR", "2020": 12}


def test_client_preview_uses_configured_row_count(config) -> None:
    """Previews default to the configured number of rows."""
    client = SheetkeepClient(config)
    client.upload([fixture_path("emigrants_by_country.csv")])

    preview = client.preview("emigrants_by_country")

    assert preview.shown_count == min(config.preview_rows, 3)
    assert preview.total_count == 3
