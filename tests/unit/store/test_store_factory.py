"""Unit tests for document store selection."""

from __future__ import annotations

from dataclasses import replace

import pytest

import store.store_factory as store_factory
from store.local_store import LocalDocumentStore
from store.s3_store import S3DocumentStore


def test_create_document_store_defaults_to_local(config) -> None:
    """Without a store URI the data root backs the store."""
    assert isinstance(store_factory.create_document_store(config), LocalDocumentStore)


def test_create_document_store_selects_s3_for_store_uri(
    config,
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    """An s3:// store URI builds the S3 store with a session client."""
    created: list[object] = []
    monkeypatch.setattr(
        store_factory, "create_s3_client", lambda cfg: created.append(cfg) or object()
    )

    store = store_factory.create_document_store(replace(config, store_uri="s3://sheets/emigrants"))

    assert isinstance(store, S3DocumentStore)
    assert len(created) == 1
