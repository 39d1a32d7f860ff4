"""Document store selection from runtime config."""

from __future__ import annotations

from core.config import SheetkeepConfig
from core.s3_uri import is_s3_uri, parse_s3_uri
from store.document_store import DocumentStore
from store.local_store import LocalDocumentStore
from store.s3_store import S3DocumentStore, create_s3_client


def create_document_store(config: SheetkeepConfig) -> DocumentStore:
    """Return the S3 store when ``store_uri`` is set, else the local store."""
    if config.store_uri and is_s3_uri(config.store_uri):
        location = parse_s3_uri(config.store_uri, domain="store")
        return S3DocumentStore(location, create_s3_client(config))
    return LocalDocumentStore(config.data_root)
