"""Public SDK surface for Sheetkeep.

This module provides a stable import path for library users.
It re-exports the primary client and typed models.
"""

from __future__ import annotations

from core.config import SheetkeepConfig
from core.types import (
    Dataset,
    IngestResult,
    PersistenceOutcome,
    Record,
    RecoveryResult,
    SheetUpload,
    UploadReport,
)
from core.workspace import DatasetWorkspace
from ingest.normalizer import normalize_rows
from ingest.pipeline import IngestSession
from serve.preview import DatasetPreview, build_preview, render_preview
from store.dataset_sdk import SheetkeepClient
from store.local_store import LocalDocumentStore
from store.s3_store import S3DocumentStore

__all__ = [
    "Dataset",
    "DatasetPreview",
    "DatasetWorkspace",
    "IngestResult",
    "IngestSession",
    "LocalDocumentStore",
    "PersistenceOutcome",
    "Record",
    "RecoveryResult",
    "S3DocumentStore",
    "SheetUpload",
    "SheetkeepClient",
    "SheetkeepConfig",
    "UploadReport",
    "build_preview",
    "normalize_rows",
    "render_preview",
]
