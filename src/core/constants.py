"""Core constants used across Sheetkeep modules.

This module centralizes non-domain-specific constants.
Keeping values here avoids magic literals in business logic.
"""

from __future__ import annotations

from pathlib import Path

DEFAULT_DATA_ROOT = Path(".sheetkeep")
COLLECTIONS_DIR_NAME = "collections"
METADATA_DIR_NAME = "metadata"
METADATA_DOCUMENT_NAME = "datasets"
METADATA_NAMES_FIELD = "names"
METADATA_HEADERS_SUFFIX = "_headers"
ROW_INDEX_FIELD = "_rowIndex"
HEADER_ROW_INDEX = 1
DEFAULT_DATASET_NAME = "default_collection"
PLACEHOLDER_COLUMN_PREFIX = "Column"
EXCLUDED_IDENTIFIER_TOKEN = "source"
EMPTY_CELL_PLACEHOLDER = 0
RECOVERED_FILE_EXTENSION = ".xlsx"
SUPPORTED_SHEET_EXTENSIONS = (".xlsx", ".xls", ".csv")
DEFAULT_PREVIEW_ROWS = 8
