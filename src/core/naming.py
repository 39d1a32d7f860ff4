"""Dataset and document naming rules.

This module derives store-safe names shared by the ingest and store
layers so both sides agree on the namespace of an upload.
"""

from __future__ import annotations

import re

from core.constants import DEFAULT_DATASET_NAME, RECOVERED_FILE_EXTENSION
from core.errors import SheetkeepNamingError

_EXTENSION_PATTERN = re.compile(r"\.[^/.]+$")
_WHITESPACE_PATTERN = re.compile(r"\s+")
_INVALID_NAME_CHARS_PATTERN = re.compile(r"[^a-zA-Z0-9_]")


def derive_dataset_name(file_name: str | None) -> str:
    """Derive the dataset slug from an upload file name.

    Args:
        file_name: Original file name; may be empty or None.

    Returns:
        Lowercase slug of ``[a-z0-9_]`` characters.

    Raises:
        SheetkeepNamingError: If a non-empty name sanitizes to nothing.
    """
    if not file_name:
        return DEFAULT_DATASET_NAME
    stem = _EXTENSION_PATTERN.sub("", file_name)
    slug = _INVALID_NAME_CHARS_PATTERN.sub("", _WHITESPACE_PATTERN.sub("_", stem)).lower()
    if not slug:
        raise SheetkeepNamingError(
            f"Could not create a valid dataset name from file {file_name!r}. "
            "Rename the file to include letters or digits."
        )
    return slug


def document_key(identifier: str) -> str:
    """Return the store key for a record identifier."""
    return identifier.replace("/", "-")


def recovered_file_name(dataset_name: str) -> str:
    """Synthesize a display file name for a dataset reloaded from the store."""
    return f"{dataset_name.replace('_', ' ')}{RECOVERED_FILE_EXTENSION}"
