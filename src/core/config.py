"""Runtime configuration model for Sheetkeep.

This module owns all environment variable parsing and validation.
Other modules consume a typed config object instead of raw env reads.
"""

from __future__ import annotations

from dataclasses import dataclass
import os
from pathlib import Path

from core.constants import DEFAULT_DATA_ROOT, DEFAULT_PREVIEW_ROWS
from core.errors import SheetkeepConfigError
from core.s3_uri import is_s3_uri, parse_s3_uri


@dataclass(frozen=True)
class SheetkeepConfig:
    """Validated runtime configuration.

    Attributes:
        data_root: Local root directory for the file-backed document store.
        store_uri: Optional ``s3://bucket/prefix`` for the remote document store.
        s3_region: Optional default AWS region for S3 operations.
        s3_profile: Optional AWS profile for boto3 session initialization.
        preview_rows: Default number of records shown in a preview.
    """

    data_root: Path
    store_uri: str | None
    s3_region: str | None
    s3_profile: str | None
    preview_rows: int

    @classmethod
    def from_env(cls) -> "SheetkeepConfig":
        """Build config from process environment variables.

        Returns:
            A validated config object.

        Raises:
            SheetkeepConfigError: If environment values are invalid.
        """
        data_root_value = os.getenv("SHEETKEEP_DATA_ROOT", str(DEFAULT_DATA_ROOT))
        store_uri = _parse_store_uri(os.getenv("SHEETKEEP_STORE_URI") or None)
        s3_region = os.getenv("SHEETKEEP_S3_REGION")
        s3_profile = os.getenv("SHEETKEEP_S3_PROFILE")
        preview_rows_value = os.getenv("SHEETKEEP_PREVIEW_ROWS", str(DEFAULT_PREVIEW_ROWS))
        return cls(
            data_root=Path(data_root_value).expanduser().resolve(),
            store_uri=store_uri,
            s3_region=s3_region,
            s3_profile=s3_profile,
            preview_rows=_parse_preview_rows(preview_rows_value),
        )


def _parse_preview_rows(raw_value: str) -> int:
    """Parse the preview row count environment value.

    Args:
        raw_value: Raw string from environment.

    Returns:
        Parsed positive integer.

    Raises:
        SheetkeepConfigError: If value is not a positive integer.
    """
    try:
        preview_rows = int(raw_value)
    except ValueError as error:
        raise SheetkeepConfigError(
            "Invalid SHEETKEEP_PREVIEW_ROWS value: "
            f"expected integer, got '{raw_value}'. "
            "Set SHEETKEEP_PREVIEW_ROWS to a positive number."
        ) from error
    if preview_rows < 1:
        raise SheetkeepConfigError(
            f"Invalid SHEETKEEP_PREVIEW_ROWS value: expected at least 1, got {preview_rows}. "
            "Set SHEETKEEP_PREVIEW_ROWS to a positive number."
        )
    return preview_rows


def _parse_store_uri(raw_value: str | None) -> str | None:
    """Validate the optional remote store URI.

    Args:
        raw_value: Raw string from environment, or None when unset.

    Returns:
        The validated URI, or None for the local store.

    Raises:
        SheetkeepConfigError: If the URI is not a valid ``s3://`` location.
    """
    if raw_value is None:
        return None
    if not is_s3_uri(raw_value):
        raise SheetkeepConfigError(
            f"Invalid SHEETKEEP_STORE_URI value '{raw_value}': expected s3://bucket/prefix. "
            "Unset SHEETKEEP_STORE_URI to use the local document store."
        )
    parse_s3_uri(raw_value, domain="config")
    return raw_value
