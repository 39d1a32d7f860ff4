"""Spreadsheet readers for ingestion.

This module loads the first sheet of an uploaded workbook or CSV file
into ragged, header-less raw rows for the normalizer.
"""

from __future__ import annotations

import csv
import io
import re
from datetime import date, datetime, time
from pathlib import Path
from typing import Any

import numpy as np
import pandas as pd

from core.constants import SUPPORTED_SHEET_EXTENSIONS
from core.errors import SheetkeepDependencyError, SheetkeepIngestError
from core.types import SheetUpload

_GROUPED_NUMBER_PATTERN = re.compile(r"[+-]?\d{1,3}(,\d{3})+(\.\d+)?")


def read_upload(path: Path) -> SheetUpload:
    """Load a local spreadsheet file as an upload payload.

    Args:
        path: Local file path.

    Returns:
        Upload carrying the file name and raw bytes.

    Raises:
        SheetkeepIngestError: If the file is missing or unsupported.
    """
    if not path.is_file():
        raise SheetkeepIngestError(
            f"Failed to read spreadsheet at {path}: file does not exist. "
            "Provide an existing .xlsx, .xls or .csv file."
        )
    _require_supported_extension(path.name)
    return SheetUpload(file_name=path.name, content=path.read_bytes())


def read_sheet_rows(content: bytes, file_name: str) -> list[list[Any]]:
    """Read the first sheet of a spreadsheet as raw rows.

    Rows are ragged: trailing empty cells are trimmed, and empty cells
    are returned as None.

    Args:
        content: Raw file bytes.
        file_name: Original file name, used to select the format.

    Returns:
        Ordered raw rows without header interpretation.

    Raises:
        SheetkeepIngestError: If the file cannot be parsed.
        SheetkeepDependencyError: If the Excel engine is not installed.
    """
    suffix = _require_supported_extension(file_name)
    if suffix == ".csv":
        raw_rows = _read_csv_rows(content, file_name)
    else:
        raw_rows = _read_excel_rows(content, file_name)
    return [_trim_trailing_empty(row) for row in raw_rows]


def _read_csv_rows(content: bytes, file_name: str) -> list[list[Any]]:
    """Parse CSV bytes and coerce numeric-looking cells."""
    try:
        text = content.decode("utf-8-sig")
    except UnicodeDecodeError as error:
        raise SheetkeepIngestError(
            f"Failed to decode {file_name}: {error.reason}. Save the CSV as UTF-8 and retry."
        ) from error
    try:
        return [[_coerce_text_cell(cell) for cell in row] for row in csv.reader(io.StringIO(text))]
    except csv.Error as error:
        raise SheetkeepIngestError(
            f"Failed to parse CSV file {file_name}: {error}. "
            "Check the file for oversized or malformed cells."
        ) from error


def _read_excel_rows(content: bytes, file_name: str) -> list[list[Any]]:
    """Parse the first worksheet of an Excel workbook."""
    try:
        frame = pd.read_excel(io.BytesIO(content), sheet_name=0, header=None, dtype=object)
    except ImportError as error:
        raise SheetkeepDependencyError(
            f"Reading {file_name} requires an Excel engine that is not installed: {error}. "
            "Install openpyxl for .xlsx files and xlrd for .xls files."
        ) from error
    except Exception as error:
        raise SheetkeepIngestError(
            f"Failed to parse spreadsheet {file_name}: {error}. "
            "Check that the file is a valid workbook."
        ) from error
    return [[_normalize_excel_cell(value) for value in row] for row in frame.itertuples(index=False)]


def _normalize_excel_cell(value: Any) -> Any:
    """Convert pandas cell values into plain JSON-friendly Python values."""
    if value is None:
        return None
    if isinstance(value, np.generic):
        value = value.item()
    if isinstance(value, float) and np.isnan(value):
        return None
    if value is pd.NaT:
        return None
    if isinstance(value, pd.Timestamp):
        return value.isoformat()
    if isinstance(value, (datetime, date, time)):
        return value.isoformat()
    return value


def _coerce_text_cell(cell: str) -> Any:
    """Turn CSV text into None, a number, or the original string."""
    if cell == "":
        return None
    candidate = cell.strip()
    if _GROUPED_NUMBER_PATTERN.fullmatch(candidate):
        candidate = candidate.replace(",", "")
    number = pd.to_numeric(candidate, errors="coerce")
    if pd.isna(number) or np.isinf(number):
        return cell
    return number.item() if isinstance(number, np.generic) else number


def _trim_trailing_empty(row: list[Any]) -> list[Any]:
    """Drop empty cells after the last non-empty cell."""
    end = len(row)
    while end > 0 and (row[end - 1] is None or row[end - 1] == ""):
        end -= 1
    return list(row[:end])


def _require_supported_extension(file_name: str) -> str:
    """Return the lowercase extension or reject unsupported files."""
    suffix = Path(file_name).suffix.lower()
    if suffix not in SUPPORTED_SHEET_EXTENSIONS:
        raise SheetkeepIngestError(
            f"Unsupported file type for {file_name}: expected one of "
            f"{', '.join(SUPPORTED_SHEET_EXTENSIONS)}."
        )
    return suffix
