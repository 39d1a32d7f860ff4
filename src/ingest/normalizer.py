"""Spreadsheet-to-dataset normalization.

This module turns raw sheet rows into a header-tagged, row-indexed
dataset. The second non-blank row is the header row; the first one is
a title caption and is discarded.
"""

from __future__ import annotations

from dataclasses import replace
from typing import Any, Mapping, Sequence

from core.constants import (
    EMPTY_CELL_PLACEHOLDER,
    EXCLUDED_IDENTIFIER_TOKEN,
    HEADER_ROW_INDEX,
    PLACEHOLDER_COLUMN_PREFIX,
)
from core.errors import SheetkeepIngestError
from core.naming import derive_dataset_name
from core.types import CellValue, Dataset, Record


def normalize_rows(raw_rows: Sequence[Sequence[Any]], file_name: str) -> Dataset:
    """Build a dataset from raw sheet rows.

    Args:
        raw_rows: Header-less rows of the first sheet.
        file_name: Original upload file name.

    Returns:
        Dataset with derived headers and filtered, position-tagged records.

    Raises:
        SheetkeepIngestError: If fewer than two non-blank rows exist.
        SheetkeepNamingError: If the file name sanitizes to nothing.
    """
    dataset_name = derive_dataset_name(file_name)
    rows = drop_blank_rows(raw_rows)
    if len(rows) <= HEADER_ROW_INDEX:
        raise SheetkeepIngestError(
            f"Error in file {file_name}: file must have at least 2 rows (header and data)."
        )
    header_cells = rows[HEADER_ROW_INDEX]
    headers = derive_headers(header_cells)
    if not headers:
        raise SheetkeepIngestError(
            f"Error in file {file_name}: header row has no identifier column."
        )
    id_column = headers[0]
    candidates = [
        Record(position=0, fields=_coerce_row(row, headers, id_column))
        for row in rows[HEADER_ROW_INDEX + 1 :]
    ]
    kept = [record for record in candidates if is_valid_identifier(record.value(id_column))]
    records = tuple(replace(record, position=position) for position, record in enumerate(kept))
    return Dataset(
        name=dataset_name,
        headers=tuple(headers),
        records=records,
        file_name=file_name,
        id_column=id_column,
    )


def drop_blank_rows(raw_rows: Sequence[Sequence[Any]]) -> list[list[Any]]:
    """Remove rows whose cells are all null or empty."""
    return [list(row) for row in raw_rows if any(not _is_empty(cell) for cell in row)]


def derive_headers(header_cells: Sequence[Any]) -> list[str]:
    """Return trimmed header labels with ``Column{n}`` placeholders for blanks."""
    headers: list[str] = []
    for index, cell in enumerate(header_cells):
        label = _stringify(unwrap_cell(cell)).strip() if not _is_empty(cell) else ""
        headers.append(label or f"{PLACEHOLDER_COLUMN_PREFIX}{index + 1}")
    return headers


def is_valid_identifier(value: object) -> bool:
    """Return whether an identifier qualifies a row for the dataset."""
    if not isinstance(value, str):
        return False
    if EXCLUDED_IDENTIFIER_TOKEN in value.lower():
        return False
    return value.strip() != ""


def unwrap_cell(cell: Any) -> Any:
    """Return the primitive value behind a value-wrapper cell."""
    if isinstance(cell, Mapping) and "v" in cell:
        return cell["v"]
    if type(cell).__module__.startswith("openpyxl.") and hasattr(cell, "value"):
        return cell.value
    return cell


def _coerce_row(
    row: Sequence[Any],
    headers: Sequence[str],
    id_column: str,
) -> tuple[tuple[str, CellValue], ...]:
    """Pad a data row to the header count and coerce each cell."""
    filled = list(row) + [""] * max(0, len(headers) - len(row))
    pairs: list[tuple[str, CellValue]] = []
    for index, label in enumerate(headers):
        cell = unwrap_cell(filled[index])
        if label == id_column:
            pairs.append((label, "" if cell is None else _stringify(cell).strip()))
        elif cell is None or cell == "":
            pairs.append((label, EMPTY_CELL_PLACEHOLDER))
        else:
            pairs.append((label, cell))
    return tuple(pairs)


def _stringify(value: Any) -> str:
    """Render a cell as text; integral floats drop their fractional part."""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def _is_empty(cell: Any) -> bool:
    value = unwrap_cell(cell)
    return value is None or value == ""
