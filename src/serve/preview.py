"""Tabular preview of a dataset.

This module selects the first rows of a dataset for display and
renders them as a plain-text table for the command line.
"""

from __future__ import annotations

from dataclasses import dataclass

from core.types import CellValue, Dataset


@dataclass(frozen=True)
class DatasetPreview:
    """Display-ready slice of a dataset.

    Attributes:
        file_name: Dataset file name shown as the title.
        headers: Column labels; blank labels become ``Col {n}``.
        rows: Cell text for the shown records.
        total_count: Number of records in the dataset.
    """

    file_name: str
    headers: tuple[str, ...]
    rows: tuple[tuple[str, ...], ...]
    total_count: int

    @property
    def shown_count(self) -> int:
        """Return the number of rows in the preview."""
        return len(self.rows)


def build_preview(dataset: Dataset, rows_to_show: int) -> DatasetPreview:
    """Build a preview of the first ``rows_to_show`` records.

    Args:
        dataset: Dataset to preview.
        rows_to_show: Requested row count; values below 1 count as 1.

    Returns:
        Preview with at most ``rows_to_show`` rows.
    """
    limit = max(1, rows_to_show)
    headers = tuple(label or f"Col {index + 1}" for index, label in enumerate(dataset.headers))
    rows = tuple(
        tuple(format_cell(record.value(label)) for label in dataset.headers)
        for record in dataset.records[:limit]
    )
    return DatasetPreview(
        file_name=dataset.file_name,
        headers=headers,
        rows=rows,
        total_count=len(dataset.records),
    )


def render_preview(preview: DatasetPreview) -> str:
    """Render a preview as an aligned plain-text table."""
    widths = [len(label) for label in preview.headers]
    for row in preview.rows:
        for index, cell in enumerate(row):
            widths[index] = max(widths[index], len(cell))
    lines = [
        preview.file_name,
        f"(Total rows: {preview.total_count})",
        _render_line(preview.headers, widths),
        "  ".join("-" * width for width in widths),
    ]
    lines.extend(_render_line(row, widths) for row in preview.rows)
    lines.append(f"Showing first {preview.shown_count} rows")
    return "\n".join(lines)


def format_cell(value: CellValue | None) -> str:
    """Return display text for a cell; missing values render empty."""
    if value is None:
        return ""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def _render_line(cells: tuple[str, ...], widths: list[int]) -> str:
    return "  ".join(cell.ljust(width) for cell, width in zip(cells, widths)).rstrip()
