"""Unit tests for spreadsheet normalization."""

from __future__ import annotations

import pytest

from core.errors import SheetkeepIngestError, SheetkeepNamingError
from ingest.normalizer import derive_headers, drop_blank_rows, is_valid_identifier, normalize_rows


def test_normalize_rows_uses_second_row_as_header() -> None:
    """Title row is dropped, blank rows removed, and data rows keyed by header."""
    rows = [["Title"], ["Country", "2019", "2020"], ["PH", 5, 7], ["", "", ""]]

    dataset = normalize_rows(rows, "Emigrants.xlsx")

    assert dataset.name == "emigrants"
    assert dataset.headers == ("Country", "2019", "2020")
    assert [record.as_dict() for record in dataset.records] == [
        {"Country": "PH", "2019": 5, "2020": 7}
    ]


def test_normalize_rows_raises_for_single_row_file() -> None:
    """Files without a header and data row are malformed and named in the error."""
    with pytest.raises(SheetkeepIngestError, match="short.xlsx"):
        normalize_rows([["Title"], [None, ""]], "short.xlsx")


def test_normalize_rows_raises_naming_error_before_parsing() -> None:
    """A file name that sanitizes to nothing cannot produce a dataset."""
    with pytest.raises(SheetkeepNamingError):
        normalize_rows([["Title"], ["Country"], ["PH"]], "###.csv")


def test_normalize_rows_synthesizes_placeholder_headers() -> None:
    """Blank header cells become Column{n} and labels are trimmed."""
    rows = [["Title"], ["  Region ", None, "", 2020], ["NCR", 1, 2, 3]]

    dataset = normalize_rows(rows, "regions.csv")

    assert dataset.headers == ("Region", "Column2", "Column3", "2020")
    assert dataset.id_column == "Region"


def test_normalize_rows_uses_column1_when_identifier_header_blank() -> None:
    """An empty first header designates Column1 as identifier column."""
    rows = [["Title"], [None, "Total"], ["PH", 10]]

    dataset = normalize_rows(rows, "totals.csv")

    assert dataset.id_column == "Column1"
    assert dataset.records[0].value("Column1") == "PH"


def test_normalize_rows_zero_fills_empty_non_identifier_cells() -> None:
    """Short rows are padded and empty numeric cells become zero."""
    rows = [["Title"], ["Country", "1981", "1982", "1983"], ["USA", None, ""], ["JAPAN", 3, "", 4]]

    dataset = normalize_rows(rows, "countries.xlsx")

    assert dataset.records[0].as_dict() == {"Country": "USA", "1981": 0, "1982": 0, "1983": 0}
    assert dataset.records[1].as_dict() == {"Country": "JAPAN", "1981": 3, "1982": 0, "1983": 4}


def test_normalize_rows_stringifies_and_trims_identifiers() -> None:
    """Identifier cells are stringified; integral floats lose the fraction."""
    rows = [["Title"], ["Year", "Male"], [1981.0, 18000], ["  1982 ", 19000]]

    dataset = normalize_rows(rows, "sex.xlsx")

    assert [record.value("Year") for record in dataset.records] == ["1981", "1982"]


def test_normalize_rows_excludes_source_and_blank_identifiers() -> None:
    """Footnote rows and rows without an identifier never reach the dataset."""
    rows = [
        ["Title"],
        ["Country", "2020"],
        ["Source: DOH", 99],
        ["   ", 4],
        [None, 5],
        ["OPEN SOURCE REPUBLIC", 1],
        ["CANADA", 6],
    ]

    dataset = normalize_rows(rows, "filtered.csv")

    assert [record.value("Country") for record in dataset.records] == ["CANADA"]


def test_normalize_rows_positions_follow_filtered_order() -> None:
    """Sequence positions index the filtered rows, not the raw rows."""
    rows = [["Title"], ["Country", "2020"], ["USA", 1], ["Source", 2], ["CANADA", 3]]

    dataset = normalize_rows(rows, "positions.csv")

    assert [(record.position, record.value("Country")) for record in dataset.records] == [
        (0, "USA"),
        (1, "CANADA"),
    ]


def test_normalize_rows_unwraps_value_wrapper_cells() -> None:
    """Cells carried as {"v": value} wrappers are unwrapped before coercion."""
    rows = [["Title"], ["Country", "2020"], [{"v": " PH "}, {"v": 12}]]

    dataset = normalize_rows(rows, "wrapped.xlsx")

    assert dataset.records[0].as_dict() == {"Country": "PH", "2020": 12}


def test_normalize_rows_treats_null_wrapped_cells_as_empty() -> None:
    """Wrappers holding no value follow the empty-cell rules."""
    rows = [
        ["Title"],
        ["Country", "2020"],
        ["PH", {"v": None}],
        [{"v": None}, 4],
        [{"v": None}, {"v": None}],
    ]

    dataset = normalize_rows(rows, "wrapped.xlsx")

    assert [record.as_dict() for record in dataset.records] == [{"Country": "PH", "2020": 0}]


def test_normalize_rows_keeps_non_empty_text_values() -> None:
    """Non-identifier text passes through unchanged."""
    rows = [["Title"], ["Country", "Notes"], ["PH", " est. "]]

    dataset = normalize_rows(rows, "notes.csv")

    assert dataset.records[0].value("Notes") == " est. "


def test_drop_blank_rows_keeps_rows_with_any_value() -> None:
    """Only rows whose every cell is empty are dropped."""
    rows = [[None, ""], [], ["", 0], [None, "x"]]

    assert drop_blank_rows(rows) == [["", 0], [None, "x"]]


def test_derive_headers_length_matches_header_cells() -> None:
    """Header count equals the raw header row cell count."""
    assert len(derive_headers(["A", None, "", "D", None])) == 5


@pytest.mark.parametrize(
    ("value", "expected"),
    [("PH", True), ("", False), ("  ", False), ("data source", False), ("SOURCE", False), (5, False)],
)
def test_is_valid_identifier(value: object, expected: bool) -> None:
    """Only non-empty strings without 'source' qualify."""
    assert is_valid_identifier(value) is expected
