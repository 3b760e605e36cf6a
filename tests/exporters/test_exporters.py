"""Test suite for result exporters."""

import json

import pytest

from mini_mcp.exporters.csv_exporter import export_to_csv
from mini_mcp.exporters.exporter_factory import export_data, get_supported_export_formats
from mini_mcp.exporters.json_exporter import export_to_json, export_to_jsonl
from mini_mcp.exporters.markdown_exporter import export_to_markdown, format_cell
from mini_mcp.protocol.types import QueryResult


def make_result(truncated: bool = False) -> QueryResult:
    return QueryResult(
        columns=["name", "note", "amount"],
        rows=[["Ann", "a,b", 1.5], ["Bob", None, 2]],
        row_count=2,
        truncated=truncated,
    )


class TestCSVExport:
    """Tests for CSV output."""

    def test_quotes_and_nulls(self) -> None:
        """Test that delimiters are quoted and nulls are empty."""
        assert export_to_csv(make_result()) == 'name,note,amount\nAnn,"a,b",1.5\nBob,,2'


class TestJSONExport:
    """Tests for JSON and JSON Lines output."""

    def test_json_array(self) -> None:
        """Test an indented array of objects keyed by column."""
        output = export_to_json(make_result())

        assert json.loads(output) == [
            {"name": "Ann", "note": "a,b", "amount": 1.5},
            {"name": "Bob", "note": None, "amount": 2},
        ]
        assert "\n  " in output

    def test_json_lines(self) -> None:
        """Test one compact object per line."""
        lines = export_to_jsonl(make_result()).split("\n")

        assert len(lines) == 2
        assert json.loads(lines[1]) == {"name": "Bob", "note": None, "amount": 2}

    def test_empty_result(self) -> None:
        """Test exports of a result without rows."""
        empty = QueryResult(columns=["a"], rows=[], row_count=0)

        assert export_to_json(empty) == "[]"
        assert export_to_jsonl(empty) == ""


class TestMarkdownExport:
    """Tests for Markdown output."""

    def test_table_with_footer(self) -> None:
        """Test the pipe table layout and row count footer."""
        output = export_to_markdown(make_result())

        assert output == (
            "| name | note | amount |\n"
            "| --- | --- | --- |\n"
            "| Ann | a,b | 1.5 |\n"
            "| Bob | _null_ | 2 |\n"
            "\n"
            "_2 rows_"
        )

    def test_single_row_footer(self) -> None:
        """Test singular wording."""
        result = QueryResult(columns=["a"], rows=[[1]], row_count=1)

        assert export_to_markdown(result).endswith("_1 row_")

    def test_truncation_notice_always_shown(self) -> None:
        """Test that truncation is reported even without the row count."""
        output = export_to_markdown(make_result(truncated=True), include_row_count=False)

        assert output.endswith("_Showing 2 rows (truncated, more rows available)_")

    def test_without_row_count(self) -> None:
        """Test that the footer can be omitted."""
        assert "_2 rows_" not in export_to_markdown(make_result(), include_row_count=False)

    def test_no_columns(self) -> None:
        """Test a statement result with no columns."""
        assert export_to_markdown(QueryResult(columns=[], rows=[], row_count=0)) == "_No data_"

    def test_format_cell_escapes(self) -> None:
        """Test escaping of pipes and newlines."""
        assert format_cell("a|b\nc") == "a\\|b c"


class TestExporterFactory:
    """Tests for export_data."""

    @pytest.mark.parametrize("fmt", ["csv", "json", "jsonl", "markdown"])
    def test_dispatch(self, fmt: str) -> None:
        """Test that every supported format produces output."""
        assert "Ann" in export_data(make_result(), fmt)

    def test_unknown_format(self) -> None:
        """Test the error listing supported formats."""
        with pytest.raises(ValueError, match="Unknown export format: xml"):
            export_data(make_result(), "xml")

    def test_supported_formats(self) -> None:
        assert get_supported_export_formats() == ["csv", "json", "jsonl", "markdown"]
