"""Test suite for file parsers."""

import json
from pathlib import Path

import duckdb
import pytest

from mini_mcp.parsers.csv_parser import CSVParser, detect_delimiter
from mini_mcp.parsers.json_parser import JSONParser, extract_columns, is_json_lines
from mini_mcp.parsers.parquet_parser import ParquetParser, map_duckdb_type
from mini_mcp.parsers.parser_factory import get_parser, supported_extensions
from mini_mcp.security.constants import ALLOWED_EXTENSIONS


class TestCSVParser:
    """Tests for CSVParser."""

    def setup_method(self) -> None:
        self.parser = CSVParser()

    def test_parse_with_headers(self, sales_csv: Path) -> None:
        """Test a comma separated file with a header row."""
        data = self.parser.parse(str(sales_csv))

        assert data.columns == ["region", "product", "units", "revenue", "sold_on"]
        assert data.row_count == 5
        assert data.rows[0] == ["North", "Widget", "10", "100.5", "2024-01-05"]
        assert data.rows[3][2] is None
        assert data.column_types == {
            "region": "VARCHAR",
            "product": "VARCHAR",
            "units": "INTEGER",
            "revenue": "DOUBLE",
            "sold_on": "DATE",
        }

    def test_detects_semicolon(self, tmp_path: Path) -> None:
        """Test delimiter detection on a semicolon separated file."""
        path = tmp_path / "semi.csv"
        path.write_text("a;b\n1;x\n2;y\n")

        data = self.parser.parse(str(path))

        assert data.columns == ["a", "b"]
        assert data.rows == [["1", "x"], ["2", "y"]]

    def test_tsv_uses_tab(self, tmp_path: Path) -> None:
        """Test that .tsv files are always tab separated."""
        path = tmp_path / "data.tsv"
        path.write_text("name\tnote\nAnn\ta,b\n")

        data = self.parser.parse(str(path))

        assert data.rows == [["Ann", "a,b"]]

    def test_explicit_delimiter(self, tmp_path: Path) -> None:
        """Test that an explicit delimiter overrides detection."""
        path = tmp_path / "pipes.txt"
        path.write_text("a|b,c\n1|2,3\n")

        data = self.parser.parse(str(path), delimiter="|")

        assert data.columns == ["a", "b,c"]

    def test_without_headers(self, tmp_path: Path) -> None:
        """Test generated column names when the file has no header row."""
        path = tmp_path / "raw.csv"
        path.write_text("1,2\n3,4\n")

        data = self.parser.parse(str(path), has_headers=False)

        assert data.columns == ["column_1", "column_2"]
        assert data.row_count == 2

    def test_trims_values(self, tmp_path: Path) -> None:
        """Test that surrounding whitespace is removed and blank cells are null."""
        path = tmp_path / "spaces.csv"
        path.write_text(" a , b \n  x  ,   \n")

        data = self.parser.parse(str(path))

        assert data.columns == ["a", "b"]
        assert data.rows == [["x", None]]

    def test_empty_file(self, tmp_path: Path) -> None:
        """Test that an empty file yields no columns."""
        path = tmp_path / "empty.csv"
        path.write_text("")

        data = self.parser.parse(str(path))

        assert data.columns == []
        assert data.rows == []

    def test_detect_delimiter(self) -> None:
        """Test that the most frequent candidate wins and comma is the default."""
        assert detect_delimiter("a|b|c;d") == "|"
        assert detect_delimiter("a\tb") == "\t"
        assert detect_delimiter("single") == ","


class TestJSONParser:
    """Tests for JSONParser."""

    def setup_method(self) -> None:
        self.parser = JSONParser()

    def test_array_of_objects(self, tmp_path: Path) -> None:
        """Test that columns are the union of keys in first seen order."""
        path = tmp_path / "items.json"
        path.write_text(json.dumps([{"id": 1, "name": "a"}, {"id": 2, "extra": True}]))

        data = self.parser.parse(str(path))

        assert data.columns == ["id", "name", "extra"]
        assert data.rows == [[1, "a", None], [2, None, True]]
        assert data.column_types["id"] == "INTEGER"
        assert data.column_types["extra"] == "BOOLEAN"

    def test_single_object(self, tmp_path: Path) -> None:
        """Test that a lone object is one row."""
        path = tmp_path / "one.json"
        path.write_text('{"k": "v"}')

        data = self.parser.parse(str(path))

        assert data.rows == [["v"]]

    def test_json_lines(self, tmp_path: Path) -> None:
        """Test newline delimited objects."""
        path = tmp_path / "events.jsonl"
        path.write_text('{"a": 1}\n\n{"a": 2, "b": "x"}\n')

        data = self.parser.parse(str(path))

        assert data.columns == ["a", "b"]
        assert data.row_count == 2

    def test_bad_json_line(self, tmp_path: Path) -> None:
        """Test that a broken line is reported by number."""
        path = tmp_path / "broken.jsonl"
        path.write_text('{"a": 1}\n{"a": \n')

        with pytest.raises(ValueError, match="Failed to parse JSON at line 2"):
            self.parser.parse(str(path))

    def test_scalar_rejected(self, tmp_path: Path) -> None:
        """Test that a top-level scalar is rejected."""
        path = tmp_path / "scalar.json"
        path.write_text("42")

        with pytest.raises(ValueError, match="array of objects or a single object"):
            self.parser.parse(str(path))

    def test_array_of_scalars_rejected(self, tmp_path: Path) -> None:
        """Test that arrays must hold objects."""
        path = tmp_path / "numbers.json"
        path.write_text("[1, 2, 3]")

        with pytest.raises(ValueError, match="array of objects"):
            self.parser.parse(str(path))

    def test_invalid_json(self, tmp_path: Path) -> None:
        """Test malformed JSON."""
        path = tmp_path / "bad.json"
        path.write_text("[{")

        with pytest.raises(ValueError, match="Invalid JSON"):
            self.parser.parse(str(path))

    def test_helpers(self) -> None:
        """Test JSON Lines detection and column extraction."""
        assert is_json_lines('{"a": 1}\n{"a": 2}') is True
        assert is_json_lines('{"a": 1}') is False
        assert is_json_lines('[{"a": 1},\n{"a": 2}]') is False
        assert extract_columns([{"b": 1, "a": 2}, {"c": 3, "a": 4}]) == ["b", "a", "c"]


class TestParquetParser:
    """Tests for ParquetParser."""

    def test_parse_parquet(self, tmp_path: Path) -> None:
        """Test reading a file written by DuckDB."""
        path = tmp_path / "nums.parquet"
        connection = duckdb.connect(":memory:")
        try:
            connection.execute(
                "COPY (SELECT range::INTEGER AS n, 'row' || range AS label FROM range(3)) "
                f"TO '{path}' (FORMAT PARQUET)"
            )
        finally:
            connection.close()

        data = ParquetParser().parse(str(path))

        assert data.columns == ["n", "label"]
        assert data.rows == [[0, "row0"], [1, "row1"], [2, "row2"]]
        assert data.column_types == {"n": "INTEGER", "label": "VARCHAR"}

    def test_corrupt_file(self, tmp_path: Path) -> None:
        """Test that engine errors become ValueError."""
        path = tmp_path / "bad.parquet"
        path.write_bytes(b"not parquet")

        with pytest.raises(ValueError, match="Failed to read Parquet file"):
            ParquetParser().parse(str(path))

    def test_map_duckdb_type(self) -> None:
        """Test type collapsing."""
        assert map_duckdb_type("SMALLINT") == "INTEGER"
        assert map_duckdb_type("HUGEINT") == "BIGINT"
        assert map_duckdb_type("DECIMAL(10,2)") == "DOUBLE"
        assert map_duckdb_type("TIMESTAMP WITH TIME ZONE") == "TIMESTAMP"
        assert map_duckdb_type("STRUCT(a INTEGER)") == "VARCHAR"


class TestParserFactory:
    """Tests for parser lookup."""

    def test_lookup_by_extension(self) -> None:
        """Test that each extension maps to the right parser, case-insensitively."""
        assert isinstance(get_parser("/data/a.CSV"), CSVParser)
        assert isinstance(get_parser("/data/a.jsonl"), JSONParser)
        assert isinstance(get_parser("/data/a.parquet"), ParquetParser)

    def test_unknown_extension(self) -> None:
        """Test the error for unsupported extensions."""
        with pytest.raises(ValueError, match=r"No parser available for file extension '\.xlsx'"):
            get_parser("/data/book.xlsx")

    def test_supported_extensions(self) -> None:
        """Test the sorted extension list."""
        assert supported_extensions() == [
            ".csv", ".json", ".jsonl", ".parquet", ".tsv", ".txt"
        ]

    def test_parsers_match_allowed_extensions(self) -> None:
        """Test that every parser extension is also allowed by the path checks."""
        assert set(supported_extensions()) == set(ALLOWED_EXTENSIONS)
        with pytest.raises(ValueError, match=r"No parser available for file extension '\.pq'"):
            get_parser("/data/a.pq")
