"""Test suite for the DuckDB store."""

import asyncio
import datetime
import decimal
from unittest.mock import patch

import pytest

from mini_mcp.config.schema import Config, LimitsConfig
from mini_mcp.protocol.types import ParsedData
from mini_mcp.store.duckdb_store import (
    DuckDBStore,
    prepare_query,
    quote_identifier,
    sanitize_table_name,
    to_json_safe,
)

PEOPLE = ParsedData(
    columns=["name", "age", "score", "active", "joined"],
    rows=[
        ["Ann", "31", "88.5", "yes", "2023-01-02"],
        ["Bob", "45", "72", "no", "2023-02-03"],
        ["Cy", None, "91.25", "yes", None],
    ],
)


class TestHelpers:
    """Tests for module level helpers."""

    def test_sanitize_table_name(self) -> None:
        """Test replacement of characters outside [A-Za-z0-9_]."""
        assert sanitize_table_name("sales data-2024.v1") == "sales_data_2024_v1"

    def test_quote_identifier(self) -> None:
        """Test quoting with embedded double quotes."""
        assert quote_identifier('we"ird') == '"we""ird"'

    def test_prepare_query_appends_limit(self) -> None:
        """Test that a limit of max_rows + 1 is appended and semicolons stripped."""
        assert prepare_query("SELECT * FROM t;", 10) == "SELECT * FROM t LIMIT 11"

    def test_prepare_query_keeps_existing_limit(self) -> None:
        """Test that an explicit LIMIT is left alone."""
        assert prepare_query("select * from t limit 5", 10) == "select * from t limit 5"

    def test_prepare_query_ignores_non_select(self) -> None:
        """Test that statements which do not return rows are not rewritten."""
        assert prepare_query("DESCRIBE t", 10) == "DESCRIBE t"

    def test_to_json_safe(self) -> None:
        """Test conversion of engine values."""
        assert to_json_safe(decimal.Decimal("1.5")) == 1.5
        assert to_json_safe(datetime.date(2024, 1, 2)) == "2024-01-02"
        assert to_json_safe(datetime.datetime(2024, 1, 2, 3, 4, 5)) == "2024-01-02T03:04:05"
        assert to_json_safe(float("nan")) is None
        assert to_json_safe([decimal.Decimal("2"), None]) == [2.0, None]
        assert to_json_safe({"a": datetime.date(2024, 1, 1)}) == {"a": "2024-01-01"}


class TestDuckDBStore:
    """Tests for DuckDBStore."""

    @pytest.mark.asyncio
    async def test_load_table_infers_types(self, store: DuckDBStore) -> None:
        """Test that a load creates a typed table with metadata."""
        metadata = await store.load_table("people-2024", PEOPLE, "/tmp/people.csv")

        assert metadata.name == "people_2024"
        assert metadata.row_count == 3
        assert [(c.name, c.type) for c in metadata.columns] == [
            ("name", "VARCHAR"),
            ("age", "INTEGER"),
            ("score", "DOUBLE"),
            ("active", "BOOLEAN"),
            ("joined", "DATE"),
        ]
        assert metadata.columns[1].nullable is True
        assert metadata.columns[0].nullable is False
        assert store.has_table("people_2024")

    @pytest.mark.asyncio
    async def test_loaded_values_are_typed(self, store: DuckDBStore) -> None:
        """Test that values are cast into the inferred types."""
        await store.load_table("people", PEOPLE, "/tmp/people.csv")

        result = await store.execute_query(
            "SELECT name, age, active, joined FROM people ORDER BY name"
        )

        assert result.columns == ["name", "age", "active", "joined"]
        assert result.rows == [
            ["Ann", 31, True, "2023-01-02"],
            ["Bob", 45, False, "2023-02-03"],
            ["Cy", None, True, None],
        ]
        assert result.truncated is False

    @pytest.mark.asyncio
    async def test_declared_types_are_used(self, store: DuckDBStore) -> None:
        """Test that parser supplied types override inference."""
        data = ParsedData(
            columns=["code"], rows=[["1"], ["2"]], column_types={"code": "VARCHAR"}
        )

        metadata = await store.load_table("codes", data, "/tmp/codes.json")

        assert metadata.columns[0].type == "VARCHAR"

    @pytest.mark.asyncio
    async def test_reload_replaces_table(self, store: DuckDBStore) -> None:
        """Test that loading the same name twice replaces the table."""
        await store.load_table("people", PEOPLE, "/tmp/a.csv")
        smaller = ParsedData(columns=["name"], rows=[["Only"]])

        metadata = await store.load_table("people", smaller, "/tmp/b.csv")

        assert metadata.row_count == 1
        assert len(store.list_tables()) == 1
        assert store.get_table("people").file_path == "/tmp/b.csv"

    @pytest.mark.asyncio
    async def test_table_limit(self) -> None:
        """Test that the table limit is enforced but replacement is allowed."""
        store = DuckDBStore(Config(limits=LimitsConfig(max_tables_loaded=1)))
        store.initialize()
        try:
            await store.load_table("first", PEOPLE, "/tmp/a.csv")

            with pytest.raises(ValueError, match=r"Maximum tables \(1\) already loaded"):
                await store.load_table("second", PEOPLE, "/tmp/b.csv")

            await store.load_table("first", PEOPLE, "/tmp/a.csv")
            assert store.list_tables()[0].name == "first"
        finally:
            store.close()

    @pytest.mark.asyncio
    async def test_load_without_columns_rejected(self, store: DuckDBStore) -> None:
        """Test that empty parsed data is rejected."""
        with pytest.raises(ValueError, match="no columns"):
            await store.load_table("empty", ParsedData(columns=[], rows=[]), "/tmp/e.csv")

    @pytest.mark.asyncio
    async def test_header_only_file_loads_empty_table(self, store: DuckDBStore) -> None:
        """Test that columns without rows create an empty table."""
        metadata = await store.load_table(
            "blank", ParsedData(columns=["a", "b"], rows=[]), "/tmp/blank.csv"
        )

        assert metadata.row_count == 0
        assert [c.type for c in metadata.columns] == ["VARCHAR", "VARCHAR"]

    @pytest.mark.asyncio
    async def test_row_limit_truncates(self) -> None:
        """Test that results are capped at max_rows_output and flagged."""
        store = DuckDBStore(Config(limits=LimitsConfig(max_rows_output=2)))
        store.initialize()
        try:
            result = await store.execute_query("SELECT * FROM range(10)")
        finally:
            store.close()

        assert result.row_count == 2
        assert len(result.rows) == 2
        assert result.truncated is True

    @pytest.mark.asyncio
    async def test_explicit_limit_still_capped(self) -> None:
        """Test that an explicit larger LIMIT is still capped by fetching."""
        store = DuckDBStore(Config(limits=LimitsConfig(max_rows_output=3)))
        store.initialize()
        try:
            result = await store.execute_query("SELECT * FROM range(100) LIMIT 50")
        finally:
            store.close()

        assert len(result.rows) == 3
        assert result.truncated is True

    @pytest.mark.asyncio
    async def test_smaller_max_rows_argument(self, store: DuckDBStore) -> None:
        """Test that callers can request fewer rows than configured."""
        result = await store.execute_query("SELECT * FROM range(20)", max_rows=5)

        assert len(result.rows) == 5
        assert result.truncated is True

    @pytest.mark.asyncio
    async def test_timeout(self, store: DuckDBStore) -> None:
        """Test that a slow query raises TimeoutError with the configured duration."""
        with patch.object(DuckDBStore, "timeout_ms", new=1):
            with pytest.raises(TimeoutError, match="Query timed out after 1ms"):
                await store.execute_query(
                    "SELECT COUNT(*) FROM range(100000000) a, range(100000) b"
                )

    @pytest.mark.asyncio
    async def test_table_stats(self, store: DuckDBStore) -> None:
        """Test per-column statistics."""
        await store.load_table("people", PEOPLE, "/tmp/people.csv")

        stats = await store.get_table_stats("people")

        assert stats.table_name == "people"
        assert stats.row_count == 3
        by_name = {column.name: column for column in stats.columns}
        assert by_name["age"].null_count == 1
        assert by_name["age"].min == 31
        assert by_name["age"].max == 45
        assert by_name["age"].mean == pytest.approx(38.0)
        assert by_name["name"].distinct_count == 3
        assert by_name["name"].mean is None

    @pytest.mark.asyncio
    async def test_table_stats_unknown_table(self, store: DuckDBStore) -> None:
        """Test stats for a table that is not loaded."""
        with pytest.raises(ValueError, match="Table 'ghost' not found"):
            await store.get_table_stats("ghost")

    @pytest.mark.asyncio
    async def test_drop_table(self, store: DuckDBStore) -> None:
        """Test dropping a table and dropping an unknown table."""
        await store.load_table("people", PEOPLE, "/tmp/people.csv")

        assert await store.drop_table("people") is True
        assert await store.drop_table("people") is False
        assert store.list_tables() == []

    @pytest.mark.asyncio
    async def test_concurrent_drops(self, store: DuckDBStore) -> None:
        """Test that only one of two simultaneous drops removes the table."""
        await store.load_table("sales", PEOPLE, "/tmp/sales.csv")

        results = await asyncio.gather(
            store.drop_table("sales"), store.drop_table("sales")
        )

        assert sorted(results) == [False, True]
        assert store.list_tables() == []

    @pytest.mark.asyncio
    async def test_concurrent_loads_respect_limit(self) -> None:
        """Test that simultaneous loads cannot exceed max_tables_loaded."""
        store = DuckDBStore(Config(limits=LimitsConfig(max_tables_loaded=1)))
        store.initialize()
        try:
            results = await asyncio.gather(
                store.load_table("a", PEOPLE, "/tmp/a.csv"),
                store.load_table("b", PEOPLE, "/tmp/b.csv"),
                return_exceptions=True,
            )
            names = [table.name for table in store.list_tables()]
        finally:
            store.close()

        errors = [r for r in results if isinstance(r, ValueError)]
        assert len(errors) == 1
        assert "Maximum tables (1) already loaded" in str(errors[0])
        assert len(names) == 1

    @pytest.mark.asyncio
    async def test_default_table(self, store: DuckDBStore) -> None:
        """Test that a default table exists only when exactly one is loaded."""
        assert store.get_default_table() is None
        await store.load_table("one", PEOPLE, "/tmp/1.csv")
        assert store.get_default_table() == "one"
        await store.load_table("two", PEOPLE, "/tmp/2.csv")
        assert store.get_default_table() is None

    def test_limits_capped_by_absolute_ceilings(self) -> None:
        """Test that effective limits never exceed the hardcoded ceilings."""
        store = DuckDBStore(
            Config(limits=LimitsConfig(max_rows_output=10**9, query_timeout_ms=10**9))
        )

        assert store.max_rows == 100_000
        assert store.timeout_ms == 300_000
