"""
In-memory DuckDB store holding every loaded table.

All engine work runs in the default executor and is serialised by an
asyncio lock, so the event loop stays free while a query runs.
"""

import asyncio
import datetime
import decimal
import math
import re
import time
import uuid
from typing import Any, Callable, Dict, List, TypeVar

import duckdb
import pandas as pd

from mini_mcp.config.constants import STAGING_TABLE_PREFIX
from mini_mcp.config.schema import Config
from mini_mcp.protocol.types import (
    ColumnInfo,
    ColumnStats,
    ParsedData,
    QueryResult,
    TableMetadata,
    TableStats,
)
from mini_mcp.security.constants import ABSOLUTE_MAX_ROWS, ABSOLUTE_MAX_TIMEOUT_MS
from mini_mcp.utils.logger import log_debug, log_error, log_info
from mini_mcp.validators.schema_validator import canonical_value, infer_column_types

T = TypeVar("T")

NUMERIC_TYPES = ("INTEGER", "BIGINT", "DOUBLE")

ROW_RETURNING_PATTERN = re.compile(r"^\s*\(?\s*(SELECT|WITH|FROM)\b", re.IGNORECASE)
LIMIT_PATTERN = re.compile(r"\bLIMIT\s+\d+", re.IGNORECASE)
TRAILING_SEMICOLON_PATTERN = re.compile(r";\s*$")
INVALID_NAME_CHARS = re.compile(r"[^a-zA-Z0-9_]")


def quote_identifier(name: str) -> str:
    """Quote an identifier for DuckDB, doubling embedded quotes."""
    return '"' + name.replace('"', '""') + '"'


def sanitize_table_name(name: str) -> str:
    """Replace every character outside [A-Za-z0-9_] with an underscore."""
    return INVALID_NAME_CHARS.sub("_", name)


def to_json_safe(value: Any) -> Any:
    """Convert a DuckDB result value to a JSON-serialisable Python value."""
    if value is None or isinstance(value, (bool, int, str)):
        return value
    if isinstance(value, float):
        return None if math.isnan(value) or math.isinf(value) else value
    if isinstance(value, decimal.Decimal):
        return float(value)
    if isinstance(value, (datetime.datetime, datetime.date, datetime.time)):
        return value.isoformat()
    if isinstance(value, datetime.timedelta):
        return str(value)
    if isinstance(value, uuid.UUID):
        return str(value)
    if isinstance(value, (bytes, bytearray, memoryview)):
        return bytes(value).hex()
    if isinstance(value, (list, tuple)):
        return [to_json_safe(item) for item in value]
    if isinstance(value, dict):
        return {str(key): to_json_safe(item) for key, item in value.items()}
    return str(value)


def prepare_query(sql: str, max_rows: int) -> str:
    """Append LIMIT max_rows + 1 to row-returning statements that lack one."""
    query = sql.strip()
    if ROW_RETURNING_PATTERN.match(query) and not LIMIT_PATTERN.search(query):
        query = TRAILING_SEMICOLON_PATTERN.sub("", query)
        query = f"{query} LIMIT {max_rows + 1}"
    return query


class DuckDBStore:
    """Owns the single DuckDB connection and the loaded table registry."""

    def __init__(self, config: Config) -> None:
        self.config = config
        self._connection: duckdb.DuckDBPyConnection | None = None
        self._tables: Dict[str, TableMetadata] = {}
        self._lock = asyncio.Lock()

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def initialize(self) -> None:
        """Open the in-memory database. Safe to call more than once."""
        if self._connection is not None:
            return

        settings = self.config.duckdb
        try:
            self._connection = duckdb.connect(
                ":memory:", config={"threads": settings.threads}
            )
            self._connection.execute(f"SET memory_limit='{settings.memory_limit_mb}MB'")
        except duckdb.Error as e:
            self._connection = None
            raise RuntimeError(f"Failed to initialize DuckDB: {e}") from e

        log_info(
            "DuckDB initialized",
            {"memory_limit_mb": settings.memory_limit_mb, "threads": settings.threads},
        )

    def close(self) -> None:
        if self._connection is not None:
            self._connection.close()
            self._connection = None
        self._tables.clear()

    @property
    def connection(self) -> duckdb.DuckDBPyConnection:
        if self._connection is None:
            self.initialize()
        return self._connection

    @property
    def max_rows(self) -> int:
        return min(self.config.limits.max_rows_output, ABSOLUTE_MAX_ROWS)

    @property
    def timeout_ms(self) -> int:
        return min(self.config.limits.query_timeout_ms, ABSOLUTE_MAX_TIMEOUT_MS)

    async def _run(self, func: Callable[..., T], *args: Any, timeout_ms: int | None = None) -> T:
        """Run a blocking engine call in the executor, one call at a time."""
        async with self._lock:
            return await self._run_locked(func, *args, timeout_ms=timeout_ms)

    async def _run_locked(
        self, func: Callable[..., T], *args: Any, timeout_ms: int | None = None
    ) -> T:
        """Run an engine call. The caller must already hold self._lock."""
        loop = asyncio.get_running_loop()
        future = loop.run_in_executor(None, func, *args)
        if timeout_ms is None:
            return await future

        try:
            return await asyncio.wait_for(asyncio.shield(future), timeout_ms / 1000)
        except asyncio.TimeoutError:
            self.connection.interrupt()
            # The statement must finish unwinding before the lock is released
            try:
                await future
            except duckdb.Error as e:
                log_debug(f"Interrupted statement ended: {str(e)}")
            raise TimeoutError(
                f"Query timed out after {timeout_ms}ms. Consider simplifying your query."
            ) from None

    # ------------------------------------------------------------------
    # Tables
    # ------------------------------------------------------------------

    def list_tables(self) -> List[TableMetadata]:
        return list(self._tables.values())

    def get_table(self, table_name: str) -> TableMetadata | None:
        return self._tables.get(table_name)

    def has_table(self, table_name: str) -> bool:
        return table_name in self._tables

    def get_default_table(self) -> str | None:
        """Return the only loaded table's name, or None when zero or several are loaded."""
        if len(self._tables) == 1:
            return next(iter(self._tables))
        return None

    def can_load(self, table_name: str) -> bool:
        """Check the table limit. Replacing an existing table is always allowed."""
        safe_name = sanitize_table_name(table_name)
        return (
            safe_name in self._tables
            or len(self._tables) < self.config.limits.max_tables_loaded
        )

    async def load_table(
        self, table_name: str, data: ParsedData, file_path: str
    ) -> TableMetadata:
        """Create (or replace) a typed table from parsed rows.

        Raises:
            ValueError: If the table limit is reached or the data has no columns
        """
        if not data.columns:
            raise ValueError(f"File contains no columns: {file_path}")

        safe_name = sanitize_table_name(table_name)
        # Limit check, engine work and registration must not interleave with other loads
        async with self._lock:
            if not self.can_load(safe_name):
                raise ValueError(
                    f"Maximum tables ({self.config.limits.max_tables_loaded}) already loaded. "
                    "Drop a table first."
                )
            metadata = await self._run_locked(
                self._load_table_sync, safe_name, data, file_path
            )
            self._tables[safe_name] = metadata
        log_info(
            f"Table '{safe_name}' created: {metadata.row_count} rows, "
            f"{len(metadata.columns)} columns"
        )
        return metadata

    def _load_table_sync(
        self, safe_name: str, data: ParsedData, file_path: str
    ) -> TableMetadata:
        columns = [
            column.strip() or f"column_{index + 1}"
            for index, column in enumerate(str(c) for c in data.columns)
        ]
        inferred = infer_column_types(columns, data.rows)
        declared = data.column_types or {}
        column_info = [
            ColumnInfo(
                name=info.name,
                type=declared.get(original, info.type),
                nullable=info.nullable,
            )
            for original, info in zip(data.columns, inferred)
        ]

        staging_columns = {}
        for index, column in enumerate(column_info):
            staging_columns[f"c{index}"] = pd.Series(
                [
                    canonical_value(row[index] if index < len(row) else None, column.type)
                    for row in data.rows
                ],
                dtype=object,
            )
        staging = pd.DataFrame(staging_columns)
        staging_name = f"{STAGING_TABLE_PREFIX}{safe_name}"

        table = quote_identifier(safe_name)
        column_defs = ", ".join(
            f"{quote_identifier(column.name)} {column.type}" for column in column_info
        )
        select_list = ", ".join(
            f"TRY_CAST(CAST(c{index} AS VARCHAR) AS {column.type})"
            for index, column in enumerate(column_info)
        )

        connection = self.connection
        connection.register(staging_name, staging)
        try:
            connection.execute(f"DROP TABLE IF EXISTS {table}")
            connection.execute(f"CREATE TABLE {table} ({column_defs})")
            if data.rows:
                connection.execute(
                    f"INSERT INTO {table} SELECT {select_list} "
                    f"FROM {quote_identifier(staging_name)}"
                )
            row_count = connection.execute(f"SELECT COUNT(*) FROM {table}").fetchone()[0]
        finally:
            connection.unregister(staging_name)

        return TableMetadata(
            name=safe_name,
            file_path=file_path,
            row_count=int(row_count),
            columns=column_info,
            loaded_at=datetime.datetime.now(datetime.timezone.utc).isoformat(),
        )

    async def drop_table(self, table_name: str) -> bool:
        """Drop a loaded table. Returns False when the table is not loaded."""
        async with self._lock:
            if table_name not in self._tables:
                return False

            await self._run_locked(
                self._execute_sync, f"DROP TABLE IF EXISTS {quote_identifier(table_name)}"
            )
            self._tables.pop(table_name, None)
        log_info(f"Table '{table_name}' dropped")
        return True

    def _execute_sync(self, sql: str) -> None:
        self.connection.execute(sql)

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    async def execute_query(self, sql: str, max_rows: int | None = None) -> QueryResult:
        """Run a query with the row cap and timeout applied.

        Args:
            sql: Query text, already validated by the caller
            max_rows: Optional lower row cap, never above the configured one

        Returns:
            QueryResult with at most max_rows rows and truncated set when more existed
        """
        limit = self.max_rows if max_rows is None else min(max_rows, self.max_rows)
        query = prepare_query(sql, limit)
        log_debug("Executing query", {"sql": query})
        return await self._run(
            self._execute_query_sync, query, limit, timeout_ms=self.timeout_ms
        )

    def _execute_query_sync(self, query: str, limit: int) -> QueryResult:
        started = time.perf_counter()
        cursor = self.connection.execute(query)
        if cursor.description is None:
            return QueryResult(columns=[], rows=[], row_count=0)

        columns = [description[0] for description in cursor.description]
        fetched = cursor.fetchmany(limit + 1)
        truncated = len(fetched) > limit
        rows = [[to_json_safe(value) for value in row] for row in fetched[:limit]]

        return QueryResult(
            columns=columns,
            rows=rows,
            row_count=len(rows),
            truncated=truncated,
            execution_time_ms=round((time.perf_counter() - started) * 1000, 2),
        )

    async def get_table_stats(self, table_name: str) -> TableStats:
        """Compute per-column statistics for a loaded table.

        Raises:
            ValueError: If the table is not loaded
        """
        metadata = self._tables.get(table_name)
        if metadata is None:
            raise ValueError(f"Table '{table_name}' not found")

        return await self._run(
            self._table_stats_sync, metadata, timeout_ms=self.timeout_ms
        )

    def _table_stats_sync(self, metadata: TableMetadata) -> TableStats:
        table = quote_identifier(metadata.name)
        stats = TableStats(table_name=metadata.name, row_count=metadata.row_count)

        for column in metadata.columns:
            name = quote_identifier(column.name)
            is_numeric = column.type in NUMERIC_TYPES
            aggregates = [
                f"COUNT(*) - COUNT({name})",
                f"COUNT(DISTINCT {name})",
                f"MIN({name})",
                f"MAX({name})",
            ]
            if is_numeric:
                aggregates += [f"AVG({name})", f"STDDEV({name})"]

            try:
                row = self.connection.execute(
                    f"SELECT {', '.join(aggregates)} FROM {table}"
                ).fetchone()
            except duckdb.Error as e:
                log_error(f"Failed to compute stats for {metadata.name}.{column.name}: {e}")
                raise

            column_stats = ColumnStats(
                name=column.name,
                type=column.type,
                null_count=int(row[0] or 0),
                distinct_count=int(row[1] or 0),
                min=to_json_safe(row[2]),
                max=to_json_safe(row[3]),
            )
            if is_numeric:
                column_stats.mean = to_json_safe(float(row[4])) if row[4] is not None else None
                column_stats.stddev = to_json_safe(float(row[5])) if row[5] is not None else None
            stats.columns.append(column_stats)

        return stats
