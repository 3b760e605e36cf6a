"""
Parquet parser using a throwaway DuckDB connection.
"""

from typing import Any, Tuple

import duckdb

from mini_mcp.parsers.base_parser import DataParser
from mini_mcp.protocol.types import ParsedData


def map_duckdb_type(duckdb_type: str) -> str:
    """Collapse a DuckDB column type onto the types the store creates."""
    upper = duckdb_type.upper()
    if upper == "BOOLEAN":
        return "BOOLEAN"
    if upper in ("TINYINT", "SMALLINT", "INTEGER", "UTINYINT", "USMALLINT"):
        return "INTEGER"
    if upper in ("BIGINT", "HUGEINT", "UINTEGER", "UBIGINT"):
        return "BIGINT"
    if upper in ("FLOAT", "REAL", "DOUBLE") or upper.startswith("DECIMAL"):
        return "DOUBLE"
    if upper == "DATE":
        return "DATE"
    if upper.startswith("TIMESTAMP"):
        return "TIMESTAMP"
    return "VARCHAR"


class ParquetParser(DataParser):
    @property
    def extensions(self) -> Tuple[str, ...]:
        return (".parquet",)

    def parse(self, file_path: str, **options: Any) -> ParsedData:
        escaped_path = file_path.replace("'", "''")
        connection = duckdb.connect(":memory:")
        try:
            cursor = connection.execute(
                f"SELECT * FROM read_parquet('{escaped_path}')"
            )
            columns = [description[0] for description in cursor.description]
            rows = [list(row) for row in cursor.fetchall()]

            described = connection.execute(
                f"DESCRIBE SELECT * FROM read_parquet('{escaped_path}')"
            ).fetchall()
            column_types = {str(row[0]): map_duckdb_type(str(row[1])) for row in described}
        except duckdb.Error as e:
            raise ValueError(f"Failed to read Parquet file {file_path}: {e}") from e
        finally:
            connection.close()

        return ParsedData(columns=columns, rows=rows, column_types=column_types)
