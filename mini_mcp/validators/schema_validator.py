"""
Column type inference and schema validation for parsed data.
"""

import json
import math
import re
from typing import Any, List, Tuple

from mini_mcp.config.constants import (
    SCHEMA_VALIDATION_MAX_ERRORS,
    TYPE_INFERENCE_SAMPLE_SIZE,
)
from mini_mcp.protocol.types import ColumnInfo

DATE_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}$")
TIMESTAMP_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}[T ]\d{2}:\d{2}:\d{2}")

TRUE_VALUES = frozenset({"true", "1", "yes", "on"})
FALSE_VALUES = frozenset({"false", "0", "no", "off"})

INT32_MIN = -2147483648
INT32_MAX = 2147483647


def is_nullish(value: Any) -> bool:
    return value is None or value == ""


def _to_number(value: Any) -> float | int | None:
    """Return the numeric value of an int, float or numeric string."""
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return None if math.isnan(value) else value
    if isinstance(value, str):
        text = value.strip()
        if not text:
            return None
        try:
            return int(text)
        except ValueError:
            pass
        try:
            number = float(text)
        except ValueError:
            return None
        return None if math.isnan(number) else number
    return None


def is_boolean(value: Any) -> bool:
    if isinstance(value, bool):
        return True
    if isinstance(value, str):
        lowered = value.strip().lower()
        return lowered in TRUE_VALUES or lowered in FALSE_VALUES
    return False


def is_integer(value: Any) -> bool:
    number = _to_number(value)
    if number is None:
        return False
    if isinstance(number, int):
        return True
    return math.isfinite(number) and number.is_integer()


def requires_bigint(value: Any) -> bool:
    if not is_integer(value):
        return False
    number = int(_to_number(value))
    return number > INT32_MAX or number < INT32_MIN


def is_double(value: Any) -> bool:
    return _to_number(value) is not None


def is_date(value: Any) -> bool:
    return isinstance(value, str) and bool(DATE_PATTERN.match(value))


def is_timestamp(value: Any) -> bool:
    return isinstance(value, str) and bool(TIMESTAMP_PATTERN.match(value))


def infer_duckdb_type(values: List[Any]) -> str:
    """Infer the narrowest DuckDB type that fits every non-null value.

    Candidates are tried from most to least specific: BOOLEAN, INTEGER or
    BIGINT, DOUBLE, DATE, TIMESTAMP and finally VARCHAR.
    """
    non_null = [v for v in values if not is_nullish(v)]
    if not non_null:
        return "VARCHAR"

    if all(is_boolean(v) for v in non_null):
        return "BOOLEAN"

    if all(is_integer(v) for v in non_null):
        if any(requires_bigint(v) for v in non_null):
            return "BIGINT"
        return "INTEGER"

    if all(is_double(v) for v in non_null):
        return "DOUBLE"

    if all(is_date(v) for v in non_null):
        return "DATE"

    if all(is_timestamp(v) for v in non_null):
        return "TIMESTAMP"

    return "VARCHAR"


def infer_column_types(
    columns: List[str],
    rows: List[List[Any]],
    sample_size: int = TYPE_INFERENCE_SAMPLE_SIZE,
) -> List[ColumnInfo]:
    """Infer a ColumnInfo for each column from the first sample_size rows."""
    sample = rows[:sample_size]
    result = []
    for index, name in enumerate(columns):
        values = [row[index] if index < len(row) else None for row in sample]
        result.append(
            ColumnInfo(
                name=name,
                type=infer_duckdb_type(values),
                nullable=any(is_nullish(v) for v in values),
            )
        )
    return result


def _value_matches(value: Any, expected_type: str) -> bool:
    if expected_type == "BOOLEAN":
        return is_boolean(value)
    if expected_type == "INTEGER":
        return is_integer(value) and not requires_bigint(value)
    if expected_type == "BIGINT":
        return is_integer(value)
    if expected_type == "DOUBLE":
        return is_double(value)
    if expected_type == "DATE":
        return is_date(value)
    if expected_type == "TIMESTAMP":
        return is_timestamp(value)
    return True


def validate_schema(
    rows: List[List[Any]],
    schema: List[ColumnInfo],
    max_errors: int = SCHEMA_VALIDATION_MAX_ERRORS,
) -> Tuple[bool, List[str]]:
    """Check rows against an expected schema.

    Returns:
        Tuple of (is_valid, errors), with at most max_errors messages
    """
    errors: List[str] = []
    for row_index, row in enumerate(rows):
        if len(errors) >= max_errors:
            break
        for col_index, column in enumerate(schema):
            if len(errors) >= max_errors:
                break
            value = row[col_index] if col_index < len(row) else None

            if is_nullish(value):
                if not column.nullable:
                    errors.append(
                        f'Row {row_index + 1}, column "{column.name}": NULL not allowed'
                    )
                continue

            if not _value_matches(value, column.type):
                errors.append(
                    f'Row {row_index + 1}, column "{column.name}": '
                    f'expected {column.type}, got "{value}"'
                )

    return len(errors) == 0, errors


def canonical_value(value: Any, duckdb_type: str) -> str | None:
    """Render a value as text that DuckDB casts cleanly to duckdb_type."""
    if is_nullish(value):
        return None

    if duckdb_type == "BOOLEAN":
        if isinstance(value, bool):
            return "true" if value else "false"
        return "true" if str(value).strip().lower() in TRUE_VALUES else "false"

    if duckdb_type in ("INTEGER", "BIGINT") and is_integer(value):
        return str(int(_to_number(value)))

    if duckdb_type == "DOUBLE" and is_double(value):
        return repr(float(_to_number(value)))

    if isinstance(value, (dict, list)):
        return json.dumps(value, ensure_ascii=False, default=str)

    if isinstance(value, bool):
        return "true" if value else "false"

    return value if isinstance(value, str) else str(value)
