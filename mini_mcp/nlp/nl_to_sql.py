"""
Pattern-based natural language to SQL translation.

Only a handful of fixed phrasings are understood. Anything that already
looks like SQL is passed through untouched, and anything unrecognised is
treated as SQL with low confidence so the engine can report the error.
"""

import re
from dataclasses import dataclass
from typing import Callable, List, Optional, Tuple

from mini_mcp.config.constants import NL_SHOW_ALL_LIMIT
from mini_mcp.protocol.types import TableMetadata
from mini_mcp.store.duckdb_store import quote_identifier

SQL_START_PATTERN = re.compile(
    r"^(SELECT|INSERT|UPDATE|DELETE|WITH|FROM|WHERE)\b", re.IGNORECASE
)

CONFIDENCE_SQL = 1.0
CONFIDENCE_PATTERN = 0.8
CONFIDENCE_COLUMN_MATCH = 0.5
CONFIDENCE_FALLBACK = 0.3


@dataclass
class TranslationResult:
    is_natural_language: bool
    sql: str
    confidence: float
    explanation: Optional[str] = None


def sanitize_column(column: str) -> str:
    """Turn a free-text column reference into a quoted identifier."""
    cleaned = re.sub(r"\s+", "_", column.strip())
    cleaned = re.sub(r"[^a-zA-Z0-9_]", "", cleaned)
    return quote_identifier(cleaned)


def looks_like_sql(query: str) -> bool:
    return bool(SQL_START_PATTERN.match(query.strip()))


Template = Callable[["re.Match[str]", str], str]

PATTERNS: List[Tuple["re.Pattern[str]", Template, str]] = [
    (
        re.compile(r"^(show|display|list|get)\s+(all|everything|the data)$", re.I),
        lambda m, t: f"SELECT * FROM {t} LIMIT {NL_SHOW_ALL_LIMIT}",
        "Show all data",
    ),
    (
        re.compile(r"^(show|display|list|get)\s+(\d+)\s+(rows?|records?|entries?)$", re.I),
        lambda m, t: f"SELECT * FROM {t} LIMIT {m.group(2)}",
        "Show N rows",
    ),
    (
        re.compile(r"^(count|how many)\s+(rows?|records?|entries?|total)$", re.I),
        lambda m, t: f"SELECT COUNT(*) as count FROM {t}",
        "Count rows",
    ),
    (
        re.compile(r"^(average|avg|mean)\s+(of\s+)?(.+)$", re.I),
        lambda m, t: f"SELECT AVG({sanitize_column(m.group(3))}) as average FROM {t}",
        "Calculate average",
    ),
    (
        re.compile(r"^(sum|total)\s+(of\s+)?(.+)$", re.I),
        lambda m, t: f"SELECT SUM({sanitize_column(m.group(3))}) as total FROM {t}",
        "Calculate sum",
    ),
    (
        re.compile(r"^(max|maximum|highest|largest)\s+(of\s+)?(.+)$", re.I),
        lambda m, t: f"SELECT MAX({sanitize_column(m.group(3))}) as maximum FROM {t}",
        "Find maximum",
    ),
    (
        re.compile(r"^(min|minimum|lowest|smallest)\s+(of\s+)?(.+)$", re.I),
        lambda m, t: f"SELECT MIN({sanitize_column(m.group(3))}) as minimum FROM {t}",
        "Find minimum",
    ),
    (
        re.compile(r"^(group|aggregate)\s+by\s+(.+)$", re.I),
        lambda m, t: (
            f"SELECT {sanitize_column(m.group(2))}, COUNT(*) as count FROM {t} "
            f"GROUP BY {sanitize_column(m.group(2))}"
        ),
        "Group by column",
    ),
    (
        re.compile(r"^(top|first)\s+(\d+)\s+by\s+(.+)$", re.I),
        lambda m, t: (
            f"SELECT * FROM {t} ORDER BY {sanitize_column(m.group(3))} DESC "
            f"LIMIT {m.group(2)}"
        ),
        "Top N by column",
    ),
    (
        re.compile(r"^(bottom|last)\s+(\d+)\s+by\s+(.+)$", re.I),
        lambda m, t: (
            f"SELECT * FROM {t} ORDER BY {sanitize_column(m.group(3))} ASC "
            f"LIMIT {m.group(2)}"
        ),
        "Bottom N by column",
    ),
    (
        re.compile(r"^(sort|order)\s+by\s+(.+)$", re.I),
        lambda m, t: f"SELECT * FROM {t} ORDER BY {sanitize_column(m.group(2))}",
        "Sort by column",
    ),
    (
        re.compile(r"^(unique|distinct)\s+(.+)$", re.I),
        lambda m, t: f"SELECT DISTINCT {sanitize_column(m.group(2))} FROM {t}",
        "Get unique values",
    ),
]


def translate_to_sql(query: str, table: TableMetadata) -> TranslationResult:
    """Translate a request into SQL against the given table.

    Args:
        query: SQL text or a natural language request
        table: Metadata of the table the request targets

    Returns:
        TranslationResult with the SQL to run and a confidence score
    """
    trimmed = query.strip()

    if looks_like_sql(trimmed):
        return TranslationResult(
            is_natural_language=False, sql=trimmed, confidence=CONFIDENCE_SQL
        )

    table_name = quote_identifier(table.name)
    for pattern, template, description in PATTERNS:
        match = pattern.match(trimmed)
        if match:
            return TranslationResult(
                is_natural_language=True,
                sql=template(match, table_name),
                confidence=CONFIDENCE_PATTERN,
                explanation=description,
            )

    lowered = trimmed.lower()
    for column in table.columns:
        if column.name.lower() in lowered:
            return TranslationResult(
                is_natural_language=True,
                sql=f"SELECT {quote_identifier(column.name)} FROM {table_name}",
                confidence=CONFIDENCE_COLUMN_MATCH,
                explanation=f"Selected column that matches: {column.name}",
            )

    return TranslationResult(
        is_natural_language=False,
        sql=trimmed,
        confidence=CONFIDENCE_FALLBACK,
        explanation="Could not interpret as natural language, treating as SQL",
    )
