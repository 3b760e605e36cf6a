"""
Markdown table rendering for query results.
"""

from typing import Any

from mini_mcp.protocol.types import QueryResult

NULL_CELL = "_null_"


def format_cell(value: Any) -> str:
    if value is None:
        return NULL_CELL
    text = str(value)
    return text.replace("|", "\\|").replace("\r\n", " ").replace("\n", " ")


def row_count_footer(result: QueryResult) -> str:
    if result.truncated:
        return f"_Showing {len(result.rows)} rows (truncated, more rows available)_"
    suffix = "" if result.row_count == 1 else "s"
    return f"_{result.row_count} row{suffix}_"


def export_to_markdown(result: QueryResult, include_row_count: bool = True) -> str:
    """Render a pipe table.

    A truncation notice is always added when rows were cut off, the plain
    row count only when include_row_count is set.
    """
    if not result.columns:
        return "_No data_"

    lines = [
        "| " + " | ".join(format_cell(column) for column in result.columns) + " |",
        "| " + " | ".join("---" for _ in result.columns) + " |",
    ]
    for row in result.rows:
        lines.append("| " + " | ".join(format_cell(cell) for cell in row) + " |")

    table = "\n".join(lines)
    if include_row_count or result.truncated:
        table += "\n\n" + row_count_footer(result)
    return table
