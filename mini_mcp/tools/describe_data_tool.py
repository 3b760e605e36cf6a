"""
describe_data tool implementation.
"""

from dataclasses import asdict
from typing import Any, Dict, List

from mini_mcp.config.constants import DESCRIBE_SAMPLE_ROWS
from mini_mcp.exporters.markdown_exporter import format_cell
from mini_mcp.protocol.types import TableMetadata, TableStats, ToolResult
from mini_mcp.store.duckdb_store import quote_identifier
from mini_mcp.tools.base_tool import BaseTool
from mini_mcp.utils.error_handling import handle_tool_errors


def _format_stat(value: Any) -> str:
    if value is None:
        return "-"
    if isinstance(value, float):
        return f"{value:.4g}"
    return format_cell(value)


class DescribeDataTool(BaseTool):
    """Reports schema, per-column statistics and sample rows for a table."""

    @property
    def name(self) -> str:
        return "describe_data"

    @property
    def description(self) -> str:
        return "Get schema, column statistics and sample rows for a loaded table"

    @property
    def input_schema(self) -> Dict[str, Any]:
        return {
            "type": "object",
            "properties": {
                "tableName": {
                    "type": "string",
                    "description": "Name of the table to describe",
                }
            },
            "required": ["tableName"],
        }

    def _schema_section(self, metadata: TableMetadata) -> str:
        lines = ["| Column | Type | Nullable |", "| --- | --- | --- |"]
        for column in metadata.columns:
            nullable = "yes" if column.nullable else "no"
            lines.append(f"| {format_cell(column.name)} | {column.type} | {nullable} |")
        return "\n".join(lines)

    def _stats_section(self, stats: TableStats) -> str:
        lines = [
            "| Column | Nulls | Distinct | Min | Max | Mean | Std Dev |",
            "| --- | --- | --- | --- | --- | --- | --- |",
        ]
        for column in stats.columns:
            lines.append(
                "| "
                + " | ".join(
                    [
                        format_cell(column.name),
                        str(column.null_count),
                        str(column.distinct_count),
                        _format_stat(column.min),
                        _format_stat(column.max),
                        _format_stat(column.mean),
                        _format_stat(column.stddev),
                    ]
                )
                + " |"
            )
        return "\n".join(lines)

    @handle_tool_errors("describe_data")
    async def execute(self, arguments: Dict[str, Any] | None) -> List[ToolResult]:
        """Execute the describe_data tool."""
        arguments = arguments or {}
        table_name = self.require_string(arguments, "tableName")

        metadata = self.store.get_table(table_name)
        if metadata is None:
            raise self.table_not_found(table_name)

        stats = await self.store.get_table_stats(table_name)
        sample = await self.store.execute_query(
            f"SELECT * FROM {quote_identifier(table_name)}",
            max_rows=DESCRIBE_SAMPLE_ROWS,
        )

        text = "\n\n".join(
            [
                f"## Table: {metadata.name}",
                f"Source: {metadata.file_path}\n"
                f"Rows: {metadata.row_count}\n"
                f"Columns: {len(metadata.columns)}\n"
                f"Loaded at: {metadata.loaded_at}",
                "### Schema",
                self._schema_section(metadata),
                "### Statistics",
                self._stats_section(stats),
                "### Sample Data",
                self.format_result_table(sample),
            ]
        )

        return [
            ToolResult(
                text=self.bound_output(text),
                data={
                    "tableName": metadata.name,
                    "rowCount": metadata.row_count,
                    "columns": [asdict(column) for column in metadata.columns],
                    "statistics": [asdict(column) for column in stats.columns],
                },
            )
        ]
