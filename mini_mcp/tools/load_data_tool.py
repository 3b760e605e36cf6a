"""
load_data tool implementation.
"""

import asyncio
from functools import partial
from pathlib import Path
from typing import Any, Dict, List

from mini_mcp.parsers.parser_factory import get_parser
from mini_mcp.protocol.types import ToolResult
from mini_mcp.security.validator import normalize_path
from mini_mcp.store.duckdb_store import sanitize_table_name
from mini_mcp.tools.base_tool import BaseTool
from mini_mcp.utils.error_handling import (
    ToolInputError,
    create_error_result,
    create_security_error,
    handle_tool_errors,
)
from mini_mcp.utils.logger import log_info


class LoadDataTool(BaseTool):
    """Loads a data file into an in-memory table after the path passes security checks."""

    @property
    def name(self) -> str:
        return "load_data"

    @property
    def description(self) -> str:
        return (
            "Load a CSV, TSV, JSON, JSON Lines or Parquet file into an in-memory "
            "DuckDB table for analysis"
        )

    @property
    def input_schema(self) -> Dict[str, Any]:
        return {
            "type": "object",
            "properties": {
                "filePath": {
                    "type": "string",
                    "description": "Path to the data file to load",
                },
                "tableName": {
                    "type": "string",
                    "description": "Optional name for the table (defaults to the file name)",
                },
                "options": {
                    "type": "object",
                    "description": "Parsing options for delimited files",
                    "properties": {
                        "delimiter": {
                            "type": "string",
                            "description": "Field delimiter (detected when omitted)",
                        },
                        "hasHeaders": {
                            "type": "boolean",
                            "description": "Whether the first line holds column names",
                            "default": True,
                        },
                    },
                },
            },
            "required": ["filePath"],
        }

    def _parse_options(self, arguments: Dict[str, Any]) -> Dict[str, Any]:
        options = arguments.get("options") or {}
        if not isinstance(options, dict):
            raise ToolInputError("'options' must be an object")

        delimiter = options.get("delimiter")
        if delimiter is not None and (not isinstance(delimiter, str) or not delimiter):
            raise ToolInputError("'options.delimiter' must be a non-empty string")

        has_headers = options.get("hasHeaders", True)
        if not isinstance(has_headers, bool):
            raise ToolInputError("'options.hasHeaders' must be a boolean")

        return {"delimiter": delimiter, "has_headers": has_headers}

    @handle_tool_errors("load_data")
    async def execute(self, arguments: Dict[str, Any] | None) -> List[ToolResult]:
        """Execute the load_data tool."""
        arguments = arguments or {}
        file_path = self.require_string(arguments, "filePath")
        options = self._parse_options(arguments)

        check = self.context.security.validate_file_path(file_path)
        if not check.allowed:
            return create_security_error(check)

        absolute_path = normalize_path(file_path)
        requested_name = self.optional_string(arguments, "tableName")
        table_name = sanitize_table_name(requested_name or Path(absolute_path).stem)

        if not self.store.can_load(table_name):
            max_tables = self.config.limits.max_tables_loaded
            return create_error_result(
                f"Maximum table limit reached ({max_tables}). "
                "Use list_tables to see loaded tables and drop_table to free a slot."
            )

        parser = get_parser(absolute_path)
        loop = asyncio.get_running_loop()
        data = await loop.run_in_executor(
            None, partial(parser.parse, absolute_path, **options)
        )

        metadata = await self.store.load_table(table_name, data, absolute_path)
        log_info(f"Loaded {absolute_path} as '{metadata.name}'")

        lines = [
            f"Loaded {metadata.row_count} rows into table '{metadata.name}' "
            f"({len(metadata.columns)} columns)",
            "",
            "Columns:",
        ]
        lines += [f"- {column.name} ({column.type})" for column in metadata.columns]
        if check.warning:
            lines += ["", f"Warning: {check.warning}"]

        return [
            ToolResult(
                text="\n".join(lines),
                data={
                    "tableName": metadata.name,
                    "rowCount": metadata.row_count,
                    "columns": [column.name for column in metadata.columns],
                    "types": {column.name: column.type for column in metadata.columns},
                },
            )
        ]
