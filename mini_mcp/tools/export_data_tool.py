"""
export_data tool implementation.
"""

import asyncio
from functools import partial
from typing import Any, Dict, List

from mini_mcp.exporters.exporter_factory import export_data, get_supported_export_formats
from mini_mcp.exporters.file_writer import can_write_files, write_export
from mini_mcp.protocol.types import ToolResult
from mini_mcp.tools.base_tool import BaseTool
from mini_mcp.utils.error_handling import (
    ToolInputError,
    create_error_result,
    create_security_error,
    handle_tool_errors,
)


class ExportDataTool(BaseTool):
    """Serialises a table or query result, inline or to a file."""

    @property
    def name(self) -> str:
        return "export_data"

    @property
    def description(self) -> str:
        return (
            "Export a table or query result as CSV, JSON, JSON Lines or Markdown. "
            "Writing to a file requires read_only: false in config."
        )

    @property
    def input_schema(self) -> Dict[str, Any]:
        return {
            "type": "object",
            "properties": {
                "source": {
                    "type": "string",
                    "description": "Table name or SELECT/WITH query to export",
                },
                "format": {
                    "type": "string",
                    "enum": get_supported_export_formats(),
                    "description": "Output format (defaults to the configured format)",
                },
                "outputPath": {
                    "type": "string",
                    "description": "Optional file to write instead of returning the data inline",
                },
            },
            "required": ["source"],
        }

    @handle_tool_errors("export_data")
    async def execute(self, arguments: Dict[str, Any] | None) -> List[ToolResult]:
        """Execute the export_data tool."""
        arguments = arguments or {}
        source = self.require_string(arguments, "source")
        export_format = (
            self.optional_string(arguments, "format") or self.config.output.default_format
        )
        output_path = self.optional_string(arguments, "outputPath")

        supported = get_supported_export_formats()
        if export_format not in supported:
            raise ToolInputError(
                f"Unsupported format '{export_format}'. Supported: {', '.join(supported)}"
            )

        if output_path and not can_write_files(self.config):
            return create_error_result(
                "File export disabled (read_only: true). "
                "Set read_only: false in config to enable."
            )

        sql = self.resolve_source(source)
        check = self.context.security.validate_query(sql)
        if not check.allowed:
            return create_security_error(check)

        result = await self.store.execute_query(sql)
        content = export_data(
            result, export_format, include_row_count=self.config.output.include_row_count
        )
        data = {
            "format": export_format,
            "rowCount": result.row_count,
            "truncated": result.truncated,
        }

        if output_path:
            loop = asyncio.get_running_loop()
            written = await loop.run_in_executor(
                None,
                partial(write_export, content, output_path, result.row_count, self.config),
            )
            data.update({"outputPath": written.output_path, "fileSize": written.byte_size})
            text = (
                f"Exported {written.row_count} rows as {export_format} "
                f"to {written.output_path} ({written.byte_size} bytes)"
            )
            if result.truncated:
                text += f"\nNote: output was capped at {result.row_count} rows"
            return [ToolResult(text=text, data=data)]

        text = content
        if result.truncated and export_format != "markdown":
            text += f"\n\nNote: output was capped at {result.row_count} rows"
        return [ToolResult(text=self.bound_output(text), data=data)]
