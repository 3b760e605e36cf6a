"""
list_tables tool implementation.
"""

from typing import Any, Dict, List

from mini_mcp.exporters.markdown_exporter import format_cell
from mini_mcp.protocol.types import ToolResult
from mini_mcp.tools.base_tool import BaseTool
from mini_mcp.utils.error_handling import handle_tool_errors
from mini_mcp.utils.logger import log_info


class ListTablesTool(BaseTool):
    @property
    def name(self) -> str:
        return "list_tables"

    @property
    def description(self) -> str:
        return "List all currently loaded tables"

    @property
    def input_schema(self) -> Dict[str, Any]:
        return {"type": "object", "properties": {}, "required": []}

    @handle_tool_errors("list_tables")
    async def execute(self, arguments: Dict[str, Any] | None) -> List[ToolResult]:
        log_info("List tables tool called")
        tables = self.store.list_tables()
        summary = [
            {
                "name": table.name,
                "rowCount": table.row_count,
                "columnCount": len(table.columns),
                "filePath": table.file_path,
                "loadedAt": table.loaded_at,
            }
            for table in tables
        ]

        count = len(tables)
        message = f"{count} table{'' if count == 1 else 's'} loaded"
        if not tables:
            return [
                ToolResult(
                    text=f"{message}. Use load_data to load a file.",
                    data={"tables": [], "message": message},
                )
            ]

        lines = [
            message,
            "",
            "| Table | Rows | Columns | Source | Loaded At |",
            "| --- | --- | --- | --- | --- |",
        ]
        for table in summary:
            lines.append(
                f"| {format_cell(table['name'])} | {table['rowCount']} | "
                f"{table['columnCount']} | {format_cell(table['filePath'])} | "
                f"{table['loadedAt']} |"
            )

        return [ToolResult(text="\n".join(lines), data={"tables": summary, "message": message})]
