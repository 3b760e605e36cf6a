"""
drop_table tool implementation.
"""

from typing import Any, Dict, List

from mini_mcp.protocol.types import ToolResult
from mini_mcp.tools.base_tool import BaseTool
from mini_mcp.utils.error_handling import handle_tool_errors


class DropTableTool(BaseTool):
    """Removes a loaded table, freeing a slot under max_tables_loaded."""

    @property
    def name(self) -> str:
        return "drop_table"

    @property
    def description(self) -> str:
        return "Remove a loaded table from memory"

    @property
    def input_schema(self) -> Dict[str, Any]:
        return {
            "type": "object",
            "properties": {
                "tableName": {
                    "type": "string",
                    "description": "Name of the table to drop",
                }
            },
            "required": ["tableName"],
        }

    @handle_tool_errors("drop_table")
    async def execute(self, arguments: Dict[str, Any] | None) -> List[ToolResult]:
        arguments = arguments or {}
        table_name = self.require_string(arguments, "tableName")

        if not await self.store.drop_table(table_name):
            raise self.table_not_found(table_name)

        remaining = len(self.store.list_tables())
        return [
            ToolResult(
                text=f"Dropped table '{table_name}' ({remaining} remaining)",
                data={"tableName": table_name, "remaining": remaining},
            )
        ]
