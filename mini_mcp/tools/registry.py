"""
Registry of the data tools exposed over MCP.
"""

import traceback
from typing import Any, Dict, List

from mini_mcp.protocol.types import ToolDefinition, ToolResult
from mini_mcp.tools.base_tool import BaseTool, ToolContext
from mini_mcp.tools.describe_data_tool import DescribeDataTool
from mini_mcp.tools.drop_table_tool import DropTableTool
from mini_mcp.tools.export_data_tool import ExportDataTool
from mini_mcp.tools.list_tables_tool import ListTablesTool
from mini_mcp.tools.load_data_tool import LoadDataTool
from mini_mcp.tools.query_data_tool import QueryDataTool
from mini_mcp.tools.visualize_data_tool import VisualizeDataTool
from mini_mcp.utils.error_handling import create_error_result
from mini_mcp.utils.logger import log_error


class ToolRegistry:
    """Holds one instance of each data tool, keyed by tool name."""

    supported_tools = [
        LoadDataTool,
        QueryDataTool,
        DescribeDataTool,
        ListTablesTool,
        DropTableTool,
        ExportDataTool,
        VisualizeDataTool,
    ]

    def __init__(self, context: ToolContext) -> None:
        """Initialize the tool registry.

        Args:
            context: Shared config, store and validator handed to each tool
        """
        self._tools: Dict[str, BaseTool] = {}
        for tool in self.supported_tools:
            self.register_tool(tool(context))

    def register_tool(self, tool: BaseTool) -> None:
        """Register a tool in the registry.

        Args:
            tool: The tool instance to register
        """
        self._tools[tool.name] = tool

    def get_tool(self, name: str) -> BaseTool | None:
        """Get a tool by name.

        Args:
            name: The name of the tool to retrieve

        Returns:
            The tool instance if found, None otherwise
        """
        return self._tools.get(name)

    def get_all_tools(self) -> List[ToolDefinition]:
        """Get all registered tools as definitions."""
        return [tool.get_tool_definition() for tool in self._tools.values()]

    async def execute_tool(
        self, name: str, arguments: Dict[str, Any] | None
    ) -> List[ToolResult]:
        """Execute a tool with the given arguments.

        Args:
            name: The name of the tool to execute
            arguments: The arguments to pass to the tool

        Returns:
            List of tool results
        """
        tool = self.get_tool(name)
        if tool is None:
            error_msg = f"Unknown tool: {name}"
            log_error(error_msg)
            return create_error_result(error_msg)

        try:
            return await tool.execute(arguments)
        except Exception as e:
            error_msg = f"Unexpected tool execution error: {str(e)}"
            log_error(error_msg, {"traceback": traceback.format_exc()})
            return create_error_result(error_msg)

    def list_tool_names(self) -> List[str]:
        """List all registered tool names.

        Returns:
            List of tool names
        """
        return list(self._tools.keys())

    def has_tool(self, name: str) -> bool:
        return name in self._tools
