"""
MCP over JSON-RPC 2.0 on stdio, one request per line.
"""

import asyncio
import json
import sys
import traceback
from typing import Any, Dict, Optional

from mini_mcp.config.constants import (
    JSONRPC_VERSION,
    MCP_PROTOCOL_VERSION,
    SERVER_CAPABILITIES,
    SERVER_NAME,
    SERVER_VERSION,
)
from mini_mcp.config.enums import ErrorCodes
from mini_mcp.utils.logger import log_debug, log_error


class JSONRPCServer:
    """Dispatches MCP requests to registered tools and writes one response per line."""

    def __init__(self, name: str):
        """Create a server with an empty tool table."""
        self.name = name
        self.tools: Dict[str, Any] = {}

    async def handle_request(self, request: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        """Route one decoded request. Returns None for notifications."""
        if not isinstance(request, dict):
            return self._error_response(
                ErrorCodes.INVALID_REQUEST, "Invalid request", None
            )

        method = request.get("method")
        params = request.get("params") or {}
        request_id = request.get("id")

        if not isinstance(params, dict):
            return self._error_response(
                ErrorCodes.INVALID_PARAMS, "params must be an object", request_id
            )

        if method == "initialize":
            return self._initialize(params, request_id)
        elif isinstance(method, str) and method.startswith("notifications/"):
            return None
        elif method == "ping":
            return self._result({}, request_id)
        elif method == "tools/list":
            return self._list_tools(request_id)
        elif method == "tools/call":
            return await self._call_tool(params, request_id)
        else:
            return self._error_response(
                ErrorCodes.METHOD_NOT_FOUND, "Method not found", request_id
            )

    def _result(self, result: Dict[str, Any], request_id: Optional[int]) -> Dict[str, Any]:
        response: Dict[str, Any] = {"jsonrpc": JSONRPC_VERSION, "result": result}
        if request_id is not None:
            response["id"] = request_id
        return response

    def _initialize(
        self, params: Dict[str, Any], request_id: Optional[int]
    ) -> Dict[str, Any]:
        """Answer the MCP initialize handshake."""
        log_debug("Initialize request", {"clientInfo": params.get("clientInfo")})
        return self._result(
            {
                "protocolVersion": MCP_PROTOCOL_VERSION,
                "capabilities": SERVER_CAPABILITIES,
                "serverInfo": {"name": SERVER_NAME, "version": SERVER_VERSION},
            },
            request_id,
        )

    def _list_tools(self, request_id: Optional[int]) -> Dict[str, Any]:
        """List available tools."""
        tools = []
        for tool_name, tool in self.tools.items():
            tools.append(
                {
                    "name": tool_name,
                    "description": tool.description,
                    "inputSchema": tool.input_schema,
                }
            )
        return self._result({"tools": tools}, request_id)

    async def _call_tool(
        self, params: Dict[str, Any], request_id: Optional[int]
    ) -> Dict[str, Any]:
        """Execute a tool call."""
        tool_name = params.get("name")
        arguments = params.get("arguments") or {}

        if tool_name not in self.tools:
            return self._error_response(
                ErrorCodes.METHOD_NOT_FOUND, f"Unknown tool: {tool_name}", request_id
            )

        if not isinstance(arguments, dict):
            return self._error_response(
                ErrorCodes.INVALID_PARAMS, "arguments must be an object", request_id
            )

        try:
            tool = self.tools[tool_name]
            result = await tool.execute(arguments)
            # ToolResult dataclasses become MCP content entries
            content = []
            is_error = False
            for item in result:
                entry = {
                    "type": getattr(item, "type", "text"),
                    "text": getattr(item, "text", ""),
                }
                data = getattr(item, "data", None)
                if data is not None:
                    entry["data"] = data
                content.append(entry)
                is_error = is_error or getattr(item, "is_error", False)

            payload: Dict[str, Any] = {"content": content}
            if is_error:
                payload["isError"] = True
            return self._result(payload, request_id)
        except (AttributeError, TypeError, KeyError) as e:
            error_msg = f"Tool execution error: {str(e)}"
            log_error(error_msg, {"traceback": traceback.format_exc()})
            return self._error_response(ErrorCodes.INTERNAL_ERROR, error_msg, request_id)
        except Exception as e:
            error_msg = f"Unexpected tool execution error: {str(e)}"
            log_error(error_msg, {"traceback": traceback.format_exc()})
            return self._error_response(ErrorCodes.INTERNAL_ERROR, error_msg, request_id)

    def _error_response(
        self, code: int, message: str, request_id: Optional[int]
    ) -> Dict[str, Any]:
        """Create error response."""
        response: Dict[str, Any] = {
            "jsonrpc": JSONRPC_VERSION,
            "error": {"code": int(code), "message": message},
        }
        if request_id is not None:
            response["id"] = request_id
        return response

    def _write(self, response: Dict[str, Any]) -> None:
        print(json.dumps(response, default=str))
        sys.stdout.flush()

    async def run(self) -> None:
        """Serve requests from stdin until EOF."""
        loop = asyncio.get_running_loop()
        while True:
            try:
                line = await loop.run_in_executor(None, sys.stdin.readline)
                if not line:
                    break
                if not line.strip():
                    continue

                request = json.loads(line.strip())
                response = await self.handle_request(request)
                if response is not None:
                    self._write(response)
            except json.JSONDecodeError as e:
                log_error(
                    f"JSON decode error: {str(e)}",
                    {"traceback": traceback.format_exc()},
                )
                self._write(
                    self._error_response(
                        ErrorCodes.PARSE_ERROR, f"Parse error: {str(e)}", None
                    )
                )
            except (OSError, ValueError) as e:
                log_error(
                    f"Server communication error: {str(e)}",
                    {"traceback": traceback.format_exc()},
                )
                self._write(
                    self._error_response(
                        ErrorCodes.PARSE_ERROR, f"Communication error: {str(e)}", None
                    )
                )
