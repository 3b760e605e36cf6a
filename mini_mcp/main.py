"""
Main entry point for the mini-mcp server.
"""

import argparse
import asyncio
import sys
import traceback

from mini_mcp.config.constants import SERVER_DESCRIPTION, SERVER_NAME
from mini_mcp.config.loader import load_config
from mini_mcp.config.schema import Config
from mini_mcp.protocol.jsonrpc_server import JSONRPCServer
from mini_mcp.security.validator import SecurityValidator
from mini_mcp.store.duckdb_store import DuckDBStore
from mini_mcp.tools.base_tool import ToolContext
from mini_mcp.tools.registry import ToolRegistry
from mini_mcp.utils.logger import log_error, log_info


class MiniMCPServer:
    """Wires configuration, validators, store and tools into the JSON-RPC server."""

    def __init__(self, config: Config | None = None) -> None:
        self.config = config or Config()
        self.store = DuckDBStore(self.config)
        self.context = ToolContext(
            config=self.config,
            store=self.store,
            security=SecurityValidator(self.config),
        )
        self.server = JSONRPCServer(SERVER_NAME)
        self.tool_registry = ToolRegistry(self.context)
        self._setup_tools()

    def _setup_tools(self) -> None:
        for name in self.tool_registry.list_tool_names():
            self.server.tools[name] = self.tool_registry.get_tool(name)

    async def run(self) -> None:
        self.store.initialize()
        log_info(
            f"Starting {SERVER_NAME} server",
            {"tools": self.tool_registry.list_tool_names()},
        )
        try:
            await self.server.run()
        finally:
            self.store.close()
            log_info(f"{SERVER_NAME} server stopped")


def main() -> None:
    """Run the mini-mcp server."""
    parser = argparse.ArgumentParser(description=SERVER_DESCRIPTION.strip())
    parser.add_argument(
        "-c",
        "--config",
        type=str,
        default=None,
        help="Path to a YAML or JSON config file (default: search upward from cwd)",
    )
    args = parser.parse_args()

    try:
        config = load_config(args.config)
        server = MiniMCPServer(config)
        asyncio.run(server.run())
    except KeyboardInterrupt:
        log_info("Server interrupted by user")
        sys.exit(0)
    except (OSError, RuntimeError, ValueError) as e:
        log_error(
            f"Failed to start server: {str(e)}",
            {"traceback": traceback.format_exc()},
        )
        print(f"Error: Failed to start server: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
