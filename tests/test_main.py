"""Test suite for the server entry point."""

import sys
from unittest.mock import AsyncMock, patch

import pytest

from mini_mcp.config.schema import Config
from mini_mcp.main import MiniMCPServer, main


class TestMiniMCPServer:
    """Tests for MiniMCPServer wiring."""

    def test_tools_exposed_on_server(self) -> None:
        """Test that every registered tool is reachable from the JSON-RPC server."""
        server = MiniMCPServer(Config())

        assert set(server.server.tools) == set(server.tool_registry.list_tool_names())
        assert server.context.store is server.store

    @pytest.mark.asyncio
    async def test_run_closes_store(self) -> None:
        """Test that the store is opened for the loop and closed afterwards."""
        server = MiniMCPServer(Config())

        with patch.object(server.server, "run", new=AsyncMock()) as mock_run:
            await server.run()

        mock_run.assert_awaited_once()
        assert server.store._connection is None


class TestMain:
    """Tests for the command line entry point."""

    def test_main_passes_config_path(self) -> None:
        with patch.object(sys, "argv", ["mini-mcp", "--config", "/tmp/x.yaml"]), patch(
            "mini_mcp.main.load_config", return_value=Config()
        ) as mock_load, patch("mini_mcp.main.asyncio.run") as mock_run:
            main()

        mock_load.assert_called_once_with("/tmp/x.yaml")
        mock_run.assert_called_once()
        mock_run.call_args[0][0].close()

    def test_keyboard_interrupt_exits_cleanly(self) -> None:
        with patch.object(sys, "argv", ["mini-mcp"]), patch(
            "mini_mcp.main.load_config", return_value=Config()
        ), patch("mini_mcp.main.asyncio.run", side_effect=KeyboardInterrupt):
            with pytest.raises(SystemExit) as exc_info:
                main()

        assert exc_info.value.code == 0

    def test_startup_failure_exits_with_error(self) -> None:
        with patch.object(sys, "argv", ["mini-mcp"]), patch(
            "mini_mcp.main.load_config", return_value=Config()
        ), patch("mini_mcp.main.asyncio.run", side_effect=RuntimeError("no engine")):
            with pytest.raises(SystemExit) as exc_info:
                main()

        assert exc_info.value.code == 1
