"""
mini-mcp log sink.

Entries go to JSON-lines files under $MINI_MCP_HOME/logs, one file per level.
Stdout belongs to the JSON-RPC stream and is never written to.
"""

import json
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from mini_mcp.config import constants
from mini_mcp.config.enums import LogLevel


def write_log(level: str, message: str, data: dict[str, Any] | None = None) -> None:
    """Append one JSON line to $MINI_MCP_HOME/logs/<level>.log."""
    if not constants.MINI_MCP_HOME:
        # No log directory configured; printing would corrupt the JSON-RPC stream.
        return

    logs_dir = Path(constants.MINI_MCP_HOME) / "logs"

    log_entry: dict[str, Any] = {
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "level": level,
        "message": message,
    }

    if data:
        log_entry["data"] = data

    try:
        logs_dir.mkdir(parents=True, exist_ok=True)
        with open(logs_dir / f"{level}.log", "a", encoding="utf-8") as f:
            f.write(json.dumps(log_entry, default=str) + "\n")
            f.flush()
    except OSError:
        return


def log_debug(message: str, data: dict[str, Any] | None = None) -> None:
    """Log a debug message."""
    write_log(LogLevel.DEBUG.value, message, data)


def log_info(message: str, data: dict[str, Any] | None = None) -> None:
    """Log an info message."""
    write_log(LogLevel.INFO.value, message, data)


def log_error(message: str, data: dict[str, Any] | None = None) -> None:
    """Log an error message."""
    write_log(LogLevel.ERROR.value, message, data)
