"""
Enumeration definitions for mini-mcp.
"""

from enum import Enum, IntEnum


class LogLevel(Enum):
    """Logging levels for the application."""

    DEBUG = "debug"
    INFO = "info"
    ERROR = "error"


class ErrorCodes(IntEnum):
    """JSON-RPC 2.0 error codes."""

    PARSE_ERROR = -32700
    INVALID_REQUEST = -32600
    METHOD_NOT_FOUND = -32601
    INVALID_PARAMS = -32602
    INTERNAL_ERROR = -32603


class Severity(Enum):
    """Validation severity levels."""

    ERROR = "error"
    WARNING = "warning"


class ExportFormat(Enum):
    """Supported export formats."""

    CSV = "csv"
    JSON = "json"
    JSONL = "jsonl"
    MARKDOWN = "markdown"


class ChartType(Enum):
    """Supported chart types."""

    BAR = "bar"
    PIE = "pie"
    LINE = "line"


class ChartFormat(Enum):
    """Supported chart output formats."""

    ASCII = "ascii"
    MERMAID = "mermaid"
