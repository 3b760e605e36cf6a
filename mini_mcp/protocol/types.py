"""
Custom type definitions for mini-mcp.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional


@dataclass
class ToolResult:
    """Result from tool execution."""

    type: str = "text"
    text: str = ""
    data: Optional[Dict[str, Any]] = None
    is_error: bool = False


@dataclass
class ToolDefinition:
    """Tool definition for registration."""

    name: str
    description: str
    input_schema: Dict[str, Any]


@dataclass
class SecurityCheckResult:
    """Outcome of a security check.

    reason is set if and only if allowed is False. warning may accompany
    either outcome.
    """

    allowed: bool
    reason: Optional[str] = None
    warning: Optional[str] = None

    @classmethod
    def allow(cls, warning: Optional[str] = None) -> "SecurityCheckResult":
        return cls(allowed=True, warning=warning)

    @classmethod
    def deny(cls, reason: str, warning: Optional[str] = None) -> "SecurityCheckResult":
        return cls(allowed=False, reason=reason, warning=warning)


@dataclass
class ColumnInfo:
    name: str
    type: str
    nullable: bool = True


@dataclass
class TableMetadata:
    """Metadata for a table loaded into the store."""

    name: str
    file_path: str
    row_count: int
    columns: List[ColumnInfo]
    loaded_at: str


@dataclass
class QueryResult:
    """Rows returned by a query, already converted to JSON-safe values."""

    columns: List[str]
    rows: List[List[Any]]
    row_count: int
    truncated: bool = False
    execution_time_ms: float = 0.0


@dataclass
class ColumnStats:
    name: str
    type: str
    null_count: int = 0
    distinct_count: int = 0
    min: Any = None
    max: Any = None
    mean: Optional[float] = None
    stddev: Optional[float] = None


@dataclass
class TableStats:
    table_name: str
    row_count: int
    columns: List[ColumnStats] = field(default_factory=list)


@dataclass
class ParsedData:
    """Tabular data produced by a parser.

    Each row holds one value per column, in column order. Text formats
    produce strings or None, typed formats produce native Python values.
    """

    columns: List[str]
    rows: List[List[Any]]
    column_types: Optional[Dict[str, str]] = None

    @property
    def row_count(self) -> int:
        return len(self.rows)
