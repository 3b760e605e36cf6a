"""
Base tool class for all mini-mcp tools.
"""

import re
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Dict, List

from mini_mcp.config.schema import Config
from mini_mcp.exporters.markdown_exporter import export_to_markdown
from mini_mcp.protocol.types import QueryResult, ToolDefinition, ToolResult
from mini_mcp.security.validator import SecurityValidator
from mini_mcp.store.duckdb_store import DuckDBStore, quote_identifier
from mini_mcp.utils.error_handling import ToolInputError

SQL_SOURCE_PATTERN = re.compile(r"^\s*(SELECT|WITH)\b", re.IGNORECASE)


@dataclass
class ToolContext:
    """Shared collaborators handed to every tool."""

    config: Config
    store: DuckDBStore
    security: SecurityValidator


class BaseTool(ABC):
    """Base class for all tools."""

    def __init__(self, context: ToolContext) -> None:
        self.context = context

    @property
    @abstractmethod
    def name(self) -> str:
        pass

    @property
    @abstractmethod
    def description(self) -> str:
        pass

    @property
    @abstractmethod
    def input_schema(self) -> Dict[str, Any]:
        pass

    @abstractmethod
    async def execute(self, arguments: Dict[str, Any] | None) -> List[ToolResult]:
        pass

    def get_tool_definition(self) -> ToolDefinition:
        return ToolDefinition(
            name=self.name, description=self.description, input_schema=self.input_schema
        )

    @property
    def config(self) -> Config:
        return self.context.config

    @property
    def store(self) -> DuckDBStore:
        return self.context.store

    def require_string(self, arguments: Dict[str, Any], key: str) -> str:
        value = arguments.get(key)
        if not isinstance(value, str) or not value.strip():
            raise ToolInputError(f"'{key}' is required and must be a non-empty string")
        return value

    def optional_string(self, arguments: Dict[str, Any], key: str) -> str | None:
        value = arguments.get(key)
        if value is None or value == "":
            return None
        if not isinstance(value, str):
            raise ToolInputError(f"'{key}' must be a string")
        return value

    def table_not_found(self, table_name: str) -> ToolInputError:
        available = ", ".join(t.name for t in self.store.list_tables()) or "none"
        return ToolInputError(f"Table '{table_name}' not found. Available: {available}")

    def resolve_source(self, source: str) -> str:
        """Turn a table name or SELECT/WITH query into the SQL to run."""
        if SQL_SOURCE_PATTERN.match(source):
            return source.strip()
        table_name = source.strip()
        if not self.store.has_table(table_name):
            raise self.table_not_found(table_name)
        return f"SELECT * FROM {quote_identifier(table_name)}"

    def bound_output(self, text: str) -> str:
        """Cut text at the configured character limit, noting the cut."""
        max_chars = self.config.limits.max_output_chars
        if len(text) <= max_chars:
            return text
        return (
            text[:max_chars]
            + f"\n\n_Output truncated at {max_chars} characters. "
            "Narrow the query or add a LIMIT to see the rest._"
        )

    def format_result_table(self, result: QueryResult) -> str:
        return export_to_markdown(
            result, include_row_count=self.config.output.include_row_count
        )
