"""
Configuration schema for mini-mcp.

Keys in configuration files use the same snake_case names as the fields
below, grouped under the section names security, limits, duckdb and output.
"""

from dataclasses import asdict, dataclass, field, fields
from typing import Any, Dict, List, Tuple

from mini_mcp.security.constants import (
    ABSOLUTE_MAX_FILE_SIZE_MB,
    ABSOLUTE_MAX_ROWS,
    ABSOLUTE_MAX_TIMEOUT_MS,
)

# (minimum, maximum) inclusive ranges for numeric settings.
FIELD_RANGES: Dict[str, Dict[str, Tuple[int, int]]] = {
    "security": {"max_file_size_mb": (1, ABSOLUTE_MAX_FILE_SIZE_MB)},
    "limits": {
        "max_rows_output": (1, ABSOLUTE_MAX_ROWS),
        "max_output_chars": (1000, 500_000),
        "query_timeout_ms": (1000, ABSOLUTE_MAX_TIMEOUT_MS),
        "max_tables_loaded": (1, 100),
    },
    "duckdb": {"memory_limit_mb": (64, 8192), "threads": (1, 16)},
}

OUTPUT_FORMATS = ("csv", "json", "jsonl", "markdown")


@dataclass
class SecurityConfig:
    read_only: bool = True
    allowed_paths: List[str] = field(default_factory=lambda: ["./data", "./"])
    allow_network_paths: bool = False
    max_file_size_mb: int = 100


@dataclass
class LimitsConfig:
    max_rows_output: int = 1000
    max_output_chars: int = 50_000
    query_timeout_ms: int = 30_000
    max_tables_loaded: int = 10


@dataclass
class DuckDBConfig:
    memory_limit_mb: int = 512
    threads: int = 2


@dataclass
class OutputConfig:
    default_format: str = "markdown"
    include_row_count: bool = True


@dataclass
class Config:
    """Complete server configuration."""

    security: SecurityConfig = field(default_factory=SecurityConfig)
    limits: LimitsConfig = field(default_factory=LimitsConfig)
    duckdb: DuckDBConfig = field(default_factory=DuckDBConfig)
    output: OutputConfig = field(default_factory=OutputConfig)

    @classmethod
    def from_dict(cls, data: Dict[str, Any] | None) -> "Config":
        """Build a config from a validated dictionary, filling in defaults."""
        data = data or {}
        sections = {}
        for section_name, section_type in SECTION_TYPES.items():
            known = {f.name for f in fields(section_type)}
            values = data.get(section_name) or {}
            sections[section_name] = section_type(
                **{key: value for key, value in values.items() if key in known}
            )
        return cls(**sections)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


SECTION_TYPES = {
    "security": SecurityConfig,
    "limits": LimitsConfig,
    "duckdb": DuckDBConfig,
    "output": OutputConfig,
}
