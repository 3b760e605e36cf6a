"""
Shared fixtures for mini-mcp tests.
"""

from pathlib import Path
from typing import Generator

import pytest

from mini_mcp.config.schema import Config, SecurityConfig
from mini_mcp.security.validator import SecurityValidator
from mini_mcp.store.duckdb_store import DuckDBStore
from mini_mcp.tools.base_tool import ToolContext

SALES_CSV = """region,product,units,revenue,sold_on
North,Widget,10,100.5,2024-01-05
South,Gadget,5,75.25,2024-01-06
East,Widget,8,80.0,2024-01-07
West,Gizmo,,40.0,2024-01-08
North,Gadget,12,180.0,2024-01-09
"""


@pytest.fixture
def data_dir(tmp_path: Path) -> Path:
    """Directory used as the only allowed path."""
    directory = tmp_path / "data"
    directory.mkdir()
    return directory


@pytest.fixture
def config(data_dir: Path) -> Config:
    """Default config restricted to the temporary data directory."""
    return Config(security=SecurityConfig(allowed_paths=[str(data_dir)]))


@pytest.fixture
def sales_csv(data_dir: Path) -> Path:
    path = data_dir / "sales.csv"
    path.write_text(SALES_CSV, encoding="utf-8")
    return path


@pytest.fixture
def store(config: Config) -> Generator[DuckDBStore, None, None]:
    """Initialized in-memory store, closed after the test."""
    duckdb_store = DuckDBStore(config)
    duckdb_store.initialize()
    yield duckdb_store
    duckdb_store.close()


@pytest.fixture
def context(config: Config, store: DuckDBStore) -> ToolContext:
    return ToolContext(config=config, store=store, security=SecurityValidator(config))
