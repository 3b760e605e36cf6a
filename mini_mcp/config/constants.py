import os

MCP_PROTOCOL_VERSION = "2025-06-18"
JSONRPC_VERSION = "2.0"

# Server info and capabilities.
SERVER_CAPABILITIES = {"tools": {"listChanged": True}, "logging": {}}
SERVER_NAME = "mini-mcp"
SERVER_VERSION = "1.0.0"
SERVER_DESCRIPTION = """
mini-mcp is an MCP Server for loading, querying and visualizing tabular data files with DuckDB.
"""

# Environment variables
MINI_MCP_HOME = os.getenv("MINI_MCP_HOME", "")
MINI_MCP_CONFIG = os.getenv("MINI_MCP_CONFIG", "")

# Searched upward from the working directory, first match wins.
CONFIG_FILENAMES = [
    "mini-mcp.config.yaml",
    "mini-mcp.config.yml",
    "mini-mcp.config.json",
    ".mini-mcp.yaml",
    ".mini-mcp.json",
    "mini-mcp.json",
]

# Type inference and loading
TYPE_INFERENCE_SAMPLE_SIZE = 1000
SCHEMA_VALIDATION_MAX_ERRORS = 10
STAGING_TABLE_PREFIX = "__mini_mcp_staging_"

# describe_data
DESCRIBE_SAMPLE_ROWS = 5

# NL translation
NL_SHOW_ALL_LIMIT = 100

# Charts
ASCII_BAR_MAX_WIDTH = 40
ASCII_PIE_WIDTH = 20
