"""
Configuration file discovery and loading.
"""

import os
from pathlib import Path

import yaml

from mini_mcp.config.constants import CONFIG_FILENAMES, MINI_MCP_CONFIG
from mini_mcp.config.schema import Config
from mini_mcp.config.validation import ConfigValidator
from mini_mcp.utils.logger import log_error, log_info


def find_config_file(start_dir: Path | None = None) -> Path | None:
    """Search for a config file from start_dir upward to the filesystem root.

    Args:
        start_dir: Directory to start from, defaults to the working directory

    Returns:
        Path to the first config file found, None otherwise
    """
    current = (start_dir or Path.cwd()).resolve()
    for directory in [current, *current.parents]:
        for filename in CONFIG_FILENAMES:
            candidate = directory / filename
            if candidate.is_file():
                return candidate
    return None


def load_config(config_path: str | Path | None = None) -> Config:
    """Load configuration, falling back to defaults on any problem.

    Resolution order is the explicit path, then the MINI_MCP_CONFIG
    environment variable, then an upward search from the working directory.
    An explicit path that does not exist, or a file that fails validation,
    yields the default configuration.
    """
    path: Path | None = None
    if config_path:
        path = Path(os.path.expanduser(str(config_path)))
    elif MINI_MCP_CONFIG:
        path = Path(os.path.expanduser(MINI_MCP_CONFIG))
    else:
        path = find_config_file()

    if path is None:
        log_info("No config file found, using defaults")
        return Config()

    validator = ConfigValidator()
    is_valid, issues = validator.validate_config(path)
    if not is_valid:
        log_error(
            f"Invalid config file {path}, using defaults",
            {"issues": [str(issue) for issue in issues]},
        )
        return Config()

    if issues:
        log_info(
            f"Config file {path} loaded with warnings",
            {"issues": [str(issue) for issue in issues]},
        )

    with open(path, "r", encoding="utf-8") as f:
        data = yaml.safe_load(f)

    log_info(f"Loaded config from {path}")
    return Config.from_dict(data)
