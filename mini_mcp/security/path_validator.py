"""
Output path validation for file exports.
"""

import os

from mini_mcp.config.schema import Config
from mini_mcp.protocol.types import SecurityCheckResult
from mini_mcp.security.validator import (
    is_within_allowed_paths,
    matches_blocked_pattern,
    normalize_path,
)


class OutputPathValidator:
    """Validates destinations for exported files.

    The read-only flag is enforced by the file writer before this runs.
    There are no size or extension checks on the write path.
    """

    def __init__(self, config: Config) -> None:
        self.config = config

    def validate_path(self, output_path: str) -> SecurityCheckResult:
        absolute_path = normalize_path(output_path)

        if matches_blocked_pattern(output_path, absolute_path):
            return SecurityCheckResult.deny(
                "Output path blocked by security rules: matches forbidden pattern"
            )

        allowed_paths = self.config.security.allowed_paths
        if not is_within_allowed_paths(absolute_path, allowed_paths):
            allowed = ", ".join(allowed_paths) or "(none)"
            return SecurityCheckResult.deny(
                f"Output path '{output_path}' is not within allowed paths: {allowed}"
            )

        parent_dir = os.path.dirname(absolute_path)
        if not os.path.isdir(parent_dir):
            return SecurityCheckResult.deny(
                f"Parent directory does not exist: {parent_dir}"
            )

        return SecurityCheckResult.allow()
