"""
Security validation for file loads and SQL queries.

Every check returns a SecurityCheckResult. Policy violations are values,
never exceptions, so callers decide how to surface them.
"""

import os
from typing import List

from mini_mcp.config.schema import Config
from mini_mcp.protocol.types import SecurityCheckResult
from mini_mcp.security.constants import (
    ABSOLUTE_MAX_FILE_SIZE_MB,
    ALLOWED_EXTENSIONS,
    BLOCKED_PATH_PATTERNS,
    BLOCKED_SQL_KEYWORD_PATTERNS,
    COPY_PATTERN,
    NETWORK_PATH_PREFIXES,
    READ_ONLY_BLOCKED_FUNCTIONS,
    TO_PATTERN,
)

BYTES_PER_MB = 1024 * 1024


def normalize_path(path: str) -> str:
    """Expand ~ and make a path absolute without following symlinks."""
    return os.path.abspath(os.path.expanduser(path))


def matches_blocked_pattern(*paths: str) -> bool:
    """Check whether any of the given path spellings hits a blocked pattern."""
    for path in paths:
        # Windows separators are checked in their POSIX form too
        candidates = {path, path.replace("\\", "/")}
        for candidate in candidates:
            if any(pattern.search(candidate) for pattern in BLOCKED_PATH_PATTERNS):
                return True
    return False


def resolve_allowed_paths(allowed_paths: List[str]) -> List[str]:
    return [normalize_path(allowed) for allowed in allowed_paths]


def is_within_allowed_paths(absolute_path: str, allowed_paths: List[str]) -> bool:
    """Check if an absolute path equals or sits under an allowed directory.

    Args:
        absolute_path: Normalised path to check
        allowed_paths: Configured allowed directories, relative or absolute

    Returns:
        True if contained, False otherwise (including when none are configured)
    """
    for allowed in resolve_allowed_paths(allowed_paths):
        if absolute_path == allowed:
            return True
        # join with "" appends exactly one separator, so "/" stays "/"
        if absolute_path.startswith(os.path.join(allowed, "")):
            return True
    return False


def is_network_path(path: str) -> bool:
    lowered = path.lower()
    return any(lowered.startswith(prefix) for prefix in NETWORK_PATH_PREFIXES)


class SecurityValidator:
    """Validates file paths and SQL text against hardcoded and configured rules."""

    def __init__(self, config: Config) -> None:
        self.config = config

    def validate_file_path(self, file_path: str) -> SecurityCheckResult:
        """Validate a path before its file is loaded.

        Checks run in a fixed order and the first failure wins: blocked
        patterns, extension, existence, allowed paths, network paths, size.
        """
        security = self.config.security
        absolute_path = normalize_path(file_path)

        if matches_blocked_pattern(file_path, absolute_path):
            return SecurityCheckResult.deny(
                "Path blocked by security rules: matches forbidden pattern"
            )

        extension = os.path.splitext(absolute_path)[1].lower()
        if extension not in ALLOWED_EXTENSIONS:
            allowed = ", ".join(sorted(ALLOWED_EXTENSIONS))
            return SecurityCheckResult.deny(
                f"File extension '{extension}' not allowed. Allowed: {allowed}"
            )

        if not os.path.isfile(absolute_path):
            return SecurityCheckResult.deny(f"File not found: {absolute_path}")

        if not is_within_allowed_paths(absolute_path, security.allowed_paths):
            allowed = ", ".join(security.allowed_paths) or "(none)"
            return SecurityCheckResult.deny(
                f"Path '{file_path}' is not within allowed paths: {allowed}"
            )

        warning = None
        if is_network_path(file_path):
            if not security.allow_network_paths:
                return SecurityCheckResult.deny(
                    "Network paths are not allowed (allow_network_paths = false)",
                    warning="Enable allow_network_paths in config to load files from network locations",
                )
            warning = "Loading from a network path, access may be slow"

        try:
            size_mb = os.path.getsize(absolute_path) / BYTES_PER_MB
        except OSError:
            return SecurityCheckResult.deny(f"Cannot read file stats: {absolute_path}")

        if size_mb > ABSOLUTE_MAX_FILE_SIZE_MB:
            return SecurityCheckResult.deny(
                f"File size ({size_mb:.1f}MB) exceeds absolute maximum "
                f"({ABSOLUTE_MAX_FILE_SIZE_MB}MB), this limit cannot be changed by configuration"
            )

        if size_mb > security.max_file_size_mb:
            return SecurityCheckResult.deny(
                f"File size ({size_mb:.1f}MB) exceeds configured maximum "
                f"({security.max_file_size_mb}MB)"
            )

        return SecurityCheckResult.allow(warning=warning)

    def validate_query(self, sql: str) -> SecurityCheckResult:
        """Validate SQL text before it reaches the engine.

        Matching is done on raw text, so keywords inside string literals or
        comments are rejected too.
        """
        for keyword, pattern in BLOCKED_SQL_KEYWORD_PATTERNS:
            if pattern.search(sql):
                return SecurityCheckResult.deny(
                    f"SQL operation '{keyword}' is not allowed"
                )

        if COPY_PATTERN.search(sql) and TO_PATTERN.search(sql):
            return SecurityCheckResult.deny("COPY TO operations are not allowed")

        if self.config.security.read_only:
            upper_sql = sql.upper()
            if any(name in upper_sql for name in READ_ONLY_BLOCKED_FUNCTIONS):
                return SecurityCheckResult.deny(
                    "Export/write functions not allowed in read_only mode",
                    warning="Set read_only: false in config to enable write operations",
                )

        return SecurityCheckResult.allow()
