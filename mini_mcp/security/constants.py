"""
Hardcoded security rules.

These rules cannot be relaxed by configuration. Configured limits are
always checked against the absolute ceilings defined here.
"""

import re
from typing import Final, FrozenSet, Tuple

# ============================================================================
# SQL RULES
# ============================================================================

# Matched case-insensitively on word boundaries against raw query text.
BLOCKED_SQL_KEYWORDS: Final[Tuple[str, ...]] = (
    "DROP",
    "DELETE",
    "TRUNCATE",
    "ALTER",
    "CREATE",
    "INSERT",
    "UPDATE",
    "GRANT",
    "REVOKE",
    "ATTACH",
    "DETACH",
    # DuckDB verbs that touch files or extensions
    "INSTALL",
    "LOAD",
    "EXPORT",
    "IMPORT",
)

BLOCKED_SQL_KEYWORD_PATTERNS: Final[Tuple[Tuple[str, "re.Pattern[str]"], ...]] = tuple(
    (keyword, re.compile(rf"\b{keyword}\b", re.IGNORECASE))
    for keyword in BLOCKED_SQL_KEYWORDS
)

COPY_PATTERN: Final = re.compile(r"\bCOPY\b", re.IGNORECASE)
TO_PATTERN: Final = re.compile(r"\bTO\b", re.IGNORECASE)

# Substrings rejected while read-only mode is on
READ_ONLY_BLOCKED_FUNCTIONS: Final[Tuple[str, ...]] = ("EXPORT_", "WRITE_")

# ============================================================================
# PATH RULES
# ============================================================================

BLOCKED_PATH_PATTERNS: Final[Tuple["re.Pattern[str]", ...]] = (
    # Directory traversal
    re.compile(r"\.\."),
    # System directories
    re.compile(r"^/etc/"),
    re.compile(r"^/var/"),
    re.compile(r"^/usr/"),
    re.compile(r"^/bin/"),
    re.compile(r"^/sbin/"),
    re.compile(r"^/root"),
    # Hidden entries in the home directory
    re.compile(r"^~/\."),
    # Credentials and secrets
    re.compile(r"/\.ssh/"),
    re.compile(r"/\.aws/"),
    re.compile(r"/\.env"),
    # Dependency trees
    re.compile(r"/node_modules/"),
)

ALLOWED_EXTENSIONS: Final[FrozenSet[str]] = frozenset(
    {".csv", ".tsv", ".json", ".jsonl", ".parquet", ".txt"}
)

NETWORK_PATH_PREFIXES: Final[Tuple[str, ...]] = (
    "//",
    "\\\\",
    "smb://",
    "http://",
    "https://",
    "ftp://",
    "s3://",
)

# ============================================================================
# ABSOLUTE CEILINGS
# ============================================================================

ABSOLUTE_MAX_FILE_SIZE_MB: Final[int] = 1000
ABSOLUTE_MAX_TIMEOUT_MS: Final[int] = 300_000
ABSOLUTE_MAX_ROWS: Final[int] = 100_000
