"""
Writes exported content to disk behind the read-only flag and output path checks.
"""

from dataclasses import dataclass

from mini_mcp.config.schema import Config
from mini_mcp.security.path_validator import OutputPathValidator
from mini_mcp.security.validator import normalize_path
from mini_mcp.utils.logger import log_info


class ExportWriteError(ValueError):
    """Raised when an export may not be written."""


@dataclass
class ExportResult:
    output_path: str
    row_count: int
    byte_size: int


def can_write_files(config: Config) -> bool:
    return not config.security.read_only


def write_export(
    content: str, output_path: str, row_count: int, config: Config
) -> ExportResult:
    """Write content to output_path.

    Raises:
        ExportWriteError: If read-only mode is on or the path is rejected
    """
    if config.security.read_only:
        raise ExportWriteError(
            "File export disabled (read_only: true). "
            "Set read_only: false in config to write files, "
            "or omit outputPath to get the data inline."
        )

    check = OutputPathValidator(config).validate_path(output_path)
    if not check.allowed:
        raise ExportWriteError(f"Cannot write to path: {check.reason}")

    absolute_path = normalize_path(output_path)
    encoded = content.encode("utf-8")
    with open(absolute_path, "wb") as f:
        f.write(encoded)

    log_info(f"Exported {row_count} rows to {absolute_path}", {"bytes": len(encoded)})
    return ExportResult(
        output_path=absolute_path, row_count=row_count, byte_size=len(encoded)
    )
