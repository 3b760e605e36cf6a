"""
Configuration validation for mini-mcp.
Validates mini-mcp config file structure and values.
"""

from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, Dict, List, Tuple

import yaml

from mini_mcp.config.enums import Severity
from mini_mcp.config.schema import FIELD_RANGES, OUTPUT_FORMATS, SECTION_TYPES


@dataclass
class ValidationError:
    """Represents a configuration validation error."""

    path: str
    message: str
    severity: Severity
    current_value: Any = None

    def __str__(self) -> str:
        """Format error message for display."""
        prefix = self.severity.value.upper()
        result = f"{prefix}: {self.message}"

        if self.path:
            result += f" (path: {self.path})"

        if self.current_value is not None:
            result += f" (current: {self.current_value})"

        return result


class ConfigValidator:
    """Validates mini-mcp configuration files and dictionaries."""

    def __init__(self):
        """Initialize the validator."""
        self.errors: List[ValidationError] = []
        self.warnings: List[ValidationError] = []

    def validate_config(self, config_path: Path) -> Tuple[bool, List[ValidationError]]:
        """Validate a configuration file on disk."""
        self.errors = []
        self.warnings = []

        if not config_path.exists():
            self.errors.append(
                ValidationError(
                    path=str(config_path),
                    message="Configuration file not found",
                    severity=Severity.ERROR,
                )
            )
            return False, self.errors

        try:
            with open(config_path, "r", encoding="utf-8") as f:
                config = yaml.safe_load(f)
        except yaml.YAMLError as e:
            self.errors.append(
                ValidationError(
                    path=str(config_path),
                    message=f"Invalid YAML syntax: {e}",
                    severity=Severity.ERROR,
                )
            )
            return False, self.errors
        except OSError as e:
            self.errors.append(
                ValidationError(
                    path=str(config_path),
                    message=f"Cannot read file: {e}",
                    severity=Severity.ERROR,
                )
            )
            return False, self.errors

        # An empty file means all defaults
        if config is None:
            config = {}

        return self.validate_data(config)

    def validate_data(self, config: Any) -> Tuple[bool, List[ValidationError]]:
        """Validate an already parsed configuration mapping."""
        self.errors = []
        self.warnings = []

        if not isinstance(config, dict):
            self.errors.append(
                ValidationError(
                    path="",
                    message="Configuration must be a dictionary",
                    severity=Severity.ERROR,
                    current_value=type(config).__name__,
                )
            )
            return False, self.errors

        for section_name, section in config.items():
            if section_name not in SECTION_TYPES:
                self.warnings.append(
                    ValidationError(
                        path=str(section_name),
                        message="Unknown configuration section",
                        severity=Severity.WARNING,
                    )
                )
                continue
            if section is None:
                continue
            if not isinstance(section, dict):
                self.errors.append(
                    ValidationError(
                        path=section_name,
                        message="Section must be a dictionary",
                        severity=Severity.ERROR,
                        current_value=type(section).__name__,
                    )
                )
                continue
            self._validate_section(section_name, section)

        all_issues = self.errors + self.warnings
        is_valid = len(self.errors) == 0
        return is_valid, all_issues

    def _validate_section(self, section_name: str, section: Dict[str, Any]) -> None:
        """Validate keys, types and ranges of a single section."""
        section_fields = {f.name: f for f in fields(SECTION_TYPES[section_name])}
        ranges = FIELD_RANGES.get(section_name, {})

        for key, value in section.items():
            path = f"{section_name}.{key}"
            if key not in section_fields:
                self.warnings.append(
                    ValidationError(
                        path=path,
                        message="Unknown configuration key",
                        severity=Severity.WARNING,
                    )
                )
                continue

            expected = section_fields[key].type
            if expected in (bool, "bool"):
                self._validate_bool(path, value)
            elif expected in (int, "int"):
                self._validate_int(path, value, ranges.get(key))
            elif key == "allowed_paths":
                self._validate_paths(path, value)
            elif key == "default_format":
                self._validate_format(path, value)

    def _validate_bool(self, path: str, value: Any) -> None:
        if not isinstance(value, bool):
            self.errors.append(
                ValidationError(
                    path=path,
                    message="Value must be a boolean",
                    severity=Severity.ERROR,
                    current_value=value,
                )
            )

    def _validate_int(
        self, path: str, value: Any, value_range: Tuple[int, int] | None
    ) -> None:
        if isinstance(value, bool) or not isinstance(value, int):
            self.errors.append(
                ValidationError(
                    path=path,
                    message="Value must be an integer",
                    severity=Severity.ERROR,
                    current_value=value,
                )
            )
            return

        if value_range is None:
            return

        minimum, maximum = value_range
        if value < minimum or value > maximum:
            self.errors.append(
                ValidationError(
                    path=path,
                    message=f"Value must be between {minimum} and {maximum}",
                    severity=Severity.ERROR,
                    current_value=value,
                )
            )

    def _validate_paths(self, path: str, value: Any) -> None:
        if not isinstance(value, list) or not all(isinstance(p, str) for p in value):
            self.errors.append(
                ValidationError(
                    path=path,
                    message="Value must be a list of strings",
                    severity=Severity.ERROR,
                    current_value=value,
                )
            )
            return

        if not value:
            self.warnings.append(
                ValidationError(
                    path=path,
                    message="No allowed paths configured, every file load will be rejected",
                    severity=Severity.WARNING,
                )
            )

    def _validate_format(self, path: str, value: Any) -> None:
        if value not in OUTPUT_FORMATS:
            self.errors.append(
                ValidationError(
                    path=path,
                    message=f"Value must be one of: {', '.join(OUTPUT_FORMATS)}",
                    severity=Severity.ERROR,
                    current_value=value,
                )
            )
