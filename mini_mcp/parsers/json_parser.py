"""
Parser for JSON arrays, single JSON objects and JSON Lines.
"""

import json
from typing import Any, Dict, List, Tuple

from mini_mcp.parsers.base_parser import DataParser
from mini_mcp.protocol.types import ParsedData
from mini_mcp.validators.schema_validator import infer_column_types


def is_json_lines(content: str) -> bool:
    """JSON Lines has more than one non-empty line, each starting with '{'."""
    lines = [line.strip() for line in content.splitlines() if line.strip()]
    return len(lines) > 1 and all(line.startswith("{") for line in lines)


def extract_columns(objects: List[Dict[str, Any]]) -> List[str]:
    """Collect keys in order of first appearance across all objects."""
    columns: List[str] = []
    seen = set()
    for obj in objects:
        for key in obj:
            if key not in seen:
                seen.add(key)
                columns.append(key)
    return columns


class JSONParser(DataParser):
    @property
    def extensions(self) -> Tuple[str, ...]:
        return (".json", ".jsonl")

    def _parse_json_lines(self, content: str) -> List[Any]:
        objects = []
        lines = [line for line in content.splitlines() if line.strip()]
        for index, line in enumerate(lines):
            try:
                objects.append(json.loads(line))
            except json.JSONDecodeError as e:
                raise ValueError(f"Failed to parse JSON at line {index + 1}: {e}") from e
        return objects

    def parse(self, file_path: str, **options: Any) -> ParsedData:
        with open(file_path, "r", encoding="utf-8") as f:
            content = f.read().strip()

        if not content:
            return ParsedData(columns=[], rows=[], column_types={})

        if is_json_lines(content):
            objects = self._parse_json_lines(content)
        else:
            try:
                parsed = json.loads(content)
            except json.JSONDecodeError as e:
                raise ValueError(f"Invalid JSON: {e}") from e

            if isinstance(parsed, list):
                objects = parsed
            elif isinstance(parsed, dict):
                objects = [parsed]
            else:
                raise ValueError("JSON must be an array of objects or a single object")

        if not all(isinstance(obj, dict) for obj in objects):
            raise ValueError("JSON must be an array of objects or a single object")

        if not objects:
            return ParsedData(columns=[], rows=[], column_types={})

        columns = extract_columns(objects)
        rows = [[obj.get(column) for column in columns] for obj in objects]

        column_info = infer_column_types(columns, rows)
        return ParsedData(
            columns=columns,
            rows=rows,
            column_types={column.name: column.type for column in column_info},
        )
