import json
from typing import Any, Dict, List

from mini_mcp.protocol.types import QueryResult


def rows_as_objects(result: QueryResult) -> List[Dict[str, Any]]:
    return [dict(zip(result.columns, row)) for row in result.rows]


def export_to_json(result: QueryResult) -> str:
    return json.dumps(rows_as_objects(result), indent=2, ensure_ascii=False, default=str)


def export_to_jsonl(result: QueryResult) -> str:
    """One JSON object per line."""
    return "\n".join(
        json.dumps(obj, ensure_ascii=False, default=str)
        for obj in rows_as_objects(result)
    )
