"""
Export format dispatch.
"""

from typing import List

from mini_mcp.config.enums import ExportFormat
from mini_mcp.exporters.csv_exporter import export_to_csv
from mini_mcp.exporters.json_exporter import export_to_json, export_to_jsonl
from mini_mcp.exporters.markdown_exporter import export_to_markdown
from mini_mcp.protocol.types import QueryResult


def export_data(
    result: QueryResult, export_format: str, include_row_count: bool = True
) -> str:
    """Serialise a query result in the requested format.

    Raises:
        ValueError: If the format is not supported
    """
    try:
        fmt = ExportFormat(export_format)
    except ValueError:
        raise ValueError(
            f"Unknown export format: {export_format}. "
            f"Supported: {', '.join(get_supported_export_formats())}"
        ) from None

    if fmt is ExportFormat.CSV:
        return export_to_csv(result)
    if fmt is ExportFormat.JSON:
        return export_to_json(result)
    if fmt is ExportFormat.JSONL:
        return export_to_jsonl(result)
    return export_to_markdown(result, include_row_count=include_row_count)


def get_supported_export_formats() -> List[str]:
    return [fmt.value for fmt in ExportFormat]
