"""
visualize_data tool implementation.
"""

import math
from typing import Any, Dict, List, Tuple

from mini_mcp.config.enums import ChartFormat, ChartType
from mini_mcp.protocol.types import QueryResult, ToolResult
from mini_mcp.tools.base_tool import BaseTool
from mini_mcp.utils.error_handling import (
    ToolInputError,
    create_security_error,
    handle_tool_errors,
)
from mini_mcp.visualizers.ascii_charts import (
    ascii_bar_chart,
    ascii_line_chart,
    ascii_pie_chart,
)
from mini_mcp.visualizers.mermaid_charts import (
    mermaid_bar_chart,
    mermaid_line_chart,
    mermaid_pie_chart,
)


def _column_index(result: QueryResult, column: str | None, default: int, role: str) -> int:
    if column is None:
        return default
    if column not in result.columns:
        raise ToolInputError(
            f"{role} column '{column}' not found. Available: {', '.join(result.columns)}"
        )
    return result.columns.index(column)


def _to_float(value: Any) -> float | None:
    if value is None or isinstance(value, bool):
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    return None if math.isnan(number) else number


class VisualizeDataTool(BaseTool):
    """Draws a bar, pie or line chart from a label column and a numeric value column."""

    @property
    def name(self) -> str:
        return "visualize_data"

    @property
    def description(self) -> str:
        return "Create ASCII or Mermaid bar, pie or line charts from a table or query"

    @property
    def input_schema(self) -> Dict[str, Any]:
        return {
            "type": "object",
            "properties": {
                "source": {
                    "type": "string",
                    "description": "Table name or SELECT/WITH query for the chart data",
                },
                "chartType": {
                    "type": "string",
                    "enum": [chart.value for chart in ChartType],
                    "description": "Type of chart to generate",
                },
                "format": {
                    "type": "string",
                    "enum": [fmt.value for fmt in ChartFormat],
                    "description": "Output format for the chart (default: ascii)",
                },
                "labelColumn": {
                    "type": "string",
                    "description": "Column used for labels (default: first column)",
                },
                "valueColumn": {
                    "type": "string",
                    "description": "Numeric column used for values (default: second column)",
                },
                "title": {"type": "string", "description": "Optional chart title"},
            },
            "required": ["source", "chartType"],
        }

    def _parse_enums(self, arguments: Dict[str, Any]) -> Tuple[ChartType, ChartFormat]:
        chart_type = self.require_string(arguments, "chartType")
        chart_format = self.optional_string(arguments, "format") or ChartFormat.ASCII.value
        try:
            parsed_type = ChartType(chart_type)
        except ValueError:
            raise ToolInputError(
                f"Unsupported chartType '{chart_type}'. "
                f"Supported: {', '.join(c.value for c in ChartType)}"
            ) from None
        try:
            parsed_format = ChartFormat(chart_format)
        except ValueError:
            raise ToolInputError(
                f"Unsupported format '{chart_format}'. "
                f"Supported: {', '.join(f.value for f in ChartFormat)}"
            ) from None
        return parsed_type, parsed_format

    def _extract_series(
        self, result: QueryResult, label_column: str | None, value_column: str | None
    ) -> Tuple[List[str], List[float]]:
        if len(result.columns) < 2:
            raise ToolInputError(
                "Visualization requires at least 2 columns (label and value)"
            )
        if not result.rows:
            raise ToolInputError("Query returned no rows to visualize")

        label_index = _column_index(result, label_column, 0, "Label")
        value_index = _column_index(result, value_column, 1, "Value")

        labels = [
            "null" if row[label_index] is None else str(row[label_index])
            for row in result.rows
        ]
        values = [_to_float(row[value_index]) for row in result.rows]
        if any(value is None for value in values):
            raise ToolInputError(
                f"Value column '{result.columns[value_index]}' must contain numeric data"
            )
        return labels, values

    @handle_tool_errors("visualize_data")
    async def execute(self, arguments: Dict[str, Any] | None) -> List[ToolResult]:
        """Execute the visualize_data tool."""
        arguments = arguments or {}
        source = self.require_string(arguments, "source")
        chart_type, chart_format = self._parse_enums(arguments)
        title = self.optional_string(arguments, "title")

        sql = self.resolve_source(source)
        check = self.context.security.validate_query(sql)
        if not check.allowed:
            return create_security_error(check)

        result = await self.store.execute_query(sql)
        labels, values = self._extract_series(
            result,
            self.optional_string(arguments, "labelColumn"),
            self.optional_string(arguments, "valueColumn"),
        )

        if chart_format is ChartFormat.ASCII:
            renderers = {
                ChartType.BAR: ascii_bar_chart,
                ChartType.PIE: ascii_pie_chart,
                ChartType.LINE: ascii_line_chart,
            }
        else:
            renderers = {
                ChartType.BAR: mermaid_bar_chart,
                ChartType.PIE: mermaid_pie_chart,
                ChartType.LINE: mermaid_line_chart,
            }
        chart = renderers[chart_type](labels, values, title=title)

        if result.truncated:
            chart += f"\n\nNote: chart shows the first {result.row_count} rows only"

        return [
            ToolResult(
                text=self.bound_output(chart),
                data={
                    "chartType": chart_type.value,
                    "format": chart_format.value,
                    "points": len(values),
                },
            )
        ]
