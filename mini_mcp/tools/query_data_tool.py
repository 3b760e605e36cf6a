"""
query_data tool implementation.
"""

from typing import Any, Dict, List

from mini_mcp.nlp.nl_to_sql import TranslationResult, looks_like_sql, translate_to_sql
from mini_mcp.protocol.types import ToolResult
from mini_mcp.tools.base_tool import BaseTool
from mini_mcp.utils.error_handling import (
    ToolInputError,
    create_security_error,
    handle_tool_errors,
)


class QueryDataTool(BaseTool):
    """Runs SQL or a simple natural language request against a loaded table."""

    @property
    def name(self) -> str:
        return "query_data"

    @property
    def description(self) -> str:
        return (
            "Query loaded data using SQL or simple natural language "
            "(e.g. 'top 5 by revenue', 'count rows', 'group by region'). "
            "Queries that mention a blocked SQL keyword are rejected even as a column "
            "name (e.g. a column called load or update); select such columns with *."
        )

    @property
    def input_schema(self) -> Dict[str, Any]:
        return {
            "type": "object",
            "properties": {
                "query": {
                    "type": "string",
                    "description": "SQL query or natural language question",
                },
                "tableName": {
                    "type": "string",
                    "description": "Table to query (optional if only one table is loaded)",
                },
            },
            "required": ["query"],
        }

    def _translate(self, query: str, table_name: str | None) -> TranslationResult:
        if table_name is not None:
            metadata = self.store.get_table(table_name)
            if metadata is None:
                raise self.table_not_found(table_name)
            return translate_to_sql(query, metadata)

        default_table = self.store.get_default_table()
        if default_table is not None:
            return translate_to_sql(query, self.store.get_table(default_table))

        if looks_like_sql(query):
            return TranslationResult(
                is_natural_language=False, sql=query.strip(), confidence=1.0
            )

        loaded = len(self.store.list_tables())
        if loaded == 0:
            raise ToolInputError("No tables loaded. Use load_data first.")
        raise ToolInputError(
            f"{loaded} tables are loaded. Provide tableName for natural language queries."
        )

    @handle_tool_errors("query_data")
    async def execute(self, arguments: Dict[str, Any] | None) -> List[ToolResult]:
        """Execute the query_data tool."""
        arguments = arguments or {}
        query = self.require_string(arguments, "query")
        table_name = self.optional_string(arguments, "tableName")

        translation = self._translate(query, table_name)

        check = self.context.security.validate_query(translation.sql)
        if not check.allowed:
            return create_security_error(check)

        result = await self.store.execute_query(translation.sql)

        sections = []
        if translation.is_natural_language:
            sections.append(f"Translated to SQL: `{translation.sql}`")
        sections.append(self.format_result_table(result))

        return [
            ToolResult(
                text=self.bound_output("\n\n".join(sections)),
                data={
                    "rowCount": result.row_count,
                    "truncated": result.truncated,
                    "wasNaturalLanguage": translation.is_natural_language,
                    "executedSQL": translation.sql,
                    "confidence": translation.confidence,
                    "executionTimeMs": result.execution_time_ms,
                },
            )
        ]
