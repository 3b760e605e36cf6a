import csv
import io

from mini_mcp.protocol.types import QueryResult


def export_to_csv(result: QueryResult) -> str:
    """Render rows as CSV. Nulls become empty fields."""
    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n", quoting=csv.QUOTE_MINIMAL)
    writer.writerow(result.columns)
    for row in result.rows:
        writer.writerow(["" if value is None else value for value in row])
    return buffer.getvalue().rstrip("\n")
