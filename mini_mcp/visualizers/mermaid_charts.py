"""
Mermaid diagram source for charts, wrapped in a fenced code block.
"""

from typing import List, Sequence

from mini_mcp.visualizers.ascii_charts import format_number


def _escape(text: str) -> str:
    return text.replace('"', '\\"')


def mermaid_pie_chart(
    labels: Sequence[str], values: Sequence[float], title: str | None = None
) -> str:
    lines = ["```mermaid", "pie showData"]
    if title:
        lines.append(f"    title {title}")
    for label, value in zip(labels, values):
        lines.append(f'    "{_escape(label)}" : {format_number(value)}')
    lines.append("```")
    return "\n".join(lines)


def _xychart(
    series: str,
    labels: Sequence[str],
    values: Sequence[float],
    title: str | None,
    x_label: str | None,
    y_label: str | None,
) -> str:
    lines: List[str] = ["```mermaid", "xychart-beta"]
    if title:
        lines.append(f'    title "{_escape(title)}"')

    categories = ", ".join(f'"{_escape(label)}"' for label in labels)
    if x_label:
        lines.append(f'    x-axis "{_escape(x_label)}" [{categories}]')
    else:
        lines.append(f"    x-axis [{categories}]")

    if y_label:
        lines.append(f'    y-axis "{_escape(y_label)}"')

    lines.append(f"    {series} [{', '.join(format_number(v) for v in values)}]")
    lines.append("```")
    return "\n".join(lines)


def mermaid_bar_chart(
    labels: Sequence[str],
    values: Sequence[float],
    title: str | None = None,
    x_label: str | None = None,
    y_label: str | None = None,
) -> str:
    return _xychart("bar", labels, values, title, x_label, y_label)


def mermaid_line_chart(
    labels: Sequence[str],
    values: Sequence[float],
    title: str | None = None,
    x_label: str | None = None,
    y_label: str | None = None,
) -> str:
    return _xychart("line", labels, values, title, x_label, y_label)
