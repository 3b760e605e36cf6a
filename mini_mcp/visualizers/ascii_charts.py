"""
Text charts for terminal display.
"""

from typing import List, Sequence

from mini_mcp.config.constants import ASCII_BAR_MAX_WIDTH, ASCII_PIE_WIDTH

NO_DATA = "No data to display"
SPARK_CHARS = "▁▂▃▄▅▆▇█"
MAX_SPARKLINE_LABELS = 10


def format_number(value: float) -> str:
    """Print whole floats without a trailing .0."""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def ascii_bar_chart(
    labels: Sequence[str],
    values: Sequence[float],
    max_width: int = ASCII_BAR_MAX_WIDTH,
    title: str | None = None,
) -> str:
    if not values or max(values) <= 0:
        return NO_DATA

    max_value = max(values)
    label_width = max(len(label) for label in labels)

    lines: List[str] = [title, ""] if title else []
    for label, value in zip(labels, values):
        bar = "█" * max(0, round(value / max_value * max_width))
        lines.append(f"{label.ljust(label_width)} │ {bar} {format_number(value)}")
    return "\n".join(lines)


def ascii_pie_chart(
    labels: Sequence[str], values: Sequence[float], title: str | None = None
) -> str:
    """Show each value's share of the total as a bar of ASCII_PIE_WIDTH dots."""
    total = sum(values)
    if not values or total <= 0:
        return NO_DATA

    label_width = max(len(label) for label in labels)

    lines: List[str] = [title, ""] if title else []
    for label, value in zip(labels, values):
        share = value / total
        bar = "●" * max(0, round(share * ASCII_PIE_WIDTH))
        lines.append(
            f"{label.ljust(label_width)} │ {bar} {share * 100:.1f}% ({format_number(value)})"
        )
    lines.append("")
    lines.append(f"Total: {format_number(total)}")
    return "\n".join(lines)


def ascii_line_chart(
    labels: Sequence[str], values: Sequence[float], title: str | None = None
) -> str:
    """Render values as a one-line sparkline with min/max and labels."""
    if not values:
        return NO_DATA

    low, high = min(values), max(values)
    spread = (high - low) or 1
    sparkline = "".join(
        SPARK_CHARS[round((value - low) / spread * (len(SPARK_CHARS) - 1))]
        for value in values
    )

    if len(labels) <= MAX_SPARKLINE_LABELS:
        label_line = " ".join(labels)
    else:
        label_line = f"{labels[0]} ... {labels[-1]}"

    lines: List[str] = [title, ""] if title else []
    lines += [
        f"Min: {format_number(low)} | Max: {format_number(high)}",
        sparkline,
        label_line,
    ]
    return "\n".join(lines)
