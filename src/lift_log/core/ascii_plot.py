"""
ASCII charts for terminal output.

Bar charts for volume and frequency plus a GitHub-style heatmap grid for
the training calendar.
"""

from typing import Sequence

from .models import CalendarHeatmap, WeeklyVolume

# Heatmap glyph per volume tier (0 = rest day)
TIER_GLYPHS: tuple[str, ...] = ("·", "░", "▒", "█")

_MONTH_ABBR = ("Jan", "Feb", "Mar", "Apr", "May", "Jun", "Jul", "Aug", "Sep", "Oct", "Nov", "Dec")
_DAY_LABELS = ("Mon", "", "Wed", "", "Fri", "", "Sun")


def create_simple_bar_chart(
    labels: Sequence[str],
    values: Sequence[float],
    width: int = 40,
    title: str = "",
    value_format: str = "{:.1f}",
) -> str:
    """
    Create a simple horizontal bar chart.

    Args:
        labels: Labels for each bar
        values: Values for each bar
        width: Maximum bar width
        title: Chart title
        value_format: Format applied to the value printed after each bar

    Returns:
        ASCII bar chart string
    """
    if not values:
        return "No data to display."

    max_val = max(values)
    max_label_len = max(len(l) for l in labels) if labels else 0

    lines = []

    if title:
        lines.append(title)
        lines.append("─" * (max_label_len + width + 5))

    for label, value in zip(labels, values):
        bar_len = int((value / max_val) * width) if max_val > 0 else 0
        bar = "█" * bar_len
        lines.append(f"{label:>{max_label_len}} │{bar} {value_format.format(value)}")

    return "\n".join(lines)


def create_weekly_volume_chart(weeks: Sequence[WeeklyVolume], width: int = 40) -> str:
    """
    Chart completed volume per ISO week.

    Args:
        weeks: Output of analytics.weekly_volume()
        width: Maximum bar width

    Returns:
        ASCII chart string
    """
    if not weeks:
        return "No training history."
    labels = [f"{w.year} W{w.week:02d}" for w in weeks]
    values = [w.volume for w in weeks]
    return create_simple_bar_chart(
        labels, values, width=width, title="Weekly Volume (kg)", value_format="{:,.0f}"
    )


def create_heatmap(heatmap: CalendarHeatmap) -> str:
    """
    Render the calendar heatmap as a 7-row grid, one column per week.

    Rows are weekdays (Monday first); month abbreviations mark the column
    where each month begins.
    """
    weeks = heatmap.weeks
    if not weeks:
        return "No data to display."

    header = [" "] * len(weeks)
    for col, month in heatmap.month_columns:
        label = _MONTH_ABBR[month - 1]
        # Labels need 3 columns; skip ones that would overlap the previous label
        if all(c == " " for c in header[col:col + 3]) and (col == 0 or header[col - 1] == " "):
            for i, ch in enumerate(label):
                if col + i < len(header):
                    header[col + i] = ch

    lines = ["    " + "".join(header)]
    for row in range(7):
        cells = [
            TIER_GLYPHS[week[row].tier] if row < len(week) else " "
            for week in weeks
        ]
        lines.append(f"{_DAY_LABELS[row]:<3} " + "".join(cells))

    lines.append("")
    lines.append(
        f"Less {' '.join(TIER_GLYPHS)} More   "
        f"(≤{heatmap.low_threshold:,.0f} / ≤{heatmap.high_threshold:,.0f} kg)"
    )
    return "\n".join(lines)
