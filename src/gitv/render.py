from __future__ import annotations

import dataclasses
import datetime as dt
from typing import TextIO

from colorama import Back, Fore, Style

from .grid import build_columns, sort_keys
from .timebuckets import DAYS_IN_LAST_SIX_MONTHS, DAYS_PER_WEEK, WEEKS_IN_LAST_SIX_MONTHS, week_offset

GRAPH_TITLE = "Your Git contribution graph:"
DAY_LABELS = ("   ", "Mon", "   ", "Wed", "   ", "Fri", "   ")
LEGEND_SAMPLES = (0, 1, 4, 7, 10)
MONTH_ABBR = ("", "Jan", "Feb", "Mar", "Apr", "May", "Jun", "Jul", "Aug", "Sep", "Oct", "Nov", "Dec")

# Upper bounds (inclusive) for each band; anything above HIGH is "max".
LEVEL_NONE = 0
LEVEL_LOW = 3
LEVEL_MEDIUM = 6
LEVEL_HIGH = 9


def _bg_hex(hex_color: str) -> str:
    h = hex_color.lstrip("#")
    r, g, b = int(h[0:2], 16), int(h[2:4], 16), int(h[4:6], 16)
    return f"\033[48;2;{r};{g};{b}m"


STYLES = {
    "none": Back.BLACK + Fore.WHITE,
    "low": _bg_hex("#0e4429") + Fore.WHITE,
    "medium": _bg_hex("#006d32") + Fore.WHITE,
    "high": _bg_hex("#26a641") + Fore.BLACK,
    "max": _bg_hex("#39d353") + Fore.BLACK,
    "today": Back.BLUE + Fore.WHITE,
    "label": Fore.LIGHTBLACK_EX,
}


def contribution_level(val: int) -> str:
    if val <= LEVEL_NONE:
        return "none"
    if val <= LEVEL_LOW:
        return "low"
    if val <= LEVEL_MEDIUM:
        return "medium"
    if val <= LEVEL_HIGH:
        return "high"
    return "max"


def format_cell_value(val: int) -> str:
    if val == 0:
        return " - "
    if val < 10:
        return f" {val} "
    if val < 100:
        return f"{val} "
    return f"{val}"


@dataclasses.dataclass(frozen=True)
class Palette:
    color: bool = True

    def paint(self, text: str, style: str) -> str:
        if not self.color:
            return text
        return f"{STYLES[style]}{text}{Style.RESET_ALL}"

    def cell(self, val: int, *, is_today: bool = False) -> str:
        style = "today" if is_today else contribution_level(val)
        return self.paint(format_cell_value(val), style)


def month_labels(today: dt.date) -> list[str]:
    """One 3-character entry per week stride from `today - 183 days`; a month name where a new month starts.

    Month names are English abbreviations whatever the process locale is.
    """
    week = today - dt.timedelta(days=DAYS_IN_LAST_SIX_MONTHS)
    month = week.month
    out: list[str] = []
    while week < today:
        if week.month != month:
            out.append(MONTH_ABBR[week.month])
            month = week.month
        else:
            out.append("   ")
        week += dt.timedelta(days=DAYS_PER_WEEK)
    return out


def _month_header(today: dt.date, palette: Palette) -> str:
    parts = [palette.paint(label, "label") if label.strip() else label for label in month_labels(today)]
    return "    " + "".join(parts)


def _grid_rows(cols: dict[int, list[int]], today_row: int, palette: Palette) -> list[str]:
    rows: list[str] = []
    first_week = WEEKS_IN_LAST_SIX_MONTHS + 1
    for j in range(DAYS_PER_WEEK - 1, -1, -1):
        parts = [palette.paint(DAY_LABELS[j] + " ", "label")]
        for i in range(first_week, -1, -1):
            col = cols.get(i)
            val = col[j] if col is not None and j < len(col) else 0
            if col is not None and i == 0 and j == today_row:
                parts.append(palette.cell(val, is_today=True))
            else:
                parts.append(palette.cell(val))
        rows.append("".join(parts))
    return rows


def _legend(palette: Palette) -> str:
    swatches = [palette.cell(v) for v in LEGEND_SAMPLES[:-1]]
    swatches.append(palette.paint(f"{LEGEND_SAMPLES[-1]}+", contribution_level(LEGEND_SAMPLES[-1])))
    return palette.paint("    Less ", "label") + " ".join(swatches) + palette.paint(" More", "label")


def render_contribution_graph(commits: dict[int, int], *, today: dt.date | None = None, color: bool = False) -> str:
    if today is None:
        today = dt.date.today()
    palette = Palette(color=color)
    cols = build_columns(sort_keys(commits), commits)
    total = sum(commits.values())

    lines: list[str] = []
    lines.append("")
    lines.append(GRAPH_TITLE)
    lines.append("")
    lines.append(_month_header(today, palette))
    lines.extend(_grid_rows(cols, week_offset(today=today) - 1, palette))
    lines.append("")
    lines.append("")
    lines.append(_legend(palette))
    lines.append("")
    lines.append(f"Total commits in the last 6 months: {total}")
    return "\n".join(lines) + "\n"


def write_contribution_graph(out: TextIO, commits: dict[int, int], *, today: dt.date | None = None, color: bool = False) -> None:
    out.write(render_contribution_graph(commits, today=today, color=color))
