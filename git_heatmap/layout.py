"""
Layout engine for the commit activity heatmap.

Places each day of the display window on a week/weekday grid, the way
GitHub's contribution calendar does: one column per week, one row per
weekday (Sunday first).
"""

from dataclasses import dataclass, field
from datetime import date, timedelta
from math import ceil
from typing import Optional

from git_heatmap.colors import color_level

DAYS_PER_WEEK = 7
MONTH_NAMES = ["Jan", "Feb", "Mar", "Apr", "May", "Jun",
               "Jul", "Aug", "Sep", "Oct", "Nov", "Dec"]
WEEKDAY_LABELS = {1: "Mon", 3: "Wed", 5: "Fri"}


@dataclass(frozen=True)
class GridCell:
    """One populated day on the grid."""

    row: int
    col: int
    date: date
    count: int
    level: int

    @property
    def date_str(self) -> str:
        return self.date.isoformat()

    @property
    def tooltip(self) -> str:
        return f"{self.date_str}: {self.count} commits"


@dataclass(frozen=True)
class MonthLabel:
    col: int
    text: str


@dataclass
class HeatmapLayout:
    """Grid produced for a single render pass."""

    display_days: int
    start_date: date
    end_date: date
    start_weekday: int
    total_weeks: int
    cells: dict[tuple[int, int], GridCell] = field(default_factory=dict)
    month_labels: list[MonthLabel] = field(default_factory=list)
    weekday_labels: dict[int, str] = field(default_factory=lambda: dict(WEEKDAY_LABELS))

    def cell_at(self, row: int, col: int) -> Optional[GridCell]:
        return self.cells.get((row, col))

    def is_populated(self, row: int, col: int) -> bool:
        return (row, col) in self.cells

    @property
    def default_position(self) -> tuple[int, int]:
        """Anchor day's weekday row in the last column (the most recent day)."""
        return (weekday_index(self.end_date), self.total_weeks - 1)

    @property
    def max_count(self) -> int:
        return max((cell.count for cell in self.cells.values()), default=0)

    @property
    def total_commits(self) -> int:
        return sum(cell.count for cell in self.cells.values())

    def days(self) -> list[dict]:
        """Cells in date order as plain dicts."""
        ordered = sorted(self.cells.values(), key=lambda c: c.date)
        return [
            {"date": c.date_str, "count": c.count, "level": c.level, "row": c.row, "col": c.col}
            for c in ordered
        ]


def weekday_index(day: date) -> int:
    """Weekday with Sunday as 0 and Saturday as 6."""
    return (day.weekday() + 1) % DAYS_PER_WEEK


def build_layout(
    display_days: int,
    anchor_date: Optional[date] = None,
    counts: Optional[dict[str, int]] = None,
) -> HeatmapLayout:
    """
    Lay out the display window on a week/weekday grid.

    Args:
        display_days: Number of trailing days ending on anchor_date
        anchor_date: Last day of the window (default: today)
        counts: Mapping of YYYY-MM-DD to commit count

    Returns:
        HeatmapLayout with one GridCell per day

    Raises:
        ValueError: If display_days is not positive
    """
    if display_days <= 0:
        raise ValueError(f"display_days must be positive, got {display_days}")

    if anchor_date is None:
        anchor_date = date.today()
    counts = counts or {}

    start_date = anchor_date - timedelta(days=display_days - 1)
    start_weekday = weekday_index(start_date)
    total_weeks = ceil((display_days + start_weekday) / DAYS_PER_WEEK)

    layout = HeatmapLayout(
        display_days=display_days,
        start_date=start_date,
        end_date=anchor_date,
        start_weekday=start_weekday,
        total_weeks=total_weeks,
    )

    last_month = None
    for i in range(display_days):
        current = start_date + timedelta(days=i)
        row = weekday_index(current)
        col = (i + start_weekday) // DAYS_PER_WEEK

        # Label the first column, then each week whose Sunday opens a new month
        if ((col == 0 and i == 0) or row == 0) and current.month != last_month:
            layout.month_labels.append(MonthLabel(col=col, text=MONTH_NAMES[current.month - 1]))
            last_month = current.month

        count = counts.get(current.isoformat(), 0)
        layout.cells[(row, col)] = GridCell(
            row=row,
            col=col,
            date=current,
            count=count,
            level=color_level(count),
        )

    return layout
