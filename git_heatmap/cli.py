"""
CLI display functions for git-heatmap.
"""

from git_heatmap.commit_parser import CommitDetail
from git_heatmap.layout import DAYS_PER_WEEK, HeatmapLayout

# One glyph per intensity level
LEVEL_GLYPHS = ["·", "░", "▒", "▓", "█"]


def format_grid_rows(layout: HeatmapLayout, active: tuple[int, int] | None = None) -> list[str]:
    """
    Build the text rows of the heatmap.

    Args:
        layout: Grid to draw
        active: Position to mark with "@"

    Returns:
        List of lines: month header, then one line per weekday
    """
    header = ""
    for label in layout.month_labels:
        # Skip labels that would overlap the previous one
        if label.col < len(header):
            continue
        header = header.ljust(label.col) + label.text
    lines = ["    " + header]

    for row in range(DAYS_PER_WEEK):
        label = layout.weekday_labels.get(row, "")
        cells = []
        for col in range(layout.total_weeks):
            cell = layout.cell_at(row, col)
            if cell is None:
                cells.append(" ")
            elif active == (row, col):
                cells.append("@")
            else:
                cells.append(LEVEL_GLYPHS[cell.level])
        lines.append(f"{label:<3} " + "".join(cells).rstrip())
    return lines


def display_heatmap(layout: HeatmapLayout, active: tuple[int, int] | None = None) -> None:
    """Print the heatmap with its legend."""
    print(f"Commit activity {layout.start_date} .. {layout.end_date}")
    for line in format_grid_rows(layout, active):
        print(line)
    print()
    print("    Less " + " ".join(LEVEL_GLYPHS) + " More")
    total = layout.total_commits
    plural = "commit" if total == 1 else "commits"
    print(f"    {total} {plural} in {layout.display_days} days")
    print()


def format_commit(commit: CommitDetail) -> str:
    """
    Format a commit for the detail listing.

    Messages longer than 60 characters are truncated.
    """
    message = commit.message
    if len(message) > 60:
        message = message[:57] + "..."
    return f"  {commit.time_of_day:<5}  {commit.short_hash}  {message}"


def display_details(date_str: str, count: int, commits: list[CommitDetail]) -> None:
    """Print the detail panel for a day."""
    print(f"{date_str}  {count} contributions")
    if count == 0:
        print()
        return
    if not commits:
        print("  No commit details available")
    for commit in commits:
        print(format_commit(commit))
    print()
