"""
git-heatmap: commit activity heatmap for a local git repository.

Entry point for the command line.
"""

import argparse
import asyncio
import sys
from datetime import date

from git_heatmap.cli import display_details, display_heatmap
from git_heatmap.config import get_repo_path
from git_heatmap.errors import HeatmapError
from git_heatmap.git_log import GitLogReader
from git_heatmap.service import HeatmapService
from git_heatmap.storage import SettingsStorage


def _positive_int(value: str) -> int:
    days = int(value)
    if days <= 0:
        raise argparse.ArgumentTypeError("must be a positive integer")
    return days


def _iso_date(value: str) -> date:
    try:
        return date.fromisoformat(value)
    except ValueError:
        raise argparse.ArgumentTypeError("expected YYYY-MM-DD")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="git-heatmap",
        description="Show a commit activity heatmap for a git repository.",
    )
    parser.add_argument("--days", type=_positive_int, help="Number of days to display")
    parser.add_argument("--date", type=_iso_date, help="Show the commits of one day")
    parser.add_argument("--serve", action="store_true", help="Run the web interface")
    parser.add_argument("--host", default="127.0.0.1")
    parser.add_argument("--port", type=int, default=8000)
    return parser


async def _show(days: int | None, day: date | None) -> None:
    service = HeatmapService(storage=SettingsStorage(), reader=GitLogReader(get_repo_path()))
    display_days = days or service.storage.get_default_days()

    layout = await service.build_layout(display_days)
    display_heatmap(layout, active=layout.default_position)

    if day is None:
        cell = layout.cell_at(*layout.default_position)
        day, count = cell.date, cell.count
    else:
        count = next((c.count for c in layout.cells.values() if c.date == day), None)

    if count == 0:
        display_details(day.isoformat(), 0, [])
        return

    commits = await service.reader.fetch_commits_for_date(day, strict=True)
    if count is None:
        count = len(commits)
    display_details(day.isoformat(), count, commits)


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)

    if args.serve:
        import uvicorn

        uvicorn.run("git_heatmap.app:app", host=args.host, port=args.port)
        return 0

    try:
        asyncio.run(_show(args.days, args.date))
    except HeatmapError as e:
        print(f"Error: {e}")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
