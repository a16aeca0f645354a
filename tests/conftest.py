"""Shared fixtures for git-heatmap tests."""

from datetime import date

import pytest

from git_heatmap.commit_parser import CommitDetail, parse_details
from git_heatmap.errors import NoHistoryAvailable
from git_heatmap.service import HeatmapService
from git_heatmap.storage import SettingsStorage

ANCHOR = date(2024, 1, 7)

DAILY_LOG = "\n".join(
    ["2024-01-01"] * 2 + ["2024-01-03"] * 5
) + "\n"

DETAIL_LOG = {
    "2024-01-01": (
        "aaa1111222233334444§§§Initial commit§§§Alice§§§2024-01-01T09:15:00+01:00\n"
        "bbb5555666677778888§§§Add readme§§§Bob§§§2024-01-01T17:40:00+01:00\n"
    ),
    "2024-01-03": "".join(
        f"c{i}c{i}c{i}c{i}c{i}c{i}§§§Change {i}§§§Alice§§§2024-01-03T1{i}:00:00+01:00\n"
        for i in range(5)
    ),
}


class FakeReader:
    """Stand-in for GitLogReader that never spawns git."""

    def __init__(self, daily_log=DAILY_LOG, details=None, fail=False):
        self.daily_log = daily_log
        self.details = DETAIL_LOG if details is None else details
        self.fail = fail
        self.count_calls = []
        self.detail_calls = []

    async def fetch_daily_counts(self, window_days, today=None):
        self.count_calls.append((window_days, today))
        if self.fail:
            raise NoHistoryAvailable("No Git Log")
        return self.daily_log

    async def fetch_commits_for_date(self, day, strict=False):
        day_str = day.isoformat() if isinstance(day, date) else day
        self.detail_calls.append(day_str)
        return parse_details(self.details.get(day_str, ""))


@pytest.fixture
def storage(tmp_path):
    """Settings storage backed by a temporary database."""
    return SettingsStorage(tmp_path / "settings.db")


@pytest.fixture
def reader():
    return FakeReader()


@pytest.fixture
def service(storage, reader):
    """Heatmap service anchored on 2024-01-07 with a fake reader."""
    return HeatmapService(storage=storage, reader=reader, today=ANCHOR)


@pytest.fixture
def sample_commit():
    return CommitDetail(
        hash="abc123def4567890",
        message="Fix bug",
        author="Alice",
        date="2024-01-05T10:00:00",
    )


@pytest.fixture
def failing_reader():
    """Reader whose history query fails with no output."""
    return FakeReader(fail=True)
