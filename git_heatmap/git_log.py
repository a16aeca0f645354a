"""
Git log reader for commit activity.

Runs git as a non-blocking child process scoped to a working directory.
"""

import asyncio
from datetime import date, timedelta
from pathlib import Path
from typing import Optional

from git_heatmap.commit_parser import FIELD_SEPARATOR, CommitDetail, parse_details
from git_heatmap.errors import DetailFetchFailed, InvalidVaultLocation, NoHistoryAvailable
from git_heatmap.log import get_logger

logger = get_logger(__name__)

DETAIL_FORMAT = FIELD_SEPARATOR.join(["%H", "%s", "%an", "%aI"])


class GitLogReader:
    """Reads commit history from a local git repository."""

    def __init__(self, cwd: str | Path, git_executable: str = "git"):
        """
        Initialize the reader.

        Args:
            cwd: Directory git is run in
            git_executable: Name or path of the git binary
        """
        self.cwd = Path(cwd)
        self.git_executable = git_executable

    async def _run(self, args: list[str]) -> tuple[int, str, str]:
        """
        Run git with the given arguments.

        Returns:
            Tuple of (return code, stdout, stderr)

        Raises:
            InvalidVaultLocation: If the directory or the git binary is unusable
        """
        if not self.cwd.is_dir():
            raise InvalidVaultLocation(f"Cannot access repository path: {self.cwd}")

        try:
            process = await asyncio.create_subprocess_exec(
                self.git_executable,
                *args,
                cwd=str(self.cwd),
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
            )
        except OSError as e:
            raise InvalidVaultLocation(f"Cannot run {self.git_executable} in {self.cwd}: {e}")

        stdout, stderr = await process.communicate()
        return (
            process.returncode,
            stdout.decode("utf-8", errors="replace"),
            stderr.decode("utf-8", errors="replace"),
        )

    async def fetch_daily_counts(self, window_days: int, today: Optional[date] = None) -> str:
        """
        Fetch one commit date per line for the trailing window.

        Args:
            window_days: Number of days to look back
            today: Override for today's date (for testing)

        Returns:
            Raw git log output (YYYY-MM-DD per line)

        Raises:
            NoHistoryAvailable: If git failed without producing any output
            InvalidVaultLocation: If git cannot be run in the directory
        """
        if today is None:
            today = date.today()
        since = (today - timedelta(days=window_days)).isoformat()

        returncode, stdout, stderr = await self._run(
            ["log", f"--since={since}", "--date=short", "--format=%ad"]
        )

        if returncode != 0:
            if not stdout:
                logger.warning("git log failed in %s: %s", self.cwd, stderr.strip())
                raise NoHistoryAvailable("No Git Log")
            # Partial output is still usable
            logger.info("git log exited with %s, using partial output", returncode)

        return stdout

    async def _detail_query(self, day: date | str) -> str:
        day_str = day.isoformat() if isinstance(day, date) else day
        try:
            returncode, stdout, stderr = await self._run([
                "log",
                f"--after={day_str} 00:00:00",
                f"--before={day_str} 23:59:59",
                f"--format={DETAIL_FORMAT}",
                "--date=iso",
            ])
        except InvalidVaultLocation as e:
            raise DetailFetchFailed(str(e))

        if returncode != 0:
            raise DetailFetchFailed(
                f"git log for {day_str} failed: {stderr.strip() or returncode}"
            )
        return stdout

    async def fetch_details_for_date(self, day: date | str) -> str:
        """
        Fetch commit records for a single day.

        Never raises: any failure is logged and yields an empty result.

        Args:
            day: Date or YYYY-MM-DD string

        Returns:
            Raw git log output, one separator-delimited record per line
        """
        try:
            return await self._detail_query(day)
        except DetailFetchFailed as e:
            logger.warning("%s", e)
            return ""

    async def fetch_commits_for_date(
        self, day: date | str, strict: bool = False
    ) -> list[CommitDetail]:
        """
        Fetch and parse the commits made on a single day.

        Args:
            day: Date or YYYY-MM-DD string
            strict: Raise DetailFetchFailed instead of returning an empty list

        Returns:
            List of CommitDetail in git log order
        """
        if strict:
            raw = await self._detail_query(day)
        else:
            raw = await self.fetch_details_for_date(day)
        return parse_details(raw, FIELD_SEPARATOR)
