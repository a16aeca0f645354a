"""
Parse git log output into daily counts and commit details.
"""

from dataclasses import dataclass

FIELD_SEPARATOR = "§§§"
DETAIL_FIELDS = 4


@dataclass(frozen=True)
class CommitDetail:
    """A single commit shown in the detail panel."""

    hash: str
    message: str
    author: str
    date: str

    @property
    def short_hash(self) -> str:
        return self.hash[:7]

    @property
    def time_of_day(self) -> str:
        """HH:MM part of the ISO timestamp, or an empty string."""
        _, sep, rest = self.date.partition("T")
        return rest[:5] if sep else ""

    def to_dict(self) -> dict:
        return {
            "hash": self.hash,
            "short_hash": self.short_hash,
            "message": self.message,
            "author": self.author,
            "date": self.date,
            "time": self.time_of_day,
        }


def parse_counts(raw_text: str) -> dict[str, int]:
    """
    Count commits per day.

    Args:
        raw_text: git log output with one YYYY-MM-DD date per line

    Returns:
        Mapping of date string to commit count
    """
    counts: dict[str, int] = {}
    for line in raw_text.splitlines():
        day = line.strip()
        if not day:
            continue
        counts[day] = counts.get(day, 0) + 1
    return counts


def parse_details(raw_text: str, separator: str = FIELD_SEPARATOR) -> list[CommitDetail]:
    """
    Parse one commit per line into CommitDetail records.

    Lines with fewer than four fields are dropped. Order is preserved.

    Args:
        raw_text: git log output formatted as hash, subject, author, ISO date
        separator: Field delimiter used in the log format

    Returns:
        List of CommitDetail in input order
    """
    commits = []
    for line in raw_text.splitlines():
        if not line.strip():
            continue

        parts = line.split(separator)
        if len(parts) < DETAIL_FIELDS:
            continue

        commits.append(CommitDetail(
            hash=parts[0].strip(),
            message=parts[1],
            author=parts[2],
            date=parts[3].strip(),
        ))
    return commits
