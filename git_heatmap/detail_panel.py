"""
Detail panel state for the selected heatmap day.
"""

from typing import Optional

from git_heatmap.commit_parser import CommitDetail

PLACEHOLDER_TEXT = "Select a square"
LOADING_TEXT = "Loading..."
ERROR_TEXT = "Error loading details"


class DetailPanel:
    """
    Shows the selected date, its contribution badge and, for days with
    commits, the list of commits.

    States: placeholder, empty (zero commits), loading, loaded, error.
    Every show() is stamped with a generation; results for an older
    generation are discarded.
    """

    def __init__(self):
        self.state = "placeholder"
        self.date: Optional[str] = None
        self.count = 0
        self.commits: list[CommitDetail] = []
        self.generation = 0

    @property
    def badge(self) -> str:
        return f"{self.count} contributions"

    @property
    def badge_class(self) -> str:
        return "info-count-badge zero" if self.count == 0 else "info-count-badge"

    @property
    def message(self) -> Optional[str]:
        if self.state == "placeholder":
            return PLACEHOLDER_TEXT
        if self.state == "loading":
            return LOADING_TEXT
        if self.state == "error":
            return ERROR_TEXT
        return None

    def show(self, date_str: str, count: int, generation: int) -> None:
        """Display a newly selected day; loading until details arrive."""
        self.date = date_str
        self.count = count
        self.commits = []
        self.generation = generation
        self.state = "empty" if count == 0 else "loading"

    def is_current(self, generation: int) -> bool:
        return generation == self.generation and self.state == "loading"

    def apply(self, generation: int, commits: list[CommitDetail]) -> bool:
        """
        Replace the loading state with the fetched commits.

        Returns:
            False if the result belongs to a superseded selection
        """
        if not self.is_current(generation):
            return False
        self.commits = list(commits)
        self.state = "loaded"
        return True

    def fail(self, generation: int) -> bool:
        if not self.is_current(generation):
            return False
        self.state = "error"
        return True

    def to_dict(self) -> dict:
        return {
            "state": self.state,
            "date": self.date,
            "count": self.count,
            "badge": self.badge if self.date else None,
            "badge_class": self.badge_class,
            "message": self.message,
            "commits": [c.to_dict() for c in self.commits],
        }
