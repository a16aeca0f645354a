"""
Selection controller for a rendered heatmap.

Tracks the single active cell, moves it with the arrow keys, and asks
the detail panel to load the commits of the selected day.
"""

from dataclasses import dataclass
from typing import Awaitable, Callable, Optional

from git_heatmap.commit_parser import CommitDetail
from git_heatmap.detail_panel import DetailPanel
from git_heatmap.errors import HeatmapError
from git_heatmap.layout import DAYS_PER_WEEK, GridCell, HeatmapLayout
from git_heatmap.log import get_logger

logger = get_logger(__name__)

DIRECTIONS = {
    "up": (-1, 0),
    "down": (1, 0),
    "left": (0, -1),
    "right": (0, 1),
}
ARROW_KEYS = {
    "ArrowUp": "up",
    "ArrowDown": "down",
    "ArrowLeft": "left",
    "ArrowRight": "right",
}
TEXT_INPUT_TAGS = {"input", "textarea"}

CommitFetcher = Callable[[str], Awaitable[list[CommitDetail]]]


@dataclass
class KeyEvent:
    """A key press delivered to an input surface."""

    key: str
    target_tag: Optional[str] = None
    editable: bool = False
    default_prevented: bool = False

    @property
    def in_text_field(self) -> bool:
        tag = (self.target_tag or "").lower()
        return tag in TEXT_INPUT_TAGS or self.editable

    def prevent_default(self) -> None:
        self.default_prevented = True


@dataclass(frozen=True)
class DetailRequest:
    generation: int
    date: str


class InputSurface:
    """Keyboard listeners registered on one rendered heatmap."""

    def __init__(self):
        self._listeners: list[Callable[[KeyEvent], object]] = []

    @property
    def listener_count(self) -> int:
        return len(self._listeners)

    def add_listener(self, listener: Callable[[KeyEvent], object]) -> None:
        self._listeners.append(listener)

    def remove_listener(self, listener: Callable[[KeyEvent], object]) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    def dispatch(self, event: KeyEvent) -> list:
        """Deliver an event to every listener, returning their results."""
        return [listener(event) for listener in list(self._listeners)]


class HeatmapController:
    """Owns the active cell of one heatmap instance."""

    def __init__(
        self,
        layout: HeatmapLayout,
        panel: Optional[DetailPanel] = None,
        fetch_commits: Optional[CommitFetcher] = None,
    ):
        """
        Args:
            layout: Grid the controller navigates
            panel: Detail panel fed by selections
            fetch_commits: Coroutine function returning the commits of a day
        """
        self.layout = layout
        self.panel = panel or DetailPanel()
        self.fetch_commits = fetch_commits
        self.position: Optional[tuple[int, int]] = None
        self.scroll_target: Optional[tuple[int, int]] = None
        self._generation = 0
        self._surface: Optional[InputSurface] = None
        self._listener = self.handle_key

    @property
    def active_cell(self) -> Optional[GridCell]:
        if self.position is None:
            return None
        return self.layout.cell_at(*self.position)

    @property
    def generation(self) -> int:
        return self._generation

    def select(self, row: int, col: int) -> Optional[DetailRequest]:
        """
        Make (row, col) the active cell.

        No-op for unpopulated positions.

        Returns:
            A DetailRequest when the day has commits to load, else None
        """
        cell = self.layout.cell_at(row, col)
        if cell is None:
            return None

        self.position = (row, col)
        self.scroll_target = (row, col)

        self._generation += 1
        self.panel.show(cell.date_str, cell.count, self._generation)

        if cell.count == 0:
            return None
        return DetailRequest(generation=self._generation, date=cell.date_str)

    def select_default(self) -> Optional[DetailRequest]:
        return self.select(*self.layout.default_position)

    def move(self, direction: str) -> Optional[DetailRequest]:
        """
        Move the selection one step, clamped to the grid.

        A move that stays in place or lands on an unpopulated cell is
        rejected and leaves the selection unchanged.
        """
        if self.position is None:
            return None
        d_row, d_col = DIRECTIONS[direction]
        row, col = self.position

        new_row = min(max(row + d_row, 0), DAYS_PER_WEEK - 1)
        new_col = min(max(col + d_col, 0), self.layout.total_weeks - 1)

        if (new_row, new_col) == (row, col):
            return None
        if not self.layout.is_populated(new_row, new_col):
            return None
        return self.select(new_row, new_col)

    def handle_key(self, event: KeyEvent) -> Optional[DetailRequest]:
        """Keyboard listener; ignores typing in text fields."""
        if event.in_text_field:
            return None
        direction = ARROW_KEYS.get(event.key)
        if direction is None:
            return None
        event.prevent_default()
        return self.move(direction)

    def bind(self, surface: InputSurface) -> None:
        """Attach the keyboard listener, detaching any previous one."""
        self.unbind()
        surface.add_listener(self._listener)
        self._surface = surface

    def unbind(self) -> None:
        if self._surface is not None:
            self._surface.remove_listener(self._listener)
            self._surface = None

    @property
    def is_bound(self) -> bool:
        return self._surface is not None

    async def load_details(self, request: Optional[DetailRequest]) -> bool:
        """
        Fetch the commits for a request and hand them to the panel.

        Returns:
            True if the panel was updated, False if the request was stale
        """
        if request is None or self.fetch_commits is None:
            return False

        try:
            commits = await self.fetch_commits(request.date)
        except (HeatmapError, OSError) as e:
            logger.warning("Loading details for %s failed: %s", request.date, e)
            return self.panel.fail(request.generation)

        if request.generation != self._generation:
            logger.debug("Discarding stale details for %s", request.date)
            return False
        return self.panel.apply(request.generation, commits)

    async def select_and_load(self, row: int, col: int) -> bool:
        return await self.load_details(self.select(row, col))

    def to_dict(self) -> dict:
        cell = self.active_cell
        return {
            "position": list(self.position) if self.position else None,
            "date": cell.date_str if cell else None,
            "count": cell.count if cell else None,
        }
