"""
Heatmap blocks: one rendered heatmap per block id.

Wires the git log reader, the aggregator, the layout engine and the
selection controller together for each render pass.
"""

from dataclasses import dataclass
from datetime import date
from functools import partial
from typing import Optional

from git_heatmap.colors import palette_for
from git_heatmap.commit_parser import parse_counts
from git_heatmap.config import get_default_theme, get_repo_path, parse_block_config
from git_heatmap.controller import DetailRequest, HeatmapController, InputSurface, KeyEvent
from git_heatmap.detail_panel import DetailPanel
from git_heatmap.errors import InvalidVaultLocation, NoHistoryAvailable
from git_heatmap.git_log import GitLogReader
from git_heatmap.layout import HeatmapLayout, build_layout
from git_heatmap.log import get_logger
from git_heatmap.renderer import render_svg_model
from git_heatmap.storage import SettingsStorage

logger = get_logger(__name__)


@dataclass
class HeatmapBlock:
    """A single rendered heatmap and its selection state."""

    block_id: str
    theme: str
    display_days: int
    surface: InputSurface
    layout: Optional[HeatmapLayout] = None
    controller: Optional[HeatmapController] = None
    svg: Optional[dict] = None
    error: Optional[str] = None

    @property
    def panel(self) -> Optional[DetailPanel]:
        return self.controller.panel if self.controller else None

    def to_dict(self) -> dict:
        data = {
            "block_id": self.block_id,
            "theme": self.theme,
            "display_days": self.display_days,
            "error": self.error,
        }
        if self.layout is not None:
            data["grid"] = {
                "start": self.layout.start_date.isoformat(),
                "end": self.layout.end_date.isoformat(),
                "total_weeks": self.layout.total_weeks,
                "start_weekday": self.layout.start_weekday,
                "max_count": self.layout.max_count,
                "total_commits": self.layout.total_commits,
                "days": self.layout.days(),
            }
            data["month_labels"] = [
                {"col": label.col, "text": label.text} for label in self.layout.month_labels
            ]
        if self.controller is not None:
            data["selection"] = self.controller.to_dict()
            data["panel"] = self.controller.panel.to_dict()
        return data


class HeatmapService:
    """Renders heatmap blocks and routes selection input to them."""

    def __init__(
        self,
        storage: Optional[SettingsStorage] = None,
        reader: Optional[GitLogReader] = None,
        today: Optional[date] = None,
    ):
        """
        Args:
            storage: Settings storage for the default window
            reader: Git log reader (default: one for the configured repo)
            today: Override for today's date (for testing)
        """
        self.storage = storage or SettingsStorage()
        self.reader = reader
        self.today = today
        self.blocks: dict[str, HeatmapBlock] = {}

    def _get_reader(self) -> GitLogReader:
        if self.reader is None:
            self.reader = GitLogReader(get_repo_path())
        return self.reader

    async def build_layout(self, display_days: int) -> HeatmapLayout:
        """
        Read the history for the window and lay it out.

        Raises:
            NoHistoryAvailable: If git produced no usable output
            InvalidVaultLocation: If git cannot be run in the repository
        """
        today = self.today or date.today()
        raw = await self._get_reader().fetch_daily_counts(display_days, today=today)
        return build_layout(display_days, today, parse_counts(raw))

    async def render_block(
        self, block_id: str, source: str = "", theme: Optional[str] = None
    ) -> HeatmapBlock:
        """
        Render (or re-render) a heatmap block.

        The previous instance for the same block id is disposed first, so
        only one keyboard listener stays attached to the block's surface.

        Args:
            block_id: Identifier of the block in the document
            source: Block configuration text (``days: N``)
            theme: "light" or "dark" (default: configured theme)

        Returns:
            The rendered block; on history errors block.error holds the message
        """
        theme = theme or get_default_theme()
        palette_for(theme)

        display_days = parse_block_config(source, self.storage.get_default_days())

        previous = self.blocks.get(block_id)
        if previous is not None:
            surface = previous.surface
            if previous.controller is not None:
                previous.controller.unbind()
        else:
            surface = InputSurface()

        block = HeatmapBlock(
            block_id=block_id,
            theme=theme,
            display_days=display_days,
            surface=surface,
        )
        self.blocks[block_id] = block

        try:
            layout = await self.build_layout(display_days)
        except (NoHistoryAvailable, InvalidVaultLocation) as e:
            logger.warning("Cannot render block %s: %s", block_id, e)
            block.error = str(e)
            return block

        controller = HeatmapController(
            layout,
            DetailPanel(),
            fetch_commits=partial(self._get_reader().fetch_commits_for_date, strict=True),
        )
        block.layout = layout
        block.controller = controller
        block.svg = render_svg_model(layout, theme)

        # A newer render of the same block started while this one was reading
        if self.blocks.get(block_id) is not block:
            logger.debug("Render of block %s superseded, not binding", block_id)
            controller.select_default()
            return block

        controller.bind(surface)
        await controller.load_details(controller.select_default())
        return block

    def get_block(self, block_id: str) -> Optional[HeatmapBlock]:
        return self.blocks.get(block_id)

    def remove_block(self, block_id: str) -> bool:
        """Dispose a block and release its keyboard listener."""
        block = self.blocks.pop(block_id, None)
        if block is None:
            return False
        if block.controller is not None:
            block.controller.unbind()
        return True

    async def select(self, block: HeatmapBlock, row: int, col: int) -> bool:
        """Pointer activation of a cell."""
        return await block.controller.select_and_load(row, col)

    async def press_key(self, block: HeatmapBlock, event: KeyEvent) -> bool:
        """
        Deliver a key press to the block's surface.

        Returns:
            True if a listener handled the key
        """
        for result in block.surface.dispatch(event):
            if isinstance(result, DetailRequest):
                await block.controller.load_details(result)
        return event.default_prevented
