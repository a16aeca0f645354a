"""
FastAPI web application for git-heatmap.

Serves the heatmap page and the JSON endpoints used for selection,
keyboard navigation and settings.
"""

from pathlib import Path
from typing import Literal

from fastapi import Depends, FastAPI, HTTPException, Request
from fastapi.responses import HTMLResponse
from fastapi.templating import Jinja2Templates
from pydantic import BaseModel, Field

from git_heatmap import __version__
from git_heatmap.controller import KeyEvent
from git_heatmap.errors import InvalidVaultLocation, NoHistoryAvailable
from git_heatmap.service import HeatmapBlock, HeatmapService

app = FastAPI(
    title="git-heatmap",
    description="Commit activity heatmap for a local git repository",
    version=__version__,
)

templates = Jinja2Templates(directory=Path(__file__).parent / "templates")

DEFAULT_BLOCK_ID = "main"

_service: HeatmapService | None = None


def get_service() -> HeatmapService:
    """Process-wide heatmap service."""
    global _service
    if _service is None:
        _service = HeatmapService()
    return _service


class BlockRender(BaseModel):
    """Request model for rendering a heatmap block."""

    source: str = Field("", max_length=10000, description="Block configuration text")
    theme: Literal["light", "dark"] | None = Field(None, description="Palette variant")


class CellSelect(BaseModel):
    """Request model for pointer activation of a cell."""

    row: int = Field(..., ge=0, le=6, description="Weekday index (0 = Sunday)")
    col: int = Field(..., ge=0, description="Week index")


class KeyPress(BaseModel):
    """Request model for a key press on a heatmap."""

    key: str = Field(..., max_length=32)
    target_tag: str | None = Field(None, max_length=32, description="Tag of the focused element")
    editable: bool = Field(False, description="Focused element is content-editable")


class SettingsUpdate(BaseModel):
    """Request model for updating settings."""

    default_days: int = Field(..., ge=1, description="Default number of days to display")


def _render_fragment(name: str, **context) -> str:
    return templates.get_template(name).render(**context)


def _block_response(block: HeatmapBlock) -> dict:
    data = block.to_dict()
    data["html"] = _render_fragment("_heatmap.html", block=block)
    return data


def _selection_response(block: HeatmapBlock, handled: bool = True) -> dict:
    return {
        "handled": handled,
        "selection": block.controller.to_dict(),
        "panel": block.panel.to_dict(),
        "panel_html": _render_fragment("_detail_panel.html", panel=block.panel),
    }


def _get_rendered_block(service: HeatmapService, block_id: str) -> HeatmapBlock:
    block = service.get_block(block_id)
    if block is None:
        raise HTTPException(status_code=404, detail="Block not found")
    if block.controller is None:
        raise HTTPException(status_code=409, detail=block.error or "Block has no grid")
    return block


@app.get("/health")
def health_check():
    """Health check endpoint."""
    return {"status": "ok"}


@app.get("/", response_class=HTMLResponse)
async def index(
    request: Request,
    days: int | None = None,
    theme: Literal["light", "dark"] | None = None,
    service: HeatmapService = Depends(get_service),
):
    """Render the heatmap page."""
    source = f"days: {days}" if days is not None else ""
    block = await service.render_block(DEFAULT_BLOCK_ID, source, theme)
    return templates.TemplateResponse(request, "index.html", {"block": block})


@app.post("/api/blocks/{block_id}")
async def render_block(
    block_id: str,
    body: BlockRender | None = None,
    service: HeatmapService = Depends(get_service),
):
    """
    Render or re-render a heatmap block.

    Returns:
        JSON with grid, labels, selection, detail panel and an HTML fragment
    """
    if body is None:
        body = BlockRender()
    block = await service.render_block(block_id, body.source, body.theme)
    return _block_response(block)


@app.delete("/api/blocks/{block_id}")
def remove_block(block_id: str, service: HeatmapService = Depends(get_service)):
    """Dispose a rendered block."""
    if not service.remove_block(block_id):
        raise HTTPException(status_code=404, detail="Block not found")
    return {"removed": block_id}


@app.post("/api/blocks/{block_id}/select")
async def select_cell(
    block_id: str,
    body: CellSelect,
    service: HeatmapService = Depends(get_service),
):
    """Select a cell by pointer activation."""
    block = _get_rendered_block(service, block_id)
    await service.select(block, body.row, body.col)
    return _selection_response(block)


@app.post("/api/blocks/{block_id}/keys")
async def press_key(
    block_id: str,
    body: KeyPress,
    service: HeatmapService = Depends(get_service),
):
    """Deliver a key press to a block."""
    block = _get_rendered_block(service, block_id)
    event = KeyEvent(key=body.key, target_tag=body.target_tag, editable=body.editable)
    handled = await service.press_key(block, event)
    return _selection_response(block, handled=handled)


@app.get("/api/history")
async def get_history(
    days: int | None = None,
    service: HeatmapService = Depends(get_service),
):
    """
    Get daily commit counts and intensity levels.

    Returns:
        JSON with one entry per day of the window
    """
    if days is not None and days <= 0:
        raise HTTPException(status_code=422, detail="days must be positive")
    display_days = days or service.storage.get_default_days()

    try:
        layout = await service.build_layout(display_days)
    except InvalidVaultLocation as e:
        raise HTTPException(status_code=500, detail=str(e))
    except NoHistoryAvailable as e:
        raise HTTPException(status_code=502, detail=str(e))

    return {
        "days": layout.days(),
        "period": {
            "start": layout.start_date.isoformat(),
            "end": layout.end_date.isoformat(),
            "total_days": display_days,
        },
        "max_count": layout.max_count,
    }


@app.get("/api/settings")
def get_settings(service: HeatmapService = Depends(get_service)):
    """Get the persisted default display window."""
    return {"default_days": service.storage.get_default_days()}


@app.post("/api/settings")
def set_settings(update: SettingsUpdate, service: HeatmapService = Depends(get_service)):
    """Set the default display window."""
    stored = service.storage.set_default_days(update.default_days)
    return {"default_days": stored}
