"""API routes for parsing workout cells and syncing them to Notion."""

import logging
from typing import Any, List, Optional

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, Field, model_validator

from workout_notion_sync.auth import GoogleSheetsAuth, get_current_user
from workout_notion_sync.config import SyncConfig, bump_week, load_sync_config
from workout_notion_sync.errors import ConfigurationMissingError, NotFoundError, RemoteCallError
from workout_notion_sync.models import RenderedPage, WorkoutContent
from workout_notion_sync.parsers.models import Session
from workout_notion_sync.parsers.section_parser import SectionParser
from workout_notion_sync.services import block_renderer, sync_service
from workout_notion_sync.services.notion_service import NotionService
from workout_notion_sync.services.sheets_service import GoogleSheetsService

logger = logging.getLogger(__name__)

router = APIRouter()

# ---------------------------------------------------------------------------
# Request/Response Models
# ---------------------------------------------------------------------------


class ParseCellRequest(BaseModel):
    text: str = Field(..., max_length=50000)


class ParseGridRequest(BaseModel):
    grid: List[List[Any]]


class RenderRequest(BaseModel):
    """Either a grid (week page) or a single cell text (day page)."""
    title: str = Field(..., min_length=1)
    icon: Optional[str] = None
    grid: Optional[List[List[Any]]] = None
    text: Optional[str] = Field(default=None, max_length=50000)

    @model_validator(mode="after")
    def _one_source(self) -> "RenderRequest":
        if (self.grid is None) == (self.text is None):
            raise ValueError("provide exactly one of 'grid' or 'text'")
        return self


class WeekPageRequest(BaseModel):
    sheet_owner: Optional[str] = None
    sheet_title: Optional[str] = None
    cell_range: Optional[str] = None


class DayPageRequest(BaseModel):
    sheet_owner: Optional[str] = None
    sheet_title: Optional[str] = None
    session_cell: str


class FeedbackRequest(BaseModel):
    page_title: str


class PageCreatedResponse(BaseModel):
    page_id: str
    sessions: int


# ---------------------------------------------------------------------------
# Dependencies
# ---------------------------------------------------------------------------


def get_sync_config() -> SyncConfig:
    try:
        return load_sync_config()
    except ConfigurationMissingError as e:
        logger.error(str(e))
        raise HTTPException(status_code=500, detail=str(e))


def get_notion_service(config: SyncConfig = Depends(get_sync_config)) -> NotionService:
    return NotionService.from_config(config)


def get_sheets_service() -> GoogleSheetsService:
    return GoogleSheetsService(GoogleSheetsAuth())


def _http_error(e: Exception) -> HTTPException:
    if isinstance(e, NotFoundError):
        return HTTPException(status_code=404, detail=str(e))
    if isinstance(e, ValueError):
        return HTTPException(status_code=400, detail=str(e))
    if isinstance(e, RemoteCallError):
        logger.error(f"Remote call failed: {e}")
        return HTTPException(status_code=502, detail=str(e))
    logger.error(str(e))
    return HTTPException(status_code=500, detail=str(e))


# ---------------------------------------------------------------------------
# Routes
# ---------------------------------------------------------------------------


@router.get("/health")
def health():
    return {"status": "ok"}


@router.post("/parse/cell", response_model=Session)
def parse_cell(req: ParseCellRequest, user_id: str = Depends(get_current_user)):
    """Parse one cell's text into session 1."""
    return SectionParser.parse_single_cell(req.text)


@router.post("/parse/grid", response_model=List[Session])
def parse_grid(req: ParseGridRequest, user_id: str = Depends(get_current_user)):
    """Parse a grid of cell values into positional sessions."""
    return SectionParser.parse_sessions(req.grid)


@router.post("/render", response_model=RenderedPage)
def render(req: RenderRequest, user_id: str = Depends(get_current_user)):
    """Render a grid or a single cell into page blocks without publishing."""
    if req.grid is not None:
        sessions = SectionParser.parse_sessions(req.grid)
        return block_renderer.build_week_page(req.title, sessions, icon=req.icon)
    session = SectionParser.parse_single_cell(req.text)
    return block_renderer.build_day_page(req.title, session, icon=req.icon)


@router.post("/render/notion")
def render_notion(req: RenderRequest, user_id: str = Depends(get_current_user)) -> List[dict]:
    """Notion API payloads for the rendered blocks."""
    page: RenderedPage = render(req, user_id)
    return [block.to_notion() for block in page.blocks]


@router.post("/pages/week", response_model=PageCreatedResponse)
def create_week(
    req: WeekPageRequest,
    user_id: str = Depends(get_current_user),
    config: SyncConfig = Depends(get_sync_config),
    notion: NotionService = Depends(get_notion_service),
    sheets: GoogleSheetsService = Depends(get_sheets_service),
):
    sheet_owner = req.sheet_owner or config.defaults.sheet_owner
    sheet_title = req.sheet_title or config.defaults.sheet_title
    cell_range = req.cell_range or config.defaults.cell_range
    if not (sheet_owner and sheet_title and cell_range):
        raise HTTPException(status_code=400, detail="sheet_owner, sheet_title and cell_range are required")

    try:
        sheet = sync_service.locate_sheet(sheets, sheet_owner, sheet_title)
        grid = sheets.get_range(sheet.id, cell_range)
        sessions = sync_service.read_week_sessions(grid)
        page_id = sync_service.create_week_page(notion, sheet_title, sessions, week=config.week + 1)
        bump_week()
    except (NotFoundError, ConfigurationMissingError, RemoteCallError, ValueError) as e:
        raise _http_error(e) from e

    return PageCreatedResponse(page_id=page_id, sessions=len(sessions))


@router.post("/pages/day", response_model=PageCreatedResponse)
def create_day(
    req: DayPageRequest,
    user_id: str = Depends(get_current_user),
    config: SyncConfig = Depends(get_sync_config),
    notion: NotionService = Depends(get_notion_service),
    sheets: GoogleSheetsService = Depends(get_sheets_service),
):
    sheet_owner = req.sheet_owner or config.defaults.sheet_owner
    sheet_title = req.sheet_title or config.defaults.sheet_title
    if not (sheet_owner and sheet_title):
        raise HTTPException(status_code=400, detail="sheet_owner and sheet_title are required")

    try:
        sheet = sync_service.locate_sheet(sheets, sheet_owner, sheet_title)
        cell_text = sync_service.first_cell_text(sheets.get_range(sheet.id, req.session_cell))
        if cell_text is None:
            raise NotFoundError(f"No data found in cell {req.session_cell}")
        session = SectionParser.parse_single_cell(cell_text)
        page_id = sync_service.create_day_page(notion, session)
    except (NotFoundError, ConfigurationMissingError, RemoteCallError, ValueError) as e:
        raise _http_error(e) from e

    return PageCreatedResponse(page_id=page_id, sessions=1)


@router.post("/pages/feedback", response_model=WorkoutContent)
def page_feedback(
    req: FeedbackRequest,
    user_id: str = Depends(get_current_user),
    notion: NotionService = Depends(get_notion_service),
):
    """Read a nested workout page back as Overall / Lower Body / Upper Body text."""
    try:
        return sync_service.collect_feedback(notion, req.page_title)
    except (NotFoundError, RemoteCallError) as e:
        raise _http_error(e) from e
