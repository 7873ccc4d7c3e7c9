"""
Sheet <-> Notion workflows.

- create_week_page: sessions of a grid range -> one Notion page
- create_day_page: single cell -> session -> one Notion page
- collect_feedback / post_feedback: nested Notion page -> sectioned text -> cell note
"""

import logging
from datetime import date
from typing import Any, List, Optional, Protocol, Sequence

from workout_notion_sync.errors import NotFoundError
from workout_notion_sync.models import SheetInfo, WorkoutContent
from workout_notion_sync.parsers.models import Session
from workout_notion_sync.parsers.section_parser import SectionParser
from workout_notion_sync.services import block_renderer, reverse_extractor
from workout_notion_sync.services.notion_service import NotionService
from workout_notion_sync.utils import format_day_title, format_week_title

logger = logging.getLogger(__name__)


class CellSource(Protocol):
    def find_sheet(self, owner_email: str, title: str) -> Optional[SheetInfo]: ...

    def get_range(self, spreadsheet_id: str, range_spec: str) -> List[List[Any]]: ...


class CommentSink(Protocol):
    def add_note_to_cell(self, spreadsheet_id: str, cell_reference: str, text: str) -> None: ...


def locate_sheet(source: CellSource, owner_email: str, title: str) -> SheetInfo:
    """find_sheet that raises NotFoundError instead of returning None."""
    logger.info(f'Searching for sheet "{title}" owned by {owner_email}...')
    sheet = source.find_sheet(owner_email, title)
    if sheet is None:
        raise NotFoundError(f'Sheet "{title}" owned by {owner_email} not found')
    logger.info(f"Found sheet: {sheet.name} ({sheet.id})")
    return sheet


def read_week_sessions(grid: Sequence[Sequence[Any]]) -> List[Session]:
    sessions = SectionParser.parse_sessions(grid)
    for session in sessions:
        logger.info(f"Session {session.session_number}: {len(session.sections)} sections")
    return sessions


def create_week_page(
    notion: NotionService,
    sheet_title: str,
    sessions: Sequence[Session],
    week: Optional[int] = None,
    today: Optional[date] = None,
    icon: Optional[str] = None,
) -> str:
    """Publish every session of a week as one page. Returns the page id."""
    title = format_week_title(sheet_title, today or date.today(), week)
    page = block_renderer.build_week_page(title, sessions, icon=icon)
    logger.info(f"Creating Notion page: {title}")
    return notion.publish(page)


def create_day_page(
    notion: NotionService,
    session: Session,
    today: Optional[date] = None,
    icon: Optional[str] = None,
) -> str:
    """Publish one session under a M/D/YYYY title. Returns the page id."""
    title = format_day_title(today or date.today())
    page = block_renderer.build_day_page(title, session, icon=icon)
    logger.info(f"Creating Notion page: {title}")
    return notion.publish(page)


def first_cell_text(grid: Sequence[Sequence[Any]]) -> Optional[str]:
    """Top-left value of a single-cell range, if it is non-empty text."""
    if not grid or not grid[0]:
        return None
    value = grid[0][0]
    if isinstance(value, str) and value:
        return value
    return None


def collect_feedback(notion: NotionService, page_title: str) -> WorkoutContent:
    """Read a nested page under the parent page and split it into feedback buckets."""
    logger.info(f"Searching for nested page: {page_title}")
    page_id = notion.find_child_page_by_title(page_title)
    if page_id is None:
        raise NotFoundError(f'Notion page "{page_title}" not found in parent page')

    blocks = notion.extract_page(page_id)
    markdown = reverse_extractor.to_markdown(blocks)
    return reverse_extractor.split_by_sections(markdown)


def post_feedback(sink: CommentSink, spreadsheet_id: str, cell_reference: str, content: WorkoutContent) -> str:
    """Write the combined feedback as the cell's note. Returns the note text."""
    note = content.combined()
    logger.info(f"Adding workout note to cell {cell_reference}...")
    sink.add_note_to_cell(spreadsheet_id, cell_reference, note)
    return note
