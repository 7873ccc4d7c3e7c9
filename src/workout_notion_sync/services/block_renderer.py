"""Render parsed sessions into a flat sequence of Notion blocks."""
import logging
from typing import Iterable, List, Optional

from workout_notion_sync.models import Block, BlockKind, RenderedPage
from workout_notion_sync.parsers.models import Section, SectionKind, Session

logger = logging.getLogger(__name__)


def render_section(section: Section) -> List[Block]:
    """
    Blocks for one section.

    Order is fixed: header (if any), then every content line, then every
    embed. Embeds are not interleaved with the lines they came from.
    """
    blocks: List[Block] = []

    if section.kind == SectionKind.LABELED:
        blocks.append(Block(kind=BlockKind.PARAGRAPH, text=section.header))
        blocks.extend(Block(kind=BlockKind.BULLET, text=line) for line in section.content_lines)
    elif section.kind == SectionKind.GROUPED:
        blocks.append(Block(kind=BlockKind.HEADING_MINOR, text=section.header))
        blocks.extend(Block(kind=BlockKind.BULLET, text=line) for line in section.content_lines)
    elif section.kind == SectionKind.FREEFORM:
        blocks.extend(Block(kind=BlockKind.PARAGRAPH, text=line) for line in section.content_lines)
    else:
        raise ValueError(f"Unhandled section kind: {section.kind}")

    blocks.extend(Block(kind=BlockKind.EMBED, url=url) for url in section.video_links)
    return blocks


def render_session(session: Session) -> List[Block]:
    """Blocks for a single session, without a session heading."""
    blocks: List[Block] = []
    for section in session.sections:
        blocks.extend(render_section(section))
    return blocks


def render_sessions(sessions: Iterable[Session]) -> List[Block]:
    """Blocks for several sessions, each introduced by a 'Session {n}' heading."""
    blocks: List[Block] = []
    for session in sessions:
        blocks.append(Block(kind=BlockKind.HEADING_MAJOR, text=f"Session {session.session_number}"))
        blocks.extend(render_session(session))
    return blocks


def build_week_page(title: str, sessions: Iterable[Session], icon: Optional[str] = None) -> RenderedPage:
    """Page holding every session of a grid."""
    blocks = render_sessions(sessions)
    logger.info(f"Rendered {len(blocks)} blocks for page '{title}'")
    return RenderedPage(title=title, icon=icon, blocks=tuple(blocks))


def build_day_page(title: str, session: Session, icon: Optional[str] = None) -> RenderedPage:
    """Page holding one session."""
    blocks = render_session(session)
    logger.info(f"Rendered {len(blocks)} blocks for page '{title}'")
    return RenderedPage(title=title, icon=icon, blocks=tuple(blocks))
