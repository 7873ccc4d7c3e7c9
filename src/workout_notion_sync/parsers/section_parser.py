"""
Section Parser

Turns the free text of a workout cell into typed sections:
- Labeled blocks ("A.", "B2." headers followed by exercises)
- Upper/lower body groupings ("Upper body:", "Lower body:")
- Freeform lines seen before any header

The parser is permissive: every non-blank line lands in some section or is
dropped as empty, it never raises on malformed text.
"""

import re
import logging
from typing import Any, List, Optional, Sequence

from workout_notion_sync.parsers.models import Section, SectionKind, Session
from workout_notion_sync.services.video_url_normalizer import extract_links, strip_links

logger = logging.getLogger(__name__)


class _OpenSection:
    """Mutable accumulator for the section under the cursor"""

    def __init__(self, kind: SectionKind, header: str):
        self.kind = kind
        self.header = header
        self.content_lines: List[str] = []
        self.video_links: List[str] = []

    def freeze(self) -> Section:
        return Section(
            kind=self.kind,
            header=self.header,
            content_lines=tuple(self.content_lines),
            video_links=tuple(self.video_links),
        )


class SectionParser:
    """Parser for workout cell text"""

    LABELED_HEADER_PATTERN = re.compile(r'^[A-Z]\d*\.')  # "A.", "B2."
    GROUPED_HEADER_PATTERN = re.compile(r'^(upper body|lower body):$', re.IGNORECASE)

    @classmethod
    def parse(cls, cell_text: str) -> List[Section]:
        """
        Parse one cell into ordered sections.

        Args:
            cell_text: Raw multi-line cell value

        Returns:
            Sections in the order their lines appear
        """
        lines = [line.strip() for line in cell_text.split('\n')]
        lines = [line for line in lines if line]

        sections: List[Section] = []
        current: Optional[_OpenSection] = None

        for line in lines:
            if cls.LABELED_HEADER_PATTERN.match(line):
                if current:
                    sections.append(current.freeze())
                current = _OpenSection(SectionKind.LABELED, line)
                logger.debug(f"Labeled header: {line}")
                continue

            if cls.GROUPED_HEADER_PATTERN.match(line):
                if current:
                    sections.append(current.freeze())
                current = _OpenSection(SectionKind.GROUPED, line)
                logger.debug(f"Grouped header: {line}")
                continue

            links = extract_links(line)
            cleaned = strip_links(line)

            if current:
                current.video_links.extend(links)
                if cleaned:
                    current.content_lines.append(cleaned)
            elif cleaned or links:
                # Text before any header stands alone, it never merges into a later section
                sections.append(Section(
                    kind=SectionKind.FREEFORM,
                    content_lines=(cleaned,) if cleaned else (),
                    video_links=tuple(links),
                ))

        if current:
            sections.append(current.freeze())

        return sections

    @classmethod
    def parse_single_cell(cls, cell_text: str) -> Session:
        """Parse a single cell as session 1."""
        return Session(session_number=1, sections=tuple(cls.parse(cell_text)))

    @classmethod
    def parse_sessions(cls, grid: Sequence[Sequence[Any]]) -> List[Session]:
        """
        Parse a grid of cell values, row-major.

        Session numbers are positional: row_index * len(row) + col_index + 1.
        Rows of different length can therefore produce repeated numbers; callers
        that need unique numbers must renumber.

        Non-string and empty cells are skipped, as are cells that yield no sections.
        """
        sessions: List[Session] = []

        for row_index, row in enumerate(grid):
            for col_index, cell in enumerate(row):
                if not isinstance(cell, str) or not cell:
                    continue

                session_number = row_index * len(row) + col_index + 1
                sections = cls.parse(cell)
                if not sections:
                    logger.debug(f"Cell at ({row_index}, {col_index}) produced no sections")
                    continue

                sessions.append(Session(session_number=session_number, sections=tuple(sections)))

        logger.info(f"Parsed {len(sessions)} sessions from {len(grid)} rows")
        return sessions
