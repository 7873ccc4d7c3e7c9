"""
Read a Notion page back into text for the post-workout feedback flow.

Three steps:
- extract_tree walks the page's block tree in document order
- to_markdown flattens the blocks into markdown-like lines
- split_by_sections buckets those lines under Overall / Lower Body / Upper Body
"""

import re
import logging
from typing import Any, Callable, Dict, Iterator, List, Optional, Tuple

from workout_notion_sync.models import ExtractedBlock, WorkoutContent

logger = logging.getLogger(__name__)

# list_children(block_id, start_cursor) -> {"results": [...], "has_more": bool, "next_cursor": str | None}
ListChildren = Callable[[str, Optional[str]], Dict[str, Any]]

MARKDOWN_PREFIXES = {
    "heading_1": "# ",
    "heading_2": "## ",
    "heading_3": "### ",
    "bulleted_list_item": "- ",
    "numbered_list_item": "1. ",
    "paragraph": "",
}

INDENT = "  "

OVERALL_HEADING_RE = re.compile(r'^#{1,6}\s*overall', re.IGNORECASE)
OVERALL_WORD_RE = re.compile(r'^overall\b', re.IGNORECASE)
LOWER_BODY_RE = re.compile(r'^###\s*lower body\b', re.IGNORECASE)
UPPER_BODY_RE = re.compile(r'^###\s*upper body\b', re.IGNORECASE)

OVERALL_LABEL = "### Overall Notes:"
LOWER_BODY_LABEL = "### Lower Body:"
UPPER_BODY_LABEL = "### Upper Body:"


def fetch_children(block_id: str, list_children: ListChildren) -> List[Dict[str, Any]]:
    """All direct children of a block, following pagination cursors to the end."""
    children: List[Dict[str, Any]] = []
    cursor: Optional[str] = None

    while True:
        response = list_children(block_id, cursor)
        children.extend(response.get("results", []))
        if not response.get("has_more"):
            break
        cursor = response.get("next_cursor")
        if not cursor:
            break

    return children


def extract_tree(root_block_id: str, list_children: ListChildren) -> List[ExtractedBlock]:
    """
    Every block under root_block_id in document order.

    Each block's descendants follow it contiguously at increasing depth.
    Uses an explicit stack of sibling iterators instead of recursion, so deep
    nesting cannot exhaust the interpreter stack.
    """
    blocks: List[ExtractedBlock] = []
    stack: List[Tuple[Iterator[Dict[str, Any]], int]] = [
        (iter(fetch_children(root_block_id, list_children)), 0)
    ]

    while stack:
        siblings, depth = stack[-1]
        raw = next(siblings, None)
        if raw is None:
            stack.pop()
            continue

        block = ExtractedBlock.from_notion(raw, depth)
        blocks.append(block)

        if block.has_children:
            stack.append((iter(fetch_children(block.id, list_children)), depth + 1))

    logger.info(f"Extracted {len(blocks)} blocks from {root_block_id}")
    return blocks


def to_markdown(blocks: List[ExtractedBlock]) -> str:
    """
    Flatten extracted blocks into markdown lines.

    Embeds are skipped, as is any block type without an entry in
    MARKDOWN_PREFIXES. Headings and list items without text are skipped;
    an empty paragraph still yields an empty line so spacing survives.
    """
    lines: List[str] = []

    for block in blocks:
        if block.type == "embed":
            continue

        prefix = MARKDOWN_PREFIXES.get(block.type)
        if prefix is None:
            # Unmapped types (images, dividers, child pages...) carry no feedback text
            logger.debug(f"Skipping unsupported block type: {block.type}")
            continue

        text = block.first_text()
        if text is None:
            if block.type == "paragraph":
                lines.append("")
            continue

        lines.append(f"{INDENT * block.depth}{prefix}{text}")

    return "\n".join(lines)


def split_by_sections(markdown: str) -> WorkoutContent:
    """
    Bucket markdown lines under the Overall, Lower Body and Upper Body headers.

    Lines before the first recognised header are dropped. Each bucket is
    trimmed; an empty bucket is an empty string.
    """
    overall: List[str] = []
    lower: List[str] = []
    upper: List[str] = []
    current: Optional[List[str]] = None

    for line in markdown.split("\n"):
        stripped = line.strip()

        if OVERALL_HEADING_RE.match(stripped) or OVERALL_WORD_RE.match(stripped):
            current = overall
            if not overall:
                overall.append(OVERALL_LABEL)
            continue

        if LOWER_BODY_RE.match(stripped):
            current = lower
            lower.append(LOWER_BODY_LABEL)
            continue

        if UPPER_BODY_RE.match(stripped):
            current = upper
            upper.append(UPPER_BODY_LABEL)
            continue

        if current is not None:
            current.append(line)

    return WorkoutContent(
        overall_notes="\n".join(overall).strip(),
        lower_body="\n".join(lower).strip(),
        upper_body="\n".join(upper).strip(),
    )
