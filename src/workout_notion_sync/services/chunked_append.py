"""Deliver a block sequence to Notion within the per-request block limit."""
import logging
from typing import Callable, List, Sequence, TypeVar

from workout_notion_sync.models import Block

logger = logging.getLogger(__name__)

H = TypeVar("H")

# Notion rejects page-create and append-children requests carrying more blocks than this.
NOTION_MAX_BLOCKS_PER_REQUEST = 100


def chunk_blocks(blocks: Sequence[Block], size: int = NOTION_MAX_BLOCKS_PER_REQUEST) -> List[List[Block]]:
    """Split blocks into consecutive groups of at most `size`, preserving order."""
    return [list(blocks[i:i + size]) for i in range(0, len(blocks), size)]


def deliver(
    blocks: Sequence[Block],
    create_page: Callable[[List[Block]], H],
    append_page: Callable[[H, List[Block]], None],
) -> H:
    """
    Create a page with the first batch of blocks, then append the rest.

    Calls run strictly in sequence. If an append fails the page is left
    partially populated and the exception propagates; the whole command has
    to be re-run.

    Args:
        blocks: Full ordered block sequence
        create_page: Called once with the first (up to 100) blocks, returns a page handle
        append_page: Called once per remaining batch with the page handle

    Returns:
        The handle returned by create_page
    """
    chunks = chunk_blocks(blocks)
    first = chunks[0] if chunks else []

    handle = create_page(first)
    logger.info(f"Created page with {len(first)} blocks, {len(chunks[1:])} append batches pending")

    for index, chunk in enumerate(chunks[1:], start=1):
        append_page(handle, chunk)
        logger.info(f"Appended batch {index}/{len(chunks) - 1} ({len(chunk)} blocks)")

    return handle
