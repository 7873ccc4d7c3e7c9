"""Notion client wrapper for creating workout pages and reading them back."""

import logging
from typing import Any, Dict, List, Optional, Sequence

from notion_client import Client

from workout_notion_sync.config import SyncConfig
from workout_notion_sync.errors import RemoteCallError
from workout_notion_sync.models import Block, ExtractedBlock, RenderedPage
from workout_notion_sync.services.chunked_append import NOTION_MAX_BLOCKS_PER_REQUEST, deliver
from workout_notion_sync.services import reverse_extractor

logger = logging.getLogger(__name__)


class NotionService:
    """Wrapper around notion-client for one parent page."""

    def __init__(self, token: str, parent_page_id: str, client: Optional[Client] = None):
        self.parent_page_id = parent_page_id
        self.client = client or Client(auth=token)

    @classmethod
    def from_config(cls, config: SyncConfig) -> "NotionService":
        return cls(token=config.notion.token, parent_page_id=config.notion.parent_page_id)

    # ------------------------------------------------------------------
    # Raw API calls
    # ------------------------------------------------------------------

    def create_page(self, title: str, blocks: Sequence[Block], icon: Optional[str] = None) -> str:
        """Create a child page of the parent page with up to 100 initial blocks."""
        if len(blocks) > NOTION_MAX_BLOCKS_PER_REQUEST:
            raise ValueError(
                f"create_page accepts at most {NOTION_MAX_BLOCKS_PER_REQUEST} blocks, got {len(blocks)}"
            )

        request: Dict[str, Any] = {
            "parent": {"type": "page_id", "page_id": self.parent_page_id},
            "properties": {
                "title": {"title": [{"text": {"content": title}}]},
            },
            "children": [block.to_notion() for block in blocks],
        }
        if icon:
            request["icon"] = {"type": "emoji", "emoji": icon}

        try:
            page = self.client.pages.create(**request)
        except Exception as e:
            raise RemoteCallError("create_page", title, e) from e

        logger.info(f"Created Notion page '{title}': {page['id']}")
        return page["id"]

    def append_children(self, page_id: str, blocks: Sequence[Block]) -> None:
        """Append up to 100 blocks to an existing page."""
        if len(blocks) > NOTION_MAX_BLOCKS_PER_REQUEST:
            raise ValueError(
                f"append_children accepts at most {NOTION_MAX_BLOCKS_PER_REQUEST} blocks, got {len(blocks)}"
            )
        try:
            self.client.blocks.children.append(
                block_id=page_id,
                children=[block.to_notion() for block in blocks],
            )
        except Exception as e:
            raise RemoteCallError("append_children", page_id, e) from e

    def list_children(self, block_id: str, cursor: Optional[str] = None) -> Dict[str, Any]:
        """One page of a block's children."""
        kwargs: Dict[str, Any] = {"block_id": block_id, "page_size": NOTION_MAX_BLOCKS_PER_REQUEST}
        if cursor:
            kwargs["start_cursor"] = cursor
        try:
            return self.client.blocks.children.list(**kwargs)
        except Exception as e:
            raise RemoteCallError("list_children", block_id, e) from e

    def find_child_page_by_title(self, title: str, parent_id: Optional[str] = None) -> Optional[str]:
        """ID of the first child page with the given title, or None."""
        parent_id = parent_id or self.parent_page_id
        for block in reverse_extractor.fetch_children(parent_id, self.list_children):
            if block.get("type") != "child_page":
                continue
            if block.get("child_page", {}).get("title") == title:
                return block["id"]
        return None

    # ------------------------------------------------------------------
    # Workflows
    # ------------------------------------------------------------------

    def publish(self, page: RenderedPage) -> str:
        """Create the page and stream its blocks in batches of 100."""
        return deliver(
            page.blocks,
            create_page=lambda first: self.create_page(page.title, first, icon=page.icon),
            append_page=self.append_children,
        )

    def extract_page(self, page_id: str) -> List[ExtractedBlock]:
        """Every block on a page, in document order."""
        return reverse_extractor.extract_tree(page_id, self.list_children)
