"""Data models for rendering and reading back Notion pages."""
from enum import Enum
from typing import Any, Dict, Optional, Tuple

from pydantic import BaseModel, Field, model_validator


class BlockKind(str, Enum):
    """Renderable block kinds, mapped onto Notion block types."""
    HEADING_MAJOR = "heading_2"
    HEADING_MINOR = "heading_3"
    PARAGRAPH = "paragraph"
    BULLET = "bulleted_list_item"
    EMBED = "embed"


class Block(BaseModel):
    """A single renderable unit. Embeds carry a url, everything else text."""
    kind: BlockKind
    text: Optional[str] = None
    url: Optional[str] = None

    class Config:
        frozen = True

    @model_validator(mode="after")
    def _check_payload(self) -> "Block":
        if self.kind == BlockKind.EMBED:
            if not self.url:
                raise ValueError("embed blocks require a url")
        elif self.text is None:
            raise ValueError(f"{self.kind.value} blocks require text")
        return self

    def to_notion(self) -> Dict[str, Any]:
        """Notion API payload for this block."""
        if self.kind == BlockKind.EMBED:
            return {
                "object": "block",
                "type": "embed",
                "embed": {"url": self.url},
            }
        return {
            "object": "block",
            "type": self.kind.value,
            self.kind.value: {
                "rich_text": [
                    {"type": "text", "text": {"content": self.text}},
                ],
            },
        }


class RenderedPage(BaseModel):
    """Title, optional icon and the ordered blocks of one Notion page."""
    title: str
    icon: Optional[str] = None
    blocks: Tuple[Block, ...] = Field(default_factory=tuple)

    class Config:
        frozen = True


class ExtractedBlock(BaseModel):
    """A raw Notion block read back from a page, plus its nesting depth."""
    id: str
    type: str
    depth: int = Field(default=0, ge=0)
    has_children: bool = False
    payload: Dict[str, Any] = Field(default_factory=dict)

    class Config:
        frozen = True

    @classmethod
    def from_notion(cls, block: Dict[str, Any], depth: int) -> "ExtractedBlock":
        block_type = block.get("type", "")
        return cls(
            id=block["id"],
            type=block_type,
            depth=depth,
            has_children=bool(block.get("has_children")),
            payload=block.get(block_type) or {},
        )

    def first_text(self) -> Optional[str]:
        """Content of the first rich_text run, if any."""
        rich_text = self.payload.get("rich_text") or []
        if not rich_text:
            return None
        text = rich_text[0].get("text") or {}
        return text.get("content") or None


class WorkoutContent(BaseModel):
    """Feedback text split into the buckets written back to the sheet."""
    overall_notes: str = ""
    lower_body: str = ""
    upper_body: str = ""

    def combined(self) -> str:
        """Non-empty buckets joined by a blank line."""
        parts = [self.overall_notes, self.lower_body, self.upper_body]
        return "\n\n".join(p for p in parts if p)


class SheetInfo(BaseModel):
    """Spreadsheet located through the Drive API."""
    id: str
    name: str
    url: Optional[str] = None
