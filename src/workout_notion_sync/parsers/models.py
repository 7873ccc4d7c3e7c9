"""
Parser Models

Pydantic models for the sections and sessions the cell parser produces.
All models are frozen: once a parse call returns, nothing downstream can
mutate them.
"""

from typing import Optional, Tuple
from enum import Enum
from pydantic import BaseModel, Field, model_validator


class SectionKind(str, Enum):
    """How a section was recognised"""
    LABELED = "labeled"    # "A.", "B2." style header
    GROUPED = "grouped"    # "Upper body:" / "Lower body:"
    FREEFORM = "freeform"  # Text seen before any header


class Section(BaseModel):
    """Contiguous span of a cell's lines with a detected kind"""
    kind: SectionKind
    header: Optional[str] = Field(default=None, description="Header line, absent for freeform")
    content_lines: Tuple[str, ...] = Field(default_factory=tuple)
    video_links: Tuple[str, ...] = Field(default_factory=tuple, description="Canonical video URLs")

    class Config:
        frozen = True

    @model_validator(mode="after")
    def _check_header(self) -> "Section":
        if self.kind == SectionKind.FREEFORM:
            if self.header is not None:
                raise ValueError("freeform sections never carry a header")
        elif not self.header:
            raise ValueError(f"{self.kind.value} sections require a non-empty header")
        return self


class Session(BaseModel):
    """All sections parsed from one grid cell"""
    session_number: int = Field(..., ge=1, description="Positional number within the grid")
    sections: Tuple[Section, ...] = Field(default_factory=tuple)

    class Config:
        frozen = True
