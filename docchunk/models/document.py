"""Source document models consumed by the chunking engine."""

from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import BaseModel, Field, model_validator


class BlockType(str, Enum):
    """Kinds of content block produced by the upstream extractor."""

    SECTION_HEADER = "section_header"
    TEXT = "text"
    FIGURE_CAPTION = "figure_caption"
    PAGE_HEADER = "page_header"
    INLINE_MATH = "inline_math"


class ContentBlock(BaseModel):
    """A single typed block of text on a page.

    ``parent_hierarchy`` lists the ids of ancestor section headers, outermost
    first. ``section_id`` defaults to the nearest ancestor (the last entry).
    """

    id: str = Field(min_length=1)  # e.g. "/page/12/Text/3"
    block_type: BlockType
    content: str = ""
    parent_hierarchy: list[str] = Field(default_factory=list)
    page_number: int = Field(default=0, ge=0)  # 0-based
    level: int = 0  # heading level, 0 for non-headers
    section_id: str = ""

    @model_validator(mode="after")
    def _derive_section_id(self) -> ContentBlock:
        if not self.section_id and self.parent_hierarchy:
            self.section_id = self.parent_hierarchy[-1]
        return self

    @property
    def is_processable(self) -> bool:
        """Whether this block contributes chunks (headers feed breadcrumbs only)."""
        if self.block_type == BlockType.SECTION_HEADER:
            return False
        return bool(self.content.strip())


class Page(BaseModel):
    """A page of blocks. Blocks without their own page number inherit it."""

    page_number: int = Field(ge=0)
    blocks: list[ContentBlock] = Field(default_factory=list)

    @model_validator(mode="before")
    @classmethod
    def _propagate_page_number(cls, data: Any) -> Any:
        if isinstance(data, dict) and "page_number" in data:
            blocks = data.get("blocks") or []
            data = dict(data)
            data["blocks"] = [
                {**block, "page_number": data["page_number"]}
                if isinstance(block, dict) and "page_number" not in block
                else block
                for block in blocks
            ]
        return data


class Document(BaseModel):
    """A parsed document tree, as produced by the extraction stage."""

    id: str = Field(min_length=1)
    title: str = ""
    author: str = ""
    pages: list[Page] = Field(default_factory=list)

    def iter_blocks(self):
        """Yield every block in page/block order."""
        for page in self.pages:
            yield from page.blocks
