"""Chunk data models."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_validator

from docchunk.models.figure import FigureRef

ROOT_BREADCRUMB = "Document Root"
CONTEXT_SEPARATOR = "\n\n"


def make_chunk_id(document_id: str, sequence_number: int) -> str:
    """Build a chunk id such as ``rhoton-chunk-0042``."""
    return f"{document_id}-chunk-{sequence_number:04d}"


def with_context(breadcrumb_text: str, content: str) -> str:
    """Prefix content with its breadcrumb context line."""
    return f"{breadcrumb_text}{CONTEXT_SEPARATOR}{content}"


class ChunkDraft(BaseModel):
    """A chunk under construction, before sequencing and linking.

    Drafts are produced by the splitter and enriched with figure references
    by the assembler; ``finalize`` turns them into immutable ``Chunk``s.
    """

    document_id: str
    breadcrumb: list[str] = Field(min_length=1)
    breadcrumb_text: str
    content: str
    content_with_context: str
    page_numbers: list[int] = Field(default_factory=list)
    source_block_ids: list[str] = Field(min_length=1)
    parent_section_id: str = ""
    figure_references: list[FigureRef] = Field(default_factory=list)
    token_count: int = Field(ge=0)
    character_count: int = Field(ge=0)
    overlap_tokens: int = 0
    is_figure_caption: bool = False
    is_table: bool = False
    contains_abbreviations: bool = False

    def finalize(
        self,
        sequence_number: int,
        previous_chunk_id: str | None = None,
        next_chunk_id: str | None = None,
    ) -> Chunk:
        """Assign sequence and link fields, producing a finished Chunk."""
        return Chunk(
            chunk_id=make_chunk_id(self.document_id, sequence_number),
            sequence_number=sequence_number,
            previous_chunk_id=previous_chunk_id,
            next_chunk_id=next_chunk_id,
            **self.model_dump(),
        )


class Chunk(BaseModel):
    """A self-contained text unit with hierarchical breadcrumb context.

    Chunks are frozen. Pipeline stages derive new chunks through ``evolve``,
    which re-runs validation so the ``content_with_context`` formula is
    checked on every change.
    """

    model_config = ConfigDict(frozen=True)

    chunk_id: str
    document_id: str
    breadcrumb: list[str] = Field(min_length=1)
    breadcrumb_text: str
    content: str
    content_with_context: str
    page_numbers: list[int] = Field(default_factory=list)  # 1-based
    source_block_ids: list[str] = Field(min_length=1)
    sequence_number: int = Field(ge=0)
    previous_chunk_id: str | None = None
    next_chunk_id: str | None = None
    parent_section_id: str = ""
    figure_references: list[FigureRef] = Field(default_factory=list)
    token_count: int = Field(ge=0)
    character_count: int = Field(ge=0)
    overlap_tokens: int = Field(default=0, ge=0)
    is_figure_caption: bool = False
    # Not detected yet; always False.
    is_table: bool = False
    contains_abbreviations: bool = False

    @model_validator(mode="after")
    def _check_context_formula(self) -> Chunk:
        expected = with_context(self.breadcrumb_text, self.content)
        if self.content_with_context != expected:
            raise ValueError(
                f"content_with_context of {self.chunk_id} does not equal "
                "breadcrumb_text + blank line + content"
            )
        return self

    def evolve(self, **changes: Any) -> Chunk:
        """Return a validated copy with ``changes`` applied."""
        data = self.model_dump()
        data.update(changes)
        return Chunk.model_validate(data)


class ChunkIndex(BaseModel):
    """Lookup tables from section, page and figure to chunk ids."""

    document_id: str
    total_chunks: int = Field(ge=0)
    chunks_by_section: dict[str, list[str]] = Field(default_factory=dict)
    chunks_by_page: dict[str, list[str]] = Field(default_factory=dict)
    figure_to_chunks: dict[str, list[str]] = Field(default_factory=dict)


class ChunksOutput(BaseModel):
    """The full chunk set for one document, as written to chunks.json."""

    document_id: str
    generated_at: datetime = Field(default_factory=datetime.now)
    total_chunks: int = Field(ge=0)
    chunks: list[Chunk] = Field(default_factory=list)
