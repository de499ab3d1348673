"""Shared fixtures for the chunking tests."""

from collections.abc import Callable, Sequence

import pytest

from docchunk.chunking.breadcrumb import format_breadcrumb
from docchunk.chunking.tokens import TokenEstimator, estimate_tokens
from docchunk.config import ChunkingConfig
from docchunk.models.chunk import Chunk, with_context
from docchunk.models.figure import FigureRef


def build_chunk(
    content: str = "This is test content for the chunk.",
    chunk_id: str = "doc-chunk-0000",
    sequence_number: int = 0,
    breadcrumb: Sequence[str] = ("Section 1",),
    parent_section_id: str = "section-1",
    source_block_ids: Sequence[str] = ("/page/0/Text/1",),
    page_numbers: Sequence[int] = (1,),
    token_count: int | None = None,
    overlap_tokens: int = 0,
    is_figure_caption: bool = False,
    figure_references: Sequence[FigureRef] = (),
) -> Chunk:
    breadcrumb_text = format_breadcrumb(list(breadcrumb))
    content_with_context = with_context(breadcrumb_text, content)
    return Chunk(
        chunk_id=chunk_id,
        document_id="doc",
        breadcrumb=list(breadcrumb),
        breadcrumb_text=breadcrumb_text,
        content=content,
        content_with_context=content_with_context,
        page_numbers=list(page_numbers),
        source_block_ids=list(source_block_ids),
        sequence_number=sequence_number,
        parent_section_id=parent_section_id,
        figure_references=list(figure_references),
        token_count=estimate_tokens(content_with_context) if token_count is None else token_count,
        character_count=len(content),
        overlap_tokens=overlap_tokens,
        is_figure_caption=is_figure_caption,
    )


@pytest.fixture
def make_chunk() -> Callable[..., Chunk]:
    return build_chunk


@pytest.fixture
def config() -> ChunkingConfig:
    return ChunkingConfig()


@pytest.fixture
def estimator(config: ChunkingConfig) -> TokenEstimator:
    return TokenEstimator.from_config(config)
