"""Data models for the document chunking pipeline."""

from docchunk.models.chunk import (
    Chunk,
    ChunkDraft,
    ChunkIndex,
    ChunksOutput,
    make_chunk_id,
    with_context,
)
from docchunk.models.document import BlockType, ContentBlock, Document, Page
from docchunk.models.figure import FigureEntry, FigureRef
from docchunk.models.validation import QualityGate, ValidationReport, ValidationSummary

__all__ = [
    "BlockType",
    "Chunk",
    "ChunkDraft",
    "ChunkIndex",
    "ChunksOutput",
    "ContentBlock",
    "Document",
    "FigureEntry",
    "FigureRef",
    "Page",
    "QualityGate",
    "ValidationReport",
    "ValidationSummary",
    "make_chunk_id",
    "with_context",
]
