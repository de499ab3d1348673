"""Chunk construction engine: splitting, overlap, merging and validation."""

from docchunk.chunking.pipeline import ChunkingResult, DocumentChunker
from docchunk.chunking.sentences import split_sentences
from docchunk.chunking.tokens import TokenEstimator, estimate_tokens
from docchunk.chunking.validator import validate_chunks

__all__ = [
    "ChunkingResult",
    "DocumentChunker",
    "TokenEstimator",
    "estimate_tokens",
    "split_sentences",
    "validate_chunks",
]
