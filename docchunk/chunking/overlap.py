"""Carrying trailing context from one chunk into the next."""

import logging
from collections.abc import Sequence

from docchunk.chunking.sections import is_same_section
from docchunk.chunking.sentences import last_sentences
from docchunk.chunking.tokens import TokenEstimator
from docchunk.config import ChunkingConfig
from docchunk.models.chunk import Chunk, with_context

logger = logging.getLogger(__name__)


def generate_overlap(
    prev_content: str, sentence_count: int, estimator: TokenEstimator
) -> tuple[str, int]:
    """Return the last ``sentence_count`` sentences of ``prev_content`` and their tokens."""
    overlap = " ".join(last_sentences(prev_content, sentence_count))
    return overlap, estimator.estimate(overlap)


def apply_overlap(
    chunks: Sequence[Chunk], config: ChunkingConfig, estimator: TokenEstimator
) -> list[Chunk]:
    """Prepend each chunk with the tail of its predecessor.

    Overlap is taken from the predecessor's content as it was before this
    pass, never from an already-overlapped value. The first chunk of a
    section and figure-caption chunks receive none. If the result would
    break ``hard_max_tokens`` the overlap is dropped, not truncated.

    Args:
        chunks: The assembled chunk sequence.
        config: ChunkingConfig with overlap_sentences and hard_max_tokens.
        estimator: Shared token estimator.

    Returns:
        A new sequence of the same length.
    """
    result: list[Chunk] = []
    skipped = 0

    for i, chunk in enumerate(chunks):
        prev = chunks[i - 1] if i > 0 else None
        if prev is None or chunk.is_figure_caption or not is_same_section(prev, chunk):
            result.append(_without_overlap(chunk))
            continue

        overlap, overlap_tokens = generate_overlap(
            prev.content, config.overlap_sentences, estimator
        )
        if not overlap:
            result.append(_without_overlap(chunk))
            continue

        content = f"{overlap} {chunk.content}"
        content_with_context = with_context(chunk.breadcrumb_text, content)
        token_count = estimator.estimate(content_with_context)
        if token_count > config.hard_max_tokens:
            skipped += 1
            result.append(_without_overlap(chunk))
            continue

        result.append(
            chunk.evolve(
                content=content,
                content_with_context=content_with_context,
                token_count=token_count,
                character_count=len(content),
                overlap_tokens=overlap_tokens,
            )
        )

    if skipped:
        logger.info("Skipped overlap for %d chunks that would exceed the hard limit", skipped)
    return result


def _without_overlap(chunk: Chunk) -> Chunk:
    return chunk if chunk.overlap_tokens == 0 else chunk.evolve(overlap_tokens=0)
