"""Folding undersized chunks into same-section neighbours."""

import logging
from collections.abc import Sequence

from docchunk.chunking.sections import is_same_section
from docchunk.chunking.tokens import TokenEstimator
from docchunk.config import ChunkingConfig
from docchunk.models.chunk import Chunk, with_context

logger = logging.getLogger(__name__)

MERGE_SEPARATOR = "\n\n"


def merge_small_chunks(
    chunks: Sequence[Chunk], config: ChunkingConfig, estimator: TokenEstimator
) -> list[Chunk]:
    """Merge chunks below ``min_tokens`` with an adjacent chunk.

    Pass 1 folds each small chunk backward into the preceding result chunk.
    Pass 2 folds any small chunk still standing (typically one that opens a
    section) forward into its successor. In both passes the two chunks must
    share a section, neither may be a figure caption, and their summed token
    counts must fit ``max_tokens``.

    Ids and links of the returned chunks are stale; relink afterwards.

    Args:
        chunks: Chunk sequence after overlap.
        config: ChunkingConfig with min_tokens and max_tokens.
        estimator: Shared token estimator.

    Returns:
        A new, possibly shorter, sequence.
    """
    backward: list[Chunk] = []
    for chunk in chunks:
        if (
            chunk.token_count < config.min_tokens
            and backward
            and _can_merge(backward[-1], chunk, config)
        ):
            backward[-1] = combine_chunks(backward[-1], chunk, estimator)
            continue
        backward.append(chunk)

    forward: list[Chunk] = []
    for chunk in backward:
        if (
            forward
            and forward[-1].token_count < config.min_tokens
            and _can_merge(forward[-1], chunk, config)
        ):
            forward[-1] = combine_chunks(forward[-1], chunk, estimator)
            continue
        forward.append(chunk)

    if len(forward) != len(chunks):
        logger.info("Merged %d chunks into %d", len(chunks), len(forward))
    return forward


def _can_merge(first: Chunk, second: Chunk, config: ChunkingConfig) -> bool:
    return (
        is_same_section(first, second)
        and not first.is_figure_caption
        and not second.is_figure_caption
        and first.token_count + second.token_count <= config.max_tokens
    )


def combine_chunks(first: Chunk, second: Chunk, estimator: TokenEstimator) -> Chunk:
    """Append ``second`` to ``first``, keeping ``first``'s breadcrumb and flags.

    Source ids and figure references are unioned in order without
    duplicates, page numbers are unioned and sorted, and counts are
    recomputed from the merged text.
    """
    content = f"{first.content}{MERGE_SEPARATOR}{second.content}"
    content_with_context = with_context(first.breadcrumb_text, content)

    source_block_ids = list(dict.fromkeys([*first.source_block_ids, *second.source_block_ids]))
    seen_figures = {ref.figure_id for ref in first.figure_references}
    figure_references = list(first.figure_references)
    for ref in second.figure_references:
        if ref.figure_id not in seen_figures:
            seen_figures.add(ref.figure_id)
            figure_references.append(ref)

    return first.evolve(
        content=content,
        content_with_context=content_with_context,
        source_block_ids=source_block_ids,
        page_numbers=sorted({*first.page_numbers, *second.page_numbers}),
        figure_references=figure_references,
        token_count=estimator.estimate(content_with_context),
        character_count=len(content),
    )
