"""Budget-aware recursive splitting of content blocks into chunk drafts."""

import logging
import re

from docchunk.chunking.sentences import split_sentences
from docchunk.chunking.tokens import TokenEstimator
from docchunk.config import ChunkingConfig
from docchunk.models.chunk import CONTEXT_SEPARATOR, ROOT_BREADCRUMB, ChunkDraft, with_context
from docchunk.models.document import BlockType, ContentBlock

logger = logging.getLogger(__name__)

PARAGRAPH_BREAK = re.compile(r"\n\s*\n")
PARAGRAPH_SEPARATOR = "\n\n"
SENTENCE_SEPARATOR = " "
WORD_SEPARATOR = " "


class TokenAccumulator:
    """Greedily collects text items until the next one would overflow a budget.

    ``add`` returns the flushed content when the incoming item did not fit,
    after starting a fresh run with that item. An item is always accepted
    into an empty run, so a single oversized item still makes progress.

    Args:
        budget: Token budget for one run.
        separator: String placed between items.
        estimator: Token estimator used for items and the separator.
    """

    def __init__(self, budget: int, separator: str, estimator: TokenEstimator) -> None:
        self._budget = budget
        self._separator = separator
        self._separator_tokens = estimator.estimate(separator)
        self._estimator = estimator
        self._items: list[str] = []
        self._tokens = 0

    def add(self, item: str) -> str | None:
        item_tokens = self._estimator.estimate(item)
        added = item_tokens + self._separator_tokens if self._items else item_tokens

        if self._items and self._tokens + added > self._budget:
            flushed = self.flush()
            self._items.append(item)
            self._tokens = item_tokens
            return flushed

        self._items.append(item)
        self._tokens += added
        return None

    def flush(self) -> str | None:
        if not self._items:
            return None
        content = self._separator.join(self._items)
        self._items = []
        self._tokens = 0
        return content


class BlockSplitter:
    """Splits one content block into token-bounded chunk drafts.

    Splitting strategy (priority order):
    1. Whole block, if it fits the budget left after the breadcrumb
    2. Paragraphs (blank-line separated), greedily packed
    3. Sentences, for any paragraph that alone exceeds the budget
    4. Words, for any sentence that alone exceeds the budget

    Args:
        config: ChunkingConfig with max_tokens and hard_max_tokens.
        estimator: Shared token estimator for this pipeline run.
    """

    def __init__(self, config: ChunkingConfig, estimator: TokenEstimator) -> None:
        self._config = config
        self._estimator = estimator

    def split(
        self,
        block: ContentBlock,
        breadcrumb: list[str],
        breadcrumb_text: str,
        document_id: str,
    ) -> list[ChunkDraft]:
        """Split a block into one or more chunk drafts.

        Args:
            block: The block to split. Must have non-blank content.
            breadcrumb: Resolved ancestor labels (may be empty).
            breadcrumb_text: Formatted breadcrumb context line.
            document_id: Owning document id.

        Returns:
            Non-empty list of drafts in reading order.
        """
        content = block.content.strip()
        budget = self.available_tokens(breadcrumb_text)

        if self._estimator.estimate(content) <= budget:
            pieces = [content]
        else:
            paragraphs = [p.strip() for p in PARAGRAPH_BREAK.split(content) if p.strip()]
            if len(paragraphs) > 1:
                pieces = self._split_paragraphs(paragraphs, budget)
            else:
                pieces = self._split_sentences(content, budget)

        drafts = [
            self._make_draft(piece, block, breadcrumb, breadcrumb_text, document_id)
            for piece in pieces
        ]
        for draft in drafts:
            if draft.token_count > self._config.hard_max_tokens:
                logger.warning(
                    "Block %s produced a %d-token chunk; a single word exceeds the budget",
                    block.id,
                    draft.token_count,
                )
        return drafts

    def available_tokens(self, breadcrumb_text: str) -> int:
        """Token budget for content once the breadcrumb prefix is paid for."""
        overhead = self._estimator.estimate(breadcrumb_text + CONTEXT_SEPARATOR)
        return max(self._config.max_tokens - overhead, 1)

    def _split_paragraphs(self, paragraphs: list[str], budget: int) -> list[str]:
        """Pack paragraphs greedily; oversized ones go to sentence splitting.

        Args:
            paragraphs: Non-empty, stripped paragraphs.
            budget: Token budget per piece.

        Returns:
            Content pieces in order.
        """
        pieces: list[str] = []
        accumulator = TokenAccumulator(budget, PARAGRAPH_SEPARATOR, self._estimator)

        for paragraph in paragraphs:
            if self._estimator.estimate(paragraph) > budget:
                _append(pieces, accumulator.flush())
                pieces.extend(self._split_sentences(paragraph, budget))
                continue
            _append(pieces, accumulator.add(paragraph))

        _append(pieces, accumulator.flush())
        return pieces

    def _split_sentences(self, text: str, budget: int) -> list[str]:
        """Pack sentences greedily; oversized ones go to word splitting."""
        pieces: list[str] = []
        accumulator = TokenAccumulator(budget, SENTENCE_SEPARATOR, self._estimator)

        for sentence in split_sentences(text):
            if self._estimator.estimate(sentence) > budget:
                _append(pieces, accumulator.flush())
                pieces.extend(self._split_words(sentence, budget))
                continue
            _append(pieces, accumulator.add(sentence))

        _append(pieces, accumulator.flush())
        return pieces

    def _split_words(self, text: str, budget: int) -> list[str]:
        """Last resort: pack whitespace-separated words. Never splits a word."""
        pieces: list[str] = []
        accumulator = TokenAccumulator(budget, WORD_SEPARATOR, self._estimator)

        for word in text.split():
            _append(pieces, accumulator.add(word))

        _append(pieces, accumulator.flush())
        return pieces

    def _make_draft(
        self,
        content: str,
        block: ContentBlock,
        breadcrumb: list[str],
        breadcrumb_text: str,
        document_id: str,
    ) -> ChunkDraft:
        content_with_context = with_context(breadcrumb_text, content)
        return ChunkDraft(
            document_id=document_id,
            breadcrumb=list(breadcrumb) or [ROOT_BREADCRUMB],
            breadcrumb_text=breadcrumb_text,
            content=content,
            content_with_context=content_with_context,
            page_numbers=[block.page_number + 1],
            source_block_ids=[block.id],
            parent_section_id=block.parent_hierarchy[-1] if block.parent_hierarchy else "",
            token_count=self._estimator.estimate(content_with_context),
            character_count=len(content),
            overlap_tokens=0,
            is_figure_caption=block.block_type == BlockType.FIGURE_CAPTION,
        )


def _append(pieces: list[str], piece: str | None) -> None:
    if piece:
        pieces.append(piece)
