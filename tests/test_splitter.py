"""Tests for the budget-aware block splitter."""

import logging

import pytest

from docchunk.chunking.splitter import BlockSplitter, TokenAccumulator
from docchunk.chunking.tokens import TokenEstimator, estimate_tokens
from docchunk.config import ChunkingConfig
from docchunk.models.document import BlockType, ContentBlock


def _block(
    content: str,
    block_type: BlockType = BlockType.TEXT,
    parent_hierarchy: list[str] | None = None,
    page_number: int = 0,
) -> ContentBlock:
    return ContentBlock(
        id="/page/0/Text/1",
        block_type=block_type,
        content=content,
        parent_hierarchy=parent_hierarchy or ["/page/0/SectionHeader/0"],
        page_number=page_number,
    )


@pytest.fixture
def splitter(config: ChunkingConfig, estimator: TokenEstimator) -> BlockSplitter:
    return BlockSplitter(config, estimator)


# ── Accumulator ───────────────────────────────────────────────────


class TestTokenAccumulator:
    def test_collects_until_budget(self) -> None:
        acc = TokenAccumulator(budget=3, separator=" ", estimator=TokenEstimator())
        assert acc.add("abcd") is None
        assert acc.add("efgh") is None
        assert acc.add("ijkl") == "abcd efgh"
        assert acc.flush() == "ijkl"

    def test_oversized_item_accepted_when_empty(self) -> None:
        acc = TokenAccumulator(budget=1, separator=" ", estimator=TokenEstimator())
        assert acc.add("x" * 40) is None
        assert acc.flush() == "x" * 40

    def test_flush_empty(self) -> None:
        acc = TokenAccumulator(budget=10, separator=" ", estimator=TokenEstimator())
        assert acc.flush() is None


# ── Budget ────────────────────────────────────────────────────────


class TestAvailableTokens:
    def test_subtracts_breadcrumb_overhead(self, splitter: BlockSplitter) -> None:
        # "[Context: THE CEREBRAL VEINS]\n\n" is 31 characters
        assert splitter.available_tokens("[Context: THE CEREBRAL VEINS]") == 512 - 8

    def test_never_below_one(self, estimator: TokenEstimator) -> None:
        config = ChunkingConfig(min_tokens=1, max_tokens=5, hard_max_tokens=10)
        splitter = BlockSplitter(config, estimator)
        assert splitter.available_tokens("[Context: " + "x" * 100 + "]") == 1


# ── Splitting ─────────────────────────────────────────────────────


class TestBlockSplitter:
    def test_small_block_single_chunk(self, splitter: BlockSplitter) -> None:
        block = _block("The cerebral veins drain the brain.")
        drafts = splitter.split(
            block, ["THE CEREBRAL VEINS"], "[Context: THE CEREBRAL VEINS]", "rhoton"
        )

        assert len(drafts) == 1
        draft = drafts[0]
        assert draft.content == "The cerebral veins drain the brain."
        assert draft.breadcrumb == ["THE CEREBRAL VEINS"]
        assert draft.content_with_context == (
            "[Context: THE CEREBRAL VEINS]\n\nThe cerebral veins drain the brain."
        )
        assert draft.token_count == estimate_tokens(draft.content_with_context)
        assert draft.character_count == len(draft.content)
        assert draft.source_block_ids == ["/page/0/Text/1"]
        assert draft.parent_section_id == "/page/0/SectionHeader/0"
        assert draft.overlap_tokens == 0
        assert not draft.is_figure_caption

    def test_strips_content(self, splitter: BlockSplitter) -> None:
        drafts = splitter.split(_block("  padded text \n"), ["A"], "[Context: A]", "doc")
        assert drafts[0].content == "padded text"

    def test_page_number_is_one_based(self, splitter: BlockSplitter) -> None:
        drafts = splitter.split(_block("Text.", page_number=3), ["A"], "[Context: A]", "doc")
        assert drafts[0].page_numbers == [4]

    def test_empty_breadcrumb_uses_root(self, splitter: BlockSplitter) -> None:
        block = ContentBlock(id="b1", block_type=BlockType.TEXT, content="Orphan text.")
        drafts = splitter.split(block, [], "[Context: Document Root]", "doc")
        assert drafts[0].breadcrumb == ["Document Root"]
        assert drafts[0].parent_section_id == ""

    def test_caption_flag(self, splitter: BlockSplitter) -> None:
        block = _block("Fig. 4.1. Veins.", block_type=BlockType.FIGURE_CAPTION)
        drafts = splitter.split(block, ["A"], "[Context: A]", "doc")
        assert drafts[0].is_figure_caption

    def test_exact_budget_fits(self, splitter: BlockSplitter) -> None:
        # root breadcrumb overhead is 26 characters, 7 tokens
        content = "x" * (505 * 4)
        drafts = splitter.split(_block(content), [], "[Context: Document Root]", "doc")
        assert len(drafts) == 1
        assert drafts[0].token_count == 512

    def test_splits_on_paragraphs(self, splitter: BlockSplitter) -> None:
        first = ("Para one sentence. " * 60).strip()
        second = ("Para two sentence. " * 60).strip()
        drafts = splitter.split(
            _block(f"{first}\n\n{second}"), ["Anatomy"], "[Context: Anatomy]", "doc"
        )
        assert [d.content for d in drafts] == [first, second]

    def test_packs_small_paragraphs_together(self, splitter: BlockSplitter) -> None:
        paragraphs = [("Short paragraph text. " * 30).strip() for _ in range(4)]
        drafts = splitter.split(
            _block("\n\n".join(paragraphs)), ["Anatomy"], "[Context: Anatomy]", "doc"
        )
        assert len(drafts) == 2
        assert drafts[0].content == "\n\n".join(paragraphs[:3])

    def test_splits_on_sentences(self, splitter: BlockSplitter) -> None:
        text = "Sentence alpha is here. " * 120
        drafts = splitter.split(_block(text), ["Anatomy"], "[Context: Anatomy]", "doc")

        assert len(drafts) >= 2
        for draft in drafts:
            assert draft.content.endswith("here.")
            assert draft.token_count <= 512

    def test_sentence_split_preserves_text(self, splitter: BlockSplitter) -> None:
        text = " ".join(f"Sentence number {i} talks about veins." for i in range(150))
        drafts = splitter.split(_block(text), ["Anatomy"], "[Context: Anatomy]", "doc")
        assert " ".join(d.content for d in drafts) == text

    def test_oversized_sentence_splits_on_words(self, splitter: BlockSplitter) -> None:
        text = ("lorem " * 400).strip()
        drafts = splitter.split(
            _block(text), ["THE CEREBRAL VEINS"], "[Context: THE CEREBRAL VEINS]", "rhoton"
        )

        assert len(drafts) >= 2
        assert " ".join(d.content for d in drafts).split() == text.split()
        for draft in drafts:
            assert draft.token_count <= 512
            assert draft.breadcrumb_text == "[Context: THE CEREBRAL VEINS]"

    def test_warns_when_single_word_exceeds_hard_max(
        self, splitter: BlockSplitter, caplog: pytest.LogCaptureFixture
    ) -> None:
        text = "x" * 3000 + " tail"
        with caplog.at_level(logging.WARNING):
            drafts = splitter.split(_block(text), ["A"], "[Context: A]", "doc")

        assert drafts[0].content == "x" * 3000
        assert drafts[0].token_count > 600
        assert drafts[1].content == "tail"
        assert "exceeds the budget" in caplog.text

    def test_every_piece_within_budget(self, splitter: BlockSplitter) -> None:
        paragraphs = [
            " ".join(f"Item {i}-{j} describes a tributary." for j in range(40))
            for i in range(5)
        ]
        drafts = splitter.split(_block("\n\n".join(paragraphs)), ["A"], "[Context: A]", "doc")
        assert all(d.token_count <= 512 for d in drafts)
        assert all(d.content for d in drafts)
