"""Tests for data models."""

from datetime import datetime

import pytest
from pydantic import ValidationError

from docchunk.models import (
    BlockType,
    Chunk,
    ChunkDraft,
    ChunksOutput,
    ContentBlock,
    Document,
    FigureEntry,
    FigureRef,
    QualityGate,
    ValidationReport,
    make_chunk_id,
)


def _draft(**overrides) -> ChunkDraft:
    data = {
        "document_id": "rhoton",
        "breadcrumb": ["THE CEREBRAL VEINS"],
        "breadcrumb_text": "[Context: THE CEREBRAL VEINS]",
        "content": "The cerebral veins drain the brain.",
        "content_with_context": (
            "[Context: THE CEREBRAL VEINS]\n\nThe cerebral veins drain the brain."
        ),
        "page_numbers": [1],
        "source_block_ids": ["/page/0/Text/1"],
        "parent_section_id": "/page/0/SectionHeader/0",
        "token_count": 17,
        "character_count": 35,
    }
    data.update(overrides)
    return ChunkDraft(**data)


class TestDocumentModels:
    def test_block_section_id_from_parent(self) -> None:
        block = ContentBlock(
            id="/page/0/Text/1",
            block_type=BlockType.TEXT,
            content="Body.",
            parent_hierarchy=["h1", "h2"],
        )
        assert block.section_id == "h2"

    def test_explicit_section_id_kept(self) -> None:
        block = ContentBlock(
            id="b", block_type=BlockType.TEXT, parent_hierarchy=["h1"], section_id="custom"
        )
        assert block.section_id == "custom"

    def test_block_type_from_string(self) -> None:
        block = ContentBlock.model_validate({"id": "b", "block_type": "figure_caption"})
        assert block.block_type is BlockType.FIGURE_CAPTION

    def test_unknown_block_type_rejected(self) -> None:
        with pytest.raises(ValidationError):
            ContentBlock.model_validate({"id": "b", "block_type": "table"})

    def test_processable(self) -> None:
        assert ContentBlock(id="b", block_type=BlockType.TEXT, content="x").is_processable
        assert ContentBlock(id="b", block_type=BlockType.PAGE_HEADER, content="x").is_processable
        assert not ContentBlock(id="b", block_type=BlockType.TEXT, content=" \n").is_processable
        assert not ContentBlock(
            id="b", block_type=BlockType.SECTION_HEADER, content="Header"
        ).is_processable

    def test_page_number_propagates_to_blocks(self) -> None:
        document = Document.model_validate(
            {
                "id": "doc",
                "pages": [
                    {
                        "page_number": 7,
                        "blocks": [
                            {"id": "a", "block_type": "text", "content": "x"},
                            {"id": "b", "block_type": "text", "content": "y", "page_number": 2},
                        ],
                    }
                ],
            }
        )
        pages = [block.page_number for block in document.iter_blocks()]
        assert pages == [7, 2]

    def test_iter_blocks_in_order(self) -> None:
        document = Document.model_validate(
            {
                "id": "doc",
                "pages": [
                    {"page_number": 0, "blocks": [{"id": "a", "block_type": "text"}]},
                    {"page_number": 1, "blocks": [{"id": "b", "block_type": "text"}]},
                ],
            }
        )
        assert [b.id for b in document.iter_blocks()] == ["a", "b"]


class TestFigureModels:
    def test_figure_entry_defaults(self) -> None:
        entry = FigureEntry(figure_id="Fig. 4.1")
        assert entry.status == "mapped"
        assert entry.image_path is None
        assert entry.referencing_blocks == []

    def test_figure_ref_is_frozen(self) -> None:
        ref = FigureRef(figure_id="Fig. 4.1")
        with pytest.raises(ValidationError):
            ref.figure_id = "Fig. 4.2"  # type: ignore[misc]


class TestChunk:
    def test_chunk_id_format(self) -> None:
        assert make_chunk_id("rhoton", 42) == "rhoton-chunk-0042"
        assert make_chunk_id("rhoton", 12345) == "rhoton-chunk-12345"

    def test_finalize_draft(self) -> None:
        chunk = _draft().finalize(3, previous_chunk_id="rhoton-chunk-0002")
        assert chunk.chunk_id == "rhoton-chunk-0003"
        assert chunk.sequence_number == 3
        assert chunk.previous_chunk_id == "rhoton-chunk-0002"
        assert chunk.next_chunk_id is None
        assert chunk.is_table is False
        assert chunk.contains_abbreviations is False

    def test_context_formula_enforced(self) -> None:
        with pytest.raises(ValidationError):
            _draft(content_with_context="wrong").finalize(0)

    def test_empty_breadcrumb_rejected(self) -> None:
        with pytest.raises(ValidationError):
            _draft(breadcrumb=[])

    def test_empty_source_ids_rejected(self) -> None:
        with pytest.raises(ValidationError):
            _draft(source_block_ids=[])

    def test_chunk_is_frozen(self) -> None:
        chunk = _draft().finalize(0)
        with pytest.raises(ValidationError):
            chunk.content = "changed"  # type: ignore[misc]

    def test_evolve_revalidates(self) -> None:
        chunk = _draft().finalize(0)
        with pytest.raises(ValidationError):
            chunk.evolve(content="changed")

    def test_evolve_returns_new_chunk(self) -> None:
        chunk = _draft().finalize(0)
        evolved = chunk.evolve(overlap_tokens=5)
        assert evolved.overlap_tokens == 5
        assert chunk.overlap_tokens == 0

    def test_serialization_roundtrip(self) -> None:
        chunk = _draft(figure_references=[FigureRef(figure_id="Fig. 4.1")]).finalize(0)
        restored = Chunk.model_validate_json(chunk.model_dump_json())
        assert restored == chunk


class TestOutputModels:
    def test_chunks_output_timestamp(self) -> None:
        output = ChunksOutput(document_id="rhoton", total_chunks=0)
        assert isinstance(output.generated_at, datetime)
        assert output.chunks == []

    def test_report_gate_lookup(self) -> None:
        gate = QualityGate(name="schema_validation", status="PASS", value="valid", threshold="valid")
        report = ValidationReport(overall_status="PASS", gates=[gate])
        assert report.passed
        assert report.gate("schema_validation") == gate
        assert gate.passed

    def test_invalid_gate_status_rejected(self) -> None:
        with pytest.raises(ValidationError):
            QualityGate(name="x", status="MAYBE", value=1, threshold=1)
