"""End-to-end chunking of one document."""

import logging
import time
from collections.abc import Iterable

from pydantic import BaseModel, ConfigDict, Field

from docchunk.chunking.assembler import ChunkAssembler, relink_chunks
from docchunk.chunking.breadcrumb import build_header_index
from docchunk.chunking.figures import FigureIndex
from docchunk.chunking.index import build_chunk_index
from docchunk.chunking.merger import merge_small_chunks
from docchunk.chunking.overlap import apply_overlap
from docchunk.chunking.schema import check_schema
from docchunk.chunking.splitter import BlockSplitter
from docchunk.chunking.tokens import TokenEstimator
from docchunk.chunking.validator import validate_chunks
from docchunk.config import AppConfig
from docchunk.models.chunk import Chunk, ChunkIndex, ChunksOutput
from docchunk.models.document import BlockType, Document
from docchunk.models.figure import FigureEntry
from docchunk.models.validation import ValidationReport

logger = logging.getLogger(__name__)


def count_source_blocks(document: Document) -> int:
    """Count blocks that produce chunks: non-header blocks with text."""
    return sum(1 for block in document.iter_blocks() if block.is_processable)


def count_figure_captions(document: Document) -> int:
    return sum(
        1 for block in document.iter_blocks() if block.block_type == BlockType.FIGURE_CAPTION
    )


class ChunkingResult(BaseModel):
    """Everything one pipeline run produces."""

    model_config = ConfigDict(frozen=True)

    output: ChunksOutput
    index: ChunkIndex
    report: ValidationReport
    schema_problems: list[str] = Field(default_factory=list)

    @property
    def chunks(self) -> list[Chunk]:
        return self.output.chunks

    @property
    def passed(self) -> bool:
        return self.report.passed


class DocumentChunker:
    """Turns a document tree and its figures into validated chunks.

    Stages run strictly in order, each producing a new chunk sequence:
    assemble -> overlap -> merge -> relink -> index -> validate.

    The token estimate cache is owned by the chunker and reset at the start
    of every run, so separate documents never share cached state.

    Args:
        config: Application configuration; defaults are used when omitted.
    """

    def __init__(self, config: AppConfig | None = None) -> None:
        self._config = config or AppConfig()
        self._estimator = TokenEstimator.from_config(self._config.chunking)

    @property
    def estimator(self) -> TokenEstimator:
        return self._estimator

    def chunk(self, document: Document, figures: Iterable[FigureEntry] = ()) -> ChunkingResult:
        """Run the whole pipeline over one document.

        Args:
            document: The parsed document tree.
            figures: Every figure known for the document.

        Returns:
            ChunkingResult with chunks, index and validation report.
        """
        start = time.perf_counter()
        chunking = self._config.chunking
        self._estimator.clear()

        header_index = build_header_index(document)
        figure_index = FigureIndex(figures, snippet_length=chunking.caption_snippet_length)
        logger.info(
            "Chunking document %s: %d pages, %d headers, %d figures",
            document.id,
            len(document.pages),
            len(header_index),
            len(figure_index),
        )

        assembler = ChunkAssembler(
            BlockSplitter(chunking, self._estimator), figure_index, header_index
        )
        chunks = assembler.assemble(document)
        chunks = apply_overlap(chunks, chunking, self._estimator)
        chunks = merge_small_chunks(chunks, chunking, self._estimator)
        chunks = relink_chunks(chunks)
        logger.info("Final chunk count: %d", len(chunks))

        index = build_chunk_index(chunks, document.id)
        output = ChunksOutput(document_id=document.id, total_chunks=len(chunks), chunks=chunks)

        problems = check_schema(output, index, chunking)
        for problem in problems:
            logger.error("Schema problem: %s", problem)

        report = validate_chunks(
            chunks,
            source_block_count=count_source_blocks(document),
            expected_figure_captions=count_figure_captions(document),
            processing_seconds=time.perf_counter() - start,
            schema_valid=not problems,
            config=self._config.validation,
            limits=chunking,
        )
        return ChunkingResult(output=output, index=index, report=report, schema_problems=problems)
