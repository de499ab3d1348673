"""Single-pass assembly of a document into linked chunks."""

import logging
from collections.abc import Sequence

from docchunk.chunking.breadcrumb import get_breadcrumb
from docchunk.chunking.figures import FigureIndex
from docchunk.chunking.splitter import BlockSplitter
from docchunk.models.chunk import Chunk, ChunkDraft, make_chunk_id
from docchunk.models.document import BlockType, ContentBlock, Document

logger = logging.getLogger(__name__)


class ChunkAssembler:
    """Walks a document once, turning every processable block into chunks.

    Section headers and blank blocks are skipped. Each remaining block is
    split, enriched with figure references, and the resulting drafts are
    sequenced and linked in emission order.

    Args:
        splitter: Splitter used for every block.
        figure_index: Known figures for direct and textual linking.
        header_index: Section header id -> label mapping.
    """

    def __init__(
        self,
        splitter: BlockSplitter,
        figure_index: FigureIndex,
        header_index: dict[str, str],
    ) -> None:
        self._splitter = splitter
        self._figure_index = figure_index
        self._header_index = header_index

    def assemble(self, document: Document) -> list[Chunk]:
        """Produce the initial linked chunk sequence for ``document``."""
        drafts: list[ChunkDraft] = []
        for block in document.iter_blocks():
            if not block.is_processable:
                continue
            drafts.extend(self._process_block(block, document.id))

        logger.info("Assembled %d chunks from document %s", len(drafts), document.id)
        return link_drafts(drafts)

    def _process_block(self, block: ContentBlock, document_id: str) -> list[ChunkDraft]:
        labels, text = get_breadcrumb(block.parent_hierarchy, self._header_index)
        drafts = self._splitter.split(block, labels, text, document_id)
        return [self._attach_figure_references(draft, block) for draft in drafts]

    def _attach_figure_references(self, draft: ChunkDraft, block: ContentBlock) -> ChunkDraft:
        """Caption blocks link directly to their figure; other text is scanned."""
        if block.block_type == BlockType.FIGURE_CAPTION:
            ref = self._figure_index.link_caption_block(block.id)
            refs = [ref] if ref is not None else []
        else:
            refs = self._figure_index.find_references(draft.content)
        return draft.model_copy(update={"figure_references": refs})


def link_drafts(drafts: Sequence[ChunkDraft]) -> list[Chunk]:
    """Finalize drafts with sequence numbers, ids and prev/next links."""
    ids = [make_chunk_id(draft.document_id, i) for i, draft in enumerate(drafts)]
    return [
        draft.finalize(
            sequence_number=i,
            previous_chunk_id=ids[i - 1] if i > 0 else None,
            next_chunk_id=ids[i + 1] if i + 1 < len(ids) else None,
        )
        for i, draft in enumerate(drafts)
    ]


def relink_chunks(chunks: Sequence[Chunk]) -> list[Chunk]:
    """Recompute ids, sequence numbers and links after the sequence changed."""
    ids = [make_chunk_id(chunk.document_id, i) for i, chunk in enumerate(chunks)]
    return [
        chunk.evolve(
            chunk_id=ids[i],
            sequence_number=i,
            previous_chunk_id=ids[i - 1] if i > 0 else None,
            next_chunk_id=ids[i + 1] if i + 1 < len(ids) else None,
        )
        for i, chunk in enumerate(chunks)
    ]
