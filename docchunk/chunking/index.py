"""Section, page and figure lookup tables over a finished chunk set."""

from collections.abc import Sequence

from docchunk.models.chunk import Chunk, ChunkIndex

UNKNOWN_SECTION = "unknown"


def build_chunk_index(chunks: Sequence[Chunk], document_id: str) -> ChunkIndex:
    """Index chunk ids by section, by 1-based page (as string) and by figure.

    Chunks with no section are filed under ``"unknown"``.
    """
    by_section: dict[str, list[str]] = {}
    by_page: dict[str, list[str]] = {}
    by_figure: dict[str, list[str]] = {}

    for chunk in chunks:
        section_id = chunk.parent_section_id or UNKNOWN_SECTION
        by_section.setdefault(section_id, []).append(chunk.chunk_id)

        for page in chunk.page_numbers:
            by_page.setdefault(str(page), []).append(chunk.chunk_id)

        for ref in chunk.figure_references:
            figure_chunks = by_figure.setdefault(ref.figure_id, [])
            if chunk.chunk_id not in figure_chunks:
                figure_chunks.append(chunk.chunk_id)

    return ChunkIndex(
        document_id=document_id,
        total_chunks=len(chunks),
        chunks_by_section=by_section,
        chunks_by_page=by_page,
        figure_to_chunks=by_figure,
    )
