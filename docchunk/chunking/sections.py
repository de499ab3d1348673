"""Section boundary predicates shared by overlap, merging and validation.

A section is identified solely by ``parent_section_id``; two chunks belong
to the same section iff those strings are equal.
"""

from collections.abc import Sequence

from docchunk.models.chunk import Chunk, ChunkDraft

SectionMember = Chunk | ChunkDraft


def is_same_section(a: SectionMember, b: SectionMember) -> bool:
    return a.parent_section_id == b.parent_section_id


def is_section_boundary(prev: SectionMember, curr: SectionMember) -> bool:
    return not is_same_section(prev, curr)


def is_section_final(chunk: SectionMember, next_chunk: SectionMember | None) -> bool:
    """True if ``chunk`` is last overall or the next chunk opens a new section."""
    if next_chunk is None:
        return True
    return is_section_boundary(chunk, next_chunk)


def section_final_ids(chunks: Sequence[Chunk]) -> set[str]:
    """Ids of every chunk that closes its section."""
    return {
        chunk.chunk_id
        for i, chunk in enumerate(chunks)
        if is_section_final(chunk, chunks[i + 1] if i + 1 < len(chunks) else None)
    }
