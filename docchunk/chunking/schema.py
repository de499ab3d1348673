"""Structural checks over the emitted chunk set and its index.

The result feeds the schema validation quality gate, and outputs are not
written when any problem is reported.
"""

from pydantic import ValidationError

from docchunk.config import ChunkingConfig
from docchunk.models.chunk import ChunkIndex, ChunksOutput, make_chunk_id


def check_schema(
    output: ChunksOutput, index: ChunkIndex, config: ChunkingConfig | None = None
) -> list[str]:
    """Return a list of human-readable problems; empty means valid.

    Args:
        output: The chunk set as it will be written.
        index: The index built over ``output.chunks``.
        config: Limits to check token counts against.

    Returns:
        Problem descriptions in discovery order.
    """
    config = config or ChunkingConfig()
    problems: list[str] = []

    # Round-trip through JSON to catch anything a serialized reader would reject.
    try:
        ChunksOutput.model_validate_json(output.model_dump_json())
        ChunkIndex.model_validate_json(index.model_dump_json())
    except ValidationError as exc:
        problems.extend(
            f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}" for err in exc.errors()
        )

    chunks = output.chunks
    if output.total_chunks != len(chunks):
        problems.append(f"total_chunks is {output.total_chunks}, found {len(chunks)} chunks")

    seen_ids: set[str] = set()
    for i, chunk in enumerate(chunks):
        if not 1 <= chunk.token_count <= config.hard_max_tokens:
            problems.append(
                f"{chunk.chunk_id}: token_count {chunk.token_count} outside "
                f"1..{config.hard_max_tokens}"
            )
        if chunk.sequence_number != i:
            problems.append(f"{chunk.chunk_id}: sequence_number {chunk.sequence_number} != {i}")
        if chunk.chunk_id != make_chunk_id(output.document_id, i):
            problems.append(f"{chunk.chunk_id}: id does not match position {i}")
        if chunk.chunk_id in seen_ids:
            problems.append(f"{chunk.chunk_id}: duplicate chunk id")
        seen_ids.add(chunk.chunk_id)

        expected_prev = chunks[i - 1].chunk_id if i > 0 else None
        expected_next = chunks[i + 1].chunk_id if i + 1 < len(chunks) else None
        if chunk.previous_chunk_id != expected_prev or chunk.next_chunk_id != expected_next:
            problems.append(f"{chunk.chunk_id}: previous/next links out of order")

    if index.total_chunks != len(chunks):
        problems.append(f"index total_chunks is {index.total_chunks}, found {len(chunks)} chunks")

    for table_name in ("chunks_by_section", "chunks_by_page", "figure_to_chunks"):
        table: dict[str, list[str]] = getattr(index, table_name)
        for key, chunk_ids in table.items():
            missing = [cid for cid in chunk_ids if cid not in seen_ids]
            if missing:
                problems.append(f"{table_name}[{key}] references unknown chunks {missing}")

    return problems
