"""Resolution of ancestor header ids into breadcrumb labels."""

import logging
from collections.abc import Iterable

from docchunk.models.chunk import ROOT_BREADCRUMB
from docchunk.models.document import BlockType, Document

logger = logging.getLogger(__name__)


def build_header_index(document: Document) -> dict[str, str]:
    """Map every section header block id to its text."""
    return {
        block.id: block.content
        for block in document.iter_blocks()
        if block.block_type == BlockType.SECTION_HEADER
    }


def resolve_breadcrumb(block_ids: Iterable[str], header_index: dict[str, str]) -> list[str]:
    """Resolve ancestor ids to labels, skipping ids with no known header."""
    labels: list[str] = []
    for block_id in block_ids:
        label = header_index.get(block_id)
        if label:
            labels.append(label)
        else:
            logger.debug("Unresolved breadcrumb ancestor id: %s", block_id)
    return labels


def format_breadcrumb(labels: list[str]) -> str:
    """Format labels as ``[Context: A > B > C]``."""
    if not labels:
        return f"[Context: {ROOT_BREADCRUMB}]"
    return f"[Context: {' > '.join(labels)}]"


def get_breadcrumb(
    block_ids: Iterable[str], header_index: dict[str, str]
) -> tuple[list[str], str]:
    """Resolve and format in one call, returning ``(labels, text)``."""
    labels = resolve_breadcrumb(block_ids, header_index)
    return labels, format_breadcrumb(labels)
