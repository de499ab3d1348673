"""Figure lookup and linking of chunks to the figures they discuss."""

import logging
import re
from collections.abc import Iterable, Iterator

from docchunk.models.figure import FigureEntry, FigureRef

logger = logging.getLogger(__name__)

# Only the abbreviated "Fig. X.Y" form is recognized, with or without a
# space after the period. Spelled-out "Figure" is not matched.
FIGURE_REFERENCE_PATTERN = re.compile(r"Fig\.\s*(\d+\.\d+)", re.IGNORECASE)

ELLIPSIS = "..."


def caption_snippet(caption: str, max_length: int = 100) -> str:
    """Shorten a caption to at most ``max_length`` characters.

    Long captions are cut at the last space that leaves room for a
    trailing ellipsis. A caption with no usable space is cut mid-word.
    """
    if not caption:
        return ""
    if len(caption) <= max_length:
        return caption

    budget = max_length - len(ELLIPSIS)
    cut = caption.rfind(" ", 0, budget + 1)
    if cut <= 0:
        cut = budget
    return caption[:cut].rstrip() + ELLIPSIS


def make_figure_ref(entry: FigureEntry, snippet_length: int = 100) -> FigureRef:
    """Build the chunk-embedded view of a figure entry."""
    return FigureRef(
        figure_id=entry.figure_id,
        image_path=entry.image_path or "",
        caption_snippet=caption_snippet(entry.caption, snippet_length),
    )


class FigureIndex:
    """Constant-time figure lookup by ``figure_id`` and ``caption_block_id``.

    Args:
        figures: Every figure known for the document.
        snippet_length: Maximum caption snippet length for emitted refs.
    """

    def __init__(self, figures: Iterable[FigureEntry], snippet_length: int = 100) -> None:
        self._snippet_length = snippet_length
        self._by_id: dict[str, FigureEntry] = {}
        self._by_caption_block: dict[str, FigureEntry] = {}

        for figure in figures:
            self._by_id[figure.figure_id] = figure
            if figure.caption_block_id:
                self._by_caption_block[figure.caption_block_id] = figure

    def get_by_id(self, figure_id: str) -> FigureEntry | None:
        return self._by_id.get(figure_id)

    def get_by_caption_block_id(self, block_id: str) -> FigureEntry | None:
        return self._by_caption_block.get(block_id)

    @property
    def caption_block_ids(self) -> list[str]:
        return list(self._by_caption_block)

    def __len__(self) -> int:
        return len(self._by_id)

    def __iter__(self) -> Iterator[FigureEntry]:
        return iter(self._by_id.values())

    def link_caption_block(self, block_id: str) -> FigureRef | None:
        """Link a figure-caption block directly to its figure."""
        entry = self.get_by_caption_block_id(block_id)
        if entry is None:
            logger.warning("No figure found for caption block %s", block_id)
            return None
        return make_figure_ref(entry, self._snippet_length)

    def find_references(self, text: str) -> list[FigureRef]:
        """Find known figures mentioned as ``Fig. X.Y`` in ``text``.

        Mentions of unknown figures are dropped. Results are deduplicated by
        figure id and keep first-seen order.
        """
        refs: list[FigureRef] = []
        seen: set[str] = set()

        for match in FIGURE_REFERENCE_PATTERN.finditer(text or ""):
            figure_id = f"Fig. {match.group(1)}"
            if figure_id in seen:
                continue
            seen.add(figure_id)

            entry = self.get_by_id(figure_id)
            if entry is not None:
                refs.append(make_figure_ref(entry, self._snippet_length))
            else:
                logger.debug("Reference to unknown figure %s", figure_id)

        return refs
