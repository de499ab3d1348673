"""Figure models: upstream figure map entries and the chunk-embedded view."""

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

FigureStatus = Literal["mapped", "no-image-in-caption", "unresolved"]


class FigureEntry(BaseModel):
    """A figure known to the document, keyed by id and by caption block."""

    figure_id: str  # e.g. "Fig. 4.1"
    caption: str = ""
    caption_block_id: str = ""
    image_path: str | None = None
    image_file: str | None = None
    page_number: int = Field(default=0, ge=0)
    status: FigureStatus = "mapped"
    abbreviations: dict[str, str] = Field(default_factory=dict)
    referencing_blocks: list[str] = Field(default_factory=list)


class FigureRef(BaseModel):
    """Denormalized pointer from a chunk to a figure."""

    model_config = ConfigDict(frozen=True)

    figure_id: str
    image_path: str = ""
    caption_snippet: str = ""
