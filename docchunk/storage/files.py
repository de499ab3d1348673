"""JSON input loading and output writing for the chunking pipeline."""

import json
import logging
from pathlib import Path
from typing import Any

import chardet

from docchunk.chunking.pipeline import ChunkingResult
from docchunk.errors import ContractViolationError, OutputExistsError
from docchunk.models.document import Document
from docchunk.models.figure import FigureEntry
from docchunk.storage.preview import render_preview

logger = logging.getLogger(__name__)

CHUNKS_FILE = "chunks.json"
INDEX_FILE = "chunk_index.json"
VALIDATION_FILE = "chunking-validation.json"
PREVIEW_FILE = "preview.html"
OUTPUT_FILES: tuple[str, ...] = (CHUNKS_FILE, INDEX_FILE, VALIDATION_FILE, PREVIEW_FILE)


def read_text(file_path: str | Path) -> str:
    """Read a text file, detecting its encoding if it is not UTF-8.

    Args:
        file_path: Path to the file.

    Returns:
        The decoded file content.

    Raises:
        FileNotFoundError: If file_path does not exist.
    """
    path = Path(file_path)
    if not path.exists():
        raise FileNotFoundError(f"File not found: {path}")

    try:
        return path.read_text(encoding="utf-8")
    except UnicodeDecodeError:
        pass

    raw_bytes = path.read_bytes()
    detected = chardet.detect(raw_bytes)
    encoding = detected.get("encoding") or "utf-8"
    confidence = detected.get("confidence") or 0

    if confidence < 0.7:
        logger.warning(
            "Low confidence encoding detection for %s: %s (%.0f%%)",
            path,
            encoding,
            confidence * 100,
        )
    return raw_bytes.decode(encoding, errors="replace")


def read_json(file_path: str | Path) -> Any:
    """Parse a JSON file, reporting the path on malformed content."""
    text = read_text(file_path)
    try:
        return json.loads(text)
    except json.JSONDecodeError as exc:
        raise ValueError(f"Invalid JSON in {file_path}: {exc}") from exc


def load_document(file_path: str | Path) -> Document:
    """Load a normalized document tree (document.json)."""
    document = Document.model_validate(read_json(file_path))
    logger.info("Loaded document %s with %d pages", document.id, len(document.pages))
    return document


def load_figure_map(file_path: str | Path) -> list[FigureEntry]:
    """Load figure entries from figure_map.json.

    Accepts the nested form ``{"document_id", "figures": {...}, "summary"}``
    as well as a flat ``{figure_id: entry}`` mapping.
    """
    data = read_json(file_path)
    if not isinstance(data, dict):
        raise ValueError(f"Figure map in {file_path} must be a JSON object")

    entries = data["figures"] if isinstance(data.get("figures"), dict) else data
    figures = [FigureEntry.model_validate(entry) for entry in entries.values()]
    logger.info("Loaded %d figures from %s", len(figures), file_path)
    return figures


def existing_outputs(output_dir: str | Path) -> list[Path]:
    """Output files already present in ``output_dir``."""
    directory = Path(output_dir)
    return [directory / name for name in OUTPUT_FILES if (directory / name).exists()]


def write_outputs(
    result: ChunkingResult, output_dir: str | Path, force: bool = False
) -> list[Path]:
    """Write chunks, index, validation report and preview.

    Args:
        result: A completed pipeline run.
        output_dir: Destination directory, created if missing.
        force: Overwrite existing output files.

    Returns:
        Paths written, in ``OUTPUT_FILES`` order.

    Raises:
        OutputExistsError: If outputs exist and ``force`` is False.
        ContractViolationError: If the run reported schema problems.
    """
    directory = Path(output_dir)
    if not force:
        existing = existing_outputs(directory)
        if existing:
            raise OutputExistsError(
                f"Output files already exist in {directory}: "
                f"{', '.join(str(p) for p in existing)}. Use --force to overwrite."
            )

    if result.schema_problems:
        raise ContractViolationError(
            "Refusing to write chunks that failed structural checks: "
            + "; ".join(result.schema_problems)
        )

    directory.mkdir(parents=True, exist_ok=True)
    contents = {
        CHUNKS_FILE: result.output.model_dump_json(indent=2),
        INDEX_FILE: result.index.model_dump_json(indent=2),
        VALIDATION_FILE: result.report.model_dump_json(indent=2),
        PREVIEW_FILE: render_preview(result.output),
    }

    written: list[Path] = []
    for name in OUTPUT_FILES:
        path = directory / name
        path.write_text(contents[name], encoding="utf-8")
        written.append(path)

    logger.info("Wrote %d output files to %s", len(written), directory)
    return written
