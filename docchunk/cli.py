"""Command-line interface for the chunking pipeline."""

import logging
import sys
import time
from pathlib import Path

import typer

from docchunk.chunking.pipeline import DocumentChunker
from docchunk.config import load_config
from docchunk.errors import DocChunkError
from docchunk.models.validation import ValidationReport
from docchunk.storage.files import load_document, load_figure_map, write_outputs

logger = logging.getLogger(__name__)

app = typer.Typer(add_completion=False, help="Structural chunking of parsed documents")


@app.callback()
def main_callback() -> None:
    """Split normalized documents into token-bounded, context-carrying chunks."""


def configure_logging(level: str) -> None:
    """Send log records to stderr with a timestamped format."""
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        stream=sys.stderr,
        force=True,
    )


def format_report(report: ValidationReport) -> str:
    """Render the gate table and summary for the terminal."""
    rule = "=" * 60
    lines = [rule, "Quality Gate Validation", rule]
    for gate in report.gates:
        status = typer.style(gate.status, fg="green" if gate.passed else "red")
        lines.append(f"  {gate.name}: {status} ({gate.value} / {gate.threshold})")
        if gate.details:
            lines.append(f"      {gate.details}")

    summary = report.summary
    lines += [
        "",
        "Summary:",
        f"  Total chunks:      {summary.total_chunks}",
        f"  Figure captions:   {summary.figure_caption_chunks}",
        f"  Max tokens:        {summary.max_token_count}",
        f"  Avg tokens:        {summary.avg_token_count}",
        f"  With overlap:      {summary.chunks_with_overlap}",
        rule,
        "Overall: " + ("ALL GATES PASSED" if report.passed else "SOME GATES FAILED"),
        rule,
    ]
    return "\n".join(lines)


@app.command()
def chunk(
    document: Path | None = typer.Option(None, "--document", help="Path to document.json"),
    figures: Path | None = typer.Option(None, "--figures", help="Path to figure_map.json"),
    output: Path | None = typer.Option(None, "--output", help="Output directory"),
    config_file: Path = typer.Option(Path("config.yaml"), "--config", help="YAML config file"),
    force: bool = typer.Option(False, "--force", help="Overwrite existing output files"),
    verbose: bool = typer.Option(False, "--verbose", help="Log at DEBUG level"),
) -> None:
    """Chunk a normalized document and write chunks, index and validation report.

    Exits with status 1 when the pipeline fails or any quality gate fails.
    """
    config = load_config(config_file)
    configure_logging("DEBUG" if verbose else config.log_level)

    document_path = document or Path(config.storage.document_path)
    figure_map_path = figures or Path(config.storage.figure_map_path)
    output_dir = output or Path(config.storage.output_dir)

    started = time.perf_counter()
    try:
        parsed = load_document(document_path)
        figure_entries = load_figure_map(figure_map_path)
        result = DocumentChunker(config).chunk(parsed, figure_entries)
        written = write_outputs(result, output_dir, force=force)
    except (DocChunkError, FileNotFoundError, ValueError) as exc:
        logger.error("Pipeline failed: %s", exc)
        typer.echo(f"[ERROR] Pipeline failed: {exc}", err=True)
        raise typer.Exit(1) from exc

    index = result.index
    typer.echo(format_report(result.report))
    typer.echo(f"  Sections indexed:  {len(index.chunks_by_section)}")
    typer.echo(f"  Pages indexed:     {len(index.chunks_by_page)}")
    typer.echo(f"  Figures indexed:   {len(index.figure_to_chunks)}")
    typer.echo(f"  Duration:          {time.perf_counter() - started:.2f}s")
    typer.echo("Output files:")
    for path in written:
        typer.echo(f"  {path}")

    if not result.passed:
        typer.echo("[ERROR] Validation failed - see chunking-validation.json", err=True)
        raise typer.Exit(1)
