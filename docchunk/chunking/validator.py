"""Quality gates evaluated over a finished chunk set."""

import logging
import math
from collections.abc import Sequence

from docchunk.chunking.sections import section_final_ids
from docchunk.config import ChunkingConfig, ValidationConfig
from docchunk.models.chunk import Chunk
from docchunk.models.validation import (
    GateStatus,
    QualityGate,
    ValidationReport,
    ValidationSummary,
)

logger = logging.getLogger(__name__)


def _status(passed: bool) -> GateStatus:
    return "PASS" if passed else "FAIL"


def _round_half_up(value: float) -> int:
    return math.floor(value + 0.5)


def validate_chunks(
    chunks: Sequence[Chunk],
    source_block_count: int,
    expected_figure_captions: int,
    processing_seconds: float,
    schema_valid: bool = True,
    config: ValidationConfig | None = None,
    limits: ChunkingConfig | None = None,
) -> ValidationReport:
    """Evaluate the seven quality gates.

    A failing gate never raises; it is recorded in the report and the
    caller decides what an overall FAIL means.

    Args:
        chunks: The final, relinked chunk sequence.
        source_block_count: Number of blocks eligible to produce chunks.
        expected_figure_captions: Number of figure-caption blocks in the source.
        processing_seconds: Wall-clock duration of the run.
        schema_valid: Outcome of the structural schema check.
        config: Gate thresholds.
        limits: Token limits the chunks were built with.

    Returns:
        ValidationReport with gates in a fixed order and summary statistics.
    """
    config = config or ValidationConfig()
    limits = limits or ChunkingConfig()
    total = len(chunks)

    gates = [
        _content_coverage_gate(chunks, source_block_count, config),
        _max_token_gate(chunks, limits),
        _min_token_gate(chunks, limits, config),
        _breadcrumb_gate(chunks),
        _figure_caption_gate(chunks, expected_figure_captions),
        QualityGate(
            name="schema_validation",
            status=_status(schema_valid),
            value="valid" if schema_valid else "invalid",
            threshold="valid",
            details="Chunk set and index are structurally consistent"
            if schema_valid
            else "Structural check reported problems",
        ),
        _processing_time_gate(processing_seconds, config),
    ]

    for gate in gates:
        if not gate.passed:
            logger.warning("Quality gate %s failed: %s", gate.name, gate.details)

    token_counts = [c.token_count for c in chunks]
    summary = ValidationSummary(
        total_chunks=total,
        figure_caption_chunks=sum(1 for c in chunks if c.is_figure_caption),
        max_token_count=max(token_counts, default=0),
        avg_token_count=_round_half_up(sum(token_counts) / total) if total else 0,
        chunks_with_overlap=sum(1 for c in chunks if c.overlap_tokens > 0),
    )

    overall = _status(all(g.passed for g in gates))
    logger.info("Validation finished: %s", overall)
    return ValidationReport(overall_status=overall, gates=gates, summary=summary)


def _content_coverage_gate(
    chunks: Sequence[Chunk], source_block_count: int, config: ValidationConfig
) -> QualityGate:
    covered = {block_id for c in chunks for block_id in c.source_block_ids}
    if source_block_count > 0:
        percent = len(covered) / source_block_count * 100
    else:
        percent = 100.0 if not covered else math.inf
    return QualityGate(
        name="content_coverage",
        status=_status(percent >= config.min_coverage_percent),
        value=f"{_round_half_up(percent)}%" if math.isfinite(percent) else "n/a",
        threshold=f"{config.min_coverage_percent:g}%",
        details=f"{len(covered)}/{source_block_count} blocks covered",
    )


def _max_token_gate(chunks: Sequence[Chunk], limits: ChunkingConfig) -> QualityGate:
    largest = max(chunks, key=lambda c: c.token_count, default=None)
    max_tokens = largest.token_count if largest else 0
    passed = max_tokens <= limits.hard_max_tokens
    if largest is None:
        details = "No chunks"
    elif passed:
        details = f"Largest chunk {largest.chunk_id} has {max_tokens} tokens"
    else:
        details = f"Chunk {largest.chunk_id} exceeds limit with {max_tokens} tokens"
    return QualityGate(
        name="max_token_limit",
        status=_status(passed),
        value=max_tokens,
        threshold=limits.hard_max_tokens,
        details=details,
    )


def _min_token_gate(
    chunks: Sequence[Chunk], limits: ChunkingConfig, config: ValidationConfig
) -> QualityGate:
    # Captions and section-final chunks may be small; the percentage is
    # still taken over the full chunk count.
    final_ids = section_final_ids(chunks)
    small = [
        c
        for c in chunks
        if c.token_count < limits.min_tokens
        and not c.is_figure_caption
        and c.chunk_id not in final_ids
    ]
    percent = len(small) / len(chunks) * 100 if chunks else 0.0
    return QualityGate(
        name="min_token_check",
        status=_status(percent < config.max_small_chunk_percent),
        value=len(small),
        threshold=f"<{config.max_small_chunk_percent:g}%",
        details=(
            f"{len(small)} chunks below {limits.min_tokens} tokens "
            f"({percent:.2f}% - excluding captions and section-final)"
        ),
    )


def _breadcrumb_gate(chunks: Sequence[Chunk]) -> QualityGate:
    missing = sum(1 for c in chunks if not c.breadcrumb)
    percent = (len(chunks) - missing) / len(chunks) * 100 if chunks else 100.0
    return QualityGate(
        name="breadcrumb_coverage",
        status=_status(missing == 0),
        value=f"{_round_half_up(percent)}%",
        threshold="100%",
        details=f"{missing} chunks without breadcrumb",
    )


def _figure_caption_gate(chunks: Sequence[Chunk], expected: int) -> QualityGate:
    captions = sum(1 for c in chunks if c.is_figure_caption)
    return QualityGate(
        name="figure_captions",
        status=_status(captions >= expected),
        value=captions,
        threshold=expected,
        details=f"{captions} caption chunks for {expected} caption blocks",
    )


def _processing_time_gate(seconds: float, config: ValidationConfig) -> QualityGate:
    return QualityGate(
        name="processing_time",
        status=_status(seconds < config.max_processing_seconds),
        value=f"{seconds:.2f}s",
        threshold=f"<{config.max_processing_seconds:g}s",
        details=f"Processed in {seconds:.2f}s",
    )
