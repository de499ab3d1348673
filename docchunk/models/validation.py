"""Quality gate report models."""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, Field

GateStatus = Literal["PASS", "FAIL"]


class QualityGate(BaseModel):
    """Outcome of one named check over the finished chunk set."""

    name: str
    status: GateStatus
    value: str | int | float
    threshold: str | int | float
    details: str = ""

    @property
    def passed(self) -> bool:
        return self.status == "PASS"


class ValidationSummary(BaseModel):
    """Aggregate statistics reported alongside the gates."""

    total_chunks: int = 0
    figure_caption_chunks: int = 0
    max_token_count: int = 0
    avg_token_count: int = 0
    chunks_with_overlap: int = 0


class ValidationReport(BaseModel):
    """All gate results plus summary; overall status is the AND of the gates."""

    timestamp: datetime = Field(default_factory=datetime.now)
    overall_status: GateStatus
    gates: list[QualityGate] = Field(default_factory=list)
    summary: ValidationSummary = Field(default_factory=ValidationSummary)

    @property
    def passed(self) -> bool:
        return self.overall_status == "PASS"

    def gate(self, name: str) -> QualityGate | None:
        """Look up a gate by name."""
        return next((g for g in self.gates if g.name == name), None)
