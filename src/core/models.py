# src/core/models.py - v1
"""Core domain models shared across selection, generation and storage.

ProposalRecord is the unit of work, GenerationRequest/GenerationOutcome
describe one backend attempt, RecordResult and RunSummary are what a run
reports.
"""

from __future__ import annotations

from datetime import datetime
from pathlib import Path
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, computed_field

OutcomeKind = Literal["success", "truncated", "rejected", "retryable"]

ErrorKind = Literal[
    "rejected",
    "retry_exhausted",
    "invalid_output_shape",
    "artifact_write_failure",
    "unreadable_record",
]

SelectionMode = Literal["all", "changed", "missing"]


# === INPUT ===


class ProposalRecord(BaseModel):
    """One proposal read from the source store. Immutable once read."""

    model_config = ConfigDict(frozen=True)

    identifier: str
    organization_name: str | None = None
    body: dict[str, Any]
    source_path: Path


# === GENERATION ===


class GenerationRequest(BaseModel):
    """Assembled payload for one backend call."""

    model_config = ConfigDict(frozen=True)

    prompt: str
    max_tokens: int = Field(gt=0)
    temperature: float = 0.7

    def with_ceiling(self, max_tokens: int) -> GenerationRequest:
        """Return a copy with a different output ceiling; the prompt is untouched."""
        return self.model_copy(update={"max_tokens": max_tokens})


class GenerationOutcome(BaseModel):
    """Classified result of a single attempt."""

    kind: OutcomeKind
    ceiling: int
    text: str = ""
    reason: str | None = None


class AttemptRecord(BaseModel):
    """Trace of one attempt, kept in the run summary."""

    ceiling: int
    outcome: OutcomeKind
    reason: str | None = None
    latency_ms: int = 0


# === RESULTS ===


class RecordResult(BaseModel):
    """Final per-record result appended to the run summary."""

    identifier: str
    status: Literal["success", "failure"]
    error_kind: ErrorKind | None = None
    reason: str | None = None
    artifact_name: str | None = None
    artifact_path: str | None = None
    url: str | None = None
    truncated: bool = False
    size_bytes: int = 0
    attempts: list[AttemptRecord] = Field(default_factory=list)
    source_deleted: bool = False

    @property
    def failed(self) -> bool:
        return self.status == "failure"


class RunSummary(BaseModel):
    """Aggregate of a full batch, written once at the end of a run."""

    run_id: str
    timestamp: datetime
    duration_seconds: float = 0.0
    provider: str
    model: str
    selection_mode: SelectionMode
    results: list[RecordResult] = Field(default_factory=list)

    @computed_field  # type: ignore[prop-decorator]
    @property
    def processed(self) -> int:
        return len(self.results)

    @computed_field  # type: ignore[prop-decorator]
    @property
    def succeeded(self) -> int:
        return sum(1 for r in self.results if not r.failed)

    @computed_field  # type: ignore[prop-decorator]
    @property
    def failed(self) -> int:
        return sum(1 for r in self.results if r.failed)

    @computed_field  # type: ignore[prop-decorator]
    @property
    def truncated(self) -> int:
        return sum(1 for r in self.results if r.truncated)

    @property
    def failures(self) -> list[RecordResult]:
        return [r for r in self.results if r.failed]

    @property
    def ok(self) -> bool:
        """True iff no record ended in failure (the empty run is ok)."""
        return self.failed == 0

    @property
    def exit_code(self) -> int:
        return 0 if self.ok else 1
