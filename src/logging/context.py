# src/logging/context.py - v2
"""Contextual logging support: attach run_id, record_id and ceiling to log records."""

from __future__ import annotations

import contextvars
from dataclasses import dataclass
from typing import Any

# Context variables for structured logging, set per record and per attempt.
_run_id: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "run_id", default=None
)
_record_id: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "record_id", default=None
)
_ceiling: contextvars.ContextVar[int | None] = contextvars.ContextVar(
    "ceiling", default=None
)


@dataclass
class LogContext:
    """Immutable snapshot of current logging context."""

    run_id: str | None = None
    record_id: str | None = None
    ceiling: int | None = None

    def as_dict(self) -> dict[str, Any]:
        """Return non-None fields as dict for JSON log injection."""
        return {k: v for k, v in self.__dict__.items() if v is not None}


def get_context() -> LogContext:
    """Snapshot current context variables."""
    return LogContext(
        run_id=_run_id.get(),
        record_id=_record_id.get(),
        ceiling=_ceiling.get(),
    )


def set_run_context(run_id: str) -> None:
    """Set run-level context (called once per run)."""
    _run_id.set(run_id)


def set_record_context(record_id: str | None) -> None:
    """Set record-level context (called per record)."""
    _record_id.set(record_id)
    _ceiling.set(None)


def set_attempt_context(ceiling: int | None) -> None:
    """Set the ceiling of the attempt in flight."""
    _ceiling.set(ceiling)


def clear_context() -> None:
    """Reset all context variables."""
    _run_id.set(None)
    _record_id.set(None)
    _ceiling.set(None)
