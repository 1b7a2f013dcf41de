# src/llm/retry.py - v3
"""Ceiling-ladder retry policy for a single generation call.

A request is first sent with the largest output ceiling. Failures that look
like the request (or the response it would produce) was too large to
service are retried with the next, smaller ceiling. Everything else is
terminal on the first attempt. Hitting the ceiling is not a failure: the
text is kept and flagged as truncated.
"""

from __future__ import annotations

import asyncio
import logging
import re
import time
from dataclasses import dataclass, field

from proposalgen.core.models import AttemptRecord, GenerationOutcome, GenerationRequest
from proposalgen.llm.base_client import BaseLLMClient
from proposalgen.llm.models import LLMResponse, Message
from proposalgen.logging.context import set_attempt_context

logger = logging.getLogger(__name__)

# Substrings (lowercased) of errors that point at request/response size.
_SIZE_MARKERS: tuple[str, ...] = (
    "too large",
    "too long",
    "supported range",
    "context length",
    "context window",
    "maximum context",
    "deadline exceeded",
    "deadline_exceeded",
    "timed out",
    "timeout",
)

# These take precedence: a smaller ceiling will not fix them.
_NOT_SIZE_MARKERS: tuple[str, ...] = (
    "rate limit",
    "rate_limit",
    "quota",
    "api key",
    "permission",
)

# Ceiling parameter names, matched with separators and case removed
# (max_tokens, maxOutputTokens, max_completion_tokens, ...).
_CEILING_PARAMS: tuple[str, ...] = ("maxtokens", "maxoutputtokens", "maxcompletiontokens")

_SIZE_STATUS = re.compile(r"\b(413|504)\b")
_NOT_SIZE_STATUS = re.compile(r"\b(401|403|429)\b")


@dataclass(frozen=True)
class CeilingLadder:
    """Strictly descending, finite sequence of output ceilings."""

    ceilings: tuple[int, ...]

    def __post_init__(self) -> None:
        if not self.ceilings:
            raise ValueError("Ceiling ladder must contain at least one ceiling")
        if any(c <= 0 for c in self.ceilings):
            raise ValueError(f"Ceilings must be positive: {self.ceilings}")
        if any(a <= b for a, b in zip(self.ceilings, self.ceilings[1:])):
            raise ValueError(f"Ceiling ladder must be strictly descending: {self.ceilings}")

    def __iter__(self):
        return iter(self.ceilings)

    def __len__(self) -> int:
        return len(self.ceilings)

    @property
    def initial(self) -> int:
        return self.ceilings[0]


@dataclass
class LadderResult:
    """Final outcome of a ladder walk plus every attempt made."""

    outcome: GenerationOutcome
    attempts: list[AttemptRecord] = field(default_factory=list)

    @property
    def exhausted(self) -> bool:
        return self.outcome.kind == "retryable"


def classify_error(error: BaseException) -> str:
    """Classify a transport/availability error as 'retryable' or 'rejected'."""
    if isinstance(error, (asyncio.TimeoutError, TimeoutError)):
        return "retryable"

    msg = str(error).lower()
    name = type(error).__name__.lower()
    status = getattr(error, "status_code", None)

    if status in (401, 403, 429) or _NOT_SIZE_STATUS.search(msg):
        return "rejected"
    if any(m in msg for m in _NOT_SIZE_MARKERS):
        return "rejected"
    if status in (413, 504) or _SIZE_STATUS.search(msg):
        return "retryable"
    if "timeout" in name or any(m in msg for m in _SIZE_MARKERS):
        return "retryable"
    compact = re.sub(r"[\s_\-]", "", msg)
    if any(p in compact for p in _CEILING_PARAMS):
        return "retryable"
    return "rejected"


def classify_response(response: LLMResponse, ceiling: int) -> GenerationOutcome:
    """Map a completed call's stop signal onto an outcome."""
    if response.stop_reason == "blocked":
        return GenerationOutcome(
            kind="rejected", ceiling=ceiling, text=response.content,
            reason=f"Blocked by {response.provider} content policy",
        )
    if response.stop_reason == "max_tokens":
        return GenerationOutcome(
            kind="truncated", ceiling=ceiling, text=response.content,
            reason=f"Output ceiling of {ceiling} tokens reached",
        )
    return GenerationOutcome(kind="success", ceiling=ceiling, text=response.content)


async def attempt_once(
    client: BaseLLMClient,
    request: GenerationRequest,
    timeout_s: float | None = None,
) -> GenerationOutcome:
    """Run one bounded call and classify it. Never raises for backend errors."""
    messages = [Message(role="user", content=request.prompt)]
    try:
        response = await asyncio.wait_for(
            client.complete(
                messages,
                max_tokens=request.max_tokens,
                temperature=request.temperature,
            ),
            timeout=timeout_s,
        )
    except (asyncio.TimeoutError, TimeoutError):
        return GenerationOutcome(
            kind="retryable", ceiling=request.max_tokens,
            reason=f"Timed out after {timeout_s}s" if timeout_s else "Timed out",
        )
    except Exception as e:
        kind = classify_error(e)
        return GenerationOutcome(
            kind=kind,  # type: ignore[arg-type]
            ceiling=request.max_tokens,
            reason=f"{type(e).__name__}: {e}",
        )
    return classify_response(response, request.max_tokens)


async def generate_with_ladder(
    client: BaseLLMClient,
    request: GenerationRequest,
    ladder: CeilingLadder,
    timeout_s: float | None = None,
) -> LadderResult:
    """Walk the ceiling ladder until an outcome other than 'retryable'.

    Each rung is a fresh call; partial output from earlier rungs is dropped.
    If every rung is retryable the returned outcome is the last retryable one.
    """
    attempts: list[AttemptRecord] = []

    for i, ceiling in enumerate(ladder):
        set_attempt_context(ceiling)
        t0 = time.monotonic()
        outcome = await attempt_once(client, request.with_ceiling(ceiling), timeout_s)
        attempts.append(AttemptRecord(
            ceiling=ceiling,
            outcome=outcome.kind,
            reason=outcome.reason,
            latency_ms=int((time.monotonic() - t0) * 1000),
        ))
        if outcome.kind != "retryable":
            break

        remaining = len(ladder) - i - 1
        if remaining:
            logger.warning(
                "Ceiling %d failed (%s), retrying with %d (%d rung(s) left)",
                ceiling, outcome.reason, ladder.ceilings[i + 1], remaining,
            )
        else:
            logger.warning("Ceiling ladder exhausted at %d: %s", ceiling, outcome.reason)

    set_attempt_context(None)
    return LadderResult(outcome=outcome, attempts=attempts)
