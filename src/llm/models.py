# src/llm/models.py - v2
"""LLM-specific types: Message, LLMResponse."""

from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel

StopReason = Literal["complete", "max_tokens", "blocked"]


class Message(BaseModel):
    """Single message in a conversation."""

    role: Literal["user", "assistant", "system"]
    content: str


class LLMResponse(BaseModel):
    """Normalized response from any LLM provider.

    stop_reason is the provider's completion signal mapped onto three
    values: a clean finish, the output ceiling was hit, or the provider
    refused/blocked the request or its output.
    """

    content: str
    input_tokens: int
    output_tokens: int
    model: str
    provider: str
    latency_ms: int
    stop_reason: StopReason = "complete"
    raw_response: Any = None
