# tests/helpers.py - v1
"""Test doubles and builders shared by unit and integration tests."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from proposalgen.llm.base_client import BaseLLMClient
from proposalgen.llm.models import LLMResponse, Message, StopReason

SAMPLE_HTML = "<!DOCTYPE html>\n<html><head><title>Proposal</title></head><body>Hi</body></html>"


def make_response(
    content: str = SAMPLE_HTML,
    stop_reason: StopReason = "complete",
) -> LLMResponse:
    return LLMResponse(
        content=content,
        input_tokens=100,
        output_tokens=len(content) // 4,
        model="mock-model",
        provider="mock",
        latency_ms=5,
        stop_reason=stop_reason,
    )


class MockLLMClient(BaseLLMClient):
    """Scripted backend: each call pops the next LLMResponse or raises the next exception.

    Once the script is empty every call returns a clean SAMPLE_HTML response.
    """

    def __init__(self, *script: LLMResponse | BaseException) -> None:
        self._script: list[LLMResponse | BaseException] = list(script)
        self.calls: list[dict[str, Any]] = []

    def push(self, *items: LLMResponse | BaseException) -> None:
        self._script.extend(items)

    @property
    def ceilings(self) -> list[int]:
        return [c["max_tokens"] for c in self.calls]

    async def complete(
        self,
        messages: list[Message],
        system: str | None = None,
        max_tokens: int = 4096,
        temperature: float = 0.7,
    ) -> LLMResponse:
        self.calls.append({
            "messages": messages, "system": system,
            "max_tokens": max_tokens, "temperature": temperature,
        })
        item = self._script.pop(0) if self._script else make_response()
        if isinstance(item, BaseException):
            raise item
        return item

    @property
    def provider_name(self) -> str:
        return "mock"

    @property
    def model_name(self) -> str:
        return "mock-model"


def write_proposal(directory: Path, filename: str, data: Any) -> Path:
    directory.mkdir(parents=True, exist_ok=True)
    path = directory / filename
    path.write_text(json.dumps(data), encoding="utf-8")
    return path
