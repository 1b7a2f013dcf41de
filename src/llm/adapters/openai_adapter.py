# src/llm/adapters/openai_adapter.py - v2
"""OpenAI GPT adapter implementing BaseLLMClient.

Uses the official openai SDK (chat completions).
"""

from __future__ import annotations

import time
from typing import Any

from proposalgen.llm.base_client import BaseLLMClient
from proposalgen.llm.models import LLMResponse, Message, StopReason

_FINISH_REASONS: dict[str, StopReason] = {
    "stop": "complete",
    "length": "max_tokens",
    "content_filter": "blocked",
}


class OpenAIAdapter(BaseLLMClient):
    """OpenAI GPT adapter."""

    def __init__(self, model: str = "gpt-4o", api_key: str = "", **kwargs: Any):
        self._model = model
        self._api_key = api_key

    async def complete(
        self,
        messages: list[Message],
        system: str | None = None,
        max_tokens: int = 4096,
        temperature: float = 0.7,
    ) -> LLMResponse:
        import openai

        client = openai.AsyncOpenAI(api_key=self._api_key or None)
        oai_messages: list[dict[str, Any]] = []
        if system:
            oai_messages.append({"role": "system", "content": system})
        for m in messages:
            oai_messages.append({"role": m.role, "content": m.content})

        t0 = time.monotonic()
        resp = await client.chat.completions.create(
            model=self._model,
            messages=oai_messages,
            max_tokens=max_tokens,
            temperature=temperature,
        )
        latency = int((time.monotonic() - t0) * 1000)

        choice = resp.choices[0]
        usage = resp.usage
        stop_reason = self.map_finish_reason(choice.finish_reason)
        if getattr(choice.message, "refusal", None):
            stop_reason = "blocked"
        return LLMResponse(
            content=choice.message.content or "",
            input_tokens=usage.prompt_tokens if usage else 0,
            output_tokens=usage.completion_tokens if usage else 0,
            model=self._model,
            provider="openai",
            latency_ms=latency,
            stop_reason=stop_reason,
            raw_response=resp,
        )

    @property
    def provider_name(self) -> str:
        return "openai"

    @property
    def model_name(self) -> str:
        return self._model

    @staticmethod
    def map_finish_reason(finish_reason: str | None) -> StopReason:
        return _FINISH_REASONS.get(finish_reason or "", "complete")
