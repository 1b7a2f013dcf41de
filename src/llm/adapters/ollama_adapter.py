# src/llm/adapters/ollama_adapter.py - v2
"""Ollama local LLM adapter implementing BaseLLMClient."""

from __future__ import annotations

import time
from typing import Any

from proposalgen.llm.base_client import BaseLLMClient
from proposalgen.llm.models import LLMResponse, Message, StopReason


class OllamaAdapter(BaseLLMClient):
    """Ollama local inference adapter."""

    def __init__(
        self, model: str = "llama3", host: str = "http://localhost:11434", **kwargs: Any,
    ):
        self._model = model
        self._host = kwargs.get("base_url") or host

    async def complete(
        self,
        messages: list[Message],
        system: str | None = None,
        max_tokens: int = 4096,
        temperature: float = 0.7,
    ) -> LLMResponse:
        import ollama

        client = ollama.AsyncClient(host=self._host)
        msgs: list[dict[str, str]] = []
        if system:
            msgs.append({"role": "system", "content": system})
        for m in messages:
            msgs.append({"role": m.role, "content": m.content})

        t0 = time.monotonic()
        resp = await client.chat(
            model=self._model,
            messages=msgs,
            options={"num_predict": max_tokens, "temperature": temperature},
        )
        latency = int((time.monotonic() - t0) * 1000)

        return LLMResponse(
            content=resp["message"]["content"] or "",
            input_tokens=resp.get("prompt_eval_count") or 0,
            output_tokens=resp.get("eval_count") or 0,
            model=self._model,
            provider="ollama",
            latency_ms=latency,
            stop_reason=self.map_done_reason(resp.get("done_reason")),
            raw_response=resp,
        )

    @property
    def provider_name(self) -> str:
        return "ollama"

    @property
    def model_name(self) -> str:
        return self._model

    @staticmethod
    def map_done_reason(done_reason: str | None) -> StopReason:
        return "max_tokens" if done_reason == "length" else "complete"
