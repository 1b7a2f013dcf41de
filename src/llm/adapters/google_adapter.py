# src/llm/adapters/google_adapter.py - v2
"""Google Gemini adapter implementing BaseLLMClient.

Uses the google-generativeai SDK. A blocked prompt comes back with no
candidates and a prompt_feedback.block_reason; a blocked answer comes back
with a SAFETY-like finish reason.
"""

from __future__ import annotations

import time
from typing import Any

from proposalgen.llm.base_client import BaseLLMClient
from proposalgen.llm.models import LLMResponse, Message, StopReason

_BLOCKED_FINISH = {"SAFETY", "RECITATION", "BLOCKLIST", "PROHIBITED_CONTENT", "SPII"}


class GoogleAdapter(BaseLLMClient):
    """Google Gemini adapter."""

    def __init__(self, model: str = "gemini-2.0-flash-exp", api_key: str = "", **kwargs: Any):
        self._model = model
        self._api_key = api_key

    async def complete(
        self,
        messages: list[Message],
        system: str | None = None,
        max_tokens: int = 4096,
        temperature: float = 0.7,
    ) -> LLMResponse:
        import google.generativeai as genai

        genai.configure(api_key=self._api_key)
        model = genai.GenerativeModel(self._model, system_instruction=system)

        # Convert messages to Gemini format
        contents = []
        for m in messages:
            role = "model" if m.role == "assistant" else "user"
            contents.append({"role": role, "parts": [{"text": m.content}]})

        t0 = time.monotonic()
        resp = await model.generate_content_async(
            contents,
            generation_config={"max_output_tokens": max_tokens, "temperature": temperature},
        )
        latency = int((time.monotonic() - t0) * 1000)

        text, stop_reason = self.parse_response(resp)
        usage = getattr(resp, "usage_metadata", None)
        return LLMResponse(
            content=text,
            input_tokens=getattr(usage, "prompt_token_count", 0) if usage else 0,
            output_tokens=getattr(usage, "candidates_token_count", 0) if usage else 0,
            model=self._model,
            provider="google",
            latency_ms=latency,
            stop_reason=stop_reason,
            raw_response=resp,
        )

    @property
    def provider_name(self) -> str:
        return "google"

    @property
    def model_name(self) -> str:
        return self._model

    @staticmethod
    def parse_response(resp: Any) -> tuple[str, StopReason]:
        """Extract text and a normalized stop reason from a Gemini response.

        resp.text raises when the response was blocked, so the parts are
        read directly.
        """
        feedback = getattr(resp, "prompt_feedback", None)
        if feedback is not None and getattr(feedback, "block_reason", None):
            return "", "blocked"

        candidates = getattr(resp, "candidates", None) or []
        if not candidates:
            return "", "blocked"

        candidate = candidates[0]
        content = getattr(candidate, "content", None)
        parts = getattr(content, "parts", None) or []
        text = "".join(getattr(p, "text", "") or "" for p in parts)

        finish = getattr(candidate, "finish_reason", None)
        finish_name = str(getattr(finish, "name", finish or "")).upper()
        if finish_name == "MAX_TOKENS":
            return text, "max_tokens"
        if finish_name in _BLOCKED_FINISH:
            return text, "blocked"
        return text, "complete"
