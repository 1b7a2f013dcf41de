# tests/unit/llm/test_unit_adapters.py - v1
"""Tests for provider adapters: stop-signal mapping and response parsing.

No network access: SDK clients are replaced with fakes.
"""

from __future__ import annotations

from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from proposalgen.llm.adapters.anthropic_adapter import AnthropicAdapter
from proposalgen.llm.adapters.google_adapter import GoogleAdapter
from proposalgen.llm.adapters.ollama_adapter import OllamaAdapter
from proposalgen.llm.adapters.openai_adapter import OpenAIAdapter
from proposalgen.llm.models import Message

MESSAGES = [Message(role="user", content="make html")]


# ---------------------------------------------------------------------------
# Anthropic
# ---------------------------------------------------------------------------

class TestAnthropicAdapter:
    @pytest.mark.parametrize("raw,expected", [
        ("end_turn", "complete"),
        ("stop_sequence", "complete"),
        ("max_tokens", "max_tokens"),
        ("refusal", "blocked"),
        (None, "complete"),
        ("pause_turn", "complete"),
    ])
    def test_map_stop_reason(self, raw, expected):
        assert AnthropicAdapter.map_stop_reason(raw) == expected

    @pytest.mark.asyncio
    async def test_complete_streams_final_message(self):
        final = SimpleNamespace(
            content=[
                SimpleNamespace(type="text", text="<html>"),
                SimpleNamespace(type="thinking", thinking="..."),
                SimpleNamespace(type="text", text="</html>"),
            ],
            usage=SimpleNamespace(input_tokens=10, output_tokens=20),
            model="claude-sonnet-4-20250514",
            stop_reason="max_tokens",
        )
        stream = MagicMock()
        stream.__aenter__ = AsyncMock(return_value=SimpleNamespace(
            get_final_message=AsyncMock(return_value=final),
        ))
        stream.__aexit__ = AsyncMock(return_value=False)
        fake_client = MagicMock()
        fake_client.messages.stream.return_value = stream

        adapter = AnthropicAdapter(api_key="k")
        adapter._AnthropicAdapter__client = fake_client
        resp = await adapter.complete(MESSAGES, max_tokens=32000, temperature=0.7)

        assert resp.content == "<html></html>"
        assert resp.stop_reason == "max_tokens"
        assert resp.output_tokens == 20
        kwargs = fake_client.messages.stream.call_args.kwargs
        assert kwargs["max_tokens"] == 32000
        assert kwargs["messages"] == [{"role": "user", "content": "make html"}]
        assert "system" not in kwargs


# ---------------------------------------------------------------------------
# OpenAI
# ---------------------------------------------------------------------------

def _openai_response(content, finish_reason, refusal=None):
    return SimpleNamespace(
        choices=[SimpleNamespace(
            message=SimpleNamespace(content=content, refusal=refusal),
            finish_reason=finish_reason,
        )],
        usage=SimpleNamespace(prompt_tokens=5, completion_tokens=7),
    )


class TestOpenAIAdapter:
    @pytest.mark.parametrize("raw,expected", [
        ("stop", "complete"),
        ("length", "max_tokens"),
        ("content_filter", "blocked"),
        (None, "complete"),
    ])
    def test_map_finish_reason(self, raw, expected):
        assert OpenAIAdapter.map_finish_reason(raw) == expected

    @pytest.mark.asyncio
    async def test_complete(self):
        fake = MagicMock()
        fake.chat.completions.create = AsyncMock(return_value=_openai_response("<html/>", "length"))
        with patch("openai.AsyncOpenAI", return_value=fake):
            resp = await OpenAIAdapter(api_key="k").complete(MESSAGES, max_tokens=16000)

        assert resp.content == "<html/>"
        assert resp.stop_reason == "max_tokens"
        assert fake.chat.completions.create.call_args.kwargs["max_tokens"] == 16000

    @pytest.mark.asyncio
    async def test_refusal_is_blocked(self):
        fake = MagicMock()
        fake.chat.completions.create = AsyncMock(
            return_value=_openai_response(None, "stop", refusal="I can't help with that."),
        )
        with patch("openai.AsyncOpenAI", return_value=fake):
            resp = await OpenAIAdapter(api_key="k").complete(MESSAGES)

        assert resp.stop_reason == "blocked"
        assert resp.content == ""


# ---------------------------------------------------------------------------
# Google
# ---------------------------------------------------------------------------

def _gemini_response(text="<html></html>", finish="STOP", block_reason=None, candidates=True):
    parts = [SimpleNamespace(text=text)] if text is not None else []
    candidate = SimpleNamespace(
        content=SimpleNamespace(parts=parts),
        finish_reason=SimpleNamespace(name=finish),
    )
    return SimpleNamespace(
        prompt_feedback=SimpleNamespace(block_reason=block_reason),
        candidates=[candidate] if candidates else [],
        usage_metadata=SimpleNamespace(prompt_token_count=3, candidates_token_count=4),
    )


class TestGoogleAdapter:
    def test_clean_finish(self):
        assert GoogleAdapter.parse_response(_gemini_response()) == ("<html></html>", "complete")

    def test_max_tokens(self):
        text, stop = GoogleAdapter.parse_response(_gemini_response("<html>cut", "MAX_TOKENS"))
        assert (text, stop) == ("<html>cut", "max_tokens")

    @pytest.mark.parametrize("finish", ["SAFETY", "RECITATION", "PROHIBITED_CONTENT"])
    def test_blocked_finish(self, finish):
        assert GoogleAdapter.parse_response(_gemini_response("", finish))[1] == "blocked"

    def test_blocked_prompt(self):
        resp = _gemini_response(block_reason="SAFETY", candidates=False)
        assert GoogleAdapter.parse_response(resp) == ("", "blocked")

    def test_no_candidates(self):
        assert GoogleAdapter.parse_response(_gemini_response(candidates=False)) == ("", "blocked")

    def test_finish_reason_as_plain_string(self):
        resp = _gemini_response()
        resp.candidates[0].finish_reason = "MAX_TOKENS"
        assert GoogleAdapter.parse_response(resp)[1] == "max_tokens"

    @pytest.mark.asyncio
    async def test_complete_passes_generation_config(self):
        model = MagicMock()
        model.generate_content_async = AsyncMock(return_value=_gemini_response())
        with patch("google.generativeai.configure") as configure, \
                patch("google.generativeai.GenerativeModel", return_value=model):
            resp = await GoogleAdapter(api_key="g").complete(
                MESSAGES, max_tokens=65000, temperature=0.7,
            )

        configure.assert_called_once_with(api_key="g")
        config = model.generate_content_async.call_args.kwargs["generation_config"]
        assert config == {"max_output_tokens": 65000, "temperature": 0.7}
        assert resp.stop_reason == "complete"
        assert resp.input_tokens == 3


# ---------------------------------------------------------------------------
# Ollama
# ---------------------------------------------------------------------------

class TestOllamaAdapter:
    @pytest.mark.parametrize("raw,expected", [
        ("stop", "complete"), ("length", "max_tokens"), (None, "complete"),
    ])
    def test_map_done_reason(self, raw, expected):
        assert OllamaAdapter.map_done_reason(raw) == expected

    def test_base_url_alias(self):
        assert OllamaAdapter(base_url="http://other:11434")._host == "http://other:11434"
