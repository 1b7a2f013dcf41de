# tests/unit/llm/test_unit_base_client.py - v1
"""Tests for llm/base_client.py: BaseLLMClient ABC is not instantiable."""

from __future__ import annotations

import pytest

from proposalgen.llm.base_client import BaseLLMClient
from proposalgen.llm.models import LLMResponse


class TestBaseLLMClient:
    def test_cannot_instantiate(self):
        with pytest.raises(TypeError):
            BaseLLMClient()  # type: ignore[abstract]

    def test_has_required_methods(self):
        assert hasattr(BaseLLMClient, "complete")
        assert hasattr(BaseLLMClient, "provider_name")
        assert hasattr(BaseLLMClient, "model_name")


class TestLLMResponse:
    def test_default_stop_reason(self):
        resp = LLMResponse(
            content="x", input_tokens=1, output_tokens=1,
            model="m", provider="p", latency_ms=0,
        )
        assert resp.stop_reason == "complete"
