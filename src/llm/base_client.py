# src/llm/base_client.py - v2
"""Abstract LLM client interface."""

from __future__ import annotations

from abc import ABC, abstractmethod

from proposalgen.llm.models import LLMResponse, Message


class BaseLLMClient(ABC):
    """Unified interface for all generation backends."""

    @abstractmethod
    async def complete(
        self,
        messages: list[Message],
        system: str | None = None,
        max_tokens: int = 4096,
        temperature: float = 0.7,
    ) -> LLMResponse:
        """Text completion bounded by max_tokens output tokens."""

    @property
    @abstractmethod
    def provider_name(self) -> str:
        """Provider identifier (anthropic, openai, google, ollama)."""

    @property
    @abstractmethod
    def model_name(self) -> str:
        """Model identifier passed to the provider."""
