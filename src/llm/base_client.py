# src/llm/base_client.py — v2
"""Abstract LLM client interface implemented by provider adapters."""

from __future__ import annotations

from abc import ABC, abstractmethod

from nexora_ai.llm.models import LLMResponse, Message


class BaseLLMClient(ABC):
    """Unified interface for all LLM providers."""

    @abstractmethod
    async def complete(
        self,
        messages: list[Message],
        system: str | None = None,
        max_tokens: int = 1024,
        temperature: float = 0.7,
    ) -> LLMResponse:
        """Text completion."""

    @property
    @abstractmethod
    def provider_name(self) -> str:
        """Provider identifier (openai, anthropic)."""

    @property
    @abstractmethod
    def model(self) -> str:
        """Model identifier sent upstream."""
