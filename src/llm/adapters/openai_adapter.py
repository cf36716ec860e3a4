# src/llm/adapters/openai_adapter.py — v2
"""OpenAI adapter implementing BaseLLMClient.

Uses the official openai SDK. Newer models take ``max_completion_tokens``
and a fixed temperature; legacy chat models take ``max_tokens``.
"""

from __future__ import annotations

import time
from typing import Any

from nexora_ai.llm.base_client import BaseLLMClient
from nexora_ai.llm.models import LLMResponse, Message

# Model prefixes that reject max_tokens/temperature.
_COMPLETION_TOKEN_MODELS = ("gpt-4.1", "gpt-5", "o1", "o3", "o4")


class OpenAIAdapter(BaseLLMClient):
    """OpenAI chat completions adapter."""

    def __init__(self, model: str = "gpt-4.1-2025-04-14", api_key: str = "", **kwargs: Any):
        self._model = model
        self._api_key = api_key
        self.__client = None  # Lazy initialization

    @property
    def _client(self):
        """Lazy-init OpenAI client (only on first API call)."""
        if self.__client is None:
            try:
                import openai
            except ImportError as e:
                raise ImportError(
                    "openai package required: pip install openai"
                ) from e
            self.__client = openai.AsyncOpenAI(api_key=self._api_key)
        return self.__client

    async def complete(
        self,
        messages: list[Message],
        system: str | None = None,
        max_tokens: int = 1024,
        temperature: float = 0.7,
    ) -> LLMResponse:
        oai_messages: list[dict[str, Any]] = []
        if system:
            oai_messages.append({"role": "system", "content": system})
        for m in messages:
            oai_messages.append({"role": m.role, "content": m.content})

        kwargs: dict[str, Any] = {"model": self._model, "messages": oai_messages}
        if self._model.startswith(_COMPLETION_TOKEN_MODELS):
            kwargs["max_completion_tokens"] = max_tokens
        else:
            kwargs["max_tokens"] = max_tokens
            kwargs["temperature"] = temperature

        t0 = time.monotonic()
        resp = await self._client.chat.completions.create(**kwargs)
        latency = int((time.monotonic() - t0) * 1000)

        choice = resp.choices[0]
        usage = resp.usage
        return LLMResponse(
            content=choice.message.content or "",
            input_tokens=usage.prompt_tokens if usage else 0,
            output_tokens=usage.completion_tokens if usage else 0,
            model=self._model,
            provider="openai",
            latency_ms=latency,
            raw_response=resp,
        )

    @property
    def provider_name(self) -> str:
        return "openai"

    @property
    def model(self) -> str:
        return self._model
