# src/llm/models.py — v2
"""LLM-specific types: Message, LLMResponse, InferenceResult."""

from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel


class Message(BaseModel):
    """Single message in a conversation."""

    role: Literal["user", "assistant", "system"]
    content: str


class LLMResponse(BaseModel):
    """Normalized response from any LLM provider."""

    content: str
    input_tokens: int
    output_tokens: int
    model: str
    provider: str
    latency_ms: int
    raw_response: Any = None

    @property
    def total_tokens(self) -> int:
        return self.input_tokens + self.output_tokens


class InferenceResult(BaseModel):
    """Result of a bounded inference call, summed over all attempts."""

    text: str
    input_tokens: int = 0
    output_tokens: int = 0
    model: str
    provider: str

    @property
    def tokens_used(self) -> int:
        return self.input_tokens + self.output_tokens
