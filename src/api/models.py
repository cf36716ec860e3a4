# src/api/models.py — v2
"""API-level models: AIRequestBody, AIResponse, UsageSummary."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel


class AIRequestBody(BaseModel):
    """Inbound request as received from a caller."""

    task_kind: str
    prompt: str
    context: dict[str, Any] | None = None
    explicit_cache_key: str | None = None


class UsageSummary(BaseModel):
    """Per-response usage figures."""

    tokens_used: int = 0
    latency_ms: int = 0
    estimated_cost: float = 0.0


class AIResponse(BaseModel):
    """Uniform response envelope; callers never see raw exceptions."""

    success: bool
    data: str | None = None
    error: str | None = None
    usage: UsageSummary | None = None
    cached: bool = False
    fallback: bool = False
