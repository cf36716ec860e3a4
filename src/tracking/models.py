# src/tracking/models.py — v2
"""Tracking domain models: UsageRecord, ModelPricing, UsageReport."""

from __future__ import annotations

import uuid
from datetime import datetime, timezone
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

from nexora_ai.config.tasks import TaskKind

Outcome = Literal["inference", "cache_hit", "dedup_join", "fallback", "error"]


class UsageRecord(BaseModel):
    """One terminal outcome of a logical AI request. Append-only."""

    model_config = ConfigDict(frozen=True)

    record_id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    caller_id: str
    task_kind: TaskKind
    outcome: Outcome
    tokens_used: int = 0
    input_tokens: int = 0
    output_tokens: int = 0
    estimated_cost: float = 0.0
    latency_ms: int
    model_used: str | None = None
    fingerprint: str | None = None
    success: bool
    error_message: str | None = None


class ModelPricing(BaseModel):
    """LLM model pricing configuration (USD per 1M tokens)."""

    model: str
    input_price_per_1m: float
    output_price_per_1m: float


class TaskUsageStats(BaseModel):
    """Aggregated usage for one task kind."""

    requests: int = 0
    successes: int = 0
    failures: int = 0
    cache_hits: int = 0
    dedup_joins: int = 0
    fallbacks: int = 0
    total_tokens: int = 0
    total_cost: float = 0.0
    avg_latency_ms: float = 0.0


class UsageReport(TaskUsageStats):
    """Aggregated usage across all task kinds."""

    by_task_kind: dict[str, TaskUsageStats] = {}
    by_model: dict[str, int] = {}
