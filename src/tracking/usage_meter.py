# src/tracking/usage_meter.py — v1
"""Per-request usage metering.

Every logical request that reaches an outcome produces exactly one
UsageRecord. Writes are best effort and bounded: a failed write is logged
as a MeteringError and never alters the caller's response.
"""

from __future__ import annotations

import logging

from nexora_ai.config.tasks import TaskKind
from nexora_ai.core.errors import MeteringError
from nexora_ai.core.side_effects import SideEffectResult, run_side_effect
from nexora_ai.llm.models import InferenceResult
from nexora_ai.tracking.base_usage_store import BaseUsageStore
from nexora_ai.tracking.cost_calculator import DEFAULT_FLAT_RATE_PER_1K, compute_call_cost
from nexora_ai.tracking.models import ModelPricing, Outcome, UsageRecord

logger = logging.getLogger(__name__)


class UsageMeter:
    """Build and persist usage records."""

    def __init__(
        self,
        store: BaseUsageStore,
        pricing: dict[str, ModelPricing] | None = None,
        flat_rate_per_1k: float = DEFAULT_FLAT_RATE_PER_1K,
        timeout_s: float = 2.0,
    ) -> None:
        self._store = store
        self._pricing = pricing
        self._flat_rate_per_1k = flat_rate_per_1k
        self._timeout_s = timeout_s

    @property
    def store(self) -> BaseUsageStore:
        return self._store

    def build_record(
        self,
        caller_id: str,
        task_kind: TaskKind,
        outcome: Outcome,
        latency_ms: int,
        success: bool,
        inference: InferenceResult | None = None,
        model_used: str | None = None,
        fingerprint: str | None = None,
        error_message: str | None = None,
    ) -> UsageRecord:
        """Assemble a record; tokens and cost come only from a real inference."""
        input_tokens = output_tokens = 0
        cost = 0.0
        if inference is not None:
            input_tokens = inference.input_tokens
            output_tokens = inference.output_tokens
            model_used = inference.model or model_used
            cost = compute_call_cost(
                model_used, input_tokens, output_tokens,
                pricing=self._pricing, flat_rate_per_1k=self._flat_rate_per_1k,
            )
        return UsageRecord(
            caller_id=caller_id,
            task_kind=task_kind,
            outcome=outcome,
            tokens_used=input_tokens + output_tokens,
            input_tokens=input_tokens,
            output_tokens=output_tokens,
            estimated_cost=round(cost, 6),
            latency_ms=max(0, latency_ms),
            model_used=model_used,
            fingerprint=fingerprint,
            success=success,
            error_message=error_message,
        )

    async def record(self, record: UsageRecord) -> SideEffectResult[None]:
        """Persist a record. Failures are logged and returned, never raised."""
        result = await run_side_effect(
            "usage_record", self._store.append(record), timeout_s=self._timeout_s
        )
        if not result.ok:
            logger.warning("%s", MeteringError(
                f"usage record {record.record_id} not persisted: {result.error!r}"
            ))
        return result
