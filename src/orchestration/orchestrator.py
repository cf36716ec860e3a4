# src/orchestration/orchestrator.py — v1
"""Request orchestrator: the single entry point for AI requests.

Flow per request:
  1. Authenticate the credential and validate the request
  2. Fingerprint it and join the in-flight map (leader or follower)
  3. Leader: cache check, then caller context and a deadline-bounded
     inference call, with the task fallback on timeout or provider failure
  4. Publish the outcome to followers, write the cache on success, meter
  5. Release the in-flight entry on every exit path

Authentication and validation failures return immediately without
metering. Every other request produces exactly one usage record.
"""

from __future__ import annotations

import asyncio
import logging
import time
import uuid
from dataclasses import dataclass

from nexora_ai.api.models import AIRequestBody, AIResponse, UsageSummary
from nexora_ai.auth.identity import BaseIdentityProvider
from nexora_ai.cache.fingerprint import DEFAULT_FINGERPRINT_LENGTH, compute_fingerprint
from nexora_ai.cache.response_cache import ResponseCache
from nexora_ai.config.tasks import TaskRegistry
from nexora_ai.core.errors import (
    SERVICE_UNAVAILABLE_MESSAGE,
    AuthenticationError,
    InferenceTimeoutError,
    ProviderError,
    ValidationError,
)
from nexora_ai.core.models import AIRequest, parse_context
from nexora_ai.dedup.coordinator import DedupCoordinator
from nexora_ai.llm.inference_client import InferenceClient
from nexora_ai.llm.models import InferenceResult
from nexora_ai.logging.context import clear_context, set_fingerprint, set_request_context
from nexora_ai.orchestration.fallback import FallbackResponder
from nexora_ai.profiles.context_builder import ContextBuilder
from nexora_ai.tracking.models import Outcome, UsageRecord
from nexora_ai.tracking.usage_meter import UsageMeter

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RequestOutcome:
    """Result a leader produces and shares with its followers."""

    outcome: Outcome
    success: bool
    data: str | None = None
    error: str | None = None
    cached: bool = False
    fallback: bool = False
    inference: InferenceResult | None = None
    # Internal failure detail for the usage record; never returned.
    failure_reason: str | None = None

    @property
    def record_success(self) -> bool:
        return self.outcome in ("inference", "cache_hit")


class Orchestrator:
    """Coordinate cache, dedup, inference, fallback and metering."""

    def __init__(
        self,
        registry: TaskRegistry,
        identity_provider: BaseIdentityProvider,
        context_builder: ContextBuilder,
        inference_client: InferenceClient,
        meter: UsageMeter,
        cache: ResponseCache | None = None,
        fallback: FallbackResponder | None = None,
        coordinator: DedupCoordinator[RequestOutcome] | None = None,
        fingerprint_length: int = DEFAULT_FINGERPRINT_LENGTH,
    ) -> None:
        self._registry = registry
        self._identity = identity_provider
        self._context_builder = context_builder
        self._inference = inference_client
        self._meter = meter
        self._cache = cache
        self._fallback = fallback or FallbackResponder(registry)
        self._coordinator: DedupCoordinator[RequestOutcome] = coordinator or DedupCoordinator()
        self._fingerprint_length = fingerprint_length

    @property
    def coordinator(self) -> DedupCoordinator[RequestOutcome]:
        return self._coordinator

    @property
    def meter(self) -> UsageMeter:
        return self._meter

    async def handle(self, body: AIRequestBody, credential: str | None) -> AIResponse:
        """Handle one AI request. Never raises except on cancellation."""
        started = time.perf_counter()
        request_id = str(uuid.uuid4())
        set_request_context(request_id, task_kind=body.task_kind)
        try:
            try:
                caller_id = await self._identity.authenticate(credential)
                request = self._validate(caller_id, body)
            except (AuthenticationError, ValidationError) as e:
                logger.info("Request rejected: %s", e)
                return AIResponse(success=False, error=str(e))
            except Exception:
                logger.exception("Unexpected failure authenticating request")
                return AIResponse(success=False, error=SERVICE_UNAVAILABLE_MESSAGE)

            set_request_context(request_id, caller_id=caller_id, task_kind=request.task_kind.value)
            fingerprint = compute_fingerprint(
                request.task_kind,
                request.prompt,
                request.context,
                explicit_cache_key=request.explicit_cache_key,
                length=self._fingerprint_length,
            )
            set_fingerprint(fingerprint)

            is_leader, fut = await self._coordinator.join(fingerprint)
            if is_leader:
                return await self._lead(request, fingerprint, fut, started)
            return await self._follow(request, fingerprint, fut, started)
        finally:
            clear_context()

    def _validate(self, caller_id: str, body: AIRequestBody) -> AIRequest:
        profile = self._registry.resolve(body.task_kind)
        if not body.prompt or not body.prompt.strip():
            raise ValidationError("Prompt must not be empty")
        if body.explicit_cache_key is not None and not body.explicit_cache_key.strip():
            raise ValidationError("explicit_cache_key must not be blank")
        return AIRequest(
            caller_id=caller_id,
            task_kind=profile.kind,
            prompt=body.prompt,
            context=parse_context(profile.kind, body.context),
            explicit_cache_key=body.explicit_cache_key,
        )

    async def _lead(
        self,
        request: AIRequest,
        fingerprint: str,
        fut: asyncio.Future[RequestOutcome],
        started: float,
    ) -> AIResponse:
        try:
            try:
                outcome = await self._produce(request, fingerprint)
            except asyncio.CancelledError as e:
                self._coordinator.fail(fut, e)
                logger.warning("Request %s cancelled before completion", fingerprint)
                cancelled = RequestOutcome(
                    outcome="error",
                    success=False,
                    error=SERVICE_UNAVAILABLE_MESSAGE,
                    failure_reason="cancelled: request cancelled before completion",
                )
                # Shielded so a repeated cancel cannot drop the record.
                await asyncio.shield(
                    self._meter.record(self._leader_record(request, fingerprint, cancelled, started))
                )
                raise
            except Exception as e:
                logger.exception("Unexpected failure handling request %s", fingerprint)
                outcome = RequestOutcome(
                    outcome="error",
                    success=False,
                    error=SERVICE_UNAVAILABLE_MESSAGE,
                    failure_reason=f"{type(e).__name__}: {e}",
                )
            self._coordinator.resolve(fut, outcome)

            if outcome.outcome == "inference" and self._cache is not None:
                await self._cache.put(fingerprint, request.task_kind, outcome.data or "")

            record = self._leader_record(request, fingerprint, outcome, started)
            await self._meter.record(record)
            return _to_response(outcome, record)
        finally:
            self._coordinator.release(fingerprint, fut)

    def _leader_record(
        self,
        request: AIRequest,
        fingerprint: str,
        outcome: RequestOutcome,
        started: float,
    ) -> UsageRecord:
        return self._meter.build_record(
            caller_id=request.caller_id,
            task_kind=request.task_kind,
            outcome=outcome.outcome,
            latency_ms=_elapsed_ms(started),
            success=outcome.record_success,
            inference=outcome.inference,
            model_used=None if outcome.cached else self._inference.primary_model,
            fingerprint=fingerprint,
            error_message=outcome.failure_reason,
        )

    async def _produce(self, request: AIRequest, fingerprint: str) -> RequestOutcome:
        profile = self._registry.resolve(request.task_kind)

        if self._cache is not None:
            text = await self._cache.get(fingerprint, request.task_kind)
            if text is not None:
                logger.info("Cache hit for %s", fingerprint)
                return RequestOutcome(outcome="cache_hit", success=True, data=text, cached=True)

        caller_profile = await self._context_builder.resolve(request.caller_id)
        try:
            result = await self._inference.call(
                profile, request.prompt, request.context, caller_profile
            )
        except (InferenceTimeoutError, ProviderError) as e:
            return self._recover(request, e, billed=_billed_inference(e))

        logger.info(
            "Inference completed for %s (%d tokens, model=%s)",
            request.task_kind.value, result.tokens_used, result.model,
        )
        return RequestOutcome(outcome="inference", success=True, data=result.text, inference=result)

    def _recover(
        self,
        request: AIRequest,
        exc: BaseException,
        billed: InferenceResult | None = None,
    ) -> RequestOutcome:
        """Fallback text for the task if it has one, else a sanitized error."""
        reason = _failure_reason(exc)
        text = self._fallback.respond(request.task_kind)
        if text is not None:
            logger.warning("Serving fallback for %s: %s", request.task_kind.value, reason)
            return RequestOutcome(
                outcome="fallback", success=True, data=text,
                fallback=True, inference=billed, failure_reason=reason,
            )
        logger.error("Request failed without fallback: %s", reason)
        return RequestOutcome(
            outcome="error", success=False,
            error=SERVICE_UNAVAILABLE_MESSAGE, inference=billed, failure_reason=reason,
        )

    async def _follow(
        self,
        request: AIRequest,
        fingerprint: str,
        fut: asyncio.Future[RequestOutcome],
        started: float,
    ) -> AIResponse:
        try:
            shared = await self._coordinator.wait(fut)
        except ProviderError as e:
            logger.warning("In-flight leader for %s failed: %s", fingerprint, e)
            shared = self._recover(request, e)

        record = self._meter.build_record(
            caller_id=request.caller_id,
            task_kind=request.task_kind,
            outcome="dedup_join",
            latency_ms=_elapsed_ms(started),
            success=shared.record_success,
            fingerprint=fingerprint,
            error_message=shared.failure_reason,
        )
        await self._meter.record(record)
        return _to_response(shared, record)


def _failure_reason(exc: BaseException) -> str:
    category = getattr(exc, "category", None)
    if isinstance(exc, InferenceTimeoutError):
        category = "timeout"
    return f"{category}: {exc}" if category else str(exc)


def _billed_inference(exc: BaseException) -> InferenceResult | None:
    """Tokens a failed call still consumed, as a textless result for metering."""
    if not isinstance(exc, ProviderError) or exc.tokens_used == 0:
        return None
    return InferenceResult(
        text="",
        input_tokens=exc.input_tokens,
        output_tokens=exc.output_tokens,
        model=exc.model or "",
        provider=exc.provider or "",
    )


def _elapsed_ms(started: float) -> int:
    return int((time.perf_counter() - started) * 1000)


def _to_response(outcome: RequestOutcome, record: UsageRecord) -> AIResponse:
    return AIResponse(
        success=outcome.success,
        data=outcome.data,
        error=outcome.error,
        usage=UsageSummary(
            tokens_used=record.tokens_used,
            latency_ms=record.latency_ms,
            estimated_cost=record.estimated_cost,
        ),
        cached=outcome.cached,
        fallback=outcome.fallback,
    )
