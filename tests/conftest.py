# tests/conftest.py — v2
"""Shared test fixtures for all unit and integration tests.

Provides mock LLM clients, a fast task registry, a controllable clock and
an orchestrator wired to in-memory stores. No external services: provider
calls are mocked.
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from unittest.mock import AsyncMock

import pytest

from nexora_ai.auth.identity import StaticTokenIdentityProvider
from nexora_ai.cache.memory_store import MemoryCacheStore
from nexora_ai.cache.response_cache import ResponseCache
from nexora_ai.config.tasks import DEFAULT_TASK_PROFILES, TaskRegistry
from nexora_ai.llm.inference_client import InferenceClient
from nexora_ai.llm.models import LLMResponse
from nexora_ai.orchestration.orchestrator import Orchestrator
from nexora_ai.profiles.context_builder import ContextBuilder
from nexora_ai.profiles.memory_store import MemoryProfileStore
from nexora_ai.tracking.memory_store import MemoryUsageStore
from nexora_ai.tracking.usage_meter import UsageMeter

TOKEN = "tok-alice"
CALLER_ID = "user_alice"


class FakeClock:
    """Manually advanced UTC clock."""

    def __init__(self, start: datetime | None = None) -> None:
        self.now = start or datetime(2026, 3, 1, 9, 0, tzinfo=timezone.utc)

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs: float) -> None:
        self.now += timedelta(**kwargs)


# === FIXTURES: Mock LLM ===


@pytest.fixture
def mock_llm_response() -> LLMResponse:
    """Standard mock LLM response."""
    return LLMResponse(
        content="Generated answer",
        input_tokens=120,
        output_tokens=80,
        model="gpt-4.1-2025-04-14",
        provider="openai",
        latency_ms=400,
    )


@pytest.fixture
def mock_llm_client(mock_llm_response: LLMResponse) -> AsyncMock:
    """Mock BaseLLMClient with default response."""
    client = AsyncMock()
    client.complete = AsyncMock(return_value=mock_llm_response)
    client.provider_name = "openai"
    client.model = "gpt-4.1-2025-04-14"
    return client


# === FIXTURES: Orchestration ===


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def registry() -> TaskRegistry:
    return TaskRegistry(DEFAULT_TASK_PROFILES)


@pytest.fixture
def cache_store() -> MemoryCacheStore:
    return MemoryCacheStore()


@pytest.fixture
def usage_store() -> MemoryUsageStore:
    return MemoryUsageStore()


@pytest.fixture
def profile_store() -> MemoryProfileStore:
    return MemoryProfileStore()


@pytest.fixture
def orchestrator(
    registry: TaskRegistry,
    mock_llm_client: AsyncMock,
    cache_store: MemoryCacheStore,
    usage_store: MemoryUsageStore,
    profile_store: MemoryProfileStore,
    clock: FakeClock,
) -> Orchestrator:
    """Orchestrator over in-memory stores, no retries, fake clock."""
    return Orchestrator(
        registry=registry,
        identity_provider=StaticTokenIdentityProvider({TOKEN: CALLER_ID}),
        context_builder=ContextBuilder(profile_store),
        inference_client=InferenceClient(mock_llm_client, retry_configs={}),
        meter=UsageMeter(usage_store),
        cache=ResponseCache(cache_store, registry, clock=clock),
    )
