# tests/unit/api/test_unit_facade.py — v2
"""Tests for api/facade.py and api/models.py."""

from __future__ import annotations

import pytest

from nexora_ai.api.facade import build_orchestrator
from nexora_ai.api.models import AIRequestBody, AIResponse
from nexora_ai.cache.memory_store import MemoryCacheStore
from nexora_ai.config.settings import load_settings
from nexora_ai.llm.adapters.openai_adapter import OpenAIAdapter
from nexora_ai.orchestration.orchestrator import Orchestrator
from nexora_ai.tracking.memory_store import MemoryUsageStore


def _settings(tmp_path, **overrides):
    defaults = dict(
        cache_backend="memory",
        usage_backend="memory",
        profile_backend="memory",
        cache_root=tmp_path / "cache",
        auth_tokens="tok-1:user_1",
    )
    defaults.update(overrides)
    return load_settings(**defaults)


class TestBuildOrchestrator:
    def test_from_settings(self, tmp_path):
        orch = build_orchestrator(_settings(tmp_path))
        assert isinstance(orch, Orchestrator)
        assert isinstance(orch._inference._primary, OpenAIAdapter)
        assert orch._inference._secondary.model == "gpt-4o-mini"
        assert orch._cache is not None

    def test_cache_disabled(self, tmp_path):
        orch = build_orchestrator(_settings(tmp_path, cache_enabled=False))
        assert orch._cache is None

    def test_fresh_coordinator_per_orchestrator(self, tmp_path, mock_llm_client):
        a = build_orchestrator(_settings(tmp_path), llm_client=mock_llm_client)
        b = build_orchestrator(_settings(tmp_path), llm_client=mock_llm_client)
        assert a.coordinator is not b.coordinator

    @pytest.mark.asyncio
    async def test_end_to_end_with_injected_collaborators(self, tmp_path, mock_llm_client):
        usage_store = MemoryUsageStore()
        orch = build_orchestrator(
            _settings(tmp_path),
            llm_client=mock_llm_client,
            cache_store=MemoryCacheStore(),
            usage_store=usage_store,
        )
        body = AIRequestBody(task_kind="email", prompt="Draft a thank-you note")
        resp = await orch.handle(body, "tok-1")
        assert resp.success is True
        assert resp.data == "Generated answer"
        assert usage_store.records[0].caller_id == "user_1"

    @pytest.mark.asyncio
    async def test_flat_rate_from_settings(self, tmp_path, mock_llm_client):
        mock_llm_client.complete.return_value = mock_llm_client.complete.return_value.model_copy(
            update={"model": "unpriced-model"}
        )
        usage_store = MemoryUsageStore()
        orch = build_orchestrator(
            _settings(tmp_path, cost_default_per_1k=0.1),
            llm_client=mock_llm_client,
            usage_store=usage_store,
        )
        await orch.handle(AIRequestBody(task_kind="chat", prompt="hi"), "tok-1")
        assert usage_store.records[0].estimated_cost == pytest.approx(0.02)


class TestModels:
    def test_request_defaults(self):
        body = AIRequestBody(task_kind="chat", prompt="hi")
        assert body.context is None
        assert body.explicit_cache_key is None

    def test_response_defaults(self):
        resp = AIResponse(success=False, error="nope")
        assert resp.cached is False
        assert resp.fallback is False
        assert resp.usage is None
