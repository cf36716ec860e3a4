# tests/integration/test_int_orchestrator.py — v1
"""Integration tests: orchestrator over file-backed stores.

SQLite cache and profiles, JSON Lines usage log. The provider client is
mocked; no external services required.
"""

from __future__ import annotations

import asyncio

import pytest

from nexora_ai.api.facade import build_orchestrator
from nexora_ai.api.models import AIRequestBody
from nexora_ai.config.settings import load_settings
from nexora_ai.profiles.base_profile_store import StaticCallerDirectory
from nexora_ai.tracking.jsonl_store import load_records
from nexora_ai.tracking.stats_aggregator import summarize_usage


@pytest.fixture
def settings(tmp_path):
    return load_settings(
        cache_backend="sqlite",
        cache_root=tmp_path / "cache",
        usage_backend="jsonl",
        usage_log_path=tmp_path / "usage" / "ai_usage.jsonl",
        profile_backend="sqlite",
        profile_db_path=tmp_path / "profiles.db",
        auth_tokens="tok-1:user_1,tok-2:user_2",
    )


@pytest.fixture
def directory():
    return StaticCallerDirectory({
        "user_1": {"full_name": "Dr. Rivera", "clinic_name": "Rivera Dental", "role": "Owner"},
    })


class TestOrchestratorIntegration:
    @pytest.mark.asyncio
    async def test_full_flow(self, settings, directory, mock_llm_client):
        orch = build_orchestrator(
            settings, llm_client=mock_llm_client, caller_directory=directory,
        )
        body = AIRequestBody(
            task_kind="analysis", prompt="Summarize referrals", context={"metrics": {"total": 42}},
        )

        # Two identical concurrent requests, then a repeat served from cache
        first, second = await asyncio.gather(orch.handle(body, "tok-1"), orch.handle(body, "tok-2"))
        third = await orch.handle(body, "tok-1")
        rejected = await orch.handle(AIRequestBody(task_kind="unknown", prompt="x"), "tok-1")

        assert first.data == second.data == third.data == "Generated answer"
        assert third.cached is True
        assert rejected.success is False
        assert mock_llm_client.complete.await_count == 1
        assert len(orch.coordinator) == 0

        records = load_records(settings.usage_log_path)
        assert len(records) == 3
        report = summarize_usage(records)
        # The second caller either joined in flight or hit the fresh cache entry
        assert report.cache_hits + report.dedup_joins == 2
        assert report.total_tokens == 200

    @pytest.mark.asyncio
    async def test_profile_persisted_and_used(self, settings, directory, mock_llm_client):
        orch = build_orchestrator(settings, llm_client=mock_llm_client, caller_directory=directory)
        await orch.handle(AIRequestBody(task_kind="chat", prompt="hello"), "tok-1")

        system = mock_llm_client.complete.await_args.kwargs["system"]
        assert "Rivera Dental" in system
        assert "professional-authoritative" in system

        from nexora_ai.profiles.sqlite_store import SqliteProfileStore
        store = SqliteProfileStore(settings.profile_db_path)
        profile = await store.get("user_1")
        await store.close()
        assert profile is not None
        assert profile.owner_name == "Dr. Rivera"

    @pytest.mark.asyncio
    async def test_cache_survives_rebuild(self, settings, mock_llm_client):
        body = AIRequestBody(task_kind="content", prompt="Blog post on implants")
        await build_orchestrator(settings, llm_client=mock_llm_client).handle(body, "tok-1")
        resp = await build_orchestrator(settings, llm_client=mock_llm_client).handle(body, "tok-2")
        assert resp.cached is True
        assert mock_llm_client.complete.await_count == 1
