# tests/unit/config/test_unit_tasks.py — v1
"""Tests for config/tasks.py."""

from __future__ import annotations

import dataclasses
from datetime import timedelta

import pytest

from nexora_ai.config.tasks import (
    CACHE_VALIDITY,
    DEFAULT_TASK_PROFILES,
    TaskKind,
    TaskProfile,
    TaskRegistry,
)
from nexora_ai.core.errors import ValidationError


class TestTaskProfiles:
    def test_all_kinds_registered(self):
        assert {p.kind for p in DEFAULT_TASK_PROFILES} == set(TaskKind)

    def test_chat_profile(self):
        chat = TaskRegistry().resolve(TaskKind.CHAT)
        assert chat.max_output_tokens == 300
        assert chat.temperature == 0.7
        assert chat.deadline_ms == 15_000
        assert chat.deadline_s == 15.0
        assert chat.fallback_text

    def test_fallbacks(self):
        registry = TaskRegistry()
        with_fallback = {k for k in registry.kinds() if registry.resolve(k).fallback_text}
        assert with_fallback == {
            TaskKind.CHAT, TaskKind.REVIEW_RESPONSE, TaskKind.CONSULTATION,
        }

    def test_default_validity(self):
        assert CACHE_VALIDITY == timedelta(hours=24)
        assert all(p.cache_validity == CACHE_VALIDITY for p in DEFAULT_TASK_PROFILES)

    def test_profile_immutable(self):
        chat = TaskRegistry().resolve(TaskKind.CHAT)
        with pytest.raises(dataclasses.FrozenInstanceError):
            chat.deadline_ms = 1  # type: ignore[misc]


class TestTaskRegistry:
    def test_resolve_by_string(self):
        assert TaskRegistry().resolve("analysis").kind == TaskKind.ANALYSIS

    def test_resolve_unknown(self):
        with pytest.raises(ValidationError, match="Unknown task kind"):
            TaskRegistry().resolve("unknown")

    def test_resolve_non_string(self):
        with pytest.raises(ValidationError):
            TaskRegistry().resolve(42)  # type: ignore[arg-type]

    def test_contains(self):
        registry = TaskRegistry()
        assert "chat" in registry
        assert TaskKind.EMAIL in registry
        assert "nope" not in registry

    def test_kinds_order(self):
        assert TaskRegistry().kinds()[0] == TaskKind.CHAT

    def test_duplicate_rejected(self):
        p = TaskProfile(kind=TaskKind.CHAT, max_output_tokens=1, temperature=0, deadline_ms=1)
        with pytest.raises(ValueError, match="Duplicate"):
            TaskRegistry([p, p])

    def test_custom_profiles(self):
        p = TaskProfile(kind=TaskKind.CHAT, max_output_tokens=10, temperature=0, deadline_ms=50)
        registry = TaskRegistry([p])
        assert registry.resolve("chat").deadline_ms == 50
        assert "analysis" not in registry
