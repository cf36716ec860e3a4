# tests/unit/orchestration/test_unit_fallback.py — v1
"""Tests for orchestration/fallback.py."""

from __future__ import annotations

import pytest

from nexora_ai.config.tasks import TaskKind, TaskRegistry
from nexora_ai.core.errors import ValidationError
from nexora_ai.orchestration.fallback import FallbackResponder


class TestFallbackResponder:
    def test_task_with_fallback(self, registry):
        text = FallbackResponder(registry).respond(TaskKind.CHAT)
        assert text == registry.resolve(TaskKind.CHAT).fallback_text

    @pytest.mark.parametrize("kind", [TaskKind.ANALYSIS, TaskKind.CONTENT, TaskKind.EMAIL])
    def test_task_without_fallback(self, registry, kind):
        assert FallbackResponder(registry).respond(kind) is None

    def test_fallbacks_are_task_specific(self, registry):
        responder = FallbackResponder(registry)
        texts = {responder.respond(k) for k in registry.kinds()} - {None}
        assert len(texts) == 3

    def test_unregistered_kind(self):
        with pytest.raises(ValidationError):
            FallbackResponder(TaskRegistry([])).respond(TaskKind.CHAT)
