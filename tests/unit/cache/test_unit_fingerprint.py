# tests/unit/cache/test_unit_fingerprint.py — v1
"""Tests for cache/fingerprint.py."""

from __future__ import annotations

import pytest

from nexora_ai.cache.fingerprint import compute_fingerprint
from nexora_ai.config.tasks import TaskKind
from nexora_ai.core.models import AnalysisContext, ChatContext


class TestComputeFingerprint:
    def test_deterministic(self):
        a = compute_fingerprint(TaskKind.ANALYSIS, "X", {"a": 1})
        b = compute_fingerprint(TaskKind.ANALYSIS, "X", {"a": 1})
        assert a == b

    def test_default_length(self):
        fp = compute_fingerprint(TaskKind.CHAT, "hello")
        assert len(fp) == 32
        assert all(c in "0123456789abcdef" for c in fp)

    def test_custom_length(self):
        assert len(compute_fingerprint(TaskKind.CHAT, "hello", length=64)) == 64
        assert len(compute_fingerprint(TaskKind.CHAT, "hello", length=8)) == 8

    @pytest.mark.parametrize("length", [0, 7, 65])
    def test_invalid_length(self, length):
        with pytest.raises(ValueError):
            compute_fingerprint(TaskKind.CHAT, "hello", length=length)

    def test_key_order_irrelevant(self):
        a = compute_fingerprint(TaskKind.ANALYSIS, "X", {"a": 1, "b": {"c": 2, "d": 3}})
        b = compute_fingerprint(TaskKind.ANALYSIS, "X", {"b": {"d": 3, "c": 2}, "a": 1})
        assert a == b

    def test_structurally_equal_models(self):
        a = compute_fingerprint(TaskKind.ANALYSIS, "X", AnalysisContext(metrics={"m": 1}))
        b = compute_fingerprint(TaskKind.ANALYSIS, "X", AnalysisContext(metrics={"m": 1}))
        assert a == b

    def test_task_kind_matters(self):
        assert compute_fingerprint(TaskKind.CHAT, "X") != compute_fingerprint(
            TaskKind.CONTENT, "X"
        )

    def test_prompt_matters(self):
        assert compute_fingerprint(TaskKind.CHAT, "X") != compute_fingerprint(TaskKind.CHAT, "Y")

    def test_context_matters(self):
        a = compute_fingerprint(TaskKind.CHAT, "X", ChatContext(page="/home"))
        b = compute_fingerprint(TaskKind.CHAT, "X", ChatContext(page="/reports"))
        assert a != b

    def test_none_context_equals_empty(self):
        assert compute_fingerprint(TaskKind.CHAT, "X", None) == compute_fingerprint(
            TaskKind.CHAT, "X", {}
        )

    def test_explicit_cache_key_replaces_prompt(self):
        a = compute_fingerprint(TaskKind.CONTENT, "A", {"x": 1}, explicit_cache_key="k")
        b = compute_fingerprint(TaskKind.CONTENT, "B", {"y": 2}, explicit_cache_key="k")
        assert a == b

    def test_explicit_cache_key_scoped_by_task_kind(self):
        a = compute_fingerprint(TaskKind.CONTENT, "A", explicit_cache_key="k")
        b = compute_fingerprint(TaskKind.EMAIL, "A", explicit_cache_key="k")
        assert a != b

    def test_string_task_kind(self):
        assert compute_fingerprint("chat", "X") == compute_fingerprint(TaskKind.CHAT, "X")
