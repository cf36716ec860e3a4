# src/orchestration/fallback.py — v1
"""Static fallback responses for tasks that tolerate degraded output."""

from __future__ import annotations

from nexora_ai.config.tasks import TaskKind, TaskRegistry


class FallbackResponder:
    """Look up the canned response configured for a task kind."""

    def __init__(self, registry: TaskRegistry) -> None:
        self._registry = registry

    def respond(self, task_kind: TaskKind) -> str | None:
        """Return the fallback text, or None when the task has none."""
        return self._registry.resolve(task_kind).fallback_text
