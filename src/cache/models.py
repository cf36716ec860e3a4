# src/cache/models.py — v2
"""Cache domain models: CacheEntry."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel

from nexora_ai.config.tasks import TaskKind


class CacheEntry(BaseModel):
    """Generated text stored for a request fingerprint."""

    fingerprint: str
    task_kind: TaskKind
    generated_text: str
    created_at: datetime

    @property
    def key(self) -> str:
        return cache_key(self.fingerprint, self.task_kind)


def cache_key(fingerprint: str, task_kind: TaskKind | str) -> str:
    """Storage key combining task kind and fingerprint."""
    kind = task_kind.value if isinstance(task_kind, TaskKind) else task_kind
    return f"{kind}:{fingerprint}"
