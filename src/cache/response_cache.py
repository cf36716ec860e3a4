# src/cache/response_cache.py — v1
"""Read-through / write-through response cache.

Wraps a BaseCacheStore with the task validity window. Entries older than
the window are misses at read time; nothing is evicted eagerly. Reads and
writes never raise: a failed read is a miss, a failed write is logged.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable
from datetime import datetime, timezone

from nexora_ai.cache.base_cache_store import BaseCacheStore
from nexora_ai.cache.models import CacheEntry, cache_key
from nexora_ai.config.tasks import TaskKind, TaskRegistry
from nexora_ai.core.errors import CacheError
from nexora_ai.core.side_effects import SideEffectResult, run_side_effect

logger = logging.getLogger(__name__)


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class ResponseCache:
    """Cache of generated text keyed by fingerprint and task kind."""

    def __init__(
        self,
        store: BaseCacheStore,
        registry: TaskRegistry,
        clock: Callable[[], datetime] = utcnow,
        timeout_s: float = 2.0,
    ) -> None:
        self._store = store
        self._registry = registry
        self._clock = clock
        self._timeout_s = timeout_s

    async def get(self, fingerprint: str, task_kind: TaskKind) -> str | None:
        """Return cached text, or None on miss, expiry or read failure."""
        key = cache_key(fingerprint, task_kind)
        try:
            entry = await asyncio.wait_for(self._store.get(key), timeout=self._timeout_s)
        except Exception as e:
            err = CacheError(f"cache read failed for {key}: {e!r}")
            logger.warning("%s", err)
            return None

        if entry is None or entry.task_kind != task_kind:
            return None

        validity = self._registry.resolve(task_kind).cache_validity
        age = self._clock() - _as_aware(entry.created_at)
        if age > validity:
            logger.debug("Cache entry %s expired (age %s)", key, age)
            return None
        return entry.generated_text

    async def put(
        self, fingerprint: str, task_kind: TaskKind, text: str
    ) -> SideEffectResult[None]:
        """Store generated text. Failures are logged and returned, never raised."""
        entry = CacheEntry(
            fingerprint=fingerprint,
            task_kind=task_kind,
            generated_text=text,
            created_at=self._clock(),
        )
        return await run_side_effect(
            "cache_write",
            self._store.put(entry.key, entry),
            timeout_s=self._timeout_s,
        )


def _as_aware(value: datetime) -> datetime:
    """Treat naive timestamps as UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value
