# src/tracking/usage_factory.py — v1
"""Factory for usage store instantiation."""

from __future__ import annotations

from nexora_ai.config.settings import Settings
from nexora_ai.tracking.base_usage_store import BaseUsageStore


def create_usage_store(settings: Settings | None = None) -> BaseUsageStore:
    """Instantiate the configured usage backend (memory when no settings)."""
    backend = "memory" if settings is None else settings.usage_backend

    if backend == "memory":
        from nexora_ai.tracking.memory_store import MemoryUsageStore
        return MemoryUsageStore()

    if backend == "jsonl":
        from nexora_ai.tracking.jsonl_store import JsonlUsageStore
        return JsonlUsageStore(path=settings.usage_log_path)

    if backend == "sqlite":
        from nexora_ai.tracking.sqlite_store import SqliteUsageStore
        db_path = settings.usage_log_path.expanduser().with_suffix(".db")
        return SqliteUsageStore(db_path=db_path)

    raise ValueError(f"Unsupported usage backend: {backend!r}")
