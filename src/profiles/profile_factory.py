# src/profiles/profile_factory.py — v1
"""Factory for caller profile store instantiation."""

from __future__ import annotations

from nexora_ai.config.settings import Settings
from nexora_ai.profiles.base_profile_store import BaseProfileStore


def create_profile_store(settings: Settings | None = None) -> BaseProfileStore:
    """Instantiate the configured profile backend (memory when no settings)."""
    backend = "memory" if settings is None else settings.profile_backend

    if backend == "memory":
        from nexora_ai.profiles.memory_store import MemoryProfileStore
        return MemoryProfileStore()

    if backend == "sqlite":
        from nexora_ai.profiles.sqlite_store import SqliteProfileStore
        return SqliteProfileStore(db_path=settings.profile_db_path)

    raise ValueError(f"Unsupported profile backend: {backend!r}")
