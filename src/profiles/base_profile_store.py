# src/profiles/base_profile_store.py — v1
"""Abstract caller profile store and caller directory interfaces."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

from nexora_ai.core.models import CallerProfile


class BaseProfileStore(ABC):
    """Read/insert/upsert access to caller profiles."""

    @abstractmethod
    async def get(self, caller_id: str) -> CallerProfile | None:
        """Return the stored profile, or None if absent."""

    @abstractmethod
    async def create(self, profile: CallerProfile) -> None:
        """Insert a new profile.

        Raises:
            ProfileConflictError: If a profile already exists for the caller.
        """

    @abstractmethod
    async def upsert(self, profile: CallerProfile) -> None:
        """Insert or replace a profile (administrative updates)."""

    async def close(self) -> None:
        """Release backend resources."""


class BaseCallerDirectory(ABC):
    """Source of other caller data (user profile, clinic) for defaults."""

    @abstractmethod
    async def lookup(self, caller_id: str) -> dict[str, Any] | None:
        """Return raw caller attributes, or None if unknown."""


class StaticCallerDirectory(BaseCallerDirectory):
    """Caller directory backed by a fixed mapping."""

    def __init__(self, records: dict[str, dict[str, Any]] | None = None) -> None:
        self._records = dict(records or {})

    async def lookup(self, caller_id: str) -> dict[str, Any] | None:
        return self._records.get(caller_id)
