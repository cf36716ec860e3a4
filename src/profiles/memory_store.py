# src/profiles/memory_store.py — v1
"""In-process caller profile store (PROFILE_BACKEND=memory)."""

from __future__ import annotations

from nexora_ai.core.errors import ProfileConflictError
from nexora_ai.core.models import CallerProfile
from nexora_ai.profiles.base_profile_store import BaseProfileStore


class MemoryProfileStore(BaseProfileStore):
    """Dict-backed profile store."""

    def __init__(self) -> None:
        self._profiles: dict[str, CallerProfile] = {}

    async def get(self, caller_id: str) -> CallerProfile | None:
        return self._profiles.get(caller_id)

    async def create(self, profile: CallerProfile) -> None:
        if profile.caller_id in self._profiles:
            raise ProfileConflictError(f"Profile already exists for {profile.caller_id}")
        self._profiles[profile.caller_id] = profile

    async def upsert(self, profile: CallerProfile) -> None:
        self._profiles[profile.caller_id] = profile
