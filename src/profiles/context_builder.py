# src/profiles/context_builder.py — v1
"""Caller context resolution with lazy profile provisioning.

Reads the stored caller profile; when none exists, synthesizes a default
from the caller directory and persists it. Provisioning is best effort: a
concurrent first insert re-reads the winner, and any other store failure
falls back to the synthesized profile without persisting it.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any

from nexora_ai.core.errors import ProfileConflictError, ProfileStoreError
from nexora_ai.core.models import CallerProfile
from nexora_ai.core.side_effects import run_side_effect
from nexora_ai.profiles.base_profile_store import BaseCallerDirectory, BaseProfileStore

logger = logging.getLogger(__name__)


class ContextBuilder:
    """Resolve the CallerProfile used to personalize upstream requests."""

    def __init__(
        self,
        store: BaseProfileStore,
        directory: BaseCallerDirectory | None = None,
        timeout_s: float = 2.0,
    ) -> None:
        self._store = store
        self._directory = directory
        self._timeout_s = timeout_s

    async def resolve(self, caller_id: str) -> CallerProfile:
        """Return the caller's profile, provisioning a default if absent."""
        try:
            profile = await asyncio.wait_for(self._store.get(caller_id), timeout=self._timeout_s)
        except Exception as e:
            logger.warning("%s", ProfileStoreError(f"profile read failed for {caller_id}: {e!r}"))
            return await self._synthesize(caller_id)

        if profile is not None:
            return profile

        profile = await self._synthesize(caller_id)
        try:
            await asyncio.wait_for(self._store.create(profile), timeout=self._timeout_s)
            logger.info("Provisioned default profile for caller %s", caller_id)
        except ProfileConflictError:
            # Another request created it first; prefer the stored copy.
            stored = await self._reread(caller_id)
            if stored is not None:
                return stored
        except Exception as e:
            logger.warning("%s", ProfileStoreError(f"profile write failed for {caller_id}: {e!r}"))
        return profile

    async def _reread(self, caller_id: str) -> CallerProfile | None:
        result = await run_side_effect(
            "profile_reread", self._store.get(caller_id), timeout_s=self._timeout_s
        )
        return result.value

    async def _synthesize(self, caller_id: str) -> CallerProfile:
        data: dict[str, Any] | None = None
        if self._directory is not None:
            result = await run_side_effect(
                "caller_lookup", self._directory.lookup(caller_id), timeout_s=self._timeout_s
            )
            data = result.value
        return build_default_profile(caller_id, data or {})


def build_default_profile(caller_id: str, data: dict[str, Any]) -> CallerProfile:
    """Build a minimal persona from raw caller attributes."""
    fields: dict[str, Any] = {"caller_id": caller_id}

    owner = data.get("full_name") or " ".join(
        p for p in (data.get("first_name"), data.get("last_name")) if p
    )
    if owner:
        fields["owner_name"] = owner
    if data.get("job_title"):
        fields["owner_title"] = data["job_title"]
    if data.get("clinic_name"):
        fields["practice_name"] = data["clinic_name"]
    if data.get("role") == "Owner":
        fields["communication_style"] = "professional-authoritative"

    source_types = data.get("source_types") or []
    fields["specialties"] = sorted({str(s) for s in source_types if s})

    return CallerProfile(**fields)
