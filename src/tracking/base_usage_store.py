# src/tracking/base_usage_store.py — v1
"""Abstract append-only usage store."""

from __future__ import annotations

from abc import ABC, abstractmethod

from nexora_ai.tracking.models import UsageRecord


class BaseUsageStore(ABC):
    """Append-only audit log of usage records."""

    @abstractmethod
    async def append(self, record: UsageRecord) -> None:
        """Persist one usage record."""

    @abstractmethod
    async def list_records(self) -> list[UsageRecord]:
        """Return all persisted records, oldest first."""

    async def close(self) -> None:
        """Release backend resources."""
