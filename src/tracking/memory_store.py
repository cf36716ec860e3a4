# src/tracking/memory_store.py — v1
"""In-process usage store (USAGE_BACKEND=memory)."""

from __future__ import annotations

from nexora_ai.tracking.base_usage_store import BaseUsageStore
from nexora_ai.tracking.models import UsageRecord


class MemoryUsageStore(BaseUsageStore):
    """Accumulates usage records in a list."""

    def __init__(self) -> None:
        self._records: list[UsageRecord] = []

    async def append(self, record: UsageRecord) -> None:
        self._records.append(record)

    async def list_records(self) -> list[UsageRecord]:
        return list(self._records)

    @property
    def records(self) -> list[UsageRecord]:
        """All recorded usage."""
        return list(self._records)
