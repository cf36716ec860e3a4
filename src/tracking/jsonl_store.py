# src/tracking/jsonl_store.py — v1
"""JSON Lines usage store (USAGE_BACKEND=jsonl).

One record per line, appended; lines are never rewritten.
"""

from __future__ import annotations

import logging
from pathlib import Path

from nexora_ai.tracking.base_usage_store import BaseUsageStore
from nexora_ai.tracking.models import UsageRecord

logger = logging.getLogger(__name__)


class JsonlUsageStore(BaseUsageStore):
    """Append usage records to a JSON Lines file."""

    def __init__(self, path: Path | str) -> None:
        self._path = Path(path).expanduser()
        self._path.parent.mkdir(parents=True, exist_ok=True)

    @property
    def path(self) -> Path:
        return self._path

    async def append(self, record: UsageRecord) -> None:
        with self._path.open("a", encoding="utf-8") as f:
            f.write(record.model_dump_json() + "\n")

    async def list_records(self) -> list[UsageRecord]:
        return load_records(self._path)


def load_records(path: Path) -> list[UsageRecord]:
    """Read usage records from a JSON Lines file, skipping bad lines."""
    if not path.exists():
        return []
    records: list[UsageRecord] = []
    with path.open(encoding="utf-8") as f:
        for lineno, line in enumerate(f, start=1):
            line = line.strip()
            if not line:
                continue
            try:
                records.append(UsageRecord.model_validate_json(line))
            except Exception as e:
                logger.warning("Skipping malformed usage line %s:%d: %s", path, lineno, e)
    return records
