# src/cache/sqlite_store.py — v2
"""SQLite-based cache store (CACHE_BACKEND=sqlite).

Uses stdlib sqlite3; no external dependency.
"""

from __future__ import annotations

import logging
import sqlite3
from pathlib import Path

from nexora_ai.cache.base_cache_store import BaseCacheStore
from nexora_ai.cache.models import CacheEntry

logger = logging.getLogger(__name__)

_SCHEMA = """
CREATE TABLE IF NOT EXISTS ai_response_cache (
    key TEXT PRIMARY KEY,
    fingerprint TEXT NOT NULL,
    task_kind TEXT NOT NULL,
    data TEXT NOT NULL,
    created_at TEXT NOT NULL
);
CREATE INDEX IF NOT EXISTS idx_cache_task_kind ON ai_response_cache(task_kind);
"""


class SqliteCacheStore(BaseCacheStore):
    """SQLite-backed cache store."""

    def __init__(self, db_path: Path | str) -> None:
        self._db_path = Path(db_path).expanduser()
        self._db_path.parent.mkdir(parents=True, exist_ok=True)
        self._conn = sqlite3.connect(str(self._db_path))
        self._conn.execute("PRAGMA journal_mode=WAL")
        self._conn.executescript(_SCHEMA)

    async def get(self, key: str) -> CacheEntry | None:
        """Retrieve cache entry by key."""
        cursor = self._conn.execute(
            "SELECT data FROM ai_response_cache WHERE key = ?", (key,)
        )
        row = cursor.fetchone()
        if row is None:
            return None
        try:
            return CacheEntry.model_validate_json(row[0])
        except Exception as e:
            logger.warning("Failed to deserialize cache entry %s: %s", key, e)
            return None

    async def put(self, key: str, entry: CacheEntry) -> None:
        """Store a cache entry (upsert)."""
        self._conn.execute(
            """INSERT OR REPLACE INTO ai_response_cache
               (key, fingerprint, task_kind, data, created_at)
               VALUES (?, ?, ?, ?, ?)""",
            (
                key,
                entry.fingerprint,
                entry.task_kind.value,
                entry.model_dump_json(),
                entry.created_at.isoformat(),
            ),
        )
        self._conn.commit()

    async def delete(self, key: str) -> None:
        """Remove a cache entry."""
        self._conn.execute("DELETE FROM ai_response_cache WHERE key = ?", (key,))
        self._conn.commit()

    async def close(self) -> None:
        """Close the database connection."""
        self._conn.close()
