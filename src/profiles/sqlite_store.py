# src/profiles/sqlite_store.py — v1
"""SQLite-based caller profile store (PROFILE_BACKEND=sqlite).

One row per caller in ``ai_business_profiles``; the primary key rejects
duplicate first-time inserts.
"""

from __future__ import annotations

import logging
import sqlite3
from pathlib import Path

from nexora_ai.core.errors import ProfileConflictError
from nexora_ai.core.models import CallerProfile
from nexora_ai.profiles.base_profile_store import BaseProfileStore

logger = logging.getLogger(__name__)

_SCHEMA = """
CREATE TABLE IF NOT EXISTS ai_business_profiles (
    caller_id TEXT PRIMARY KEY,
    data TEXT NOT NULL,
    updated_at TEXT NOT NULL
);
"""


class SqliteProfileStore(BaseProfileStore):
    """SQLite-backed profile store."""

    def __init__(self, db_path: Path | str) -> None:
        self._db_path = Path(db_path).expanduser()
        self._db_path.parent.mkdir(parents=True, exist_ok=True)
        self._conn = sqlite3.connect(str(self._db_path))
        self._conn.execute("PRAGMA journal_mode=WAL")
        self._conn.executescript(_SCHEMA)

    async def get(self, caller_id: str) -> CallerProfile | None:
        cursor = self._conn.execute(
            "SELECT data FROM ai_business_profiles WHERE caller_id = ?", (caller_id,)
        )
        row = cursor.fetchone()
        if row is None:
            return None
        try:
            return CallerProfile.model_validate_json(row[0])
        except Exception as e:
            logger.warning("Failed to deserialize profile for %s: %s", caller_id, e)
            return None

    async def create(self, profile: CallerProfile) -> None:
        try:
            self._conn.execute(
                "INSERT INTO ai_business_profiles (caller_id, data, updated_at) VALUES (?, ?, ?)",
                (profile.caller_id, profile.model_dump_json(), profile.updated_at.isoformat()),
            )
            self._conn.commit()
        except sqlite3.IntegrityError as e:
            self._conn.rollback()
            raise ProfileConflictError(
                f"Profile already exists for {profile.caller_id}"
            ) from e

    async def upsert(self, profile: CallerProfile) -> None:
        self._conn.execute(
            """INSERT OR REPLACE INTO ai_business_profiles (caller_id, data, updated_at)
               VALUES (?, ?, ?)""",
            (profile.caller_id, profile.model_dump_json(), profile.updated_at.isoformat()),
        )
        self._conn.commit()

    async def close(self) -> None:
        self._conn.close()
