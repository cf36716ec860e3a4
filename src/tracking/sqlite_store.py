# src/tracking/sqlite_store.py — v1
"""SQLite usage store (USAGE_BACKEND=sqlite).

Rows go to ``ai_usage_tracking``; the table is insert-only.
"""

from __future__ import annotations

import sqlite3
from pathlib import Path

from nexora_ai.tracking.base_usage_store import BaseUsageStore
from nexora_ai.tracking.models import UsageRecord

_SCHEMA = """
CREATE TABLE IF NOT EXISTS ai_usage_tracking (
    record_id TEXT PRIMARY KEY,
    caller_id TEXT NOT NULL,
    task_kind TEXT NOT NULL,
    outcome TEXT NOT NULL,
    tokens_used INTEGER DEFAULT 0,
    estimated_cost REAL DEFAULT 0,
    execution_time_ms INTEGER,
    model_used TEXT,
    success INTEGER NOT NULL,
    error_message TEXT,
    data TEXT NOT NULL,
    created_at TEXT NOT NULL
);
CREATE INDEX IF NOT EXISTS idx_usage_caller ON ai_usage_tracking(caller_id, created_at);
"""


class SqliteUsageStore(BaseUsageStore):
    """SQLite-backed append-only usage log."""

    def __init__(self, db_path: Path | str) -> None:
        self._db_path = Path(db_path).expanduser()
        self._db_path.parent.mkdir(parents=True, exist_ok=True)
        self._conn = sqlite3.connect(str(self._db_path))
        self._conn.execute("PRAGMA journal_mode=WAL")
        self._conn.executescript(_SCHEMA)

    async def append(self, record: UsageRecord) -> None:
        self._conn.execute(
            """INSERT INTO ai_usage_tracking
               (record_id, caller_id, task_kind, outcome, tokens_used, estimated_cost,
                execution_time_ms, model_used, success, error_message, data, created_at)
               VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)""",
            (
                record.record_id,
                record.caller_id,
                record.task_kind.value,
                record.outcome,
                record.tokens_used,
                record.estimated_cost,
                record.latency_ms,
                record.model_used,
                int(record.success),
                record.error_message,
                record.model_dump_json(),
                record.created_at.isoformat(),
            ),
        )
        self._conn.commit()

    async def list_records(self) -> list[UsageRecord]:
        cursor = self._conn.execute(
            "SELECT data FROM ai_usage_tracking ORDER BY created_at, rowid"
        )
        return [UsageRecord.model_validate_json(row[0]) for row in cursor.fetchall()]

    async def close(self) -> None:
        self._conn.close()
