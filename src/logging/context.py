# src/logging/context.py — v2
"""Contextual logging support: attach request_id, caller_id, task_kind and
fingerprint to log records.
"""

from __future__ import annotations

import contextvars
from dataclasses import dataclass
from typing import Any

# Context variables for structured logging, set per handled request.
_request_id: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "request_id", default=None
)
_caller_id: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "caller_id", default=None
)
_task_kind: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "task_kind", default=None
)
_fingerprint: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "fingerprint", default=None
)


@dataclass
class LogContext:
    """Immutable snapshot of current logging context."""

    request_id: str | None = None
    caller_id: str | None = None
    task_kind: str | None = None
    fingerprint: str | None = None

    def as_dict(self) -> dict[str, Any]:
        """Return non-None fields as dict for JSON log injection."""
        return {k: v for k, v in self.__dict__.items() if v is not None}


def get_context() -> LogContext:
    """Snapshot current context variables."""
    return LogContext(
        request_id=_request_id.get(),
        caller_id=_caller_id.get(),
        task_kind=_task_kind.get(),
        fingerprint=_fingerprint.get(),
    )


def set_request_context(
    request_id: str, caller_id: str | None = None, task_kind: str | None = None
) -> None:
    """Set request-level context (called once per handled request)."""
    _request_id.set(request_id)
    _caller_id.set(caller_id)
    _task_kind.set(task_kind)


def set_fingerprint(fingerprint: str | None) -> None:
    """Attach the request fingerprint once computed."""
    _fingerprint.set(fingerprint)


def clear_context() -> None:
    """Reset all context variables."""
    _request_id.set(None)
    _caller_id.set(None)
    _task_kind.set(None)
    _fingerprint.set(None)
