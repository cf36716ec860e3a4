# src/cache/fingerprint.py — v3
"""Request fingerprinting for cache lookup and in-flight deduplication.

A fingerprint is a truncated SHA-256 over a canonical JSON serialization
of (task kind, prompt, context). Two requests with the same fingerprint
are treated as identical. Truncation keeps keys short at the cost of a
small collision probability; the length is configurable.
"""

from __future__ import annotations

import hashlib
import json
from typing import Any

from pydantic import BaseModel

from nexora_ai.config.tasks import TaskKind

DEFAULT_FINGERPRINT_LENGTH = 32


def compute_fingerprint(
    task_kind: TaskKind | str,
    prompt: str,
    context: BaseModel | dict[str, Any] | None = None,
    explicit_cache_key: str | None = None,
    length: int = DEFAULT_FINGERPRINT_LENGTH,
) -> str:
    """Compute a deterministic request fingerprint.

    Args:
        task_kind: Task kind of the request.
        prompt: Prompt text.
        context: Structured context (model or plain dict). Key order is
            irrelevant.
        explicit_cache_key: Caller-supplied key. When set, it replaces
            prompt and context as the identity of the request.
        length: Number of hex characters to keep (8-64).

    Returns:
        Lowercase hex string of the requested length.
    """
    if not 8 <= length <= 64:
        raise ValueError(f"length must be between 8 and 64, got {length}")

    kind = task_kind.value if isinstance(task_kind, TaskKind) else str(task_kind)
    if explicit_cache_key is not None:
        payload: dict[str, Any] = {"task_kind": kind, "cache_key": explicit_cache_key}
    else:
        payload = {
            "task_kind": kind,
            "prompt": prompt,
            "context": _normalize_context(context),
        }
    return hashlib.sha256(_canonical_json(payload).encode("utf-8")).hexdigest()[:length]


def _normalize_context(context: BaseModel | dict[str, Any] | None) -> Any:
    """Convert context to plain JSON-compatible data."""
    if context is None:
        return {}
    if isinstance(context, BaseModel):
        return context.model_dump(mode="json")
    return context


def _canonical_json(payload: Any) -> str:
    """Serialize with sorted keys and no insignificant whitespace."""
    return json.dumps(
        payload,
        sort_keys=True,
        separators=(",", ":"),
        ensure_ascii=False,
        default=str,
    )
