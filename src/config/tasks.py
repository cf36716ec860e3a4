# src/config/tasks.py — v1
"""Declarative task profile registry.

Maps each task kind to its execution limits (output size, sampling
temperature, deadline) and optional canned fallback text. Profiles are
immutable and the registry is read-only after construction.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from datetime import timedelta
from enum import Enum
from types import MappingProxyType

from nexora_ai.core.errors import ValidationError

# Cached responses older than this are treated as misses at read time.
CACHE_VALIDITY = timedelta(hours=24)


class TaskKind(str, Enum):
    """Kinds of AI task the orchestrator accepts."""

    CHAT = "chat"
    ANALYSIS = "analysis"
    CONTENT = "content"
    EMAIL = "email"
    REVIEW_RESPONSE = "review_response"
    CONSULTATION = "consultation"


@dataclass(frozen=True)
class TaskProfile:
    """Execution limits for one task kind."""

    kind: TaskKind
    max_output_tokens: int
    temperature: float
    deadline_ms: int
    fallback_text: str | None = None
    cache_validity: timedelta = CACHE_VALIDITY

    @property
    def deadline_s(self) -> float:
        return self.deadline_ms / 1000


DEFAULT_TASK_PROFILES: tuple[TaskProfile, ...] = (
    TaskProfile(
        kind=TaskKind.CHAT,
        max_output_tokens=300,
        temperature=0.7,
        deadline_ms=15_000,
        fallback_text=(
            "I'm having trouble reaching the AI assistant right now. "
            "Please try again in a moment."
        ),
    ),
    TaskProfile(
        kind=TaskKind.ANALYSIS,
        max_output_tokens=600,
        temperature=0.3,
        deadline_ms=30_000,
    ),
    TaskProfile(
        kind=TaskKind.CONTENT,
        max_output_tokens=1500,
        temperature=0.7,
        deadline_ms=30_000,
    ),
    TaskProfile(
        kind=TaskKind.EMAIL,
        max_output_tokens=1200,
        temperature=0.7,
        deadline_ms=25_000,
    ),
    TaskProfile(
        kind=TaskKind.REVIEW_RESPONSE,
        max_output_tokens=400,
        temperature=0.6,
        deadline_ms=20_000,
        fallback_text=(
            "Thank you for taking the time to share your feedback. "
            "We appreciate hearing from our patients and would welcome the "
            "chance to discuss your experience. Please contact our office "
            "directly."
        ),
    ),
    TaskProfile(
        kind=TaskKind.CONSULTATION,
        max_output_tokens=800,
        temperature=0.5,
        deadline_ms=20_000,
        fallback_text=(
            "We couldn't generate recommendations right now. Review your "
            "most active referral sources and schedule follow-up visits "
            "with any that have gone quiet, then try again later."
        ),
    ),
)


class TaskRegistry:
    """Read-only lookup from task kind to TaskProfile."""

    def __init__(self, profiles: Iterable[TaskProfile] = DEFAULT_TASK_PROFILES) -> None:
        by_kind: dict[str, TaskProfile] = {}
        for profile in profiles:
            key = TaskKind(profile.kind).value
            if key in by_kind:
                raise ValueError(f"Duplicate task profile for kind {key!r}")
            by_kind[key] = profile
        self._profiles: Mapping[str, TaskProfile] = MappingProxyType(by_kind)

    def resolve(self, task_kind: str | TaskKind) -> TaskProfile:
        """Return the profile for a task kind.

        Raises:
            ValidationError: If the task kind is not registered.
        """
        key = task_kind.value if isinstance(task_kind, TaskKind) else task_kind
        profile = self._profiles.get(key) if isinstance(key, str) else None
        if profile is None:
            raise ValidationError(f"Unknown task kind: {task_kind!r}")
        return profile

    def kinds(self) -> list[TaskKind]:
        """Registered task kinds, in registration order."""
        return [p.kind for p in self._profiles.values()]

    def __contains__(self, task_kind: object) -> bool:
        key = task_kind.value if isinstance(task_kind, TaskKind) else task_kind
        return key in self._profiles
