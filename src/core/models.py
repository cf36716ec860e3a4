# src/core/models.py — v2
"""Core domain models: per-task context payloads, AIRequest, CallerProfile.

Context payloads form a closed set keyed by task kind. Known fields are
type-checked; extra fields are preserved and treated as opaque data.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field
from pydantic import ValidationError as PydanticValidationError

from nexora_ai.config.tasks import TaskKind
from nexora_ai.core.errors import ValidationError


class _TaskContext(BaseModel):
    """Base for task context payloads."""

    model_config = ConfigDict(extra="allow", frozen=True)


class ChatTurn(BaseModel):
    """Previous message in a chat conversation."""

    model_config = ConfigDict(frozen=True)

    role: Literal["user", "assistant"]
    content: str


class ChatContext(_TaskContext):
    history: list[ChatTurn] = []
    page: str | None = None


class AnalysisContext(_TaskContext):
    metrics: dict[str, Any] = {}
    period: str | None = None


class ContentContext(_TaskContext):
    content_type: str = "general"
    target_audience: str = "healthcare professionals"
    tone: str = "professional"
    length: Literal["short", "medium", "long"] = "medium"


class EmailContext(_TaskContext):
    office_details: dict[str, Any] = {}
    campaign_details: dict[str, Any] = {}
    personalization: dict[str, Any] = {}


class ReviewResponseContext(_TaskContext):
    review_details: dict[str, Any] = {}
    response_guidelines: dict[str, Any] = {}


class ConsultationContext(_TaskContext):
    topic: str | None = None
    constraints: list[str] = []


TaskContext = (
    ChatContext
    | AnalysisContext
    | ContentContext
    | EmailContext
    | ReviewResponseContext
    | ConsultationContext
)

CONTEXT_MODELS: dict[TaskKind, type[_TaskContext]] = {
    TaskKind.CHAT: ChatContext,
    TaskKind.ANALYSIS: AnalysisContext,
    TaskKind.CONTENT: ContentContext,
    TaskKind.EMAIL: EmailContext,
    TaskKind.REVIEW_RESPONSE: ReviewResponseContext,
    TaskKind.CONSULTATION: ConsultationContext,
}


def parse_context(task_kind: TaskKind, raw: dict[str, Any] | None) -> TaskContext:
    """Validate a raw context dict into the payload shape for a task kind.

    Raises:
        ValidationError: If the context does not match the task's shape.
    """
    model = CONTEXT_MODELS[task_kind]
    try:
        return model.model_validate(raw or {})  # type: ignore[return-value]
    except PydanticValidationError as e:
        raise ValidationError(
            f"Invalid context for task {task_kind.value!r}: {e.error_count()} error(s)"
        ) from e


class AIRequest(BaseModel):
    """Authenticated and validated AI request. Immutable after construction."""

    model_config = ConfigDict(frozen=True)

    caller_id: str
    task_kind: TaskKind
    prompt: str
    context: TaskContext
    explicit_cache_key: str | None = None


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class CallerProfile(BaseModel):
    """Caller persona used to personalize requests sent upstream."""

    caller_id: str
    practice_name: str = "Our Practice"
    owner_name: str = "Practice Owner"
    owner_title: str = "Doctor"
    communication_style: str = "professional-friendly"
    specialties: list[str] = []
    brand_voice: dict[str, Any] = Field(
        default_factory=lambda: {
            "tone": "professional, warm, appreciative",
            "personality": "knowledgeable, trustworthy, collaborative",
            "approach": "relationship-focused, data-informed, respectful",
        }
    )
    practice_values: list[str] = Field(
        default_factory=lambda: [
            "Excellent patient care",
            "Strong professional relationships",
            "Continuous improvement",
            "Community health",
        ]
    )
    target_audience: str = "Healthcare professionals and referring practices"
    created_at: datetime = Field(default_factory=_utcnow)
    updated_at: datetime = Field(default_factory=_utcnow)
