# src/core/errors.py — v1
"""Error taxonomy for the AI request orchestration layer.

Only AuthenticationError and ValidationError are surfaced to callers as-is.
Timeout and provider failures go through the fallback policy; store errors
on non-critical paths are logged and swallowed.
"""

from __future__ import annotations

# Task-agnostic message returned when no fallback exists for a failed call.
SERVICE_UNAVAILABLE_MESSAGE = (
    "The AI service is temporarily unavailable. Please try again later."
)


class NexoraAIError(Exception):
    """Base class for all orchestration errors."""


class AuthenticationError(NexoraAIError):
    """Missing or invalid caller credential."""


class ValidationError(NexoraAIError):
    """Unknown task kind or malformed request."""


class ProviderError(NexoraAIError):
    """Upstream inference provider failure (rate limit, bad response, network)."""

    def __init__(
        self,
        message: str,
        category: str = "unknown",
        input_tokens: int = 0,
        output_tokens: int = 0,
        model: str | None = None,
        provider: str | None = None,
    ) -> None:
        self.category = category
        # Tokens the provider billed before the call was given up.
        self.input_tokens = input_tokens
        self.output_tokens = output_tokens
        self.model = model
        self.provider = provider
        super().__init__(message)

    @property
    def tokens_used(self) -> int:
        return self.input_tokens + self.output_tokens


class InferenceTimeoutError(NexoraAIError, TimeoutError):
    """Upstream call exceeded the task deadline and was cancelled."""

    def __init__(self, deadline_ms: int) -> None:
        self.deadline_ms = deadline_ms
        super().__init__(f"Inference call exceeded deadline of {deadline_ms}ms")


class CacheError(NexoraAIError):
    """Cache read/write failure (non-critical)."""


class MeteringError(NexoraAIError):
    """Usage record persistence failure (non-critical)."""


class ProfileStoreError(NexoraAIError):
    """Caller profile read/write failure (non-critical)."""


class ProfileConflictError(ProfileStoreError):
    """A profile already exists for this caller (concurrent first insert)."""
