# src/llm/inference_client.py — v1
"""Bounded inference calls against the configured provider.

The whole call (transient-error retries and the secondary model included)
runs under the task deadline. On expiry the call is cancelled and
InferenceTimeoutError is raised; any other failure is a ProviderError. The
client keeps no state between calls, so a cancelled call leaves nothing
behind.
"""

from __future__ import annotations

import asyncio
import json
import logging

from nexora_ai.config.tasks import TaskProfile
from nexora_ai.core.errors import InferenceTimeoutError, ProviderError
from nexora_ai.core.models import CallerProfile, ChatContext, TaskContext
from nexora_ai.llm.base_client import BaseLLMClient
from nexora_ai.llm.models import InferenceResult, LLMResponse, Message
from nexora_ai.llm.retry import LLMRetryExhausted, RetryConfig, with_retry

logger = logging.getLogger(__name__)


class InferenceClient:
    """Issue deadline-bounded completions with an optional secondary model."""

    def __init__(
        self,
        primary: BaseLLMClient,
        secondary: BaseLLMClient | None = None,
        retry_configs: dict[str, RetryConfig] | None = None,
    ) -> None:
        self._primary = primary
        self._secondary = secondary
        self._retry_configs = retry_configs

    @property
    def primary_model(self) -> str:
        return self._primary.model

    async def call(
        self,
        profile: TaskProfile,
        prompt: str,
        context: TaskContext,
        caller_profile: CallerProfile,
    ) -> InferenceResult:
        """Run one completion for a task within its deadline.

        Raises:
            InferenceTimeoutError: Deadline expired; the call was cancelled.
            ProviderError: Provider failure or empty completion.
        """
        system = build_system_prompt(caller_profile)
        messages = build_messages(prompt, context)
        try:
            return await asyncio.wait_for(
                self._complete(profile, messages, system),
                timeout=profile.deadline_s,
            )
        except asyncio.TimeoutError as e:
            logger.warning(
                "Inference for %s cancelled at deadline (%dms)",
                profile.kind.value, profile.deadline_ms,
            )
            raise InferenceTimeoutError(profile.deadline_ms) from e

    async def _complete(
        self, profile: TaskProfile, messages: list[Message], system: str
    ) -> InferenceResult:
        clients = [self._primary]
        if self._secondary is not None:
            clients.append(self._secondary)

        input_tokens = 0
        output_tokens = 0
        billed_model: str | None = None
        billed_provider: str | None = None
        message = "no provider client configured"
        category = "unknown"

        for client in clients:
            try:
                response: LLMResponse = await with_retry(
                    client.complete,
                    messages,
                    system=system,
                    max_tokens=profile.max_output_tokens,
                    temperature=profile.temperature,
                    label=f"{profile.kind.value}:{client.model}",
                    retry_configs=self._retry_configs,
                )
            except LLMRetryExhausted as e:
                message = f"{client.provider_name}/{client.model} failed: {e.last_error}"
                category = e.error_type
                logger.warning("Provider call failed (%s): %s", e.error_type, e.last_error)
                continue

            input_tokens += response.input_tokens
            output_tokens += response.output_tokens
            billed_model = response.model
            billed_provider = response.provider
            if response.content.strip():
                return InferenceResult(
                    text=response.content,
                    input_tokens=input_tokens,
                    output_tokens=output_tokens,
                    model=response.model,
                    provider=response.provider,
                )
            message = f"{client.provider_name}/{client.model} returned an empty completion"
            category = "empty_response"
            logger.warning("Empty completion from %s", client.model)

        raise ProviderError(
            message,
            category=category,
            input_tokens=input_tokens,
            output_tokens=output_tokens,
            model=billed_model,
            provider=billed_provider,
        )


def build_system_prompt(profile: CallerProfile) -> str:
    """Persona preamble identifying who the assistant writes for."""
    voice = ", ".join(f"{k}: {v}" for k, v in profile.brand_voice.items())
    lines = [
        f"You are the AI assistant for {profile.practice_name}, "
        f"working on behalf of {profile.owner_name} ({profile.owner_title}).",
        f"Communication style: {profile.communication_style}.",
        f"Target audience: {profile.target_audience}.",
    ]
    if voice:
        lines.append(f"Brand voice: {voice}.")
    if profile.practice_values:
        lines.append(f"Practice values: {', '.join(profile.practice_values)}.")
    if profile.specialties:
        lines.append(f"Referral network specialties: {', '.join(profile.specialties)}.")
    return "\n".join(lines)


def build_messages(prompt: str, context: TaskContext) -> list[Message]:
    """Conversation history (chat only) followed by the prompt and context."""
    messages: list[Message] = []
    payload = context.model_dump(mode="json")
    if isinstance(context, ChatContext):
        messages.extend(Message(role=t.role, content=t.content) for t in context.history)
        payload.pop("history", None)

    payload = {k: v for k, v in payload.items() if v not in (None, {}, [])}
    content = prompt
    if payload:
        content += "\n\nCONTEXT:\n" + json.dumps(payload, indent=2, sort_keys=True, default=str)
    messages.append(Message(role="user", content=content))
    return messages
