# src/api/facade.py — v2
"""Public API facade: wires the orchestrator from settings.

Usage:
    from nexora_ai.api.facade import build_orchestrator
    orchestrator = build_orchestrator()
    response = await orchestrator.handle(AIRequestBody(...), credential)

Every collaborator can be injected; anything not injected is created
from Settings.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from nexora_ai.auth.identity import StaticTokenIdentityProvider
from nexora_ai.cache.response_cache import ResponseCache
from nexora_ai.config.settings import Settings
from nexora_ai.config.tasks import TaskRegistry
from nexora_ai.llm.inference_client import InferenceClient
from nexora_ai.orchestration.fallback import FallbackResponder
from nexora_ai.orchestration.orchestrator import Orchestrator
from nexora_ai.profiles.context_builder import ContextBuilder
from nexora_ai.tracking.usage_meter import UsageMeter

if TYPE_CHECKING:
    from nexora_ai.auth.identity import BaseIdentityProvider
    from nexora_ai.cache.base_cache_store import BaseCacheStore
    from nexora_ai.llm.base_client import BaseLLMClient
    from nexora_ai.profiles.base_profile_store import BaseCallerDirectory, BaseProfileStore
    from nexora_ai.tracking.base_usage_store import BaseUsageStore

logger = logging.getLogger(__name__)


def build_orchestrator(
    settings: Settings | None = None,
    *,
    llm_client: BaseLLMClient | None = None,
    secondary_client: BaseLLMClient | None = None,
    identity_provider: BaseIdentityProvider | None = None,
    cache_store: BaseCacheStore | None = None,
    usage_store: BaseUsageStore | None = None,
    profile_store: BaseProfileStore | None = None,
    caller_directory: BaseCallerDirectory | None = None,
    registry: TaskRegistry | None = None,
) -> Orchestrator:
    """Assemble an Orchestrator with one fresh dedup coordinator.

    Args:
        settings: Global settings. Loaded from .env if None.
        llm_client: Primary provider client. Created from settings if None.
        secondary_client: Secondary-model client. Only used when
            llm_client is injected; otherwise created from settings.
        identity_provider: Credential resolver. Defaults to the static
            token table from AUTH_TOKENS.
        cache_store: Cache backend. Created from settings if None; ignored
            when CACHE_ENABLED is false.
        usage_store: Usage backend. Created from settings if None.
        profile_store: Caller profile backend. Created from settings if None.
        caller_directory: Source of raw caller attributes for new profiles.
        registry: Task profiles. Defaults to the built-in table.
    """
    settings = settings or Settings()
    registry = registry or TaskRegistry()
    timeout_s = settings.store_timeout_s

    if llm_client is None:
        from nexora_ai.llm.client_factory import create_clients_from_settings

        llm_client, secondary_client = create_clients_from_settings(settings)

    if identity_provider is None:
        identity_provider = StaticTokenIdentityProvider(settings.auth_token_map)

    cache: ResponseCache | None = None
    if settings.cache_enabled:
        if cache_store is None:
            from nexora_ai.cache.cache_factory import create_cache_store

            cache_store = create_cache_store(settings)
        cache = ResponseCache(cache_store, registry, timeout_s=timeout_s)

    if usage_store is None:
        from nexora_ai.tracking.usage_factory import create_usage_store

        usage_store = create_usage_store(settings)

    if profile_store is None:
        from nexora_ai.profiles.profile_factory import create_profile_store

        profile_store = create_profile_store(settings)

    logger.info(
        "Orchestrator ready: provider=%s, model=%s, cache=%s, usage=%s",
        llm_client.provider_name, llm_client.model,
        settings.cache_backend if cache is not None else "disabled",
        settings.usage_backend,
    )

    return Orchestrator(
        registry=registry,
        identity_provider=identity_provider,
        context_builder=ContextBuilder(profile_store, caller_directory, timeout_s=timeout_s),
        inference_client=InferenceClient(llm_client, secondary_client),
        meter=UsageMeter(
            usage_store,
            flat_rate_per_1k=settings.cost_default_per_1k,
            timeout_s=timeout_s,
        ),
        cache=cache,
        fallback=FallbackResponder(registry),
        fingerprint_length=settings.fingerprint_length,
    )
