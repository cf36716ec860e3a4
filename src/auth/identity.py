# src/auth/identity.py — v1
"""Caller identity resolution.

The orchestrator only needs a caller id from an opaque credential; the
identity provider is injected so any token scheme can sit behind it.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from collections.abc import Mapping

from nexora_ai.core.errors import AuthenticationError

logger = logging.getLogger(__name__)

_BEARER_PREFIX = "bearer "


class BaseIdentityProvider(ABC):
    """Resolve an opaque credential to a caller id."""

    @abstractmethod
    async def authenticate(self, credential: str | None) -> str:
        """Return the caller id.

        Raises:
            AuthenticationError: Missing, malformed or unknown credential.
        """


class StaticTokenIdentityProvider(BaseIdentityProvider):
    """Fixed token -> caller id table (AUTH_TOKENS)."""

    def __init__(self, token_map: Mapping[str, str]) -> None:
        self._tokens = dict(token_map)

    async def authenticate(self, credential: str | None) -> str:
        if not credential or not credential.strip():
            raise AuthenticationError("Missing credential")
        token = credential.strip()
        if token.lower().startswith(_BEARER_PREFIX):
            token = token[len(_BEARER_PREFIX):].strip()
        caller_id = self._tokens.get(token)
        if caller_id is None:
            logger.info("Rejected unknown credential")
            raise AuthenticationError("Invalid credential")
        return caller_id
