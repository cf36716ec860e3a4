# src/core/side_effects.py — v1
"""Best-effort side calls: cache writes, usage records, profile provisioning.

A side call returns a SideEffectResult instead of raising. The orchestrator
discards the error variant; it is only logged here.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable
from dataclasses import dataclass
from typing import Generic, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class SideEffectResult(Generic[T]):
    """Outcome of a non-critical side call."""

    name: str
    value: T | None = None
    error: Exception | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


async def run_side_effect(
    name: str,
    call: Awaitable[T],
    timeout_s: float | None = None,
) -> SideEffectResult[T]:
    """Await a non-critical call, converting any failure into a result.

    Cancellation of the surrounding task still propagates.
    """
    try:
        if timeout_s is None:
            value = await call
        else:
            value = await asyncio.wait_for(call, timeout=timeout_s)
    except asyncio.TimeoutError as e:
        logger.warning("Side effect '%s' timed out after %.1fs", name, timeout_s)
        return SideEffectResult(name=name, error=e)
    except Exception as e:
        logger.warning("Side effect '%s' failed: %s", name, e)
        return SideEffectResult(name=name, error=e)
    return SideEffectResult(name=name, value=value)
