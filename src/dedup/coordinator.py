# src/dedup/coordinator.py — v1
"""In-flight request deduplication (single-flight per fingerprint).

The first caller to join a fingerprint becomes the leader and owns a shared
future; later callers with the same fingerprint become followers and await
that future instead of calling upstream. The leader must settle the future
and release the entry on every exit path, so release() is meant to run in
a ``finally`` block.

The map is process-local: it is not shared across restarts or replicas.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Generic, TypeVar

from nexora_ai.core.errors import ProviderError

logger = logging.getLogger(__name__)

T = TypeVar("T")


class DedupCoordinator(Generic[T]):
    """Registry of in-flight fingerprints to their pending result."""

    def __init__(self) -> None:
        self._inflight: dict[str, asyncio.Future[T]] = {}
        self._lock = asyncio.Lock()

    async def join(self, fingerprint: str) -> tuple[bool, asyncio.Future[T]]:
        """Join the in-flight call for a fingerprint, creating it if absent.

        Returns:
            (is_leader, future). The leader must later call resolve() or
            fail(), then release().
        """
        async with self._lock:
            fut = self._inflight.get(fingerprint)
            if fut is not None:
                logger.debug("Joined in-flight request %s as follower", fingerprint)
                return False, fut
            fut = asyncio.get_running_loop().create_future()
            self._inflight[fingerprint] = fut
            return True, fut

    @staticmethod
    async def wait(fut: asyncio.Future[T]) -> T:
        """Await a leader's result without letting this caller cancel it."""
        return await asyncio.shield(fut)

    def resolve(self, fut: asyncio.Future[T], result: T) -> None:
        """Publish the leader's result to all followers."""
        if not fut.done():
            fut.set_result(result)

    def fail(self, fut: asyncio.Future[T], exc: BaseException) -> None:
        """Publish a leader failure to all followers."""
        if fut.done():
            return
        if isinstance(exc, asyncio.CancelledError):
            exc = ProviderError("In-flight request was cancelled", category="cancelled")
        fut.set_exception(exc)
        # Mark retrieved so an unobserved failure is not reported at GC time.
        fut.exception()

    def release(self, fingerprint: str, fut: asyncio.Future[T]) -> None:
        """Remove the entry for a fingerprint if it still belongs to ``fut``.

        Synchronous so it cannot be interrupted by a pending cancellation.
        An unsettled future is failed first so followers never block forever.
        """
        if not fut.done():
            self.fail(fut, ProviderError("Leader exited without a result", category="abandoned"))
        if self._inflight.get(fingerprint) is fut:
            del self._inflight[fingerprint]

    def is_inflight(self, fingerprint: str) -> bool:
        return fingerprint in self._inflight

    def __len__(self) -> int:
        return len(self._inflight)
