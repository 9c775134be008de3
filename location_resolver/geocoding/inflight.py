"""
Sharing of in-flight resolutions between concurrent callers.

Concurrent calls for the same cache key await one underlying task instead
of each calling the providers. The task is cancelled only when every
caller waiting on it has been cancelled, so one abandoned request never
breaks the others.
"""

import asyncio
import logging
from dataclasses import dataclass
from typing import Awaitable, Callable, Dict, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass
class _SharedTask:
    task: "asyncio.Future"
    waiters: int = 0


class InflightRequests:
    """Map of cache key to the resolution currently running for it."""

    def __init__(self):
        self._inflight: Dict[str, _SharedTask] = {}

    def __len__(self) -> int:
        return len(self._inflight)

    def __contains__(self, key: str) -> bool:
        return key in self._inflight

    async def run(self, key: str, factory: Callable[[], Awaitable[T]]) -> T:
        """
        Await the resolution for `key`, starting it with `factory` if none is running.

        Every waiter receives the same result object; copy it before handing
        it to callers that may mutate it.
        """
        shared = self._inflight.get(key)
        if shared is None:
            shared = _SharedTask(task=asyncio.ensure_future(factory()))
            self._inflight[key] = shared
            shared.task.add_done_callback(
                lambda _task, k=key, s=shared: self._forget(k, s)
            )
        else:
            logger.debug(f"Joining in-flight resolution: {key}")

        shared.waiters += 1
        try:
            return await asyncio.shield(shared.task)
        finally:
            shared.waiters -= 1
            if shared.waiters == 0 and not shared.task.done():
                logger.debug(f"All callers abandoned resolution, cancelling: {key}")
                shared.task.cancel()

    def _forget(self, key: str, shared: _SharedTask) -> None:
        if self._inflight.get(key) is shared:
            del self._inflight[key]
