"""
Single-flight execution of token refreshes.
"""

import asyncio
from typing import Any, Awaitable, Callable, Dict, Hashable


class SingleFlight:
    """
    Runs at most one call per key at a time; concurrent callers with the same
    key await the result of the call already in flight.
    """

    def __init__(self):
        self._inflight: Dict[Hashable, asyncio.Task] = {}

    def in_flight(self, key: Hashable) -> bool:
        return key in self._inflight

    async def do(self, key: Hashable, func: Callable[[], Awaitable[Any]]) -> Any:
        task = self._inflight.get(key)
        if task is None:
            task = asyncio.ensure_future(func())
            self._inflight[key] = task
            task.add_done_callback(lambda done, k=key: self._forget(k, done))
        # A cancelled caller must not cancel the call for the others
        return await asyncio.shield(task)

    def _forget(self, key: Hashable, task: asyncio.Task) -> None:
        if self._inflight.get(key) is task:
            del self._inflight[key]
        if not task.cancelled():
            # Mark the exception retrieved even if every waiter went away
            task.exception()
