"""Process-wide spacing between outbound text-generation calls."""
from __future__ import annotations

import asyncio
import logging
import threading
import time
from typing import Awaitable, Callable, Optional

logger = logging.getLogger(__name__)

DEFAULT_COOLDOWN_S = 2.0


class Cooldown:
    """Hands out call slots at least ``interval_s`` apart.

    The next free slot is read and advanced under a lock, so concurrent callers
    (coroutines on any loop, or threads) each get a distinct slot; the waiting
    itself happens outside the lock.
    """

    def __init__(
        self,
        interval_s: float = DEFAULT_COOLDOWN_S,
        *,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        self.interval_s = interval_s
        self._clock = clock
        self._sleep = sleep
        self._lock = threading.Lock()
        self._last_slot: Optional[float] = None

    def reserve(self) -> float:
        """Claim the next slot and return how long the caller has to wait for it."""

        with self._lock:
            now = self._clock()
            if self._last_slot is None:
                slot = now
            else:
                slot = max(now, self._last_slot + self.interval_s)
            self._last_slot = slot
            return slot - now

    async def wait(self) -> None:
        delay = self.reserve()
        if delay > 0:
            logger.debug("Generation cooldown: sleeping %.3fs", delay)
            await self._sleep(delay)


_shared_cooldown: Optional[Cooldown] = None
_shared_lock = threading.Lock()


def get_shared_cooldown(interval_s: float = DEFAULT_COOLDOWN_S) -> Cooldown:
    """Return the cooldown shared by every generation client in the process."""

    global _shared_cooldown
    with _shared_lock:
        if _shared_cooldown is None:
            _shared_cooldown = Cooldown(interval_s)
        elif _shared_cooldown.interval_s != interval_s:
            _shared_cooldown.interval_s = interval_s
        return _shared_cooldown
