import asyncio


class RateLimiter:
    """Minimum-interval pacing for one provider's requests within a scan.

    ``max_rps <= 0`` disables pacing.
    """

    def __init__(self, max_rps: float) -> None:
        self._min_interval = 1.0 / max_rps if max_rps > 0 else 0.0
        self._next_allowed = 0.0
        self._lock = asyncio.Lock()

    async def acquire(self) -> None:
        if not self._min_interval:
            return
        async with self._lock:
            loop = asyncio.get_running_loop()
            wait = self._next_allowed - loop.time()
            if wait > 0:
                await asyncio.sleep(wait)
            self._next_allowed = loop.time() + self._min_interval
