import asyncio
import time
from typing import Dict

class RateLimiter:
    """Process-wide gate spacing model calls at least ``1 / calls_per_second`` apart.

    Concurrent verification runs share one instance per provider, so the quota is
    enforced across runs rather than per run.
    """

    def __init__(self, calls_per_second: float):
        self.calls_per_second = calls_per_second
        self.min_interval = 1.0 / calls_per_second
        self._last_call = 0.0
        self._lock = asyncio.Lock()

    async def acquire(self) -> float:
        """Wait for a slot and return how many seconds were spent waiting."""
        async with self._lock:
            waited = 0.0
            elapsed = time.monotonic() - self._last_call

            if elapsed < self.min_interval:
                waited = self.min_interval - elapsed
                await asyncio.sleep(waited)

            self._last_call = time.monotonic()
            return waited


_rate_limiters: Dict[str, RateLimiter] = {}

def get_rate_limiter(provider: str, calls_per_second: float = 10.0) -> RateLimiter:
    if provider not in _rate_limiters:
        _rate_limiters[provider] = RateLimiter(calls_per_second)
    return _rate_limiters[provider]
