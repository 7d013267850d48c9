import asyncio
import time
from enum import Enum
from typing import Awaitable, Callable, Optional, TypeVar
from trustscore.config import logger
from trustscore.exceptions import CircuitBreakerOpenException

T = TypeVar("T")

class CircuitState(Enum):
    CLOSED = "closed"
    OPEN = "open"
    HALF_OPEN = "half_open"

class CircuitBreaker:
    """Stops calling a failing provider for ``recovery_timeout`` seconds.

    Every model client owns one breaker, so an outage of the provider turns into
    fast ``CircuitBreakerOpenException`` failures that the retry controller counts
    as failed attempts instead of piling up slow timeouts.
    """

    def __init__(
        self,
        name: str,
        failure_threshold: int = 5,
        recovery_timeout: float = 60.0,
        expected_exception: type = Exception,
    ):
        self.name = name
        self.failure_threshold = failure_threshold
        self.recovery_timeout = recovery_timeout
        self.expected_exception = expected_exception

        self._failure_count = 0
        self._opened_at: Optional[float] = None
        self._state = CircuitState.CLOSED
        self._lock = asyncio.Lock()

    @property
    def state(self) -> CircuitState:
        return self._state

    @property
    def failure_count(self) -> int:
        return self._failure_count

    async def call(self, func: Callable[..., Awaitable[T]], *args, **kwargs) -> T:
        await self._guard()

        try:
            result = await func(*args, **kwargs)
        except self.expected_exception:
            await self._record_failure()
            raise

        await self._record_success()
        return result

    async def _guard(self):
        async with self._lock:
            if self._state != CircuitState.OPEN:
                return

            if self._opened_at is not None and time.time() - self._opened_at >= self.recovery_timeout:
                logger.info(
                    "Circuit breaker %s: probing provider (half-open)", self.name,
                    extra={"circuit_breaker": self.name, "state": CircuitState.HALF_OPEN.value}
                )
                self._state = CircuitState.HALF_OPEN
                return

            logger.warning(
                "Circuit breaker %s is open, rejecting call", self.name,
                extra={"circuit_breaker": self.name, "failure_count": self._failure_count}
            )
            raise CircuitBreakerOpenException(self.name, self._failure_count)

    async def _record_success(self):
        async with self._lock:
            if self._state == CircuitState.HALF_OPEN:
                logger.info("Circuit breaker %s: provider recovered, closing circuit", self.name)
            self._failure_count = 0
            self._opened_at = None
            self._state = CircuitState.CLOSED

    async def _record_failure(self):
        async with self._lock:
            self._failure_count += 1

            if self._state == CircuitState.HALF_OPEN or self._failure_count >= self.failure_threshold:
                logger.error(
                    "Circuit breaker %s: opening circuit after %d failures",
                    self.name, self._failure_count,
                    extra={"circuit_breaker": self.name, "threshold": self.failure_threshold}
                )
                self._state = CircuitState.OPEN
                self._opened_at = time.time()
