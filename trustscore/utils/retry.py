import asyncio
import logging
from typing import Awaitable, Callable, TypeVar, Optional

logger = logging.getLogger(__name__)

T = TypeVar('T')

class RetryConfig:
    MAX_ATTEMPTS = 3
    BASE_DELAY = 1.0
    MAX_DELAY = 10.0
    EXPONENTIAL_BASE = 2

async def retry_call(
    func: Callable[..., Awaitable[T]],
    *args,
    max_attempts: int = RetryConfig.MAX_ATTEMPTS,
    base_delay: float = RetryConfig.BASE_DELAY,
    max_delay: float = RetryConfig.MAX_DELAY,
    exponential_base: float = RetryConfig.EXPONENTIAL_BASE,
    exceptions: tuple = (Exception,),
    retry_if: Optional[Callable[[BaseException], bool]] = None,
    **kwargs
) -> T:
    """Await ``func`` until it succeeds, backing off exponentially between failures.

    ``retry_if`` narrows which of ``exceptions`` are worth another attempt; anything
    it rejects is re-raised immediately.
    """
    name = getattr(func, "__name__", repr(func))
    last_exception = None

    for attempt in range(max_attempts):
        try:
            return await func(*args, **kwargs)
        except exceptions as e:
            last_exception = e

            if retry_if is not None and not retry_if(e):
                raise

            if attempt == max_attempts - 1:
                logger.error(
                    f"Function {name} failed after {max_attempts} attempts: {e}"
                )
                raise

            delay = min(base_delay * (exponential_base ** attempt), max_delay)
            logger.warning(
                f"Function {name} failed (attempt {attempt + 1}/{max_attempts}), "
                f"retrying in {delay:.2f}s: {e}"
            )
            await asyncio.sleep(delay)

    raise last_exception
