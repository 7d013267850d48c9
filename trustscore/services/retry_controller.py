import asyncio
from typing import Awaitable, Callable, Optional, Sequence

from trustscore.config import logger, VERIFICATION_CONFIG, RATE_LIMITS_PER_SECOND
from trustscore.models import VerifiedSource, VerificationResult
from trustscore.utils.rate_limiter import RateLimiter, get_rate_limiter
from .llm import LanguageModel
from .prompt_builder import build_verification_prompt
from .response_parser import parse_verification_response
from .trust_score import create_fallback_result


class VerificationRetryController:
    """Drives up to ``max_attempts`` model calls with a degrading prompt.

    An attempt succeeds when the parsed score is above zero. Failed attempts (a
    raised exception or a zero score) are followed by a linear back-off of
    ``backoff_ms * attempt``. When attempts run out, an exception from the last
    attempt propagates; otherwise a fallback result is returned.
    """

    def __init__(
        self,
        llm: LanguageModel,
        rate_limiter: Optional[RateLimiter] = None,
        max_attempts: int = VERIFICATION_CONFIG.MAX_ATTEMPTS,
        backoff_ms: int = VERIFICATION_CONFIG.RETRY_BACKOFF_MS,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        self.llm = llm
        self.rate_limiter = rate_limiter or get_rate_limiter("GEMINI", RATE_LIMITS_PER_SECOND.GEMINI)
        self.max_attempts = max_attempts
        self.backoff_ms = backoff_ms
        self.sleep = sleep

    async def _attempt(self, claim: str, sources: Sequence[VerifiedSource], attempt: int) -> VerificationResult:
        prompt = build_verification_prompt(claim, sources, attempt)
        messages = [
            {"role": "system", "content": prompt.system_prompt},
            {"role": "user", "content": prompt.user_prompt},
        ]

        logger.debug("Verification prompt (attempt %d): %s...", attempt, prompt.user_prompt[:500])

        await self.rate_limiter.acquire()
        response = await self.llm.generate(
            messages,
            {"conversation_history": messages},
            prompt.system_prompt,
        )

        raw = (response or {}).get("content") or ""
        logger.debug("Raw model response (attempt %d): %s", attempt, raw[:1000])
        return parse_verification_response(raw, sources)

    async def run(self, claim: str, sources: Sequence[VerifiedSource]) -> VerificationResult:
        for attempt in range(1, self.max_attempts + 1):
            logger.info("Verification attempt %d/%d", attempt, self.max_attempts)
            try:
                result = await self._attempt(claim, sources, attempt)
            except Exception as e:
                logger.warning("Attempt %d failed: %s", attempt, e)
                if attempt == self.max_attempts:
                    raise
            else:
                if result.trust_score > 0:
                    logger.info("Verification succeeded on attempt %d", attempt)
                    return result
                logger.warning("Attempt %d produced no usable score", attempt)

            if attempt < self.max_attempts:
                await self.sleep(self.backoff_ms * attempt / 1000.0)

        logger.warning("All verification attempts failed, using fallback")
        return create_fallback_result(sources)
