import logging

from .settings import Settings, settings

logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger("trustscore")

from .constants import (
    VERIFICATION_CONFIG,
    RELEVANCE_CONFIG,
    WEB_CRAWL_CONFIG,
    LLM_CONFIG,
    TRUST_SCORE_BANDS,
    HEURISTIC_CONFIG,
    RATE_LIMITS_PER_SECOND,
)

def check_settings_on_startup():
    """Warn about settings the engine cannot run without."""
    if not settings.GEMINI_API_KEY:
        logger.warning("Missing GEMINI_API_KEY. Verification calls will fall back to low-trust results.")
    else:
        logger.info("Gemini API key is configured (model: %s).", settings.GEMINI_MODEL)

__all__ = [
    "logger",
    "Settings",
    "settings",
    "check_settings_on_startup",
    "VERIFICATION_CONFIG",
    "RELEVANCE_CONFIG",
    "WEB_CRAWL_CONFIG",
    "LLM_CONFIG",
    "TRUST_SCORE_BANDS",
    "HEURISTIC_CONFIG",
    "RATE_LIMITS_PER_SECOND",
]
