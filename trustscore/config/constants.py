from dataclasses import dataclass

@dataclass(frozen=True)
class VerificationConfig:
    MAX_ATTEMPTS: int = 3
    RETRY_BACKOFF_MS: int = 1000

    # Chunks are joined and truncated to this size before prompting.
    MAX_CONTENT_LENGTH: int = 20000
    WHOLE_DOCUMENT_FALLBACK_LENGTH: int = 3000

    # Per-source excerpt budget in the user prompt, indexed by attempt.
    PROMPT_SOURCE_BUDGETS: tuple = (1500, 1000, 500)

    KEY_CLAIMS_FALLBACK_LENGTH: int = 500

    FALLBACK_SCORE_WITH_SOURCES: int = 60
    FALLBACK_SCORE_WITHOUT_SOURCES: int = 30

    AGENT_TYPE: str = "enhanced_integrity_verification"
    ACTION_TYPE: str = "verify_response_with_crawling"

    def prompt_source_budget(self, attempt: int) -> int:
        index = min(max(attempt, 1), len(self.PROMPT_SOURCE_BUDGETS)) - 1
        return self.PROMPT_SOURCE_BUDGETS[index]

@dataclass(frozen=True)
class RelevanceConfig:
    WINDOW_RADIUS: int = 200
    MAX_KEY_TERMS: int = 5
    MIN_TERM_LENGTH: int = 5
    STOP_WORDS: frozenset = frozenset({"about", "according", "based"})
    # Only accept a boundary that falls in the last 20% of the window.
    SENTENCE_BOUNDARY_RATIO: float = 0.8
    TRUNCATION_MARKER: str = "\n\n[Content truncated for length. Full document contains more information.]"

@dataclass(frozen=True)
class WebCrawlConfig:
    TIMEOUT_MS: int = 15000
    USER_AGENT: str = "Mozilla/5.0 (LMS Verification Bot)"
    MAX_REDIRECTS: int = 5
    MAX_RETRIES: int = 2
    RETRY_BASE_DELAY: float = 1.0
    RETRY_MAX_DELAY: float = 10.0
    MAX_CONTENT_LENGTH: int = 5000
    MIN_CONTENT_LENGTH: int = 50
    STRIP_SELECTORS: str = "script, style, nav, footer, aside"
    CONTENT_SELECTORS: tuple = ("article", "main", ".content", "body")

@dataclass(frozen=True)
class LLMConfig:
    REQUEST_TIMEOUT: float = 60.0
    TRANSPORT_ATTEMPTS: int = 2
    TEMPERATURE: float = 0.2
    MAX_OUTPUT_TOKENS: int = 2048

@dataclass(frozen=True)
class TrustScoreBands:
    HIGHEST: int = 90
    HIGH: int = 70
    MEDIUM: int = 50
    LOWER: int = 30

    MIN_SCORE: int = 0
    MAX_SCORE: int = 100
    DEFAULT_SCORE: int = 50

@dataclass(frozen=True)
class HeuristicConfig:
    NEUTRAL_SCORE: int = 50
    POINTS_PER_INDICATOR: int = 10
    MIN_SCORE: int = 20
    MAX_SCORE: int = 90
    NO_VERIFIED_SOURCES_CAP: int = 40
    POSITIVE_INDICATORS: tuple = (
        "verified", "confirmed", "accurate", "correct", "found in source",
        "matches", "consistent", "present in", "located in",
    )
    NEGATIVE_INDICATORS: tuple = (
        "not found", "missing", "absent", "incorrect", "fabricated",
        "hallucination", "discrepancy", "contradiction", "mismatch",
    )

@dataclass(frozen=True)
class RateLimitsPerSecond:
    GEMINI: float = 1.0

VERIFICATION_CONFIG = VerificationConfig()
RELEVANCE_CONFIG = RelevanceConfig()
WEB_CRAWL_CONFIG = WebCrawlConfig()
LLM_CONFIG = LLMConfig()
TRUST_SCORE_BANDS = TrustScoreBands()
HEURISTIC_CONFIG = HeuristicConfig()
RATE_LIMITS_PER_SECOND = RateLimitsPerSecond()
