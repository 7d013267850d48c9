import re
from typing import Callable, Dict, Any, List, Optional, Sequence, Tuple

from trustscore.config import logger, HEURISTIC_CONFIG
from trustscore.models import VerifiedSource, VerificationResult
from trustscore.utils.parsing import (
    extract_fenced_blocks,
    extract_json_block,
    loads_object,
)
from .trust_score import assemble_result, count_verified

Payload = Dict[str, Any]
Strategy = Callable[[str], Optional[Payload]]

TRUST_SCORE_PATTERN = re.compile(r'"?trust_score"?\s*[:=]\s*"?(\d+)')
TRUST_LEVEL_PATTERN = re.compile(r'"?trust_level"?\s*:\s*"([^"]+)"')
REASONING_PATTERN = re.compile(r'"?reasoning"?\s*:\s*"([^"]+)"')


def try_direct_parse(text: str) -> Optional[Payload]:
    trimmed = text.strip()
    if not trimmed.startswith("{"):
        return None
    return loads_object(trimmed)


def try_markdown_extraction(text: str) -> Optional[Payload]:
    for block in extract_fenced_blocks(text):
        parsed = loads_object(block)
        if parsed is not None:
            return parsed
    return None


def try_brace_matching(text: str) -> Optional[Payload]:
    return extract_json_block(text)


def try_partial_fields(text: str) -> Optional[Payload]:
    score_match = TRUST_SCORE_PATTERN.search(text)
    if not score_match:
        return None

    level_match = TRUST_LEVEL_PATTERN.search(text)
    reasoning_match = REASONING_PATTERN.search(text)

    logger.info(
        "Partial extraction: score=%s, level=%s",
        score_match.group(1),
        level_match.group(1) if level_match else None,
    )

    # The model's trust_level is only logged; the assembler recomputes it.
    return {
        "trust_score": int(score_match.group(1)),
        "reasoning": (
            reasoning_match.group(1) if reasoning_match
            else "Partial verification completed (JSON parsing incomplete)"
        ),
        "recommendations": (
            "Partial verification completed. Please review sources manually "
            "for complete verification."
        ),
    }


def count_indicators(text: str) -> Tuple[int, int]:
    lowered = text.lower()
    positive = sum(1 for indicator in HEURISTIC_CONFIG.POSITIVE_INDICATORS if indicator in lowered)
    negative = sum(1 for indicator in HEURISTIC_CONFIG.NEGATIVE_INDICATORS if indicator in lowered)
    return positive, negative


def heuristic_payload(text: str, sources: Sequence[VerifiedSource]) -> Payload:
    positive, negative = count_indicators(text)

    score = HEURISTIC_CONFIG.NEUTRAL_SCORE + (positive - negative) * HEURISTIC_CONFIG.POINTS_PER_INDICATOR
    score = min(HEURISTIC_CONFIG.MAX_SCORE, max(HEURISTIC_CONFIG.MIN_SCORE, score))

    if count_verified(sources) == 0:
        score = min(score, HEURISTIC_CONFIG.NO_VERIFIED_SOURCES_CAP)

    logger.info("Heuristic analysis: positive=%d, negative=%d, score=%d", positive, negative, score)

    return {
        "trust_score": score,
        "reasoning": (
            "Automated heuristic analysis (JSON parsing failed). "
            f"Positive indicators: {positive}, Negative indicators: {negative}. "
            "Manual review recommended."
        ),
        "recommendations": (
            "Verification system encountered parsing issues. Please manually verify "
            "the information with course materials or consult your professor."
        ),
    }


STRATEGIES: List[Tuple[str, Strategy]] = [
    ("direct", try_direct_parse),
    ("markdown", try_markdown_extraction),
    ("brace_matching", try_brace_matching),
    ("partial_fields", try_partial_fields),
]


def parse_verification_response(raw_text: str, sources: Sequence[VerifiedSource]) -> VerificationResult:
    """Turn free-form model output into a result; never fails.

    The JSON strategies run in order and the first payload wins. When none
    applies, keyword heuristics over the raw text produce the score.
    """
    text = raw_text or ""

    for name, strategy in STRATEGIES:
        payload = strategy(text)
        if payload is not None:
            logger.info("Parse strategy '%s' succeeded", name)
            return assemble_result(payload, sources)
        logger.debug("Parse strategy '%s' did not apply", name)

    logger.warning("All JSON parsing strategies failed, using heuristic analysis")
    return assemble_result(heuristic_payload(text, sources), sources)
