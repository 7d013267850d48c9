import math
from typing import Dict, Any, List, Optional, Sequence

from pydantic import ValidationError

from trustscore.config import logger, TRUST_SCORE_BANDS, VERIFICATION_CONFIG
from trustscore.models import VerifiedSource, VerificationDetail, VerificationResult, TrustLevel
from trustscore.utils.parsing import parse_numeric_value

DEFAULT_REASONING = "Verification completed"
DEFAULT_RECOMMENDATIONS = "Please review the sources and verification details."


def determine_trust_level(score: int) -> TrustLevel:
    if score >= TRUST_SCORE_BANDS.HIGHEST:
        return "highest"
    if score >= TRUST_SCORE_BANDS.HIGH:
        return "high"
    if score >= TRUST_SCORE_BANDS.MEDIUM:
        return "medium"
    if score >= TRUST_SCORE_BANDS.LOWER:
        return "lower"
    return "low"


def count_verified(sources: Sequence[VerifiedSource]) -> int:
    return sum(1 for s in sources if s.is_verified)


def build_evidence_summary(sources: Sequence[VerifiedSource], hallucinations: Sequence[str]) -> str:
    verified = count_verified(sources)
    if hallucinations:
        tail = f"⚠️ {len(hallucinations)} hallucination(s) detected."
    else:
        tail = "✓ No hallucinations detected."
    return f"Verified {verified}/{len(sources)} sources independently. {tail}"


def normalize_score(raw_score: Any) -> int:
    """Coerce a model-supplied score into an int in [0, 100]; default 50."""
    value = parse_numeric_value(raw_score)
    if value is None or not math.isfinite(value):
        return TRUST_SCORE_BANDS.DEFAULT_SCORE
    return int(min(TRUST_SCORE_BANDS.MAX_SCORE, max(TRUST_SCORE_BANDS.MIN_SCORE, round(value))))


def _coerce_details(raw_details: Any) -> List[VerificationDetail]:
    if not isinstance(raw_details, list):
        return []

    details = []
    for item in raw_details:
        if not isinstance(item, dict):
            continue
        try:
            details.append(VerificationDetail(**item))
        except (ValidationError, TypeError) as e:
            logger.debug("Dropping malformed verification detail %r: %s", item, e)
    return details


def _coerce_hallucinations(raw: Any) -> List[str]:
    if not isinstance(raw, list):
        return []
    return [str(h) for h in raw if h is not None and str(h).strip()]


def _text_or_default(value: Any, default: str) -> str:
    if isinstance(value, str) and value.strip():
        return value
    return default


def assemble_result(payload: Dict[str, Any], sources: Sequence[VerifiedSource]) -> VerificationResult:
    """Normalize a parsed (or heuristic) payload into a ``VerificationResult``.

    ``trust_level`` and ``evidence_summary`` are always recomputed here, whatever
    the payload says, so every code path bands and phrases results identically.
    """
    score = normalize_score(payload.get("trust_score"))
    hallucinations = _coerce_hallucinations(payload.get("hallucinations_detected"))

    return VerificationResult(
        trust_score=score,
        trust_level=determine_trust_level(score),
        reasoning=_text_or_default(payload.get("reasoning"), DEFAULT_REASONING),
        verification_details=_coerce_details(payload.get("verification_details")),
        hallucinations_detected=hallucinations,
        recommendations=_text_or_default(payload.get("recommendations"), DEFAULT_RECOMMENDATIONS),
        evidence_summary=build_evidence_summary(sources, hallucinations),
    )


def create_fallback_result(sources: Optional[Sequence[VerifiedSource]] = None) -> VerificationResult:
    """Result used when no attempt produced a usable score."""
    sources = sources or []
    verified = count_verified(sources)

    if verified > 0:
        score = VERIFICATION_CONFIG.FALLBACK_SCORE_WITH_SOURCES
        recommendations = (
            "Sources were located but detailed verification is incomplete. "
            "Review the cited sources to confirm accuracy."
        )
    else:
        score = VERIFICATION_CONFIG.FALLBACK_SCORE_WITHOUT_SOURCES
        recommendations = (
            "Unable to verify sources. Please manually check the information "
            "or consult your professor."
        )

    return assemble_result(
        {
            "trust_score": score,
            "reasoning": (
                f"Automated verification completed with {verified} source(s) verified. "
                "Manual review recommended for complete assurance."
            ),
            "recommendations": recommendations,
        },
        sources,
    )
