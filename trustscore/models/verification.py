from typing import Literal, List, Dict, Any
from pydantic import BaseModel, Field, field_validator

TrustLevel = Literal["highest", "high", "medium", "lower", "low"]
MatchQuality = Literal["exact", "paraphrase", "partial", "mismatch", "missing"]

MATCH_QUALITIES = ("exact", "paraphrase", "partial", "mismatch", "missing")

def _clip(value: Any, limit: int) -> str:
    text = "" if value is None else str(value)
    return text[:limit]

class VerificationDetail(BaseModel):
    """Per-source comparison as reported by the model, clipped to display limits."""
    source: str = ""
    claimed_content: str = ""
    actual_content: str = ""
    match_quality: MatchQuality = "partial"
    evidence: str = ""

    @field_validator("source", mode="before")
    @classmethod
    def coerce_source(cls, v):
        return _clip(v, 500)

    @field_validator("claimed_content", "evidence", mode="before")
    @classmethod
    def clip_short_fields(cls, v):
        return _clip(v, 200)

    @field_validator("actual_content", mode="before")
    @classmethod
    def clip_actual_content(cls, v):
        return _clip(v, 300)

    @field_validator("match_quality", mode="before")
    @classmethod
    def normalize_match_quality(cls, v):
        quality = str(v or "").strip().lower()
        return quality if quality in MATCH_QUALITIES else "partial"

class VerificationResult(BaseModel):
    """Terminal output of one verification run."""
    trust_score: int = Field(ge=0, le=100)
    trust_level: TrustLevel
    reasoning: str
    verification_details: List[VerificationDetail] = Field(default_factory=list)
    hallucinations_detected: List[str] = Field(default_factory=list)
    recommendations: str = ""
    evidence_summary: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return self.model_dump()
