from typing import Literal, Optional, Dict, Any
from pydantic import BaseModel, ConfigDict, Field, field_validator

SourceType = Literal["course_material", "internet", "professor_note", "textbook", "other"]
VerificationStatus = Literal["verified", "partially_verified", "unverified"]

class ClaimedSource(BaseModel):
    """A source the answering agent says it relied on. Never trusted as-is."""
    model_config = ConfigDict(frozen=True)

    source_type: SourceType
    source_id: Optional[int] = None
    source_name: str
    source_url: Optional[str] = None
    source_excerpt: Optional[str] = None
    page_number: Optional[str] = None
    relevance_score: float = 0.0

    @field_validator("page_number", mode="before")
    @classmethod
    def stringify_page_number(cls, v):
        if v is None or isinstance(v, str):
            return v
        return str(v)

class VerifiedSource(BaseModel):
    """Ground-truth content obtained independently for one ClaimedSource."""
    model_config = ConfigDict(frozen=True)

    claimed: ClaimedSource
    actual_content: Optional[str] = None
    verification_status: VerificationStatus
    error: Optional[str] = None
    metadata: Dict[str, Any] = Field(default_factory=dict)

    @property
    def is_verified(self) -> bool:
        return self.verification_status == "verified"
