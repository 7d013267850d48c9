from .sources import (
    SourceType,
    VerificationStatus,
    ClaimedSource,
    VerifiedSource,
)
from .verification import (
    TrustLevel,
    MatchQuality,
    VerificationDetail,
    VerificationResult,
)

__all__ = [
    "SourceType",
    "VerificationStatus",
    "ClaimedSource",
    "VerifiedSource",

    "TrustLevel",
    "MatchQuality",
    "VerificationDetail",
    "VerificationResult",
]
