"""Independent verification of chatbot answers against the sources they cite."""

from trustscore.models import ClaimedSource, VerifiedSource, VerificationResult
from trustscore.services import IntegrityVerificationService

__version__ = "0.1.0"

__all__ = [
    "ClaimedSource",
    "VerifiedSource",
    "VerificationResult",
    "IntegrityVerificationService",
]
