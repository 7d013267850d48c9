from .database import Database
from .repositories import (
    CourseMaterialRepository,
    TrustScoreRepository,
    AuditLogRepository,
)

__all__ = [
    "Database",
    "CourseMaterialRepository",
    "TrustScoreRepository",
    "AuditLogRepository",
]
