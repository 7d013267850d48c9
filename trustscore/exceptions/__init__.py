from typing import Optional, Dict, Any

class TrustScoreException(Exception):
    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        self.message = message
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "error": self.__class__.__name__,
            "message": self.message,
            "details": self.details
        }

class APIException(TrustScoreException):
    pass

class ValidationException(TrustScoreException):
    def __init__(self, field: str, reason: str):
        super().__init__(
            f"Validation failed for {field}: {reason}",
            {"field": field, "reason": reason}
        )

class LLMException(APIException):
    def __init__(self, reason: str, recoverable: bool = True):
        super().__init__(
            f"LLM service error: {reason}",
            {"reason": reason, "recoverable": recoverable}
        )

    @property
    def recoverable(self) -> bool:
        return bool(self.details.get("recoverable"))

class SourceResolutionException(APIException):
    def __init__(self, source: str, reason: str, recoverable: bool = True):
        super().__init__(
            f"Source {source} could not be resolved: {reason}",
            {"source": source, "reason": reason, "recoverable": recoverable}
        )

class CircuitBreakerOpenException(APIException):
    def __init__(self, service_name: str, failure_count: int):
        super().__init__(
            f"Circuit breaker open for {service_name}",
            {"service": service_name, "failure_count": failure_count}
        )
