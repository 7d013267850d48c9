from typing import Any, Dict, Iterable, List, Optional

from trustscore.config import logger, VERIFICATION_CONFIG
from trustscore.db import (
    Database,
    CourseMaterialRepository,
    TrustScoreRepository,
    AuditLogRepository,
)
from trustscore.models import VerifiedSource, VerificationResult
from trustscore.utils.context import start_run, get_run_id, get_run_duration_ms
from .llm import LanguageModel, GeminiClient
from .retry_controller import VerificationRetryController
from .source_resolver import SourceResolver, ClaimedSourceInput
from .trust_score import create_fallback_result, count_verified


class IntegrityVerificationService:
    """Entry point the answering pipeline calls once per answered message."""

    def __init__(
        self,
        resolver: SourceResolver,
        controller: VerificationRetryController,
        trust_scores: TrustScoreRepository,
        audit_log: AuditLogRepository,
    ):
        self.resolver = resolver
        self.controller = controller
        self.trust_scores = trust_scores
        self.audit_log = audit_log

    @classmethod
    def from_database(cls, db: Database, llm: Optional[LanguageModel] = None) -> "IntegrityVerificationService":
        return cls(
            resolver=SourceResolver(CourseMaterialRepository(db)),
            controller=VerificationRetryController(llm or GeminiClient()),
            trust_scores=TrustScoreRepository(db),
            audit_log=AuditLogRepository(db),
        )

    async def _cached(self, message_id: int) -> Optional[VerificationResult]:
        try:
            return await self.trust_scores.get(message_id)
        except Exception as e:
            logger.warning("Cache lookup failed for message %s: %s", message_id, e)
            return None

    async def verify_response(
        self,
        message_id: int,
        chatbot_response: str,
        claimed_sources: Optional[Iterable[ClaimedSourceInput]],
        course_id: int,
    ) -> VerificationResult:
        """Verify ``chatbot_response`` against its claimed sources; never raises.

        A stored result for ``message_id`` is returned unchanged. Otherwise the
        sources are resolved, the model comparison runs with retries, and the
        result is upserted and audited. Unexpected failures produce a low-trust
        fallback built from whatever sources were resolved.
        """
        run_id = start_run(message_id)
        logger.info(
            "Starting independent verification for message %s", message_id,
            extra={"run_id": run_id, "course_id": course_id}
        )

        cached = await self._cached(message_id)
        if cached is not None:
            logger.info("Using cached verification result for message %s", message_id)
            return cached

        verified_sources: List[VerifiedSource] = []
        try:
            claims = list(claimed_sources or [])
            logger.info("Message %s cites %d source(s)", message_id, len(claims), extra={"run_id": run_id})
            verified_sources = await self.resolver.resolve(claims, course_id)
            result = await self.controller.run(chatbot_response, verified_sources)

            await self.trust_scores.upsert(message_id, result)
            await self._record(
                message_id, course_id,
                {
                    "chatbotResponse": chatbot_response,
                    "claimedSourcesCount": len(claims),
                    "verifiedSourcesCount": count_verified(verified_sources),
                },
                result,
            )

            logger.info(
                "Verification complete: trust score %d/100 (%dms)",
                result.trust_score, get_run_duration_ms(),
                extra={"run_id": run_id, "trust_level": result.trust_level}
            )
            return result

        except Exception as e:
            logger.exception("Error in verification of message %s", message_id, extra={"run_id": run_id})
            fallback = create_fallback_result(verified_sources)
            await self._record(message_id, course_id, {"error": str(e)}, None, error_message=str(e) or type(e).__name__)
            return fallback

    async def _record(
        self,
        message_id: int,
        course_id: int,
        input_data: Dict[str, Any],
        result: Optional[VerificationResult],
        error_message: Optional[str] = None,
    ) -> None:
        try:
            await self.audit_log.record(
                agent_type=VERIFICATION_CONFIG.AGENT_TYPE,
                action_type=VERIFICATION_CONFIG.ACTION_TYPE,
                course_id=course_id,
                input_data={**input_data, "messageId": message_id, "runId": get_run_id()},
                output_data=result.to_dict() if result else None,
                confidence_score=result.trust_score / 100 if result else 0.0,
                execution_time_ms=get_run_duration_ms(),
                error_message=error_message,
            )
        except Exception:
            logger.exception("Failed to write audit log for message %s", message_id)
