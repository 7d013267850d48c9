import json
from typing import Any, Dict, List, Optional

from trustscore.config import logger
from trustscore.models import VerificationResult
from .database import Database, Row

CHUNKS_QUERY = """
    SELECT
      cm.id,
      cm.file_name,
      cm.course_id,
      cme.chunk_id,
      cme.chunk_text,
      cme.chunk_metadata
    FROM course_materials cm
    JOIN course_material_embeddings cme ON cm.id = cme.material_id
    WHERE cm.id = :material_id AND cm.course_id = :course_id
    ORDER BY cme.id
"""

WHOLE_DOCUMENT_QUERY = """
    SELECT cm.id, cm.file_name, cm.course_id, cmc.content_text
    FROM course_materials cm
    LEFT JOIN course_material_content cmc ON cm.id = cmc.material_id
    WHERE cm.id = :material_id AND cm.course_id = :course_id
"""

TRUST_SCORE_SELECT = """
    SELECT message_id, trust_score, trust_level, verification_reasoning,
           source_verification_details, conflicts_detected, verification_timestamp
    FROM message_trust_scores
    WHERE message_id = :message_id
"""

TRUST_SCORE_UPSERT = """
    INSERT INTO message_trust_scores (
      message_id,
      trust_score,
      trust_level,
      verification_reasoning,
      source_verification_details,
      conflicts_detected
    ) VALUES (
      :message_id, :trust_score, :trust_level, :verification_reasoning,
      CAST(:source_verification_details AS JSONB), :conflicts_detected
    )
    ON CONFLICT (message_id)
    DO UPDATE SET
      trust_score = EXCLUDED.trust_score,
      trust_level = EXCLUDED.trust_level,
      verification_reasoning = EXCLUDED.verification_reasoning,
      source_verification_details = EXCLUDED.source_verification_details,
      conflicts_detected = EXCLUDED.conflicts_detected,
      verification_timestamp = CURRENT_TIMESTAMP
"""

AUDIT_LOG_INSERT = """
    INSERT INTO agent_audit_log (
      agent_type,
      action_type,
      user_id,
      course_id,
      input_data,
      output_data,
      confidence_score,
      execution_time_ms,
      error_message
    ) VALUES (
      :agent_type, :action_type, NULL, :course_id,
      CAST(:input_data AS JSONB), CAST(:output_data AS JSONB),
      :confidence_score, :execution_time_ms, :error_message
    )
"""


class CourseMaterialRepository:
    def __init__(self, db: Database):
        self.db = db

    async def get_chunks(self, material_id: int, course_id: int) -> List[Row]:
        return await self.db.fetch_all(CHUNKS_QUERY, {"material_id": material_id, "course_id": course_id})

    async def get_whole_document(self, material_id: int, course_id: int) -> Optional[Row]:
        return await self.db.fetch_one(WHOLE_DOCUMENT_QUERY, {"material_id": material_id, "course_id": course_id})


def _load_details(raw: Any) -> Dict[str, Any]:
    if not raw:
        return {}
    if isinstance(raw, dict):
        return raw
    try:
        loaded = json.loads(raw)
    except (TypeError, ValueError):
        logger.warning("Stored verification details are not valid JSON; ignoring them")
        return {}
    return loaded if isinstance(loaded, dict) else {}


class TrustScoreRepository:
    """One row per message in ``message_trust_scores``; writes are upserts."""

    def __init__(self, db: Database):
        self.db = db

    async def get(self, message_id: int) -> Optional[VerificationResult]:
        row = await self.db.fetch_one(TRUST_SCORE_SELECT, {"message_id": message_id})
        if row is None:
            return None

        details = _load_details(row.get("source_verification_details"))
        return VerificationResult(
            trust_score=row["trust_score"],
            trust_level=row["trust_level"],
            reasoning=row["verification_reasoning"],
            verification_details=details.get("verification_details") or [],
            hallucinations_detected=list(row.get("conflicts_detected") or []),
            recommendations=details.get("recommendations") or "Cached verification result",
            evidence_summary=details.get("evidence_summary") or "Cached result",
        )

    async def upsert(self, message_id: int, result: VerificationResult) -> None:
        details = {
            "verification_details": [d.model_dump() for d in result.verification_details],
            "evidence_summary": result.evidence_summary,
            "recommendations": result.recommendations,
        }
        await self.db.execute(TRUST_SCORE_UPSERT, {
            "message_id": message_id,
            "trust_score": result.trust_score,
            "trust_level": result.trust_level,
            "verification_reasoning": result.reasoning,
            "source_verification_details": json.dumps(details),
            "conflicts_detected": list(result.hallucinations_detected),
        })


class AuditLogRepository:
    """Append-only ``agent_audit_log`` writer."""

    def __init__(self, db: Database):
        self.db = db

    async def record(
        self,
        agent_type: str,
        action_type: str,
        course_id: Optional[int],
        input_data: Dict[str, Any],
        output_data: Optional[Dict[str, Any]],
        confidence_score: float,
        execution_time_ms: int,
        error_message: Optional[str] = None,
    ) -> None:
        await self.db.execute(AUDIT_LOG_INSERT, {
            "agent_type": agent_type,
            "action_type": action_type,
            "course_id": course_id,
            "input_data": json.dumps(input_data, default=str),
            "output_data": json.dumps(output_data, default=str),
            "confidence_score": round(confidence_score, 2),
            "execution_time_ms": execution_time_ms,
            "error_message": error_message,
        })
