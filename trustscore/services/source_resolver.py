from typing import Any, Dict, List, Optional, Sequence, Tuple, Union

from pydantic import ValidationError

from trustscore.config import logger, VERIFICATION_CONFIG, WEB_CRAWL_CONFIG
from trustscore.db import CourseMaterialRepository
from trustscore.exceptions import SourceResolutionException
from trustscore.models import ClaimedSource, VerifiedSource
from .relevance import smart_truncate
from .web_crawler import WebCrawler

ClaimedSourceInput = Union[ClaimedSource, Dict[str, Any]]


def _unverified(source: ClaimedSource, error: str) -> VerifiedSource:
    return VerifiedSource(
        claimed=source,
        actual_content=None,
        verification_status="unverified",
        error=error,
    )


def _describe_validation_error(error: ValidationError) -> str:
    problems = "; ".join(
        f"{'.'.join(str(part) for part in err['loc']) or 'citation'}: {err['msg']}"
        for err in error.errors()
    )
    return f"Invalid source citation ({problems})"


def coerce_claim(raw: Any) -> Tuple[ClaimedSource, Optional[str]]:
    """Return ``(claim, error)``; a citation that fails validation gets a placeholder claim."""
    if isinstance(raw, ClaimedSource):
        return raw, None
    try:
        return ClaimedSource.model_validate(raw), None
    except ValidationError as e:
        name = raw.get("source_name") if isinstance(raw, dict) else None
        placeholder = ClaimedSource(source_type="other", source_name=str(name or "unknown"))
        return placeholder, _describe_validation_error(e)


class SourceResolver:
    """Independently obtains the real content behind each claimed source.

    Claims are resolved one at a time, in order, and every failure is folded into
    the returned ``VerifiedSource`` instead of being raised.
    """

    def __init__(
        self,
        materials: CourseMaterialRepository,
        crawler: Optional[WebCrawler] = None,
        max_content_length: int = VERIFICATION_CONFIG.MAX_CONTENT_LENGTH,
    ):
        self.materials = materials
        self.crawler = crawler or WebCrawler()
        self.max_content_length = max_content_length

    async def resolve(self, claims: Sequence[ClaimedSourceInput], course_id: int) -> List[VerifiedSource]:
        """One ``VerifiedSource`` per citation, in citation order.

        Citations may be ``ClaimedSource`` objects or plain dicts. A dict that does
        not validate becomes an ``unverified`` entry and the rest still resolve.
        """
        resolved = []
        for raw in claims:
            claim, error = coerce_claim(raw)
            if error is not None:
                logger.warning("Skipping malformed source citation: %s", error)
                resolved.append(_unverified(claim, error))
                continue
            resolved.append(await self.resolve_one(claim, course_id))

        verified = sum(1 for s in resolved if s.is_verified)
        logger.info("Resolved %d claimed source(s): %d verified", len(resolved), verified)
        return resolved

    async def resolve_one(self, claim: ClaimedSource, course_id: int) -> VerifiedSource:
        if claim.source_type == "course_material":
            if claim.source_id is None:
                return _unverified(claim, "Course material citation has no material id")
            return await self.verify_course_material(claim, course_id)

        if claim.source_type == "internet":
            if not claim.source_url:
                return _unverified(claim, "No URL provided")
            return await self.crawl_internet_source(claim)

        return _unverified(claim, f"Source type '{claim.source_type}' not supported for verification")

    async def verify_course_material(self, claim: ClaimedSource, course_id: int) -> VerifiedSource:
        try:
            chunks = await self.materials.get_chunks(claim.source_id, course_id)
            logger.info("Found %d chunks for material %s", len(chunks), claim.source_id)

            if not chunks:
                return await self._verify_whole_document(claim, course_id)

            # Page numbers from PDF extraction are unreliable, so every chunk is
            # used regardless of the cited page.
            material = chunks[0]
            full_content = "\n\n".join(row["chunk_text"] for row in chunks if row.get("chunk_text"))
            content = smart_truncate(full_content, self.max_content_length)

            logger.debug("Material %s content: %d chars from %d chunks", claim.source_id, len(content), len(chunks))

            return VerifiedSource(
                claimed=claim,
                actual_content=content,
                verification_status="verified",
                metadata={
                    "file_name": material.get("file_name"),
                    "course_verified": material.get("course_id") == course_id,
                    "chunks_used": len(chunks),
                    "total_chunks": len(chunks),
                },
            )
        except Exception as e:
            logger.exception("Error verifying course material %s", claim.source_id)
            return _unverified(claim, str(e) or type(e).__name__)

    async def _verify_whole_document(self, claim: ClaimedSource, course_id: int) -> VerifiedSource:
        material = await self.materials.get_whole_document(claim.source_id, course_id)

        if material is None:
            return _unverified(claim, "Course material not found or access denied")

        content_text = material.get("content_text")
        if not content_text:
            return VerifiedSource(
                claimed=claim,
                actual_content=None,
                verification_status="partially_verified",
                error="Course material exists but content not extracted yet",
            )

        return VerifiedSource(
            claimed=claim,
            actual_content=content_text[:VERIFICATION_CONFIG.WHOLE_DOCUMENT_FALLBACK_LENGTH],
            verification_status="partially_verified",
            metadata={
                "file_name": material.get("file_name"),
                "course_verified": material.get("course_id") == course_id,
                "note": "Using full content (chunks not available)",
            },
        )

    async def crawl_internet_source(self, claim: ClaimedSource) -> VerifiedSource:
        try:
            page = await self.crawler.fetch(claim.source_url)
        except SourceResolutionException as e:
            return _unverified(claim, e.details.get("reason", e.message))
        except Exception as e:
            logger.exception("Unexpected error crawling %s", claim.source_url)
            return _unverified(claim, f"Failed to fetch URL: {type(e).__name__}")

        if len(page["content"]) < WEB_CRAWL_CONFIG.MIN_CONTENT_LENGTH:
            return VerifiedSource(
                claimed=claim,
                actual_content=None,
                verification_status="partially_verified",
                error="Could not extract meaningful content from page",
            )

        return VerifiedSource(
            claimed=claim,
            actual_content=page["content"],
            verification_status="verified",
            metadata={
                "url": page["url"],
                "content_length": page["content_length"],
                "fetched_at": page["fetched_at"],
            },
        )
