import pytest
import os
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional
from unittest.mock import AsyncMock, MagicMock

sys.path.insert(0, str(Path(__file__).parent.parent))

os.environ.setdefault("GEMINI_API_KEY", "test_gemini_key")
os.environ.setdefault("GEMINI_MODEL", "gemini-2.5-flash")

from trustscore.models import ClaimedSource, VerifiedSource, VerificationResult


@pytest.fixture
def mock_env_vars(monkeypatch):
    """Mock all required environment variables."""
    env_vars = {
        "GEMINI_API_KEY": "test_gemini_key",
        "GEMINI_MODEL": "gemini-2.5-flash",
    }
    for key, value in env_vars.items():
        monkeypatch.setenv(key, value)
    return env_vars


@pytest.fixture
def mock_httpx_client():
    """Mock httpx.AsyncClient usable as an async context manager."""
    mock_client = MagicMock()
    mock_response = MagicMock()
    mock_response.status_code = 200
    mock_response.raise_for_status = MagicMock()
    mock_client.__aenter__ = AsyncMock(return_value=mock_client)
    mock_client.__aexit__ = AsyncMock(return_value=False)
    return mock_client


@pytest.fixture
def sample_gemini_response():
    """Sample Gemini generateContent response carrying a verification verdict."""
    return {
        "candidates": [
            {
                "content": {
                    "parts": [
                        {
                            "text": '{"trust_score": 92, "trust_level": "highest", "verification_details": [], "hallucinations_detected": [], "reasoning": "Figure found verbatim in Lecture 3.", "recommendations": "None."}'
                        }
                    ]
                }
            }
        ]
    }


@pytest.fixture
def course_material_claim():
    return ClaimedSource(
        source_type="course_material",
        source_id=7,
        source_name="Lecture 3 - Photosynthesis.pdf",
        page_number=4,
    )


@pytest.fixture
def internet_claim():
    return ClaimedSource(
        source_type="internet",
        source_name="Example Encyclopedia",
        source_url="https://example.org/photosynthesis",
    )


@pytest.fixture
def verified_source(course_material_claim):
    return VerifiedSource(
        claimed=course_material_claim,
        actual_content="Photosynthesis produces roughly 90% of the oxygen in the atmosphere.",
        verification_status="verified",
    )


@pytest.fixture
def unverified_source(internet_claim):
    return VerifiedSource(
        claimed=internet_claim,
        actual_content=None,
        verification_status="unverified",
        error="Access forbidden (403) - site blocks bots",
    )


class FakeMaterialRepository:
    """In-memory stand-in for ``CourseMaterialRepository``."""

    def __init__(self, chunks: Optional[Dict[int, List[Dict[str, Any]]]] = None,
                 documents: Optional[Dict[int, Dict[str, Any]]] = None):
        self.chunks = chunks or {}
        self.documents = documents or {}
        self.calls: List[tuple] = []

    async def get_chunks(self, material_id, course_id):
        self.calls.append(("chunks", material_id, course_id))
        return [row for row in self.chunks.get(material_id, []) if row["course_id"] == course_id]

    async def get_whole_document(self, material_id, course_id):
        self.calls.append(("document", material_id, course_id))
        document = self.documents.get(material_id)
        if document is None or document["course_id"] != course_id:
            return None
        return document


class FakeTrustScoreRepository:
    def __init__(self, stored: Optional[Dict[int, VerificationResult]] = None):
        self.stored = dict(stored or {})
        self.upserts: List[tuple] = []

    async def get(self, message_id):
        return self.stored.get(message_id)

    async def upsert(self, message_id, result):
        self.upserts.append((message_id, result))
        self.stored[message_id] = result


class FakeAuditLogRepository:
    def __init__(self):
        self.records: List[Dict[str, Any]] = []

    async def record(self, **kwargs):
        self.records.append(kwargs)


class FakeLanguageModel:
    """Replays scripted replies; an exception instance in the script is raised instead."""

    def __init__(self, replies):
        self.replies = list(replies)
        self.calls: List[Dict[str, Any]] = []

    async def generate(self, messages, context=None, system_prompt=None):
        self.calls.append({"messages": messages, "context": context, "system_prompt": system_prompt})
        reply = self.replies.pop(0)
        if isinstance(reply, BaseException):
            raise reply
        return {"content": reply, "raw": {}}


@pytest.fixture
def two_chunk_materials():
    return FakeMaterialRepository(chunks={
        7: [
            {
                "id": 7, "file_name": "Lecture 3 - Photosynthesis.pdf", "course_id": 1,
                "chunk_id": "7-0", "chunk_text": "Photosynthesis converts light energy into chemical energy.",
                "chunk_metadata": {},
            },
            {
                "id": 7, "file_name": "Lecture 3 - Photosynthesis.pdf", "course_id": 1,
                "chunk_id": "7-1", "chunk_text": "It produces roughly 90% of the oxygen in the atmosphere.",
                "chunk_metadata": {},
            },
        ]
    })


@pytest.fixture
def instant_rate_limiter():
    limiter = MagicMock()
    limiter.acquire = AsyncMock(return_value=0.0)
    return limiter
