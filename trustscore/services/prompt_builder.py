import re
from typing import List, NamedTuple, Sequence

from trustscore.config import VERIFICATION_CONFIG
from trustscore.models import VerifiedSource
from trustscore.prompts import (
    SYSTEM_PROMPTS_BY_ATTEMPT,
    MINIMAL_SYSTEM_PROMPT,
    VERIFICATION_TASK_HEADER,
    SOURCE_ENTRY,
    VERIFICATION_TASK_FOOTER,
)
from trustscore.utils.validation import InputValidator
from .relevance import extract_relevant_content

SENTENCE_SPLIT_PATTERN = re.compile(r"[.!?]+")
EVIDENTIARY_PATTERNS = [
    re.compile(r"\d+"),
    re.compile(r"%"),
    re.compile(r"\[Source:", re.IGNORECASE),
    re.compile(r"(according to|based on|shows that|indicates)", re.IGNORECASE),
]


class VerificationPrompt(NamedTuple):
    system_prompt: str
    user_prompt: str


def extract_key_claims(response: str) -> str:
    """Keep the sentences that carry checkable facts: numbers, citations, evidence phrasing."""
    response = response or ""
    sentences = [s.strip() for s in SENTENCE_SPLIT_PATTERN.split(response) if s.strip()]
    key_claims = [s for s in sentences if any(p.search(s) for p in EVIDENTIARY_PATTERNS)]

    if not key_claims:
        limit = VERIFICATION_CONFIG.KEY_CLAIMS_FALLBACK_LENGTH
        return response[:limit] + ("..." if len(response) > limit else "")

    return ". ".join(key_claims) + "."


def system_prompt_for_attempt(attempt: int) -> str:
    return SYSTEM_PROMPTS_BY_ATTEMPT.get(attempt, MINIMAL_SYSTEM_PROMPT)


def _source_entry(index: int, source: VerifiedSource, claim: str, budget: int) -> str:
    content = extract_relevant_content(source.actual_content or "", claim, budget)
    if not content:
        content = f"ERROR: {source.error or 'Could not verify'}"

    page = source.claimed.page_number
    return SOURCE_ENTRY.format(
        index=index,
        source_name=source.claimed.source_name,
        status=source.verification_status,
        page_hint=f"Page: {page}" if page else "",
        content=InputValidator.sanitize_text(content),
    )


def build_verification_prompt(claim: str, sources: Sequence[VerifiedSource], attempt: int) -> VerificationPrompt:
    """Build the system/user prompt pair for one attempt.

    Later attempts get a shorter system prompt and a smaller excerpt budget per
    source, so a model that choked on the full prompt sees progressively less.
    """
    budget = VERIFICATION_CONFIG.prompt_source_budget(attempt)

    parts: List[str] = [VERIFICATION_TASK_HEADER.format(key_claims=extract_key_claims(claim))]
    for index, source in enumerate(sources, start=1):
        parts.append(_source_entry(index, source, claim, budget))
    parts.append(VERIFICATION_TASK_FOOTER)

    return VerificationPrompt(
        system_prompt=system_prompt_for_attempt(attempt),
        user_prompt="".join(parts),
    )
