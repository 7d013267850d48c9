import re
from typing import List

from trustscore.config import RELEVANCE_CONFIG

NUMBER_PATTERN = re.compile(r"\d+%?")
SENTENCE_BOUNDARIES = (". ", "! ", "? ", "\n")


def smart_truncate(content: str, max_length: int) -> str:
    """Truncate ``content`` to ``max_length``, preferring a sentence boundary.

    A boundary is only used when it falls in the last 20% of the window; either
    way a truncation marker is appended whenever anything was cut.
    """
    if len(content) <= max_length:
        return content

    truncated = content[:max_length]

    last_boundary = max(truncated.rfind(boundary) for boundary in SENTENCE_BOUNDARIES)
    if last_boundary > max_length * RELEVANCE_CONFIG.SENTENCE_BOUNDARY_RATIO:
        truncated = truncated[:last_boundary + 1]

    return truncated + RELEVANCE_CONFIG.TRUNCATION_MARKER


def derive_search_terms(claim_text: str) -> List[str]:
    """Numbers and percentages first, then up to five long lowercase words."""
    numbers = NUMBER_PATTERN.findall(claim_text or "")
    words = [
        w for w in (claim_text or "").lower().split()
        if len(w) >= RELEVANCE_CONFIG.MIN_TERM_LENGTH and w not in RELEVANCE_CONFIG.STOP_WORDS
    ]
    return numbers + words[:RELEVANCE_CONFIG.MAX_KEY_TERMS]


def _find_occurrences(content_lower: str, terms: List[str]) -> List[int]:
    positions = []
    for term in terms:
        needle = term.lower()
        pos = content_lower.find(needle)
        while pos != -1:
            positions.append(pos)
            pos = content_lower.find(needle, pos + 1)
    return sorted(positions)


def extract_relevant_content(content: str, claim_text: str, max_length: int) -> str:
    """Pick the windows of ``content`` most likely to confirm or refute ``claim_text``.

    Each occurrence of a search term contributes a window of 200 characters on
    either side. A window is skipped when a short slice of it already appears in
    an accepted window, which is a cheap overlap test rather than an exact one.
    """
    if not content:
        return ""

    terms = derive_search_terms(claim_text)
    if not terms:
        return smart_truncate(content, max_length)

    positions = _find_occurrences(content.lower(), terms)
    if not positions:
        return smart_truncate(content, max_length)

    radius = RELEVANCE_CONFIG.WINDOW_RADIUS
    windows: List[str] = []
    total_length = 0

    for pos in positions:
        if total_length >= max_length:
            break

        start = max(0, pos - radius)
        end = min(len(content), pos + radius)
        window = content[start:end]

        probe = window[10:30]
        if any(probe in accepted for accepted in windows):
            continue

        prefix = "..." if start > 0 else ""
        suffix = "..." if end < len(content) else ""
        windows.append(f"{prefix}{window}{suffix}")
        total_length += len(window)

    return " ".join(windows)
