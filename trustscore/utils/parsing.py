import json
import re
from typing import Any, Optional, Dict, List

FENCED_BLOCK_PATTERNS = [
    re.compile(r"```json\s*\n([\s\S]*?)\n```"),
    re.compile(r"```\s*\n([\s\S]*?)\n```"),
    re.compile(r"```json([\s\S]*?)```"),
]

CONTROL_CHARS_PATTERN = re.compile(r"[\x00-\x1f]")


def loads_object(text: str) -> Optional[Dict[str, Any]]:
    """Parse ``text`` as JSON, returning it only when it is an object."""
    try:
        parsed = json.loads(text)
    except (json.JSONDecodeError, TypeError):
        return None
    return parsed if isinstance(parsed, dict) else None


def extract_fenced_blocks(text: str) -> List[str]:
    """Bodies of markdown code fences, in pattern priority order."""
    if not text:
        return []

    blocks = []
    for pattern in FENCED_BLOCK_PATTERNS:
        match = pattern.search(text)
        if match:
            blocks.append(match.group(1).strip())
    return blocks


def find_json_object_span(text: str) -> Optional[str]:
    """Return the first balanced ``{...}`` span in ``text``.

    Braces inside quoted strings are ignored, and a backslash inside a string
    escapes the next character, so ``{"a": "}\\""}`` is matched as one object.
    """
    if not text:
        return None

    start = text.find("{")
    if start == -1:
        return None

    depth = 0
    in_string = False
    escape_pending = False

    for i in range(start, len(text)):
        ch = text[i]

        if in_string:
            if escape_pending:
                escape_pending = False
            elif ch == "\\":
                escape_pending = True
            elif ch == '"':
                in_string = False
            continue

        if ch == '"':
            in_string = True
        elif ch == "{":
            depth += 1
        elif ch == "}":
            depth -= 1
            if depth == 0:
                return text[start : i + 1]
    return None


def extract_json_block(text: str) -> Optional[Dict[str, Any]]:
    """Extract the first valid JSON object from text."""
    candidate = find_json_object_span(text)
    if candidate is None:
        return None

    parsed = loads_object(candidate)
    if parsed is None:
        parsed = loads_object(CONTROL_CHARS_PATTERN.sub("", candidate))
    return parsed


def parse_numeric_value(val: Any) -> Optional[float]:
    """Parse a numeric value from various string formats."""
    if val is None or isinstance(val, bool):
        return None
    if isinstance(val, (int, float)):
        return float(val)
    try:
        s = str(val).strip().replace(",", "").rstrip("%")
        m = re.match(r"^(-?\d+(?:\.\d+)?)", s)
        return float(m.group(1)) if m else float(s)
    except (ValueError, TypeError):
        return None
