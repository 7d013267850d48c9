from .parsing import (
    extract_json_block,
    extract_fenced_blocks,
    find_json_object_span,
    loads_object,
    parse_numeric_value,
)
from .retry import retry_call
from .rate_limiter import RateLimiter, get_rate_limiter

__all__ = [
    "extract_json_block",
    "extract_fenced_blocks",
    "find_json_object_span",
    "loads_object",
    "parse_numeric_value",
    "retry_call",
    "RateLimiter",
    "get_rate_limiter",
]
