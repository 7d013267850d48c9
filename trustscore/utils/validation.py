import re
from urllib.parse import urlparse

from trustscore.exceptions import ValidationException

class InputValidator:

    CONTROL_CHARS_PATTERN = re.compile(r'[\x00-\x08\x0B\x0C\x0E-\x1F\x7F]')

    ALLOWED_URL_SCHEMES = ("http", "https")

    @staticmethod
    def validate_source_url(url: str) -> str:
        """Return a trimmed crawlable URL or raise ``ValidationException``."""
        if not url or not url.strip():
            raise ValidationException("source_url", "URL is empty")

        url = url.strip()
        parsed = urlparse(url)

        if parsed.scheme.lower() not in InputValidator.ALLOWED_URL_SCHEMES:
            raise ValidationException("source_url", f"unsupported scheme '{parsed.scheme}'")

        if not parsed.netloc:
            raise ValidationException("source_url", "URL has no host")

        return url

    @staticmethod
    def sanitize_text(text: str, max_length: int = 0) -> str:
        """Strip control characters from model-bound text, optionally capping length."""
        if not text:
            return ""

        text = InputValidator.CONTROL_CHARS_PATTERN.sub('', str(text))

        if max_length and len(text) > max_length:
            text = text[:max_length]

        return text
