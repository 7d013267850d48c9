import re
from datetime import datetime, timezone
from enum import Enum
from typing import Dict, Any

import httpx
from bs4 import BeautifulSoup

from trustscore.config import logger, WEB_CRAWL_CONFIG
from trustscore.exceptions import SourceResolutionException, ValidationException
from trustscore.utils.retry import retry_call
from trustscore.utils.validation import InputValidator

WHITESPACE_PATTERN = re.compile(r"\s+")

DNS_ERROR_MARKERS = (
    "name or service not known",
    "nodename nor servname",
    "getaddrinfo",
    "temporary failure in name resolution",
    "no address associated with hostname",
    "name resolution",
)


class FetchFailure(str, Enum):
    NOT_FOUND = "URL not found (404 or DNS error)"
    TIMEOUT = "Request timeout - URL too slow"
    FORBIDDEN = "Access forbidden (403) - site blocks bots"
    INVALID_URL = "Invalid URL"
    GENERIC = "Failed to fetch URL"


def is_dns_error(error: BaseException) -> bool:
    message = str(error).lower()
    return any(marker in message for marker in DNS_ERROR_MARKERS)


def classify_fetch_error(error: BaseException) -> FetchFailure:
    if isinstance(error, httpx.TimeoutException):
        return FetchFailure.TIMEOUT
    if isinstance(error, httpx.HTTPStatusError):
        status = error.response.status_code
        if status == 403:
            return FetchFailure.FORBIDDEN
        if status == 404:
            return FetchFailure.NOT_FOUND
        return FetchFailure.GENERIC
    if isinstance(error, httpx.ConnectError) and is_dns_error(error):
        return FetchFailure.NOT_FOUND
    return FetchFailure.GENERIC


def is_retryable_fetch_error(error: BaseException) -> bool:
    """Network hiccups, timeouts, 429 and 5xx are retried; other statuses are final."""
    if isinstance(error, httpx.HTTPStatusError):
        status = error.response.status_code
        return status == 429 or 500 <= status < 600
    if isinstance(error, httpx.TooManyRedirects):
        return False
    return isinstance(error, (httpx.TransportError, httpx.TimeoutException))


def extract_page_text(html: str, max_length: int = WEB_CRAWL_CONFIG.MAX_CONTENT_LENGTH) -> str:
    """Main readable text of an HTML page, whitespace-collapsed and capped."""
    soup = BeautifulSoup(html or "", "html.parser")

    for tag in soup.select(WEB_CRAWL_CONFIG.STRIP_SELECTORS):
        tag.decompose()

    text = ""
    for selector in WEB_CRAWL_CONFIG.CONTENT_SELECTORS:
        elements = soup.select(selector)
        text = " ".join(el.get_text(" ") for el in elements)
        if text.strip():
            break
    else:
        text = soup.get_text(" ")

    return WHITESPACE_PATTERN.sub(" ", text).strip()[:max_length]


class WebCrawler:
    """Fetches a cited web page and returns its main text."""

    def __init__(
        self,
        timeout_ms: int = WEB_CRAWL_CONFIG.TIMEOUT_MS,
        max_retries: int = WEB_CRAWL_CONFIG.MAX_RETRIES,
        retry_base_delay: float = WEB_CRAWL_CONFIG.RETRY_BASE_DELAY,
        max_content_length: int = WEB_CRAWL_CONFIG.MAX_CONTENT_LENGTH,
    ):
        self.timeout = timeout_ms / 1000.0
        self.max_retries = max_retries
        self.retry_base_delay = retry_base_delay
        self.max_content_length = max_content_length

    async def _get(self, url: str) -> str:
        async with httpx.AsyncClient(
            timeout=self.timeout,
            follow_redirects=True,
            max_redirects=WEB_CRAWL_CONFIG.MAX_REDIRECTS,
            headers={"User-Agent": WEB_CRAWL_CONFIG.USER_AGENT},
        ) as client:
            response = await client.get(url)
            response.raise_for_status()
            return response.text

    async def fetch(self, url: str) -> Dict[str, Any]:
        """Return ``{"url", "content", "content_length", "fetched_at"}`` for ``url``.

        Raises:
            SourceResolutionException: with a ``FetchFailure`` message as reason.
        """
        try:
            url = InputValidator.validate_source_url(url)
        except ValidationException as e:
            raise SourceResolutionException(str(url), f"{FetchFailure.INVALID_URL.value}: {e.details['reason']}", recoverable=False)

        logger.info("Crawling %s", url)
        try:
            html = await retry_call(
                self._get,
                url,
                max_attempts=self.max_retries + 1,
                base_delay=self.retry_base_delay,
                exceptions=(httpx.HTTPError,),
                retry_if=is_retryable_fetch_error,
            )
        except httpx.HTTPError as e:
            failure = classify_fetch_error(e)
            logger.warning("Failed to crawl %s: %s (%s)", url, failure.value, e)
            raise SourceResolutionException(url, failure.value, recoverable=False) from e

        content = extract_page_text(html, self.max_content_length)
        return {
            "url": url,
            "content": content,
            "content_length": len(content),
            "fetched_at": datetime.now(timezone.utc).isoformat(),
        }
