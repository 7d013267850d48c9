import pytest
import httpx
from unittest.mock import AsyncMock, MagicMock, patch

from trustscore.exceptions import SourceResolutionException
from trustscore.services.web_crawler import (
    WebCrawler,
    FetchFailure,
    classify_fetch_error,
    is_retryable_fetch_error,
    extract_page_text,
)

SAMPLE_HTML = """
<html>
  <head><style>body { color: red; }</style><script>var tracking = 1;</script></head>
  <body>
    <nav>Home | About | Contact</nav>
    <article>
      <h1>Photosynthesis</h1>
      <p>Photosynthesis produces roughly   90% of the
         oxygen in the atmosphere.</p>
    </article>
    <footer>Copyright 2024</footer>
  </body>
</html>
"""


def _status_error(status: int, url: str = "https://example.org/page") -> httpx.HTTPStatusError:
    request = httpx.Request("GET", url)
    response = httpx.Response(status, request=request)
    return httpx.HTTPStatusError(f"HTTP {status}", request=request, response=response)


def _client_with(get_mock):
    mock_client = MagicMock()
    mock_client.get = get_mock
    mock_client.__aenter__ = AsyncMock(return_value=mock_client)
    mock_client.__aexit__ = AsyncMock(return_value=False)
    return mock_client


class TestExtractPageText:
    def test_prefers_article_and_strips_chrome(self):
        text = extract_page_text(SAMPLE_HTML)
        assert text == "Photosynthesis Photosynthesis produces roughly 90% of the oxygen in the atmosphere."

    def test_falls_back_to_body(self):
        html = "<html><body><div>Plain body text only.</div><aside>ads</aside></body></html>"
        assert extract_page_text(html) == "Plain body text only."

    def test_capped(self):
        html = "<body><p>" + "word " * 5000 + "</p></body>"
        assert len(extract_page_text(html, 100)) == 100

    def test_empty_document(self):
        assert extract_page_text("") == ""


class TestClassifyFetchError:
    def test_forbidden(self):
        assert classify_fetch_error(_status_error(403)) is FetchFailure.FORBIDDEN

    def test_not_found(self):
        assert classify_fetch_error(_status_error(404)) is FetchFailure.NOT_FOUND

    def test_dns_failure(self):
        error = httpx.ConnectError("[Errno -2] Name or service not known")
        assert classify_fetch_error(error) is FetchFailure.NOT_FOUND

    def test_timeout(self):
        assert classify_fetch_error(httpx.ReadTimeout("timed out")) is FetchFailure.TIMEOUT

    def test_other_status(self):
        assert classify_fetch_error(_status_error(500)) is FetchFailure.GENERIC

    def test_connection_refused(self):
        assert classify_fetch_error(httpx.ConnectError("Connection refused")) is FetchFailure.GENERIC


class TestIsRetryableFetchError:
    @pytest.mark.parametrize("status,expected", [(403, False), (404, False), (429, True), (500, True), (503, True)])
    def test_status_codes(self, status, expected):
        assert is_retryable_fetch_error(_status_error(status)) is expected

    def test_network_errors_retried(self):
        assert is_retryable_fetch_error(httpx.ConnectError("reset")) is True
        assert is_retryable_fetch_error(httpx.ReadTimeout("slow")) is True

    def test_redirect_loop_not_retried(self):
        assert is_retryable_fetch_error(httpx.TooManyRedirects("loop")) is False


@pytest.mark.asyncio
class TestWebCrawlerFetch:
    """Tests for WebCrawler.fetch with a patched httpx client."""

    async def test_successful_fetch(self):
        with patch("trustscore.services.web_crawler.httpx.AsyncClient") as mock_client_class:
            mock_response = MagicMock()
            mock_response.status_code = 200
            mock_response.text = SAMPLE_HTML
            mock_response.raise_for_status = MagicMock()
            mock_client = _client_with(AsyncMock(return_value=mock_response))
            mock_client_class.return_value = mock_client

            page = await WebCrawler(retry_base_delay=0).fetch("https://example.org/photosynthesis")

            assert page["url"] == "https://example.org/photosynthesis"
            assert "90% of the oxygen" in page["content"]
            assert page["content_length"] == len(page["content"])
            assert page["fetched_at"]

            _, kwargs = mock_client_class.call_args
            assert kwargs["follow_redirects"] is True
            assert kwargs["max_redirects"] == 5
            assert kwargs["headers"]["User-Agent"] == "Mozilla/5.0 (LMS Verification Bot)"
            assert kwargs["timeout"] == 15.0

    async def test_dns_failure_is_not_found(self):
        """DNS failures are retried, then reported as not found."""
        with patch("trustscore.services.web_crawler.httpx.AsyncClient") as mock_client_class:
            get_mock = AsyncMock(side_effect=httpx.ConnectError("[Errno -2] Name or service not known"))
            mock_client_class.return_value = _client_with(get_mock)

            with pytest.raises(SourceResolutionException) as exc_info:
                await WebCrawler(retry_base_delay=0).fetch("https://no-such-host.invalid/page")

            assert exc_info.value.details["reason"] == FetchFailure.NOT_FOUND.value
            assert get_mock.await_count == 3

    async def test_forbidden_is_not_retried(self):
        with patch("trustscore.services.web_crawler.httpx.AsyncClient") as mock_client_class:
            get_mock = AsyncMock(side_effect=_status_error(403))
            mock_client_class.return_value = _client_with(get_mock)

            with pytest.raises(SourceResolutionException) as exc_info:
                await WebCrawler(retry_base_delay=0).fetch("https://example.org/page")

            assert exc_info.value.details["reason"] == "Access forbidden (403) - site blocks bots"
            assert get_mock.await_count == 1

    async def test_transient_error_then_success(self):
        with patch("trustscore.services.web_crawler.httpx.AsyncClient") as mock_client_class:
            mock_response = MagicMock()
            mock_response.text = SAMPLE_HTML
            mock_response.raise_for_status = MagicMock()
            get_mock = AsyncMock(side_effect=[_status_error(503), mock_response])
            mock_client_class.return_value = _client_with(get_mock)

            page = await WebCrawler(retry_base_delay=0).fetch("https://example.org/page")

            assert "Photosynthesis" in page["content"]
            assert get_mock.await_count == 2

    async def test_invalid_url(self):
        with patch("trustscore.services.web_crawler.httpx.AsyncClient") as mock_client_class:
            with pytest.raises(SourceResolutionException) as exc_info:
                await WebCrawler().fetch("ftp://example.org/file.txt")

            assert exc_info.value.details["reason"].startswith(FetchFailure.INVALID_URL.value)
            mock_client_class.assert_not_called()
