"""
Fetch raw document text over HTTP
"""
import logging
import time
from typing import Dict, Optional

import httpx

logger = logging.getLogger(__name__)

DEFAULT_USER_AGENT = 'ArticleReader/1.0'
DEFAULT_MAX_RESPONSE_SIZE = 10 * 1024 * 1024  # 10MB


class RetrievalError(Exception):
    """The document text could not be obtained."""

    def __init__(self, url: str, message: str, status_code: int = 0):
        super().__init__(f"{message} ({url})")
        self.url = url
        self.status_code = status_code


class FetchResult:
    def __init__(
        self,
        url: str,
        status_code: int,
        content: bytes = b'',
        headers: Dict[str, str] = None,
        final_url: str = None,
        fetch_time: float = 0.0,
        error: str = None,
        content_type: str = None,
        encoding: str = None
    ):
        """Initialize a FetchResult with HTTP response data and metadata."""
        self.url = url
        self.status_code = status_code
        self.content = content
        self.headers = headers or {}
        self.final_url = final_url or url
        self.fetch_time = fetch_time
        self.error = error
        self.content_type = content_type
        self.encoding = encoding

    @property
    def success(self) -> bool:
        """Check if the fetch was successful (no error and 2xx status code)."""
        return self.error is None and 200 <= self.status_code < 300

    @property
    def text(self) -> str:
        """Decode the body strictly; raises UnicodeDecodeError or LookupError."""
        if not self.content:
            return ""
        return self.content.decode(self.encoding or 'utf-8')

    @property
    def size(self) -> int:
        """Get the size of the response content in bytes."""
        return len(self.content)


class HTTPFetcher:
    """GET documents with caching disabled and a plain-text content type."""

    def __init__(
        self,
        base_url: str = "",
        user_agent: str = DEFAULT_USER_AGENT,
        timeout: Optional[float] = None,
        max_response_size: int = DEFAULT_MAX_RESPONSE_SIZE,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = base_url or ""
        self.user_agent = user_agent
        self.timeout = timeout
        self.max_response_size = max_response_size

        headers = {
            'User-Agent': self.user_agent,
            'Content-Type': 'text/plain',
            'Cache-Control': 'no-cache',
            'Pragma': 'no-cache',
        }
        self._client = httpx.AsyncClient(
            base_url=self.base_url,
            timeout=httpx.Timeout(self.timeout),
            follow_redirects=True,
            headers=headers,
            transport=transport,
        )

    @classmethod
    def from_config(cls, section: Dict, transport: Optional[httpx.AsyncBaseTransport] = None) -> "HTTPFetcher":
        """Build a fetcher from the `fetcher` config section."""
        return cls(
            base_url=section.get('base_url') or "",
            user_agent=section.get('user_agent') or DEFAULT_USER_AGENT,
            timeout=section.get('timeout'),
            max_response_size=section.get('max_response_size') or DEFAULT_MAX_RESPONSE_SIZE,
            transport=transport,
        )

    async def __aenter__(self) -> "HTTPFetcher":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    async def fetch(self, url: str) -> FetchResult:
        """Fetch a URL and return a FetchResult; transport errors land on `error`."""
        start_time = time.time()

        try:
            async with self._client.stream('GET', url) as response:
                fetch_time = time.time() - start_time

                content_length = response.headers.get('content-length', '').strip()
                if content_length and not content_length.isdigit():
                    return FetchResult(
                        url=url,
                        status_code=response.status_code,
                        headers=dict(response.headers),
                        final_url=str(response.url),
                        fetch_time=fetch_time,
                        error=f"Malformed Content-Length: {content_length!r}"
                    )
                if content_length and int(content_length) > self.max_response_size:
                    return FetchResult(
                        url=url,
                        status_code=response.status_code,
                        headers=dict(response.headers),
                        final_url=str(response.url),
                        fetch_time=fetch_time,
                        error=f"Content too large: {content_length} bytes > {self.max_response_size} bytes"
                    )

                content = bytearray()
                async for chunk in response.aiter_bytes(chunk_size=8192):
                    content += chunk
                    if len(content) > self.max_response_size:
                        return FetchResult(
                            url=url,
                            status_code=response.status_code,
                            headers=dict(response.headers),
                            final_url=str(response.url),
                            fetch_time=time.time() - start_time,
                            error=f"Content too large: more than {self.max_response_size} bytes"
                        )

                error = None
                if not 200 <= response.status_code < 300:
                    error = f"HTTP {response.status_code}"

                return FetchResult(
                    url=url,
                    status_code=response.status_code,
                    content=bytes(content),
                    headers=dict(response.headers),
                    final_url=str(response.url),
                    fetch_time=time.time() - start_time,
                    error=error,
                    content_type=response.headers.get('content-type', '').lower(),
                    encoding=self._extract_encoding(response.headers)
                )

        except httpx.TimeoutException as e:
            error = f"Timeout after {self.timeout}s: {str(e)}"
            logger.warning(f"{error} for {url}")

        except (httpx.HTTPError, httpx.InvalidURL) as e:
            error = f"Connection error: {str(e)}"
            logger.warning(f"{error} for {url}")

        return FetchResult(
            url=url,
            status_code=0,
            fetch_time=time.time() - start_time,
            error=error
        )

    async def fetch_text(self, url: str) -> str:
        """Fetch a URL and return its body as text, raising RetrievalError on any failure."""
        result = await self.fetch(url)
        if not result.success:
            raise RetrievalError(url, result.error or f"HTTP {result.status_code}", result.status_code)
        try:
            text = result.text
        except (UnicodeDecodeError, LookupError) as e:
            raise RetrievalError(url, f"Cannot decode body as {result.encoding}: {e}", result.status_code) from e
        logger.debug(f"Fetched {result.size} bytes from {result.final_url} in {result.fetch_time:.3f}s")
        return text

    def _extract_encoding(self, headers: Dict[str, str]) -> str:
        """Charset from the Content-Type header, UTF-8 when absent."""
        content_type = headers.get('content-type', '')
        if 'charset=' in content_type.lower():
            charset_part = content_type.lower().split('charset=')[1].split(';')[0].strip(' \'"')
            if charset_part:
                return charset_part

        return 'utf-8'


async def article(url: str, fetcher: Optional[HTTPFetcher] = None) -> str:
    """Retrieve the text of the document at `url`."""
    if fetcher is not None:
        return await fetcher.fetch_text(url)
    async with HTTPFetcher() as own:
        return await own.fetch_text(url)
