"""
Web page fetcher implementation over aiohttp.
"""

import asyncio
import logging
import time
from dataclasses import dataclass
from typing import Dict, Optional

import aiohttp
from aiohttp import ClientError, ClientSession, ClientTimeout


DEFAULT_USER_AGENT = "webcrawler/1.0"
DEFAULT_MAX_CONTENT_SIZE = 10 * 1024 * 1024  # 10MB

TEXT_CONTENT_TYPES = (
    'text/html',
    'text/plain',
    'text/xml',
    'application/xml',
    'application/xhtml+xml',
)


class FetchError(Exception):
    """Raised when a page could not be fetched (connection, DNS, timeout, bad response)."""

    def __init__(self, url: str, reason: str, status_code: int = 0):
        super().__init__(f"{reason} ({url})")
        self.url = url
        self.reason = reason
        self.status_code = status_code


@dataclass
class FetchResult:
    """Result of a fetch operation."""
    url: str
    status_code: int
    content: Optional[str] = None
    headers: Optional[Dict[str, str]] = None
    error: Optional[str] = None
    fetch_time: float = 0.0
    content_type: Optional[str] = None
    encoding: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None and self.content is not None

    def raise_for_error(self):
        """Raise FetchError unless the fetch produced content."""
        if self.error is not None:
            raise FetchError(self.url, self.error, self.status_code)
        if self.content is None:
            raise FetchError(self.url, "Empty response", self.status_code)


class WebFetcher:
    """
    Fetches web pages one at a time with a bounded request time.

    Redirects are not followed: a 3xx answer is reported as a failed fetch.
    """

    def __init__(self, user_agent: str = DEFAULT_USER_AGENT, request_timeout: float = 30,
                 max_content_size: int = DEFAULT_MAX_CONTENT_SIZE):
        self.user_agent = user_agent
        self.request_timeout = request_timeout
        self.max_content_size = max_content_size

        self.logger = logging.getLogger(__name__)
        self.session: Optional[ClientSession] = None

        # Statistics
        self.stats = {
            'total_requests': 0,
            'successful_requests': 0,
            'failed_requests': 0,
            'total_bytes_downloaded': 0
        }

    async def __aenter__(self):
        """Async context manager entry."""
        await self.start()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """Async context manager exit."""
        await self.close()

    async def start(self):
        """Initialize the fetcher session."""
        if self.session is None:
            timeout = ClientTimeout(total=self.request_timeout)
            headers = {'User-Agent': self.user_agent}

            self.session = aiohttp.ClientSession(timeout=timeout, headers=headers)
            self.logger.info("WebFetcher session started")

    async def close(self):
        """Close the fetcher session."""
        if self.session:
            await self.session.close()
            self.session = None
            self.logger.info("WebFetcher session closed")

    async def fetch(self, url: str) -> FetchResult:
        """
        Fetch a single URL.

        Args:
            url: The URL to fetch

        Returns:
            FetchResult object containing the response data or error information
        """
        if self.session is None:
            await self.start()

        start_time = time.time()
        self.stats['total_requests'] += 1

        try:
            async with self.session.get(url, allow_redirects=False) as response:
                fetch_time = time.time() - start_time
                headers = dict(response.headers)
                content_type = response.headers.get('content-type', '').lower()

                if not 200 <= response.status < 300:
                    self.stats['failed_requests'] += 1
                    self.logger.warning(f"HTTP {response.status} fetching {url}")
                    return FetchResult(
                        url=url,
                        status_code=response.status,
                        headers=headers,
                        content_type=content_type,
                        error=f"HTTP {response.status}",
                        fetch_time=fetch_time
                    )

                # Only download text content
                if not self._is_text_content(content_type):
                    self.stats['failed_requests'] += 1
                    self.logger.debug(f"Skipping non-text content: {url} ({content_type})")
                    return FetchResult(
                        url=url,
                        status_code=response.status,
                        headers=headers,
                        content_type=content_type,
                        error="Non-text content type",
                        fetch_time=fetch_time
                    )

                content = await self._read_content_safely(response)
                if content is None:
                    self.stats['failed_requests'] += 1
                    return FetchResult(
                        url=url,
                        status_code=response.status,
                        headers=headers,
                        content_type=content_type,
                        error="Content too large",
                        fetch_time=time.time() - start_time
                    )

                self.stats['total_bytes_downloaded'] += len(content)
                self.stats['successful_requests'] += 1

                self.logger.debug(f"Fetched {url}: {response.status} ({len(content)} bytes)")
                return FetchResult(
                    url=url,
                    status_code=response.status,
                    content=content,
                    headers=headers,
                    content_type=content_type,
                    encoding=response.charset,
                    fetch_time=time.time() - start_time
                )

        except asyncio.TimeoutError:
            error_msg = "Request timeout"
            self.logger.warning(f"Timeout fetching {url}")

        except ClientError as e:
            error_msg = f"Client error: {str(e)}"
            self.logger.warning(f"Client error fetching {url}: {e}")

        except ValueError as e:
            # yarl rejects malformed URLs with ValueError
            error_msg = f"Invalid URL: {str(e)}"
            self.logger.warning(f"Invalid URL {url}: {e}")

        self.stats['failed_requests'] += 1
        return FetchResult(
            url=url,
            status_code=0,
            error=error_msg,
            fetch_time=time.time() - start_time
        )

    def _is_text_content(self, content_type: str) -> bool:
        """Check if content type is text-based. A missing header counts as text."""
        if not content_type:
            return True
        return any(text_type in content_type for text_type in TEXT_CONTENT_TYPES)

    async def _read_content_safely(self, response) -> Optional[str]:
        """
        Read response content with a size limit.

        Returns:
            Decoded content, or None if the body exceeds the limit
        """
        content_length = response.headers.get('content-length')
        if content_length and content_length.isdigit() and int(content_length) > self.max_content_size:
            self.logger.warning(f"Content too large ({content_length} bytes): {response.url}")
            return None

        # Read content in chunks to respect size limit
        content_bytes = b''
        async for chunk in response.content.iter_chunked(8192):
            content_bytes += chunk
            if len(content_bytes) > self.max_content_size:
                self.logger.warning(f"Content exceeded size limit during reading: {response.url}")
                return None

        encoding = response.charset or 'utf-8'
        try:
            return content_bytes.decode(encoding)
        except (UnicodeDecodeError, LookupError):
            # Try common encodings
            for fallback_encoding in ['utf-8', 'cp1252']:
                try:
                    return content_bytes.decode(fallback_encoding)
                except UnicodeDecodeError:
                    continue

            return content_bytes.decode('latin-1')

    def get_stats(self) -> Dict[str, int]:
        """Get fetcher statistics."""
        return self.stats.copy()

    def reset_stats(self):
        """Reset statistics counters."""
        for key in self.stats:
            self.stats[key] = 0
