"""
Upload service.

Sends one signed POST per item, retrying network and server failures with
a fixed delay, and parses the JSON acknowledgment.
"""
import asyncio
import json
import time
from typing import Any, Dict, Optional

import aiohttp

from ..config import PublisherConfig
from ..exceptions import PackagingError, UploadError
from ..logging import get_logger
from .models import UploadItem
from .retry import FixedDelayStrategy, RetryStrategy


class _StatusFailure(Exception):
    """An attempt that ended with an HTTP error status."""

    def __init__(self, status: int, body: str):
        self.status = status
        self.body = body
        super().__init__(f"HTTP {status}: {body[:200]}")


class Uploader:
    """
    Delivers packaged items to the content API.

    Reuses one HTTP session for all items.

    Responsibilities:
    - Build URL and signed headers
    - Retry transient failures
    - Parse the acknowledgment
    """

    def __init__(
        self,
        config: Optional[PublisherConfig] = None,
        session: Optional[aiohttp.ClientSession] = None,
        retry_strategy: Optional[RetryStrategy] = None
    ):
        """
        Initialize uploader.

        Args:
            config: Publisher configuration
            session: Optional shared session
            retry_strategy: Retry policy (fixed delay from config if None)
        """
        self._config = config or PublisherConfig.default()
        self._session = session
        self._owns_session = False
        self._retry = retry_strategy or FixedDelayStrategy(self._config.retry)
        self._logger = get_logger('pandopub.upload')

    async def _get_session(self) -> aiohttp.ClientSession:
        """Get or create HTTP session."""
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession(
                connector=aiohttp.TCPConnector(**self._config.get_connector_kwargs()),
                **self._config.get_session_kwargs()
            )
            self._owns_session = True
        return self._session

    async def close(self):
        """Close session if we own it."""
        if self._owns_session and self._session:
            await self._session.close()
            self._session = None

    def build_url(self, item: UploadItem) -> str:
        """Upload URL for an item."""
        return self._config.build_url(item.content_address)

    def build_headers(self, item: UploadItem) -> Dict[str, str]:
        """Signed metadata headers for an item."""
        return {
            'X-Metadata': item.metadata.to_header(),
            'X-Signature': item.signature,
        }

    async def upload(self, item: UploadItem) -> Any:
        """
        Upload one item.

        Args:
            item: Packaged item

        Returns:
            Parsed JSON acknowledgment

        Raises:
            UploadError: If delivery fails after exhausting retries, the
                server rejects the request, or the response is not JSON
        """
        url = self.build_url(item)
        headers = self.build_headers(item)
        session = await self._get_session()
        self._logger.info(f"Publishing {item.path} ({item.mode.value}) to {url}")

        attempt = 0
        while True:
            attempt += 1
            start = time.time()
            status: Optional[int] = None
            try:
                return await self._attempt(session, url, headers, item)
            except _StatusFailure as e:
                status = e.status
                failure: Exception = e
            except (aiohttp.ClientError, asyncio.TimeoutError) as e:
                failure = e
            except (OSError, PackagingError) as e:
                raise UploadError(
                    f"Cannot open payload for {item.path}: {e}",
                    url=url, attempts=attempt, path=item.path, mode=item.mode.value
                ) from e

            elapsed = time.time() - start
            if not self._retry.should_retry(status, attempt):
                raise UploadError(
                    f"Upload to {url} failed after {attempt} attempt(s): {failure}",
                    url=url, status=status, attempts=attempt,
                    path=item.path, mode=item.mode.value
                ) from failure

            self._logger.warning(
                f"Attempt {attempt}/{self._retry.max_attempts} for {url} failed "
                f"after {elapsed:.2f}s: {failure}; retrying"
            )
            await self._retry.wait(attempt)

    async def _attempt(
        self,
        session: aiohttp.ClientSession,
        url: str,
        headers: Dict[str, str],
        item: UploadItem
    ) -> Any:
        """One POST with a freshly opened body."""
        async with item.payload.open() as opened:
            async with session.post(
                url,
                data=opened.body,
                headers={**opened.headers, **headers}
            ) as response:
                text = await response.text()
                if response.status >= 400:
                    raise _StatusFailure(response.status, text)
                return self._parse_response(text, url, item)

    def _parse_response(self, text: str, url: str, item: UploadItem) -> Any:
        """
        Parse the acknowledgment body.

        Raises:
            UploadError: If the body is not JSON
        """
        try:
            return json.loads(text)
        except json.JSONDecodeError as e:
            raise UploadError(
                f"Invalid JSON response from {url}: {text[:200]}",
                url=url, path=item.path, mode=item.mode.value
            ) from e
