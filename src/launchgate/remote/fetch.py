"""Fetch the remote configuration document.

Fetchers return raw bytes and raise FetchError on any transport
failure or empty response. Retries are left to the caller.
"""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path
from typing import Protocol
from urllib.parse import urlparse

import httpx

from launchgate import __version__
from launchgate.errors import LaunchGateError

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_SECONDS = 10.0
USER_AGENT = f"launchgate/{__version__}"


class FetchError(LaunchGateError):
    """Raised when the configuration document cannot be retrieved."""

    def __init__(self, url: str, reason: str):
        self.url = url
        self.reason = reason
        super().__init__(f"{url}: {reason}")


class Fetcher(Protocol):
    """Protocol for configuration transports."""

    async def fetch(self, url: str) -> bytes:
        """Retrieve the document body.

        Args:
            url: Location of the configuration document

        Returns:
            Non-empty response body

        Raises:
            FetchError: On transport errors or an empty body
        """
        ...


class HttpFetcher:
    """HTTP(S) fetcher backed by httpx.

    Uses a fresh AsyncClient per fetch unless one is supplied; an
    injected client is left open for its owner to close.
    """

    def __init__(
        self,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
        client: httpx.AsyncClient | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self._timeout = timeout
        self._client = client
        self._transport = transport

    async def fetch(self, url: str) -> bytes:
        if self._client is not None:
            return await self._get(self._client, url)

        async with httpx.AsyncClient(
            timeout=self._timeout,
            transport=self._transport,
            headers={"User-Agent": USER_AGENT},
            follow_redirects=True,
        ) as client:
            return await self._get(client, url)

    async def _get(self, client: httpx.AsyncClient, url: str) -> bytes:
        try:
            response = await client.get(url)
        except httpx.TimeoutException as e:
            raise FetchError(url, f"timed out ({e.__class__.__name__})") from e
        except httpx.HTTPError as e:
            raise FetchError(url, str(e) or e.__class__.__name__) from e

        if response.status_code >= 400:
            raise FetchError(url, f"HTTP {response.status_code}")

        if not response.content:
            raise FetchError(url, "Remote configuration file response was empty")

        logger.debug(f"Fetched {len(response.content)} bytes from {url}")
        return response.content


class FileFetcher:
    """Reads the configuration document from the local filesystem.

    Accepts plain paths and file:// URLs.
    """

    async def fetch(self, url: str) -> bytes:
        path = _path_from_url(url)
        try:
            data = await asyncio.to_thread(path.read_bytes)
        except OSError as e:
            raise FetchError(url, e.strerror or str(e)) from e

        if not data:
            raise FetchError(url, "Configuration file is empty")
        return data


class StaticFetcher:
    """Serves a fixed document regardless of URL.

    Used for bundled documents and tests. Counts its fetches in `calls`.
    """

    def __init__(self, data: bytes):
        self.data = data
        self.calls = 0

    async def fetch(self, url: str) -> bytes:
        self.calls += 1
        if not self.data:
            raise FetchError(url, "Static configuration is empty")
        return self.data


def _path_from_url(url: str) -> Path:
    parsed = urlparse(url)
    if parsed.scheme == "file":
        return Path(parsed.path)
    return Path(url).expanduser()


def fetcher_for_url(url: str, timeout: float = DEFAULT_TIMEOUT_SECONDS) -> Fetcher:
    """Pick a fetcher by URL scheme (http/https -> HttpFetcher, else file)."""
    scheme = urlparse(url).scheme
    if scheme in ("http", "https"):
        return HttpFetcher(timeout=timeout)
    return FileFetcher()
