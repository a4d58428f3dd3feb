"""Fetch transports for the bootstrap payload and the trust list.

The loader only depends on the ``Fetcher`` protocol: an async ``fetch(url)``
that returns the body as text or raises ``FetchError``.
"""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Protocol
from urllib.parse import unquote, urljoin, urlparse

import httpx
import structlog

from .errors import FetchError

log = structlog.get_logger()

_HTTP_SCHEMES = ("http://", "https://")


class Fetcher(Protocol):
    async def fetch(self, url: str) -> str: ...


def is_http_url(url: str) -> bool:
    return url.lower().startswith(_HTTP_SCHEMES)


def resolve_url(url: str, base: str) -> str:
    """Resolve a configured location against ``base``.

    Absolute http(s) and file URLs are returned unchanged. Anything else is
    relative: joined as a URL when ``base`` is http(s), else as a path.
    """
    if is_http_url(url) or url.startswith("file://"):
        return url
    if is_http_url(base):
        return urljoin(base if base.endswith("/") else base + "/", url)
    return str(Path(base) / url)


class HttpFetcher:
    """Fetch over HTTP(S) with httpx; non-2xx answers are errors."""

    def __init__(self, timeout: float = 10.0, client: httpx.AsyncClient | None = None) -> None:
        self._timeout = timeout
        self._client = client
        self._owns_client = client is None

    def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(
                timeout=httpx.Timeout(self._timeout),
                follow_redirects=True,
            )
        return self._client

    async def fetch(self, url: str) -> str:
        client = self._get_client()
        try:
            response = await client.get(url)
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise FetchError(url, f"HTTP {e.response.status_code}") from e
        except httpx.HTTPError as e:
            raise FetchError(url, f"{type(e).__name__}: {e}") from e
        try:
            return response.content.decode("utf-8")
        except UnicodeDecodeError as e:
            raise FetchError(url, "body is not valid UTF-8") from e

    async def aclose(self) -> None:
        if self._client is not None and self._owns_client:
            await self._client.aclose()
            self._client = None


class FileFetcher:
    """Read local paths and ``file://`` URLs as UTF-8 text."""

    async def fetch(self, url: str) -> str:
        path = Path(unquote(urlparse(url).path)) if url.startswith("file://") else Path(url)
        try:
            return await asyncio.to_thread(path.read_text, encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            raise FetchError(url, f"{type(e).__name__}: {e}") from e


class RoutingFetcher:
    """Send http(s) URLs to ``HttpFetcher`` and everything else to ``FileFetcher``."""

    def __init__(self, http: HttpFetcher | None = None, files: FileFetcher | None = None) -> None:
        self.http = http or HttpFetcher()
        self.files = files or FileFetcher()

    async def fetch(self, url: str) -> str:
        fetcher: Fetcher = self.http if is_http_url(url) else self.files
        log.debug("fetching", url=url, transport=type(fetcher).__name__)
        return await fetcher.fetch(url)

    async def aclose(self) -> None:
        await self.http.aclose()
