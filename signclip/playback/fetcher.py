"""Fetch media bytes across the page/extension boundary."""

import logging

import httpx

from signclip import settings
from signclip.playback.types import MediaNotFound, MediaTimeout, MediaUnreachable

logger = logging.getLogger(__name__)


class HttpMediaFetcher:
    """MediaFetcher backed by an httpx.AsyncClient.

    Every failure surfaces as a MediaFetchError subclass so the controller
    can skip the item without caring about transport details.
    """

    def __init__(self, client: httpx.AsyncClient | None = None, timeout: float | None = None):
        self._timeout = timeout if timeout is not None else settings.REQUEST_TIMEOUT
        self._client = client
        self._owns_client = client is None

    def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=self._timeout, follow_redirects=True)
        return self._client

    async def fetch(self, url: str) -> bytes:
        try:
            resp = await self._get_client().get(url)
        except httpx.TimeoutException as e:
            raise MediaTimeout(url, str(e) or "timed out") from e
        except httpx.HTTPError as e:
            raise MediaUnreachable(url, str(e) or type(e).__name__) from e

        if resp.status_code == 404:
            raise MediaNotFound(url, "404")
        if resp.status_code >= 400:
            raise MediaUnreachable(url, f"HTTP {resp.status_code}")
        logger.debug("Fetched %d bytes from %s", len(resp.content), url)
        return resp.content

    async def aclose(self) -> None:
        if self._client is not None and self._owns_client:
            await self._client.aclose()
            self._client = None
