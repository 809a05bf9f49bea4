import logging
from typing import Optional

import httpx

from extview.__version__ import __version__
from extview.core.errors import FetchError
from extview.sources.base import GalleryService

REQUEST_TIMEOUT = 45.0
MAX_CONNECTIONS = 100
MAX_KEEPALIVE_CONNECTIONS = 20


class HttpGalleryService(GalleryService):
    """
    Gallery asset fetcher on top of a shared HTTPX async client.
    Every call hits the network; there is no caching layer.
    """

    def __init__(
        self,
        client: Optional[httpx.AsyncClient] = None,
        timeout: float = REQUEST_TIMEOUT,
        max_connections: int = MAX_CONNECTIONS,
        max_keepalive_connections: int = MAX_KEEPALIVE_CONNECTIONS,
    ):
        if client is None:
            limits = httpx.Limits(
                max_keepalive_connections=max_keepalive_connections,
                max_connections=max_connections,
            )
            client = httpx.AsyncClient(
                timeout=timeout,
                limits=limits,
                follow_redirects=True,
                headers={"User-Agent": f"extview/{__version__}"},
            )
        self._client = client

    async def get_asset(self, locator: str) -> bytes:
        logging.debug(f"Fetching gallery asset {locator}")
        try:
            response = await self._client.get(locator)
        except httpx.HTTPError as e:
            logging.error(f"Asset request error for {locator}: {e}")
            raise FetchError(locator, f"request failed: {e}") from e

        if response.status_code != 200:
            logging.error(f"Gallery API Error {response.status_code} for {locator}")
            raise FetchError(locator, f"HTTP {response.status_code}")

        return response.content

    async def aclose(self) -> None:
        await self._client.aclose()

    async def __aenter__(self) -> "HttpGalleryService":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()
