"""
HTTP client for the RedInsight Reddit proxy.

This module provides the client the viewer pipeline uses to reach Reddit
through the same-origin proxy, including error translation and parsing of the
returned JSON into listing models.
"""

import logging
from typing import Any, Dict, Optional

import httpx

from redinsight.config.settings import settings
from redinsight.core.endpoints import Endpoint, post_detail_endpoint
from redinsight.models.listing import ListingEnvelope, ListingItem, PostDetailResult

logger = logging.getLogger(__name__)


class APIError(Exception):
    """Raised when a proxied request fails or returns something unusable."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        self.message = message
        self.status_code = status_code
        super().__init__(self.message)


class RedditProxyClient:
    """
    Async client for the ``/api/reddit`` proxy.

    Requests are one-shot: nothing is retried and nothing is cancelled when a
    newer request for the same view is issued.
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        prefix: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Initialize the proxy client.

        Args:
            base_url: Origin serving the proxy; defaults to the local server
            prefix: Proxy path prefix
            timeout: Request timeout in seconds
            transport: Optional transport, e.g. ``httpx.ASGITransport`` to call an app in-process
        """
        self.base_url = (base_url or f"http://127.0.0.1:{settings.PORT}").rstrip("/")
        self.prefix = "/" + (prefix or settings.PROXY_PREFIX).strip("/")
        # The proxy has its own upstream timeout; leave headroom for it to answer first
        self.timeout = timeout if timeout is not None else settings.UPSTREAM_TIMEOUT_SECONDS + 5

        self.client = httpx.AsyncClient(
            base_url=self.base_url,
            transport=transport,
            timeout=httpx.Timeout(self.timeout),
            headers={
                "Accept": "application/json",
                "Content-Type": "application/json",
            },
        )

        logger.info(f"Initialized RedditProxyClient with base_url: {self.base_url}{self.prefix}")

    async def __aenter__(self) -> "RedditProxyClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self.client.aclose()

    async def fetch(self, endpoint: Endpoint) -> Any:
        """
        Fetch raw JSON for an endpoint through the proxy.

        Args:
            endpoint: Path and query parameters built by :mod:`redinsight.core.endpoints`

        Returns:
            Any: Decoded JSON body

        Raises:
            APIError: On transport failure, a non-2xx status or an undecodable body
        """
        path = self.prefix + "/" + endpoint.path.lstrip("/")
        params: Dict[str, Any] = {key: value for key, value in endpoint.params.items() if value is not None}

        logger.debug(f"Fetching URL: {path} params={params}")

        try:
            response = await self.client.get(path, params=params)
        except httpx.HTTPError as e:
            logger.error(f"API Error: request to {path} failed: {e!r}")
            raise APIError(f"Request failed: {e}") from e

        logger.debug(f"Response status: {response.status_code}")

        if not response.is_success:
            message = _error_message(response)
            logger.error(f"API Error: HTTP {response.status_code} for {path}: {message}")
            raise APIError(f"HTTP error! status: {response.status_code} - {message}", response.status_code)

        try:
            return response.json()
        except ValueError as e:
            raise APIError(f"Failed to parse response from {path}: {e}", response.status_code) from e

    async def fetch_listing(self, endpoint: Endpoint) -> ListingEnvelope:
        return ListingEnvelope.from_payload(await self.fetch(endpoint))

    async def fetch_item(self, endpoint: Endpoint) -> ListingItem:
        """Fetch a single ``{kind, data}`` thing, e.g. ``/user/<name>/about``."""
        payload = await self.fetch(endpoint)
        try:
            return ListingItem.from_payload(payload)
        except ValueError as e:
            raise APIError(f"Unexpected response shape from {endpoint.path}: {e}") from e

    async def fetch_post_detail(self, permalink: str) -> PostDetailResult:
        try:
            endpoint = post_detail_endpoint(permalink)
        except ValueError as e:
            raise APIError(str(e)) from e
        payload = await self.fetch(endpoint)
        try:
            return PostDetailResult.from_payload(payload)
        except ValueError as e:
            raise APIError(f"Unexpected post detail response for {permalink}: {e}") from e


def _error_message(response: httpx.Response) -> str:
    """Prefer the proxy's structured ``message``; fall back to the reason phrase."""
    try:
        body = response.json()
    except ValueError:
        body = None
    if isinstance(body, dict) and body.get("message"):
        return str(body["message"])
    return response.reason_phrase
