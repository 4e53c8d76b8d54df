"""
Reddit proxy gateway.

Forwards read-only JSON requests to Reddit and translates the outcome into a
status code plus a JSON body the browser can consume.
"""

import logging
from dataclasses import dataclass
from typing import Any, Dict, Iterable, Mapping, Optional, Sequence, Tuple, Union

import httpx

from redinsight.config.settings import settings

logger = logging.getLogger(__name__)

QueryParams = Union[Mapping[str, str], Sequence[Tuple[str, str]]]

# Added to every proxy response so the API can be consumed cross-origin
CORS_HEADERS: Dict[str, str] = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "GET, POST, PUT, DELETE, OPTIONS",
    "Access-Control-Allow-Headers": "Origin, X-Requested-With, Content-Type, Accept",
}


@dataclass(frozen=True)
class GatewayResponse:
    """Status code and JSON body to relay to the caller."""

    status_code: int
    body: Any


def error_body(error: str, message: str) -> Dict[str, str]:
    return {"error": error, "message": message}


class ProxyGateway:
    """
    Stateless forwarder for Reddit's ``.json`` endpoints.

    Every request carries the identifying ``User-Agent`` Reddit requires and is
    bounded by a fixed timeout. Failures are never retried.
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        headers: Optional[Dict[str, str]] = None,
        client: Optional[httpx.AsyncClient] = None,
    ):
        """
        Initialize the gateway.

        Args:
            base_url: Upstream origin, e.g. ``https://www.reddit.com``
            timeout: Upstream request timeout in seconds
            headers: Headers attached to every upstream request
            client: Optional preconfigured HTTP client (used in tests)
        """
        self.base_url = (base_url or settings.UPSTREAM_BASE_URL).rstrip("/")
        self.timeout = timeout if timeout is not None else settings.UPSTREAM_TIMEOUT_SECONDS
        self.headers = headers or settings.upstream_headers
        self._owns_client = client is None
        self.client = client or httpx.AsyncClient(
            timeout=httpx.Timeout(self.timeout),
            follow_redirects=True,
        )

        logger.info(f"Proxy gateway initialized for upstream {self.base_url} (timeout {self.timeout}s)")

    async def close(self) -> None:
        if self._owns_client:
            await self.client.aclose()
            logger.info("Proxy gateway HTTP client closed")

    def build_url(self, path_suffix: str) -> str:
        """Map a proxied path onto the upstream ``.json`` URL; a trailing slash (as on permalinks) is dropped."""
        return f"{self.base_url}/{path_suffix.strip('/')}.json"

    async def forward(self, path_suffix: str, query_params: Optional[QueryParams] = None) -> GatewayResponse:
        """
        Forward a GET request to Reddit.

        Args:
            path_suffix: Path below the proxy prefix, e.g. ``r/python/hot``
            query_params: Query parameters, passed through unmodified

        Returns:
            GatewayResponse: The upstream JSON with status 200, the upstream status
            with an ``{error, message}`` body, or 500 on network failure or timeout.
        """
        url = self.build_url(path_suffix)
        params = list(_iter_params(query_params))
        logger.info(f"Proxying request to: {url}" + (f" params={params}" if params else ""))

        try:
            response = await self.client.get(
                url,
                params=params or None,
                headers=self.headers,
                timeout=self.timeout,
            )
        except httpx.TimeoutException as e:
            logger.error(f"Proxy timeout after {self.timeout}s for {url}: {e!r}")
            return GatewayResponse(500, error_body("Internal server error", str(e) or "Upstream request timed out"))
        except httpx.HTTPError as e:
            logger.error(f"Proxy error for {url}: {e!r}")
            return GatewayResponse(500, error_body("Internal server error", str(e) or e.__class__.__name__))

        if not response.is_success:
            logger.error(f"Reddit API error: {response.status_code} {response.reason_phrase}")
            return GatewayResponse(
                response.status_code,
                error_body(f"Reddit API error: {response.status_code}", response.reason_phrase),
            )

        try:
            data = response.json()
        except ValueError as e:
            logger.error(f"Reddit returned invalid JSON for {url}: {e}")
            return GatewayResponse(500, error_body("Internal server error", "Upstream returned invalid JSON"))

        return GatewayResponse(200, data)


def _iter_params(query_params: Optional[QueryParams]) -> Iterable[Tuple[str, str]]:
    if not query_params:
        return []
    if isinstance(query_params, Mapping):
        return list(query_params.items())
    return list(query_params)
