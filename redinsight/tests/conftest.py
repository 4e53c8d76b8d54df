"""Shared pytest fixtures for the RedInsight test-suite."""

from typing import Any, Callable, Dict, List

import httpx
import pytest

from redinsight.core.client import RedditProxyClient
from redinsight.core.gateway import ProxyGateway

UPSTREAM = "https://upstream.test"
PROXY = "http://proxy.test"


@pytest.fixture
def thing() -> Callable[..., Dict[str, Any]]:
    """Factory for a single ``{kind, data}`` listing child."""

    def _thing(kind: str, **data: Any) -> Dict[str, Any]:
        return {"kind": kind, "data": data}

    return _thing


@pytest.fixture
def listing() -> Callable[..., Dict[str, Any]]:
    """Factory for a Reddit listing envelope wrapping the given children."""

    def _listing(*children: Dict[str, Any]) -> Dict[str, Any]:
        return {"kind": "Listing", "data": {"after": None, "children": list(children)}}

    return _listing


@pytest.fixture
def post_data() -> Dict[str, Any]:
    return {
        "title": "Python 3.13 released",
        "selftext": "",
        "author": "guido",
        "subreddit": "python",
        "score": 1500,
        "num_comments": 250,
        "created_utc": 1_700_000_000,
        "permalink": "/r/python/comments/abc123/python_313_released/",
        "url": "https://www.python.org/downloads/",
        "is_self": False,
        "thumbnail": "https://b.thumbs.redditmedia.com/thumb.jpg",
    }


@pytest.fixture
def community_data() -> Dict[str, Any]:
    return {
        "display_name": "python",
        "display_name_prefixed": "r/python",
        "public_description": "News about the programming language Python.",
        "subscribers": 1_250_000,
        "active_user_count": 2_500,
        "icon_img": "https://styles.redditmedia.com/python.png",
    }


@pytest.fixture
def user_data() -> Dict[str, Any]:
    return {
        "name": "spez",
        "link_karma": 999,
        "comment_karma": 2_500_000,
        "created_utc": 1_118_030_400,
        "icon_img": "https://styles.redditmedia.com/spez.png",
    }


@pytest.fixture
def comment_data() -> Dict[str, Any]:
    return {
        "body": "Great release!",
        "author": "pythonista",
        "score": 42,
        "created_utc": 1_700_000_100,
    }


@pytest.fixture
def upstream_gateway() -> Callable[[Callable[[httpx.Request], httpx.Response]], ProxyGateway]:
    """Build a ProxyGateway whose upstream is answered by ``handler``."""

    def _build(handler: Callable[[httpx.Request], httpx.Response]) -> ProxyGateway:
        client = httpx.AsyncClient(transport=httpx.MockTransport(handler), follow_redirects=True)
        return ProxyGateway(base_url=UPSTREAM, timeout=10.0, client=client)

    return _build


class RecordingProxy:
    """MockTransport handler that serves canned JSON per proxied path and records requests."""

    def __init__(self, routes: Dict[str, Any]):
        self.routes = routes
        self.requests: List[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        response = self.routes.get(request.url.path)
        if response is None:
            return httpx.Response(404, json={"error": "Reddit API error: 404", "message": "Not Found"})
        if isinstance(response, httpx.Response):
            return response
        if isinstance(response, Exception):
            raise response
        return httpx.Response(200, json=response)

    @property
    def paths(self) -> List[str]:
        return [request.url.path for request in self.requests]


@pytest.fixture
def proxy_client() -> Callable[[Dict[str, Any]], tuple]:
    """Build a RedditProxyClient backed by a RecordingProxy; returns ``(client, proxy)``."""

    def _build(routes: Dict[str, Any]) -> tuple:
        proxy = RecordingProxy(routes)
        client = RedditProxyClient(base_url=PROXY, prefix="/api/reddit", timeout=5.0, transport=httpx.MockTransport(proxy))
        return client, proxy

    return _build


@pytest.fixture
def make_app(upstream_gateway) -> Callable[[Callable[[httpx.Request], httpx.Response]], Any]:
    """Build a fresh app whose proxy route forwards to ``handler`` instead of Reddit."""
    from redinsight.api.endpoints.proxy import get_gateway
    from redinsight.api.main import create_app

    def _build(handler: Callable[[httpx.Request], httpx.Response]):
        app = create_app()
        gateway = upstream_gateway(handler)
        app.dependency_overrides[get_gateway] = lambda: gateway
        return app

    return _build


@pytest.fixture
def reddit_routes() -> Callable[[Dict[str, Any]], RecordingProxy]:
    """Upstream handler serving canned JSON keyed by the ``.json`` path Reddit would see."""

    def _build(routes: Dict[str, Any]) -> RecordingProxy:
        return RecordingProxy(routes)

    return _build
