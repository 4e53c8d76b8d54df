"""
Endpoint builder for the Reddit proxy.

Pure functions mapping viewer selections onto a proxied path and its query
parameters. Paths are relative to the proxy prefix (``/api/reddit``); the
gateway appends ``.json`` when forwarding.
"""

import re
from typing import Any, Dict, NamedTuple

# Sentinel community meaning "the front page, no specific subreddit"
ALL_COMMUNITIES = "all"
# Sentinel time window meaning "no time restriction"
ALL_TIME = "all"

DEFAULT_LIMIT = 25

# Viewer search types and the singular names Reddit's search API expects.
# Closed set: only these three values are supported.
SEARCH_TYPES = ("posts", "subreddits", "users")

# Permalinks must stay below these roots; dot segments, query and fragment are refused
PERMALINK_ROOTS = ("/r/", "/user/")
PERMALINK_FORBIDDEN = re.compile(r"\.\.|%2e|[?#\\]", re.IGNORECASE)


class Endpoint(NamedTuple):
    """A proxied path plus the query parameters to send with it."""

    path: str
    params: Dict[str, Any]


def posts_endpoint(
    filter: str = "hot",
    time_window: str = "day",
    community: str = ALL_COMMUNITIES,
    limit: int = DEFAULT_LIMIT,
) -> Endpoint:
    """
    Build the endpoint for a post listing.

    The time window is only sent for the ``top`` filter, and never when it is
    the ``all`` sentinel.
    """
    path = f"/{filter}" if community == ALL_COMMUNITIES else f"/r/{community}/{filter}"
    params: Dict[str, Any] = {"limit": limit}

    if filter == "top" and time_window != ALL_TIME:
        params["t"] = time_window

    return Endpoint(path, params)


def communities_endpoint(filter: str = "popular", limit: int = DEFAULT_LIMIT) -> Endpoint:
    return Endpoint(f"/subreddits/{filter}", {"limit": limit})


def search_type_param(result_type: str) -> str:
    """
    Map a viewer search type to Reddit's ``type`` parameter.

    ``posts`` becomes ``link``; ``subreddits`` and ``users`` lose their
    trailing ``s``. This is not a general singularisation rule, so anything
    outside :data:`SEARCH_TYPES` is rejected.

    Raises:
        ValueError: If ``result_type`` is not one of the supported types.
    """
    if result_type not in SEARCH_TYPES:
        raise ValueError(f"Unsupported search type: {result_type!r}")
    return "link" if result_type == "posts" else result_type[:-1]


def search_endpoint(query: str, result_type: str = "posts", limit: int = DEFAULT_LIMIT) -> Endpoint:
    return Endpoint("/search", {
        "q": query,
        "type": search_type_param(result_type),
        "limit": limit,
    })


def user_about_endpoint(username: str) -> Endpoint:
    return Endpoint(f"/user/{username}/about", {})


def user_submitted_endpoint(username: str, limit: int = DEFAULT_LIMIT) -> Endpoint:
    return Endpoint(f"/user/{username}/submitted", {"limit": limit})


def post_detail_endpoint(permalink: str) -> Endpoint:
    """
    Permalinks are already in upstream path form and are used untouched.

    Raises:
        ValueError: If ``permalink`` is not a plain ``/r/...`` or ``/user/...`` path.
    """
    if not permalink.startswith(PERMALINK_ROOTS) or PERMALINK_FORBIDDEN.search(permalink):
        raise ValueError(f"Invalid permalink: {permalink!r}")
    return Endpoint(permalink, {})
