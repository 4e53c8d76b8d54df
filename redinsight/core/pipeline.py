"""
Request/render pipeline for the viewer.

Each operation picks an endpoint from the current selections, fetches it
through the proxy and renders the result into the HTML fragment for one panel.
Failures never escape as exceptions: they become a short static message in
the panel the operation targets.
"""

import asyncio
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from redinsight.config.settings import Settings, settings as default_settings
from redinsight.core import endpoints
from redinsight.core.client import APIError, RedditProxyClient
from redinsight.core.renderers import (
    render_community_posts,
    render_error,
    render_items,
    render_placeholder,
    render_post_detail,
    render_search_results,
    render_user_profile,
)
from redinsight.core.state import SelectionState

logger = logging.getLogger(__name__)

SEARCH_PROMPT = "Enter your search query above to get started"
USER_PROMPT = "Enter a username to view their profile and posts"


class Panel(str, Enum):
    """Regions of the page a fragment can be written into."""

    POSTS = "posts"
    SUBREDDITS = "subreddits"
    SEARCH = "search"
    USERS = "users"
    MODAL = "modal"


@dataclass(frozen=True)
class PanelUpdate:
    """An HTML fragment destined for one panel."""

    panel: Panel
    html: str


def search_placeholder() -> PanelUpdate:
    return PanelUpdate(Panel.SEARCH, render_placeholder(SEARCH_PROMPT))


def users_placeholder() -> PanelUpdate:
    return PanelUpdate(Panel.USERS, render_placeholder(USER_PROMPT, icon="fa-user"))


class ContentPipeline:
    """
    Turns viewer selections into rendered panels.

    Requests are never cancelled or sequenced: when the same panel is requested
    twice in quick succession, whichever response arrives last wins.
    """

    def __init__(self, client: RedditProxyClient, settings: Optional[Settings] = None):
        self.client = client
        self.settings = settings or default_settings

    @property
    def limit(self) -> int:
        return self.settings.DEFAULT_PAGE_SIZE

    async def load_posts(self, state: SelectionState) -> PanelUpdate:
        """Front-page listing for the current posts filter and time window."""
        endpoint = endpoints.posts_endpoint(state.posts_filter, state.posts_time, limit=self.limit)
        try:
            listing = await self.client.fetch_listing(endpoint)
        except APIError as e:
            logger.error(f"Error loading posts: {e}")
            return PanelUpdate(Panel.POSTS, render_error("Failed to load posts. Please try again."))

        if listing.is_empty:
            return PanelUpdate(Panel.POSTS, render_error("No posts found"))
        return PanelUpdate(Panel.POSTS, render_items(listing.items))

    async def load_subreddits(self, state: SelectionState) -> PanelUpdate:
        endpoint = endpoints.communities_endpoint(state.subreddits_filter, limit=self.limit)
        try:
            listing = await self.client.fetch_listing(endpoint)
        except APIError as e:
            logger.error(f"Error loading subreddits: {e}")
            return PanelUpdate(Panel.SUBREDDITS, render_error("Failed to load subreddits. Please try again."))

        if listing.is_empty:
            logger.warning(f"No subreddits data found for filter {state.subreddits_filter!r}")
            return PanelUpdate(Panel.SUBREDDITS, render_error("No subreddits found"))

        logger.info(f"Successfully loaded {len(listing)} subreddits")
        return PanelUpdate(Panel.SUBREDDITS, render_items(listing.items))

    async def quick_search_posts(self, query: str, state: SelectionState) -> PanelUpdate:
        """Filter-box search in the posts panel; an empty query reloads the listing."""
        query = query.strip()
        if not query:
            return await self.load_posts(state)
        return await self._quick_search(query, "posts", Panel.POSTS, "No posts found")

    async def quick_search_subreddits(self, query: str, state: SelectionState) -> PanelUpdate:
        query = query.strip()
        if not query:
            return await self.load_subreddits(state)
        return await self._quick_search(query, "subreddits", Panel.SUBREDDITS, "No subreddits found")

    async def _quick_search(self, query: str, result_type: str, panel: Panel, empty_message: str) -> PanelUpdate:
        try:
            listing = await self.client.fetch_listing(endpoints.search_endpoint(query, result_type, limit=self.limit))
        except APIError as e:
            logger.error(f"Quick search for {query!r} failed: {e}")
            return PanelUpdate(panel, render_error("Search failed"))

        if listing.is_empty:
            return PanelUpdate(panel, render_error(empty_message))
        return PanelUpdate(panel, render_items(listing.items))

    async def search(self, query: str, result_type: str = "posts") -> PanelUpdate:
        """
        Global search.

        Raises:
            ValueError: If ``result_type`` is not ``posts``, ``subreddits`` or ``users``.
        """
        query = query.strip()
        if not query:
            return search_placeholder()

        endpoint = endpoints.search_endpoint(query, result_type, limit=self.limit)
        try:
            listing = await self.client.fetch_listing(endpoint)
        except APIError as e:
            logger.error(f"Search for {query!r} failed: {e}")
            return PanelUpdate(Panel.SEARCH, render_error("Search failed. Please try again."))

        if listing.is_empty:
            return PanelUpdate(Panel.SEARCH, render_placeholder(f'No results found for "{query}"'))
        return PanelUpdate(Panel.SEARCH, render_search_results(query, result_type, listing.items))

    async def load_user_profile(self, username: str) -> PanelUpdate:
        """
        Profile header plus submissions.

        Both requests are issued concurrently; if either fails the whole panel
        shows a single error message.
        """
        username = username.strip()
        if not username:
            return users_placeholder()

        try:
            profile, submissions = await asyncio.gather(
                self.client.fetch_item(endpoints.user_about_endpoint(username)),
                self.client.fetch_listing(endpoints.user_submitted_endpoint(username, limit=self.limit)),
            )
        except APIError as e:
            logger.error(f"Error loading profile for u/{username}: {e}")
            return PanelUpdate(
                Panel.USERS,
                render_error("Failed to load user profile. Please check the username and try again."),
            )

        return PanelUpdate(Panel.USERS, render_user_profile(username, profile, submissions.items))

    async def show_post_details(self, permalink: str) -> PanelUpdate:
        try:
            detail = await self.client.fetch_post_detail(permalink)
        except APIError as e:
            logger.error(f"Error loading post details for {permalink}: {e}")
            return PanelUpdate(Panel.MODAL, render_error("Failed to load post details."))

        return PanelUpdate(Panel.MODAL, render_post_detail(detail, max_comments=self.settings.MAX_COMMENTS))

    async def load_subreddit_posts(self, community: str) -> PanelUpdate:
        """Hot posts of one community, shown in the posts panel with a way back."""
        endpoint = endpoints.posts_endpoint("hot", "day", community=community, limit=self.limit)
        try:
            listing = await self.client.fetch_listing(endpoint)
        except APIError as e:
            logger.error(f"Error loading posts for r/{community}: {e}")
            return PanelUpdate(Panel.POSTS, render_error("Failed to load subreddit posts"))

        if listing.is_empty:
            return PanelUpdate(Panel.POSTS, render_error("No posts found in this subreddit"))
        return PanelUpdate(Panel.POSTS, render_community_posts(community, listing.items))
