"""
HTML fragment renderers for listing entries.

There is one renderer per entity kind. Individual renderers may raise on a
malformed payload; :func:`render_item` wraps them so a defect in one entry
degrades to a fallback fragment instead of aborting the whole batch.
"""

import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, Iterable, List, Optional

from jinja2 import Environment, PackageLoader, select_autoescape
from markupsafe import Markup

from redinsight.config.settings import settings
from redinsight.core.formatting import format_number, format_time, truncate_text
from redinsight.models.listing import (
    CommentData,
    CommunityData,
    ItemKind,
    ListingItem,
    PostData,
    PostDetailResult,
    UserData,
)

logger = logging.getLogger(__name__)

POST_CONTENT_LENGTH = 200
COMMUNITY_DESCRIPTION_LENGTH = 100


def _create_environment() -> Environment:
    env = Environment(
        loader=PackageLoader("redinsight", "templates"),
        autoescape=select_autoescape(["html"]),
        trim_blocks=True,
        lstrip_blocks=True,
    )
    env.filters["number"] = format_number
    env.filters["relative_time"] = format_time
    env.filters["truncate_text"] = truncate_text
    return env


jinja_env = _create_environment()


def render_template(template_name: str, **context: Any) -> str:
    context.setdefault("default_icon", settings.DEFAULT_ICON_URL)
    context.setdefault("now", None)
    return jinja_env.get_template(template_name).render(**context)


@dataclass(frozen=True)
class RenderResult:
    """Outcome of rendering one entry: the real fragment, or a fallback one."""

    html: str
    ok: bool = True

    @classmethod
    def success(cls, html: str) -> "RenderResult":
        return cls(html=html, ok=True)

    @classmethod
    def fallback(cls, html: str) -> "RenderResult":
        return cls(html=html, ok=False)


# --- Per-kind renderers ---

def render_post(data: Dict[str, Any], now: Optional[float] = None) -> str:
    post = PostData.model_validate(data)
    content = truncate_text(post.selftext, POST_CONTENT_LENGTH) if post.is_self else ""
    return render_template("post_card.html", post=post, content=content, now=now)


def render_community(data: Dict[str, Any], now: Optional[float] = None) -> str:
    community = CommunityData.model_validate(data)
    return render_template("community_card.html", community=community, now=now)


def render_user(data: Dict[str, Any], now: Optional[float] = None, member_since: bool = False) -> str:
    user = UserData.model_validate(data)
    return render_template("user_card.html", user=user, member_since=member_since, now=now)


def render_comment(data: Dict[str, Any], now: Optional[float] = None) -> str:
    comment = CommentData.model_validate(data)
    return render_template("comment.html", comment=comment, now=now)


RENDERERS: Dict[ItemKind, Callable[..., str]] = {
    ItemKind.POST: render_post,
    ItemKind.COMMUNITY: render_community,
    ItemKind.USER: render_user,
    ItemKind.COMMENT: render_comment,
}


def _fallback_fragment(kind: Optional[ItemKind]) -> str:
    if kind == ItemKind.COMMUNITY:
        return render_template("community_fallback.html")
    return render_template("item_fallback.html")


def render_item(item: ListingItem, now: Optional[float] = None) -> RenderResult:
    """
    Render one listing entry.

    ``more`` placeholders (collapsed comment threads) render as nothing.
    Unknown kinds and renderer failures produce a fallback fragment.
    """
    if item.kind == ItemKind.MORE:
        return RenderResult.success("")

    renderer = RENDERERS.get(item.kind) if item.kind is not None else None
    if renderer is None:
        logger.warning(f"No renderer for listing item kind {item.kind!r}")
        return RenderResult.fallback(_fallback_fragment(item.kind))

    return _render_isolated(item.kind, renderer, item.data, now=now)


def _render_isolated(kind: ItemKind, renderer: Callable[..., str], data: Dict[str, Any], **options: Any) -> RenderResult:
    try:
        return RenderResult.success(renderer(data, **options))
    except Exception as e:
        logger.warning(f"Error rendering {kind.value}: {e}")
        return RenderResult.fallback(_fallback_fragment(kind))


def render_items(items: Iterable[ListingItem], now: Optional[float] = None) -> str:
    results: List[RenderResult] = [render_item(item, now=now) for item in items]
    failed = sum(1 for result in results if not result.ok)
    if failed:
        logger.warning(f"{failed} of {len(results)} listing items rendered as fallback")
    return "".join(result.html for result in results)


# --- Composite fragments ---

MESSAGE_ICONS = {
    "loading": "fa-spinner fa-spin",
    "error": "fa-exclamation-triangle",
    "success": "fa-check-circle",
}


def render_message(variant: str, text: str, icon: Optional[str] = None) -> str:
    """Render a status message (``loading``, ``error``, ``success`` or ``search-placeholder``)."""
    return render_template(
        "message.html",
        variant=variant,
        icon=icon or MESSAGE_ICONS.get(variant, "fa-search"),
        text=text,
    )


def render_error(text: str) -> str:
    return render_message("error", text)


def render_placeholder(text: str, icon: str = "fa-search") -> str:
    return render_message("search-placeholder", text, icon=icon)


def render_loading() -> str:
    return render_message("loading", "Loading...")


GRID_CLASSES = {
    "posts": "posts-grid",
    "subreddits": "subreddits-grid",
    "users": "users-grid",
}


def render_search_results(query: str, result_type: str, items: List[ListingItem], now: Optional[float] = None) -> str:
    return render_template(
        "search_results.html",
        query=query,
        count=len(items),
        grid_class=GRID_CLASSES.get(result_type, "posts-grid"),
        items_html=Markup(render_items(items, now=now)),
    )


def render_community_posts(community: str, items: List[ListingItem], now: Optional[float] = None) -> str:
    return render_template(
        "community_posts.html",
        community=community,
        items_html=Markup(render_items(items, now=now)),
    )


def render_user_profile(
    username: str,
    profile: ListingItem,
    posts: List[ListingItem],
    now: Optional[float] = None,
) -> str:
    """Profile header (with account age) followed by the user's submissions; a bad header degrades to a fallback."""
    data = dict(profile.data)
    data.setdefault("name", username)
    header = _render_isolated(ItemKind.USER, render_user, data, now=now, member_since=True)
    return render_template(
        "user_profile.html",
        header_html=Markup(header.html),
        posts_html=Markup(render_items(posts, now=now)) if posts else None,
    )


def render_post_detail(detail: PostDetailResult, max_comments: Optional[int] = None, now: Optional[float] = None) -> str:
    limit = settings.MAX_COMMENTS if max_comments is None else max_comments
    return render_template(
        "post_detail.html",
        post=detail.post,
        comment_count=len(detail.comments),
        comments_html=Markup(render_items(detail.comments[:limit], now=now)),
        now=now,
    )
