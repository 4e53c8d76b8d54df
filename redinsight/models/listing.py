"""
Pydantic models for Reddit listing payloads.

Reddit wraps everything it returns in a listing envelope of the shape
``{"data": {"children": [{"kind": ..., "data": {...}}]}}``. These models parse
that envelope at the boundary and expose one record type per entity kind with
every field optional, so renderers can rely on a defined fallback instead of
probing raw dictionaries.
"""

import html
import logging
from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from redinsight.config.settings import settings

logger = logging.getLogger(__name__)

DELETED_PLACEHOLDER = "[deleted]"
NO_DESCRIPTION_PLACEHOLDER = "No description available"

# Thumbnail values Reddit uses instead of a real image URL
IMAGE_SENTINELS = frozenset({"self", "default", "nsfw", "spoiler", "image"})


class ItemKind(str, Enum):
    """Kinds of entries that can appear in a listing."""

    POST = "post"
    COMMUNITY = "community"
    USER = "user"
    COMMENT = "comment"
    MORE = "more"


# Reddit "thing" type prefixes mapped onto our vocabulary
UPSTREAM_KINDS: Dict[str, ItemKind] = {
    "t1": ItemKind.COMMENT,
    "t2": ItemKind.USER,
    "t3": ItemKind.POST,
    "t5": ItemKind.COMMUNITY,
    "more": ItemKind.MORE,
}


def parse_kind(value: Any) -> Optional[ItemKind]:
    """Map an upstream kind tag (``t3``) or a local one (``post``) to an ItemKind."""
    if isinstance(value, ItemKind):
        return value
    if not isinstance(value, str):
        return None
    if value in UPSTREAM_KINDS:
        return UPSTREAM_KINDS[value]
    try:
        return ItemKind(value)
    except ValueError:
        return None


class _Record(BaseModel):
    """Base for entity payloads: unknown fields ignored, empty strings treated as missing."""

    model_config = ConfigDict(extra="ignore")

    @field_validator("*", mode="before")
    @classmethod
    def _blank_to_none(cls, value: Any) -> Any:
        if isinstance(value, str) and value.strip() == "":
            return None
        return value


class PostData(_Record):
    """A link or self post (upstream kind ``t3``)."""

    title: Optional[str] = None
    selftext: Optional[str] = None
    author: Optional[str] = None
    subreddit: Optional[str] = None
    score: Optional[int] = None
    num_comments: Optional[int] = None
    created_utc: Optional[float] = None
    permalink: Optional[str] = None
    url: Optional[str] = None
    is_self: Optional[bool] = None
    thumbnail: Optional[str] = None
    preview: Optional[Dict[str, Any]] = None

    @property
    def author_display(self) -> str:
        return self.author or DELETED_PLACEHOLDER

    @property
    def image_url(self) -> Optional[str]:
        """Preview source URL if present, otherwise the thumbnail; None for sentinels."""
        candidate = self._preview_source_url() or self.thumbnail
        if not candidate or candidate in IMAGE_SENTINELS:
            return None
        # Reddit HTML-escapes preview URLs (&amp;)
        return html.unescape(candidate)

    def _preview_source_url(self) -> Optional[str]:
        if not isinstance(self.preview, dict):
            return None
        images = self.preview.get("images")
        if not isinstance(images, list) or not images or not isinstance(images[0], dict):
            return None
        source = images[0].get("source")
        if not isinstance(source, dict):
            return None
        url = source.get("url")
        return url if isinstance(url, str) and url else None


class CommunityData(_Record):
    """A subreddit (upstream kind ``t5``)."""

    display_name: Optional[str] = None
    display_name_prefixed: Optional[str] = None
    public_description: Optional[str] = None
    subscribers: Optional[int] = None
    active_user_count: Optional[int] = None
    icon_img: Optional[str] = None

    @property
    def name(self) -> str:
        return self.display_name or "Unknown"

    @property
    def prefixed_name(self) -> str:
        return self.display_name_prefixed or f"r/{self.name}"

    @property
    def description_display(self) -> str:
        return self.public_description or NO_DESCRIPTION_PLACEHOLDER

    @property
    def icon_url(self) -> str:
        if self.icon_img and self.icon_img != "null":
            return self.icon_img
        return settings.DEFAULT_ICON_URL

    @property
    def subscriber_count(self) -> int:
        return self.subscribers or 0

    @property
    def active_count(self) -> int:
        return self.active_user_count or 0


class UserData(_Record):
    """A user account (upstream kind ``t2``)."""

    name: Optional[str] = None
    link_karma: Optional[int] = None
    comment_karma: Optional[int] = None
    created_utc: Optional[float] = None
    icon_img: Optional[str] = None

    @property
    def display_name(self) -> str:
        return self.name or DELETED_PLACEHOLDER

    @property
    def icon_url(self) -> str:
        if self.icon_img and self.icon_img != "null":
            return self.icon_img
        return settings.DEFAULT_ICON_URL


class CommentData(_Record):
    """A comment (upstream kind ``t1``)."""

    body: Optional[str] = None
    author: Optional[str] = None
    score: Optional[int] = None
    created_utc: Optional[float] = None

    @property
    def author_display(self) -> str:
        return self.author or DELETED_PLACEHOLDER

    @property
    def body_display(self) -> str:
        return self.body or DELETED_PLACEHOLDER


class ListingItem(BaseModel):
    """One child of a listing envelope. ``data`` stays raw until it is rendered."""

    kind: Optional[ItemKind] = None
    data: Dict[str, Any] = Field(default_factory=dict)

    @field_validator("kind", mode="before")
    @classmethod
    def _map_kind(cls, value: Any) -> Optional[ItemKind]:
        return parse_kind(value)

    @field_validator("data", mode="before")
    @classmethod
    def _data_as_dict(cls, value: Any) -> Dict[str, Any]:
        return value if isinstance(value, dict) else {}

    @classmethod
    def from_payload(cls, payload: Any) -> "ListingItem":
        if not isinstance(payload, dict):
            raise ValueError(f"Expected a listing item object, got {type(payload).__name__}")
        return cls.model_validate(payload)


class ListingEnvelope(BaseModel):
    """Ordered sequence of listing items."""

    items: List[ListingItem] = Field(default_factory=list)

    def __len__(self) -> int:
        return len(self.items)

    @property
    def is_empty(self) -> bool:
        return not self.items

    @classmethod
    def from_payload(cls, payload: Any) -> "ListingEnvelope":
        """
        Build an envelope from raw upstream JSON.

        Never raises: a malformed payload, or one whose children are absent or
        null, produces an empty envelope.
        """
        data = payload.get("data") if isinstance(payload, dict) else None
        children = data.get("children") if isinstance(data, dict) else None
        if not isinstance(children, list):
            if payload is not None:
                logger.debug("Listing payload has no children; treating as empty")
            return cls()
        items = [ListingItem.model_validate(child) for child in children if isinstance(child, dict)]
        return cls(items=items)


class PostDetailResult(BaseModel):
    """A single post together with its top-level comments."""

    post: PostData
    comments: List[ListingItem] = Field(default_factory=list)

    @classmethod
    def from_payload(cls, payload: Any) -> "PostDetailResult":
        """
        Parse the ``[postEnvelope, commentsEnvelope]`` pair returned for a permalink.

        Raises:
            ValueError: If the payload is not a two-element array or holds no post.
        """
        if not isinstance(payload, list) or len(payload) < 2:
            raise ValueError("Post detail payload must be a two-element array")
        post_envelope = ListingEnvelope.from_payload(payload[0])
        if post_envelope.is_empty:
            raise ValueError("Post detail payload contains no post")
        post = PostData.model_validate(post_envelope.items[0].data)
        comments = ListingEnvelope.from_payload(payload[1]).items
        return cls(post=post, comments=comments)
