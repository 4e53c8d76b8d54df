"""
Models package for RedInsight.

This package contains the pydantic records Reddit listing payloads are parsed into,
and the DTOs returned by the HTTP API.
"""

from .dtos import ErrorBody, HealthStatus
from .listing import (
    CommentData,
    CommunityData,
    ItemKind,
    ListingEnvelope,
    ListingItem,
    PostData,
    PostDetailResult,
    UserData,
)

__all__ = [
    # DTOs
    "ErrorBody",
    "HealthStatus",
    # Listing records
    "CommentData",
    "CommunityData",
    "ItemKind",
    "ListingEnvelope",
    "ListingItem",
    "PostData",
    "PostDetailResult",
    "UserData",
]
