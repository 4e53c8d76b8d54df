"""
Viewer selection state and its transitions.

The state is an immutable value. Every transition is a pure function that
returns a new state, so callers hold and pass the current value explicitly.
"""

from dataclasses import dataclass, replace
from enum import Enum


class Section(str, Enum):
    """Top-level views; exactly one is active at a time."""

    POSTS = "posts"
    SUBREDDITS = "subreddits"
    SEARCH = "search"
    USERS = "users"


POSTS_FILTERS = ("hot", "new", "top", "rising")
TIME_WINDOWS = ("hour", "day", "week", "month", "year", "all")
SUBREDDITS_FILTERS = ("popular", "new", "default")


@dataclass(frozen=True)
class SelectionState:
    """Current selections the pipeline reads when building the next request."""

    section: Section = Section.POSTS
    posts_filter: str = "hot"
    posts_time: str = "day"
    subreddits_filter: str = "popular"


def _check(value: str, allowed: tuple, name: str) -> str:
    if value not in allowed:
        raise ValueError(f"Invalid {name}: {value!r} (expected one of {', '.join(allowed)})")
    return value


def switch_section(state: SelectionState, section) -> SelectionState:
    """
    Activate a section.

    Raises:
        ValueError: If ``section`` is not a known section name.
    """
    return replace(state, section=Section(section))


def set_posts_filter(state: SelectionState, value: str) -> SelectionState:
    return replace(state, posts_filter=_check(value, POSTS_FILTERS, "posts filter"))


def set_posts_time(state: SelectionState, value: str) -> SelectionState:
    return replace(state, posts_time=_check(value, TIME_WINDOWS, "time window"))


def set_subreddits_filter(state: SelectionState, value: str) -> SelectionState:
    return replace(state, subreddits_filter=_check(value, SUBREDDITS_FILTERS, "subreddits filter"))


def enter_community(state: SelectionState) -> SelectionState:
    """Clicking a community card jumps to the posts section."""
    return replace(state, section=Section.POSTS)
