"""
HTML fragment endpoints driving the single-page UI.

Each route rebuilds the caller's :class:`SelectionState` from query parameters,
dispatches one action and returns the rendered fragment. The target panel is
named in the ``X-Panel`` response header; actions that move the viewer to another
section also name it in ``X-Section``. No state is kept between requests.
"""

import logging
from typing import Any, Callable, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Request
from fastapi.responses import HTMLResponse

from redinsight.core.dispatcher import (
    Action,
    ChangePostsFilter,
    ChangeSubredditsFilter,
    Dispatcher,
    LookupUser,
    Navigate,
    OpenCommunity,
    OpenPost,
    QuickSearchPosts,
    QuickSearchSubreddits,
    Search,
)
from redinsight.core.endpoints import post_detail_endpoint, search_type_param
from redinsight.core.state import (
    Section,
    SelectionState,
    set_posts_filter,
    set_posts_time,
    set_subreddits_filter,
    switch_section,
)

router = APIRouter()
logger = logging.getLogger(__name__)

# Only these actions change the active section
SECTION_ACTIONS = (Navigate, OpenCommunity)


def get_dispatcher(request: Request) -> Dispatcher:
    """Dispatcher created by the application lifespan."""
    return request.app.state.dispatcher


def _validated(check: Callable[[str], Any], value: str) -> str:
    """Run ``check`` on a caller-supplied value; a ValueError becomes 400."""
    try:
        check(value)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return value


def selection_from_query(
    active_section: str = Query("posts", alias="section"),
    posts_filter: str = Query("hot", alias="filter"),
    posts_time: str = Query("day", alias="time"),
    subreddits_filter: str = Query("popular", alias="subreddits_filter"),
) -> SelectionState:
    """Rebuild the viewer's selections; invalid values are rejected with 400."""
    try:
        state = switch_section(SelectionState(), active_section)
        state = set_posts_filter(state, posts_filter)
        state = set_posts_time(state, posts_time)
        return set_subreddits_filter(state, subreddits_filter)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


async def _respond(dispatcher: Dispatcher, state: SelectionState, action: Action) -> HTMLResponse:
    result = await dispatcher.dispatch(state, action)

    headers = {"X-Panel": result.updates[0].panel.value}
    if isinstance(action, SECTION_ACTIONS):
        headers["X-Section"] = result.state.section.value
    return HTMLResponse(content="".join(u.html for u in result.updates), headers=headers)


@router.get("/section/{section}", response_class=HTMLResponse)
async def navigate(
    section: str,
    state: SelectionState = Depends(selection_from_query),
    dispatcher: Dispatcher = Depends(get_dispatcher),
) -> HTMLResponse:
    return await _respond(dispatcher, state, Navigate(_validated(Section, section)))


@router.get("/posts", response_class=HTMLResponse)
async def posts(
    q: Optional[str] = None,
    state: SelectionState = Depends(selection_from_query),
    dispatcher: Dispatcher = Depends(get_dispatcher),
) -> HTMLResponse:
    """Posts listing for the given filter/time, or a quick search when ``q`` is set."""
    if q and q.strip():
        return await _respond(dispatcher, state, QuickSearchPosts(q))
    return await _respond(dispatcher, state, ChangePostsFilter(state.posts_filter))


@router.get("/subreddits", response_class=HTMLResponse)
async def subreddits(
    q: Optional[str] = None,
    state: SelectionState = Depends(selection_from_query),
    dispatcher: Dispatcher = Depends(get_dispatcher),
) -> HTMLResponse:
    if q and q.strip():
        return await _respond(dispatcher, state, QuickSearchSubreddits(q))
    return await _respond(dispatcher, state, ChangeSubredditsFilter(state.subreddits_filter))


@router.get("/search", response_class=HTMLResponse)
async def search(
    q: str = "",
    result_type: str = Query("posts", alias="type"),
    state: SelectionState = Depends(selection_from_query),
    dispatcher: Dispatcher = Depends(get_dispatcher),
) -> HTMLResponse:
    return await _respond(dispatcher, state, Search(q, _validated(search_type_param, result_type)))


@router.get("/users", response_class=HTMLResponse)
async def users(
    username: str = "",
    state: SelectionState = Depends(selection_from_query),
    dispatcher: Dispatcher = Depends(get_dispatcher),
) -> HTMLResponse:
    return await _respond(dispatcher, state, LookupUser(username))


@router.get("/post", response_class=HTMLResponse)
async def post_detail(
    permalink: str,
    state: SelectionState = Depends(selection_from_query),
    dispatcher: Dispatcher = Depends(get_dispatcher),
) -> HTMLResponse:
    return await _respond(dispatcher, state, OpenPost(_validated(post_detail_endpoint, permalink)))


@router.get("/community/{name}", response_class=HTMLResponse)
async def community(
    name: str,
    state: SelectionState = Depends(selection_from_query),
    dispatcher: Dispatcher = Depends(get_dispatcher),
) -> HTMLResponse:
    return await _respond(dispatcher, state, OpenCommunity(name))
