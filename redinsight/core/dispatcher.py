"""
Maps discrete viewer actions onto pipeline calls.

The dispatcher is independent of any rendering surface: it takes the current
:class:`SelectionState` and an action, and returns the next state together with
the panel fragments to display.
"""

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, Dict, List, Optional, Union

from redinsight.config.settings import settings
from redinsight.core import state as transitions
from redinsight.core.pipeline import ContentPipeline, PanelUpdate, search_placeholder, users_placeholder
from redinsight.core.state import Section, SelectionState

logger = logging.getLogger(__name__)


# --- Actions ---

@dataclass(frozen=True)
class Navigate:
    section: Union[Section, str]


@dataclass(frozen=True)
class ChangePostsFilter:
    value: str


@dataclass(frozen=True)
class ChangePostsTime:
    value: str


@dataclass(frozen=True)
class ChangeSubredditsFilter:
    value: str


@dataclass(frozen=True)
class QuickSearchPosts:
    query: str


@dataclass(frozen=True)
class QuickSearchSubreddits:
    query: str


@dataclass(frozen=True)
class Search:
    query: str
    result_type: str = "posts"


@dataclass(frozen=True)
class LookupUser:
    username: str


@dataclass(frozen=True)
class OpenPost:
    permalink: str


@dataclass(frozen=True)
class OpenCommunity:
    name: str


Action = Union[
    Navigate,
    ChangePostsFilter,
    ChangePostsTime,
    ChangeSubredditsFilter,
    QuickSearchPosts,
    QuickSearchSubreddits,
    Search,
    LookupUser,
    OpenPost,
    OpenCommunity,
]


@dataclass(frozen=True)
class DispatchResult:
    state: SelectionState
    updates: List[PanelUpdate] = field(default_factory=list)


class Dispatcher:
    """Declarative action table over a :class:`ContentPipeline`."""

    HANDLERS: Dict[type, str] = {
        Navigate: "_navigate",
        ChangePostsFilter: "_change_posts_filter",
        ChangePostsTime: "_change_posts_time",
        ChangeSubredditsFilter: "_change_subreddits_filter",
        QuickSearchPosts: "_quick_search_posts",
        QuickSearchSubreddits: "_quick_search_subreddits",
        Search: "_search",
        LookupUser: "_lookup_user",
        OpenPost: "_open_post",
        OpenCommunity: "_open_community",
    }

    def __init__(self, pipeline: ContentPipeline):
        self.pipeline = pipeline

    async def dispatch(self, state: SelectionState, action: Action) -> DispatchResult:
        """
        Apply ``action`` to ``state``.

        Raises:
            TypeError: If the action type has no handler.
            ValueError: If the action carries an invalid section or filter value.
        """
        handler_name = self.HANDLERS.get(type(action))
        if handler_name is None:
            raise TypeError(f"Unsupported action: {action!r}")
        logger.debug(f"Dispatching {action!r} from section {state.section.value}")
        return await getattr(self, handler_name)(state, action)

    async def enter_section(self, state: SelectionState) -> List[PanelUpdate]:
        """Entry effect of the active section: fetch for listings, prompt for input views."""
        if state.section == Section.POSTS:
            return [await self.pipeline.load_posts(state)]
        if state.section == Section.SUBREDDITS:
            return [await self.pipeline.load_subreddits(state)]
        if state.section == Section.SEARCH:
            return [search_placeholder()]
        return [users_placeholder()]

    async def _navigate(self, state: SelectionState, action: Navigate) -> DispatchResult:
        new_state = transitions.switch_section(state, action.section)
        return DispatchResult(new_state, await self.enter_section(new_state))

    async def _change_posts_filter(self, state: SelectionState, action: ChangePostsFilter) -> DispatchResult:
        new_state = transitions.set_posts_filter(state, action.value)
        return DispatchResult(new_state, [await self.pipeline.load_posts(new_state)])

    async def _change_posts_time(self, state: SelectionState, action: ChangePostsTime) -> DispatchResult:
        new_state = transitions.set_posts_time(state, action.value)
        return DispatchResult(new_state, [await self.pipeline.load_posts(new_state)])

    async def _change_subreddits_filter(self, state: SelectionState, action: ChangeSubredditsFilter) -> DispatchResult:
        new_state = transitions.set_subreddits_filter(state, action.value)
        return DispatchResult(new_state, [await self.pipeline.load_subreddits(new_state)])

    async def _quick_search_posts(self, state: SelectionState, action: QuickSearchPosts) -> DispatchResult:
        return DispatchResult(state, [await self.pipeline.quick_search_posts(action.query, state)])

    async def _quick_search_subreddits(self, state: SelectionState, action: QuickSearchSubreddits) -> DispatchResult:
        return DispatchResult(state, [await self.pipeline.quick_search_subreddits(action.query, state)])

    async def _search(self, state: SelectionState, action: Search) -> DispatchResult:
        return DispatchResult(state, [await self.pipeline.search(action.query, action.result_type)])

    async def _lookup_user(self, state: SelectionState, action: LookupUser) -> DispatchResult:
        return DispatchResult(state, [await self.pipeline.load_user_profile(action.username)])

    async def _open_post(self, state: SelectionState, action: OpenPost) -> DispatchResult:
        return DispatchResult(state, [await self.pipeline.show_post_details(action.permalink)])

    async def _open_community(self, state: SelectionState, action: OpenCommunity) -> DispatchResult:
        # Only the community listing is fetched; the default posts listing is skipped
        new_state = transitions.enter_community(state)
        return DispatchResult(new_state, [await self.pipeline.load_subreddit_posts(action.name)])


class Debouncer:
    """
    Trailing-edge debouncer for coroutine functions.

    Each call restarts the quiet period; only the last call made within it runs.
    Ordering of the calls that do run is not guaranteed.
    """

    def __init__(self, wait: Optional[float] = None):
        self.wait = settings.DEBOUNCE_SECONDS if wait is None else wait
        self._pending: Optional[asyncio.Task] = None

    def __call__(self, func: Callable[..., Awaitable[Any]], *args: Any) -> asyncio.Task:
        if self._pending is not None and not self._pending.done():
            self._pending.cancel()
        self._pending = asyncio.create_task(self._run_later(func, *args))
        return self._pending

    async def _run_later(self, func: Callable[..., Awaitable[Any]], *args: Any) -> Any:
        await asyncio.sleep(self.wait)
        return await func(*args)


class ViewerSession:
    """
    One viewer's state plus the dispatcher driving it.

    Actions are applied in the order they complete. In-flight requests are not
    cancelled, so a slow response can overwrite a newer one.
    """

    def __init__(self, dispatcher: Dispatcher, state: Optional[SelectionState] = None, debounce_seconds: Optional[float] = None):
        self.dispatcher = dispatcher
        self.state = state or SelectionState()
        self._debouncer = Debouncer(debounce_seconds)

    async def start(self) -> List[PanelUpdate]:
        """Initial render of the active section."""
        return await self.dispatcher.enter_section(self.state)

    async def apply(self, action: Action) -> List[PanelUpdate]:
        result = await self.dispatcher.dispatch(self.state, action)
        self.state = result.state
        return result.updates

    def type_ahead(self, action: Union[QuickSearchPosts, QuickSearchSubreddits]) -> asyncio.Task:
        """Debounced variant of :meth:`apply` for search-as-you-type input."""
        if not isinstance(action, (QuickSearchPosts, QuickSearchSubreddits)):
            raise TypeError(f"Only quick-search actions are debounced, got {action!r}")
        return self._debouncer(self.apply, action)
