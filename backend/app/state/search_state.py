"""Search view state and its pure transition functions.

``SearchState`` is an immutable value. Every change goes through
:func:`reduce`, which returns a new state (or the very same object when the
action is a no-op, so callers can detect dropped actions with ``is``).

Fetch sequencing: each settlement or page change carries a request id that
is strictly greater than any before it. Completions whose id is not the
latest are ignored, so a slow early response can never overwrite a newer
one.
"""

from dataclasses import dataclass, replace
from typing import Dict, Optional, Tuple, Union

from app.schemas.movie import Genre, Movie
from app.schemas.search import TrendingEntry
from app.state.pagination import PageWindow, is_valid_page_request


@dataclass(frozen=True)
class SearchState:
    raw_input: str = ""
    debounced_query: str = ""
    movies: Tuple[Movie, ...] = ()
    current_page: int = 1
    total_pages: int = 1
    is_loading: bool = False
    is_transitioning_page: bool = False
    error_message: str = ""
    # False until a fetch succeeds and again after any failure; gates the pager
    has_data: bool = False
    latest_request_id: int = 0
    pending_page: Optional[int] = None
    trending: Tuple[TrendingEntry, ...] = ()
    genres: Tuple[Genre, ...] = ()
    selected_movie: Optional[Movie] = None

    @property
    def is_busy(self) -> bool:
        return self.is_loading or self.is_transitioning_page

    @property
    def is_modal_open(self) -> bool:
        return self.selected_movie is not None

    @property
    def show_pager(self) -> bool:
        return self.has_data and not self.error_message and self.total_pages > 1

    @property
    def page_window(self) -> PageWindow:
        return PageWindow.build(self.current_page, self.total_pages)

    @property
    def genre_catalog(self) -> Dict[int, str]:
        return {genre.id: genre.name for genre in self.genres}


# ============================================================================
# ACTIONS
# ============================================================================

@dataclass(frozen=True)
class InputChanged:
    text: str


@dataclass(frozen=True)
class DebounceSettled:
    query: str
    request_id: int


@dataclass(frozen=True)
class PageChangeRequested:
    page: int
    request_id: int


@dataclass(frozen=True)
class FetchSucceeded:
    request_id: int
    page: int
    movies: Tuple[Movie, ...]
    total_pages: int


@dataclass(frozen=True)
class FetchFailed:
    request_id: int
    message: str


@dataclass(frozen=True)
class TrendingLoaded:
    entries: Tuple[TrendingEntry, ...]


@dataclass(frozen=True)
class GenresLoaded:
    genres: Tuple[Genre, ...]


@dataclass(frozen=True)
class MovieSelected:
    movie: Movie


@dataclass(frozen=True)
class MovieDismissed:
    pass


Action = Union[
    InputChanged,
    DebounceSettled,
    PageChangeRequested,
    FetchSucceeded,
    FetchFailed,
    TrendingLoaded,
    GenresLoaded,
    MovieSelected,
    MovieDismissed,
]


# ============================================================================
# TRANSITIONS
# ============================================================================

def can_change_page(state: SearchState, page: int) -> bool:
    """Page changes are dropped while any fetch runs, and for the current or an out-of-range page."""
    if state.is_busy:
        return False
    return is_valid_page_request(state.current_page, state.total_pages, page)


def on_input_changed(state: SearchState, action: InputChanged) -> SearchState:
    return replace(state, raw_input=action.text)


def on_debounce_settled(state: SearchState, action: DebounceSettled) -> SearchState:
    # A new query always restarts at page 1 and supersedes any page transition
    return replace(
        state,
        debounced_query=action.query,
        current_page=1,
        is_loading=True,
        is_transitioning_page=False,
        error_message="",
        latest_request_id=action.request_id,
        pending_page=1,
    )


def on_page_change_requested(state: SearchState, action: PageChangeRequested) -> SearchState:
    if not can_change_page(state, action.page):
        return state
    return replace(
        state,
        is_transitioning_page=True,
        error_message="",
        latest_request_id=action.request_id,
        pending_page=action.page,
    )


def on_fetch_succeeded(state: SearchState, action: FetchSucceeded) -> SearchState:
    if action.request_id != state.latest_request_id:
        return state
    # The result set can shrink between fetches, leaving the requested page past the end
    total_pages = max(1, action.total_pages)
    return replace(
        state,
        movies=tuple(action.movies),
        total_pages=total_pages,
        current_page=min(max(action.page, 1), total_pages),
        is_loading=False,
        is_transitioning_page=False,
        error_message="",
        has_data=True,
        pending_page=None,
    )


def on_fetch_failed(state: SearchState, action: FetchFailed) -> SearchState:
    if action.request_id != state.latest_request_id:
        return state
    # total_pages is left as it was; has_data hides the pager instead
    return replace(
        state,
        movies=(),
        is_loading=False,
        is_transitioning_page=False,
        error_message=action.message,
        has_data=False,
        pending_page=None,
    )


def on_trending_loaded(state: SearchState, action: TrendingLoaded) -> SearchState:
    return replace(state, trending=tuple(action.entries))


def on_genres_loaded(state: SearchState, action: GenresLoaded) -> SearchState:
    return replace(state, genres=tuple(action.genres))


def on_movie_selected(state: SearchState, action: MovieSelected) -> SearchState:
    return replace(state, selected_movie=action.movie)


def on_movie_dismissed(state: SearchState, action: MovieDismissed) -> SearchState:
    if state.selected_movie is None:
        return state
    return replace(state, selected_movie=None)


_HANDLERS = {
    InputChanged: on_input_changed,
    DebounceSettled: on_debounce_settled,
    PageChangeRequested: on_page_change_requested,
    FetchSucceeded: on_fetch_succeeded,
    FetchFailed: on_fetch_failed,
    TrendingLoaded: on_trending_loaded,
    GenresLoaded: on_genres_loaded,
    MovieSelected: on_movie_selected,
    MovieDismissed: on_movie_dismissed,
}


def reduce(state: SearchState, action: Action) -> SearchState:
    """Apply ``action`` to ``state``.

    Raises:
        TypeError: If ``action`` is not a known action type
    """
    handler = _HANDLERS.get(type(action))
    if handler is None:
        raise TypeError(f"Unknown action: {action!r}")
    return handler(state, action)
