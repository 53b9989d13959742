"""Search controller: drives the search view state from user input.

Coordinates the debounced query, catalog fetches for search and page
navigation, the trending list, genre loading and the detail overlay. All
state changes go through the pure reducer in ``app.state.search_state``;
the controller only performs I/O and dispatches actions.
"""

import asyncio
import itertools
from typing import Callable, Coroutine, List, Optional, Set

import structlog

from app.clients.catalog import CatalogClient
from app.config import settings
from app.core.exceptions import GENERIC_FETCH_ERROR, CatalogError, NotFoundError
from app.schemas.movie import Movie
from app.schemas.search import TrendingEntry
from app.services.analytics_service import AnalyticsService
from app.services.genre_service import GenreService, resolve_genre_names
from app.services.trending_service import TrendingService
from app.state.debounce import Debouncer
from app.state.pagination import PageWindow
from app.state.search_state import (
    Action,
    DebounceSettled,
    FetchFailed,
    FetchSucceeded,
    GenresLoaded,
    InputChanged,
    MovieDismissed,
    MovieSelected,
    PageChangeRequested,
    SearchState,
    TrendingLoaded,
    can_change_page,
    reduce,
)

logger = structlog.get_logger(__name__)

StateListener = Callable[[SearchState], None]


class SearchController:
    """Owns one user's search session.

    Collaborators other than the catalog are optional: without analytics no
    searches are recorded, without trending the list stays empty, and
    without a genre service genre names resolve to nothing.
    """

    def __init__(
        self,
        catalog: CatalogClient,
        analytics: Optional[AnalyticsService] = None,
        trending: Optional[TrendingService] = None,
        genres: Optional[GenreService] = None,
        debounce_seconds: Optional[float] = None,
        min_transition_seconds: Optional[float] = None,
    ):
        self.catalog = catalog
        self.analytics = analytics
        self.trending = trending
        self.genres = genres
        self.min_transition_seconds = (
            settings.PAGE_TRANSITION_MIN_DELAY_MS / 1000
            if min_transition_seconds is None
            else min_transition_seconds
        )
        debounce_seconds = (
            settings.SEARCH_DEBOUNCE_MS / 1000 if debounce_seconds is None else debounce_seconds
        )

        self._state = SearchState()
        self._listeners: List[StateListener] = []
        self._request_ids = itertools.count(1)
        self._debouncer: Debouncer[str] = Debouncer(debounce_seconds, self.settle)
        self._background: Set[asyncio.Task] = set()
        self.logger = logger.bind(service="search_controller")

    # ------------------------------------------------------------------
    # State access
    # ------------------------------------------------------------------

    @property
    def state(self) -> SearchState:
        return self._state

    @property
    def page_window(self) -> PageWindow:
        return self._state.page_window

    def subscribe(self, listener: StateListener) -> Callable[[], None]:
        """Call ``listener`` with every new state. Returns an unsubscribe function."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def dispatch(self, action: Action) -> SearchState:
        new_state = reduce(self._state, action)
        if new_state is not self._state:
            self._state = new_state
            for listener in list(self._listeners):
                try:
                    listener(new_state)
                except Exception as e:
                    self.logger.error(
                        "state_listener_failed",
                        action=type(action).__name__,
                        error=str(e),
                    )
        return self._state

    def genre_names(self, movie: Movie) -> List[str]:
        return resolve_genre_names(movie.genre_ids, self._state.genre_catalog)

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    async def mount(self) -> None:
        """Initial load: genres, trending and the first (discover) page."""
        await asyncio.gather(
            self.load_genres(),
            self.load_trending(),
            self.settle(self._state.debounced_query),
        )

    async def aclose(self) -> None:
        """Drop the pending keystroke timer and wait for in-flight work."""
        self._debouncer.cancel()
        await self._debouncer.join()
        await self.drain()

    async def drain(self) -> None:
        """Wait until queued analytics writes have finished."""
        while self._background:
            await asyncio.gather(*list(self._background), return_exceptions=True)

    async def wait_settled(self) -> None:
        """Wait for the debounce timer to fire and its fetch to complete."""
        await self._debouncer.join()

    # ------------------------------------------------------------------
    # Search & pagination
    # ------------------------------------------------------------------

    def set_search_term(self, text: str) -> None:
        """Record a keystroke; the fetch follows once typing pauses."""
        self.dispatch(InputChanged(text))
        self._debouncer.trigger(text)

    async def settle(self, query: str) -> None:
        """Fetch page 1 for ``query``. Called when the debounce timer fires."""
        request_id = next(self._request_ids)
        self.dispatch(DebounceSettled(query=query, request_id=request_id))
        await self._run_fetch(request_id, query, page=1, is_page_change=False)

    async def change_page(self, page: int) -> bool:
        """Navigate to ``page``.

        Returns:
            False if the request was dropped (current page, out of range,
            or another fetch in progress)
        """
        if not can_change_page(self._state, page):
            self.logger.debug(
                "page_change_ignored",
                page=page,
                current_page=self._state.current_page,
                busy=self._state.is_busy,
            )
            return False

        request_id = next(self._request_ids)
        self.dispatch(PageChangeRequested(page=page, request_id=request_id))
        await self._run_fetch(request_id, self._state.debounced_query, page=page, is_page_change=True)
        return True

    async def next_page(self) -> bool:
        return await self.change_page(self._state.current_page + 1)

    async def previous_page(self) -> bool:
        return await self.change_page(self._state.current_page - 1)

    async def _run_fetch(self, request_id: int, query: str, page: int, is_page_change: bool) -> None:
        loop = asyncio.get_running_loop()
        started = loop.time()

        try:
            result = await self.catalog.fetch_movies(query, page=page)
        except CatalogError as e:
            self.logger.error(
                "movie_fetch_failed",
                query=query,
                page=page,
                request_id=request_id,
                error=str(e),
            )
            self.dispatch(FetchFailed(request_id=request_id, message=e.user_message))
            return
        except Exception as e:
            self.logger.error(
                "movie_fetch_crashed",
                query=query,
                page=page,
                request_id=request_id,
                error=str(e),
                exc_info=True,
            )
            self.dispatch(FetchFailed(request_id=request_id, message=GENERIC_FETCH_ERROR))
            return

        if is_page_change:
            # Page flips last at least min_transition_seconds so the grid never flashes
            remaining = self.min_transition_seconds - (loop.time() - started)
            if remaining > 0:
                await asyncio.sleep(remaining)

        if request_id != self._state.latest_request_id:
            self.logger.info(
                "stale_response_discarded",
                request_id=request_id,
                latest_request_id=self._state.latest_request_id,
            )
            return

        self.dispatch(
            FetchSucceeded(
                request_id=request_id,
                page=page,
                movies=tuple(result.results),
                total_pages=result.total_pages,
            )
        )

        term = query.strip()
        if term and result.results and self.analytics is not None:
            self._spawn(self.analytics.record_search(term, result.results[0]))

    def _spawn(self, coro: Coroutine) -> None:
        task = asyncio.create_task(coro)
        self._background.add(task)
        task.add_done_callback(self._on_background_done)

    def _on_background_done(self, task: asyncio.Task) -> None:
        self._background.discard(task)
        if not task.cancelled() and task.exception() is not None:
            self.logger.error("background_task_failed", error=str(task.exception()))

    # ------------------------------------------------------------------
    # Trending & genres
    # ------------------------------------------------------------------

    async def load_trending(self) -> None:
        if self.trending is None:
            return
        entries = await self.trending.get_trending()
        self.dispatch(TrendingLoaded(entries=tuple(entries)))

    async def load_genres(self) -> None:
        if self.genres is None:
            return
        await self.genres.load()
        self.dispatch(GenresLoaded(genres=tuple(self.genres.genres)))

    # ------------------------------------------------------------------
    # Detail overlay
    # ------------------------------------------------------------------

    def open_movie(self, movie: Movie) -> None:
        self.dispatch(MovieSelected(movie=movie))

    async def open_trending(self, entry: TrendingEntry) -> Optional[Movie]:
        """Fetch the full record behind a trending entry and open it.

        Trending rows only carry an id and poster, so the detail view needs
        a lookup. On failure nothing opens and nothing is shown to the user.
        """
        try:
            movie = await self.catalog.get_movie(entry.movie_id)
        except (CatalogError, NotFoundError) as e:
            self.logger.error(
                "trending_detail_failed",
                movie_id=entry.movie_id,
                error=str(e),
            )
            return None

        self.open_movie(movie)
        return movie

    def close_movie(self) -> None:
        self.dispatch(MovieDismissed())
