"""Movie catalog (TMDB) API client.

Read-only queries against the catalog: search, discover-by-popularity,
genre list and single-movie lookup. Responses are normalized into the
``Movie``/``Genre`` schemas; every failure is raised as a ``CatalogError``
subclass so callers have a single type to catch at the I/O boundary.
Documentation: https://developer.themoviedb.org/reference/intro/getting-started
"""

from typing import Any, Dict, List, Optional
from urllib.parse import urlparse

import httpx
import structlog
from pydantic import ValidationError

from app.config import settings
from app.core.exceptions import (
    CatalogError,
    CatalogHTTPError,
    CatalogPayloadError,
    NotFoundError,
    PAYLOAD_FETCH_ERROR,
)
from app.schemas.movie import Genre, Movie, MoviePage
from app.utils import HostRateLimiter, http_retry


logger = structlog.get_logger(__name__)


class CatalogClient:
    """Async client for the movie catalog service.

    Authenticates with a bearer token. An ``httpx.AsyncClient`` may be
    injected (tests use ``httpx.MockTransport``); otherwise the client owns
    one and must be closed with :meth:`aclose`.
    """

    DISCOVER_SORT = "popularity.desc"

    def __init__(
        self,
        api_key: Optional[str] = None,
        base_url: Optional[str] = None,
        http_client: Optional[httpx.AsyncClient] = None,
        rate_limiter: Optional[HostRateLimiter] = None,
        timeout: Optional[float] = None,
    ):
        self.api_key = settings.TMDB_API_KEY if api_key is None else api_key
        self.base_url = (base_url or settings.TMDB_API_BASE_URL).rstrip("/")
        self.api_host = urlparse(self.base_url).netloc
        self.rate_limiter = rate_limiter or HostRateLimiter()
        self.logger = logger.bind(service="catalog_client")

        self._owns_client = http_client is None
        self._client = http_client or httpx.AsyncClient(
            timeout=timeout or settings.HTTP_TIMEOUT_SECONDS
        )

        if not self.api_key:
            self.logger.warning(
                "tmdb_credentials_missing",
                message="TMDB_API_KEY not set; catalog requests will be rejected",
            )

    @property
    def configured(self) -> bool:
        return bool(self.api_key)

    async def aclose(self) -> None:
        """Close the underlying HTTP client if this instance created it."""
        if self._owns_client:
            await self._client.aclose()

    # ------------------------------------------------------------------
    # Public queries
    # ------------------------------------------------------------------

    async def fetch_movies(self, query: str = "", page: int = 1) -> MoviePage:
        """Search when ``query`` has content, otherwise discover popular movies."""
        if query.strip():
            return await self.search_movies(query, page=page)
        return await self.discover_movies(page=page)

    async def search_movies(self, query: str, page: int = 1) -> MoviePage:
        data = await self._get_json("/search/movie", {"query": query, "page": page})
        return self._parse_page(data, page)

    async def discover_movies(self, page: int = 1) -> MoviePage:
        data = await self._get_json(
            "/discover/movie", {"sort_by": self.DISCOVER_SORT, "page": page}
        )
        return self._parse_page(data, page)

    async def get_genres(self) -> List[Genre]:
        """Fetch the full movie genre list."""
        data = await self._get_json("/genre/movie/list")
        try:
            return [Genre.model_validate(g) for g in data.get("genres") or []]
        except ValidationError as e:
            raise CatalogPayloadError(f"invalid genre list: {e}") from e

    async def get_movie(self, movie_id: int) -> Movie:
        """Fetch a full movie record, normalized to the list-result shape.

        Raises:
            NotFoundError: If the catalog has no movie with this id
            CatalogError: On any other failure
        """
        path = f"/movie/{movie_id}"
        try:
            data = await self._get_json(path)
        except CatalogHTTPError as e:
            if e.status_code == 404:
                raise NotFoundError("Movie", str(movie_id)) from e
            raise

        try:
            return Movie.from_detail(data)
        except ValidationError as e:
            raise CatalogPayloadError(f"invalid movie record {movie_id}: {e}") from e

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _parse_page(self, data: Dict[str, Any], page: int) -> MoviePage:
        if data.get("response") == "False":
            error_text = data.get("Error") or PAYLOAD_FETCH_ERROR
            self.logger.warning("catalog_payload_failure", error=error_text, page=page)
            raise CatalogPayloadError(error_text, user_message=error_text)

        try:
            results = [Movie.model_validate(item) for item in data.get("results") or []]
        except ValidationError as e:
            raise CatalogPayloadError(f"invalid movie results: {e}") from e

        total_pages = data.get("total_pages") or 1
        return MoviePage(page=page, results=results, total_pages=max(1, int(total_pages)))

    async def _get_json(self, path: str, params: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        """Call the catalog and translate transport failures into ``CatalogError``."""
        try:
            response = await self._call_api(path, params)
        except httpx.HTTPError as e:
            self.logger.error("catalog_request_failed", path=path, error=str(e))
            raise CatalogError(f"Catalog request to {path} failed: {e}") from e

        if response.status_code >= 400:
            self.logger.error(
                "catalog_http_error",
                path=path,
                status_code=response.status_code,
            )
            raise CatalogHTTPError(response.status_code, path)

        try:
            data = response.json()
        except ValueError as e:
            raise CatalogPayloadError(f"non-JSON response from {path}") from e

        if not isinstance(data, dict):
            raise CatalogPayloadError(f"unexpected payload type from {path}")
        return data

    @http_retry
    async def _call_api(self, path: str, params: Optional[Dict[str, Any]] = None) -> httpx.Response:
        await self.rate_limiter.acquire(self.api_host)

        headers = {
            "accept": "application/json",
            "Authorization": f"Bearer {self.api_key}",
        }

        self.logger.debug("catalog_api_call", path=path, params=params)
        return await self._client.get(f"{self.base_url}{path}", headers=headers, params=params)
