"""Appwrite TablesDB analytics store.

Talks to the Appwrite REST API directly with httpx. Rows live in a single
table with ``searchTerm``, ``count``, ``movie_id`` and ``poster_url`` columns.
Documentation: https://appwrite.io/docs/references/cloud/server-rest/tablesdb
"""

import json
from typing import Any, Dict, List, Optional
from urllib.parse import urlparse

import httpx

from app.analytics.base import AnalyticsStore, SearchMetricRow
from app.config import settings
from app.core.exceptions import AnalyticsError
from app.utils import HostRateLimiter, http_retry


class AppwriteAnalyticsStore(AnalyticsStore):
    """Search analytics stored in an Appwrite table."""

    backend = "appwrite"

    # Appwrite generates the row id when given this placeholder
    UNIQUE_ID = "unique()"

    def __init__(
        self,
        endpoint: Optional[str] = None,
        project_id: Optional[str] = None,
        database_id: Optional[str] = None,
        table_id: Optional[str] = None,
        api_key: Optional[str] = None,
        http_client: Optional[httpx.AsyncClient] = None,
        rate_limiter: Optional[HostRateLimiter] = None,
    ):
        super().__init__()
        self.endpoint = (endpoint or settings.APPWRITE_ENDPOINT).rstrip("/")
        self.project_id = settings.APPWRITE_PROJECT_ID if project_id is None else project_id
        self.database_id = settings.APPWRITE_DATABASE_ID if database_id is None else database_id
        self.table_id = settings.APPWRITE_TABLE_ID if table_id is None else table_id
        self.api_key = settings.APPWRITE_API_KEY if api_key is None else api_key
        self.api_host = urlparse(self.endpoint).netloc
        self.rate_limiter = rate_limiter or HostRateLimiter()

        self._owns_client = http_client is None
        self._client = http_client or httpx.AsyncClient(timeout=settings.HTTP_TIMEOUT_SECONDS)

        if not self.configured:
            self.logger.warning(
                "appwrite_credentials_missing",
                message="APPWRITE_PROJECT_ID, APPWRITE_DATABASE_ID or APPWRITE_TABLE_ID not set",
            )

    @property
    def configured(self) -> bool:
        return bool(self.project_id and self.database_id and self.table_id)

    @property
    def rows_url(self) -> str:
        return f"{self.endpoint}/tablesdb/{self.database_id}/tables/{self.table_id}/rows"

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    async def list_top(self, limit: int) -> List[SearchMetricRow]:
        data = await self._request(
            "GET",
            self.rows_url,
            params=[
                ("queries[]", self._query("limit", values=[limit])),
                ("queries[]", self._query("orderDesc", attribute="count")),
            ],
        )
        return [self._to_row(row) for row in data.get("rows", [])]

    async def find_by_term(self, search_term: str) -> Optional[SearchMetricRow]:
        data = await self._request(
            "GET",
            self.rows_url,
            params=[
                ("queries[]", self._query("equal", attribute="searchTerm", values=[search_term])),
            ],
        )
        rows = data.get("rows", [])
        return self._to_row(rows[0]) if rows else None

    async def create(
        self, search_term: str, movie_id: int, poster_url: Optional[str]
    ) -> SearchMetricRow:
        data = await self._request(
            "POST",
            self.rows_url,
            json={
                "rowId": self.UNIQUE_ID,
                "data": {
                    "searchTerm": search_term,
                    "count": 1,
                    "movie_id": movie_id,
                    "poster_url": poster_url,
                },
            },
        )
        return self._to_row(data)

    async def increment(self, row: SearchMetricRow) -> SearchMetricRow:
        data = await self._request(
            "PATCH",
            f"{self.rows_url}/{row.row_id}",
            json={"data": {"count": row.count + 1}},
        )
        return self._to_row(data)

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    @staticmethod
    def _query(method: str, attribute: Optional[str] = None, values: Optional[list] = None) -> str:
        query: Dict[str, Any] = {"method": method}
        if attribute is not None:
            query["attribute"] = attribute
        if values is not None:
            query["values"] = values
        return json.dumps(query)

    def _to_row(self, payload: Dict[str, Any]) -> SearchMetricRow:
        try:
            return SearchMetricRow(
                row_id=str(payload["$id"]),
                search_term=payload["searchTerm"],
                count=int(payload["count"]),
                movie_id=int(payload["movie_id"]),
                poster_url=payload.get("poster_url"),
            )
        except (KeyError, TypeError, ValueError) as e:
            raise AnalyticsError(self.backend, f"malformed row: {e}") from e

    async def _request(self, method: str, url: str, **kwargs) -> Dict[str, Any]:
        if not self.configured:
            raise AnalyticsError(self.backend, "store is not configured")

        try:
            response = await self._send(method, url, **kwargs)
        except httpx.HTTPError as e:
            self.logger.error("appwrite_request_failed", method=method, error=str(e))
            raise AnalyticsError(self.backend, str(e)) from e

        if response.status_code >= 400:
            self.logger.error(
                "appwrite_http_error",
                method=method,
                status_code=response.status_code,
            )
            raise AnalyticsError(self.backend, f"HTTP {response.status_code}")

        try:
            return response.json()
        except ValueError as e:
            raise AnalyticsError(self.backend, "non-JSON response") from e

    @http_retry
    async def _send(self, method: str, url: str, **kwargs) -> httpx.Response:
        await self.rate_limiter.acquire(self.api_host)

        headers = {
            "Content-Type": "application/json",
            "X-Appwrite-Project": self.project_id,
        }
        if self.api_key:
            headers["X-Appwrite-Key"] = self.api_key

        return await self._client.request(method, url, headers=headers, **kwargs)
