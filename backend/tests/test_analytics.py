"""Tests for the search analytics stores and service.

Tests cover:
- Database store against in-memory SQLite
- Appwrite store request shapes against a mocked transport
- Increment-or-create and best-effort writes in AnalyticsService
- Store factory
"""

import json
from unittest.mock import AsyncMock

import httpx
import pytest

from app.analytics import AnalyticsStore, SearchMetricRow, create_analytics_store
from app.analytics.adapters import AppwriteAnalyticsStore, DatabaseAnalyticsStore
from app.core.exceptions import AnalyticsError
from app.services.analytics_service import AnalyticsService

from conftest import make_movie

APPWRITE_ENDPOINT = "https://appwrite.test/v1"
ROWS_PATH = "/v1/tablesdb/db-1/tables/metrics/rows"


def appwrite_row(row_id, term, count, movie_id=603, poster_url=None):
    return {
        "$id": row_id,
        "searchTerm": term,
        "count": count,
        "movie_id": movie_id,
        "poster_url": poster_url,
    }


def appwrite_store(handler, **overrides) -> AppwriteAnalyticsStore:
    kwargs = dict(
        endpoint=APPWRITE_ENDPOINT,
        project_id="proj-1",
        database_id="db-1",
        table_id="metrics",
        api_key="secret",
        http_client=httpx.AsyncClient(transport=httpx.MockTransport(handler)),
    )
    kwargs.update(overrides)
    return AppwriteAnalyticsStore(**kwargs)


# ============================================================================
# ROW VALIDATION
# ============================================================================


class TestSearchMetricRow:

    def test_requires_term(self):
        with pytest.raises(ValueError):
            SearchMetricRow(row_id="1", search_term="", count=1, movie_id=1)

    def test_requires_positive_count(self):
        with pytest.raises(ValueError):
            SearchMetricRow(row_id="1", search_term="x", count=0, movie_id=1)


# ============================================================================
# DATABASE STORE
# ============================================================================


class TestDatabaseAnalyticsStore:

    async def test_create_and_find(self, session_factory):
        store = DatabaseAnalyticsStore(session_factory)

        created = await store.create("matrix", 603, "https://img/603.jpg")
        found = await store.find_by_term("matrix")

        assert created.count == 1
        assert found == created
        assert await store.find_by_term("Matrix") is None

    async def test_increment(self, session_factory):
        store = DatabaseAnalyticsStore(session_factory)
        created = await store.create("dune", 438631, None)

        updated = await store.increment(created)
        updated = await store.increment(updated)

        assert updated.count == 3
        assert updated.row_id == created.row_id
        assert (await store.find_by_term("dune")).count == 3

    async def test_list_top_orders_by_count(self, session_factory):
        store = DatabaseAnalyticsStore(session_factory)
        low = await store.create("low", 1, None)
        high = await store.create("high", 2, None)
        mid = await store.create("mid", 3, None)

        for _ in range(4):
            high = await store.increment(high)
        mid = await store.increment(mid)

        top = await store.list_top(2)

        assert [r.search_term for r in top] == ["high", "mid"]
        assert [r.count for r in top] == [5, 2]
        assert low.count == 1

    async def test_invalid_row_id_is_analytics_error(self, session_factory):
        store = DatabaseAnalyticsStore(session_factory)
        bogus = SearchMetricRow(row_id="not-a-uuid", search_term="x", count=1, movie_id=1)

        with pytest.raises(AnalyticsError):
            await store.increment(bogus)

    async def test_health_check(self, session_factory):
        store = DatabaseAnalyticsStore(session_factory)

        assert await store.health_check() is True


# ============================================================================
# APPWRITE STORE
# ============================================================================


class TestAppwriteAnalyticsStore:

    async def test_list_top_sends_limit_and_order_queries(self):
        seen = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(
                200,
                json={"total": 2, "rows": [appwrite_row("a", "matrix", 9), appwrite_row("b", "dune", 4, 438631)]},
            )

        store = appwrite_store(handler)
        rows = await store.list_top(10)

        request = seen[0]
        assert request.method == "GET"
        assert request.url.path == ROWS_PATH
        queries = [json.loads(q) for q in request.url.params.get_list("queries[]")]
        assert {"method": "limit", "values": [10]} in queries
        assert {"method": "orderDesc", "attribute": "count"} in queries
        assert request.headers["X-Appwrite-Project"] == "proj-1"
        assert request.headers["X-Appwrite-Key"] == "secret"
        assert [(r.search_term, r.count) for r in rows] == [("matrix", 9), ("dune", 4)]

        await store.aclose()

    async def test_find_by_term_uses_equal_query(self):
        seen = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, json={"total": 0, "rows": []})

        store = appwrite_store(handler)

        assert await store.find_by_term("The Matrix") is None
        query = json.loads(seen[0].url.params["queries[]"])
        assert query == {"method": "equal", "attribute": "searchTerm", "values": ["The Matrix"]}

        await store.aclose()

    async def test_create_posts_unique_row_with_count_one(self):
        seen = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            body = json.loads(request.content)
            return httpx.Response(201, json={"$id": "new-1", **body["data"]})

        store = appwrite_store(handler)
        row = await store.create("matrix", 603, "https://img/603.jpg")

        body = json.loads(seen[0].content)
        assert seen[0].method == "POST"
        assert body == {
            "rowId": "unique()",
            "data": {
                "searchTerm": "matrix",
                "count": 1,
                "movie_id": 603,
                "poster_url": "https://img/603.jpg",
            },
        }
        assert row.row_id == "new-1"
        assert row.count == 1

        await store.aclose()

    async def test_increment_patches_count(self):
        seen = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, json=appwrite_row("r1", "matrix", 5))

        store = appwrite_store(handler)
        row = await store.increment(SearchMetricRow(row_id="r1", search_term="matrix", count=4, movie_id=603))

        assert seen[0].method == "PATCH"
        assert seen[0].url.path == f"{ROWS_PATH}/r1"
        assert json.loads(seen[0].content) == {"data": {"count": 5}}
        assert row.count == 5

        await store.aclose()

    async def test_http_error_is_analytics_error(self):
        store = appwrite_store(lambda request: httpx.Response(401, json={"message": "unauthorized"}))

        with pytest.raises(AnalyticsError):
            await store.list_top(5)
        assert await store.health_check() is False

        await store.aclose()

    async def test_unconfigured_store_makes_no_requests(self):
        calls = []

        def handler(request: httpx.Request) -> httpx.Response:
            calls.append(request)
            return httpx.Response(200, json={"rows": []})

        store = appwrite_store(handler, project_id="")

        assert not store.configured
        with pytest.raises(AnalyticsError):
            await store.list_top(5)
        assert calls == []

        await store.aclose()

    async def test_malformed_row_is_analytics_error(self):
        store = appwrite_store(lambda request: httpx.Response(200, json={"rows": [{"$id": "x"}]}))

        with pytest.raises(AnalyticsError):
            await store.list_top(5)

        await store.aclose()


# ============================================================================
# ANALYTICS SERVICE
# ============================================================================


class TestAnalyticsService:

    async def test_first_search_creates_row(self, session_factory):
        service = AnalyticsService(DatabaseAnalyticsStore(session_factory))
        movie = make_movie(603, "The Matrix")

        row = await service.record_search("  matrix ", movie)

        assert row.search_term == "matrix"
        assert row.count == 1
        assert row.movie_id == 603
        assert row.poster_url == movie.poster_url

    async def test_repeat_search_increments_and_keeps_first_movie(self, session_factory):
        service = AnalyticsService(DatabaseAnalyticsStore(session_factory))

        await service.record_search("matrix", make_movie(603))
        await service.record_search("matrix", make_movie(604))
        row = await service.record_search("matrix", make_movie(605))

        assert row.count == 3
        assert row.movie_id == 603

        top = await service.get_top_searches(limit=10)
        assert len(top) == 1

    async def test_missing_poster_stored_as_none(self, session_factory):
        service = AnalyticsService(DatabaseAnalyticsStore(session_factory))

        row = await service.record_search("obscure", make_movie(9, poster_path=None))

        assert row.poster_url is None

    async def test_blank_term_is_not_recorded(self):
        store = AsyncMock(spec=AnalyticsStore)
        store.backend = "mock"
        service = AnalyticsService(store)

        assert await service.record_search("   ", make_movie(1)) is None
        store.find_by_term.assert_not_awaited()

    async def test_store_failure_is_swallowed(self):
        store = AsyncMock(spec=AnalyticsStore)
        store.backend = "mock"
        store.find_by_term.side_effect = AnalyticsError("mock", "down")
        service = AnalyticsService(store)

        assert await service.record_search("matrix", make_movie(603)) is None
        store.create.assert_not_awaited()

    async def test_read_failure_propagates(self):
        store = AsyncMock(spec=AnalyticsStore)
        store.backend = "mock"
        store.list_top.side_effect = AnalyticsError("mock", "down")
        service = AnalyticsService(store)

        with pytest.raises(AnalyticsError):
            await service.get_top_searches()


# ============================================================================
# FACTORY
# ============================================================================


class TestStoreFactory:

    async def test_appwrite_backend(self):
        store = create_analytics_store("Appwrite")

        assert isinstance(store, AppwriteAnalyticsStore)
        await store.aclose()

    def test_database_backend(self):
        assert isinstance(create_analytics_store("database"), DatabaseAnalyticsStore)

    def test_unknown_backend(self):
        with pytest.raises(ValueError):
            create_analytics_store("mongo")
