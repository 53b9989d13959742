"""Tests for the movie catalog client against a mocked HTTP transport."""

import httpx
import pytest

from app.core.exceptions import (
    GENERIC_FETCH_ERROR,
    PAYLOAD_FETCH_ERROR,
    CatalogError,
    CatalogHTTPError,
    CatalogPayloadError,
    NotFoundError,
)

from conftest import movie_payload


def page_response(movie_ids, total_pages=3):
    return httpx.Response(
        200,
        json={"page": 1, "results": [movie_payload(i) for i in movie_ids], "total_pages": total_pages},
    )


class TestMovieQueries:

    async def test_search_sends_encoded_query_and_bearer_token(self, catalog_factory):
        seen = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return page_response([603, 604], total_pages=7)

        catalog = catalog_factory(handler)
        page = await catalog.fetch_movies("The Matrix & co", page=2)

        request = seen[0]
        assert request.url.path == "/3/search/movie"
        assert request.url.params["query"] == "The Matrix & co"
        assert request.url.params["page"] == "2"
        assert "query=The+Matrix+%26+co" in str(request.url)
        assert request.headers["Authorization"] == "Bearer test-token"
        assert [m.id for m in page.results] == [603, 604]
        assert page.total_pages == 7
        assert page.page == 2

        await catalog.aclose()

    async def test_blank_query_uses_discover(self, catalog_factory):
        seen = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return page_response([1])

        catalog = catalog_factory(handler)
        await catalog.fetch_movies("   ")

        assert seen[0].url.path == "/3/discover/movie"
        assert seen[0].url.params["sort_by"] == "popularity.desc"
        assert seen[0].url.params["page"] == "1"

        await catalog.aclose()

    async def test_missing_total_pages_defaults_to_one(self, catalog_factory):
        catalog = catalog_factory(lambda request: httpx.Response(200, json={"results": []}))

        page = await catalog.discover_movies()

        assert page.results == []
        assert page.total_pages == 1

        await catalog.aclose()

    async def test_nullable_fields_are_normalized(self, catalog_factory):
        payload = movie_payload(7, poster_path=None)
        payload.update(release_date=None, overview=None, genre_ids=None)
        catalog = catalog_factory(
            lambda request: httpx.Response(200, json={"results": [payload], "total_pages": 1})
        )

        page = await catalog.search_movies("x")
        movie = page.results[0]

        assert movie.release_date == ""
        assert movie.genre_ids == ()
        assert movie.poster_url == "no-movie.png"
        assert movie.release_year == "N/A"

        await catalog.aclose()


class TestFailures:

    async def test_non_success_status_raises_http_error(self, catalog_factory):
        catalog = catalog_factory(lambda request: httpx.Response(500))

        with pytest.raises(CatalogHTTPError) as exc_info:
            await catalog.search_movies("Matrix")

        assert exc_info.value.status_code == 500
        assert exc_info.value.user_message == GENERIC_FETCH_ERROR

        await catalog.aclose()

    async def test_failure_flag_carries_payload_error_text(self, catalog_factory):
        catalog = catalog_factory(
            lambda request: httpx.Response(200, json={"response": "False", "Error": "Too many results."})
        )

        with pytest.raises(CatalogPayloadError) as exc_info:
            await catalog.search_movies("a")

        assert exc_info.value.user_message == "Too many results."

        await catalog.aclose()

    async def test_failure_flag_without_text_uses_default(self, catalog_factory):
        catalog = catalog_factory(lambda request: httpx.Response(200, json={"response": "False"}))

        with pytest.raises(CatalogPayloadError) as exc_info:
            await catalog.search_movies("a")

        assert exc_info.value.user_message == PAYLOAD_FETCH_ERROR

        await catalog.aclose()

    async def test_non_json_body_is_payload_error(self, catalog_factory):
        catalog = catalog_factory(lambda request: httpx.Response(200, text="<html>oops</html>"))

        with pytest.raises(CatalogPayloadError):
            await catalog.discover_movies()

        await catalog.aclose()

    async def test_invalid_movie_is_payload_error(self, catalog_factory):
        catalog = catalog_factory(
            lambda request: httpx.Response(200, json={"results": [{"title": "no id"}], "total_pages": 1})
        )

        with pytest.raises(CatalogPayloadError):
            await catalog.discover_movies()

        await catalog.aclose()

    @pytest.mark.parametrize(
        "error",
        [
            httpx.RemoteProtocolError("Server disconnected without sending a response."),
            httpx.ProxyError("proxy refused"),
            httpx.UnsupportedProtocol("unknown scheme"),
            httpx.ConnectError("connection refused"),
            httpx.ReadTimeout("timed out"),
        ],
        ids=lambda e: type(e).__name__,
    )
    async def test_transport_errors_become_catalog_errors(self, catalog_factory, error):
        def handler(request: httpx.Request) -> httpx.Response:
            raise error

        catalog = catalog_factory(handler)

        with pytest.raises(CatalogError) as exc_info:
            await catalog.get_genres()

        assert exc_info.value.user_message == GENERIC_FETCH_ERROR
        assert isinstance(exc_info.value.__cause__, httpx.HTTPError)

        await catalog.aclose()


class TestGenresAndDetail:

    async def test_genre_list(self, catalog_factory):
        def handler(request: httpx.Request) -> httpx.Response:
            assert request.url.path == "/3/genre/movie/list"
            return httpx.Response(200, json={"genres": [{"id": 28, "name": "Action"}, {"id": 18, "name": "Drama"}]})

        catalog = catalog_factory(handler)
        genres = await catalog.get_genres()

        assert [(g.id, g.name) for g in genres] == [(28, "Action"), (18, "Drama")]

        await catalog.aclose()

    async def test_detail_genres_flattened_to_ids(self, catalog_factory):
        payload = movie_payload(603, title="The Matrix")
        del payload["genre_ids"]
        payload["genres"] = [{"id": 878, "name": "Science Fiction"}, {"id": 28, "name": "Action"}]
        payload["runtime"] = 136

        catalog = catalog_factory(lambda request: httpx.Response(200, json=payload))
        movie = await catalog.get_movie(603)

        assert movie.id == 603
        assert movie.title == "The Matrix"
        assert movie.genre_ids == (878, 28)

        await catalog.aclose()

    async def test_detail_keeps_genre_ids_without_genres(self, catalog_factory):
        catalog = catalog_factory(lambda request: httpx.Response(200, json=movie_payload(5)))

        movie = await catalog.get_movie(5)

        assert movie.genre_ids == (28, 878)

        await catalog.aclose()

    async def test_detail_404_is_not_found(self, catalog_factory):
        catalog = catalog_factory(lambda request: httpx.Response(404, json={"status_code": 34}))

        with pytest.raises(NotFoundError):
            await catalog.get_movie(999999)

        await catalog.aclose()
