import asyncio

import httpx
import pytest

from movie_relay.ui.session import SEARCH_ERROR_MESSAGE, SearchSession, SearchState

GENRES = [{"id": 28, "name": "Action"}, {"id": 12, "name": "Adventure"}]


class _RelayStub:
    def __init__(self, movies: dict | None = None, movies_status: int = 200, genres_status: int = 200):
        self.movies = movies if movies is not None else {"results": [], "total_pages": 1}
        self.movies_status = movies_status
        self.genres_status = genres_status
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if request.url.path == "/api/genres":
            return httpx.Response(self.genres_status, json=GENRES)
        return httpx.Response(self.movies_status, json=self.movies)

    def movie_requests(self) -> list[httpx.Request]:
        return [r for r in self.requests if r.url.path == "/api/movies"]


def _session(handler) -> SearchSession:
    client = httpx.AsyncClient(transport=httpx.MockTransport(handler), base_url="http://relay.test")
    return SearchSession(client)


@pytest.mark.asyncio
async def test_genres_loaded_once() -> None:
    relay = _RelayStub()
    session = _session(relay)

    await session.load_genres()
    await session.load_genres()

    assert [g.name for g in session.genres] == ["Action", "Adventure"]
    assert len(relay.requests) == 1


@pytest.mark.asyncio
async def test_genre_failure_leaves_list_empty_and_search_works() -> None:
    relay = _RelayStub(
        movies={"results": [{"id": 5, "title": "Ronin", "genre_ids": [28]}], "total_pages": 1},
        genres_status=500,
    )
    session = _session(relay)

    await session.load_genres()
    assert session.genres == []

    assert await session.submit() is True
    assert session.state is SearchState.SUCCESS
    assert session.cards()[0].genres == "N/A"


@pytest.mark.asyncio
async def test_submit_builds_params_from_form() -> None:
    relay = _RelayStub()
    session = _session(relay)

    session.set_filters(title="", genre_id="28")
    await session.submit()
    session.set_filters(title="heat", genre_id="28")
    await session.submit()

    first, second = relay.movie_requests()
    assert dict(first.url.params) == {"genreId": "28", "page": "1"}
    assert dict(second.url.params) == {"genreId": "28", "title": "heat", "page": "1"}


@pytest.mark.asyncio
async def test_success_stores_results_and_pages() -> None:
    relay = _RelayStub(
        movies={
            "results": [{"id": 1, "title": "Heat", "genre_ids": [28, 12], "release_date": "1995-12-15"}],
            "total_pages": 9,
        }
    )
    session = _session(relay)
    await session.load_genres()

    await session.submit()

    assert session.state is SearchState.SUCCESS
    assert session.total_pages == 9
    card = session.cards()[0]
    assert card.genres == "Action, Adventure"
    assert card.year == "1995"
    assert "Page 1 of 9" in session.render()


@pytest.mark.asyncio
async def test_empty_results_and_error_take_different_paths() -> None:
    empty = _session(_RelayStub())
    await empty.submit()

    failing = _session(_RelayStub(movies={"error": "Failed to fetch movies"}, movies_status=500))
    await failing.submit()

    assert empty.state is SearchState.SUCCESS
    assert empty.results == []
    assert empty.render_results() == '<div class="error">No movies found</div>'

    assert failing.state is SearchState.ERROR
    assert failing.error == SEARCH_ERROR_MESSAGE
    assert failing.render_results() == f'<div class="error">{SEARCH_ERROR_MESSAGE}</div>'


@pytest.mark.asyncio
async def test_network_failure_is_error_state() -> None:
    def _unreachable(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("relay down", request=request)

    session = _session(_unreachable)
    await session.load_genres()
    await session.submit()

    assert session.genres == []
    assert session.state is SearchState.ERROR
    assert session.results is None


@pytest.mark.asyncio
async def test_stale_response_never_overwrites_newer_one() -> None:
    slow_started = asyncio.Event()
    release_slow = asyncio.Event()

    async def _handler(request: httpx.Request) -> httpx.Response:
        if request.url.params.get("title") == "slow":
            slow_started.set()
            await release_slow.wait()
            return httpx.Response(200, json={"results": [{"id": 1, "title": "Old"}], "total_pages": 1})
        return httpx.Response(200, json={"results": [{"id": 2, "title": "New"}], "total_pages": 3})

    session = _session(_handler)

    session.set_filters(title="slow")
    first = asyncio.create_task(session.submit())
    await slow_started.wait()

    session.set_filters(title="fast")
    assert await session.submit() is True

    release_slow.set()
    assert await first is False

    assert session.state is SearchState.SUCCESS
    assert [r.title for r in session.results] == ["New"]
    assert session.total_pages == 3


@pytest.mark.asyncio
async def test_pagination_clamps_and_filter_change_resets_page() -> None:
    relay = _RelayStub(movies={"results": [{"id": 1, "title": "Heat"}], "total_pages": 2})
    session = _session(relay)
    session.set_filters(genre_id="28")

    await session.submit()
    await session.next_page()
    await session.next_page()
    assert session.page == 2

    await session.previous_page()
    await session.previous_page()
    assert session.page == 1

    await session.go_to_page(2)
    session.set_filters(title="heat", genre_id="28")
    assert session.page == 1

    pages = [r.url.params["page"] for r in relay.movie_requests()]
    assert pages == ["1", "2", "2", "1", "1", "2"]


@pytest.mark.asyncio
async def test_render_page_shows_loading_button_and_genres() -> None:
    session = _session(_RelayStub())
    await session.load_genres()
    session.set_filters(genre_id="12")

    page = session.render()
    assert '<option value="12" selected>Adventure</option>' in page
    assert ">Search</button>" in page

    session.state = SearchState.LOADING
    assert "disabled>Loading...</button>" in session.render()
