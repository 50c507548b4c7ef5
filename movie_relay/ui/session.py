import logging
from enum import Enum

import httpx
from pydantic import TypeAdapter, ValidationError

from movie_relay.models.movie import Genre, MovieResult, SearchQuery, SearchResponse
from movie_relay.ui import render

logger = logging.getLogger(__name__)

SEARCH_ERROR_MESSAGE = "Failed to fetch data"

_GENRE_LIST = TypeAdapter(list[Genre])


class SearchState(str, Enum):
    IDLE = "idle"
    LOADING = "loading"
    SUCCESS = "success"
    ERROR = "error"


class SearchSession:
    """State of one search page: form fields, cached genres, pagination and results.

    Every submission takes a sequence number and only the response for the
    latest one is applied, so a slow earlier search cannot overwrite a newer one.
    """

    def __init__(self, client: httpx.AsyncClient, image_base_url: str = render.DEFAULT_IMAGE_BASE_URL):
        self._client = client
        self.image_base_url = image_base_url

        self.title = ""
        self.genre_id = ""
        self.page = 1
        self.total_pages = 1

        self.genres: list[Genre] = []
        self._genres_loaded = False

        self.state = SearchState.IDLE
        self.results: list[MovieResult] | None = None
        self.error: str | None = None
        self._sequence = 0

    @property
    def loading(self) -> bool:
        return self.state is SearchState.LOADING

    async def load_genres(self) -> None:
        if self._genres_loaded:
            return
        self._genres_loaded = True

        try:
            response = await self._client.get("/api/genres")
            response.raise_for_status()
            self.genres = _GENRE_LIST.validate_python(response.json())
        except (httpx.HTTPError, ValueError, ValidationError) as exc:
            logger.error("Failed to fetch genres", extra={"error_type": exc.__class__.__name__, "error": str(exc)})
            self.genres = []

    def set_filters(self, title: str = "", genre_id: str = "") -> None:
        if (title, genre_id) != (self.title, self.genre_id):
            self.page = 1
        self.title = title
        self.genre_id = genre_id

    def build_query(self) -> SearchQuery:
        return SearchQuery(title=self.title, genre_id=self.genre_id, page=self.page)

    async def submit(self) -> bool:
        """Run one search. Returns False when a newer submission superseded this one."""
        self._sequence += 1
        sequence = self._sequence
        self.state = SearchState.LOADING

        try:
            params = self.build_query().to_params()
            response = await self._client.get("/api/movies", params=params)
            response.raise_for_status()
            payload = SearchResponse.model_validate(response.json())
        except (httpx.HTTPError, ValueError, ValidationError) as exc:
            if sequence != self._sequence:
                logger.debug("Dropped stale search failure", extra={"sequence": sequence, "latest": self._sequence})
                return False
            logger.error("Search request failed", extra={"error_type": exc.__class__.__name__, "error": str(exc)})
            self.state = SearchState.ERROR
            self.results = None
            self.error = SEARCH_ERROR_MESSAGE
            return True

        if sequence != self._sequence:
            logger.debug("Dropped stale search response", extra={"sequence": sequence, "latest": self._sequence})
            return False

        self.state = SearchState.SUCCESS
        self.results = payload.results
        self.total_pages = max(payload.total_pages, 1)
        self.error = None
        return True

    async def go_to_page(self, page: int) -> bool:
        self.page = min(max(page, 1), max(self.total_pages, 1))
        return await self.submit()

    async def next_page(self) -> bool:
        return await self.go_to_page(self.page + 1)

    async def previous_page(self) -> bool:
        return await self.go_to_page(self.page - 1)

    def cards(self) -> list[render.MovieCard]:
        return [
            render.MovieCard.from_result(index, result, self.genres, self.image_base_url)
            for index, result in enumerate(self.results or [])
        ]

    def render_results(self) -> str:
        if self.state is SearchState.ERROR:
            return render.render_banner(self.error or SEARCH_ERROR_MESSAGE)
        if self.state is not SearchState.SUCCESS:
            return ""
        cards = self.cards()
        if not cards:
            return render.render_banner(render.NO_RESULTS_MESSAGE)
        return "".join(render.render_card(card) for card in cards)

    def render(self) -> str:
        pagination = ""
        if self.state is SearchState.SUCCESS:
            pagination = render.render_pagination(
                {"title": self.title, "genreId": self.genre_id}, self.page, self.total_pages
            )
        return render.render_page(
            title=self.title,
            genre_id=self.genre_id,
            genres=self.genres,
            loading=self.loading,
            body=self.render_results(),
            pagination=pagination,
        )
