import logging
from typing import Any

import httpx
from pydantic import TypeAdapter, ValidationError

from movie_relay.core.errors import APIError
from movie_relay.core.settings import Settings
from movie_relay.models.movie import Genre, SearchQuery, SearchResponse

logger = logging.getLogger(__name__)

_GENRE_LIST = TypeAdapter(list[Genre])


def build_movie_request(query: SearchQuery, language: str = "en-US") -> tuple[str, dict[str, Any]]:
    """Pick the upstream endpoint for a search and the params it takes.

    Title search has no genre parameter upstream, so a title always wins and
    the genre filter is dropped.
    """
    params: dict[str, Any] = {
        "include_adult": "false",
        "language": language,
        "page": query.page,
    }
    if query.title:
        params["query"] = query.title
        return "/search/movie", params

    if query.genre_id is not None:
        params["with_genres"] = query.genre_id
    return "/discover/movie", params


class TMDBClient:
    def __init__(self, settings: Settings, transport: httpx.AsyncBaseTransport | None = None):
        self.settings = settings
        self._client = httpx.AsyncClient(
            base_url=settings.tmdb_base_url,
            timeout=settings.tmdb_timeout_seconds,
            transport=transport,
        )

    async def close(self) -> None:
        await self._client.aclose()

    async def _request(self, method: str, path: str, params: dict[str, Any] | None = None) -> Any:
        if not self.settings.tmdb_api_key:
            raise APIError("config_error", "TMDB_API_KEY is not set", status_code=500)

        merged_params = {"api_key": self.settings.tmdb_api_key}
        if params:
            merged_params.update(params)

        try:
            response = await self._client.request(method, path, params=merged_params)
        except httpx.HTTPError as exc:
            raise APIError(
                "tmdb_upstream_unavailable",
                "TMDB upstream is unavailable",
                status_code=502,
                details={"path": path, "error_type": exc.__class__.__name__, "error": str(exc)},
            ) from exc

        if response.status_code >= 400:
            raise APIError(
                "tmdb_request_failed",
                "TMDB request failed",
                status_code=502,
                details={"path": path, "status_code": response.status_code, "response": response.text[:200]},
            )

        try:
            return response.json()
        except ValueError as exc:
            raise APIError(
                "tmdb_malformed_payload",
                "TMDB returned a non-JSON body",
                status_code=502,
                details={"path": path, "response": response.text[:200]},
            ) from exc

    async def search_movies(self, query: SearchQuery) -> SearchResponse:
        path, params = build_movie_request(query, language=self.settings.tmdb_language)
        payload = await self._request("GET", path, params=params)

        try:
            response = SearchResponse.model_validate(payload)
        except ValidationError as exc:
            raise APIError(
                "tmdb_malformed_payload",
                "TMDB search payload is malformed",
                status_code=502,
                details={"path": path, "errors": exc.errors(include_url=False)[:5]},
            ) from exc

        logger.info(
            "TMDB search completed",
            extra={"path": path, "page": query.page, "results": len(response.results), "total_pages": response.total_pages},
        )
        return response

    async def fetch_genres(self) -> list[Genre]:
        payload = await self._request("GET", "/genre/movie/list")

        genres = payload.get("genres") if isinstance(payload, dict) else None
        try:
            return _GENRE_LIST.validate_python(genres)
        except ValidationError as exc:
            raise APIError(
                "tmdb_malformed_payload",
                "TMDB genre payload is malformed",
                status_code=502,
                details={"path": "/genre/movie/list", "errors": exc.errors(include_url=False)[:5]},
            ) from exc
