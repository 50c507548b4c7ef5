from fastapi import APIRouter, Depends, Query
from pydantic import ValidationError

from movie_relay.api.deps import get_container
from movie_relay.core.container import AppContainer
from movie_relay.core.errors import APIError
from movie_relay.models.movie import Genre, SearchQuery, SearchResponse

router = APIRouter(prefix="/api", tags=["movies"])


@router.get("/movies", response_model=SearchResponse, response_model_exclude_unset=True)
async def search_movies(
    genre_id: str | None = Query(default=None, alias="genreId"),
    title: str | None = Query(default=None),
    page: str = Query(default="1"),
    container: AppContainer = Depends(get_container),
) -> SearchResponse:
    # title search takes no genre upstream, so genreId is not even parsed
    if title:
        genre_id = None

    try:
        query = SearchQuery(title=title, genre_id=genre_id, page=page)
    except ValidationError as exc:
        raise APIError(
            "invalid_query",
            "Failed to fetch movies",
            status_code=500,
            details={"errors": exc.errors(include_url=False)},
        ) from exc

    try:
        return await container.tmdb_client.search_movies(query)
    except APIError as exc:
        raise exc.public("Failed to fetch movies") from exc


@router.get("/genres", response_model=list[Genre])
async def list_genres(container: AppContainer = Depends(get_container)) -> list[Genre]:
    try:
        return await container.tmdb_client.fetch_genres()
    except APIError as exc:
        raise exc.public("Failed to fetch genres") from exc
