from fastapi import APIRouter, Depends, Query, Request
from fastapi.responses import HTMLResponse

from movie_relay.api.deps import get_container
from movie_relay.core.container import AppContainer
from movie_relay.ui.session import SearchSession

router = APIRouter(tags=["ui"])

_FORM_FIELDS = ("title", "genreId", "page")


def _page_number(raw: str) -> int:
    try:
        return max(int(raw), 1)
    except ValueError:
        return 1


@router.get("/", response_class=HTMLResponse)
async def search_page(
    request: Request,
    title: str = Query(default=""),
    genre_id: str = Query(default="", alias="genreId"),
    page: str = Query(default="1"),
    container: AppContainer = Depends(get_container),
) -> HTMLResponse:
    session = SearchSession(container.relay_client, image_base_url=container.settings.tmdb_image_base_url)
    await session.load_genres()

    session.set_filters(title=title, genre_id=genre_id)
    session.page = _page_number(page)
    if any(field in request.query_params for field in _FORM_FIELDS):
        await session.submit()

    return HTMLResponse(session.render())
