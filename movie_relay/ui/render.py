import html
from dataclasses import dataclass
from typing import Any, Iterable, Mapping
from urllib.parse import urlencode

from movie_relay.models.movie import Genre, MovieResult

DEFAULT_IMAGE_BASE_URL = "https://image.tmdb.org/t/p/w500"
NO_RESULTS_MESSAGE = "No movies found"


def resolve_genre_names(genre_ids: Iterable[int] | None, genres: Iterable[Genre]) -> str:
    names_by_id = {genre.id: genre.name for genre in genres}
    names = [names_by_id[genre_id] for genre_id in genre_ids or [] if genre_id in names_by_id]
    return ", ".join(names) or "N/A"


def _year_of(value: str | None) -> int | None:
    text = (value or "").strip()
    if len(text) >= 4 and text[:4].isdigit():
        return int(text[:4])
    return None


def display_year(result: MovieResult) -> int | None:
    return _year_of(result.release_date or result.first_air_date)


def poster_url(poster_path: str | None, image_base_url: str = DEFAULT_IMAGE_BASE_URL) -> str | None:
    if not poster_path:
        return None
    return f"{image_base_url}{poster_path}"


@dataclass(frozen=True)
class MovieCard:
    key: str
    title: str
    media_type: str
    rating: str
    year: str
    genres: str
    poster: str | None

    @classmethod
    def from_result(
        cls,
        index: int,
        result: MovieResult,
        genres: list[Genre],
        image_base_url: str = DEFAULT_IMAGE_BASE_URL,
    ) -> "MovieCard":
        year = display_year(result)
        return cls(
            key=str(result.id) if result.id is not None else f"row-{index}",
            title=result.title or "N/A",
            media_type=result.media_type or "Movie",
            rating=str(result.vote_average) if result.vote_average is not None else "N/A",
            year=str(year) if year is not None else "",
            genres=resolve_genre_names(result.genre_ids, genres),
            poster=poster_url(result.poster_path, image_base_url),
        )


def _e(value: Any) -> str:
    return html.escape(str(value), quote=True)


def render_card(card: MovieCard) -> str:
    poster = ""
    if card.poster:
        poster = f'<img src="{_e(card.poster)}" alt="{_e(card.title)}" class="response-poster">'
    return (
        f'<div class="card" id="movie-{_e(card.key)}">'
        f"{poster}"
        f"<h3>{_e(card.title)}</h3>"
        f"<p>Type: {_e(card.media_type)}</p>"
        f"<p>Rating: {_e(card.rating)}</p>"
        f"<p>Year: {_e(card.year)}</p>"
        f"<p>Genres: {_e(card.genres)}</p>"
        "</div>"
    )


def render_banner(message: str) -> str:
    return f'<div class="error">{_e(message)}</div>'


def _render_genre_options(genres: list[Genre], selected: str) -> str:
    options = ['<option value="">Select a genre</option>']
    for genre in genres:
        marker = " selected" if str(genre.id) == selected else ""
        options.append(f'<option value="{genre.id}"{marker}>{_e(genre.name)}</option>')
    return "".join(options)


def _page_link(form: Mapping[str, str], page: int, label: str) -> str:
    params = {key: value for key, value in form.items() if value}
    params["page"] = str(page)
    return f'<a class="page-link" href="/?{_e(urlencode(params))}">{_e(label)}</a>'


def render_pagination(form: Mapping[str, str], page: int, total_pages: int) -> str:
    if total_pages <= 1:
        return ""
    links = []
    if page > 1:
        links.append(_page_link(form, page - 1, "Previous"))
    links.append(f'<span class="page-status">Page {page} of {total_pages}</span>')
    if page < total_pages:
        links.append(_page_link(form, page + 1, "Next"))
    return f'<nav class="pagination">{"".join(links)}</nav>'


def render_page(
    *,
    title: str,
    genre_id: str,
    genres: list[Genre],
    loading: bool,
    body: str,
    pagination: str = "",
) -> str:
    button_label = "Loading..." if loading else "Search"
    disabled = " disabled" if loading else ""
    return (
        "<!DOCTYPE html>"
        '<html lang="en"><head><meta charset="utf-8"><title>Movie Search</title></head>'
        '<body><div class="container">'
        "<h1>Movie Search</h1>"
        '<form method="get" action="/">'
        '<div><label for="title">Title:</label>'
        f'<input type="text" id="title" name="title" value="{_e(title)}" placeholder="Enter movie title"></div>'
        '<div><label for="genres">Genres:</label>'
        f'<select id="genres" name="genreId">{_render_genre_options(genres, genre_id)}</select></div>'
        f'<button type="submit"{disabled}>{button_label}</button>'
        "</form>"
        f'<div class="movie-cards">{body}</div>'
        f"{pagination}"
        "</div></body></html>"
    )
