from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator


class Genre(BaseModel):
    id: int
    name: str


class MovieResult(BaseModel):
    """Upstream result record. Only the fields the UI reads are typed, the rest pass through."""

    model_config = ConfigDict(extra="allow")

    id: int | None = None
    title: str | None = None
    poster_path: str | None = None
    vote_average: float | None = None
    release_date: str | None = None
    first_air_date: str | None = None
    genre_ids: list[int] | None = None
    media_type: str | None = None


class SearchResponse(BaseModel):
    results: list[MovieResult]
    total_pages: int


class SearchQuery(BaseModel):
    title: str | None = None
    genre_id: int | None = None
    page: int = Field(default=1, ge=1)

    @field_validator("title", mode="before")
    @classmethod
    def blank_title_is_absent(cls, value: Any) -> Any:
        if value == "":
            return None
        return value

    @field_validator("genre_id", mode="before")
    @classmethod
    def blank_genre_is_absent(cls, value: Any) -> Any:
        if value == "":
            return None
        return value

    def to_params(self) -> dict[str, str]:
        params: dict[str, str] = {}
        if self.genre_id is not None:
            params["genreId"] = str(self.genre_id)
        if self.title:
            params["title"] = self.title
        params["page"] = str(self.page)
        return params
