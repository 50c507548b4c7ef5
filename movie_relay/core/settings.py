from functools import lru_cache
from typing import Literal

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    app_name: str = "Movie Relay"
    environment: Literal["dev", "test", "prod"] = "dev"
    log_level: str = "INFO"

    host: str = "0.0.0.0"
    port: int = Field(default=3001, ge=1, le=65535)
    cors_allow_origins: list[str] = Field(default_factory=lambda: ["*"])

    tmdb_api_key: str | None = None
    tmdb_base_url: str = "https://api.themoviedb.org/3"
    # matches the httpx default, upstream calls get no special treatment
    tmdb_timeout_seconds: float = 5.0
    tmdb_image_base_url: str = "https://image.tmdb.org/t/p/w500"
    tmdb_language: str = "en-US"

    proxy_timeout_seconds: float = 5.0
    # empty means any destination is allowed
    proxy_allowed_hosts: list[str] = Field(default_factory=list)

    # defaults to this server on the configured port
    relay_base_url: str | None = None

    @model_validator(mode="after")
    def default_relay_base_url(self) -> "Settings":
        if not self.relay_base_url:
            self.relay_base_url = f"http://localhost:{self.port}"
        return self


@lru_cache
def get_settings() -> Settings:
    return Settings()
