from typing import Any

from pydantic import BaseModel, Field, field_validator


class ProxyRequest(BaseModel):
    url: str = Field(min_length=1)
    method: str = "GET"
    headers: dict[str, str] | None = None
    body: Any = None

    @field_validator("method")
    @classmethod
    def normalize_method(cls, value: str) -> str:
        return value.strip().upper() or "GET"
