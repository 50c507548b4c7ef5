import logging
from typing import Any
from urllib.parse import urlsplit

import httpx

from movie_relay.core.errors import APIError
from movie_relay.core.settings import Settings
from movie_relay.models.proxy import ProxyRequest

logger = logging.getLogger(__name__)


class ProxyService:
    """Forwards an arbitrary request and hands back the JSON it answers with.

    Destinations are unrestricted unless ``proxy_allowed_hosts`` is configured.
    """

    def __init__(self, settings: Settings, transport: httpx.AsyncBaseTransport | None = None):
        self.settings = settings
        self._allowed_hosts = {host.strip().lower() for host in settings.proxy_allowed_hosts if host.strip()}
        self._client = httpx.AsyncClient(timeout=settings.proxy_timeout_seconds, transport=transport)

    async def close(self) -> None:
        await self._client.aclose()

    def _check_destination(self, url: str) -> None:
        try:
            parts = urlsplit(url)
            hostname = parts.hostname
        except ValueError as exc:
            raise APIError(
                "proxy_request_failed",
                "Proxy URL is invalid",
                status_code=500,
                details={"url": url, "error": str(exc)},
            ) from exc
        if parts.scheme not in {"http", "https"} or not hostname:
            raise APIError("proxy_invalid_url", "Proxy URL is invalid", status_code=500, details={"url": url})
        if self._allowed_hosts and hostname.lower() not in self._allowed_hosts:
            raise APIError(
                "proxy_destination_blocked",
                "Proxy destination is not allowed",
                status_code=500,
                details={"host": hostname},
            )

    @staticmethod
    def _body_kwargs(payload: ProxyRequest) -> dict[str, Any]:
        if payload.method == "GET" or payload.body is None:
            return {}
        if isinstance(payload.body, (str, bytes)):
            return {"content": payload.body}
        return {"json": payload.body}

    async def forward(self, payload: ProxyRequest) -> Any:
        self._check_destination(payload.url)

        # InvalidURL is not an HTTPError; non-ASCII header values raise UnicodeEncodeError
        try:
            response = await self._client.request(
                payload.method,
                payload.url,
                headers=payload.headers,
                **self._body_kwargs(payload),
            )
        except (httpx.HTTPError, httpx.InvalidURL, ValueError) as exc:
            raise APIError(
                "proxy_request_failed",
                "Proxy request failed",
                status_code=500,
                details={"url": payload.url, "error_type": exc.__class__.__name__, "error": str(exc)},
            ) from exc

        if response.status_code >= 400:
            raise APIError(
                "proxy_request_failed",
                "Proxy request failed",
                status_code=500,
                details={"url": payload.url, "status_code": response.status_code, "response": response.text[:200]},
            )

        try:
            data = response.json()
        except ValueError as exc:
            raise APIError(
                "proxy_non_json_response",
                "Proxy response is not JSON",
                status_code=500,
                details={"url": payload.url, "content_type": response.headers.get("content-type")},
            ) from exc

        logger.info(
            "Proxy request forwarded",
            extra={"method": payload.method, "url": payload.url, "status_code": response.status_code},
        )
        return data
