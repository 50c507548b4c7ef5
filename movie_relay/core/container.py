import logging

import httpx

from movie_relay.core.settings import Settings
from movie_relay.services.proxy_service import ProxyService
from movie_relay.services.tmdb_client import TMDBClient

logger = logging.getLogger(__name__)


class AppContainer:
    def __init__(
        self,
        settings: Settings,
        tmdb_transport: httpx.AsyncBaseTransport | None = None,
        proxy_transport: httpx.AsyncBaseTransport | None = None,
        relay_transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.settings = settings

        self.tmdb_client = TMDBClient(settings, transport=tmdb_transport)
        self.proxy_service = ProxyService(settings, transport=proxy_transport)
        # the search page talks to the relay over HTTP like any other front end
        self.relay_client = httpx.AsyncClient(base_url=settings.relay_base_url, transport=relay_transport)

        logger.info(
            "App container initialized",
            extra={
                "environment": settings.environment,
                "tmdb_base_url": settings.tmdb_base_url,
                "tmdb_api_key_configured": bool(settings.tmdb_api_key),
                "tmdb_timeout_seconds": settings.tmdb_timeout_seconds,
                "proxy_allowed_hosts": settings.proxy_allowed_hosts,
                "relay_base_url": settings.relay_base_url,
            },
        )

    async def close(self) -> None:
        await self.tmdb_client.close()
        await self.proxy_service.close()
        await self.relay_client.aclose()
