from typing import Any

from fastapi import APIRouter, Depends

from movie_relay.api.deps import get_container
from movie_relay.core.container import AppContainer
from movie_relay.core.errors import APIError
from movie_relay.models.proxy import ProxyRequest

router = APIRouter(prefix="/api", tags=["proxy"])


@router.post("/proxy")
async def proxy_request(payload: ProxyRequest, container: AppContainer = Depends(get_container)) -> Any:
    try:
        return await container.proxy_service.forward(payload)
    except APIError as exc:
        raise exc.public("Failed to fetch data") from exc
