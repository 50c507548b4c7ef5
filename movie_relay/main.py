from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from movie_relay.api.health import router as health_router
from movie_relay.api.movies import router as movies_router
from movie_relay.api.proxy import router as proxy_router
from movie_relay.api.ui import router as ui_router
from movie_relay.core.container import AppContainer
from movie_relay.core.errors import register_error_handlers
from movie_relay.core.logging import configure_logging
from movie_relay.core.settings import Settings, get_settings


def create_app(settings: Settings | None = None) -> FastAPI:
    settings = settings or get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        configure_logging(settings.log_level, service=settings.app_name)
        app.state.settings = settings
        app.state.container = AppContainer(settings)
        yield
        await app.state.container.close()

    app = FastAPI(title=settings.app_name, version="0.1.0", lifespan=lifespan)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_allow_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    register_error_handlers(app)

    app.include_router(health_router)
    app.include_router(movies_router)
    app.include_router(proxy_router)
    app.include_router(ui_router)
    return app


app = create_app()


def run() -> None:
    settings = get_settings()
    uvicorn.run("movie_relay.main:app", host=settings.host, port=settings.port, log_level=settings.log_level.lower())
