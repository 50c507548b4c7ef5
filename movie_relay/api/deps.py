from fastapi import Request

from movie_relay.core.container import AppContainer


def get_container(request: Request) -> AppContainer:
    return request.app.state.container
