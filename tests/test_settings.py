from movie_relay.core.settings import Settings


def test_relay_base_url_follows_port() -> None:
    settings = Settings(environment="test", port=8080)

    assert settings.relay_base_url == "http://localhost:8080"


def test_relay_base_url_default_port() -> None:
    assert Settings(environment="test").relay_base_url == "http://localhost:3001"


def test_explicit_relay_base_url_is_kept() -> None:
    settings = Settings(environment="test", port=8080, relay_base_url="http://relay.internal:9000")

    assert settings.relay_base_url == "http://relay.internal:9000"
