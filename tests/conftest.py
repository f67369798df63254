from __future__ import annotations

from collections.abc import Generator

import pytest

from ui_analytics.core.errors_channel import CollectingErrorChannel
from ui_analytics.dispatch import InlineDispatcher
from ui_analytics.sinks.memory import InMemorySink


@pytest.fixture(autouse=True)
def _isolate_settings(monkeypatch: pytest.MonkeyPatch) -> Generator[None, None, None]:
    """Settings are cached per process; reset around each test so env overrides apply."""

    from ui_analytics.config import get_settings

    monkeypatch.setenv("ANALYTICS_STREAM_KEY", "test:analytics:events")
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture()
def sink() -> InMemorySink:
    return InMemorySink()


@pytest.fixture()
def errors() -> CollectingErrorChannel:
    return CollectingErrorChannel()


@pytest.fixture()
def dispatcher(errors: CollectingErrorChannel) -> InlineDispatcher:
    return InlineDispatcher(errors=errors)


@pytest.fixture()
def client_and_redis():
    """FastAPI TestClient wired to fakeredis instead of a live Redis."""

    import fakeredis
    from fastapi.testclient import TestClient

    from ui_analytics.api.deps import get_redis
    from ui_analytics.main import app

    r = fakeredis.FakeRedis(decode_responses=True)

    def _override() -> Generator[fakeredis.FakeRedis, None, None]:
        yield r

    app.dependency_overrides[get_redis] = _override
    with TestClient(app) as c:
        yield c, r
    app.dependency_overrides.clear()
