from __future__ import annotations

from collections.abc import AsyncGenerator, Generator

import redis
from fastapi import Depends, Header, Request

from ui_analytics.config import get_settings
from ui_analytics.core.context import AnalyticsContextState, AnalyticsProvider
from ui_analytics.dispatch import InlineDispatcher
from ui_analytics.infra.redis_client import create_redis
from ui_analytics.sinks.redis_stream import RedisStreamSink


def get_redis() -> Generator[redis.Redis, None, None]:
    client = create_redis()
    try:
        yield client
    finally:
        try:
            client.close()
        except Exception:
            # Some redis client versions don't require explicit close.
            pass


def get_event_sink(r: redis.Redis = Depends(get_redis)) -> RedisStreamSink:
    settings = get_settings()
    return RedisStreamSink(r=r, stream_key=settings.stream_key, maxlen=settings.stream_maxlen)


async def analytics_boundary(
    request: Request,
    sink: RedisStreamSink = Depends(get_event_sink),
    x_session_id: str | None = Header(default=None),
) -> AsyncGenerator[AnalyticsContextState, None]:
    """Mount a provider boundary for the lifetime of one request.

    Async so the boundary is set in the request's own task, where async routes
    can reach it through `get_builder()`. Delivery runs inline: the request's redis client is closed once the
    request finishes, so events must reach the stream before that.
    """

    provider = AnalyticsProvider(
        sink,
        default_metadata={"route": request.url.path},
        session_id=x_session_id or None,
        dispatcher=InlineDispatcher(),
    )
    with provider as state:
        yield state
