from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, Query, status

from ui_analytics.accessor import get_builder, use_analytics
from ui_analytics.api.deps import analytics_boundary, get_event_sink
from ui_analytics.api.models import (
    EventListResponse,
    IdentifyRequest,
    IdentifyResponse,
    InteractionAccepted,
    InteractionRequest,
    StoredEventModel,
)
from ui_analytics.config import get_settings
from ui_analytics.core.context import AnalyticsContextState, AnalyticsProvider
from ui_analytics.errors import ConfigurationError, ValidationError
from ui_analytics.sinks.redis_stream import RedisStreamSink

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/healthcheck")
async def healthcheck() -> dict[str, str]:
    return {"status": "ok"}


@router.post("/interactions", response_model=InteractionAccepted, status_code=status.HTTP_202_ACCEPTED)
async def log_interaction_route(
    payload: InteractionRequest,
    boundary: AnalyticsContextState = Depends(analytics_boundary),
) -> InteractionAccepted:
    screen_defaults = {"screen": payload.screen} if payload.screen else None
    try:
        with AnalyticsProvider(screen=payload.screen, default_metadata=screen_defaults):
            builder = (
                get_builder(payload.properties)
                .set_product_name(payload.product or get_settings().default_product)
                .set_component_name(payload.component)
                .set_action(payload.action)
            )
            builder.log()
            event = builder.event
    except ValidationError as e:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(e)) from e
    except ConfigurationError as e:
        logger.error("analytics boundary misconfigured: %s", e)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(e)) from e

    if event is None:
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Event was not logged")

    return InteractionAccepted(name=event.name, action=event.action, session_id=boundary.session_id)


@router.post("/identify", response_model=IdentifyResponse)
async def identify_route(
    payload: IdentifyRequest,
    boundary: AnalyticsContextState = Depends(analytics_boundary),
) -> IdentifyResponse:
    user = use_analytics().identify(payload.user_id, payload.properties)
    return IdentifyResponse(user_id=user.user_id, session_id=boundary.session_id)


@router.delete("/identify", status_code=status.HTTP_204_NO_CONTENT)
async def reset_identity_route(boundary: AnalyticsContextState = Depends(analytics_boundary)) -> None:
    use_analytics().reset()


@router.get("/events", response_model=EventListResponse)
async def list_events_route(
    count: int = Query(default=50, ge=1, le=500),
    sink: RedisStreamSink = Depends(get_event_sink),
) -> EventListResponse:
    """Debug endpoint: newest events from the analytics stream."""

    events = [StoredEventModel(stream_id=e.stream_id, fields=e.fields) for e in sink.recent(count=count)]
    return EventListResponse(stream=sink.stream_key, events=events)
