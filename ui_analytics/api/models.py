from __future__ import annotations

from typing import Union

from pydantic import BaseModel, Field

from ui_analytics.actions import LogEventAction

# bool first so pydantic doesn't coerce true/false into 1/0.
ScalarValue = Union[bool, int, float, str]


class InteractionRequest(BaseModel):
    product: str | None = Field(default=None, max_length=200)
    component: str = Field(..., min_length=1, max_length=200)
    action: LogEventAction
    properties: dict[str, ScalarValue] = Field(default_factory=dict)
    screen: str | None = Field(default=None, max_length=200)


class InteractionAccepted(BaseModel):
    name: str
    action: LogEventAction
    session_id: str


class StoredEventModel(BaseModel):
    stream_id: str
    fields: dict[str, str]


class EventListResponse(BaseModel):
    stream: str
    events: list[StoredEventModel]


class IdentifyRequest(BaseModel):
    user_id: str = Field(..., min_length=1, max_length=200)
    properties: dict[str, ScalarValue] = Field(default_factory=dict)


class IdentifyResponse(BaseModel):
    user_id: str
    session_id: str
