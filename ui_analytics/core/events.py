from __future__ import annotations

import json
from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import UTC, datetime
from types import MappingProxyType
from typing import Any, Union

from ui_analytics.actions import LogEventAction
from ui_analytics.errors import InvalidMetadataError

Scalar = Union[str, int, float, bool]

_SCALAR_TYPES = (str, int, float, bool)


def validate_scalar(key: str, value: Any) -> Scalar:
    if not isinstance(key, str) or not key:
        raise InvalidMetadataError(f"Metadata keys must be non-empty strings, got {key!r}")
    if not isinstance(value, _SCALAR_TYPES):
        raise InvalidMetadataError(f"Metadata value for {key!r} must be a str, int, float or bool, got {type(value).__name__}")
    return value


def frozen_mapping(values: Mapping[str, Any] | None = None) -> Mapping[str, Scalar]:
    """Validate and copy `values` into a read-only mapping."""

    out: dict[str, Scalar] = {}
    for k, v in (values or {}).items():
        out[k] = validate_scalar(k, v)
    return MappingProxyType(out)


@dataclass(frozen=True, slots=True)
class UserIdentity:
    user_id: str
    properties: Mapping[str, Scalar] = field(default_factory=frozen_mapping)

    def to_dict(self) -> dict[str, Any]:
        return {"user_id": self.user_id, "properties": dict(self.properties)}


@dataclass(frozen=True, slots=True)
class ContextSnapshot:
    """Ambient fields as they were when a builder was created."""

    session_id: str
    screen: str | None = None
    user: UserIdentity | None = None
    defaults: Mapping[str, Scalar] = field(default_factory=frozen_mapping)

    def to_dict(self) -> dict[str, Any]:
        return {
            "session_id": self.session_id,
            "screen": self.screen,
            "user": self.user.to_dict() if self.user is not None else None,
            "defaults": dict(self.defaults),
        }


@dataclass(frozen=True, slots=True)
class Event:
    action: LogEventAction
    timestamp: datetime
    context: ContextSnapshot
    metadata: Mapping[str, Scalar]
    product: str = ""
    component: str = ""

    @staticmethod
    def now(
        *,
        action: LogEventAction,
        context: ContextSnapshot,
        metadata: Mapping[str, Scalar],
        product: str = "",
        component: str = "",
    ) -> "Event":
        merged = dict(context.defaults)
        merged.update(metadata)
        return Event(
            action=action,
            timestamp=datetime.now(UTC),
            context=context,
            metadata=MappingProxyType(merged),
            product=product,
            component=component,
        )

    @property
    def name(self) -> str:
        # "<product> <component> <action>", e.g. "Lobby ReadyButton Press".
        return " ".join(p for p in (self.product, self.component, self.action.value) if p)

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "action": self.action.value,
            "product": self.product,
            "component": self.component,
            "timestamp": self.timestamp.isoformat(),
            "context": self.context.to_dict(),
            "metadata": dict(self.metadata),
        }

    def to_stream_fields(self) -> dict[str, str]:
        """Flat string fields for Redis Streams (nested values as JSON)."""

        return {
            "name": self.name,
            "action": self.action.value,
            "product": self.product,
            "component": self.component,
            "ts": self.timestamp.isoformat(),
            "session_id": self.context.session_id,
            "screen": self.context.screen or "",
            "user_id": self.context.user.user_id if self.context.user is not None else "",
            "metadata": json.dumps(dict(self.metadata), sort_keys=True),
        }
