from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any, cast

import redis

from ui_analytics.core.events import Event, UserIdentity


@dataclass(frozen=True, slots=True)
class StoredEvent:
    stream_id: str
    fields: dict[str, str]


class RedisStreamSink:
    """Appends events to a Redis stream (XADD).

    The current user identity is kept at `<stream_key>:identity` so readers can
    attribute events without replaying the stream.
    """

    def __init__(self, *, r: redis.Redis, stream_key: str = "analytics:events", maxlen: int | None = 10_000) -> None:
        self.r = r
        self.stream_key = stream_key
        self.maxlen = maxlen or None

    @property
    def identity_key(self) -> str:
        return f"{self.stream_key}:identity"

    def deliver(self, event: Event) -> None:
        fields = event.to_stream_fields()
        # redis-py stubs expect field/value unions; we only write strings.
        self.r.xadd(self.stream_key, cast(Any, fields), maxlen=self.maxlen, approximate=self.maxlen is not None)

    def update_user(self, user: UserIdentity | None) -> None:
        if user is None:
            self.r.delete(self.identity_key)
            return
        self.r.set(self.identity_key, json.dumps(user.to_dict(), sort_keys=True))

    def recent(self, *, count: int = 50) -> list[StoredEvent]:
        """Newest-first events from the stream."""

        rows = self.r.xrevrange(self.stream_key, count=count)
        return [StoredEvent(stream_id=str(sid), fields={str(k): str(v) for k, v in fields.items()}) for sid, fields in rows]

    def current_user(self) -> dict[str, Any] | None:
        raw = self.r.get(self.identity_key)
        if raw is None:
            return None
        return cast(dict[str, Any], json.loads(cast(str, raw)))
