from __future__ import annotations

from collections.abc import Awaitable
from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from ui_analytics.core.events import Event, UserIdentity


@runtime_checkable
class Sink(Protocol):
    """Delivery endpoint for finalized events.

    `deliver` may be sync or return an awaitable; raising signals failure.
    Sinks that track users may also define `update_user(user | None)`.
    """

    def deliver(self, event: Event) -> None | Awaitable[None]: ...


class UserAwareSink(Sink, Protocol):
    def update_user(self, user: UserIdentity | None) -> None | Awaitable[None]: ...
