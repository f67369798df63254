from __future__ import annotations

import threading

from ui_analytics.core.events import Event, UserIdentity


class InMemorySink:
    """Keeps delivered events in a list.

    `fail_with` makes every delivery raise that exception, for exercising the
    error channel.
    """

    def __init__(self, *, fail_with: Exception | None = None) -> None:
        self.events: list[Event] = []
        self.users: list[UserIdentity | None] = []
        self.fail_with = fail_with
        self._lock = threading.Lock()

    def deliver(self, event: Event) -> None:
        if self.fail_with is not None:
            raise self.fail_with
        with self._lock:
            self.events.append(event)

    def update_user(self, user: UserIdentity | None) -> None:
        with self._lock:
            self.users.append(user)

    @property
    def names(self) -> list[str]:
        with self._lock:
            return [e.name for e in self.events]
