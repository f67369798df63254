from __future__ import annotations

import json
import logging

from ui_analytics.core.events import Event, UserIdentity

logger = logging.getLogger(__name__)


class LoggingSink:
    """Writes one log line per event. Useful in local dev when no backend is wired."""

    def __init__(self, *, level: int = logging.INFO, log: logging.Logger | None = None) -> None:
        self.level = level
        self.log = log or logger

    def deliver(self, event: Event) -> None:
        self.log.log(self.level, "event %s %s", event.name, json.dumps(dict(event.metadata), sort_keys=True))

    def update_user(self, user: UserIdentity | None) -> None:
        if user is None:
            self.log.log(self.level, "identity reset")
        else:
            self.log.log(self.level, "identify %s", user.user_id)
