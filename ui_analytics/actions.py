from __future__ import annotations

from enum import StrEnum

from ui_analytics.errors import InvalidActionError


class LogEventAction(StrEnum):
    """Interaction verbs an event may carry.

    The set is closed: dashboards key off these values, so a new verb is added
    here rather than passed as a free-text string at a call site.
    """

    LongPress = "LongPress"
    Press = "Press"
    Change = "Change"
    Focus = "Focus"
    Blur = "Blur"
    Scroll = "Scroll"
    Swipe = "Swipe"
    View = "View"
    Refresh = "Refresh"
    Error = "Error"
    Attempt = "Attempt"
    Success = "Success"
    Open = "Open"
    Close = "Close"
    Restore = "Restore"


def parse_action(value: LogEventAction | str) -> LogEventAction:
    if isinstance(value, LogEventAction):
        return value
    try:
        return LogEventAction(value)
    except ValueError as e:
        raise InvalidActionError(f"Unknown action: {value!r}") from e
