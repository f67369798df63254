from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from ui_analytics.core.builder import LogEventBuilder
from ui_analytics.core.context import AnalyticsContextState, current_state
from ui_analytics.core.events import ContextSnapshot, UserIdentity


def get_builder(seed_metadata: Mapping[str, Any] | None = None) -> LogEventBuilder:
    """Return a fresh builder bound to the nearest mounted AnalyticsProvider.

    `seed_metadata` is laid over the provider's default metadata. Raises
    NoProviderBoundaryError outside any provider.
    """

    return current_state().new_builder(seed_metadata)


def current_context() -> ContextSnapshot:
    return current_state().snapshot()


@dataclass(frozen=True, slots=True)
class Analytics:
    """Handle bound to one provider boundary, as returned by `use_analytics()`."""

    _state: AnalyticsContextState

    def event(self, seed_metadata: Mapping[str, Any] | None = None) -> LogEventBuilder:
        return self._state.new_builder(seed_metadata)

    def identify(self, user_id: str, properties: Mapping[str, Any] | None = None) -> UserIdentity:
        return self._state.identify(user_id, properties)

    def reset(self) -> None:
        self._state.reset_identity()


def use_analytics() -> Analytics:
    return Analytics(current_state())


class IdentifyOnce:
    """Identify a device/user id at most once per instance.

    Empty ids are ignored (the id may not be known yet), so callers can invoke
    this every time their state changes.
    """

    def __init__(self) -> None:
        self.identified_as: str | None = None

    def __call__(self, user_id: str | None, properties: Mapping[str, Any] | None = None) -> bool:
        if not user_id or self.identified_as is not None:
            return False
        use_analytics().identify(user_id, properties or {})
        self.identified_as = user_id
        return True
