from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ui_analytics.core.events import Event


class AnalyticsError(RuntimeError):
    pass


class ConfigurationError(AnalyticsError):
    """Instrumentation is wired up wrong. Fix before shipping."""


class NoProviderBoundaryError(ConfigurationError):
    def __init__(self, message: str = "get_builder() must be called within an AnalyticsProvider") -> None:
        super().__init__(message)


class ProviderLifecycleError(ConfigurationError):
    pass


class ValidationError(AnalyticsError):
    pass


class MissingActionError(ValidationError):
    def __init__(self, message: str = "Event has no action; call set_action() before log()") -> None:
        super().__init__(message)


class InvalidActionError(ValidationError):
    pass


class InvalidMetadataError(ValidationError):
    pass


class DoubleFinalizeError(AnalyticsError):
    def __init__(self, event_name: str) -> None:
        super().__init__(f"log() called more than once for {event_name!r}; second call ignored")
        self.event_name = event_name


class DeliveryError(AnalyticsError):
    """A sink failed to accept an event (or an identity update)."""

    def __init__(self, message: str, *, event: Event | None = None) -> None:
        super().__init__(message)
        self.event = event
