from ui_analytics.accessor import Analytics, IdentifyOnce, current_context, get_builder, use_analytics
from ui_analytics.actions import LogEventAction, parse_action
from ui_analytics.core.builder import LogEventBuilder
from ui_analytics.core.context import AnalyticsContextState, AnalyticsProvider
from ui_analytics.core.errors_channel import CollectingErrorChannel, ErrorChannel
from ui_analytics.core.events import ContextSnapshot, Event, UserIdentity
from ui_analytics.dispatch import InlineDispatcher, ThreadedDispatcher
from ui_analytics.errors import (
    AnalyticsError,
    ConfigurationError,
    DeliveryError,
    DoubleFinalizeError,
    InvalidActionError,
    InvalidMetadataError,
    MissingActionError,
    NoProviderBoundaryError,
    ProviderLifecycleError,
    ValidationError,
)

__all__ = [
    "Analytics",
    "AnalyticsContextState",
    "AnalyticsError",
    "AnalyticsProvider",
    "CollectingErrorChannel",
    "ConfigurationError",
    "ContextSnapshot",
    "DeliveryError",
    "DoubleFinalizeError",
    "ErrorChannel",
    "Event",
    "IdentifyOnce",
    "InlineDispatcher",
    "InvalidActionError",
    "InvalidMetadataError",
    "LogEventAction",
    "LogEventBuilder",
    "MissingActionError",
    "NoProviderBoundaryError",
    "ProviderLifecycleError",
    "ThreadedDispatcher",
    "UserIdentity",
    "ValidationError",
    "current_context",
    "get_builder",
    "parse_action",
    "use_analytics",
]
