from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from ui_analytics.actions import LogEventAction, parse_action
from ui_analytics.core.errors_channel import ErrorChannel
from ui_analytics.core.events import ContextSnapshot, Event, Scalar, validate_scalar
from ui_analytics.dispatch import DeliveryJob, Dispatcher
from ui_analytics.errors import DoubleFinalizeError, MissingActionError
from ui_analytics.sinks.base import Sink


class LogEventBuilder:
    """Accumulates one interaction event and logs it exactly once.

    Setters return the builder so calls can be chained:

        get_builder().set_product_name("Lobby").set_component_name("ReadyButton").set_action("Press").log()

    Builders are bound at creation to the boundary's snapshot, sink and
    dispatcher, so they stay usable after that boundary is torn down.
    """

    def __init__(
        self,
        snapshot: ContextSnapshot,
        seed_metadata: Mapping[str, Any] | None = None,
        *,
        sink: Sink,
        dispatcher: Dispatcher,
        errors: ErrorChannel | None = None,
    ) -> None:
        self._snapshot = snapshot
        self._sink = sink
        self._dispatcher = dispatcher
        self._errors = errors or dispatcher.errors

        self._action: LogEventAction | None = None
        self._metadata: dict[str, Scalar] = {}
        self._product = ""
        self._component = ""
        self._finalized = False
        self._event: Event | None = None

        self.set_properties(seed_metadata)

    @property
    def snapshot(self) -> ContextSnapshot:
        return self._snapshot

    @property
    def action(self) -> LogEventAction | None:
        return self._action

    @property
    def metadata(self) -> dict[str, Scalar]:
        return dict(self._metadata)

    @property
    def finalized(self) -> bool:
        return self._finalized

    @property
    def event(self) -> Event | None:
        """The event handed to the sink, once `log()` has run."""

        return self._event

    def set_product_name(self, product_name: str) -> "LogEventBuilder":
        self._product = product_name
        return self

    def set_component_name(self, component_name: str) -> "LogEventBuilder":
        self._component = component_name
        return self

    def set_action(self, action: LogEventAction | str) -> "LogEventBuilder":
        self._action = parse_action(action)
        return self

    def set_metadata(self, key: str, value: Scalar) -> "LogEventBuilder":
        self._metadata[key] = validate_scalar(key, value)
        return self

    def set_properties(self, properties: Mapping[str, Any] | None) -> "LogEventBuilder":
        if not properties:
            return self
        # Validate everything first so a bad value doesn't leave a half-applied merge.
        validated = {k: validate_scalar(k, v) for k, v in properties.items()}
        self._metadata.update(validated)
        return self

    def build(self) -> Event:
        """Create the Event without logging it."""

        if self._action is None:
            raise MissingActionError()
        return Event.now(
            action=self._action,
            context=self._snapshot,
            metadata=self._metadata,
            product=self._product,
            component=self._component,
        )

    def log(self) -> None:
        if self._finalized:
            name = " ".join(p for p in (self._product, self._component, self._action or "") if p)
            self._errors.report(DoubleFinalizeError(name))
            return

        event = self.build()
        self._finalized = True
        self._event = event
        self._dispatcher.submit(DeliveryJob(sink=self._sink, event=event, errors=self._errors))

    def __repr__(self) -> str:
        return (
            f"LogEventBuilder(product={self._product!r}, component={self._component!r}, "
            f"action={self._action!r}, finalized={self._finalized})"
        )
