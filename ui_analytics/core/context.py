from __future__ import annotations

import logging
from collections.abc import Mapping
from contextvars import ContextVar, Token
from typing import Any
from uuid import uuid4

from ui_analytics.core.builder import LogEventBuilder
from ui_analytics.core.errors_channel import ErrorChannel
from ui_analytics.core.events import ContextSnapshot, Scalar, UserIdentity, frozen_mapping
from ui_analytics.dispatch import DeliveryJob, Dispatcher, get_default_dispatcher
from ui_analytics.errors import ConfigurationError, NoProviderBoundaryError
from ui_analytics.fsm import ProviderLifecycle
from ui_analytics.sinks.base import Sink

logger = logging.getLogger(__name__)

# Nearest mounted boundary for the current thread / asyncio task.
_current: ContextVar["AnalyticsContextState | None"] = ContextVar("ui_analytics_context", default=None)

_INHERIT: Any = object()


class AnalyticsContextState:
    """State of one mounted provider boundary.

    Consumers only read it (snapshots, builders). Its fields are changed by
    the owning `AnalyticsProvider`; the one exception is the user identity,
    which the provider also exposes through the `use_analytics()` handle.
    """

    def __init__(
        self,
        *,
        parent: AnalyticsContextState | None,
        sink: Sink,
        dispatcher: Dispatcher,
        errors: ErrorChannel,
        defaults: Mapping[str, Scalar],
        screen: str | None,
        session_id: str,
    ) -> None:
        self.parent = parent
        self.sink = sink
        self.dispatcher = dispatcher
        self.errors = errors
        self.screen = screen
        self.session_id = session_id
        self.mounted = True
        self._defaults = defaults
        self._user: UserIdentity | None = _INHERIT

    @property
    def own_defaults(self) -> Mapping[str, Scalar]:
        return self._defaults

    def effective_defaults(self) -> dict[str, Scalar]:
        merged = self.parent.effective_defaults() if self.parent is not None else {}
        merged.update(self._defaults)
        return merged

    @property
    def user(self) -> UserIdentity | None:
        if self._user is _INHERIT:
            return self.parent.user if self.parent is not None else None
        return self._user

    def snapshot(self) -> ContextSnapshot:
        return ContextSnapshot(
            session_id=self.session_id,
            screen=self.screen,
            user=self.user,
            defaults=frozen_mapping(self.effective_defaults()),
        )

    def new_builder(self, seed_metadata: Mapping[str, Any] | None = None) -> LogEventBuilder:
        return LogEventBuilder(
            self.snapshot(),
            seed_metadata,
            sink=self.sink,
            dispatcher=self.dispatcher,
            errors=self.errors,
        )

    def identify(self, user_id: str, properties: Mapping[str, Any] | None = None) -> UserIdentity:
        user = UserIdentity(user_id=user_id, properties=frozen_mapping(properties))
        self._user = user
        self.dispatcher.submit(DeliveryJob(sink=self.sink, user=user, errors=self.errors))
        return user

    def reset_identity(self) -> None:
        self._user = None
        self.dispatcher.submit(DeliveryJob(sink=self.sink, user=None, errors=self.errors))


def current_state() -> AnalyticsContextState:
    state = _current.get()
    # A state can be unmounted yet still current if a boundary was torn down
    # out of order from another context.
    while state is not None and not state.mounted:
        state = state.parent
    if state is None:
        raise NoProviderBoundaryError()
    return state


class AnalyticsProvider:
    """Scope within which `get_builder()` works.

    Usage:

        with AnalyticsProvider(sink, default_metadata={"screen": "lobby"}):
            get_builder().set_action("View").log()

    Boundaries nest; an inner boundary inherits sink, dispatcher, error
    channel, session, screen and user from the outer one unless given its
    own, and its default metadata is laid over the outer defaults.
    """

    def __init__(
        self,
        sink: Sink | None = None,
        *,
        default_metadata: Mapping[str, Any] | None = None,
        screen: str | None = None,
        session_id: str | None = None,
        dispatcher: Dispatcher | None = None,
        errors: ErrorChannel | None = None,
    ) -> None:
        self._sink = sink
        self._defaults = frozen_mapping(default_metadata)
        self._screen = screen
        self._session_id = session_id
        self._dispatcher = dispatcher
        self._errors = errors
        self.lifecycle = ProviderLifecycle()
        self._state: AnalyticsContextState | None = None
        self._token: Token[AnalyticsContextState | None] | None = None

    @property
    def mounted(self) -> bool:
        return self.lifecycle.is_mounted

    @property
    def state(self) -> AnalyticsContextState:
        if self._state is None or not self.mounted:
            raise NoProviderBoundaryError("AnalyticsProvider is not mounted")
        return self._state

    def _resolve(self, parent: AnalyticsContextState | None) -> AnalyticsContextState:
        sink = self._sink if self._sink is not None else (parent.sink if parent is not None else None)
        if sink is None:
            raise ConfigurationError("The outermost AnalyticsProvider needs a sink")

        if self._dispatcher is not None:
            dispatcher = self._dispatcher
        elif parent is not None:
            dispatcher = parent.dispatcher
        else:
            dispatcher = get_default_dispatcher()

        if self._errors is not None:
            errors = self._errors
        elif self._dispatcher is not None:
            errors = self._dispatcher.errors
        elif parent is not None:
            errors = parent.errors
        else:
            errors = dispatcher.errors

        if self._session_id is not None:
            session_id = self._session_id
        elif parent is not None:
            session_id = parent.session_id
        else:
            session_id = uuid4().hex

        screen = self._screen if self._screen is not None else (parent.screen if parent is not None else None)

        return AnalyticsContextState(
            parent=parent,
            sink=sink,
            dispatcher=dispatcher,
            errors=errors,
            defaults=self._defaults,
            screen=screen,
            session_id=session_id,
        )

    def mount(self) -> AnalyticsContextState:
        parent = _current.get()
        while parent is not None and not parent.mounted:
            parent = parent.parent
        # Resolve before transitioning so a misconfigured boundary stays unmounted.
        state = self._resolve(parent)
        self.lifecycle.apply("mount")
        self._state = state
        self._token = _current.set(state)
        logger.debug("analytics provider mounted (session=%s, screen=%s)", state.session_id, state.screen)
        return state

    def unmount(self) -> None:
        self.lifecycle.apply("unmount")
        state, token = self._state, self._token
        self._token = None
        if state is not None:
            state.mounted = False
        if token is not None:
            try:
                _current.reset(token)
            except ValueError:
                # Torn down from a different context than it was mounted in;
                # current_state() skips unmounted entries.
                logger.debug("analytics provider unmounted outside its mount context")
        logger.debug("analytics provider unmounted")

    def __enter__(self) -> AnalyticsContextState:
        return self.mount()

    def __exit__(self, *exc: object) -> None:
        self.unmount()

    def update_default_metadata(self, default_metadata: Mapping[str, Any] | None) -> None:
        """Replace this boundary's defaults; builders created afterwards see them."""

        defaults = frozen_mapping(default_metadata)
        self._defaults = defaults
        if self._state is not None:
            self._state._defaults = defaults

    def set_screen(self, screen: str | None) -> None:
        self._screen = screen
        if self._state is not None:
            self._state.screen = screen

    def identify(self, user_id: str, properties: Mapping[str, Any] | None = None) -> UserIdentity:
        return self.state.identify(user_id, properties)

    def reset_identity(self) -> None:
        self.state.reset_identity()
