from __future__ import annotations

from statemachine import State, StateMachine
from statemachine.exceptions import TransitionNotAllowed

from ui_analytics.errors import ProviderLifecycleError


class ProviderLifecycle(StateMachine):
    """Lifecycle of one provider boundary: unmounted <-> mounted.

    A boundary can be mounted again after teardown, but never mounted twice
    or unmounted while not mounted.
    """

    unmounted = State("Unmounted", value="unmounted", initial=True)
    mounted = State("Mounted", value="mounted")

    mount = unmounted.to(mounted)
    unmount = mounted.to(unmounted)

    @property
    def is_mounted(self) -> bool:
        return self.current_state.value == "mounted"

    def apply(self, event: str) -> None:
        try:
            self.send(event)
        except TransitionNotAllowed as e:
            raise ProviderLifecycleError(
                f"Cannot {event} an analytics provider that is {self.current_state.value}"
            ) from e
