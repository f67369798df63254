from __future__ import annotations

import logging
import threading
from collections.abc import Callable

from ui_analytics.errors import AnalyticsError, DeliveryError

logger = logging.getLogger(__name__)

ErrorCallback = Callable[[AnalyticsError], None]


class ErrorChannel:
    """Out-of-band reporting for analytics failures.

    Contract:
      - `report(error)` logs the error and fans it out to subscribers.
      - `report` never raises; a failing subscriber is logged and skipped.

    Reports may come from the dispatcher's worker thread, so the subscriber
    list is guarded by a lock.
    """

    def __init__(self) -> None:
        self._subscribers: list[ErrorCallback] = []
        self._lock = threading.Lock()

    def subscribe(self, callback: ErrorCallback) -> Callable[[], None]:
        with self._lock:
            self._subscribers.append(callback)

        def _unsubscribe() -> None:
            with self._lock:
                if callback in self._subscribers:
                    self._subscribers.remove(callback)

        return _unsubscribe

    def report(self, error: AnalyticsError) -> None:
        if isinstance(error, DeliveryError) and error.__cause__ is not None:
            cause = error.__cause__
            logger.warning("analytics: %s", error, exc_info=(type(cause), cause, cause.__traceback__))
        else:
            logger.warning("analytics: %s", error)

        with self._lock:
            subscribers = list(self._subscribers)

        for cb in subscribers:
            try:
                cb(error)
            except Exception:
                logger.exception("analytics error subscriber %r failed", cb)


class CollectingErrorChannel(ErrorChannel):
    """ErrorChannel that also keeps every report; handy in tests and dev tools."""

    def __init__(self) -> None:
        super().__init__()
        self.reported: list[AnalyticsError] = []
        self.subscribe(self.reported.append)
