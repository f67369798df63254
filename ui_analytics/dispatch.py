from __future__ import annotations

import asyncio
import atexit
import inspect
import logging
import queue
import threading
from collections.abc import Awaitable
from dataclasses import dataclass
from typing import Any

from ui_analytics.core.errors_channel import ErrorChannel
from ui_analytics.core.events import Event, UserIdentity
from ui_analytics.errors import DeliveryError
from ui_analytics.sinks.base import Sink

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class DeliveryJob:
    """One unit of work for a sink: an event, or an identity change when `event` is None."""

    sink: Sink
    event: Event | None = None
    user: UserIdentity | None = None
    # Where failures of this job are reported; falls back to the dispatcher's channel.
    errors: ErrorChannel | None = None

    @property
    def label(self) -> str:
        if self.event is not None:
            return repr(self.event.name)
        return "identity update"


class Dispatcher:
    """Hands finalized events to sinks without blocking the caller.

    Subclasses decide *where* delivery runs; this base class owns calling the
    sink and turning sink failures into `DeliveryError` reports.

    Coroutine sinks are scheduled as tasks when the delivering thread already
    runs an event loop (async routes, asyncio tasks); otherwise they run to
    completion on a loop private to that thread.
    """

    def __init__(self, *, errors: ErrorChannel | None = None) -> None:
        self.errors = errors or ErrorChannel()
        self._local = threading.local()
        self._tasks: set[asyncio.Task[Any]] = set()

    def submit(self, job: DeliveryJob) -> None:
        raise NotImplementedError

    def flush(self, timeout: float | None = None) -> bool:
        return True

    async def aflush(self) -> None:
        """Wait for async deliveries scheduled on the running loop."""

        loop = asyncio.get_running_loop()
        pending = [t for t in self._tasks if t.get_loop() is loop]
        if pending:
            await asyncio.gather(*pending, return_exceptions=True)

    def close(self, timeout: float | None = None) -> None:
        loop = getattr(self._local, "loop", None)
        if loop is not None:
            loop.close()
            self._local.loop = None

    def _report(self, job: DeliveryJob, error: BaseException) -> None:
        err = DeliveryError(f"Sink {type(job.sink).__name__} failed to deliver {job.label}: {error}", event=job.event)
        err.__cause__ = error
        (job.errors or self.errors).report(err)

    def _await(self, job: DeliveryJob, result: Awaitable[Any]) -> None:
        try:
            running = asyncio.get_running_loop()
        except RuntimeError:
            running = None

        if running is not None:
            task = running.create_task(_as_coroutine(result))
            self._tasks.add(task)
            task.add_done_callback(lambda t: self._task_done(job, t))
            return

        loop = getattr(self._local, "loop", None)
        if loop is None:
            loop = asyncio.new_event_loop()
            self._local.loop = loop
        loop.run_until_complete(result)

    def _task_done(self, job: DeliveryJob, task: asyncio.Task[Any]) -> None:
        self._tasks.discard(task)
        if task.cancelled():
            self._report(job, asyncio.CancelledError("delivery task cancelled"))
            return
        error = task.exception()
        if error is not None:
            self._report(job, error)

    def _deliver(self, job: DeliveryJob) -> None:
        try:
            if job.event is not None:
                result = job.sink.deliver(job.event)
            else:
                update_user = getattr(job.sink, "update_user", None)
                if update_user is None:
                    return
                result = update_user(job.user)
            if inspect.isawaitable(result):
                self._await(job, result)
        except Exception as e:
            self._report(job, e)


async def _as_coroutine(awaitable: Awaitable[Any]) -> Any:
    return await awaitable


class InlineDispatcher(Dispatcher):
    """Delivers on the caller's thread. Sink failures are still reported, never raised."""

    def submit(self, job: DeliveryJob) -> None:
        self._deliver(job)


_STOP = object()


class ThreadedDispatcher(Dispatcher):
    """Single background worker draining a FIFO queue.

    Contract:
      - `submit` never blocks and never raises.
      - jobs submitted from one thread reach the sink in submission order.
      - `flush` waits until everything submitted so far has been delivered.
      - after `close`, submissions are reported as DeliveryError and dropped.
    """

    def __init__(self, *, errors: ErrorChannel | None = None, name: str = "ui-analytics-dispatcher") -> None:
        super().__init__(errors=errors)
        self._queue: queue.Queue[Any] = queue.Queue()
        self._closed = False
        self._lock = threading.Lock()
        # Jobs accepted but not yet delivered; flush() waits for it to reach zero.
        self._pending = 0
        self._idle = threading.Condition()
        self._thread = threading.Thread(target=self._worker, name=name, daemon=True)
        self._thread.start()

    @property
    def closed(self) -> bool:
        return self._closed

    def submit(self, job: DeliveryJob) -> None:
        with self._lock:
            accepted = not self._closed
            if accepted:
                with self._idle:
                    self._pending += 1
                self._queue.put(job)
        if not accepted:
            (job.errors or self.errors).report(
                DeliveryError(f"Dispatcher is closed; dropped {job.label}", event=job.event)
            )

    def flush(self, timeout: float | None = None) -> bool:
        with self._idle:
            return self._idle.wait_for(lambda: self._pending == 0, timeout)

    def close(self, timeout: float | None = None) -> None:
        with self._lock:
            if self._closed:
                return
            self._closed = True
            self._queue.put(_STOP)
        self._thread.join(timeout)
        if self._thread.is_alive():
            logger.warning("analytics dispatcher did not drain within %ss", timeout)

    def _worker(self) -> None:
        while True:
            job = self._queue.get()
            if job is _STOP:
                super().close()
                return
            try:
                self._deliver(job)
            finally:
                with self._idle:
                    self._pending -= 1
                    if self._pending == 0:
                        self._idle.notify_all()


_DEFAULT: ThreadedDispatcher | None = None
_DEFAULT_LOCK = threading.Lock()


def get_default_dispatcher() -> ThreadedDispatcher:
    """Process-wide dispatcher used by providers that don't bring their own.

    Created on first use and drained at interpreter exit.
    """

    global _DEFAULT
    with _DEFAULT_LOCK:
        if _DEFAULT is None or _DEFAULT.closed:
            _DEFAULT = ThreadedDispatcher()
        return _DEFAULT


def shutdown_default_dispatcher(timeout: float | None = 5.0) -> None:
    global _DEFAULT
    with _DEFAULT_LOCK:
        dispatcher, _DEFAULT = _DEFAULT, None
    if dispatcher is not None:
        dispatcher.close(timeout)


atexit.register(shutdown_default_dispatcher)
