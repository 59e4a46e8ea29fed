"""Promise - the deferred-value primitive."""

from __future__ import annotations

import logging
import threading
import time
from collections.abc import Callable
from contextlib import AbstractContextManager, nullcontext
from typing import Any, Generic, TypeVar, cast

from promises.kernel.config import PromiseConfig, get_default_config
from promises.kernel.errors import IllegalStateError
from promises.kernel.status import FULFILLED, PENDING, REJECTED, Settlement, Status

logger = logging.getLogger(__name__)

T = TypeVar("T")
R = TypeVar("R")

OnFulfilled = Callable[[T | None], None]
OnRejected = Callable[[str], None]
OnDone = Callable[[], None]


# Extension registry - class-level storage for Promise capabilities
_extensions_registry: dict[str, Callable[..., Any]] = {}


class Promise(Generic[T]):
    """A container for a value or error that is not yet known.

    A producer settles the promise exactly once with resolve() or reject().
    Consumers attach observers with then() and fail(), before or after
    settlement; observers attached late are invoked immediately with the
    stored outcome. All observers run synchronously on the settling thread,
    in registration order.

    Capabilities can be registered via register_op() for extensibility.
    """

    def __init__(self, config: PromiseConfig | None = None, label: str | None = None) -> None:
        self._config = config or get_default_config()
        self.label = label
        self._status: Status = PENDING
        self._value: T | None = None
        self._error: str | None = None
        self._on_fulfilled: list[OnFulfilled[T]] = []
        self._on_rejected: list[OnRejected] = []
        self._on_done: OnDone | None = None
        self._resolving = False
        self._lock: AbstractContextManager[Any] = (
            threading.RLock() if self._config.synchronized else nullcontext()
        )

    @classmethod
    def register_op(cls, name: str, fn: Callable[..., Any]) -> None:
        """Register an operation capability on the Promise class.

        Args:
            name: The operation name (e.g., "cast")
            fn: The function to register; receives the promise as first argument
        """
        _extensions_registry[name] = fn

    def __getattr__(self, name: str) -> Any:
        """Allow calling registered extension methods."""
        if name in _extensions_registry:
            fn = _extensions_registry[name]
            return lambda *args, **kwargs: fn(self, *args, **kwargs)
        raise AttributeError(f"'{type(self).__name__}' object has no attribute '{name}'")

    @staticmethod
    def resolved(value: T | None = None, config: PromiseConfig | None = None) -> Promise[T]:
        """Create a promise already fulfilled with value."""
        promise: Promise[T] = Promise(config=config)
        promise.resolve(value)
        return promise

    @staticmethod
    def rejected(error: str, config: PromiseConfig | None = None) -> Promise[T]:
        """Create a promise already rejected with error."""
        promise: Promise[T] = Promise(config=config)
        promise.reject(error)
        return promise

    @property
    def config(self) -> PromiseConfig:
        return self._config

    @property
    def name(self) -> str:
        return self.label or f"promise-{id(self):x}"

    @property
    def status(self) -> Status:
        return self._status

    @property
    def value(self) -> T | None:
        """The fulfillment value, or None unless the promise fulfilled."""
        return self._value if self._status == FULFILLED else None

    @property
    def error_message(self) -> str | None:
        return self._error

    @property
    def is_pending(self) -> bool:
        return self._status == PENDING

    @property
    def is_fulfilled(self) -> bool:
        return self._status == FULFILLED

    @property
    def is_rejected(self) -> bool:
        return self._status == REJECTED

    @property
    def settlement(self) -> Settlement[T]:
        """Snapshot of the current outcome."""
        if self._status == FULFILLED:
            return Settlement.Fulfilled(self._value)
        if self._status == REJECTED:
            return Settlement.Rejected(cast(str, self._error))
        return Settlement.Pending()

    def resolve(self, value: T | None = None) -> None:
        """Fulfill the promise and run fulfillment observers in order.

        The rejection state is checked before each observer: if an observer
        rejects this promise, the remaining observers are skipped and the
        done callback never runs.

        Raises:
            IllegalStateError: If the promise is already settled or is
                already being resolved.
        """
        with self._lock:
            if self._status != PENDING:
                raise IllegalStateError("Promise has already been settled.", self._status)
            if self._resolving:
                raise IllegalStateError("Promise is already being resolved.", self._status)

            self._resolving = True
            self._value = value
            trace = self._config.trace
            event_id = self._record("resolve")
            if trace is not None and event_id is not None:
                trace.push(event_id)

            start_time = time.perf_counter()
            try:
                # Observers registered while this loop runs are picked up too
                index = 0
                while index < len(self._on_fulfilled):
                    if self._status == REJECTED:
                        break
                    self._run_fulfilled(index, self._on_fulfilled[index], value)
                    index += 1
            finally:
                self._resolving = False
                if trace is not None and event_id is not None:
                    trace.pop()
            duration_ms = (time.perf_counter() - start_time) * 1000

            if self._status == REJECTED:
                logger.debug(
                    "Promise %s rejected during resolve; skipped %d observer(s)",
                    self.name,
                    len(self._on_fulfilled) - index,
                )
                self._record("short_circuit", parent_id=event_id, duration_ms=duration_ms, ran=index)
                return

            self._status = FULFILLED
            self._record("fulfilled", parent_id=event_id, duration_ms=duration_ms, ran=index)
            logger.debug("Promise %s fulfilled; ran %d observer(s)", self.name, index)

            if self._on_done is not None:
                self._record("done", parent_id=event_id)
                self._on_done()

    def reject(self, error: str) -> None:
        """Reject the promise and run rejection observers in order.

        May be called from a fulfillment observer while resolve() is
        running; that halts the remaining fulfillment observers.

        Raises:
            IllegalStateError: If the promise is already settled.
        """
        with self._lock:
            if self._status != PENDING:
                raise IllegalStateError("Promise has already been settled.", self._status)

            self._value = None
            self._error = error
            self._status = REJECTED
            trace = self._config.trace
            event_id = self._record("reject", error=error)
            if trace is not None and event_id is not None:
                trace.push(event_id)

            start_time = time.perf_counter()
            try:
                # Observers added from here on are invoked at registration time
                callbacks = list(self._on_rejected)
                for index, callback in enumerate(callbacks):
                    self._record("observer", kind="fail", index=index)
                    callback(error)
            finally:
                if trace is not None and event_id is not None:
                    trace.pop()

            self._record(
                "rejected",
                parent_id=event_id,
                duration_ms=(time.perf_counter() - start_time) * 1000,
                ran=len(callbacks),
            )
            logger.debug("Promise %s rejected: %s", self.name, error)

    def then(self, callback: OnFulfilled[T]) -> Promise[T]:
        """Register a fulfillment observer.

        If the promise is already fulfilled, callback runs immediately with
        the stored value.

        Returns:
            This promise, for chaining further then()/fail() calls
        """
        with self._lock:
            self._on_fulfilled.append(callback)
            if self._status == FULFILLED:
                self._record("observer", kind="then", index=len(self._on_fulfilled) - 1, catch_up=True)
                callback(self._value)
        return self

    def fail(self, callback: OnRejected) -> Finishable[T]:
        """Register a rejection observer.

        If the promise is already rejected, callback runs immediately with
        the stored error.

        Returns:
            A Finishable handle that only allows registering done()
        """
        with self._lock:
            self._on_rejected.append(callback)
            if self._status == REJECTED:
                self._record("observer", kind="fail", index=len(self._on_rejected) - 1, catch_up=True)
                callback(cast(str, self._error))
        return Finishable(self)

    def map(self, transform: Callable[[T | None], R | None]) -> Promise[R]:
        """Derive a promise whose outcome follows this one through transform.

        Fulfillment resolves the derived promise with transform(value).
        Rejection rejects it with the same error message, and transform is
        never called. If transform raises, the derived promise is rejected
        with the exception text.
        """
        mapped: Promise[R] = Promise(
            config=self._config,
            label=f"{self.label}.map" if self.label else None,
        )
        self._record("map", derived=mapped.name)

        def on_fulfilled(value: T | None) -> None:
            try:
                result = transform(value)
            except Exception as exc:
                logger.warning("map transform for %s raised: %s", self.name, exc)
                mapped.reject(str(exc))
                return
            mapped.resolve(result)

        def on_rejected(error: str) -> None:
            # Already fulfilled if this promise was rejected by a short-circuit
            if mapped.is_pending:
                mapped.reject(error)

        self.then(on_fulfilled).fail(on_rejected)
        return mapped

    def _finish(self, callback: OnDone) -> None:
        with self._lock:
            if self._on_done is not None:
                raise IllegalStateError("A done callback is already registered.", self._status)
            self._on_done = callback
            if self._status == FULFILLED:
                self._record("done", catch_up=True)
                callback()

    def _run_fulfilled(self, index: int, callback: OnFulfilled[T], value: T | None) -> None:
        self._record("observer", kind="then", index=index)
        try:
            callback(value)
        except IllegalStateError as exc:
            # Settled before re-raising so a retried resolve cannot deliver twice
            logger.warning("Observer %d of %s faulted: %s", index, self.name, exc)
            if self._status == PENDING:
                self.reject(str(exc))
            raise
        except Exception as exc:
            if self._status != PENDING:
                # Raised by a fail observer of a short-circuit rejection
                raise
            logger.warning("Observer %d of %s raised: %s", index, self.name, exc)
            self.reject(str(exc))
            if not self._config.capture_observer_errors:
                raise

    def _record(
        self,
        action: str,
        parent_id: int | None = None,
        duration_ms: float | None = None,
        **info: Any,
    ) -> int | None:
        trace = self._config.trace
        if trace is None:
            return None
        return trace.record(
            action,
            info={"promise": self.name, **info},
            parent_id=parent_id,
            duration_ms=duration_ms,
        )

    def __repr__(self) -> str:
        if self._status == PENDING:
            outcome = "(pending)"
        elif self._status == REJECTED:
            outcome = f"{self._error!r} (rejected)"
        else:
            outcome = repr(self._value)
        return f"<{type(self).__name__} {self.name} {outcome}>"


class Finishable(Generic[T]):
    """Narrowed handle returned by Promise.fail().

    Only done() is exposed, so a chain reads then*-fail-done and cannot
    continue with then() or fail() after the first fail().
    """

    __slots__ = ("_promise",)

    def __init__(self, promise: Promise[T]) -> None:
        self._promise = promise

    def done(self, callback: OnDone) -> None:
        """Register the terminal success callback.

        Runs once the promise fulfilled without being rejected by one of its
        observers; runs immediately if that already happened. Never runs on
        a rejected promise.

        Raises:
            IllegalStateError: If a done callback is already registered.
        """
        self._promise._finish(callback)

    def __repr__(self) -> str:
        return f"Finishable({self._promise!r})"
