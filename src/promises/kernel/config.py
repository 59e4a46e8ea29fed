"""Promise configuration and the process-wide default."""

from __future__ import annotations

from dataclasses import dataclass

from promises.kernel.trace import Trace


@dataclass(frozen=True)
class PromiseConfig:
    """
    Behavioural switches shared by a promise and the promises derived from it.

    Attributes:
        synchronized: Guard state transitions with a reentrant lock so a
            promise shared across threads still settles exactly once. Observers
            run while the lock is held: an observer that blocks waiting on
            another thread which calls then/fail/resolve on the same promise
            deadlocks both threads.
        capture_observer_errors: Turn an exception raised by a fulfillment
            observer into a rejection instead of re-raising it to the producer.
            IllegalStateError and exceptions from fail observers always
            propagate.
        trace: Optional trace receiving settlement evidence
    """

    synchronized: bool = True
    capture_observer_errors: bool = True
    trace: Trace | None = None


_default_config = PromiseConfig()


def get_default_config() -> PromiseConfig:
    """Get the config used by promises created without an explicit one."""
    return _default_config


def set_default_config(config: PromiseConfig) -> PromiseConfig:
    """Replace the default config and return the previous one."""
    global _default_config
    previous = _default_config
    _default_config = config
    return previous
