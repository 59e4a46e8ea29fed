"""Kernel layer - the promise state machine and its runtime support."""

from promises.kernel.config import PromiseConfig, get_default_config, set_default_config
from promises.kernel.errors import IllegalStateError
from promises.kernel.promise import Finishable, Promise
from promises.kernel.status import FULFILLED, PENDING, REJECTED, Settlement, Status
from promises.kernel.trace import Evidence, Trace

__all__ = [
    "Promise",
    "Finishable",
    "Settlement",
    "Status",
    "PENDING",
    "FULFILLED",
    "REJECTED",
    "IllegalStateError",
    # Config
    "PromiseConfig",
    "get_default_config",
    "set_default_config",
    # Tracing
    "Evidence",
    "Trace",
]
