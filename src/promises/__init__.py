from .kernel import (
    FULFILLED,
    PENDING,
    REJECTED,
    Evidence,
    Finishable,
    IllegalStateError,
    Promise,
    PromiseConfig,
    Settlement,
    Status,
    Trace,
    get_default_config,
    set_default_config,
)

# Import structured to register the cast capability
from . import structured  # noqa: F401, E402

__all__ = [
    # Core
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
