"""Settlement states and the immutable settlement snapshot."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Final, Generic, Literal, TypeVar

from promises.kernel.errors import IllegalStateError

T = TypeVar("T")

Status = Literal["pending", "fulfilled", "rejected"]

PENDING: Final[Status] = "pending"
FULFILLED: Final[Status] = "fulfilled"
REJECTED: Final[Status] = "rejected"


@dataclass(frozen=True)
class Settlement(Generic[T]):
    """
    A read-only record of a promise's outcome.

    Attributes:
        status: Settlement state at the time the snapshot was taken
        value: Fulfillment value (only meaningful when fulfilled)
        error: Rejection message (only present when rejected)
    """

    status: Status = PENDING
    value: T | None = None
    error: str | None = None

    @staticmethod
    def Pending() -> Settlement[T]:
        return Settlement(status=PENDING)

    @staticmethod
    def Fulfilled(value: T | None = None) -> Settlement[T]:
        return Settlement(status=FULFILLED, value=value)

    @staticmethod
    def Rejected(error: str) -> Settlement[T]:
        return Settlement(status=REJECTED, error=error)

    @property
    def settled(self) -> bool:
        return self.status != PENDING

    def require_value(self) -> T | None:
        if self.status != FULFILLED:
            raise IllegalStateError("Settlement has no value.", self.status)
        return self.value
