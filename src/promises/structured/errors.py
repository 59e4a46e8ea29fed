"""Error types for structured value casting."""

from __future__ import annotations


class CastError(Exception):
    """Error raised when a fulfillment value fails validation.

    The raw value is kept so an observer of the rejected derived promise
    can be debugged against the exact payload that failed.
    """

    def __init__(self, message: str, raw_value: object) -> None:
        self.raw_value = raw_value
        super().__init__(message)

    def __repr__(self) -> str:
        return f"CastError({super().__repr__()}, raw_value={self.raw_value!r})"
