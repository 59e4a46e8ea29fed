"""Error types for promise protocol violations."""

from __future__ import annotations


class IllegalStateError(RuntimeError):
    """Error raised when a promise is driven through an invalid transition.

    Settling an already-settled promise is a programming error rather than
    a domain outcome, so it is surfaced as an exception instead of a
    rejection. The offending status is preserved for debugging.
    """

    def __init__(self, message: str, status: str) -> None:
        self.status = status
        super().__init__(message)

    def __repr__(self) -> str:
        return f"IllegalStateError({super().__repr__()}, status={self.status!r})"
