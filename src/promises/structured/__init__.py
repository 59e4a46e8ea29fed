"""Structured value casting for promise fulfillment values.

This module provides the Promise.cast() operation, a map() whose transform
validates the value against a schema.
"""

# Import promise_ext to register capabilities
from . import promise_ext  # noqa: F401
from .cast import make_cast_transform
from .errors import CastError
from .parser import parse_json_if_needed
from .schema import (
    CallableSchema,
    DictSchema,
    OutputSchema,
    PydanticSchema,
    format_validation_error,
)

__all__ = [
    "CastError",
    "OutputSchema",
    "CallableSchema",
    "DictSchema",
    "PydanticSchema",
    "format_validation_error",
    "parse_json_if_needed",
    "make_cast_transform",
]
