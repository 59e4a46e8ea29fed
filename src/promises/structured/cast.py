"""Type casting transform for derived promises."""

from __future__ import annotations

from collections.abc import Callable
from typing import Any, TypeVar

from .errors import CastError
from .parser import parse_json_if_needed
from .schema import OutputSchema

T = TypeVar("T")


def make_cast_transform(schema: OutputSchema[T], parse_json: bool = True) -> Callable[[Any], T]:
    """Create a map() transform that validates values against schema.

    With parse_json (the default), str and bytes values are decoded as JSON
    before validation, so plain text that is not a JSON document fails with
    CastError. Pass parse_json=False to hand text to the schema unchanged.
    Any validation failure is raised as CastError, which map() turns into a
    rejection of the derived promise.

    Args:
        schema: The output schema to validate against
        parse_json: Decode text values as JSON first

    Returns:
        A transform suitable for Promise.map()
    """
    def transform(value: Any) -> T:
        parsed = parse_json_if_needed(value) if parse_json else value
        try:
            return schema.validate(parsed)
        except CastError:
            raise
        except Exception as e:
            raise CastError(f"{schema.describe()}: {e}", parsed) from e

    return transform
