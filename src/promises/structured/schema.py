"""Schema abstractions for value validation and casting."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, Protocol, TypeVar

from pydantic import BaseModel, ValidationError

from .errors import CastError

T = TypeVar("T")
M = TypeVar("M", bound=BaseModel)


class OutputSchema(Protocol[T]):
    """Protocol for fulfillment value schemas.

    Schemas validate and transform raw values into structured types.
    """

    def validate(self, value: Any) -> T:
        """Validate and transform the input value.

        Raises:
            Exception: If validation fails
        """
        ...

    def describe(self) -> str:
        """Return a human-readable description of this schema."""
        ...


@dataclass(frozen=True)
class CallableSchema(OutputSchema[T]):
    """Schema that uses a callable for validation.

    The callable should raise an exception if validation fails,
    and return the validated/transformed value on success.
    """

    fn: Callable[[Any], T]
    _description: str | None = None

    def validate(self, value: Any) -> T:
        return self.fn(value)

    def describe(self) -> str:
        if self._description:
            return self._description
        return getattr(self.fn, "__name__", repr(self.fn))


@dataclass(frozen=True)
class DictSchema(OutputSchema[dict[str, Any]]):
    """Schema for validating dictionary structures.

    Validates that the input is a dict and optionally checks
    field existence and types.
    """

    required_fields: dict[str, type] | None = None

    def validate(self, value: Any) -> dict[str, Any]:
        if not isinstance(value, dict):
            raise CastError(f"Expected dict, got {type(value).__name__}", value)

        for field_name, field_type in (self.required_fields or {}).items():
            if field_name not in value:
                raise CastError(f"Missing required field: {field_name}", value)
            if not isinstance(value[field_name], field_type):
                raise CastError(
                    f"Field '{field_name}' expected {field_type.__name__}, "
                    f"got {type(value[field_name]).__name__}",
                    value,
                )

        return value

    def describe(self) -> str:
        if self.required_fields:
            fields = ", ".join(f"{k}: {v.__name__}" for k, v in self.required_fields.items())
            return f"DictSchema({fields})"
        return "DictSchema"


@dataclass(frozen=True)
class PydanticSchema(OutputSchema[M]):
    """Schema that validates through a pydantic model.

    Validation errors are flattened into a single-line CastError so the
    rejection message stays readable.
    """

    model: type[M]

    def validate(self, value: Any) -> M:
        try:
            return self.model.model_validate(value)
        except ValidationError as e:
            raise CastError(f"{self.describe()}: {format_validation_error(e)}", value) from e

    def describe(self) -> str:
        return f"PydanticSchema({self.model.__name__})"


def format_validation_error(error: ValidationError) -> str:
    """Render a pydantic ValidationError as 'loc: msg; loc: msg'."""
    parts = []
    for detail in error.errors():
        loc = ".".join(str(part) for part in detail["loc"]) or "<root>"
        parts.append(f"{loc}: {detail['msg']}")
    return "; ".join(parts)
