"""Promise extensions for structured value transformations."""

from typing import TypeVar

from promises.kernel.promise import Promise
from promises.structured.cast import make_cast_transform
from promises.structured.schema import OutputSchema

T = TypeVar("T")


def cast(self: Promise, schema: OutputSchema[T], parse_json: bool = True) -> Promise[T]:
    """Derive a promise holding the value validated by schema.

    The derived promise fulfills with the validated value, or rejects with
    the validation message. Rejections of this promise pass through
    unchanged.

    Text values (str and bytes) are decoded as JSON before validation
    unless parse_json is False, so resolving with "hello" and casting with
    the defaults rejects with "Invalid JSON: ...".

    Example:
        >>> from promises.structured import CallableSchema, PydanticSchema
        >>> user = response.cast(PydanticSchema(UserProfile))
        >>> name = label.cast(CallableSchema(str.strip), parse_json=False)
    """
    return self.map(make_cast_transform(schema, parse_json=parse_json))


# Register the cast operation
Promise.register_op("cast", cast)
