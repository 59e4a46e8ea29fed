"""Tests for structured value casting (Promise.cast)."""

from dataclasses import dataclass

import pytest
from pydantic import BaseModel, ValidationError

from promises import Promise
from promises.structured import (
    CallableSchema,
    CastError,
    DictSchema,
    PydanticSchema,
    format_validation_error,
    make_cast_transform,
    parse_json_if_needed,
)


@dataclass(frozen=True)
class UserProfile:
    name: str
    email: str


def parse_user_profile(data: dict) -> UserProfile:
    """Parse a user profile from a dict."""
    if not isinstance(data, dict):
        raise ValueError("Expected dict")
    for field in ("name", "email"):
        if field not in data:
            raise ValueError(f"Missing required field: {field}")
    return UserProfile(name=data["name"], email=data["email"])


class Order(BaseModel):
    item: str
    quantity: int


def test_parse_json_if_needed_with_string() -> None:
    assert parse_json_if_needed('{"a": 1}') == {"a": 1}


def test_parse_json_if_needed_with_dict() -> None:
    data = {"a": 1}
    assert parse_json_if_needed(data) is data


def test_parse_json_if_needed_with_invalid_json() -> None:
    with pytest.raises(CastError, match="Invalid JSON") as exc_info:
        parse_json_if_needed('{"a": invalid}')
    assert exc_info.value.raw_value == '{"a": invalid}'


def test_dict_schema_reports_missing_and_mistyped_fields() -> None:
    schema = DictSchema(required_fields={"name": str, "age": int})
    assert schema.validate({"name": "x", "age": 3}) == {"name": "x", "age": 3}
    assert schema.describe() == "DictSchema(name: str, age: int)"

    with pytest.raises(CastError, match="Missing required field: age"):
        schema.validate({"name": "x"})
    with pytest.raises(CastError, match="Field 'age' expected int, got str"):
        schema.validate({"name": "x", "age": "3"})
    with pytest.raises(CastError, match="Expected dict, got list"):
        schema.validate([])


def test_callable_schema_wraps_errors_in_cast_error() -> None:
    transform = make_cast_transform(CallableSchema(parse_user_profile))

    assert transform('{"name": "Ann", "email": "a@x.io"}') == UserProfile("Ann", "a@x.io")
    with pytest.raises(CastError, match="parse_user_profile: Missing required field: email"):
        transform({"name": "Ann"})


def test_pydantic_schema_flattens_validation_errors() -> None:
    schema = PydanticSchema(Order)
    assert schema.validate({"item": "tea", "quantity": 2}) == Order(item="tea", quantity=2)

    with pytest.raises(CastError) as exc_info:
        schema.validate({"item": "tea", "quantity": "many"})
    message = str(exc_info.value)
    assert message.startswith("PydanticSchema(Order): quantity:")
    assert isinstance(exc_info.value.__cause__, ValidationError)


def test_format_validation_error_lists_each_location() -> None:
    with pytest.raises(ValidationError) as exc_info:
        Order.model_validate({})
    assert format_validation_error(exc_info.value) == (
        "item: Field required; quantity: Field required"
    )


def test_cast_fulfills_with_validated_value() -> None:
    p: Promise[str] = Promise()
    order = p.cast(PydanticSchema(Order))

    p.resolve('{"item": "tea", "quantity": 2}')

    assert order.is_fulfilled
    assert order.value == Order(item="tea", quantity=2)


def test_cast_rejects_on_validation_failure() -> None:
    p: Promise[str] = Promise()
    errors: list[str] = []
    p.cast(DictSchema(required_fields={"id": int})).fail(errors.append)

    p.resolve('{"name": "no id"}')

    assert errors == ["Missing required field: id"]


def test_cast_passes_upstream_rejection_through() -> None:
    p: Promise[str] = Promise()
    order = p.cast(PydanticSchema(Order))

    p.reject("connection reset")

    assert order.error_message == "connection reset"


def test_cast_decodes_text_as_json_by_default() -> None:
    greeting = Promise.resolved("hello").cast(CallableSchema(str))

    assert greeting.is_rejected
    assert (greeting.error_message or "").startswith("Invalid JSON")


def test_cast_without_json_decoding_keeps_text() -> None:
    greeting = Promise.resolved(" hello ").cast(CallableSchema(str.strip), parse_json=False)

    assert greeting.value == "hello"
