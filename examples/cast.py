#!/usr/bin/env python3
"""
Promise.cast() example - validated derived promises.

cast() is map() with a schema: the derived promise fulfills with the
validated value or rejects with a readable validation message. Text values
are decoded as JSON before validation.
"""

from __future__ import annotations

from pydantic import BaseModel

from promises import Promise
from promises.structured import DictSchema, PydanticSchema


class Order(BaseModel):
    item: str
    quantity: int


def report(label: str, promise: Promise) -> None:
    promise.then(lambda value: print(f"{label}: ok -> {value!r}")).fail(
        lambda error: print(f"{label}: rejected -> {error}")
    )


if __name__ == "__main__":
    good: Promise[str] = Promise()
    bad: Promise[str] = Promise()

    report("pydantic", good.cast(PydanticSchema(Order)))
    report("dict", bad.cast(DictSchema(required_fields={"item": str, "quantity": int})))

    good.resolve('{"item": "tea", "quantity": 2}')
    bad.resolve('{"item": "tea", "quantity": "two"}')
