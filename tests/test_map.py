from promises import Promise


def test_map_fulfills_with_transformed_value() -> None:
    p: Promise[int] = Promise()
    q = p.map(lambda x: x * 2)

    assert q.is_pending
    p.resolve(5)

    assert q.is_fulfilled
    assert q.value == 10


def test_map_passes_rejection_through_unchanged() -> None:
    calls: list[int | None] = []

    def double(x: int | None) -> int:
        calls.append(x)
        return (x or 0) * 2

    p: Promise[int] = Promise()
    q = p.map(double)
    errors: list[str] = []
    q.fail(errors.append)

    p.reject("upstream failed")

    assert calls == []
    assert q.is_rejected
    assert q.error_message == "upstream failed"
    assert errors == ["upstream failed"]


def test_map_on_settled_promise() -> None:
    assert Promise.resolved(3).map(lambda x: x + 1).value == 4
    assert Promise.rejected("e").map(lambda x: x).error_message == "e"


def test_map_transform_called_once() -> None:
    calls: list[int | None] = []
    p: Promise[int] = Promise()
    p.map(lambda x: calls.append(x))

    p.resolve(9)

    assert calls == [9]


def test_map_chain() -> None:
    p: Promise[str] = Promise()
    r = p.map(lambda s: len(s or "")).map(lambda n: n * 10).map(str)

    p.resolve("abcd")

    assert r.value == "40"


def test_map_transform_exception_rejects_derived() -> None:
    p: Promise[str] = Promise()
    q = p.map(lambda s: int(s or ""))

    p.resolve("not a number")

    assert p.is_fulfilled
    assert q.is_rejected
    assert "invalid literal" in (q.error_message or "")


def test_map_may_produce_none() -> None:
    p: Promise[int] = Promise()
    q = p.map(lambda x: None)

    p.resolve(1)

    assert q.is_fulfilled
    assert q.value is None


def test_map_keeps_outcome_when_source_short_circuits_later() -> None:
    p: Promise[int] = Promise()
    q = p.map(lambda x: x)
    p.then(lambda v: p.reject("late"))

    p.resolve(1)

    assert p.is_rejected
    assert q.is_fulfilled
    assert q.value == 1


def test_derived_promise_inherits_config_and_label() -> None:
    p: Promise[int] = Promise(label="source")
    q = p.map(lambda x: x)

    assert q.config is p.config
    assert q.label == "source.map"
