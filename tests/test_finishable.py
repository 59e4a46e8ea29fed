import pytest

from promises import Finishable, IllegalStateError, Promise


def test_fail_returns_finishable_with_done_only() -> None:
    p: Promise[int] = Promise()
    handle = p.then(lambda v: None).fail(lambda e: None)

    assert isinstance(handle, Finishable)
    assert not hasattr(handle, "then")
    assert not hasattr(handle, "fail")


def test_done_runs_after_all_then_observers() -> None:
    calls: list[str] = []
    p: Promise[int] = Promise()
    p.then(lambda v: calls.append(f"then:{v}")).fail(lambda e: calls.append("fail")).done(
        lambda: calls.append("done")
    )

    p.resolve(1)

    assert calls == ["then:1", "done"]


def test_done_never_runs_on_rejection() -> None:
    calls: list[str] = []
    p: Promise[int] = Promise()
    p.fail(lambda e: calls.append("fail")).done(lambda: calls.append("done"))

    p.reject("x")

    assert calls == ["fail"]


def test_done_skipped_when_observer_rejects() -> None:
    calls: list[str] = []
    p: Promise[int] = Promise()
    p.then(lambda v: p.reject("halt")).fail(lambda e: calls.append(e)).done(
        lambda: calls.append("done")
    )

    p.resolve(1)

    assert calls == ["halt"]


def test_done_after_fulfillment_runs_immediately() -> None:
    calls: list[str] = []
    p: Promise[int] = Promise.resolved(2)

    p.fail(lambda e: None).done(lambda: calls.append("done"))

    assert calls == ["done"]


def test_done_after_rejection_never_runs() -> None:
    calls: list[str] = []
    p: Promise[int] = Promise.rejected("gone")

    p.fail(lambda e: None).done(lambda: calls.append("done"))

    assert calls == []


def test_second_done_faults() -> None:
    p: Promise[int] = Promise()
    p.fail(lambda e: None).done(lambda: None)

    with pytest.raises(IllegalStateError, match="done callback is already registered"):
        p.fail(lambda e: None).done(lambda: None)


def test_done_error_propagates_to_producer() -> None:
    p: Promise[int] = Promise()

    def explode() -> None:
        raise RuntimeError("done broke")

    p.fail(lambda e: None).done(explode)

    with pytest.raises(RuntimeError, match="done broke"):
        p.resolve(1)

    assert p.is_fulfilled


def test_done_error_at_registration_propagates() -> None:
    p: Promise[int] = Promise.resolved(1)

    def explode() -> None:
        raise RuntimeError("done broke")

    with pytest.raises(RuntimeError, match="done broke"):
        p.fail(lambda e: None).done(explode)
