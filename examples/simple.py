"""
Minimal example of the promise lifecycle.

This example shows:
1. Observers attached before settlement run in registration order
2. An observer attached after settlement runs immediately
3. map() deriving a promise from another one
4. A fulfillment observer short-circuiting the chain by rejecting
5. Trace enabled to inspect what happened
"""

from __future__ import annotations

import logging

from promises import Promise, PromiseConfig, Trace

logging.basicConfig(level=logging.DEBUG)


def lifecycle(config: PromiseConfig) -> None:
    download: Promise[bytes] = Promise(config=config, label="download")
    size = download.map(lambda body: len(body or b""))

    download.then(lambda body: print(f"received {body!r}")).fail(
        lambda error: print(f"download failed: {error}")
    ).done(lambda: print("download complete"))

    size.then(lambda n: print(f"size is {n} bytes"))

    download.resolve(b"hello")

    download.then(lambda body: print(f"late observer still sees {body!r}"))


def short_circuit(config: PromiseConfig) -> None:
    upload: Promise[int] = Promise(config=config, label="upload")

    def check_quota(used: int | None) -> None:
        if (used or 0) > 100:
            upload.reject("quota exceeded")

    upload.then(check_quota).then(lambda used: print("never printed")).fail(
        lambda error: print(f"upload rejected: {error}")
    ).done(lambda: print("never printed either"))

    upload.resolve(250)


if __name__ == "__main__":
    trace = Trace()
    config = PromiseConfig(trace=trace)

    lifecycle(config)
    short_circuit(config)

    print("\nTrace:")
    for event in trace.get_events():
        print(f"  {event.id:>2} parent={event.parent_id} {event.action} {event.info}")
