"""
Caller-supplied deadlines for outbound calls.

A deadline set with `call_deadline()` applies to every executor call made in
the same context (thread) until the block exits. It bounds both the
rate-limiter admission wait and the network timeout of each attempt.

    with call_deadline(10.0):
        provider.get_series_metadata(series_id)
"""

from __future__ import annotations

import time
from collections.abc import Iterator
from contextlib import contextmanager
from contextvars import ContextVar

_deadline_var: ContextVar[float | None] = ContextVar("seriesmeta_call_deadline", default=None)


@contextmanager
def call_deadline(seconds: float) -> Iterator[float]:
    if seconds <= 0:
        raise ValueError(f"Deadline must be positive (got {seconds!r}).")

    deadline = time.monotonic() + float(seconds)
    outer = _deadline_var.get()
    if outer is not None:
        # Nested deadlines can only tighten the outer one.
        deadline = min(deadline, outer)

    token = _deadline_var.set(deadline)
    try:
        yield deadline
    finally:
        _deadline_var.reset(token)


def remaining_seconds() -> float | None:
    deadline = _deadline_var.get()
    if deadline is None:
        return None
    return deadline - time.monotonic()
