"""Per-user serialisation and bounded retries for application handlers.

Cart state is the only mutable per-user resource. Within a process every
read-modify-write of a cart, including order conversion, runs while holding
that user's lock; locks for different users are independent. Writers in
other processes are caught by the repositories, which reject a stale cart
or a second order from the same cart version with
ConcurrentModificationError; the handlers retry those.
"""

from __future__ import annotations

import threading
from contextlib import contextmanager
from typing import Callable, Iterator, TypeVar

T = TypeVar("T")


class UserLocks:
    """Arena of re-entrant locks keyed by user id."""

    def __init__(self) -> None:
        self._guard = threading.Lock()
        self._locks: dict[str, threading.RLock] = {}

    def lock_for(self, user_id: str) -> threading.RLock:
        with self._guard:
            lock = self._locks.get(user_id)
            if lock is None:
                lock = threading.RLock()
                self._locks[user_id] = lock
            return lock

    @contextmanager
    def hold(self, user_id: str) -> Iterator[None]:
        with self.lock_for(user_id):
            yield


def run_with_retry(
    func: Callable[[], T],
    *,
    attempts: int = 3,
    retry_on: tuple[type[BaseException], ...] = (Exception,),
    on_retry: Callable[[int, BaseException], None] | None = None,
) -> T:
    """Call ``func`` until it succeeds, at most ``attempts`` times.

    Only exceptions listed in ``retry_on`` are retried; the last one is
    re-raised once attempts run out. Retries are immediate.
    """
    for attempt in range(1, attempts + 1):
        try:
            return func()
        except retry_on as exc:
            if attempt >= attempts:
                raise
            if on_retry is not None:
                on_retry(attempt, exc)
    raise ValueError("attempts must be at least 1")
