"""
Per-tournament write locks.

Every mutating bracket operation is a load, change, save sequence over the
whole match list. Two writers doing that at once for the same tournament
would silently drop one update, so writers serialize on the tournament id:

- TournamentLockRegistry: in-process threading locks, one per tournament
- AdvisoryLockRegistry: PostgreSQL advisory locks, for several processes
  sharing one database

Both expose ``hold(tournament_id, timeout_seconds)`` as a context manager.
"""

from __future__ import annotations

import hashlib
import threading
import time
from contextlib import AbstractContextManager, contextmanager
from typing import Generator, Protocol

from sqlalchemy import text
from sqlalchemy.engine import Engine


class LockRegistry(Protocol):
    def hold(
        self, tournament_id: str, timeout_seconds: float = 0.0
    ) -> AbstractContextManager[None]:
        ...


def advisory_lock_key(name: str) -> int:
    """Return a deterministic signed 64-bit lock key from a name."""
    digest = hashlib.sha256(name.encode("utf-8")).digest()
    return int.from_bytes(digest[:8], byteorder="big", signed=True)


def tournament_lock_key(tournament_id: str) -> int:
    """Advisory lock key for a tournament's bracket."""
    return advisory_lock_key(f"ideabracket:tournament:{tournament_id}")


@contextmanager
def postgres_advisory_lock(
    engine: Engine,
    *,
    key: int,
    timeout_seconds: float = 0.0,
    poll_interval_seconds: float = 0.1,
) -> Generator[bool, None, None]:
    """
    Acquire a PostgreSQL advisory lock for the life of this context.

    Yields:
        True if lock acquired.

    Raises:
        TimeoutError: if lock cannot be acquired before timeout.
    """
    connection = engine.connect()
    acquired = False
    try:
        deadline = time.monotonic() + max(timeout_seconds, 0.0)
        while True:
            acquired = bool(
                connection.execute(
                    text("SELECT pg_try_advisory_lock(:key)"),
                    {"key": key},
                ).scalar()
            )
            if acquired:
                break
            if timeout_seconds <= 0:
                break
            if time.monotonic() >= deadline:
                break
            time.sleep(max(poll_interval_seconds, 0.01))

        if not acquired:
            raise TimeoutError(f"Could not acquire advisory lock key={key}")

        yield True
    finally:
        if acquired:
            connection.execute(
                text("SELECT pg_advisory_unlock(:key)"),
                {"key": key},
            )
        connection.close()


class TournamentLockRegistry:
    """One threading lock per tournament id, owned by this registry."""

    def __init__(self) -> None:
        self._guard = threading.Lock()
        self._locks: dict[str, threading.Lock] = {}

    def _lock_for(self, tournament_id: str) -> threading.Lock:
        with self._guard:
            lock = self._locks.get(tournament_id)
            if lock is None:
                lock = threading.Lock()
                self._locks[tournament_id] = lock
            return lock

    @contextmanager
    def hold(self, tournament_id: str, timeout_seconds: float = 0.0) -> Generator[None, None, None]:
        """
        Hold the tournament's lock.

        A timeout of 0 tries once without waiting.

        Raises:
            TimeoutError: the lock was not free within ``timeout_seconds``.
        """
        lock = self._lock_for(tournament_id)
        if timeout_seconds > 0:
            acquired = lock.acquire(timeout=timeout_seconds)
        else:
            acquired = lock.acquire(blocking=False)
        if not acquired:
            raise TimeoutError(f"Could not lock tournament {tournament_id}")
        try:
            yield
        finally:
            lock.release()


class AdvisoryLockRegistry:
    """Tournament locks shared across processes through PostgreSQL."""

    def __init__(self, engine: Engine, poll_interval_seconds: float = 0.1) -> None:
        self.engine = engine
        self.poll_interval_seconds = poll_interval_seconds

    @contextmanager
    def hold(self, tournament_id: str, timeout_seconds: float = 0.0) -> Generator[None, None, None]:
        with postgres_advisory_lock(
            self.engine,
            key=tournament_lock_key(tournament_id),
            timeout_seconds=timeout_seconds,
            poll_interval_seconds=self.poll_interval_seconds,
        ):
            yield
