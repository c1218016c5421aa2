"""Per-key exclusive sections.

Score inserts are serialized per (judge, submission) and re-ranks per group or
hackathon. Locks are process-local; the storage unique constraints cover
writers in other processes.
"""
from __future__ import annotations

import logging
import threading
from collections.abc import Hashable, Iterator
from contextlib import contextmanager

logger = logging.getLogger(__name__)


class KeyedLocks:
    def __init__(self) -> None:
        self._guard = threading.Lock()
        self._locks: dict[Hashable, threading.RLock] = {}
        self._holders: dict[Hashable, int] = {}

    def _acquire_entry(self, key: Hashable) -> threading.RLock:
        with self._guard:
            lock = self._locks.get(key)
            if lock is None:
                lock = threading.RLock()
                self._locks[key] = lock
            self._holders[key] = self._holders.get(key, 0) + 1
            return lock

    def _release_entry(self, key: Hashable) -> None:
        with self._guard:
            remaining = self._holders[key] - 1
            if remaining:
                self._holders[key] = remaining
            else:
                del self._holders[key]
                del self._locks[key]

    @contextmanager
    def hold(self, key: Hashable) -> Iterator[None]:
        lock = self._acquire_entry(key)
        lock.acquire()
        try:
            yield
        finally:
            lock.release()
            self._release_entry(key)

    def __len__(self) -> int:
        with self._guard:
            return len(self._locks)


def score_key(judge_id: int, submission_id: int) -> tuple[str, int, int]:
    return ("score", judge_id, submission_id)


def group_key(group_id: int) -> tuple[str, int]:
    return ("group", group_id)


def hackathon_key(hackathon_id: int) -> tuple[str, int]:
    return ("hackathon", hackathon_id)


# Shared by every service instance in the process.
DEFAULT_LOCKS = KeyedLocks()
