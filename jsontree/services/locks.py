# jsontree/services/locks.py
from __future__ import annotations
import os
import threading
from contextlib import contextmanager
from pathlib import Path
from typing import Dict, Iterator, List, Optional

from jsontree.errors import LockTimeoutError


class PathLockRegistry:
    """
    Process-wide map of resolved path -> exclusive lock.

    Entries are created on first use and reference counted by holders and
    waiters; the last one out evicts the entry, so the map only ever holds
    paths with an operation in flight. The map has its own lock, distinct
    from the per-path locks.
    """

    def __init__(self, timeout_sec: Optional[float] = None):
        self.timeout_sec = timeout_sec
        self._guard = threading.Lock()
        self._entries: Dict[str, List] = {}  # key -> [lock, refcount]

    def __len__(self) -> int:
        with self._guard:
            return len(self._entries)

    def _checkout(self, key: str) -> threading.Lock:
        with self._guard:
            entry = self._entries.get(key)
            if entry is None:
                entry = [threading.Lock(), 0]
                self._entries[key] = entry
            entry[1] += 1
            return entry[0]

    def _checkin(self, key: str):
        with self._guard:
            entry = self._entries[key]
            entry[1] -= 1
            if entry[1] == 0:
                del self._entries[key]

    @contextmanager
    def hold(self, path: Path) -> Iterator[None]:
        # Aliases reached through symlinks share the real file's lock
        key = os.path.realpath(path)
        lock = self._checkout(key)
        try:
            timeout = -1 if self.timeout_sec is None else self.timeout_sec
            if not lock.acquire(timeout=timeout):
                raise LockTimeoutError("Timed out waiting for document lock", key)
            try:
                yield
            finally:
                lock.release()
        finally:
            self._checkin(key)
