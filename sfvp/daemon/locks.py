"""Per-volume-name locking for the lifecycle driver."""

import threading
from contextlib import contextmanager
from typing import Dict, Iterator, List


class NamedLockTable:
    """Hand out one lock per name, dropping entries nobody holds or waits on.

    Operations on different names never block each other.
    """

    def __init__(self):
        self._table_lock = threading.Lock()
        # name -> [lock, number of holders and waiters]
        self._locks: Dict[str, List] = {}

    @contextmanager
    def hold(self, name: str) -> Iterator[None]:
        with self._table_lock:
            entry = self._locks.setdefault(name, [threading.Lock(), 0])
            entry[1] += 1

        entry[0].acquire()
        try:
            yield
        finally:
            entry[0].release()
            with self._table_lock:
                entry[1] -= 1
                if entry[1] == 0:
                    del self._locks[name]

    def __len__(self) -> int:
        with self._table_lock:
            return len(self._locks)
