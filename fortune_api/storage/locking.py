"""
Reader/writer locking for the in-memory fortune mapping.
"""

import threading
from contextlib import contextmanager
from typing import Dict, Generic, Iterator, TypeVar

K = TypeVar("K")
V = TypeVar("V")


class ReadWriteLock:
    """Many concurrent readers or one writer.

    Waiting writers block new readers so a steady stream of reads cannot
    starve a write.
    """

    def __init__(self):
        self._cond = threading.Condition(threading.Lock())
        self._readers = 0
        self._writer = False
        self._writers_waiting = 0

    def acquire_read(self) -> None:
        with self._cond:
            while self._writer or self._writers_waiting:
                self._cond.wait()
            self._readers += 1

    def release_read(self) -> None:
        with self._cond:
            self._readers -= 1
            if self._readers == 0:
                self._cond.notify_all()

    def acquire_write(self) -> None:
        with self._cond:
            self._writers_waiting += 1
            try:
                while self._writer or self._readers:
                    self._cond.wait()
            finally:
                self._writers_waiting -= 1
            self._writer = True

    def release_write(self) -> None:
        with self._cond:
            self._writer = False
            self._cond.notify_all()

    @contextmanager
    def read_locked(self) -> Iterator[None]:
        self.acquire_read()
        try:
            yield
        finally:
            self.release_read()

    @contextmanager
    def write_locked(self) -> Iterator[None]:
        self.acquire_write()
        try:
            yield
        finally:
            self.release_write()


class LockedMapping(Generic[K, V]):
    """A dict that can only be reached while holding its lock.

    Usage:
        with mapping.read() as m:
            value = m.get(key)
        with mapping.write() as m:
            m[key] = value

    The yielded dict must not escape the with-block.
    """

    def __init__(self, initial: Dict[K, V] = None):
        self._data: Dict[K, V] = dict(initial or {})
        self._lock = ReadWriteLock()

    @contextmanager
    def read(self) -> Iterator[Dict[K, V]]:
        with self._lock.read_locked():
            yield self._data

    @contextmanager
    def write(self) -> Iterator[Dict[K, V]]:
        with self._lock.write_locked():
            yield self._data
