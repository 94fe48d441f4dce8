"""
Read/write lock allowing many concurrent readers or one writer.

The thread holding the write lock may acquire the read or write lock again
without blocking, so a locked mutating method may call other locked methods.
"""

import threading
from abc import ABC, abstractmethod


class LockError(RuntimeError):
    """Raised when a lock is released without being held."""


class ConcurrentModificationError(LockError):
    """Raised when the write lock is released by a thread that does not hold it."""


class SimpleLock(ABC):
    """
    One side (read or write) of a MultiReaderLock. Usable as a context manager:

        with lock.read_lock():
            ...
    """

    def __init__(self, owner: "MultiReaderLock") -> None:
        self._owner = owner

    @abstractmethod
    def acquire(self) -> None:
        ...

    @abstractmethod
    def release(self) -> None:
        ...

    def __enter__(self) -> "SimpleLock":
        self.acquire()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.release()


class _ReadLock(SimpleLock):
    def acquire(self) -> None:
        """Wait while a writer other than this thread is active, then add a reader."""
        owner = self._owner
        with owner._condition:
            while owner._writers > 0 and not owner._is_active_writer():
                owner._condition.wait()
            owner._readers += 1

    def release(self) -> None:
        owner = self._owner
        with owner._condition:
            if owner._readers <= 0:
                raise LockError("No readers to unlock")
            owner._readers -= 1
            if owner._readers == 0:
                owner._condition.notify_all()


class _WriteLock(SimpleLock):
    def acquire(self) -> None:
        """
        Wait while there are readers or writers and this thread is not the
        active writer, then record this thread as the active writer.
        """
        owner = self._owner
        with owner._condition:
            while (owner._readers > 0 or owner._writers > 0) and not owner._is_active_writer():
                owner._condition.wait()
            owner._writers += 1
            owner._active_writer = threading.get_ident()

    def release(self) -> None:
        owner = self._owner
        with owner._condition:
            if owner._writers <= 0:
                raise LockError("No writers to unlock")
            if not owner._is_active_writer():
                raise ConcurrentModificationError(
                    "Unlock called by a thread that does not hold the write lock"
                )
            owner._writers -= 1
            if owner._writers == 0:
                owner._active_writer = None
                owner._condition.notify_all()


class MultiReaderLock:
    """
    Pair of associated locks: read_lock() may be held by several threads at
    once while there is no writer; write_lock() is exclusive. The active
    writer can take either lock again while it holds the write lock.
    """

    def __init__(self) -> None:
        self._condition = threading.Condition(threading.Lock())
        self._readers = 0
        self._writers = 0
        self._active_writer: int | None = None
        self._read_lock = _ReadLock(self)
        self._write_lock = _WriteLock(self)

    def read_lock(self) -> SimpleLock:
        return self._read_lock

    def write_lock(self) -> SimpleLock:
        return self._write_lock

    @property
    def readers(self) -> int:
        """Number of active readers."""
        with self._condition:
            return self._readers

    @property
    def writers(self) -> int:
        """Number of active (re-entrant) write holds."""
        with self._condition:
            return self._writers

    def is_active_writer(self) -> bool:
        """Whether the calling thread currently holds the write lock."""
        with self._condition:
            return self._is_active_writer()

    def _is_active_writer(self) -> bool:
        # caller must hold self._condition
        return self._active_writer is not None and self._active_writer == threading.get_ident()
