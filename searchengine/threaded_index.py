"""
Thread-safe inverted index.

Every InvertedIndex operation is wrapped with the read or write side of a
MultiReaderLock; the index logic itself is inherited unchanged.
"""

import functools

from .inverted_index import InvertedIndex
from .multi_reader_lock import MultiReaderLock


def _reading(method):
    """Run method while holding the read lock."""

    @functools.wraps(method)
    def wrapper(self, *args, **kwargs):
        with self._lock.read_lock():
            return method(self, *args, **kwargs)

    return wrapper


def _writing(method):
    """Run method while holding the write lock."""

    @functools.wraps(method)
    def wrapper(self, *args, **kwargs):
        with self._lock.write_lock():
            return method(self, *args, **kwargs)

    return wrapper


class ThreadedInvertedIndex(InvertedIndex):
    """InvertedIndex safe to share between threads (many readers, one writer)."""

    def __init__(self) -> None:
        super().__init__()
        self._lock = MultiReaderLock()

    @property
    def lock(self) -> MultiReaderLock:
        return self._lock

    words = _reading(InvertedIndex.words)
    locations = _reading(InvertedIndex.locations)
    positions = _reading(InvertedIndex.positions)
    counts = _reading(InvertedIndex.counts)
    count = _reading(InvertedIndex.count)
    contains_word = _reading(InvertedIndex.contains_word)
    contains_location = _reading(InvertedIndex.contains_location)
    contains_position = _reading(InvertedIndex.contains_position)
    contains_count = _reading(InvertedIndex.contains_count)
    num_words = _reading(InvertedIndex.num_words)
    num_locations = _reading(InvertedIndex.num_locations)
    num_positions = _reading(InvertedIndex.num_positions)
    num_counts = _reading(InvertedIndex.num_counts)
    __str__ = _reading(InvertedIndex.__str__)

    write_counts = _reading(InvertedIndex.write_counts)
    write_index = _reading(InvertedIndex.write_index)

    exact_search = _reading(InvertedIndex.exact_search)
    partial_search = _reading(InvertedIndex.partial_search)

    add_entry = _writing(InvertedIndex.add_entry)
    add_all = _writing(InvertedIndex.add_all)

    def merge(self, other: InvertedIndex) -> None:
        # copy a shared source under its own lock first; never hold both locks
        if isinstance(other, ThreadedInvertedIndex) and other is not self:
            snapshot = InvertedIndex()
            with other._lock.read_lock():
                InvertedIndex.merge(snapshot, other)
            other = snapshot
        with self._lock.write_lock():
            InvertedIndex.merge(self, other)
