"""
Query results: normalizes query lines, runs them against an index and keeps
query -> ranked results for later viewing and export.

ThreadedQueryResults runs queries on a WorkQueue and makes sure each distinct
normalized query is searched at most once, even when the same query arrives
from several threads at the same time.
"""

import logging
import threading
from pathlib import Path
from typing import Callable

from . import json_writer
from .inverted_index import InvertedIndex, SearchResult
from .threaded_index import ThreadedInvertedIndex
from .tokenizer import unique_stems
from .work_queue import WorkQueue

logger = logging.getLogger(__name__)


class QueryResults:
    """Single-threaded store of query -> search results."""

    def __init__(self, index: InvertedIndex, stem: Callable[[str], str] | None = None) -> None:
        self._index = index
        self._stem = stem
        self._results: dict[str, list[SearchResult] | None] = {}

    def normalize(self, line: str) -> tuple[list[str], str]:
        """Return the sorted unique stems of line and the query key built from them."""
        stems = unique_stems(line, self._stem)
        return stems, " ".join(stems)

    def search(self, line: str, partial: bool = False) -> list[SearchResult]:
        """Search for line (once per normalized query) and return its results."""
        stems, query = self.normalize(line)
        if not stems:
            return []
        results = self._results.get(query)
        if results is None:
            results = self._index.search(stems, partial)
            self._results[query] = results
        return results

    def read_queries(self, path: Path, partial: bool = False) -> None:
        """Search every line of a UTF-8 query file."""
        with open(path, "r", encoding="utf-8") as f:
            for line in f:
                self.search(line, partial)

    def queries(self) -> tuple[str, ...]:
        """Return the normalized queries searched so far, sorted."""
        return tuple(sorted(self._results))

    def results(self, line: str) -> tuple[SearchResult, ...]:
        """Return the results for a raw query line, or an empty tuple."""
        _, query = self.normalize(line)
        return tuple(self._results.get(query) or ())

    def contains_query(self, line: str) -> bool:
        _, query = self.normalize(line)
        return query in self._results

    def num_queries(self) -> int:
        return len(self._results)

    def num_results(self, line: str) -> int:
        return len(self.results(line))

    def write_results(self, path: Path) -> None:
        json_writer.write_results(self._results, path)

    def __str__(self) -> str:
        return json_writer.results_to_json(self._results)


class ThreadedQueryResults(QueryResults):
    """
    Thread-safe query results backed by a work queue.

    A placeholder (None) is stored under the query key before the search runs
    outside the lock; other threads asking for the same query wait for the
    real results instead of searching again.
    """

    def __init__(
        self,
        index: ThreadedInvertedIndex,
        queue: WorkQueue,
        stem: Callable[[str], str] | None = None,
    ) -> None:
        super().__init__(index, stem)
        self._queue = queue
        self._lock = threading.Condition()

    def submit(self, line: str, partial: bool = False) -> None:
        """Queue a search for line on the work queue."""
        self._queue.submit(self.search, line, partial)

    def search(self, line: str, partial: bool = False) -> list[SearchResult]:
        stems, query = self.normalize(line)
        if not stems:
            return []

        with self._lock:
            if query in self._results:
                while self._results.get(query, ()) is None:
                    self._lock.wait()
                if query in self._results:
                    return self._results[query]
            self._results[query] = None

        try:
            results = self._index.search(stems, partial)
        except BaseException:
            with self._lock:
                del self._results[query]
                self._lock.notify_all()
            raise

        with self._lock:
            self._results[query] = results
            self._lock.notify_all()
        return results

    def read_queries(self, path: Path, partial: bool = False) -> None:
        """Queue every line of a query file and wait for all of them to finish."""
        with open(path, "r", encoding="utf-8") as f:
            for line in f:
                self.submit(line, partial)
        self._queue.await_idle()

    def queries(self) -> tuple[str, ...]:
        with self._lock:
            return super().queries()

    def results(self, line: str) -> tuple[SearchResult, ...]:
        _, query = self.normalize(line)
        with self._lock:
            return tuple(self._results.get(query) or ())

    def contains_query(self, line: str) -> bool:
        _, query = self.normalize(line)
        with self._lock:
            return query in self._results

    def num_queries(self) -> int:
        with self._lock:
            return super().num_queries()

    def write_results(self, path: Path) -> None:
        with self._lock:
            super().write_results(path)

    def __str__(self) -> str:
        with self._lock:
            return super().__str__()
