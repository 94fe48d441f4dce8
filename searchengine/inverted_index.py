"""
Inverted index data structures.

The index maps word stem -> location -> ascending, unique 1-based positions,
and keeps the largest position seen for each location as its word count.
Search results are computed from the index on demand and never stored in it.
"""

import bisect
from dataclasses import dataclass, field
from typing import Callable, Iterable, Mapping

from . import json_writer


@dataclass
class SearchResult:
    """
    A single search result for one location.
    - count: number of matching positions over all matched words
    - score: count divided by the word count of the location
    """

    location: str
    total: int = field(repr=False, default=0)
    count: int = 0
    score: float = 0.0

    def update(self, matches: int) -> None:
        """Add matches to the count and recompute the score."""
        self.count += matches
        self.score = self.count / self.total if self.total else 0.0

    def sort_key(self) -> tuple[float, int, str]:
        return (-self.score, -self.count, self.location.lower())

    def to_dict(self) -> dict:
        """Serialize to the JSON-ready form used in results files."""
        return {
            "count": self.count,
            "score": json_writer.format_score(self.score),
            "where": self.location,
        }


class InvertedIndex:
    """
    Inverted index: word -> {location -> [positions]}, plus location -> word count.
    Not thread safe; see ThreadedInvertedIndex for the locked version.
    """

    def __init__(self) -> None:
        self._index: dict[str, dict[str, list[int]]] = {}
        self._counts: dict[str, int] = {}
        # words in sorted order, for prefix scans and ordered views
        self._words: list[str] = []

    # ------------------------------------------------------------------ views

    def words(self) -> tuple[str, ...]:
        """Return all words in sorted order."""
        return tuple(self._words)

    def locations(self, word: str) -> tuple[str, ...]:
        """Return the sorted locations containing word, or an empty tuple."""
        return tuple(sorted(self._index.get(word, ())))

    def positions(self, word: str, location: str) -> tuple[int, ...]:
        """Return the positions of word in location, or an empty tuple."""
        return tuple(self._index.get(word, {}).get(location, ()))

    def counts(self) -> dict[str, int]:
        """Return a sorted copy of the word counts per location."""
        return dict(sorted(self._counts.items()))

    def count(self, location: str) -> int:
        """Return the word count of location, or 0 if it is unknown."""
        return self._counts.get(location, 0)

    def contains_word(self, word: str) -> bool:
        return word in self._index

    def contains_location(self, word: str, location: str) -> bool:
        return location in self._index.get(word, {})

    def contains_position(self, word: str, location: str, position: int) -> bool:
        positions = self._index.get(word, {}).get(location)
        if not positions:
            return False
        i = bisect.bisect_left(positions, position)
        return i < len(positions) and positions[i] == position

    def contains_count(self, location: str) -> bool:
        return location in self._counts

    def num_words(self) -> int:
        return len(self._index)

    def num_locations(self, word: str) -> int:
        return len(self._index.get(word, ()))

    def num_positions(self, word: str, location: str) -> int:
        return len(self._index.get(word, {}).get(location, ()))

    def num_counts(self) -> int:
        return len(self._counts)

    def __len__(self) -> int:
        return self.num_words()

    def __contains__(self, word: str) -> bool:
        return self.contains_word(word)

    def __str__(self) -> str:
        return (
            "Counts: " + json_writer.counts_to_json(self._counts)
            + "\nIndex: " + json_writer.index_to_json(self._index)
        )

    # ----------------------------------------------------------------- export

    def write_counts(self, writer: Callable[[Mapping[str, int]], None]) -> None:
        """Pass the live counts to writer (e.g. a json_writer function bound to a path)."""
        writer(self._counts)

    def write_index(self, writer: Callable[[Mapping[str, Mapping[str, list[int]]]], None]) -> None:
        """Pass the live index to writer."""
        writer(self._index)

    # --------------------------------------------------------------- mutators

    def add_entry(self, word: str, location: str, position: int) -> None:
        """
        Record that word appears in location at position.
        Raises ValueError if position is not 1 or greater.
        """
        if position < 1:
            raise ValueError(f"Position must be at least 1, got {position} for {location}")
        locations = self._index.get(word)
        if locations is None:
            locations = {}
            self._index[word] = locations
            bisect.insort(self._words, word)
        positions = locations.get(location)
        if positions is None:
            positions = []
            locations[location] = positions
        _insert_position(positions, position)
        if self._counts.get(location, 0) < position:
            self._counts[location] = position

    def add_all(self, words: Iterable[str], location: str) -> None:
        """Add every word of a location, at positions 1, 2, 3, ..."""
        for position, word in enumerate(words, start=1):
            self.add_entry(word, location, position)

    def merge(self, other: "InvertedIndex") -> None:
        """
        Add all postings from another index into this one. Positions are
        unioned; counts of the same location are summed, since the other
        index is expected to hold a separate, non-overlapping partial build.
        """
        for word, other_locations in other._index.items():
            locations = self._index.get(word)
            if locations is None:
                self._index[word] = {loc: list(pos) for loc, pos in other_locations.items()}
                bisect.insort(self._words, word)
                continue
            for location, other_positions in other_locations.items():
                positions = locations.get(location)
                if positions is None:
                    locations[location] = list(other_positions)
                else:
                    locations[location] = sorted(set(positions).union(other_positions))
        for location, count in other._counts.items():
            self._counts[location] = self._counts.get(location, 0) + count

    # ----------------------------------------------------------------- search

    def search(self, queries: Iterable[str], partial: bool = False) -> list[SearchResult]:
        """Run an exact or partial (prefix) search for the given query stems."""
        if partial:
            return self.partial_search(queries)
        return self.exact_search(queries)

    def exact_search(self, queries: Iterable[str]) -> list[SearchResult]:
        """Match each query stem exactly against the index words."""
        results: list[SearchResult] = []
        lookup: dict[str, SearchResult] = {}
        for query in queries:
            self._collect_results(query, results, lookup)
        results.sort(key=SearchResult.sort_key)
        return results

    def partial_search(self, queries: Iterable[str]) -> list[SearchResult]:
        """Match every index word that starts with one of the query stems."""
        results: list[SearchResult] = []
        lookup: dict[str, SearchResult] = {}
        for query in queries:
            for word in self._words_with_prefix(query):
                self._collect_results(word, results, lookup)
        results.sort(key=SearchResult.sort_key)
        return results

    def _words_with_prefix(self, prefix: str) -> Iterable[str]:
        # range scan over the sorted words, starting at the first word >= prefix
        start = bisect.bisect_left(self._words, prefix)
        for i in range(start, len(self._words)):
            word = self._words[i]
            if not word.startswith(prefix):
                break
            yield word

    def _collect_results(
        self,
        word: str,
        results: list[SearchResult],
        lookup: dict[str, SearchResult],
    ) -> None:
        locations = self._index.get(word)
        if locations is None:
            return
        for location, positions in locations.items():
            result = lookup.get(location)
            if result is None:
                result = SearchResult(location, total=self._counts[location])
                results.append(result)
                lookup[location] = result
            result.update(len(positions))


def _insert_position(positions: list[int], position: int) -> None:
    """Insert position into an ascending list, keeping it free of duplicates."""
    if not positions or positions[-1] < position:
        positions.append(position)
        return
    i = bisect.bisect_left(positions, position)
    if positions[i] != position:
        positions.insert(i, position)
