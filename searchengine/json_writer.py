"""
Pretty JSON output for the word counts, the inverted index and search results.

Output format (two-space indent, keys in lexicographic order):
    counts:  {location: count}
    index:   {word: {location: [positions]}}
    results: {query: [{"count": int, "score": "0.66666667", "where": location}]}
"""

import json
from pathlib import Path
from typing import Any, Iterable, Mapping

from .config import SCORE_FORMAT


def format_score(score: float) -> str:
    return SCORE_FORMAT % score


def _counts_obj(counts: Mapping[str, int]) -> dict[str, int]:
    return {location: counts[location] for location in sorted(counts)}


def _index_obj(index: Mapping[str, Mapping[str, Iterable[int]]]) -> dict[str, dict[str, list[int]]]:
    return {
        word: {location: sorted(index[word][location]) for location in sorted(index[word])}
        for word in sorted(index)
    }


def _results_obj(results: Mapping[str, Iterable[Any] | None]) -> dict[str, list[dict]]:
    # queries still being computed (None) are left out
    return {
        query: [result.to_dict() for result in results[query]]
        for query in sorted(results)
        if results[query] is not None
    }


def _dumps(obj: Any) -> str:
    return json.dumps(obj, indent=2, ensure_ascii=False)


def _write(obj: Any, path: Path) -> None:
    path = Path(path)
    if path.parent and not path.parent.exists():
        path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        f.write(_dumps(obj))


def counts_to_json(counts: Mapping[str, int]) -> str:
    return _dumps(_counts_obj(counts))


def index_to_json(index: Mapping[str, Mapping[str, Iterable[int]]]) -> str:
    return _dumps(_index_obj(index))


def results_to_json(results: Mapping[str, Iterable[Any] | None]) -> str:
    return _dumps(_results_obj(results))


def write_counts(counts: Mapping[str, int], path: Path) -> None:
    """Write word counts per location to path."""
    _write(_counts_obj(counts), path)


def write_index(index: Mapping[str, Mapping[str, Iterable[int]]], path: Path) -> None:
    """Write the nested word -> location -> positions index to path."""
    _write(_index_obj(index), path)


def write_results(results: Mapping[str, Iterable[Any] | None], path: Path) -> None:
    """Write query -> ranked results to path."""
    _write(_results_obj(results), path)
