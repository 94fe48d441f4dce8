"""
Interactive command-line search over a built index.

Usage (from repo root):
    python build_index.py --text input/ --interactive
    python build_index.py --html https://example.com/ --crawl 20 --interactive --partial
"""

from __future__ import annotations

from .json_writer import format_score
from .results import QueryResults


def print_results(results, top_k: int = 10) -> None:
    if not results:
        print("No documents matched the query.")
        return
    print(f"Top {min(top_k, len(results))} of {len(results)} results:")
    for rank, result in enumerate(results[:top_k], start=1):
        print(f"{rank:2d}. score={format_score(result.score)}  count={result.count:<4d} {result.location}")


def run_search_loop(results: QueryResults, partial: bool = False, top_k: int = 10) -> None:
    """
    Prompt for queries until an empty line, EOF or Ctrl+C, printing the top
    results for each. Searched queries are kept in results for export.
    """
    mode = "partial" if partial else "exact"
    print(f"Enter queries ({mode} search). Empty line or Ctrl+C to exit.")

    while True:
        try:
            raw_query = input("query> ").strip()
        except (EOFError, KeyboardInterrupt):
            print()
            break
        if not raw_query:
            break

        stems, _ = results.normalize(raw_query)
        if not stems:
            print("No valid terms in query.")
            continue

        print_results(results.search(raw_query, partial), top_k=top_k)
