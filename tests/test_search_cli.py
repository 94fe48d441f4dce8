"""
Tests for the interactive search prompt.
"""
from searchengine.inverted_index import InvertedIndex
from searchengine.results import QueryResults
from searchengine.search_cli import run_search_loop


def _results():
    index = InvertedIndex()
    index.add_all(["cat", "dog"], "a.txt")
    index.add_all(["catalog"], "b.txt")
    return QueryResults(index)


def _feed(monkeypatch, lines):
    answers = iter(lines)

    def fake_input(prompt):
        try:
            return next(answers)
        except StopIteration:
            raise EOFError
    monkeypatch.setattr("builtins.input", fake_input)


def test_loop_prints_ranked_results(monkeypatch, capsys):
    results = _results()
    _feed(monkeypatch, ["cats", "!!!", "cat", ""])

    run_search_loop(results, partial=True, top_k=1)

    out = capsys.readouterr().out
    assert "partial search" in out
    assert "No valid terms in query." in out
    assert "Top 1 of 2 results:" in out
    assert " 1. score=1.00000000  count=1    b.txt" in out
    assert results.queries() == ("cat",)


def test_loop_stops_on_eof(monkeypatch, capsys):
    results = _results()
    _feed(monkeypatch, ["zebra"])

    run_search_loop(results)

    assert "No documents matched the query." in capsys.readouterr().out
    assert results.queries() == ("zebra",)
