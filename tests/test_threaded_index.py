"""
Tests for the thread-safe inverted index under concurrent readers and writers.
"""
import threading
import time

from searchengine.inverted_index import InvertedIndex
from searchengine.multi_reader_lock import _ReadLock
from searchengine.threaded_index import ThreadedInvertedIndex

WRITERS = 4
READERS = 8
ENTRIES = 2500


def test_readers_never_see_partial_updates():
    index = ThreadedInvertedIndex()
    done = threading.Event()
    errors = []

    def writer(number):
        location = f"loc{number}"
        for position in range(1, ENTRIES + 1):
            index.add_entry("word", location, position)

    def reader():
        while not done.is_set():
            for number in range(WRITERS):
                location = f"loc{number}"
                positions = index.positions("word", location)
                if positions != tuple(range(1, len(positions) + 1)):
                    errors.append(positions)
                    return
                if index.count(location) < len(positions):
                    errors.append((location, index.count(location), len(positions)))
                    return
            time.sleep(0.001)

    readers = [threading.Thread(target=reader) for _ in range(READERS)]
    writers = [threading.Thread(target=writer, args=(n,)) for n in range(WRITERS)]
    for thread in readers + writers:
        thread.start()
    for thread in writers:
        thread.join(timeout=60)
    done.set()
    for thread in readers:
        thread.join(timeout=60)

    assert errors == []
    for number in range(WRITERS):
        assert index.num_positions("word", f"loc{number}") == ENTRIES
        assert index.count(f"loc{number}") == ENTRIES
    assert index.lock.readers == 0
    assert index.lock.writers == 0


def test_add_all_reenters_write_lock():
    index = ThreadedInvertedIndex()
    thread = threading.Thread(target=index.add_all, args=(["a", "b", "a"], "doc"))
    thread.start()
    thread.join(timeout=5)

    assert not thread.is_alive()
    assert index.positions("a", "doc") == (1, 3)
    assert index.lock.writers == 0


def test_concurrent_merges():
    index = ThreadedInvertedIndex()

    def merge_part(number):
        part = InvertedIndex()
        part.add_all(["shared", f"own{number}"], f"doc{number}")
        index.merge(part)

    threads = [threading.Thread(target=merge_part, args=(n,)) for n in range(20)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join(timeout=10)

    assert index.num_locations("shared") == 20
    assert index.num_words() == 21
    assert index.counts() == {f"doc{n}": 2 for n in range(20)}


def test_merge_from_another_threaded_index():
    source = ThreadedInvertedIndex()
    source.add_all(["alpha", "beta"], "src")
    target = ThreadedInvertedIndex()
    target.merge(source)

    assert target.positions("beta", "src") == (2,)
    assert source.lock.readers == 0


def test_search_under_read_lock():
    index = ThreadedInvertedIndex()
    index.add_all(["cat", "catalog", "dog"], "a.txt")

    exact = index.search(["cat"])
    partial = index.search(["cat"], partial=True)

    assert exact[0].count == 1
    assert partial[0].count == 2
    assert index.lock.readers == 0


def test_cross_merges_do_not_deadlock(monkeypatch):
    first = ThreadedInvertedIndex()
    first.add_all(["left", "both"], "first.txt")
    second = ThreadedInvertedIndex()
    second.add_all(["right", "both"], "second.txt")

    # widen the window between taking one index's lock and the other's
    slow_acquire = _ReadLock.acquire

    def acquire(self):
        time.sleep(0.2)
        slow_acquire(self)

    monkeypatch.setattr(_ReadLock, "acquire", acquire)

    threads = [
        threading.Thread(target=first.merge, args=(second,)),
        threading.Thread(target=second.merge, args=(first,)),
    ]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join(timeout=5)

    assert not any(thread.is_alive() for thread in threads)
    monkeypatch.undo()
    assert first.locations("right") == ("second.txt",)
    assert second.locations("left") == ("first.txt",)
    assert first.lock.writers == 0 and second.lock.readers == 0
