"""
Tests for the web crawler with an in-memory fake web instead of the network.
"""
import threading

import pytest

from searchengine.threaded_index import ThreadedInvertedIndex
from searchengine.web_crawler import WebCrawler


class FakeWeb:
    """Every page links to `fanout` new pages below it."""

    def __init__(self, fanout=5, missing=()):
        self.fanout = fanout
        self.missing = set(missing)
        self.fetched = []
        self._lock = threading.Lock()

    def __call__(self, url, redirects):
        with self._lock:
            self.fetched.append(url)
        if url in self.missing:
            return None
        links = "".join(
            f'<li><a href="{url.rstrip("/")}/p{i}#frag">next page</a></li>' for i in range(self.fanout)
        )
        return (
            "<html><head><title>ignored title</title>"
            "<script>var hidden = 1;</script></head>"
            f"<body><p>Hello crawling world</p><ul>{links}</ul></body></html>"
        )


SEED = "https://site.test/start"


@pytest.mark.parametrize("max_pages", [2, 3, 7, 30])
def test_crawl_respects_page_budget(queue, max_pages):
    web = FakeWeb(fanout=5)
    index = ThreadedInvertedIndex()
    crawler = WebCrawler(queue, index, fetch=web)

    crawler.build(SEED, max_pages)

    assert len(crawler.crawled_urls()) == max_pages
    assert len(web.fetched) == max_pages
    assert len(set(web.fetched)) == max_pages
    assert SEED in crawler.crawled_urls()
    assert index.num_counts() == max_pages
    assert crawler.remaining == 0
    assert queue.pending == 0


def test_crawled_pages_are_indexed_as_text(queue):
    web = FakeWeb(fanout=2)
    index = ThreadedInvertedIndex()
    crawler = WebCrawler(queue, index, fetch=web)

    crawler.build(SEED, 3)

    assert index.positions("hello", SEED) == (1,)
    assert index.positions("crawl", SEED) == (2,)
    # paragraph (3 words) + 2 links (2 words each)
    assert index.count(SEED) == 7
    assert not index.contains_word("ignor")
    assert not index.contains_word("hidden")
    assert crawler.crawled_urls() == {SEED, SEED + "/p0", SEED + "/p1"}


def test_single_page_mode_does_not_follow_links(queue):
    web = FakeWeb(fanout=5)
    index = ThreadedInvertedIndex()
    crawler = WebCrawler(queue, index, fetch=web)

    crawler.build(SEED + "#top", 1)

    assert web.fetched == [SEED]
    assert index.locations("hello") == (SEED,)
    assert crawler.crawled_urls() == {SEED}


def test_missing_pages_add_nothing(queue):
    web = FakeWeb(fanout=3, missing={SEED + "/p1"})
    index = ThreadedInvertedIndex()
    crawler = WebCrawler(queue, index, fetch=web)

    crawler.build(SEED, 4)

    assert len(crawler.crawled_urls()) == 4
    assert not index.contains_count(SEED + "/p1")
    assert index.num_counts() == 3


def test_seed_without_content(queue):
    web = FakeWeb(missing={SEED})
    index = ThreadedInvertedIndex()
    crawler = WebCrawler(queue, index, fetch=web)

    crawler.build(SEED, 10)

    assert crawler.crawled_urls() == {SEED}
    assert index.num_words() == 0


def test_custom_stemmer(queue):
    index = ThreadedInvertedIndex()
    crawler = WebCrawler(queue, index, fetch=FakeWeb(fanout=0), stem=str.upper)
    crawler.build(SEED, 1)
    assert index.contains_word("HELLO")
