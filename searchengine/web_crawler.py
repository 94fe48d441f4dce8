"""
Web crawler: builds the inverted index from a seed URL and the pages it links to.

Pages are crawled breadth-first through the work queue until the page budget
is used up. The set of crawled URLs and the remaining budget are guarded by
the same lock, so concurrent tasks never schedule more than max_pages pages.
"""

import logging
import threading
from typing import Callable

from .config import DEFAULT_REDIRECTS
from .html_cleaner import strip_block_elements, strip_entities, strip_html, strip_tags
from .html_fetcher import fetch_html
from .link_finder import find_urls, normalize
from .threaded_index import ThreadedInvertedIndex
from .tokenizer import list_stems
from .work_queue import WorkQueue

logger = logging.getLogger(__name__)


class WebCrawler:
    """
    Crawls web pages into a shared ThreadedInvertedIndex.

    fetch and stem are injectable; by default pages are fetched with
    fetch_html() and words are stemmed with the Snowball English stemmer.
    """

    def __init__(
        self,
        queue: WorkQueue,
        index: ThreadedInvertedIndex,
        fetch: Callable[[str, int], str | None] = fetch_html,
        stem: Callable[[str], str] | None = None,
        redirects: int = DEFAULT_REDIRECTS,
    ) -> None:
        self._queue = queue
        self._index = index
        self._fetch = fetch
        self._stem = stem
        self._redirects = redirects

        self._crawled: set[str] = set()
        self._remaining = 0
        self._crawled_lock = threading.Lock()

    def crawled_urls(self) -> frozenset[str]:
        """Return the URLs crawled (or scheduled) so far."""
        with self._crawled_lock:
            return frozenset(self._crawled)

    @property
    def remaining(self) -> int:
        with self._crawled_lock:
            return self._remaining

    def build(self, seed: str, max_pages: int = 1) -> None:
        """
        Index seed. When max_pages > 1, also crawl the pages it links to until
        max_pages pages (seed included) have been scheduled, then wait for all
        of them to be indexed. Raises ValueError if seed is not a valid URL.
        """
        url = normalize(seed)
        if max_pages > 1:
            with self._crawled_lock:
                self._crawled.add(url)
                self._remaining = max_pages - 1
            self._queue.submit(self._crawl, url)
            self._queue.await_idle()
        else:
            with self._crawled_lock:
                self._crawled.add(url)
            self._single_page(url)
        logger.info("Crawled %d page(s) starting from %s", len(self.crawled_urls()), url)

    def _single_page(self, url: str) -> None:
        html = self._fetch(url, self._redirects)
        if html is not None:
            self._add_to_index(url, strip_html(html))

    def _crawl(self, url: str) -> None:
        """Task: fetch url, schedule newly found links, then index the page."""
        html = self._fetch(url, self._redirects)
        if html is None:
            logger.debug("No content from %s", url)
            return

        html = strip_block_elements(html)
        for link in find_urls(url, html):
            with self._crawled_lock:
                if self._remaining <= 0:
                    break
                if link in self._crawled:
                    continue
                self._crawled.add(link)
                self._remaining -= 1
            self._queue.submit(self._crawl, link)

        text = strip_entities(strip_tags(html))
        self._add_to_index(url, text)

    def _add_to_index(self, url: str, text: str) -> None:
        self._index.add_all(list_stems(text, self._stem), url)
