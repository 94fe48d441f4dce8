"""Threaded inverted index search engine package."""

from .inverted_index import InvertedIndex, SearchResult
from .threaded_index import ThreadedInvertedIndex
from .multi_reader_lock import MultiReaderLock, LockError, ConcurrentModificationError
from .work_queue import WorkQueue
from .index_builder import build_index, build_index_threaded
from .web_crawler import WebCrawler
from .results import QueryResults, ThreadedQueryResults
from .tokenizer import list_stems, unique_stems, stem_token
