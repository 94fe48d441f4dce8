"""
Build an inverted index from text files and/or a web crawl, search it, and
write the counts, index and results as pretty JSON.

Usage:
    python build_index.py --text input/text --counts --index
    python build_index.py --text input/text --threads 8 --query queries.txt --partial --results
    python build_index.py --html https://example.com/ --crawl 50 --index out/index.json
    python build_index.py --text input/text --interactive

Output (each only when its flag is given):
  - counts.json   (location -> number of words)
  - index.json    (word -> location -> positions)
  - results.json  (query -> ranked results)
"""

import argparse
import logging
import sys
from pathlib import Path

from searchengine import config, json_writer
from searchengine.index_builder import build_index, build_index_threaded
from searchengine.inverted_index import InvertedIndex
from searchengine.results import QueryResults, ThreadedQueryResults
from searchengine.search_cli import run_search_loop
from searchengine.threaded_index import ThreadedInvertedIndex
from searchengine.web_crawler import WebCrawler
from searchengine.work_queue import WorkQueue

logger = logging.getLogger("build_index")


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Build and search an inverted index")
    parser.add_argument("--text", type=Path, default=None,
                        help="Text file or directory of .txt/.text files to index")
    parser.add_argument("--html", default=None, help="Seed URL to crawl")
    parser.add_argument("--crawl", type=int, default=1,
                        help="Maximum number of pages to crawl from the seed (default: 1)")
    parser.add_argument("--threads", type=int, nargs="?", const=config.DEFAULT_THREADS, default=None,
                        help=f"Use a work queue with this many threads (default: {config.DEFAULT_THREADS})")
    parser.add_argument("--query", type=Path, default=None, help="File of queries, one per line")
    parser.add_argument("--partial", action="store_true", help="Partial (prefix) search instead of exact")
    parser.add_argument("--counts", type=Path, nargs="?", const=Path(config.COUNTS_FILE), default=None,
                        help=f"Write word counts (default: {config.COUNTS_FILE})")
    parser.add_argument("--index", type=Path, nargs="?", const=Path(config.INDEX_FILE), default=None,
                        help=f"Write the inverted index (default: {config.INDEX_FILE})")
    parser.add_argument("--results", type=Path, nargs="?", const=Path(config.RESULTS_FILE), default=None,
                        help=f"Write search results (default: {config.RESULTS_FILE})")
    parser.add_argument("--interactive", action="store_true", help="Start an interactive search prompt")
    parser.add_argument("--log-level", default="INFO", help="Logging level (default: INFO)")
    return parser.parse_args(argv)


def main(argv=None) -> int:
    args = parse_args(argv)

    logging.basicConfig(
        level=getattr(logging, str(args.log_level).upper(), logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )

    queue = None
    if args.threads is not None or args.html:
        queue = WorkQueue(args.threads if args.threads is not None else config.DEFAULT_THREADS)
        index = ThreadedInvertedIndex()
        results = ThreadedQueryResults(index, queue)
    else:
        index = InvertedIndex()
        results = QueryResults(index)

    try:
        if args.html:
            crawler = WebCrawler(queue, index)
            try:
                crawler.build(args.html, args.crawl if args.crawl else 1)
            except ValueError as e:
                logger.error("Failed to read link %s: %s", args.html, e)

        if args.text is not None:
            if queue is not None:
                build_index_threaded(args.text, index, queue)
            else:
                build_index(args.text, index)
            logger.info("Index has %d words in %d locations", index.num_words(), index.num_counts())

        if args.query is not None:
            try:
                results.read_queries(args.query, args.partial)
            except (OSError, UnicodeDecodeError) as e:
                logger.error("Unable to read queries from %s: %s", args.query, e)

        if args.interactive:
            run_search_loop(results, partial=args.partial)
    finally:
        if queue is not None:
            queue.shutdown_and_wait()

    if args.counts is not None:
        try:
            index.write_counts(lambda counts: json_writer.write_counts(counts, args.counts))
        except OSError as e:
            logger.error("Unable to write counts to %s: %s", args.counts, e)

    if args.index is not None:
        try:
            index.write_index(lambda words: json_writer.write_index(words, args.index))
        except OSError as e:
            logger.error("Unable to write index to %s: %s", args.index, e)

    if args.results is not None:
        try:
            results.write_results(args.results)
        except OSError as e:
            logger.error("Unable to write results to %s: %s", args.results, e)

    return 0


if __name__ == "__main__":
    sys.exit(main())
