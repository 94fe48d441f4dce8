"""
Index builder: walks a file tree and adds the stems of every text file to an
inverted index.

The sequential builder adds words straight into the given index. The threaded
builder submits one task per file to a WorkQueue; each task builds a private
index for its file and merges it into the shared index, so the write lock is
taken once per file instead of once per word.
"""

import logging
from pathlib import Path
from typing import Callable

from .config import TEXT_EXTENSIONS
from .inverted_index import InvertedIndex
from .threaded_index import ThreadedInvertedIndex
from .tokenizer import list_file_stems
from .work_queue import WorkQueue

logger = logging.getLogger(__name__)


def is_text_file(path: Path) -> bool:
    """Return True for .txt / .text files (case-insensitive)."""
    return str(path).lower().endswith(TEXT_EXTENSIONS)


def _iter_text_files(path: Path):
    """Yield the text files under a directory, recursing into subdirectories."""
    try:
        children = sorted(path.iterdir())
    except OSError as e:
        logger.warning("Could not list %s: %s", path, e)
        return
    for child in children:
        if child.is_dir():
            yield from _iter_text_files(child)
        elif is_text_file(child):
            yield child


def process_file(
    filepath: Path,
    index: InvertedIndex,
    stem: Callable[[str], str] | None = None,
) -> None:
    """
    Add the stems of a single file to index, at positions 1, 2, 3, ...
    The location is the path as given. Raises OSError / UnicodeDecodeError.
    """
    index.add_all(list_file_stems(filepath, stem), str(filepath))


def build_index(
    path: Path,
    index: InvertedIndex,
    stem: Callable[[str], str] | None = None,
) -> int:
    """
    Build index from path: a directory is traversed recursively for text
    files, anything else is processed as a single file.
    Unreadable files are logged and skipped.
    Returns the number of files added.
    """
    path = Path(path)
    files = _iter_text_files(path) if path.is_dir() else [path]
    added = 0
    for filepath in files:
        try:
            process_file(filepath, index, stem)
        except (OSError, UnicodeDecodeError) as e:
            logger.warning("Could not read %s: %s", filepath, e)
            continue
        added += 1
    return added


def _process_file_task(
    filepath: Path,
    index: ThreadedInvertedIndex,
    stem: Callable[[str], str] | None,
) -> None:
    local = InvertedIndex()
    try:
        process_file(filepath, local, stem)
    except (OSError, UnicodeDecodeError) as e:
        logger.warning("Could not read %s: %s", filepath, e)
        return
    index.merge(local)


def build_index_threaded(
    path: Path,
    index: ThreadedInvertedIndex,
    queue: WorkQueue,
    stem: Callable[[str], str] | None = None,
) -> int:
    """
    Build index from path using the work queue, one task per text file.
    Waits for the queue to be idle before returning.
    Returns the number of files submitted.
    """
    path = Path(path)
    files = _iter_text_files(path) if path.is_dir() else [path]
    submitted = 0
    for filepath in files:
        queue.submit(_process_file_task, filepath, index, stem)
        submitted += 1
    queue.await_idle()
    logger.info("Indexed %d file(s) from %s", submitted, path)
    return submitted
