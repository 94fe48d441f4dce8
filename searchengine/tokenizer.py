"""
Text cleaning and stemming for the search engine index.
Cleans text down to lowercase alphabetic words and stems them (Snowball, English).
"""

import re
import unicodedata
from pathlib import Path
from typing import Callable, Iterable

from nltk.stem.snowball import SnowballStemmer

_STEMMER = SnowballStemmer("english")

_SPLIT_RE = re.compile(r"\s+")


def stem_token(word: str) -> str:
    """Return the Snowball (English) stem of word."""
    return _STEMMER.stem(word)


def clean(text: str) -> str:
    """
    Remove any non-alphabetic characters (digits, punctuation, symbols and
    diacritical marks like the umlaut) and convert the rest to lowercase.
    """
    text = unicodedata.normalize("NFD", text)
    return "".join(c for c in text if c.isalpha() or c.isspace()).lower()


def split(text: str) -> list[str]:
    """Split text on whitespace."""
    text = text.strip()
    if not text:
        return []
    return _SPLIT_RE.split(text)


def parse(text: str) -> list[str]:
    """Clean and split text into words."""
    return split(clean(text))


def stem_tokens(tokens: Iterable[str], stem: Callable[[str], str] | None = None) -> list[str]:
    """Stem a list of already cleaned tokens."""
    stem = stem or stem_token
    return [stem(t) for t in tokens]


def list_stems(text: str, stem: Callable[[str], str] | None = None) -> list[str]:
    """Return the stems of text in parsed order."""
    return stem_tokens(parse(text), stem)


def unique_stems(text: str, stem: Callable[[str], str] | None = None) -> list[str]:
    """Return the sorted, de-duplicated stems of text (query normalization)."""
    return sorted(set(list_stems(text, stem)))


def list_file_stems(filepath: Path, stem: Callable[[str], str] | None = None) -> list[str]:
    """
    Read a UTF-8 text file line by line and return its stems in document order.
    Raises OSError or UnicodeDecodeError if the file cannot be read.
    """
    stems: list[str] = []
    with open(filepath, "r", encoding="utf-8") as f:
        for line in f:
            stems.extend(list_stems(line, stem))
    return stems
