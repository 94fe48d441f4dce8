"""
HTML cleaning stages used by the web crawler.

strip_block_elements() runs before link finding (links inside scripts, styles
and the head are not followed); strip_tags() and strip_entities() then reduce
the page to plain text for indexing.
"""

import re
import warnings

from bs4 import BeautifulSoup, MarkupResemblesLocatorWarning, XMLParsedAsHTMLWarning

warnings.filterwarnings("ignore", category=XMLParsedAsHTMLWarning)
warnings.filterwarnings("ignore", category=MarkupResemblesLocatorWarning)

BLOCK_ELEMENTS = ("head", "style", "script", "noscript", "svg")

_COMMENT_RE = re.compile(r"<!--.*?-->", re.DOTALL)
_BLOCK_RE = re.compile(
    r"<\s*(%s)\b[^>]*>.*?<\s*/\s*\1\s*>" % "|".join(BLOCK_ELEMENTS),
    re.DOTALL | re.IGNORECASE,
)
_ENTITY_RE = re.compile(r"&(?:#\d+|#[xX][0-9a-fA-F]+|[a-zA-Z][a-zA-Z0-9]*);")


def strip_comments(html: str) -> str:
    """Replace HTML comments with a space."""
    return _COMMENT_RE.sub(" ", html)


def strip_block_elements(html: str) -> str:
    """Replace comments and head/style/script/noscript/svg elements with a space."""
    return _BLOCK_RE.sub(" ", strip_comments(html))


def strip_tags(html: str) -> str:
    """Remove all remaining tags, keeping the text between them."""
    soup = BeautifulSoup(html, "lxml")
    return soup.get_text(separator=" ")


def strip_entities(text: str) -> str:
    """Replace any remaining character entity (&amp;, &#38; ...) with a space."""
    return _ENTITY_RE.sub(" ", text)


def strip_html(html: str) -> str:
    """Reduce an HTML page to plain text."""
    return strip_entities(strip_tags(strip_block_elements(html)))
