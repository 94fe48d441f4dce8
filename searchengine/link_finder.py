"""
Finds HTTP(S) URLs in the href attribute of anchor tags.
"""

import logging
import re
from urllib.parse import quote, urljoin, urlsplit, urlunsplit

logger = logging.getLogger(__name__)

_ANCHOR_RE = re.compile(
    r"""<\s*a\b[^>]*?\bhref\s*=\s*(?:"([^"]*)"|'([^']*)')""",
    re.IGNORECASE | re.DOTALL,
)

# characters left alone when encoding a query string; "%" keeps existing escapes
_QUERY_SAFE = "/?:@!$&'()*+,;=%"


def is_http(url: str) -> bool:
    """Whether url uses the http or https protocol and names a host."""
    parts = urlsplit(url)
    return parts.scheme in ("http", "https") and bool(parts.netloc)


def normalize(url: str) -> str:
    """
    Remove the fragment from url and percent-encode its query string.
    Raises ValueError if the url cannot be parsed.
    """
    parts = urlsplit(url.strip())
    query = quote(parts.query, safe=_QUERY_SAFE)
    return urlunsplit((parts.scheme, parts.netloc, parts.path, query, ""))


def find_urls(base: str, html: str) -> list[str]:
    """
    Return the unique HTTP(S) URLs linked from anchor tags in html, in the
    order they appear. Relative links are made absolute using base; links
    that fail to parse or use another protocol are dropped.
    """
    html = html.replace("\n", " ").replace("\t", " ")
    urls: dict[str, None] = {}
    for match in _ANCHOR_RE.finditer(html):
        href = match.group(1) if match.group(1) is not None else match.group(2)
        href = href.strip()
        if not href:
            continue
        try:
            url = normalize(urljoin(base, href))
        except ValueError as e:
            logger.debug("Dropping link %r from %s: %s", href, base, e)
            continue
        if is_http(url):
            urls.setdefault(url, None)
    return list(urls)
