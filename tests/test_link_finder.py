"""
Tests for finding and normalizing links.
"""
from searchengine.link_finder import find_urls, is_http, normalize

BASE = "https://example.com/dir/page.html"


def test_find_urls_resolves_and_normalizes():
    html = """
    <a href="other.html#section">relative</a>
    <A HREF="https://x.org/search?q=a b">query</A>
    <a class="nav"
       href='/abs'>single quotes</a>
    <a href="mailto:someone@example.com">mail</a>
    <a href="javascript:void(0)">js</a>
    <a href="other.html">duplicate</a>
    <link href="style.css">
    """
    assert find_urls(BASE, html) == [
        "https://example.com/dir/other.html",
        "https://x.org/search?q=a%20b",
        "https://example.com/abs",
    ]


def test_find_urls_drops_malformed_links():
    html = '<a href="http://[::1">bad</a><a href="http://ok.example/">ok</a>'
    assert find_urls(BASE, html) == ["http://ok.example/"]


def test_find_urls_no_anchors():
    assert find_urls(BASE, "<p>nothing here</p>") == []


def test_normalize():
    assert normalize("https://example.com/a?x=1&y=%20z#top") == "https://example.com/a?x=1&y=%20z"
    assert normalize("HTTP://example.com/") == "http://example.com/"


def test_is_http():
    assert is_http("http://example.com")
    assert is_http("https://example.com/path")
    assert not is_http("ftp://example.com/file")
    assert not is_http("/relative/path")
