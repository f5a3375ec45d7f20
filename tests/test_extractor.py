"""
Tests for link extraction from fetched pages.
"""
from conftest import CapturingLogger, make_response
from linkcheck.extractor import LinkExtractor, is_html

PAGE = "http://example.com/blog/"

HTML = """
<html>
  <head>
    <link rel="stylesheet" href="/css/site.css">
    <link rel="alternate stylesheet" href="print.css">
    <link rel="icon" href="/favicon.ico">
  </head>
  <body>
    <a href="/about">About</a>
    <a href="post-1">Post</a>
    <a href="/about">About again</a>
    <a href="#comments">Comments</a>
    <a href="mailto:me@example.com">Mail</a>
    <a>No href</a>
    <a href="https://other.com/">Elsewhere</a>
  </body>
</html>
"""


def test_anchor_links_resolved_in_order():
    links = LinkExtractor().links(PAGE, make_response(200, HTML))

    assert links == [
        "http://example.com/about",
        "http://example.com/blog/post-1",
        "https://other.com/",
    ]


def test_stylesheet_links():
    links = LinkExtractor().css_links(PAGE, make_response(200, HTML))

    assert links == ["http://example.com/css/site.css", "http://example.com/blog/print.css"]


def test_accept_predicate_applied():
    extractor = LinkExtractor(accept=lambda url: "other.com" not in url)

    assert "https://other.com/" not in extractor.links(PAGE, make_response(200, HTML))


def test_ignore_fragments():
    resp = make_response(200, '<a href="/a#x">1</a><a href="/a#y">2</a>')

    assert LinkExtractor(ignore_fragments=True).links(PAGE, resp) == ["http://example.com/a"]


def test_non_html_response_has_no_links():
    resp = make_response(200, '<a href="/about">About</a>', content_type="application/json")

    assert LinkExtractor().links(PAGE, resp) == []
    assert LinkExtractor().css_links(PAGE, resp) == []


def test_invalid_href_reported_and_skipped(monkeypatch):
    capture = CapturingLogger()
    monkeypatch.setattr("linkcheck.extractor.log", capture)
    resp = make_response(200, '<a href="http://[::1">bad</a><a href="/ok">ok</a>')

    assert LinkExtractor().links(PAGE, resp) == ["http://example.com/ok"]
    assert capture.messages() == [f"Invalid url - http://[::1 - Called from: {PAGE}"]


def test_is_html():
    assert is_html(make_response(200, "", content_type="text/html"))
    assert is_html(make_response(200, "", content_type="application/xhtml+xml"))
    assert not is_html(make_response(200, "", content_type="text/css"))
