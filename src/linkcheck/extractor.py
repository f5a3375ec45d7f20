"""
Link extraction from fetched HTML pages.
"""
from __future__ import annotations

import logging
from typing import Callable, List, Optional

import requests
from bs4 import BeautifulSoup, SoupStrainer

from linkcheck.filters import resolve

log = logging.getLogger("linkcheck")

# Parse only the tags we read links from
ANCHOR_STRAINER = SoupStrainer("a", href=True)
STYLESHEET_STRAINER = SoupStrainer("link", href=True)


def is_html(response: requests.Response) -> bool:
    content_type = (response.headers.get("content-type") or "").lower()
    return "text/html" in content_type or "application/xhtml" in content_type


def _is_stylesheet(tag) -> bool:
    rel = tag.get("rel") or []
    if isinstance(rel, str):
        rel = rel.split()
    return any(r.lower() == "stylesheet" for r in rel)


class LinkExtractor:
    """
    Pulls candidate URLs out of an already fetched page.

    Each href is resolved against the page URL and passed through
    `accept` (the URL filter). Hrefs that cannot be parsed are reported
    and dropped.
    """

    def __init__(
        self,
        accept: Optional[Callable[[str], bool]] = None,
        ignore_fragments: bool = False,
    ) -> None:
        self.accept = accept or (lambda url: True)
        self.ignore_fragments = ignore_fragments

    def links(self, page: str, response: requests.Response) -> List[str]:
        """Targets of <a href> tags, in document order."""
        if not is_html(response):
            return []
        soup = BeautifulSoup(response.text, "lxml", parse_only=ANCHOR_STRAINER)
        return self._collect(page, [a["href"] for a in soup.find_all("a") if a.get("href")])

    def css_links(self, page: str, response: requests.Response) -> List[str]:
        """Targets of <link rel="stylesheet" href> tags."""
        if not is_html(response):
            return []
        soup = BeautifulSoup(response.text, "lxml", parse_only=STYLESHEET_STRAINER)
        hrefs = [tag["href"] for tag in soup.find_all("link") if tag.get("href") and _is_stylesheet(tag)]
        return self._collect(page, hrefs)

    def _collect(self, page: str, hrefs: List[str]) -> List[str]:
        urls: List[str] = []
        for href in hrefs:
            try:
                url = resolve(href, page, self.ignore_fragments)
            except ValueError:
                log.error("Invalid url - %s - Called from: %s", href, page)
                continue
            if url is not None and self.accept(url):
                urls.append(url)
        # Keep first occurrence only
        return list(dict.fromkeys(urls))
