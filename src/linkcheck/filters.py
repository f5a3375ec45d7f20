"""
URL filtering: which discovered links take part in the validation.
"""
from __future__ import annotations

from typing import Optional
from urllib.parse import urldefrag, urljoin, urlparse

from requests.utils import requote_uri

from linkcheck.config import ValidationConfig

# Schemes we can actually request
FETCHABLE_SCHEMES: frozenset[str] = frozenset(("http", "https"))


def resolve(href: str, base: str, ignore_fragments: bool = False) -> Optional[str]:
    """
    Resolve an href found on `base` into an absolute http(s) URL.

    Returns None for empty hrefs, fragment-only links and non-http schemes
    (mailto:, javascript:, tel:, data:...). Raises ValueError for hrefs that
    cannot be parsed.
    """
    href = (href or "").strip()
    if not href or href.startswith("#"):
        return None

    absolute = urljoin(base, href)
    parsed = urlparse(absolute)
    if parsed.scheme not in FETCHABLE_SCHEMES or not parsed.netloc:
        return None
    # Raises ValueError on a bad port
    parsed.port

    # Same escaping as the seed, so "/a b" and "/a%20b" are one key
    absolute = requote_uri(absolute)
    if ignore_fragments:
        absolute, _ = urldefrag(absolute)
    return absolute


class URLFilter:
    """Include/skip patterns plus local-mode restriction from the config."""

    def __init__(self, config: ValidationConfig) -> None:
        self.config = config

    def __call__(self, url: str) -> bool:
        return self.accepts(url)

    def accepts(self, url: str) -> bool:
        if self.config.local and not self._below_seed(url):
            return False
        if any(p.search(url) for p in self.config.skip_patterns):
            return False
        if self.config.include_patterns:
            return any(p.search(url) for p in self.config.include_patterns)
        return True

    def _below_seed(self, url: str) -> bool:
        """Same scheme and netloc as the seed, path under the seed path."""
        seed = urlparse(self.config.url)
        target = urlparse(url)
        return (
            (target.scheme, target.netloc) == (seed.scheme, seed.netloc)
            and target.path.startswith(seed.path)
        )


def host(url: str) -> str:
    """Host part of the netloc as written: no userinfo, no port, case kept."""
    netloc = urlparse(url).netloc.rpartition("@")[2]
    if netloc.startswith("["):
        return netloc.partition("]")[0] + "]"
    return netloc.partition(":")[0]


def same_domain(url: str, seed: str) -> bool:
    """Exact host equality against the seed URL."""
    try:
        return host(url) == host(seed)
    except ValueError:
        return False
