"""
Shared fakes for the validator tests: canned responses, an in-memory site
client and a logger that keeps its records.
"""
from __future__ import annotations

import logging
from typing import Dict, List, Optional, Union

import pytest
import requests

from linkcheck.client import FetchResult, classify_exception
from linkcheck.config import ValidationConfig

SEED = "http://example.com/"


def make_response(
    status: int = 200,
    body: str = "",
    headers: Optional[Dict[str, str]] = None,
    content_type: str = "text/html; charset=utf-8",
) -> requests.Response:
    resp = requests.Response()
    resp.status_code = status
    resp._content = body.encode("utf-8")
    resp.encoding = "utf-8"
    resp.headers["Content-Type"] = content_type
    resp.headers.update(headers or {})
    return resp


def page(*hrefs: str, css: tuple[str, ...] = ()) -> requests.Response:
    """HTML page with one anchor per href (and optional stylesheets)."""
    links = "".join(f'<link rel="stylesheet" href="{h}">' for h in css)
    anchors = "".join(f'<a href="{h}">{h}</a>' for h in hrefs)
    return make_response(200, f"<html><head>{links}</head><body>{anchors}</body></html>")


def redirect(location: str, status: int = 301) -> requests.Response:
    return make_response(status, "", headers={"Location": location})


SiteEntry = Union[requests.Response, BaseException]


class FakeClient:
    """Serves a dict of url -> response or exception; unknown urls are 404."""

    def __init__(self, site: Dict[str, SiteEntry]) -> None:
        self.site = site
        self.calls: List[str] = []

    def get(self, url: str) -> FetchResult:
        self.calls.append(url)
        entry = self.site.get(url)
        if entry is None:
            return FetchResult(url=url, response=make_response(404, "not found"))
        if isinstance(entry, BaseException):
            return FetchResult(url=url, error_kind=classify_exception(entry), error=entry)
        return FetchResult(url=url, response=entry)

    def close(self) -> None:
        pass


class CapturingLogger(logging.Logger):
    """Logger that keeps every record instead of emitting it."""

    def __init__(self) -> None:
        super().__init__("linkcheck-test", logging.DEBUG)
        self.records: List[logging.LogRecord] = []

    def handle(self, record: logging.LogRecord) -> None:
        self.records.append(record)

    def messages(self, level: Optional[int] = None) -> List[str]:
        return [r.getMessage() for r in self.records if level is None or r.levelno == level]


@pytest.fixture()
def output() -> CapturingLogger:
    return CapturingLogger()


@pytest.fixture()
def config() -> ValidationConfig:
    return ValidationConfig(url=SEED, wait=0)


@pytest.fixture()
def refused() -> requests.ConnectionError:
    try:
        try:
            raise ConnectionRefusedError(111, "Connection refused")
        except ConnectionRefusedError as e:
            raise requests.ConnectionError("Max retries exceeded") from e
    except requests.ConnectionError as exc:
        return exc
