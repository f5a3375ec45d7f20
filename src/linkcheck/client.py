"""
HTTP access for the validator.

Failures are returned as an ErrorKind on the FetchResult instead of being
raised, so the engine decides what each kind of failure means for the crawl.
"""
from __future__ import annotations

import enum
import errno
import http.client
import socket
from dataclasses import dataclass
from typing import Optional

import requests

from linkcheck.config import ValidationConfig


class ErrorKind(enum.Enum):
    REFUSED = "Connection refused"
    TRANSIENT = "Connection problems"
    UNKNOWN = "Unknown error"


TRANSIENT_ERRORS: tuple[type[BaseException], ...] = (
    requests.ConnectionError,
    requests.Timeout,
    requests.exceptions.ChunkedEncodingError,
    requests.exceptions.ContentDecodingError,
    requests.exceptions.InvalidHeader,
    http.client.HTTPException,
    socket.gaierror,
    TimeoutError,
    ConnectionResetError,
    EOFError,
)


@dataclass(slots=True)
class FetchResult:
    """Outcome of one GET: either a response or an error kind."""
    url: str
    response: Optional[requests.Response] = None
    error_kind: Optional[ErrorKind] = None
    error: Optional[BaseException] = None

    @property
    def ok(self) -> bool:
        return self.response is not None

    @property
    def status_code(self) -> Optional[int]:
        return self.response.status_code if self.response is not None else None

    @property
    def location(self) -> Optional[str]:
        if self.response is None:
            return None
        return self.response.headers.get("Location") or None


def _is_refused(exc: BaseException) -> bool:
    """Look for ECONNREFUSED anywhere in the exception chain."""
    seen: set[int] = set()
    pending = [exc]
    while pending:
        current = pending.pop()
        if id(current) in seen:
            continue
        seen.add(id(current))

        if isinstance(current, ConnectionRefusedError):
            return True
        if isinstance(current, OSError) and current.errno == errno.ECONNREFUSED:
            return True

        # urllib3 MaxRetryError keeps the underlying error on .reason
        linked = [current.__cause__, current.__context__, getattr(current, "reason", None), *current.args]
        pending.extend(e for e in linked if isinstance(e, BaseException))
    return False


def classify_exception(exc: BaseException) -> ErrorKind:
    if _is_refused(exc):
        return ErrorKind.REFUSED
    if isinstance(exc, TRANSIENT_ERRORS):
        return ErrorKind.TRANSIENT
    return ErrorKind.UNKNOWN


class RequestClient:
    """Thin wrapper around a requests.Session that never follows redirects."""

    def __init__(self, config: ValidationConfig, session: Optional[requests.Session] = None) -> None:
        self.timeout = config.timeout
        self.session = session or requests.Session()
        self.session.headers["User-Agent"] = config.user_agent
        if config.username:
            self.session.auth = (config.username, config.password or "")

    def get(self, url: str) -> FetchResult:
        try:
            resp = self.session.get(url, timeout=self.timeout, allow_redirects=False)
        except Exception as e:  # every failure becomes an ErrorKind
            return FetchResult(url=url, error_kind=classify_exception(e), error=e)
        return FetchResult(url=url, response=resp)

    def close(self) -> None:
        self.session.close()

    def __enter__(self) -> RequestClient:
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()
