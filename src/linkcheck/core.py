"""
Crawl engine: walks every link reachable from the seed on the seed's host,
requests each one once and classifies the response.
"""
from __future__ import annotations

import enum
import logging
import time
from typing import Dict, List, NamedTuple, Optional, Tuple
from urllib.parse import urljoin, urlparse

import requests

from linkcheck.client import ErrorKind, FetchResult, RequestClient
from linkcheck.config import ValidationConfig
from linkcheck.extractor import LinkExtractor
from linkcheck.filters import URLFilter, same_domain
from linkcheck.report import Report, ResponseLog, Status, is_error

log = logging.getLogger("linkcheck")


class TaskKind(enum.Enum):
    PAGE = "page"          # fetch, classify, recurse when same domain
    NON_HTML = "non_html"  # fetch and classify only (stylesheets)
    LINKS = "links"        # extract <a> links of a fetched page
    CSS = "css"            # extract stylesheet links of a fetched page
    WAIT = "wait"          # crawl delay between sibling links


class Task(NamedTuple):
    kind: TaskKind
    url: str = ""
    from_url: str = ""
    response: Optional[requests.Response] = None


WAIT_TASK = Task(TaskKind.WAIT)


def resolve_redirect(location: Optional[str], link: str) -> Optional[str]:
    """
    Absolute redirect target for a Location header received from `link`.

    Absolute locations are used verbatim, anything else is joined onto
    the requested link.
    """
    if not location:
        return None
    if urlparse(location).scheme:
        return location
    return urljoin(link, location)


class Validator:
    """
    Validates every link reachable from `config.url`.

    Traversal runs on an explicit stack of tasks, in the same order a
    depth-first recursion over pages would: a page's redirect target is
    validated first, then the links on the page, then its stylesheets.
    Redirect targets are validated as if found on the original referring
    page.

    The start URL is validated like any other link, with itself as the
    referring page: it gets a visited-map entry and a log line, and its
    fetched body is the one its links are read from. A link back to the
    start URL is then a no-op instead of a second request.
    """

    def __init__(
        self,
        config: ValidationConfig,
        output: Optional[logging.Logger] = None,
        client: Optional[RequestClient] = None,
        extractor: Optional[LinkExtractor] = None,
        response_log: Optional[ResponseLog] = None,
    ) -> None:
        self.config = config
        self.output = output or log
        self.client = client or RequestClient(config)
        self.extractor = extractor or LinkExtractor(
            accept=URLFilter(config),
            ignore_fragments=config.ignore_fragments,
        )
        self.response_log = response_log or ResponseLog(
            self.output,
            config.logfile if config.log_enabled else None,
        )
        self.responses: Dict[str, Status] = {}

    def validate(self) -> Report:
        """Run the whole validation and return the visited map."""
        self.response_log.open()
        try:
            self._run([Task(TaskKind.PAGE, self.config.url, self.config.url)])
        finally:
            self.response_log.close()
        return Report(responses=dict(self.responses))

    def errors(self) -> Dict[str, Status]:
        """Visited links whose status is outside 100..399."""
        return {url: status for url, status in self.responses.items() if is_error(status)}

    def _run(self, stack: List[Task]) -> None:
        while stack:
            task = stack.pop()

            if task.kind is TaskKind.WAIT:
                time.sleep(self.config.wait)
            elif task.kind in (TaskKind.PAGE, TaskKind.NON_HTML):
                stack.extend(reversed(self._visit(task)))
            else:
                stack.extend(reversed(self._expand(task)))

    def _visit(self, task: Task) -> List[Task]:
        """Fetch one link unless already visited; return the follow-up tasks."""
        if task.url in self.responses:
            return []

        log.debug("Checking %s (from %s)", task.url, task.from_url)
        fetched = self._add_status_code(task.url, task.from_url)
        if fetched is None:
            return []

        response, redirect_to = fetched
        follow: List[Task] = []
        if redirect_to:
            follow.append(Task(TaskKind.PAGE, redirect_to, task.from_url))
        if task.kind is TaskKind.PAGE and same_domain(task.url, self.config.url):
            follow.append(Task(TaskKind.LINKS, task.url, response=response))
            if self.config.css:
                follow.append(Task(TaskKind.CSS, task.url, response=response))
        return follow

    def _expand(self, task: Task) -> List[Task]:
        """Turn the links on a fetched page into visit tasks, each followed by a wait."""
        if task.kind is TaskKind.LINKS:
            links, kind = self.extractor.links(task.url, task.response), TaskKind.PAGE
        else:
            links, kind = self.extractor.css_links(task.url, task.response), TaskKind.NON_HTML

        log.debug("%d %s on %s", len(links), task.kind.value, task.url)
        follow: List[Task] = []
        for link in links:
            follow.append(Task(kind, link, task.url))
            follow.append(WAIT_TASK)
        return follow

    def _add_status_code(
        self, link: str, from_url: str
    ) -> Optional[Tuple[requests.Response, Optional[str]]]:
        """
        Request `link`, log the outcome and record it in the visited map.

        Returns the response and resolved redirect target, or None when the
        branch rooted at `link` is pruned.
        """
        result: FetchResult = self.client.get(link)

        if result.error_kind in (ErrorKind.REFUSED, ErrorKind.TRANSIENT):
            status = result.error_kind.value
            try:
                self.response_log.record(status, link, from_url)
            except Exception as e:
                self._unknown_error(e, link, from_url)
                return None
            self.responses[link] = status
            return None
        if result.error_kind is ErrorKind.UNKNOWN or result.response is None:
            self._unknown_error(result.error, link, from_url)
            return None

        # A failure while classifying prunes this branch only
        try:
            redirect_to = resolve_redirect(result.location, link)
            self.response_log.record(result.status_code, link, from_url, redirect_to)
        except Exception as e:
            self._unknown_error(e, link, from_url)
            return None

        self.responses[link] = result.status_code
        return result.response, redirect_to

    def _unknown_error(self, error: Optional[BaseException], link: str, from_url: str) -> None:
        self.response_log.error(
            f"Unknown error {error} ({type(error).__name__}) - {link} - Called from: {from_url}"
        )
