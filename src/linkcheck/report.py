"""
Classification of responses and the persistent response log.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Optional, TextIO, Union

Status = Union[int, str]

INFO = logging.INFO
WARNING = logging.WARNING
ERROR = logging.ERROR


def status_number(code: Status) -> int:
    """Numeric value of a status; sentinels and garbage count as 0."""
    if isinstance(code, int):
        return code
    try:
        return int(str(code).strip())
    except ValueError:
        return 0


def severity(code: Status) -> int:
    """1xx/2xx -> INFO, 3xx -> WARNING, 4xx/5xx -> ERROR, else ERROR."""
    family = status_number(code) // 100
    if family in (1, 2):
        return INFO
    if family == 3:
        return WARNING
    return ERROR


def is_known(code: Status) -> bool:
    return status_number(code) // 100 in (1, 2, 3, 4, 5)


def is_error(code: Status) -> bool:
    return not 100 <= status_number(code) <= 399


def format_message(code: Status, link: str, from_url: str, redirect_to: Optional[str] = None) -> str:
    message = f"{code} - {link}"
    if status_number(code) != 200:
        message += f" - Called from: {from_url}"
    if redirect_to:
        message += f" - Following redirection to: {redirect_to}"
    return message


class ResponseLog:
    """
    Leveled sink for classified responses, plus the optional log file.

    The file is truncated on open and receives each formatted message
    verbatim, one per line.
    """

    def __init__(self, output: logging.Logger, logfile: Union[str, Path, None] = None) -> None:
        self.output = output
        self.logfile = Path(logfile) if logfile else None
        self._fh: Optional[TextIO] = None

    def open(self) -> None:
        if self.logfile is not None and self._fh is None:
            self.logfile.parent.mkdir(parents=True, exist_ok=True)
            self._fh = self.logfile.open("w", encoding="utf-8")

    def close(self) -> None:
        if self._fh is not None:
            self._fh.close()
            self._fh = None

    def __enter__(self) -> ResponseLog:
        self.open()
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def record(self, code: Status, link: str, from_url: str, redirect_to: Optional[str] = None) -> str:
        message = format_message(code, link, from_url, redirect_to)
        if is_known(code):
            self.output.log(severity(code), message)
        else:
            self.output.error("Unknown code %s", message)

        if self._fh is not None:
            self._fh.write(message + "\n")
            self._fh.flush()
        return message

    def error(self, message: str) -> None:
        self.output.error(message)


@dataclass(slots=True)
class Report:
    """Final visited map of a run and its broken subset."""
    responses: Dict[str, Status] = field(default_factory=dict)

    @property
    def errors(self) -> Dict[str, Status]:
        return {url: status for url, status in self.responses.items() if is_error(status)}

    def as_dict(self) -> Dict[str, Status]:
        return dict(self.responses)
