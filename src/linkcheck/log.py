"""
Logging setup for the validator's leveled output.
"""
from __future__ import annotations

import logging
import sys
from typing import Optional, TextIO

LOGGER_NAME = "linkcheck"

_LOG_FMT = "%(asctime)s [%(levelname)s] %(message)s"
_LOG_DATEFMT = "%H:%M:%S"

log = logging.getLogger(LOGGER_NAME)


def setup_logging(stream: Optional[TextIO] = None, debug: bool = False) -> logging.Logger:
    """
    Send the `linkcheck` logger to `stream` (stdout by default).

    Existing handlers are replaced, so calling this twice does not
    duplicate output.
    """
    log.setLevel(logging.DEBUG if debug else logging.INFO)
    log.handlers.clear()

    handler = logging.StreamHandler(stream if stream is not None else sys.stdout)
    handler.setFormatter(logging.Formatter(_LOG_FMT, datefmt=_LOG_DATEFMT))
    log.addHandler(handler)
    log.propagate = False
    return log
