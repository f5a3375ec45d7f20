"""
Run configuration for a link validation.
"""
from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Any, Iterable, Mapping, Optional, Pattern, Tuple, Union
from urllib.parse import urlparse

from requests.utils import requote_uri

DEFAULT_LOGFILE = "linkcheck_log.txt"
DEFAULT_WAIT = 3.0
DEFAULT_TIMEOUT = 15.0
DEFAULT_USER_AGENT = "linkcheck/1.0"

PatternsArg = Union[str, Iterable[str], None]

# Option names accepted by from_options(), same keys as the CLI flags
OPTION_NAMES: frozenset[str] = frozenset((
    "username", "password", "wait", "css", "ignore_fragments", "local",
    "include", "iinclude", "skip", "iskip", "logfile", "log",
    "timeout", "user_agent",
))


def _as_patterns(value: PatternsArg) -> Tuple[str, ...]:
    """Accept a single pattern or any iterable of patterns."""
    if value is None:
        return ()
    if isinstance(value, str):
        return (value,)
    return tuple(value)


def _compile(patterns: Tuple[str, ...], ignore_case: bool) -> Tuple[Pattern[str], ...]:
    flags = re.IGNORECASE if ignore_case else 0
    compiled = []
    for pattern in patterns:
        try:
            compiled.append(re.compile(pattern, flags))
        except re.error as e:
            raise ValueError(f"Invalid pattern {pattern!r}: {e}") from e
    return tuple(compiled)


@dataclass(frozen=True, slots=True)
class ValidationConfig:
    """Immutable settings for one validation run."""
    url: str
    username: Optional[str] = None
    password: Optional[str] = None
    wait: float = DEFAULT_WAIT
    css: bool = False
    ignore_fragments: bool = False
    local: bool = False
    include: Tuple[str, ...] = ()
    iinclude: Tuple[str, ...] = ()
    skip: Tuple[str, ...] = ()
    iskip: Tuple[str, ...] = ()
    logfile: str = DEFAULT_LOGFILE
    log: bool = False
    timeout: float = DEFAULT_TIMEOUT
    user_agent: str = DEFAULT_USER_AGENT
    include_patterns: Tuple[Pattern[str], ...] = field(init=False, repr=False, compare=False)
    skip_patterns: Tuple[Pattern[str], ...] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        url = requote_uri(self.url.strip())
        parsed = urlparse(url)
        if parsed.scheme not in ("http", "https") or not parsed.netloc:
            raise ValueError(f"Invalid start URL: {self.url}")
        if self.wait < 0:
            raise ValueError(f"wait must not be negative, got {self.wait}")

        # frozen dataclass: normalised values go through object.__setattr__
        object.__setattr__(self, "url", url)
        for name in ("include", "iinclude", "skip", "iskip"):
            object.__setattr__(self, name, _as_patterns(getattr(self, name)))

        object.__setattr__(
            self, "include_patterns",
            _compile(self.include, False) + _compile(self.iinclude, True),
        )
        object.__setattr__(
            self, "skip_patterns",
            _compile(self.skip, False) + _compile(self.iskip, True),
        )

    @property
    def host(self) -> Optional[str]:
        return urlparse(self.url).hostname

    @property
    def log_enabled(self) -> bool:
        """A custom logfile implies logging."""
        return self.log or self.logfile != DEFAULT_LOGFILE

    @classmethod
    def from_options(cls, url: str, options: Optional[Mapping[str, Any]] = None) -> ValidationConfig:
        """
        Build a config from a mapping of option names.

        Options left as None fall back to the defaults, so the mapping can come
        straight from an argparse namespace.
        """
        options = dict(options or {})
        unknown = set(options) - OPTION_NAMES
        if unknown:
            raise ValueError(f"Unknown options: {', '.join(sorted(unknown))}")

        kwargs = {k: v for k, v in options.items() if v is not None}
        if "wait" in kwargs:
            kwargs["wait"] = float(kwargs["wait"])
        if "timeout" in kwargs:
            kwargs["timeout"] = float(kwargs["timeout"])
        return cls(url=url, **kwargs)
