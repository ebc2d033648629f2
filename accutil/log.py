"""Priority-filtered diagnostic logging with an owner tag."""

from __future__ import annotations

import os
import re
import sys
from typing import Callable, Optional

__all__ = [
    "LOG_ERR",
    "LOG_NOTICE",
    "LOG_INFO",
    "LOG_DEBUG",
    "LogContext",
    "log_priority",
]

LOG_ERR = 3
LOG_NOTICE = 5
LOG_INFO = 6
LOG_DEBUG = 7

_LEADING_INT = re.compile(r"[ \t\n\v\f\r]*[+-]?[0-9]+")

_NAMED_PRIORITIES = (
    ("err", LOG_ERR),
    ("info", LOG_INFO),
    ("debug", LOG_DEBUG),
    ("notice", LOG_NOTICE),
)

LogFunction = Callable[["LogContext", int, str, str], None]


def log_priority(text: str) -> int:
    """Turn a priority given as a number or a name into a syslog priority.

    A number may be followed by whitespace and anything after it.  Names
    are recognised by their prefix ("err", "info", "debug", "notice");
    anything else gives 0.
    """
    match = _LEADING_INT.match(text)
    if match is not None:
        rest = text[match.end():]
        if not rest or rest[0].isspace():
            return int(match.group().strip())
    elif not text or text[0].isspace():
        return 0
    for name, priority in _NAMED_PRIORITIES:
        if text.startswith(name):
            return priority
    return 0


def _log_stderr(ctx: "LogContext", priority: int, fn: str, message: str) -> None:
    sys.stderr.write(f"{ctx.owner}: {fn}: {message}")


class LogContext:
    """Where and how much a component logs.

    Messages at a priority numerically above ``log_priority`` are dropped.
    The environment variable named by ``log_env`` overrides the default
    priority of LOG_ERR.  Debug messages are only emitted when ``debug``
    is true.
    """

    def __init__(self, owner: str, log_env: Optional[str] = None) -> None:
        self.owner = owner
        self.log_fn: LogFunction = _log_stderr
        self.log_priority = LOG_ERR
        self.debug = False
        if log_env:
            env = os.environ.get(log_env)
            if env is not None:
                self.log_priority = log_priority(env)

    def log(self, priority: int, fn: str, message: str) -> None:
        """Pass message to the log function if priority is enabled."""
        if self.log_priority >= priority:
            self.log_fn(self, priority, fn, message)

    def err(self, fn: str, message: str) -> None:
        """Log at error priority."""
        self.log(LOG_ERR, fn, message)

    def info(self, fn: str, message: str) -> None:
        """Log at informational priority."""
        self.log(LOG_INFO, fn, message)

    def notice(self, fn: str, message: str) -> None:
        """Log at notice priority."""
        self.log(LOG_NOTICE, fn, message)

    def dbg(self, fn: str, message: str) -> None:
        """Log at debug priority when debugging is enabled."""
        if self.debug:
            self.log(LOG_DEBUG, fn, message)