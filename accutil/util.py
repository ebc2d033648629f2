"""Error reporting and small string and path helpers shared by the tools."""

from __future__ import annotations

import sys
from typing import Callable, NoReturn, Optional

__all__ = [
    "usage",
    "die",
    "error",
    "warning",
    "set_die_routine",
    "prefixcmp",
    "skip_prefix",
    "is_absolute_path",
    "prefix_filename",
    "fix_filename",
]

USAGE_EXIT_CODE = 129
DIE_EXIT_CODE = 128
_MESSAGE_LIMIT = 1023

DieRoutine = Callable[[str], None]


def _report(prefix: str, message: str) -> None:
    sys.stderr.write(f" {prefix}{message[:_MESSAGE_LIMIT]}\n")


def _die_builtin(message: str) -> NoReturn:
    _report(" Fatal: ", message)
    raise SystemExit(DIE_EXIT_CODE)


_die_routine: DieRoutine = _die_builtin


def set_die_routine(routine: Optional[DieRoutine]) -> DieRoutine:
    """Install the handler used by die(); None restores the default.

    Returns the handler that was active before.
    """
    global _die_routine
    previous = _die_routine
    _die_routine = routine if routine is not None else _die_builtin
    return previous


def usage(message: str) -> NoReturn:
    """Print a usage line to stderr and exit with status 129."""
    sys.stderr.write(f"\n Usage: {message}\n")
    raise SystemExit(USAGE_EXIT_CODE)


def die(message: str) -> NoReturn:
    """Report a fatal error and terminate through the die routine."""
    _die_routine(message)
    # A replacement routine is expected never to return.
    raise SystemExit(DIE_EXIT_CODE)


def error(message: str) -> None:
    """Report an error on stderr."""
    _report(" Error: ", message)


def warning(message: str) -> None:
    """Report a warning on stderr."""
    _report(" Warning: ", message)


def prefixcmp(string: str, prefix: str) -> int:
    """Return 0 if string starts with prefix, else the ordering difference.

    The result is the code point of the first differing prefix character
    minus that of the string (0 where the string has ended).
    """
    for position, expected in enumerate(prefix):
        actual = string[position] if position < len(string) else "\0"
        if actual != expected:
            return ord(expected) - ord(actual)
    return 0


def skip_prefix(string: str, prefix: str) -> Optional[str]:
    """Return what follows prefix in string, or None if it does not start so."""
    return string[len(prefix):] if string.startswith(prefix) else None


def is_absolute_path(path: str) -> bool:
    """True if path starts with a slash."""
    return path.startswith("/")


def prefix_filename(prefix: Optional[str], arg: str) -> str:
    """Prepend prefix to a relative path; absolute paths are kept as they are."""
    if prefix and not is_absolute_path(arg):
        return prefix + arg
    return arg


def fix_filename(prefix: Optional[str], filename: Optional[str]) -> Optional[str]:
    """Return filename made relative to prefix, leaving "-" and absolute paths."""
    if not filename or not prefix or is_absolute_path(filename) or filename == "-":
        return filename
    return prefix_filename(prefix, filename)