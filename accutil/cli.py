"""Top-level handling of a multi-command tool's arguments."""

from __future__ import annotations

import sys
from dataclasses import dataclass
from typing import Any, Callable, NoReturn, Optional, Sequence

from accutil.manpage import help_show_man_page
from accutil.util import usage

__all__ = [
    "VERSION",
    "MAN_VIEWER_ENV",
    "Command",
    "main_handle_options",
    "main_handle_internal_command",
]

VERSION = "0.1.0"
MAN_VIEWER_ENV = "ACCFG_MAN_VIEWER"


@dataclass(frozen=True)
class Command:
    """A named subcommand and the function that runs it as fn(argv, ctx)."""

    name: str
    fn: Callable[[list[str], Any], Any]


def _find(commands: Sequence[Command], name: str) -> Optional[Command]:
    return next((command for command in commands if command.name == name), None)


def _exit_usage(usage_msg: str) -> NoReturn:
    usage(usage_msg)


def main_handle_options(
    argv: Sequence[str], usage_msg: str, commands: Sequence[Command]
) -> None:
    """Handle the global options in argv.

    Returns only when argv[1] names a known command to run; every other
    case shows help, a version, a command list or the usage and exits.
    """
    util_name = argv[0]
    if len(argv) < 2:
        help_show_man_page(None, util_name, MAN_VIEWER_ENV)
        _exit_usage(usage_msg)

    first = argv[1]
    if first in ("--version", "-v"):
        print(VERSION)
        raise SystemExit(0)

    if not first.startswith("-"):
        if _find(commands, first) is None:
            sys.stderr.write(f"Unknown command: '{first}'\n")
            _exit_usage(usage_msg)
        if len(argv) > 2 and argv[2] in ("--help", "-h"):
            help_show_man_page(first, util_name, MAN_VIEWER_ENV)
            _exit_usage(usage_msg)
        return

    if first in ("--help", "-h"):
        help_show_man_page(argv[2] if len(argv) > 2 else None, util_name, MAN_VIEWER_ENV)

    if first == "--list-cmds":
        for command in commands:
            print(f"{util_name} {command.name}")
        raise SystemExit(0)

    _exit_usage(usage_msg)


def main_handle_internal_command(
    argv: Sequence[str], ctx: Any, commands: Sequence[Command]
) -> Any:
    """Run the command named by argv[0] and return what it returns.

    Raises ValueError if no command has that name.
    """
    args = list(argv)
    command = _find(commands, args[0])
    if command is None:
        raise ValueError(f"Unknown command: '{args[0]}'")
    return command.fn(args, ctx)