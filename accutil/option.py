"""Option descriptions for command-line parsing and their help text."""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Any, Callable, Optional, Sequence

from accutil.util import prefixcmp

__all__ = [
    "OptionType",
    "ParseFlag",
    "OptionFlag",
    "Option",
    "format_option_help",
    "usage_text",
    "options_usage_text",
    "verbosity_callback",
    "USAGE_OPTS_WIDTH",
    "USAGE_GAP",
]

USAGE_OPTS_WIDTH = 24
USAGE_GAP = 2


class OptionType(enum.Enum):
    """Kind of an option and how its value is stored."""

    END = enum.auto()
    ARGUMENT = enum.auto()
    GROUP = enum.auto()
    # options with no arguments
    BIT = enum.auto()
    BOOLEAN = enum.auto()
    INCR = enum.auto()
    SET_UINT = enum.auto()
    SET_PTR = enum.auto()
    # options with arguments (usually)
    STRING = enum.auto()
    INTEGER = enum.auto()
    LONG = enum.auto()
    CALLBACK = enum.auto()
    U64 = enum.auto()
    UINTEGER = enum.auto()
    FILENAME = enum.auto()


class ParseFlag(enum.IntFlag):
    """Flags that control a whole parse run."""

    KEEP_DASHDASH = 1
    STOP_AT_NON_OPTION = 2
    KEEP_ARGV0 = 4
    KEEP_UNKNOWN = 8
    NO_INTERNAL_HELP = 16


class OptionFlag(enum.IntFlag):
    """Flags attached to a single option."""

    OPTARG = 1
    NOARG = 2
    NONEG = 4
    HIDDEN = 8
    LASTARG_DEFAULT = 16


OptionCallback = Callable[["Option", Optional[str], bool], Any]

_NUMERIC_TYPES = frozenset(
    {OptionType.LONG, OptionType.U64, OptionType.INTEGER, OptionType.UINTEGER}
)
_TEXT_TYPES = frozenset({OptionType.FILENAME, OptionType.STRING})


@dataclass(eq=False)
class Option:
    """One command-line option.

    The parsed value is stored in ``value``; ``is_set`` records whether a
    boolean option was given by the user.  For BIT, SET_UINT and SET_PTR
    options ``defval`` is the mask, integer or object stored when the option
    is met; for OPTARG options it is the value used when no argument follows.
    A callback is called as ``callback(option, arg, unset)`` and signals
    failure by returning a true value.
    """

    type: OptionType
    short_name: Optional[str] = None
    long_name: Optional[str] = None
    value: Any = None
    argh: Optional[str] = None
    help: str = ""
    flags: OptionFlag = OptionFlag(0)
    callback: Optional[OptionCallback] = None
    defval: Any = 0
    is_set: bool = False

    def __post_init__(self) -> None:
        if self.short_name is not None and len(self.short_name) != 1:
            raise ValueError(
                f"short option name must be one character: {self.short_name!r}"
            )
        self.flags = OptionFlag(self.flags)


def _argument_hint(option: Option) -> str:
    optional = bool(option.flags & OptionFlag.OPTARG)
    if option.type in _NUMERIC_TYPES:
        if optional:
            return "[=<n>]" if option.long_name else "[<n>]"
        return " <n>"
    if option.type is OptionType.CALLBACK and option.flags & OptionFlag.NOARG:
        return ""
    if option.type is OptionType.CALLBACK or option.type in _TEXT_TYPES:
        if option.argh:
            if optional:
                if option.long_name:
                    return f"[=<{option.argh}>]"
                return f"[<{option.argh}>]"
            return f" <{option.argh}>"
        if optional:
            return "[=...]" if option.long_name else "[...]"
        return " ..."
    return ""


def format_option_help(option: Option, full: bool) -> str:
    """Return the help line(s) for one option, or "" if it is hidden."""
    if option.type is OptionType.GROUP:
        return "\n" + (f"{option.help}\n" if option.help else "")
    if not full and option.flags & OptionFlag.HIDDEN:
        return ""

    head = "    "
    head += f"-{option.short_name}" if option.short_name else "    "
    if option.long_name and option.short_name:
        head += ", "
    if option.long_name:
        head += f"--{option.long_name}"
    head += _argument_hint(option)

    if len(head) <= USAGE_OPTS_WIDTH:
        pad = USAGE_OPTS_WIDTH - len(head)
    else:
        head += "\n"
        pad = USAGE_OPTS_WIDTH
    return f"{head}{' ' * (pad + USAGE_GAP)}{option.help or ''}\n"


def _usage_header(usagestr: Sequence[str]) -> str:
    lines = iter(usagestr)
    out = [f"\n usage: {next(lines)}\n"]
    rest = list(lines)
    index = 0
    while index < len(rest) and rest[index]:
        out.append(f"    or: {rest[index]}\n")
        index += 1
    for line in rest[index:]:
        out.append(f"{'    ' if line else ''}{line}\n")
    return "".join(out)


def usage_text(
    usagestr: Optional[Sequence[str]], options: Sequence[Option], full: bool
) -> str:
    """Return the full usage message for a set of options."""
    if not usagestr:
        return ""
    parts = [_usage_header(usagestr)]
    if not options or options[0].type is not OptionType.GROUP:
        parts.append("\n")
    parts.extend(
        format_option_help(option, full)
        for option in options
        if option.type is not OptionType.END
    )
    parts.append("\n")
    return "".join(parts)


def _matches(option: Option, optstr: str, short_opt: bool) -> bool:
    if short_opt:
        return (option.short_name or "") == optstr[:1]
    if option.long_name is None:
        return False
    if prefixcmp(optstr, option.long_name) == 0:
        return True
    return optstr.startswith("no-") and prefixcmp(optstr[3:], option.long_name) == 0


def options_usage_text(
    usagestr: Optional[Sequence[str]],
    options: Sequence[Option],
    optstr: str,
    short_opt: bool,
) -> str:
    """Return the usage header and the help of the option named by optstr."""
    parts = []
    if usagestr:
        parts.append(_usage_header(usagestr))
        parts.append("\n")
    for option in options:
        if option.type is OptionType.END:
            break
        if _matches(option, optstr, short_opt):
            parts.append(format_option_help(option, False))
            break
    return "".join(parts)


def verbosity_callback(option: Option, arg: Optional[str], unset: bool) -> int:
    """Raise or lower the verbosity level kept in option.value."""
    level = option.value or 0
    if unset:
        level = 0
    elif option.short_name == "v":
        level = level + 1 if level >= 0 else 1
    else:
        level = level - 1 if level <= 0 else -1
    option.value = level
    return 0