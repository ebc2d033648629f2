"""Incremental command-line parsing driven by Option descriptions."""

from __future__ import annotations

import enum
import itertools
import re
import sys
from typing import Any, Iterable, Iterator, Optional, Sequence

from accutil.option import (
    Option,
    OptionFlag,
    OptionType,
    ParseFlag,
    options_usage_text,
    usage_text,
)
from accutil.util import die, error, fix_filename, skip_prefix

__all__ = [
    "ParseStep",
    "ParseContext",
    "parse_options",
    "parse_options_prefix",
    "parse_options_subcommand",
]

_OPT_SHORT = 1
_OPT_UNSET = 2

_U64_MAX = (1 << 64) - 1
_LONG_MIN = -(1 << 63)
_LONG_MAX = (1 << 63) - 1

_NUMBER = re.compile(r"[ \t\n\v\f\r]*([+-]?[0-9]+)")

_FLAG_TYPES = frozenset(
    {
        OptionType.BOOLEAN,
        OptionType.INCR,
        OptionType.BIT,
        OptionType.SET_UINT,
        OptionType.SET_PTR,
    }
)
_NUMERIC_TYPES = frozenset(
    {OptionType.INTEGER, OptionType.UINTEGER, OptionType.LONG, OptionType.U64}
)


class ParseStep(enum.IntEnum):
    """Outcome of one ParseContext.step() run."""

    HELP = -1
    DONE = 0
    LIST_OPTS = 1
    LIST_SUBCMDS = 2
    UNKNOWN = 3


class _OptionError(Exception):
    """An option value could not be stored; the message may be empty."""


def _live(options: Iterable[Option]) -> Iterator[Option]:
    return itertools.takewhile(lambda o: o.type is not OptionType.END, options)


def _opterror(option: Option, reason: str, flags: int) -> _OptionError:
    if flags & _OPT_SHORT:
        return _OptionError(f"switch `{option.short_name}' {reason}")
    if flags & _OPT_UNSET:
        return _OptionError(f"option `no-{option.long_name}' {reason}")
    return _OptionError(f"option `{option.long_name}' {reason}")


def _convert_number(kind: OptionType, text: str) -> tuple[int, str]:
    """Parse a leading decimal number the way the C library would store it."""
    match = _NUMBER.match(text)
    if match is None:
        return 0, text
    value = int(match.group(1))
    rest = text[match.end():]
    if kind is OptionType.U64:
        value = min(abs(value), _U64_MAX)
        if match.group(1).startswith("-"):
            value = -value & _U64_MAX
    else:
        value = max(_LONG_MIN, min(_LONG_MAX, value))
        if kind is OptionType.INTEGER:
            value = ((value + (1 << 31)) % (1 << 32)) - (1 << 31)
        elif kind is OptionType.UINTEGER:
            value &= 0xFFFFFFFF
    return value, rest


def _typo(arg: str) -> None:
    error(f"did you mean `--{arg}` (with two dashes ?)")
    raise SystemExit(129)


def _check_typos(arg: str, options: Sequence[Option]) -> None:
    if len(arg) < 3:
        return
    if arg.startswith("no-"):
        _typo(arg)
    for option in _live(options):
        if option.long_name and option.long_name.startswith(arg):
            _typo(arg)


class ParseContext:
    """State of a parse over one argument vector.

    ``argv[0]`` is the program or command name; the rest are parsed.
    Arguments that are not consumed as options are collected and returned
    by end().
    """

    def __init__(
        self,
        argv: Sequence[str],
        prefix: Optional[str] = None,
        flags: ParseFlag = ParseFlag(0),
    ) -> None:
        argv = list(argv)
        self.flags = ParseFlag(flags)
        self.prefix = prefix
        self.args = argv[1:]
        self.pos = 0
        self.out = argv[:1] if self.flags & ParseFlag.KEEP_ARGV0 else []
        self.opt: Optional[str] = None
        if self.flags & ParseFlag.KEEP_UNKNOWN and (
            self.flags & ParseFlag.STOP_AT_NON_OPTION
        ):
            die("STOP_AT_NON_OPTION and KEEP_UNKNOWN don't go together")

    @property
    def current(self) -> Optional[str]:
        """The argument the parse stopped at, if any."""
        return self.args[self.pos] if self.pos < len(self.args) else None

    def _get_arg(self, option: Option, flags: int) -> Any:
        if self.opt is not None:
            arg, self.opt = self.opt, None
            return arg
        is_last = self.pos + 1 >= len(self.args)
        if option.flags & OptionFlag.LASTARG_DEFAULT and (
            is_last or self.args[self.pos + 1].startswith("-")
        ):
            return option.defval
        if not is_last:
            self.pos += 1
            return self.args[self.pos]
        raise _opterror(option, "requires a value", flags)

    def _get_value(self, option: Option, flags: int) -> None:
        unset = bool(flags & _OPT_UNSET)
        kind = option.type

        if unset and self.opt is not None:
            raise _opterror(option, "takes no value", flags)
        if unset and option.flags & OptionFlag.NONEG:
            raise _opterror(option, "isn't available", flags)
        if not flags & _OPT_SHORT and self.opt is not None:
            if kind in _FLAG_TYPES or (
                kind is OptionType.CALLBACK and option.flags & OptionFlag.NOARG
            ):
                raise _opterror(option, "takes no value", flags)

        optional_missing = bool(option.flags & OptionFlag.OPTARG) and self.opt is None

        if kind is OptionType.BIT:
            current = option.value or 0
            option.value = current & ~option.defval if unset else current | option.defval
        elif kind is OptionType.BOOLEAN:
            option.value = not unset
            option.is_set = True
        elif kind is OptionType.INCR:
            option.value = 0 if unset else (option.value or 0) + 1
        elif kind is OptionType.SET_UINT:
            option.value = 0 if unset else option.defval
        elif kind is OptionType.SET_PTR:
            option.value = None if unset else option.defval
        elif kind in (OptionType.STRING, OptionType.FILENAME):
            if unset:
                value = None
            elif optional_missing:
                value = option.defval
            else:
                value = self._get_arg(option, flags)
            if kind is OptionType.FILENAME:
                value = fix_filename(self.prefix, value)
            option.value = value
        elif kind is OptionType.CALLBACK:
            if option.callback is None:
                die("should not happen, someone must be hit on the forehead")
            if unset:
                failed = option.callback(option, None, True)
            elif option.flags & OptionFlag.NOARG or optional_missing:
                failed = option.callback(option, None, False)
            else:
                failed = option.callback(option, self._get_arg(option, flags), False)
            if failed:
                raise _OptionError("")
        elif kind in _NUMERIC_TYPES:
            if unset:
                option.value = 0
            elif optional_missing:
                option.value = option.defval
            else:
                value, rest = _convert_number(kind, str(self._get_arg(option, flags)))
                option.value = value
                if rest:
                    raise _opterror(option, "expects a numerical value", flags)
        else:
            die("should not happen, someone must be hit on the forehead")

    def _parse_short(self, options: Sequence[Option]) -> bool:
        assert self.opt
        for option in _live(options):
            if option.short_name is not None and option.short_name == self.opt[0]:
                self.opt = self.opt[1:] or None
                self._get_value(option, _OPT_SHORT)
                return True
        return False

    def _parse_long(self, arg: str, options: Sequence[Option]) -> bool:
        eq = arg.find("=")
        arg_end = len(arg) if eq < 0 else eq
        abbrev: Optional[Option] = None
        ambiguous: Optional[Option] = None
        abbrev_flags = ambiguous_flags = 0

        for option in _live(options):
            long_name = option.long_name
            if not long_name:
                continue
            flags = 0
            rest = skip_prefix(arg, long_name)

            if option.type is OptionType.ARGUMENT:
                if rest is None:
                    continue
                if rest.startswith("="):
                    raise _opterror(option, "takes no value", flags)
                if rest:
                    continue
                self.out.append("--" + arg)
                return True

            if rest is None:
                abbreviated = matched = False
                if long_name.startswith("no-"):
                    # "--foo" negates an option whose own name is "no-foo".
                    rest = skip_prefix(arg, long_name[3:])
                    if rest is not None:
                        flags |= _OPT_UNSET
                        matched = True
                    elif long_name[3:].startswith(arg):
                        flags |= _OPT_UNSET
                        abbreviated = True
                if not matched and not abbreviated:
                    if long_name[:arg_end] == arg[:arg_end]:
                        abbreviated = True
                    elif "no-".startswith(arg):
                        flags |= _OPT_UNSET
                        abbreviated = True
                    elif not arg.startswith("no-"):
                        continue
                    else:
                        flags |= _OPT_UNSET
                        rest = skip_prefix(arg[3:], long_name)
                        if rest is None:
                            if not long_name.startswith(arg[3:]):
                                continue
                            abbreviated = True
                if abbreviated:
                    if abbrev is not None:
                        ambiguous, ambiguous_flags = abbrev, abbrev_flags
                    if not flags & _OPT_UNSET and arg_end < len(arg):
                        self.opt = arg[arg_end + 1:]
                    abbrev, abbrev_flags = option, flags
                    continue

            assert rest is not None
            if rest:
                if not rest.startswith("="):
                    continue
                self.opt = rest[1:]
            self._get_value(option, flags)
            return True

        if ambiguous is not None and abbrev is not None:
            raise _OptionError(
                f"Ambiguous option: {arg} (could be "
                f"--{'no-' if ambiguous_flags & _OPT_UNSET else ''}{ambiguous.long_name}"
                f" or --{'no-' if abbrev_flags & _OPT_UNSET else ''}{abbrev.long_name})"
            )
        if abbrev is not None:
            self._get_value(abbrev, abbrev_flags)
            return True
        return False

    @staticmethod
    def _show(text: str) -> ParseStep:
        sys.stderr.write(text)
        return ParseStep.HELP

    def _usage_error(
        self,
        exc: _OptionError,
        usagestr: Optional[Sequence[str]],
        options: Sequence[Option],
        optstr: str,
        short_opt: bool,
    ) -> ParseStep:
        if str(exc):
            error(str(exc))
        return self._show(options_usage_text(usagestr, options, optstr, short_opt))

    def step(
        self, options: Sequence[Option], usagestr: Optional[Sequence[str]] = None
    ) -> ParseStep:
        """Parse options until done, help is requested, or an unknown one is met."""
        options = list(options)
        internal_help = not self.flags & ParseFlag.NO_INTERNAL_HELP
        self.opt = None

        while self.pos < len(self.args):
            arg = self.args[self.pos]

            if not arg.startswith("-") or arg == "-":
                if self.flags & ParseFlag.STOP_AT_NON_OPTION:
                    break
                self.out.append(arg)
                self.pos += 1
                continue

            if arg[1] != "-":
                self.opt = arg[1:]
                if internal_help and self.opt[0] == "h":
                    return self._show(usage_text(usagestr, options, False))
                try:
                    known = self._parse_short(options)
                except _OptionError as exc:
                    return self._usage_error(exc, usagestr, options, arg[1:], True)
                if known and self.opt is not None:
                    _check_typos(arg[1:], options)
                while known and self.opt is not None:
                    if internal_help and self.opt[0] == "h":
                        return self._show(usage_text(usagestr, options, False))
                    chunk = self.opt
                    try:
                        known = self._parse_short(options)
                    except _OptionError as exc:
                        return self._usage_error(exc, usagestr, options, chunk, True)
                    if not known:
                        # Report the rest of the bundle as if it stood alone.
                        self.args[self.pos] = "-" + self.opt
            elif arg == "--":
                if not self.flags & ParseFlag.KEEP_DASHDASH:
                    self.pos += 1
                break
            else:
                name = arg[2:]
                if internal_help and name == "help-all":
                    return self._show(usage_text(usagestr, options, True))
                if internal_help and name == "help":
                    return self._show(usage_text(usagestr, options, False))
                if name == "list-opts":
                    return ParseStep.LIST_OPTS
                if name == "list-cmds":
                    return ParseStep.LIST_SUBCMDS
                try:
                    known = self._parse_long(name, options)
                except _OptionError as exc:
                    return self._usage_error(exc, usagestr, options, name, False)

            if not known:
                if not self.flags & ParseFlag.KEEP_UNKNOWN:
                    return ParseStep.UNKNOWN
                self.out.append(self.args[self.pos])
                self.opt = None
            self.pos += 1

        return ParseStep.DONE

    def end(self) -> list[str]:
        """Return the arguments left over: kept ones followed by unparsed ones."""
        return self.out + self.args[self.pos:]


def _parse(
    argv: Sequence[str],
    prefix: Optional[str],
    options: Sequence[Option],
    subcommands: Optional[Sequence[str]],
    usagestr: Optional[Sequence[str]],
    flags: ParseFlag,
) -> list[str]:
    options = list(options)
    usage = list(usagestr) if usagestr else []
    if subcommands and not (usage and usage[0]):
        built = f"accel-config {argv[0]} [<options>] {{{'|'.join(subcommands)}}}"
        usage = [built, *usage[1:]]

    ctx = ParseContext(argv, prefix, flags)
    result = ctx.step(options, usage)
    if result is ParseStep.HELP:
        raise SystemExit(0)
    if result is ParseStep.LIST_OPTS:
        print("".join(f"--{o.long_name or ''} " for o in _live(options)), end="")
        raise SystemExit(0)
    if result is ParseStep.LIST_SUBCMDS:
        print("".join(f"{name} " for name in subcommands or ()), end="")
        raise SystemExit(0)
    if result is ParseStep.UNKNOWN:
        current = ctx.current or ""
        if current.startswith("--"):
            error(f"unknown option `{current[2:]}'")
        else:
            error(f"unknown switch `{(ctx.opt or '')[:1]}'")
        sys.stderr.write(usage_text(usage, options, False))
        raise SystemExit(129)
    return ctx.end()


def parse_options(
    argv: Sequence[str],
    options: Sequence[Option],
    usagestr: Optional[Sequence[str]] = None,
    flags: ParseFlag = ParseFlag(0),
) -> list[str]:
    """Parse argv against options and return the non-option arguments."""
    return _parse(argv, None, options, None, usagestr, flags)


def parse_options_prefix(
    argv: Sequence[str],
    prefix: Optional[str],
    options: Sequence[Option],
    usagestr: Optional[Sequence[str]] = None,
    flags: ParseFlag = ParseFlag(0),
) -> list[str]:
    """Like parse_options(), making relative filename options relative to prefix."""
    return _parse(argv, prefix, options, None, usagestr, flags)


def parse_options_subcommand(
    argv: Sequence[str],
    options: Sequence[Option],
    subcommands: Optional[Sequence[str]],
    usagestr: Optional[Sequence[str]] = None,
    flags: ParseFlag = ParseFlag(0),
) -> list[str]:
    """Like parse_options(), building a usage line from subcommands if none is given."""
    return _parse(argv, None, options, subcommands, usagestr, flags)