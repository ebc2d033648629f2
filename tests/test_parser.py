import pytest

from accutil.option import Option, OptionFlag, OptionType, ParseFlag
from accutil.parser import (
    ParseContext,
    ParseStep,
    parse_options,
    parse_options_prefix,
    parse_options_subcommand,
)


def _verbose():
    return Option(OptionType.BOOLEAN, "v", "verbose", help="be verbose")


def _num():
    return Option(OptionType.INTEGER, "n", "num", help="a number")


def test_boolean_short_and_rest_kept():
    verbose = _verbose()
    rest = parse_options(["prog", "-v", "file1", "file2"], [verbose])
    assert verbose.value is True
    assert verbose.is_set is True
    assert rest == ["file1", "file2"]


def test_boolean_negated():
    verbose = _verbose()
    parse_options(["prog", "--verbose", "--no-verbose"], [verbose])
    assert verbose.value is False


@pytest.mark.parametrize(
    "args", [["--num=42"], ["-n42"], ["-n", "42"], ["--num", "42"]]
)
def test_integer_forms(args):
    num = _num()
    assert parse_options(["prog", *args], [num]) == []
    assert num.value == 42


def test_integer_bad_value_reports_and_exits_zero(capsys):
    num = _num()
    with pytest.raises(SystemExit) as exc:
        parse_options(["prog", "--num=abc"], [num])
    assert exc.value.code == 0
    assert "option `num' expects a numerical value" in capsys.readouterr().err


def test_string_requires_value(capsys):
    name = Option(OptionType.STRING, "s", "name", help="a name")
    with pytest.raises(SystemExit):
        parse_options(["prog", "--name"], [name])
    assert "option `name' requires a value" in capsys.readouterr().err


def test_abbreviated_long_option():
    verbose = _verbose()
    parse_options(["prog", "--verb"], [verbose])
    assert verbose.value is True


def test_ambiguous_abbreviation(capsys):
    verbose = _verbose()
    version = Option(OptionType.BOOLEAN, None, "version", help="show version")
    with pytest.raises(SystemExit):
        parse_options(["prog", "--ver"], [verbose, version])
    err = capsys.readouterr().err
    assert "Ambiguous option: ver (could be --verbose or --version)" in err


def test_unknown_long_option_exits_129(capsys):
    with pytest.raises(SystemExit) as exc:
        parse_options(["prog", "--bogus"], [_verbose()], ["prog [options]"])
    assert exc.value.code == 129
    err = capsys.readouterr().err
    assert "unknown option `bogus'" in err
    assert "usage: prog [options]" in err


def test_unknown_switch(capsys):
    with pytest.raises(SystemExit) as exc:
        parse_options(["prog", "-x"], [_verbose()])
    assert exc.value.code == 129
    assert "unknown switch `x'" in capsys.readouterr().err


def test_keep_unknown():
    verbose = _verbose()
    rest = parse_options(
        ["prog", "--bogus", "-v", "arg"], [verbose], flags=ParseFlag.KEEP_UNKNOWN
    )
    assert rest == ["--bogus", "arg"]
    assert verbose.value is True


def test_double_dash_stops_parsing():
    verbose = _verbose()
    rest = parse_options(["prog", "-v", "--", "-x"], [verbose])
    assert rest == ["-x"]


def test_keep_dashdash():
    rest = parse_options(
        ["prog", "--", "-x"], [_verbose()], flags=ParseFlag.KEEP_DASHDASH
    )
    assert rest == ["--", "-x"]


def test_stop_at_non_option():
    verbose = _verbose()
    rest = parse_options(
        ["prog", "sub", "-v"], [verbose], flags=ParseFlag.STOP_AT_NON_OPTION
    )
    assert rest == ["sub", "-v"]
    assert verbose.value is None


def test_keep_argv0():
    rest = parse_options(["prog", "a"], [_verbose()], flags=ParseFlag.KEEP_ARGV0)
    assert rest == ["prog", "a"]


def test_incompatible_flags_die():
    with pytest.raises(SystemExit) as exc:
        ParseContext(
            ["prog"], None, ParseFlag.KEEP_UNKNOWN | ParseFlag.STOP_AT_NON_OPTION
        )
    assert exc.value.code == 128


def test_bit_set_and_clear():
    flag = Option(OptionType.BIT, "b", "bit", value=1, help="bit", defval=4)
    parse_options(["prog", "-b"], [flag])
    assert flag.value == 1 | 4
    parse_options(["prog", "--no-bit"], [flag])
    assert flag.value == 1


def test_incr_bundled():
    counter = Option(OptionType.INCR, "v", "verbose", help="more")
    parse_options(["prog", "-vvv"], [counter])
    assert counter.value == 3


def test_typo_single_dash_long_name(capsys):
    with pytest.raises(SystemExit) as exc:
        parse_options(["prog", "-verbose"], [_verbose()])
    assert exc.value.code == 129
    assert "did you mean `--verbose` (with two dashes ?)" in capsys.readouterr().err


def test_filename_prefix():
    out = Option(OptionType.FILENAME, "f", "file", help="file")
    parse_options_prefix(["prog", "-f", "out.txt"], "dir/", [out])
    assert out.value == "dir/out.txt"
    parse_options_prefix(["prog", "-f", "-"], "dir/", [out])
    assert out.value == "-"


def test_callback_receives_argument():
    seen = []
    cb = Option(
        OptionType.CALLBACK,
        "c",
        "cb",
        help="callback",
        callback=lambda opt, arg, unset: seen.append((arg, unset)),
    )
    parse_options(["prog", "--cb=abc", "-c", "def", "--no-cb"], [cb])
    assert seen == [("abc", False), ("def", False), (None, True)]


def test_callback_lastarg_default():
    seen = []
    cb = Option(
        OptionType.CALLBACK,
        None,
        "cb",
        help="callback",
        callback=lambda opt, arg, unset: seen.append(arg),
        defval="fallback",
        flags=OptionFlag.LASTARG_DEFAULT,
    )
    parse_options(["prog", "--cb"], [cb])
    assert seen == ["fallback"]


def test_noneg_option(capsys):
    num = Option(OptionType.INTEGER, None, "num", help="n", flags=OptionFlag.NONEG)
    with pytest.raises(SystemExit):
        parse_options(["prog", "--no-num"], [num])
    assert "option `no-num' isn't available" in capsys.readouterr().err


def test_boolean_takes_no_value(capsys):
    with pytest.raises(SystemExit):
        parse_options(["prog", "--verbose=1"], [_verbose()])
    assert "option `verbose' takes no value" in capsys.readouterr().err


def test_option_named_with_no_prefix():
    color = Option(OptionType.BOOLEAN, None, "no-color", help="plain output")
    parse_options(["prog", "--color"], [color])
    assert color.value is False
    parse_options(["prog", "--no-color"], [color])
    assert color.value is True


def test_list_opts(capsys):
    with pytest.raises(SystemExit) as exc:
        parse_options(["prog", "--list-opts"], [_verbose(), _num()])
    assert exc.value.code == 0
    assert capsys.readouterr().out == "--verbose --num "


def test_subcommand_usage_and_list(capsys):
    with pytest.raises(SystemExit) as exc:
        parse_options_subcommand(["create", "--help"], [_verbose()], ["a", "b"], [])
    assert exc.value.code == 0
    assert "usage: accel-config create [<options>] {a|b}" in capsys.readouterr().err

    with pytest.raises(SystemExit):
        parse_options_subcommand(["create", "--list-cmds"], [_verbose()], ["a", "b"])
    assert capsys.readouterr().out == "a b "


def test_step_reports_unknown_without_exit():
    ctx = ParseContext(["prog", "-v", "--bogus", "tail"])
    assert ctx.step([_verbose()]) is ParseStep.UNKNOWN
    assert ctx.current == "--bogus"
    assert ctx.end() == ["--bogus", "tail"]


def test_step_help_without_usage_is_silent(capsys):
    ctx = ParseContext(["prog", "-h"])
    assert ctx.step([_verbose()]) is ParseStep.HELP
    assert capsys.readouterr().err == ""