import os

import pytest

from accutil import manpage
from accutil.manpage import cmd_to_page, help_show_man_page, setup_man_path


class _Exec(Exception):
    pass


@pytest.fixture
def clean_env(monkeypatch):
    monkeypatch.delenv("MANPATH", raising=False)
    monkeypatch.delenv("ACCFG_MAN_VIEWER", raising=False)
    monkeypatch.delenv("DISPLAY", raising=False)
    return monkeypatch


@pytest.fixture
def failing_exec(clean_env):
    calls = []

    def fake(path, args):
        calls.append((path, list(args)))
        raise OSError(2, "No such file or directory")

    clean_env.setattr(os, "execvp", fake)
    return calls


def test_cmd_to_page():
    assert cmd_to_page(None, "accel-config") == "accel-config"
    assert cmd_to_page("accel-config-list", "accel-config") == "accel-config-list"
    assert cmd_to_page("list", "accel-config") == "accel-config-list"


def test_setup_man_path_without_old(clean_env):
    assert setup_man_path("/opt/man") == "/opt/man:"
    assert os.environ["MANPATH"] == "/opt/man:"


def test_setup_man_path_keeps_old(clean_env):
    clean_env.setenv("MANPATH", "/old/man")
    assert setup_man_path("/opt/man") == "/opt/man:/old/man"


def test_setup_man_path_relative_uses_prefix(clean_env):
    assert setup_man_path("share/man") == f"{manpage.PREFIX}/share/man:"


def test_show_man_page_falls_through(failing_exec, capsys):
    help_show_man_page("list", "accel-config", "ACCFG_MAN_VIEWER")
    assert failing_exec == [("man", ["man", "accel-config-list"])]
    err = capsys.readouterr().err
    assert "failed to exec 'man'" in err
    assert "no man viewer handled the request" in err


def test_konqueror_viewer_first(failing_exec, clean_env, capsys):
    clean_env.setenv("ACCFG_MAN_VIEWER", "Konqueror")
    clean_env.setenv("DISPLAY", ":0")
    help_show_man_page(None, "accel-config", "ACCFG_MAN_VIEWER")
    assert failing_exec[0] == (
        "kfmclient",
        ["kfmclient", "newTab", "man:accel-config(1)"],
    )
    assert failing_exec[1][0] == "man"
    err = capsys.readouterr().err
    assert "failed to exec 'kfmclient'" in err
    assert "failed to exec 'man'" in err
    assert "no man viewer handled the request" in err


def test_unknown_viewer_warns(failing_exec, clean_env, capsys):
    clean_env.setenv("ACCFG_MAN_VIEWER", "lynx")
    help_show_man_page(None, "accel-config", "ACCFG_MAN_VIEWER")
    assert "'lynx': unknown man viewer." in capsys.readouterr().err
    assert [path for path, _ in failing_exec] == ["man"]


def test_successful_exec_does_not_return(clean_env):
    def fake(path, args):
        raise _Exec(path, list(args))

    clean_env.setattr(os, "execvp", fake)
    with pytest.raises(_Exec) as exc:
        help_show_man_page("config", "accel-config", "ACCFG_MAN_VIEWER")
    assert exc.value.args == ("man", ["man", "accel-config-config"])
    assert os.environ["MANPATH"].endswith(":")