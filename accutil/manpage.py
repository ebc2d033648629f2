"""Showing a command's manual page through an external viewer."""

from __future__ import annotations

import os
import sys
from typing import Optional

from accutil.util import is_absolute_path, warning

__all__ = [
    "PREFIX",
    "DEFAULT_MAN_PATH",
    "cmd_to_page",
    "setup_man_path",
    "help_show_man_page",
]

PREFIX = "/usr"
DEFAULT_MAN_PATH = "share/man"


def _system_path(path: str) -> str:
    return path if is_absolute_path(path) else f"{PREFIX}/{path}"


def cmd_to_page(cmd: Optional[str], util_name: str) -> str:
    """Return the manual page name for a command of a utility."""
    if cmd is None:
        return util_name
    if cmd.startswith(util_name):
        return cmd
    return f"{util_name}-{cmd}"


def setup_man_path(man_path: str = DEFAULT_MAN_PATH) -> str:
    """Put man_path in front of MANPATH and return the new value.

    The trailing ':' lets man fall back to the system-wide paths.
    """
    old_path = os.environ.get("MANPATH")
    new_path = f"{_system_path(man_path)}:{old_path or ''}"
    os.environ["MANPATH"] = new_path
    return new_path


def _exec(path: str, args: list[str]) -> None:
    try:
        os.execvp(path, args)
    except OSError as exc:
        warning(f"failed to exec '{path}': {exc.strerror or exc}")


def _exec_man_konqueror(path: Optional[str], page: str) -> None:
    if not os.environ.get("DISPLAY"):
        return
    filename = "kfmclient"
    if path:
        head, sep, base = path.rpartition("/")
        if sep:
            if base == "konqueror":
                path = f"{head}/kfmclient"
            filename = "/" + base
    else:
        path = "kfmclient"
    _exec(path, [filename, "newTab", f"man:{page}(1)"])


def _exec_man_man(path: Optional[str], page: str) -> None:
    _exec(path or "man", ["man", page])


def _exec_viewer(name: str, page: str) -> None:
    lowered = name.lower()
    if lowered == "man":
        _exec_man_man(None, page)
    elif lowered == "konqueror":
        _exec_man_konqueror(None, page)
    else:
        warning(f"'{name}': unknown man viewer.")


def help_show_man_page(
    cmd: Optional[str], util_name: str, viewer: str = "ACCFG_MAN_VIEWER"
) -> None:
    """Replace the process with a manual page viewer.

    The viewer named by the environment variable ``viewer`` is tried first,
    then man.  Returns only if no viewer could be started.
    """
    fallback = os.environ.get(viewer)
    page = cmd_to_page(cmd, util_name)
    setup_man_path()
    if fallback is not None:
        _exec_viewer(fallback, page)
    _exec_viewer("man", page)
    sys.stderr.write("no man viewer handled the request\n")