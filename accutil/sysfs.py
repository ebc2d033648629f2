"""Reading and writing sysfs attributes and scanning device directories."""

from __future__ import annotations

import errno
import logging
import os
import re
from typing import Any, Callable, Optional

__all__ = [
    "SYSFS_ATTR_SIZE",
    "SysfsError",
    "read_attr",
    "write_attr",
    "device_parse",
    "devpath_to_devname",
]

SYSFS_ATTR_SIZE = 1024

_logger = logging.getLogger(__name__)

_O_CLOEXEC = getattr(os, "O_CLOEXEC", 0)
_DEVICE_ID = re.compile(r"[a-z]+[ \t\n\v\f\r]*([+-]?[0-9]+)")

AddDevice = Callable[[Any, int, str, Optional[str], Optional[str]], Any]


class SysfsError(OSError):
    """A sysfs attribute or directory could not be accessed."""


def _fail(code: int, path: str) -> SysfsError:
    return SysfsError(code, os.strerror(code), path)


def read_attr(path: str) -> str:
    """Return the contents of an attribute without its trailing newline.

    Raises SysfsError if it cannot be read or is SYSFS_ATTR_SIZE bytes or longer.
    """
    try:
        fd = os.open(path, os.O_RDONLY | _O_CLOEXEC)
    except OSError as exc:
        raise _fail(exc.errno or errno.EIO, path) from exc
    try:
        data = os.read(fd, SYSFS_ATTR_SIZE)
    except OSError as exc:
        _logger.debug("failed to read %s: %s", path, exc.strerror)
        raise _fail(exc.errno or errno.EIO, path) from exc
    finally:
        os.close(fd)
    if len(data) >= SYSFS_ATTR_SIZE:
        _logger.debug("failed to read %s: attribute too large", path)
        raise _fail(errno.EINVAL, path)
    if data.endswith(b"\n"):
        data = data[:-1]
    return data.decode("utf-8", errors="replace")


def write_attr(path: str, value: str, quiet: bool = False) -> None:
    """Write value to an attribute; raises SysfsError on failure."""
    payload = value.encode("utf-8")
    try:
        fd = os.open(path, os.O_WRONLY | _O_CLOEXEC)
    except OSError as exc:
        _logger.debug("failed to open %s: %s", path, exc.strerror)
        raise _fail(exc.errno or errno.EIO, path) from exc
    try:
        written = os.write(fd, payload)
    except OSError as exc:
        if not quiet:
            _logger.debug("failed to write %s to %s: %s", value, path, exc.strerror)
        raise _fail(exc.errno or errno.EIO, path) from exc
    finally:
        os.close(fd)
    if written < len(payload):
        if not quiet:
            _logger.debug("failed to write %s to %s: short write", value, path)
        raise _fail(errno.EIO, path)


def device_parse(
    base_path: str,
    dev_prefix: Optional[str],
    bus_type: Optional[str],
    name_filter: Optional[Callable[[str], bool]],
    parent: Any,
    add_dev: AddDevice,
) -> int:
    """Call add_dev for every device entry under base_path, in sorted order.

    Entries rejected by name_filter and names containing '!' are skipped.
    The id passed to add_dev is the number after the leading lower-case
    letters, or -1 when there is none.  Returns how many add_dev calls
    returned None.  Raises SysfsError (ENODEV) if base_path cannot be read.
    """
    try:
        names = os.listdir(base_path)
    except OSError as exc:
        raise _fail(errno.ENODEV, base_path) from exc
    if name_filter is not None:
        names = [name for name in names if name_filter(name)]

    add_errors = 0
    for name in sorted(names):
        match = _DEVICE_ID.match(name)
        dev_id = int(match.group(1)) if match else -1
        if "!" in name:
            continue
        device = add_dev(parent, dev_id, f"{base_path}/{name}", dev_prefix, bus_type)
        if device is None:
            add_errors += 1
            _logger.error("%d: add_dev() failed", dev_id)
        else:
            _logger.debug("%d: processed", dev_id)
    return add_errors


def devpath_to_devname(devpath: str) -> str:
    """Return the last component of a device path."""
    head, sep, name = devpath.rpartition("/")
    if not sep:
        raise ValueError(f"not a device path: {devpath!r}")
    return name