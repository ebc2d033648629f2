"""Splitting device, group, work queue and engine names into their parts."""

from __future__ import annotations

import re

__all__ = [
    "scan_device_type_id",
    "scan_parent_child_names",
    "scan_parent_child_ids",
]

_WS = r"[ \t\n\v\f\r]*"
_UINT = _WS + r"([+-]?[0-9]+)"

_TYPE_ID = re.compile(r"([a-z]+)" + _UINT)
_PARENT_CHILD = re.compile(r"([^/]+)/" + _WS + r"([^ \t\n\v\f\r]+)")
_IDS = re.compile(r"[a-z]+" + _UINT + r"\." + _UINT)


def _to_uint(text: str) -> int:
    value = int(text)
    magnitude = min(abs(value), (1 << 64) - 1)
    if value < 0:
        magnitude = -magnitude
    return magnitude & 0xFFFFFFFF


def scan_device_type_id(name: str) -> tuple[str, int]:
    """Split a name such as "dsa0" into its type and id.

    Raises ValueError if the name does not start that way.
    """
    match = _TYPE_ID.match(name)
    if match is None:
        raise ValueError(f"invalid device name: {name!r}")
    return match.group(1), _to_uint(match.group(2))


def scan_parent_child_names(name: str) -> tuple[str, str]:
    """Split a name such as "dsa0/wq0.1" into parent and child names.

    Raises ValueError if there is no parent, slash and child.
    """
    match = _PARENT_CHILD.match(name)
    if match is None:
        raise ValueError(f"invalid parent/child name: {name!r}")
    return match.group(1), match.group(2)


def scan_parent_child_ids(name: str) -> tuple[int, int]:
    """Split a name such as "wq0.1" into parent and child ids.

    Raises ValueError if the name does not have that form.
    """
    match = _IDS.match(name)
    if match is None:
        raise ValueError(f"invalid child name: {name!r}")
    return _to_uint(match.group(1)), _to_uint(match.group(2))