"""JSON text output for device listings, with size and hex value rendering."""

from __future__ import annotations

import enum
import json
from collections.abc import Mapping
from typing import Any, Sequence, TextIO

__all__ = [
    "JsonFlag",
    "SizeValue",
    "HexValue",
    "format_size",
    "format_hex",
    "bitmask_to_string",
    "to_json_text",
    "display_json_array",
]

_U64_MASK = (1 << 64) - 1
_INDENT = "  "
_TWO_GIB = 2 * 1024 * 1024 * 1024

_ESCAPES = {
    '"': '\\"',
    "\\": "\\\\",
    "/": "\\/",
    "\b": "\\b",
    "\n": "\\n",
    "\r": "\\r",
    "\t": "\\t",
    "\f": "\\f",
}


class JsonFlag(enum.IntFlag):
    """Options that select what is listed and how it is shown."""

    IDLE = 1 << 0
    HUMAN = 1 << 1
    VERBOSE = 1 << 2
    SAVE = 1 << 3


class SizeValue(int):
    """A byte count; shown in MiB/GiB form when human output is requested."""


class HexValue(int):
    """An integer that is always shown as a quoted hexadecimal string."""


def format_size(value: int) -> str:
    """Render a byte count the way human-readable listings show it.

    Counts below 5000 KiB are plain numbers; larger ones become a quoted
    string with binary and decimal units, e.g. ``"4.88 MiB (5.12 MB)"``.
    """
    size = value & _U64_MASK
    if size < 5000 * 1024:
        return str(size)

    scaled = (size * 200) & _U64_MASK
    if size < _TWO_GIB:
        centi = (scaled // (1 << 20) + 1) // 2
        binary = f"{centi // 100}.{centi % 100:02d} MiB"
        centi = (size // (1000000 // 200) + 1) // 2
        decimal = f"{centi // 100}.{centi % 100:02d} MB"
    else:
        centi = (scaled // (1 << 30) + 1) // 2
        binary = f"{centi // 100}.{centi % 100:02d} GiB"
        centi = (size // (1000000000 // 200) + 1) // 2
        decimal = f"{centi // 100}.{centi % 100:02d} GB"
    return f'"{binary} ({decimal})"'


def format_hex(value: int) -> str:
    """Render an integer as a quoted hex string; zero is shown as "0"."""
    number = value & _U64_MASK
    return f'"{number:#x}"' if number else '"0"'


def bitmask_to_string(bits: Sequence[int]) -> str:
    """Join eight 32-bit words as comma-separated 8-digit hex groups."""
    words = list(bits)
    if len(words) != 8:
        raise ValueError(f"expected 8 words, got {len(words)}")
    return ",".join(f"{word & 0xFFFFFFFF:08x}" for word in words)


def _quote(text: str) -> str:
    parts = ['"']
    for char in text:
        escaped = _ESCAPES.get(char)
        if escaped is not None:
            parts.append(escaped)
        elif ord(char) < 0x20:
            parts.append(f"\\u{ord(char):04x}")
        else:
            parts.append(char)
    parts.append('"')
    return "".join(parts)


def _render(obj: Any, flags: JsonFlag, level: int, out: list[str]) -> None:
    if isinstance(obj, HexValue):
        out.append(format_hex(obj))
    elif isinstance(obj, SizeValue):
        out.append(format_size(obj) if flags & JsonFlag.HUMAN else str(int(obj)))
    elif obj is None:
        out.append("null")
    elif isinstance(obj, bool):
        out.append("true" if obj else "false")
    elif isinstance(obj, int):
        out.append(str(int(obj)))
    elif isinstance(obj, float):
        out.append(json.dumps(obj))
    elif isinstance(obj, str):
        out.append(_quote(obj))
    elif isinstance(obj, Mapping):
        out.append("{")
        had_children = False
        for key, item in obj.items():
            if had_children:
                out.append(",")
            out.append("\n")
            had_children = True
            out.append(_INDENT * (level + 1))
            out.append(_quote(str(key)))
            out.append(":")
            _render(item, flags, level + 1, out)
        if had_children:
            out.append("\n")
            out.append(_INDENT * level)
        out.append("}")
    elif isinstance(obj, (list, tuple)):
        out.append("[\n")
        had_children = False
        for item in obj:
            if had_children:
                out.append(",\n")
            had_children = True
            out.append(_INDENT * (level + 1))
            _render(item, flags, level + 1, out)
        if had_children:
            out.append("\n")
        out.append(_INDENT * level)
        out.append("]")
    else:
        raise TypeError(f"cannot render {type(obj).__name__} as JSON")


def to_json_text(obj: Any, flags: JsonFlag = JsonFlag(0)) -> str:
    """Render obj as pretty-printed JSON text.

    SizeValue items are shown in human form only when flags has HUMAN.
    """
    out: list[str] = []
    _render(obj, JsonFlag(flags), 0, out)
    return "".join(out)


def display_json_array(
    out: TextIO, items: Sequence[Any], flags: JsonFlag = JsonFlag(0)
) -> None:
    """Write a listing to out.

    In human mode a single-item listing is written as that item alone;
    otherwise the whole array is written.  Nothing is written for an empty
    listing in human mode.
    """
    flags = JsonFlag(flags)
    entries = list(items)
    if len(entries) > 1 or not flags & JsonFlag.HUMAN:
        out.write(to_json_text(entries, flags) + "\n")
    elif entries:
        out.write(to_json_text(entries[0], flags) + "\n")