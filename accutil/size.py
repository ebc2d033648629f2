"""Size constants and parsing of sizes with K/M/G/T suffixes."""

from __future__ import annotations

import re

__all__ = [
    "SZ_1K",
    "SZ_4K",
    "SZ_1M",
    "SZ_2M",
    "SZ_4M",
    "SZ_16M",
    "SZ_64M",
    "SZ_1G",
    "SZ_1T",
    "BITS_PER_LONG",
    "HPAGE_SIZE",
    "parse_size64_units",
    "parse_size64",
    "align",
    "align_down",
]

SZ_1K = 0x00000400
SZ_4K = 0x00001000
SZ_1M = 0x00100000
SZ_2M = 0x00200000
SZ_4M = 0x00400000
SZ_16M = 0x01000000
SZ_64M = 0x04000000
SZ_1G = 0x40000000
SZ_1T = 0x10000000000

BITS_PER_LONG = 64
HPAGE_SIZE = 2 << 20

_U64_MAX = (1 << 64) - 1

_SUFFIXES = {"k": SZ_1K, "m": SZ_1M, "g": SZ_1G, "t": SZ_1T}

_NUMBER = re.compile(
    r"[ \t\n\v\f\r]*([+-]?)(0[xX][0-9a-fA-F]+|0[0-7]*|[1-9][0-9]*)"
)


def _strtoull(text: str) -> tuple[int, str]:
    """Parse a leading unsigned number (base auto-detected); return value and rest."""
    match = _NUMBER.match(text)
    if match is None:
        return 0, text
    sign, digits = match.groups()
    if digits[:2] in ("0x", "0X"):
        value = int(digits[2:], 16)
    elif digits.startswith("0"):
        value = int(digits, 8)
    else:
        value = int(digits, 10)
    if value > _U64_MAX:
        value = _U64_MAX
    elif sign == "-":
        value = -value & _U64_MAX
    return value, text[match.end():]


def parse_size64_units(text: str) -> tuple[int, int]:
    """Parse a size such as "4K", "0x10M" or "512" into (bytes, unit).

    Raises ValueError for trailing garbage, overflow, or the all-ones value.
    """
    value, rest = _strtoull(text)
    if value == _U64_MAX:
        raise ValueError(f"invalid size: {text!r}")
    unit = _SUFFIXES.get(rest[:1].lower()) if rest else None
    if unit is None:
        unit = 1
    else:
        rest = rest[1:]
    value *= unit
    if value >= _U64_MAX or rest:
        raise ValueError(f"invalid size: {text!r}")
    return value, unit


def parse_size64(text: str) -> int:
    """Parse a size string into a byte count."""
    return parse_size64_units(text)[0]


def align(value: int, alignment: int) -> int:
    """Round value up to a multiple of a power-of-two alignment."""
    return ((value + alignment - 1) & ~(alignment - 1)) & _U64_MAX


def align_down(value: int, alignment: int) -> int:
    """Round value down to a multiple of a power-of-two alignment."""
    return ((value + alignment) & ~(alignment - 1)) - alignment