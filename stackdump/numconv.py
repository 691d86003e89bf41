"""Small, dependency-free number formatting helpers used when printing frames."""

from __future__ import annotations

import re
import struct

POINTER_SIZE = struct.calcsize("P")
_ADDRESS_MASK = (1 << (POINTER_SIZE * 8)) - 1
_ULONG_BITS = struct.calcsize("L") * 8
_ULONG_MAX = (1 << _ULONG_BITS) - 1

_DEC_PATTERN = re.compile(r"[ \t\n\v\f\r]*([+-]?)([0-9]+)", re.ASCII)


def to_dec_array(value: int) -> str:
    """Return the decimal representation of a non-negative integer."""
    if value < 0:
        raise ValueError(f"value must be non-negative, got {value}")
    return str(value)


def to_hex_array(addr: int) -> str:
    """Return an address as ``0x`` followed by zero-padded upper-case hex digits.

    The width is two digits per byte of a native pointer; values outside the
    pointer range are wrapped the way an unsigned cast would wrap them.
    """
    width = POINTER_SIZE * 2
    return f"0x{addr & _ADDRESS_MASK:0{width}X}"


def try_dec_convert(s: str) -> int | None:
    """Parse a whole string as an unsigned decimal number.

    Leading whitespace and a sign are accepted, as ``strtoul`` accepts them.
    Returns ``None`` when anything other than the number remains. An empty
    string converts to 0, since nothing is left unparsed.
    """
    if s == "":
        return 0
    match = _DEC_PATTERN.fullmatch(s)
    if match is None:
        return None
    sign, digits = match.groups()
    value = int(digits)
    if value > _ULONG_MAX:
        return _ULONG_MAX
    if sign == "-":
        value = (-value) & _ULONG_MAX
    return value