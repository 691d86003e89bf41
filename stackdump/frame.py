"""A single call-stack entry and the symbol table used to describe it."""

from __future__ import annotations

import itertools
import threading
from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import Any

from stackdump.numconv import to_hex_array

_ADDRESS_BASE = 0x1000
_ADDRESS_STEP = 0x10

_lock = threading.Lock()
_by_key: dict[tuple[str, str, int], int] = {}
_by_address: dict[int, tuple[str, str, int]] = {}
_next_address = itertools.count(_ADDRESS_BASE, _ADDRESS_STEP)


def register(name: str, filename: str, lineno: int) -> int:
    """Return the address for a code location, allocating one on first use.

    The same location always maps to the same non-zero address.
    """
    if lineno < 0:
        raise ValueError(f"line number must be non-negative, got {lineno}")
    key = (name, filename, lineno)
    with _lock:
        address = _by_key.get(key)
        if address is None:
            address = next(_next_address)
            _by_key[key] = address
            _by_address[address] = key
        return address


def resolve(address: int) -> tuple[str, str, int] | None:
    """Return ``(name, filename, lineno)`` for a registered address, else None."""
    with _lock:
        return _by_address.get(address)


def _address_of(target: Any) -> int:
    if isinstance(target, int):
        return target
    code = getattr(target, "__code__", None)
    if code is None:
        raise TypeError(f"cannot take the address of {target!r}")
    name = getattr(target, "__qualname__", code.co_name)
    return register(name, code.co_filename, code.co_firstlineno)


@dataclass(frozen=True, order=True)
class Frame:
    """An address in the call stack that can be described on demand.

    A function may be passed instead of an address; the frame then
    refers to that function's definition.
    """

    address: int = field(default=0)

    def __post_init__(self) -> None:
        object.__setattr__(self, "address", _address_of(self.address))

    def __hash__(self) -> int:
        return self.address

    def __bool__(self) -> bool:
        return self.address != 0

    def name(self) -> str:
        """Return the function name, or an empty string when unknown."""
        info = resolve(self.address) if self.address else None
        return info[0] if info else ""

    def source_file(self) -> str:
        """Return the source file path, or an empty string when unknown."""
        info = resolve(self.address) if self.address else None
        return info[1] if info else ""

    def source_line(self) -> int:
        """Return the source line number, or 0 when unknown."""
        info = resolve(self.address) if self.address else None
        return info[2] if info else 0

    def empty(self) -> bool:
        """Tell whether the frame refers to the null address."""
        return self.address == 0

    def __str__(self) -> str:
        return to_string(self)


def _describe(address: int) -> str:
    info = resolve(address) if address else None
    name, filename, lineno = info if info else ("", "", 0)
    text = name or to_hex_array(address)
    if filename and lineno:
        return f"{text} at {filename}:{lineno}"
    if filename:
        return f"{text} in {filename}"
    return text


def to_string(frame: Frame) -> str:
    """Describe one frame in a human readable form; empty for a null frame."""
    if not frame:
        return ""
    return _describe(frame.address)


def format_frames(frames: Iterable[Frame]) -> str:
    """Describe frames one per line, numbered as `` 0# ...``."""
    return "".join(
        f"{index:>2}# {_describe(frame.address)}\n"
        for index, frame in enumerate(frames)
    )