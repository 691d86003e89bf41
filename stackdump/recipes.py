"""Ready-made ways of printing traces and of attaching them to exceptions."""

from __future__ import annotations

import argparse
import sys
from collections.abc import Iterable, Sequence
from typing import NoReturn

from stackdump.frame import Frame
from stackdump.stacktrace import Stacktrace

_TRACE_ATTR = "_stackdump_trace"


def dump_compact(trace: Iterable[Frame]) -> str:
    """Return every frame address in hex, each followed by a comma."""
    return "".join(f"{hex(frame.address)}," for frame in trace)


def format_numbered(trace: Iterable[Frame]) -> str:
    """Describe frames one per line as `` 0# name``, using names only."""
    return "".join(
        f"{index:>2}# {frame.name()}\n" for index, frame in enumerate(trace)
    )


class TracedError(Exception):
    """An exception that records the call sequence where it was created."""

    def __init__(self, *args: object, trace: Stacktrace | None = None) -> None:
        super().__init__(*args)
        setattr(self, _TRACE_ATTR, trace if trace is not None else Stacktrace(1))

    @property
    def trace(self) -> Stacktrace:
        """The call sequence recorded for this exception."""
        return getattr(self, _TRACE_ATTR)


def throw_with_trace(exc: BaseException) -> NoReturn:
    """Attach the current call sequence to ``exc`` and raise it."""
    if not isinstance(exc, BaseException):
        raise TypeError(f"expected an exception instance, got {exc!r}")
    setattr(exc, _TRACE_ATTR, Stacktrace())
    raise exc


def get_trace(exc: BaseException) -> Stacktrace | None:
    """Return the trace attached to ``exc``, or None if it carries none."""
    trace = getattr(exc, _TRACE_ATTR, None)
    return trace if isinstance(trace, Stacktrace) else None


def _oops(i: int) -> None:
    if i >= 4:
        throw_with_trace(IndexError("'i' must be less than 4 in oops()"))
    if i <= 0:
        throw_with_trace(ValueError("'i' must be greater than zero in oops()"))
    _foo(i)
    raise SystemExit(1)


def _bar(i: int) -> None:
    values = (0, 0, 0, 0, 0)
    if i < 5:
        if i >= 0:
            _foo(values[i])
        else:
            _oops(i)
    raise SystemExit(2)


def _foo(i: int) -> None:
    _bar(i - 1)


def main(argv: Sequence[str] | None = None) -> int:
    """Raise an exception from a nested call and print it with its trace."""
    parser = argparse.ArgumentParser(
        description="Raise an error deep in a call chain and print its trace."
    )
    parser.add_argument("start", nargs="?", type=int, default=5)
    args = parser.parse_args(argv)
    try:
        _foo(args.start)
    except Exception as exc:
        print(exc, file=sys.stderr)
        trace = get_trace(exc)
        if trace is not None:
            print(trace, file=sys.stderr)
            return 0
        return 3
    return 5