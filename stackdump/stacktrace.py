"""A captured call sequence: an immutable, ordered collection of frames."""

from __future__ import annotations

import io
import itertools
import struct
import sys
from collections.abc import Iterable, Iterator
from typing import BinaryIO, overload

from stackdump.collect import collect
from stackdump.frame import Frame, format_frames
from stackdump.numconv import POINTER_SIZE

_MAX_FRAMES_FROM_DUMP = 1024


def frames_count_from_buffer_size(buffer_size: int) -> int:
    """Return how many pointer-sized words a dump of ``buffer_size`` bytes may hold.

    A buffer no larger than one word yields 0; the result never exceeds 1024.
    """
    count = buffer_size // POINTER_SIZE if buffer_size > POINTER_SIZE else 0
    return min(count, _MAX_FRAMES_FROM_DUMP)


class Stacktrace:
    """The call sequence at the point of construction.

    Frame 0 is the function that created the trace; the last frame is the
    outermost one. ``skip`` drops that many of the innermost frames and
    ``max_depth`` limits how many are kept (``None`` means no limit).
    """

    __slots__ = ("_frames",)

    def __init__(self, skip: int = 0, max_depth: int | None = None) -> None:
        if skip < 0:
            raise ValueError(f"skip must be non-negative, got {skip}")
        if max_depth is None:
            max_depth = sys.maxsize
        elif max_depth < 0:
            raise ValueError(f"max_depth must be non-negative, got {max_depth}")
        if max_depth:
            addresses = collect(max_depth, skip + 1)
        else:
            addresses = []
        self._frames: tuple[Frame, ...] = tuple(Frame(a) for a in addresses)

    @classmethod
    def _from_addresses(cls, addresses: Iterable[int]) -> Stacktrace:
        trace = cls(0, 0)
        trace._frames = tuple(
            Frame(a) for a in itertools.takewhile(bool, addresses)
        )
        return trace

    @classmethod
    def from_stream(cls, stream: BinaryIO) -> Stacktrace:
        """Read a dump from a seekable binary stream; the zero terminator is dropped.

        Reading starts at the stream's current position.
        """
        position = stream.tell()
        end = stream.seek(0, io.SEEK_END)
        stream.seek(position)
        if not frames_count_from_buffer_size(end):
            return cls(0, 0)

        def words() -> Iterator[int]:
            while True:
                chunk = stream.read(POINTER_SIZE)
                if len(chunk) < POINTER_SIZE:
                    return
                yield struct.unpack("P", chunk)[0]

        return cls._from_addresses(words())

    @classmethod
    def from_buffer(cls, buffer: bytes | bytearray | memoryview) -> Stacktrace:
        """Read a dump from raw memory; the zero terminator is dropped."""
        view = memoryview(buffer).cast("B")
        count = frames_count_from_buffer_size(view.nbytes)
        if not count:
            return cls(0, 0)
        return cls._from_addresses(struct.unpack_from(f"{count}P", view))

    def as_list(self) -> list[Frame]:
        """Return the frames as a new list."""
        return list(self._frames)

    def empty(self) -> bool:
        """Tell whether no frames were captured."""
        return not self._frames

    def __len__(self) -> int:
        return len(self._frames)

    def __bool__(self) -> bool:
        return bool(self._frames)

    @overload
    def __getitem__(self, index: int) -> Frame: ...

    @overload
    def __getitem__(self, index: slice) -> tuple[Frame, ...]: ...

    def __getitem__(self, index: int | slice) -> Frame | tuple[Frame, ...]:
        return self._frames[index]

    def __iter__(self) -> Iterator[Frame]:
        return iter(self._frames)

    def __reversed__(self) -> Iterator[Frame]:
        return reversed(self._frames)

    def _key(self) -> tuple[int, tuple[Frame, ...]]:
        return len(self._frames), self._frames

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Stacktrace):
            return NotImplemented
        return self._frames == other._frames

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, Stacktrace):
            return NotImplemented
        return self._key() < other._key()

    def __gt__(self, other: object) -> bool:
        if not isinstance(other, Stacktrace):
            return NotImplemented
        return other._key() < self._key()

    def __le__(self, other: object) -> bool:
        if not isinstance(other, Stacktrace):
            return NotImplemented
        return not other._key() < self._key()

    def __ge__(self, other: object) -> bool:
        if not isinstance(other, Stacktrace):
            return NotImplemented
        return not self._key() < other._key()

    def __hash__(self) -> int:
        return hash(tuple(frame.address for frame in self._frames))

    def __str__(self) -> str:
        return to_string(self)

    def __repr__(self) -> str:
        return f"Stacktrace(<{len(self._frames)} frames>)"


def to_string(trace: Stacktrace) -> str:
    """Describe a trace one numbered frame per line; empty for an empty trace."""
    if not trace:
        return ""
    return format_frames(trace)