"""Capturing the current call stack and dumping it as raw pointer-sized words.

A dump is a packed array of native pointer-sized unsigned integers ending
with a zero word, so it can be read back without any decoding step.
"""

from __future__ import annotations

import os
import struct
import sys
from collections.abc import Sequence
from types import FrameType

from stackdump.frame import register
from stackdump.numconv import POINTER_SIZE

MAX_FRAMES_DUMP = 128


def _frame_address(frame: FrameType) -> int:
    code = frame.f_code
    name = getattr(code, "co_qualname", code.co_name)
    return register(name, code.co_filename, frame.f_lineno or 0)


def _check_count(name: str, value: int) -> None:
    if value < 0:
        raise ValueError(f"{name} must be non-negative, got {value}")


def collect(max_frames_count: int, skip: int = 0) -> list[int]:
    """Return up to ``max_frames_count`` addresses of the calling thread's stack.

    The first address belongs to the caller of this function; ``skip`` drops
    that many more of the innermost frames. Zero addresses never appear.
    """
    _check_count("max_frames_count", max_frames_count)
    _check_count("skip", skip)
    addresses: list[int] = []
    if not max_frames_count:
        return addresses
    current: FrameType | None = sys._getframe(1)
    while current is not None and skip:
        current = current.f_back
        skip -= 1
    while current is not None and len(addresses) < max_frames_count:
        address = _frame_address(current)
        if not address:
            break
        addresses.append(address)
        current = current.f_back
    return addresses


def _pack(frames: Sequence[int]) -> bytes:
    return struct.pack(f"{len(frames)}P", *frames)


def dump_to_fd(fd: int, frames: Sequence[int]) -> int:
    """Write ``frames`` to a file descriptor in one write.

    Returns the number of frames written, or 0 if the write failed. There is
    no retry, matching a single low-level write.
    """
    try:
        os.write(fd, _pack(frames))
    except OSError:
        return 0
    return len(frames)


def dump_to_file(path: str | os.PathLike[str], frames: Sequence[int]) -> int:
    """Create or truncate ``path`` and write ``frames`` into it.

    The file is created readable and writable by its owner only. Returns the
    number of frames written, or 0 on any failure.
    """
    try:
        fd = os.open(path, os.O_CREAT | os.O_WRONLY | os.O_TRUNC, 0o600)
    except OSError:
        return 0
    try:
        return dump_to_fd(fd, frames)
    finally:
        os.close(fd)


def safe_dump_to_buffer(buffer: bytearray | memoryview, skip: int = 0) -> int:
    """Store the current call sequence into a writable buffer.

    The first stored frame is the caller's unless ``skip`` says otherwise.
    Returns the number of words stored including the terminating zero, or 0
    when the buffer cannot hold even the terminator.
    """
    _check_count("skip", skip)
    size = memoryview(buffer).nbytes
    if size < POINTER_SIZE:
        return 0
    frames = collect(size // POINTER_SIZE - 1, skip + 1)
    frames.append(0)
    struct.pack_into(f"{len(frames)}P", buffer, 0, *frames)
    return len(frames)


def _limited_frames(skip: int, max_depth: int) -> list[int]:
    _check_count("skip", skip)
    _check_count("max_depth", max_depth)
    frames = collect(min(max_depth, MAX_FRAMES_DUMP), skip + 2)
    frames.append(0)
    return frames


def safe_dump_to_file(
    path: str | os.PathLike[str], skip: int = 0, max_depth: int = MAX_FRAMES_DUMP
) -> int:
    """Rewrite ``path`` with the current call sequence.

    At most ``MAX_FRAMES_DUMP`` frames are stored. Returns the number of words
    written including the terminating zero, or 0 on failure.
    """
    return dump_to_file(path, _limited_frames(skip, max_depth))


def safe_dump_to_fd(fd: int, skip: int = 0, max_depth: int = MAX_FRAMES_DUMP) -> int:
    """Write the current call sequence to an open file descriptor.

    At most ``MAX_FRAMES_DUMP`` frames are stored. Returns the number of words
    written including the terminating zero, or 0 on failure.
    """
    return dump_to_fd(fd, _limited_frames(skip, max_depth))