import os
import struct

import pytest

from stackdump.collect import (
    MAX_FRAMES_DUMP,
    collect,
    dump_to_fd,
    dump_to_file,
    safe_dump_to_buffer,
    safe_dump_to_fd,
    safe_dump_to_file,
)
from stackdump.frame import resolve
from stackdump.numconv import POINTER_SIZE


def _words(data):
    return list(struct.unpack(f"{len(data) // POINTER_SIZE}P", data))


def _helper(skip):
    return collect(50, skip)


def _recurse(depth, action):
    if depth:
        return _recurse(depth - 1, action)
    return action()


def test_collect_zero_frames_is_empty():
    assert collect(0, 0) == []


def test_collect_first_frame_is_caller():
    frames = collect(10)
    assert resolve(frames[0])[0] == "test_collect_first_frame_is_caller"
    assert all(frames)


def test_collect_respects_max_frames():
    assert len(collect(1, 0)) == 1


def test_collect_skip_shifts_frames():
    results = [_helper(s) for s in (0, 1)]
    assert resolve(results[0][0])[0] == "_helper"
    assert results[1][0] == results[0][1]


def test_collect_huge_skip_is_empty():
    assert collect(1024, 100500) == []


def test_collect_negative_raises():
    with pytest.raises(ValueError):
        collect(-1, 0)
    with pytest.raises(ValueError):
        collect(1, -1)


def test_dump_to_file_round_trip(tmp_path):
    path = tmp_path / "trace.dump"
    frames = [0x1000, 0x1010, 0]
    assert dump_to_file(path, frames) == len(frames)
    assert _words(path.read_bytes()) == frames


def test_dump_to_file_truncates(tmp_path):
    path = tmp_path / "trace.dump"
    dump_to_file(path, [5, 6, 7, 0])
    dump_to_file(path, [9, 0])
    assert _words(path.read_bytes()) == [9, 0]


def test_dump_to_file_failure_returns_zero(tmp_path):
    assert dump_to_file(tmp_path / "missing" / "trace.dump", [1, 0]) == 0


def test_dump_to_fd_pipe_round_trip():
    read_fd, write_fd = os.pipe()
    try:
        assert dump_to_fd(write_fd, [7, 8, 0]) == 3
        data = os.read(read_fd, 3 * POINTER_SIZE)
    finally:
        os.close(read_fd)
        os.close(write_fd)
    assert _words(data) == [7, 8, 0]


def test_dump_to_fd_closed_descriptor_returns_zero():
    read_fd, write_fd = os.pipe()
    os.close(read_fd)
    os.close(write_fd)
    assert dump_to_fd(write_fd, [1, 0]) == 0


def test_safe_dump_to_buffer_too_small():
    buffer = bytearray(POINTER_SIZE - 1)
    assert safe_dump_to_buffer(buffer) == 0
    assert buffer == bytearray(POINTER_SIZE - 1)


def test_safe_dump_to_buffer_contents():
    buffer = bytearray(POINTER_SIZE * 1024)
    count = safe_dump_to_buffer(buffer)
    words = _words(bytes(buffer[: count * POINTER_SIZE]))
    assert words[-1] == 0
    assert all(words[:-1])
    assert resolve(words[0])[0] == "test_safe_dump_to_buffer_contents"


def test_safe_dump_to_buffer_skip_one_frame():
    buffer = bytearray(POINTER_SIZE * 1024)
    size_1_skipped = safe_dump_to_buffer(buffer, 1)
    size_0_skipped = safe_dump_to_buffer(buffer, 0)
    assert size_1_skipped + 1 == size_0_skipped


def test_safe_dump_to_buffer_skip_everything():
    buffer = bytearray(b"\xff" * (POINTER_SIZE * 1024))
    assert safe_dump_to_buffer(buffer, 1024) == 1
    assert _words(bytes(buffer[:POINTER_SIZE])) == [0]


def test_safe_dump_to_buffer_limited_by_size():
    buffer = bytearray(POINTER_SIZE * 2)
    assert safe_dump_to_buffer(buffer) == 2
    words = _words(bytes(buffer))
    assert words[1] == 0
    assert words[0] != 0


def test_safe_dump_to_file_matches_file_size(tmp_path):
    path = tmp_path / "backtrace.dump"
    count = safe_dump_to_file(path)
    data = path.read_bytes()
    assert len(data) == count * POINTER_SIZE
    words = _words(data)
    assert words[-1] == 0
    assert resolve(words[0])[0] == "test_safe_dump_to_file_matches_file_size"


def test_safe_dump_to_file_depth_one_and_skip(tmp_path):
    path = tmp_path / "backtrace3.dump"
    assert safe_dump_to_file(path, 0, 1) == 2
    first = _words(path.read_bytes())
    assert safe_dump_to_file(path, 1, 1) == 2
    second = _words(path.read_bytes())
    assert len(first) == len(second)
    assert first[0] != second[0]


def test_safe_dump_to_file_caps_depth(tmp_path):
    path = tmp_path / "deep.dump"
    count = _recurse(MAX_FRAMES_DUMP + 50, lambda: safe_dump_to_file(path, 0, 1000))
    assert count == MAX_FRAMES_DUMP + 1
    assert len(path.read_bytes()) == count * POINTER_SIZE


def test_safe_dump_to_file_failure_returns_zero(tmp_path):
    assert safe_dump_to_file(tmp_path / "missing" / "x.dump") == 0


def test_safe_dump_to_fd_pipe():
    read_fd, write_fd = os.pipe()
    try:
        count = safe_dump_to_fd(write_fd, 0, 3)
        data = os.read(read_fd, count * POINTER_SIZE)
    finally:
        os.close(read_fd)
        os.close(write_fd)
    words = _words(data)
    assert len(words) == count
    assert words[-1] == 0
    assert resolve(words[0])[0] == "test_safe_dump_to_fd_pipe"


def test_safe_dump_to_fd_negative_depth_raises():
    with pytest.raises(ValueError):
        safe_dump_to_fd(1, 0, -1)