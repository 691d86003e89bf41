"""Symbol lookup through the external ``addr2line`` program."""

from __future__ import annotations

import os
import subprocess

from stackdump.numconv import to_hex_array, try_dec_convert

ADDR2LINE_LOCATION = "/usr/bin/addr2line"


def is_abs_path(path: str) -> bool:
    """Tell whether a program location looks absolute (contains ':' or '/')."""
    return any(ch in ":/" for ch in path)


def _executable_path() -> str | None:
    try:
        return os.readlink("/proc/self/exe")
    except OSError:
        return None


def addr2line(flag: str, addr: int, exec_path: str | None = None) -> str:
    """Run ``addr2line`` for one address and return its output.

    ``exec_path`` is the binary holding the address; by default the running
    executable is used. Trailing line breaks are trimmed. An empty string is
    returned whenever the program cannot be located or run.
    """
    if not is_abs_path(ADDR2LINE_LOCATION):
        raise ValueError("ADDR2LINE_LOCATION must be an absolute path")
    if exec_path is None:
        exec_path = _executable_path()
        if exec_path is None:
            return ""
    try:
        completed = subprocess.run(
            [ADDR2LINE_LOCATION, flag, exec_path, to_hex_array(addr)],
            stdout=subprocess.PIPE,
            stderr=subprocess.DEVNULL,
            check=False,
        )
    except OSError:
        return ""
    output = completed.stdout or b""
    return output.decode("utf-8", errors="replace").rstrip("\r\n")


def parse_name(output: str) -> str:
    """Extract the function name from ``addr2line -f`` output."""
    cut = output.rfind("\n")
    name = output if cut == -1 else output[:cut]
    return "" if name == "??" else name


def parse_source_file(output: str) -> str:
    """Extract the source file from ``file:line`` output."""
    cut = output.rfind(":")
    path = output if cut == -1 else output[:cut]
    return "" if path == "??" else path


def parse_source_line(output: str) -> int:
    """Extract the line number from ``file:line`` output, 0 when unknown."""
    cut = output.rfind(":")
    if cut == -1:
        return 0
    line = try_dec_convert(output[cut + 1:])
    return 0 if line is None else line