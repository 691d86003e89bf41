"""Capture Python call stacks, dump them as raw address words, read them back and format them."""

__version__ = "0.1.0"
__all__ = ["numconv", "addr2line", "frame", "collect", "stacktrace", "recipes"]