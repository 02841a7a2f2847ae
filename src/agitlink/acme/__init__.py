"""Access to a running acme editor through its file interface."""

from .reader import (
    WindowFiles,
    WindowSnapshot,
    parse_tag,
    read_current_window,
    read_window_snapshot,
)
from .stream import DEFAULT_CHUNK_SIZE, read_chunked
from .window import DEFAULT_ACME_ROOT, AcmeWindow, open_window, parse_addr

__all__ = [
    "AcmeWindow",
    "DEFAULT_ACME_ROOT",
    "DEFAULT_CHUNK_SIZE",
    "WindowFiles",
    "WindowSnapshot",
    "open_window",
    "parse_addr",
    "parse_tag",
    "read_chunked",
    "read_current_window",
    "read_window_snapshot",
]
