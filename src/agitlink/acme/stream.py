"""Read a whole stream from a transport that limits the size of each read."""

from __future__ import annotations

from typing import Callable

# Acme crashes when a single read asks for more than the negotiated 9P
# message size, so body reads stay below it.
DEFAULT_CHUNK_SIZE = 8000

ReadFn = Callable[[int], bytes]


def read_chunked(
    read: ReadFn, *, chunk_size: int = DEFAULT_CHUNK_SIZE, sentinel: bytes = b""
) -> bytes:
    """Call ``read(chunk_size)`` until it returns ``sentinel`` or raises EOFError.

    Short reads are expected and simply appended. Any other exception raised by
    ``read`` propagates unchanged.
    """

    if chunk_size <= 0:
        raise ValueError(f"chunk_size must be positive, got {chunk_size}")
    chunks: list[bytes] = []
    while True:
        try:
            chunk = read(chunk_size)
        except EOFError:
            break
        if chunk == sentinel:
            break
        chunks.append(chunk)
    return b"".join(chunks)


__all__ = ["DEFAULT_CHUNK_SIZE", "ReadFn", "read_chunked"]
