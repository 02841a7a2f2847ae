"""File-backed handle on a single acme window.

Acme serves every window as a directory ``<root>/<id>/`` of control files.
On Plan 9 the file server lives at ``/mnt/acme``; under plan9port it can be
mounted at any path with ``9pfuse``. Files are opened unbuffered so each
``read`` call turns into exactly one read request on the server.
"""

from __future__ import annotations

from pathlib import Path
from types import TracebackType
from typing import BinaryIO, Dict, Optional, Tuple, Type

from agitlink.errors import EditorConnectionError, ProtocolError
from agitlink.runtime import telemetry

DEFAULT_ACME_ROOT = Path("/mnt/acme")

_FILE_MODES: Dict[str, str] = {
    "addr": "r+b",
    "ctl": "r+b",
    "body": "rb",
    "tag": "rb",
}

# addr reads as two 11-character decimal fields, each followed by a space.
_ADDR_READ_SIZE = 40


class AcmeWindow:
    """Lazily opened window files, released together by ``close_files``."""

    def __init__(self, window_id: int, directory: Path) -> None:
        self.id = window_id
        self.directory = directory
        self._files: Dict[str, BinaryIO] = {}
        self.logger = telemetry.get_logger("agitlink.acme")

    def __enter__(self) -> "AcmeWindow":
        return self

    def __exit__(
        self,
        exc_type: Optional[Type[BaseException]],
        exc: Optional[BaseException],
        tb: Optional[TracebackType],
    ) -> bool:
        try:
            self.close_files()
        except EditorConnectionError:
            # Never mask the error that is already unwinding.
            if exc_type is None:
                raise
        return False

    @property
    def open_files(self) -> Tuple[str, ...]:
        return tuple(self._files)

    def _file(self, name: str) -> BinaryIO:
        handle = self._files.get(name)
        if handle is not None:
            return handle
        mode = _FILE_MODES.get(name)
        if mode is None:
            raise ValueError(f"Unknown acme window file '{name}'.")
        path = self.directory / name
        try:
            handle = open(path, mode, buffering=0)
        except OSError as exc:
            raise EditorConnectionError(
                f"cannot open {path}: {exc.strerror or exc}"
            ) from exc
        self._files[name] = handle
        self.logger.debug(f"window {self.id}: opened {name}")
        return handle

    def read_addr(self) -> Tuple[int, int]:
        """Return the rune offsets currently held by the ``addr`` file."""

        handle = self._file("addr")
        try:
            handle.seek(0)
            raw = handle.read(_ADDR_READ_SIZE) or b""
        except OSError as exc:
            raise ProtocolError(str(exc)) from exc
        return parse_addr(raw)

    def ctl(self, message: str) -> None:
        if not message.endswith("\n"):
            message += "\n"
        handle = self._file("ctl")
        try:
            handle.write(message.encode("utf-8"))
        except OSError as exc:
            raise ProtocolError(f"ctl {message.strip()!r} rejected: {exc}") from exc

    def read(self, name: str, size: int) -> bytes:
        """Issue a single read of at most ``size`` bytes from a window file."""

        return self._file(name).read(size) or b""

    def read_all(self, name: str) -> bytes:
        handle = self._file(name)
        handle.seek(0)
        return handle.read()

    def close_files(self) -> None:
        """Close every open window file, even when one of the closes fails."""

        first_error: Optional[OSError] = None
        while self._files:
            _, handle = self._files.popitem()
            try:
                handle.close()
            except OSError as exc:
                if first_error is None:
                    first_error = exc
        if first_error is not None:
            raise EditorConnectionError(
                f"cannot close window {self.id}: {first_error}"
            ) from first_error


def parse_addr(raw: bytes) -> Tuple[int, int]:
    fields = raw.split()
    if len(fields) < 2:
        raise ProtocolError(f"short addr response {raw!r}")
    try:
        return int(fields[0]), int(fields[1])
    except ValueError as exc:
        raise ProtocolError(f"malformed addr response {raw!r}") from exc


def open_window(window_id: int, *, root: Path = DEFAULT_ACME_ROOT) -> AcmeWindow:
    """Return a handle on window ``window_id`` served below ``root``."""

    root = Path(root)
    if not root.is_dir():
        raise EditorConnectionError(f"acme file server not mounted at {root}")
    directory = root / str(window_id)
    if not directory.is_dir():
        raise EditorConnectionError(
            f"cannot open acme window {window_id}: no such window"
        )
    return AcmeWindow(window_id, directory)


__all__ = ["AcmeWindow", "DEFAULT_ACME_ROOT", "open_window", "parse_addr"]
