"""Capture the file name, selection, and body of an acme window."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Protocol, Tuple

from agitlink.errors import AgitlinkError, ProtocolError
from agitlink.runtime import telemetry

from .stream import DEFAULT_CHUNK_SIZE, read_chunked
from .window import open_window

if TYPE_CHECKING:
    from agitlink.config import AppConfig


@dataclass(frozen=True, slots=True)
class WindowSnapshot:
    """Window state read once per run; ``q0``/``q1`` count runes, not bytes."""

    file_path: str
    body: bytes
    q0: int
    q1: int


class WindowFiles(Protocol):
    """The subset of window operations the reader depends on."""

    def read_addr(self) -> Tuple[int, int]:
        ...

    def ctl(self, message: str) -> None:
        ...

    def read(self, name: str, size: int) -> bytes:
        ...

    def read_all(self, name: str) -> bytes:
        ...


def parse_tag(tag: str) -> str:
    """Return the file name that leads the tag line."""

    index = tag.find(" ")
    if index == -1:
        raise ProtocolError("strange tag with no spaces")
    return tag[:index]


def _read_selection(win: WindowFiles) -> Tuple[int, int]:
    # Opening addr resets the address, so it has to be open before addr=dot.
    try:
        win.read_addr()
    except AgitlinkError as exc:
        raise exc.wrap("cannot read address") from exc
    try:
        win.ctl("addr=dot")
    except AgitlinkError as exc:
        raise exc.wrap("cannot set addr=dot") from exc
    try:
        q0, q1 = win.read_addr()
    except AgitlinkError as exc:
        raise exc.wrap("cannot read address") from exc
    if q0 < 0 or q0 > q1:
        raise ProtocolError(f"invalid selection #{q0},#{q1}")
    return q0, q1


def read_window_snapshot(
    win: WindowFiles, *, chunk_size: int = DEFAULT_CHUNK_SIZE
) -> WindowSnapshot:
    q0, q1 = _read_selection(win)
    try:
        body = read_chunked(lambda size: win.read("body", size), chunk_size=chunk_size)
    except AgitlinkError as exc:
        raise exc.wrap("cannot read body") from exc
    except OSError as exc:
        raise ProtocolError(f"cannot read body: {exc}") from exc
    try:
        tag = win.read_all("tag").decode("utf-8", errors="replace")
    except AgitlinkError as exc:
        raise exc.wrap("cannot read tag") from exc
    except OSError as exc:
        raise ProtocolError(f"cannot read tag: {exc}") from exc
    return WindowSnapshot(file_path=parse_tag(tag), body=body, q0=q0, q1=q1)


def read_current_window(config: AppConfig) -> WindowSnapshot:
    """Open the configured window, snapshot it, and release its files."""

    with telemetry.span(
        "acme::snapshot", component=True, metadata={"winid": config.window_id}
    ):
        with open_window(config.window_id, root=config.acme_root) as win:
            snapshot = read_window_snapshot(win, chunk_size=config.chunk_size)
    telemetry.record_event(
        "window.snapshot",
        level="debug",
        data={
            "path": snapshot.file_path,
            "bytes": len(snapshot.body),
            "q0": snapshot.q0,
            "q1": snapshot.q1,
        },
    )
    return snapshot


__all__ = [
    "WindowFiles",
    "WindowSnapshot",
    "parse_tag",
    "read_current_window",
    "read_window_snapshot",
]
