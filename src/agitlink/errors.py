"""Error hierarchy shared by every stage of the permalink pipeline."""

from __future__ import annotations

from typing import TypeVar

E = TypeVar("E", bound="AgitlinkError")


class AgitlinkError(RuntimeError):
    """Base class for failures reported to the user as a single line."""

    def wrap(self: E, context: str) -> E:
        """Return a copy of this error with ``context`` prepended.

        Callers re-raise the result with ``from`` so the original stays
        chained while the type reaches the top unchanged.
        """

        wrapped = self.__class__.__new__(self.__class__)
        wrapped.__dict__.update(self.__dict__)
        wrapped.args = (f"{context}: {self}",)
        return wrapped


class ConfigError(AgitlinkError):
    """Raised when the process environment does not name a usable window."""


class EditorConnectionError(AgitlinkError):
    """Raised when the acme file server or the window cannot be reached."""


class ProtocolError(AgitlinkError):
    """Raised when acme rejects a request or answers with malformed data."""


class ExternalToolError(AgitlinkError):
    """Raised when ``git`` cannot be started or exits with a failure."""

    def __init__(
        self, message: str, *, returncode: int | None = None, stderr: str = ""
    ) -> None:
        super().__init__(message)
        self.returncode = returncode
        self.stderr = stderr


class UnexpectedFormatError(AgitlinkError):
    """Raised when git output does not have the expected shape."""


__all__ = [
    "AgitlinkError",
    "ConfigError",
    "EditorConnectionError",
    "ProtocolError",
    "ExternalToolError",
    "UnexpectedFormatError",
]
