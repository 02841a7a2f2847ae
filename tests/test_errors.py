from __future__ import annotations

from agitlink.errors import AgitlinkError, ExternalToolError, ProtocolError


def test_wrap_prefixes_context_and_keeps_type() -> None:
    error = ProtocolError("strange tag with no spaces")

    wrapped = error.wrap("cannot read window")

    assert type(wrapped) is ProtocolError
    assert isinstance(wrapped, AgitlinkError)
    assert str(wrapped) == "cannot read window: strange tag with no spaces"
    assert str(error) == "strange tag with no spaces"


def test_wrap_keeps_extra_attributes() -> None:
    error = ExternalToolError("fatal: not a git repository", returncode=128, stderr="x")

    wrapped = error.wrap("cannot get commit").wrap("outer")

    assert str(wrapped) == "outer: cannot get commit: fatal: not a git repository"
    assert wrapped.returncode == 128
    assert wrapped.stderr == "x"
