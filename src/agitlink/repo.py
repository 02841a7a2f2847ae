"""Repository metadata gathered from the ``git`` command line tool."""

from __future__ import annotations

import os
import posixpath
import subprocess
from dataclasses import dataclass
from typing import Sequence

from agitlink.config import REMOTE_PREFIX
from agitlink.errors import AgitlinkError, ExternalToolError, UnexpectedFormatError
from agitlink.runtime import telemetry


@dataclass(frozen=True, slots=True)
class RepoContext:
    remote: str
    relative_path: str
    commit: str


def run_git(args: Sequence[str], *, cwd: str) -> str:
    """Run ``git`` in ``cwd`` and return its raw standard output."""

    command = ["git", *args]
    try:
        completed = subprocess.run(
            command,
            cwd=cwd,
            check=False,
            capture_output=True,
            text=True,
        )
    except OSError as exc:
        raise ExternalToolError(f"cannot run {' '.join(command)}: {exc}") from exc
    if completed.returncode != 0:
        stderr = completed.stderr.strip()
        # Diagnostics are one line; the full text stays on ``stderr``.
        summary = stderr.splitlines()[0] if stderr else (
            f"{' '.join(command)} exited with status {completed.returncode}"
        )
        raise ExternalToolError(
            summary,
            returncode=completed.returncode,
            stderr=stderr,
        )
    return completed.stdout


def _directory(file_path: str) -> str:
    return os.path.dirname(file_path) or os.curdir


def strip_remote_prefix(url: str, prefix: str = REMOTE_PREFIX) -> str:
    if not url.startswith(prefix):
        raise UnexpectedFormatError(
            f"unexpected prefix for remote {url!r} (want {prefix!r})"
        )
    return url[len(prefix) :].strip()


def remote_name(directory: str, *, prefix: str = REMOTE_PREFIX) -> str:
    url = run_git(["remote", "get-url", "origin"], cwd=directory)
    return strip_remote_prefix(url, prefix)


def relative_path(file_path: str) -> str:
    """Return ``file_path`` relative to the root of its repository."""

    directory = _directory(file_path)
    rel_dir = run_git(["rev-parse", "--show-prefix"], cwd=directory).strip()
    return posixpath.join(rel_dir, os.path.basename(file_path))


def head_commit(directory: str) -> str:
    return run_git(["rev-parse", "HEAD"], cwd=directory).strip()


def resolve_repo_context(file_path: str, *, prefix: str = REMOTE_PREFIX) -> RepoContext:
    directory = _directory(file_path)
    with telemetry.span("repo::resolve", component=True, metadata={"dir": directory}):
        try:
            remote = remote_name(directory, prefix=prefix)
        except AgitlinkError as exc:
            raise exc.wrap("cannot get repo") from exc
        try:
            rel_path = relative_path(file_path)
        except AgitlinkError as exc:
            raise exc.wrap("cannot get relative path") from exc
        try:
            commit = head_commit(directory)
        except AgitlinkError as exc:
            raise exc.wrap("cannot get commit") from exc
    context = RepoContext(remote=remote, relative_path=rel_path, commit=commit)
    telemetry.record_event(
        "repo.context", level="debug", data={"remote": remote, "commit": commit}
    )
    return context


__all__ = [
    "RepoContext",
    "head_commit",
    "relative_path",
    "remote_name",
    "resolve_repo_context",
    "run_git",
    "strip_remote_prefix",
]
