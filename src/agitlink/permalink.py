"""Compose the final permalink URL."""

from __future__ import annotations

from agitlink.config import DEFAULT_HOST
from agitlink.lines import LineRange
from agitlink.repo import RepoContext


def compose_url(
    repo: RepoContext, lines: LineRange, *, host: str = DEFAULT_HOST
) -> str:
    base = f"https://{host}/{repo.remote}/blob/{repo.commit}/{repo.relative_path}"
    return f"{base}#{lines.fragment}"


__all__ = ["compose_url"]
