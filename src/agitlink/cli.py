"""Command line entry point: print a permalink for the acme selection."""

from __future__ import annotations

import argparse
import sys
from typing import Optional, Sequence

from agitlink import __version__
from agitlink.acme import read_current_window
from agitlink.config import AppConfig, resolve_config
from agitlink.errors import AgitlinkError
from agitlink.lines import map_selection
from agitlink.permalink import compose_url
from agitlink.repo import resolve_repo_context
from agitlink.runtime import telemetry

PROG = "agitlink"


def build_permalink(config: AppConfig) -> str:
    snapshot = read_current_window(config)
    repo = resolve_repo_context(snapshot.file_path, prefix=config.remote_prefix)
    with telemetry.span("permalink::compose", metadata={"path": repo.relative_path}):
        lines = map_selection(snapshot.body, snapshot.q0, snapshot.q1)
        url = compose_url(repo, lines, host=config.host)
    telemetry.record_event(
        "permalink.composed", data={"start": lines.start, "end": lines.end}
    )
    return url


def _parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog=PROG,
        description=(
            "Print a GitHub permalink for the selection in the current acme "
            "window ($winid)."
        ),
    )
    parser.add_argument(
        "--version", action="version", version=f"%(prog)s {__version__}"
    )
    return parser.parse_args(argv)


def main(argv: Optional[Sequence[str]] = None) -> int:
    _parse_args(argv)
    try:
        url = build_permalink(resolve_config())
    except AgitlinkError as exc:
        print(f"{PROG}: {exc}", file=sys.stderr)
        return 1
    print(url)
    return 0


def run() -> None:
    sys.exit(main())


__all__ = ["build_permalink", "main", "run"]
