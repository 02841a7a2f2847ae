"""Resolve run configuration from the process environment."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional

from agitlink.acme.stream import DEFAULT_CHUNK_SIZE
from agitlink.acme.window import DEFAULT_ACME_ROOT
from agitlink.errors import ConfigError

WINDOW_ID_VAR = "winid"
ENV_PREFIX = "AGITLINK_"

DEFAULT_HOST = "github.com"
REMOTE_PREFIX = "git@github.com:"


@dataclass(frozen=True, slots=True)
class AppConfig:
    window_id: int
    acme_root: Path = DEFAULT_ACME_ROOT
    host: str = DEFAULT_HOST
    remote_prefix: str = REMOTE_PREFIX
    chunk_size: int = DEFAULT_CHUNK_SIZE


def _window_id(environ: Mapping[str, str]) -> int:
    raw = environ.get(WINDOW_ID_VAR, "")
    if not raw:
        raise ConfigError(f"${WINDOW_ID_VAR} not set - not running inside acme?")
    try:
        return int(raw)
    except ValueError as exc:
        raise ConfigError(f"invalid ${WINDOW_ID_VAR} {raw!r}") from exc


def _chunk_size(environ: Mapping[str, str]) -> int:
    raw = environ.get(f"{ENV_PREFIX}CHUNK_SIZE")
    if not raw:
        return DEFAULT_CHUNK_SIZE
    try:
        value = int(raw)
    except ValueError as exc:
        raise ConfigError(f"invalid ${ENV_PREFIX}CHUNK_SIZE {raw!r}") from exc
    if value <= 0:
        raise ConfigError(f"${ENV_PREFIX}CHUNK_SIZE must be positive, got {value}")
    return value


def resolve_config(environ: Optional[Mapping[str, str]] = None) -> AppConfig:
    """Build the run configuration; the only place the environment is read."""

    env = os.environ if environ is None else environ
    acme_root = env.get(f"{ENV_PREFIX}ACME_ROOT") or DEFAULT_ACME_ROOT
    return AppConfig(
        window_id=_window_id(env),
        acme_root=Path(acme_root),
        chunk_size=_chunk_size(env),
    )


__all__ = [
    "AppConfig",
    "DEFAULT_HOST",
    "ENV_PREFIX",
    "REMOTE_PREFIX",
    "WINDOW_ID_VAR",
    "resolve_config",
]
