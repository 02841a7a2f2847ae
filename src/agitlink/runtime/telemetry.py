"""Logging, events, and profiled spans for the permalink pipeline, on telelog.

Standard output carries the permalink, so console logging stays off unless
``AGITLINK_LOG_CONSOLE`` asks for it. Other knobs: ``AGITLINK_LOG_LEVEL``
(default ``WARNING``), ``AGITLINK_LOG_FILE``, ``AGITLINK_LOG_JSON``,
``AGITLINK_NO_COLOR``.
"""

from __future__ import annotations

import os
from contextlib import ExitStack, contextmanager
from dataclasses import dataclass
from typing import Any, Dict, Iterator, MutableMapping, Optional, Tuple, cast

import telelog  # type: ignore[import]

tl = cast(Any, telelog)

ENV_PREFIX = "AGITLINK_"
DEFAULT_LOGGER_NAME = "agitlink"

_LOGGER_CACHE: MutableMapping[str, Any] = {}
_ACTIVE_CONFIG: Optional[Any] = None


def _env_flag(name: str) -> bool:
    raw = os.getenv(f"{ENV_PREFIX}{name}", "")
    return raw.lower() in {"1", "true", "yes", "on"}


def _stringify(value: Any) -> str:
    return value if isinstance(value, str) else str(value)


def _build_config() -> Any:
    config = tl.Config()
    level = os.getenv(f"{ENV_PREFIX}LOG_LEVEL") or "WARNING"
    config.with_min_level(level.upper())
    console = _env_flag("LOG_CONSOLE")
    config.with_console_output(console)
    if console:
        config.with_colored_output(not _env_flag("NO_COLOR"))
    if _env_flag("LOG_JSON"):
        config.with_json_format(True)
    log_file = os.getenv(f"{ENV_PREFIX}LOG_FILE")
    if log_file:
        config.with_file_output(log_file)
    # span() relies on logger.profile.
    config.with_profiling(True)
    return config


def configure() -> None:
    """Rebuild the telelog configuration from the environment."""

    global _ACTIVE_CONFIG
    _ACTIVE_CONFIG = _build_config()
    _LOGGER_CACHE.clear()


def get_logger(name: Optional[str] = None) -> Any:
    logger_name = name or DEFAULT_LOGGER_NAME
    if logger_name not in _LOGGER_CACHE:
        if _ACTIVE_CONFIG is None:
            configure()
        _LOGGER_CACHE[logger_name] = tl.Logger.with_config(
            logger_name, _ACTIVE_CONFIG
        )
    return _LOGGER_CACHE[logger_name]


def _emit(log: Any, level: str, message: str, payload: Dict[str, Any]) -> None:
    with_data = getattr(log, f"{level}_with", None)
    if with_data is not None:
        with_data(message, [(key, _stringify(val)) for key, val in payload.items()])
        return
    method = getattr(log, level, None)
    if method is None:
        raise ValueError(f"Unsupported log level '{level}'.")
    method(f"{message} {payload}")


def record_event(
    name: str,
    *,
    level: str = "info",
    data: Optional[Dict[str, Any]] = None,
    logger_name: Optional[str] = None,
) -> None:
    """Emit a structured ``event::<name>`` log line."""

    payload = {"event": name, **(data or {})}
    _emit(get_logger(logger_name), level.lower(), f"event::{name}", payload)


@dataclass
class SpanHandle:
    logger: Any
    span_name: str
    component_name: Optional[str] = None

    def fail(self, reason: str) -> None:
        payload = {"span": self.span_name, "reason": reason}
        if self.component_name:
            payload["component"] = self.component_name
        _emit(self.logger, "error", "span::fail", payload)


@contextmanager
def span(
    name: str,
    *,
    logger_name: Optional[str] = None,
    component: Optional[str | bool] = None,
    metadata: Optional[Dict[str, Any]] = None,
) -> Iterator[SpanHandle]:
    """Profile a pipeline stage and, optionally, track it as a component.

    ``metadata`` is attached as logger context for the duration of the block.
    A failure inside the block is logged as ``span::fail`` and re-raised.
    """

    log = get_logger(logger_name)
    component_name = name if component is True else component or None

    context_keys: Tuple[str, ...] = tuple(metadata or ())
    for key in context_keys:
        log.add_context(key, _stringify(metadata[key]))  # type: ignore[index]

    with ExitStack() as stack:
        if component_name:
            stack.enter_context(log.track_component(component_name))
        stack.enter_context(log.profile(name))
        handle = SpanHandle(logger=log, span_name=name, component_name=component_name)
        try:
            yield handle
        except Exception as exc:
            handle.fail(str(exc))
            raise
        finally:
            for key in context_keys:
                log.remove_context(key)


configure()

__all__ = ["SpanHandle", "configure", "get_logger", "record_event", "span"]
