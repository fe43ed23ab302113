"""telelog wiring for the text engine.

Only this module imports telelog. Engine code profiles its mutations with
:func:`span`; hosts pick an output profile with :func:`configure` (or the
``--log-preset`` flag of the Textual app) and forward engine events through
:func:`record_event`.

Nothing is configured at import time. The first :func:`get_logger` call falls
back to a profile read from ``TEXT_ENGINE_*`` environment variables.
"""

from __future__ import annotations

import os
from contextlib import ExitStack, contextmanager
from dataclasses import dataclass, field, replace
from typing import Any, Dict, Iterator, List, Mapping, MutableMapping, Optional, Tuple, cast

import telelog  # type: ignore[import]

from text_engine.errors import ErrorKind, TextEngineError

tl = cast(Any, telelog)

ENV_PREFIX = "TEXT_ENGINE_"
DEFAULT_LOGGER_NAME = os.getenv(f"{ENV_PREFIX}LOGGER", "text_engine")

_LOGGER_CACHE: MutableMapping[str, Any] = {}
_ACTIVE_CONFIG: Optional[Any] = None


@dataclass(frozen=True)
class LogProfile:
    """Output settings that are turned into a ``telelog.Config``."""

    min_level: str = "WARNING"
    console: bool = True
    colored: bool = True
    json: bool = False
    log_file: str = ""
    buffer_size: Optional[int] = None


PRESETS: Mapping[str, LogProfile] = {
    "development": LogProfile(min_level="DEBUG"),
    "production": LogProfile(
        min_level="INFO",
        console=False,
        log_file="text_engine.log",
        buffer_size=2048,
    ),
    "performance": LogProfile(
        min_level="DEBUG",
        console=False,
        json=True,
        log_file="text_engine-performance.log",
        buffer_size=2048,
    ),
}


def _env(name: str) -> Optional[str]:
    return os.getenv(f"{ENV_PREFIX}{name}")


def _env_flag(name: str, default: bool) -> bool:
    raw = _env(name)
    if raw is None:
        return default
    return raw.lower() in {"1", "true", "yes", "on"}


def _stringify(value: Any) -> str:
    if isinstance(value, str):
        return value
    return repr(value) if isinstance(value, (dict, list, tuple, set)) else str(value)


def _pairs(data: Mapping[str, Any]) -> List[Tuple[str, str]]:
    return [(str(key), _stringify(value)) for key, value in data.items()]


def profile_from_env() -> LogProfile:
    """Default profile, overridable through ``TEXT_ENGINE_LOG_*`` variables."""

    buffer_size = None
    if _env_flag("LOG_BUFFERED", False):
        buffer_size = int(_env("LOG_BUFFER_SIZE") or "2048")
    return LogProfile(
        min_level=(_env("LOG_LEVEL") or "WARNING").upper(),
        console=not _env_flag("DISABLE_CONSOLE", False),
        colored=not _env_flag("NO_COLOR", False),
        json=_env_flag("LOG_JSON", False),
        log_file=_env("LOG_FILE") or "",
        buffer_size=buffer_size,
    )


def build_config(profile: LogProfile) -> Any:
    config = tl.Config()
    config.with_min_level(profile.min_level)
    config.with_console_output(profile.console)
    if profile.console:
        config.with_colored_output(profile.colored)
    config.with_json_format(profile.json)
    if profile.log_file:
        config.with_file_output(profile.log_file)
    if profile.buffer_size:
        config.with_buffering(True)
        config.with_buffer_size(profile.buffer_size)
    # span() relies on logger.profile
    config.with_profiling(True)
    return config


def configure(*, config: Optional[Any] = None, preset: Optional[str] = None) -> None:
    """Replace the active telelog configuration and drop cached loggers.

    ``preset`` names an entry of :data:`PRESETS`; ``TEXT_ENGINE_LOG_FILE``
    still redirects its file output. ``config`` adopts a ready-made
    ``telelog.Config``. Passing neither re-reads the environment.
    """

    global _ACTIVE_CONFIG
    if config is not None and preset:
        raise ValueError("Provide either `config` or `preset`, not both.")

    if preset:
        try:
            profile = PRESETS[preset.lower()]
        except KeyError:
            raise ValueError(f"Unknown preset '{preset}'.") from None
        log_file = _env("LOG_FILE")
        if log_file:
            profile = replace(profile, log_file=log_file)
        config = build_config(profile)
    elif config is None:
        config = build_config(profile_from_env())
    else:
        config.with_profiling(True)

    _ACTIVE_CONFIG = config
    _LOGGER_CACHE.clear()


def get_logger(name: Optional[str] = None) -> Any:
    """Return a cached ``telelog.Logger`` for ``name`` (the engine logger by default)."""

    global _ACTIVE_CONFIG
    if _ACTIVE_CONFIG is None:
        _ACTIVE_CONFIG = build_config(profile_from_env())
    logger_name = name or DEFAULT_LOGGER_NAME
    if logger_name not in _LOGGER_CACHE:
        _LOGGER_CACHE[logger_name] = tl.Logger.with_config(logger_name, _ACTIVE_CONFIG)
    return _LOGGER_CACHE[logger_name]


def _log(logger: Any, level: str, message: str, payload: Mapping[str, Any]) -> None:
    level = str(level).lower()
    structured = getattr(logger, f"{level}_with", None)
    if structured is not None:
        structured(message, _pairs(payload))
        return
    plain = getattr(logger, level, None)
    if plain is None:
        raise ValueError(f"Unsupported log level '{level}'.")
    plain(f"{message} {dict(payload)}")


def record_event(
    name: str,
    *,
    level: str = "info",
    data: Optional[Mapping[str, Any]] = None,
    logger_name: Optional[str] = None,
) -> None:
    """Log engine event ``name`` as ``event::<name>`` with ``data`` attached."""

    _log(get_logger(logger_name), level, f"event::{name}", {"event": name, **(data or {})})


@dataclass
class SpanHandle:
    """Yielded by :func:`span`; metadata added here is logged if the block fails."""

    logger: Any
    span_name: str
    component: Optional[str] = None
    metadata: Dict[str, str] = field(default_factory=dict)

    def add_metadata(self, key: str, value: Any) -> None:
        self.metadata[key] = _stringify(value)

    def fail(self, exc: BaseException) -> None:
        payload: Dict[str, Any] = {"span": self.span_name, **self.metadata}
        if self.component:
            payload["component"] = self.component
        # engine errors are grouped by kind; anything else is a processing fault
        if isinstance(exc, TextEngineError):
            payload["kind"] = exc.kind.value
        else:
            payload["kind"] = ErrorKind.PROCESSING.value
        payload["error"] = type(exc).__name__
        payload["reason"] = str(exc)
        _log(self.logger, "error", "span::fail", payload)


@contextmanager
def span(
    name: str,
    *,
    logger_name: Optional[str] = None,
    component: Optional[str] = None,
    metadata: Optional[Mapping[str, Any]] = None,
) -> Iterator[SpanHandle]:
    """Profile the block as ``name`` and track it under ``component``.

    ``metadata`` is attached to the logger as context while the block runs.
    An exception escaping the block is logged through :meth:`SpanHandle.fail`
    and re-raised.
    """

    log = get_logger(logger_name)
    context = {key: _stringify(value) for key, value in (metadata or {}).items()}
    handle = SpanHandle(logger=log, span_name=name, component=component, metadata=dict(context))

    with ExitStack() as stack:
        for key, value in context.items():
            log.add_context(key, value)
            stack.callback(log.remove_context, key)
        if component:
            stack.enter_context(log.track_component(component))
        stack.enter_context(log.profile(name))
        try:
            yield handle
        except Exception as exc:
            handle.fail(exc)
            raise


__all__ = [
    "LogProfile",
    "PRESETS",
    "SpanHandle",
    "build_config",
    "configure",
    "get_logger",
    "profile_from_env",
    "record_event",
    "span",
]
