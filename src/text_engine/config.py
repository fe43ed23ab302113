"""Engine-wide limits and defaults."""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Mapping, Optional

from text_engine.errors import ValidationError

ENV_PREFIX = "TEXT_ENGINE_"


@dataclass(frozen=True, slots=True)
class EngineConfig:
    """Bounds and defaults shared by the core components."""

    max_history: int = 20
    max_recent_patterns: int = 10
    max_recent_files: int = 10
    default_source: str = "Unknown"
    encoding: str = "utf-8"
    log_history_size: int = 100
    seed_patterns: bool = True

    def __post_init__(self) -> None:
        for name in (
            "max_history",
            "max_recent_patterns",
            "max_recent_files",
            "log_history_size",
        ):
            if getattr(self, name) < 1:
                raise ValidationError(f"{name} must be at least 1", field=name)
        if not self.encoding:
            raise ValidationError("encoding cannot be empty", field="encoding")

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "EngineConfig":
        env = os.environ if environ is None else environ
        defaults = cls()
        return cls(
            max_history=_env_int(env, "MAX_HISTORY", defaults.max_history),
            max_recent_patterns=_env_int(
                env, "MAX_RECENT_PATTERNS", defaults.max_recent_patterns
            ),
            max_recent_files=_env_int(
                env, "MAX_RECENT_FILES", defaults.max_recent_files
            ),
            default_source=defaults.default_source,
            encoding=env.get(f"{ENV_PREFIX}ENCODING") or defaults.encoding,
            log_history_size=_env_int(
                env, "LOG_HISTORY", defaults.log_history_size
            ),
            seed_patterns=_env_flag(env, "SEED_PATTERNS", defaults.seed_patterns),
        )


def _env_int(env: Mapping[str, str], key: str, fallback: int) -> int:
    """Positive integer from the environment, else ``fallback``."""

    value = env.get(f"{ENV_PREFIX}{key}")
    if value is None:
        return fallback
    try:
        parsed = int(value)
    except ValueError:
        return fallback
    return parsed if parsed > 0 else fallback


def _env_flag(env: Mapping[str, str], key: str, fallback: bool) -> bool:
    raw = env.get(f"{ENV_PREFIX}{key}")
    if raw is None:
        return fallback
    return raw.lower() in {"1", "true", "yes", "on"}


__all__ = ["EngineConfig", "ENV_PREFIX"]
