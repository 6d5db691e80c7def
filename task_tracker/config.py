"""Settings loaded from environment variables.

Every variable uses the TASK_TRACKER_ prefix; PORT, HOST and LOG_LEVEL are
also read unprefixed as fallbacks. Malformed values fall back to defaults.
"""

import os
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path

from task_tracker import __version__

ENV_PREFIX = "TASK_TRACKER"

ENVIRONMENTS = ("development", "production", "test")
LOG_LEVELS = ("debug", "info", "warning", "error")
LOG_LEVEL_ALIASES = {"warn": "warning"}


def _k(suffix: str) -> str:
    return f"{ENV_PREFIX}_{suffix}"


def _first(env: Mapping[str, str], *names: str, default: str) -> str:
    for name in names:
        value = env.get(name)
        if value is not None and value.strip() != "":
            return value.strip()
    return default


def _as_bool(raw: str, default: bool) -> bool:
    value = raw.strip().lower()
    if value in {"1", "true", "yes", "y", "on"}:
        return True
    if value in {"0", "false", "no", "n", "off"}:
        return False
    return default


def _as_int(raw: str, default: int) -> int:
    try:
        return int(raw)
    except ValueError:
        return default


def _as_list(raw: str) -> list[str]:
    return [part.strip() for part in raw.replace(",", " ").split() if part.strip()]


@dataclass(frozen=True, slots=True)
class Settings:
    app_name: str = "Task Tracker"
    version: str = __version__
    host: str = "localhost"
    port: int = 3000
    environment: str = "development"

    log_level: str = "info"
    log_to_file: bool = True
    log_dir: Path = Path("logs")

    enable_health_check: bool = True
    debug_mode: bool = False
    cors_origins: list[str] = field(default_factory=lambda: ["http://localhost:3000"])


def load_settings(env: Mapping[str, str] | None = None) -> Settings:
    """Build Settings from os.environ, optionally overlaid with ``env``."""
    e: dict[str, str] = dict(os.environ)
    if env:
        e.update(env)

    defaults = Settings()

    environment = _first(e, _k("ENV"), "ENVIRONMENT", default=defaults.environment).lower()
    if environment not in ENVIRONMENTS:
        environment = defaults.environment

    port = _as_int(_first(e, _k("PORT"), "PORT", default=str(defaults.port)), defaults.port)
    if not 0 < port < 65536:
        port = defaults.port

    log_level = _first(e, _k("LOG_LEVEL"), "LOG_LEVEL", default=defaults.log_level).lower()
    log_level = LOG_LEVEL_ALIASES.get(log_level, log_level)
    if log_level not in LOG_LEVELS:
        log_level = defaults.log_level

    cors_raw = _first(e, _k("CORS_ORIGINS"), default="")

    return Settings(
        app_name=_first(e, _k("APP_NAME"), default=defaults.app_name),
        host=_first(e, _k("HOST"), "HOST", default=defaults.host),
        port=port,
        environment=environment,
        log_level=log_level,
        log_to_file=_as_bool(_first(e, _k("LOG_TO_FILE"), default="true"), True),
        log_dir=Path(_first(e, _k("LOG_DIR"), default=str(defaults.log_dir))).expanduser(),
        enable_health_check=_as_bool(_first(e, _k("ENABLE_HEALTH_CHECK"), default="true"), True),
        debug_mode=_as_bool(_first(e, _k("DEBUG_MODE"), default="false"), False),
        cors_origins=_as_list(cors_raw) if cors_raw else list(defaults.cors_origins),
    )


__all__ = ["Settings", "load_settings"]
