"""Configuration helpers for the debug command."""

from __future__ import annotations

import os
import tomllib
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Any

_CONFIG_FILENAME = "config.toml"
_DEFAULT_ROOT = "/var/run/sandbox-debug"
_DEFAULT_PROFILE_DELAY = 5
_ENV_HOME = "SANDBOX_DEBUG_HOME"
_ENV_ROOT = "SANDBOX_DEBUG_ROOT"
_ENV_LOG_LEVEL = "SANDBOX_DEBUG_LOG_LEVEL"
_ENV_LOG_FORMAT = "SANDBOX_DEBUG_LOG_FORMAT"

LOG_FORMATS = ("text", "json")
LOG_LEVELS = ("debug", "info", "warning", "error", "critical")


@dataclass(frozen=True, slots=True)
class DebugSettings:
    """Process-wide settings shared by every subcommand."""

    root_dir: Path = Path(_DEFAULT_ROOT)
    log_level: str = "info"
    log_format: str = "text"
    profile_delay: int = _DEFAULT_PROFILE_DELAY

    def merged(
        self,
        *,
        root_dir: Path | str | None = None,
        log_level: str | None = None,
        log_format: str | None = None,
        profile_delay: int | None = None,
    ) -> DebugSettings:
        """Return a copy that applies CLI/env overrides."""

        return replace(
            self,
            root_dir=Path(root_dir) if root_dir else self.root_dir,
            log_level=log_level or self.log_level,
            log_format=log_format or self.log_format,
            profile_delay=self.profile_delay if profile_delay is None else profile_delay,
        )


def _config_dir() -> Path:
    custom = os.environ.get(_ENV_HOME)
    return Path(custom) if custom else Path.home() / ".sandbox-debug"


def config_path() -> Path:
    """Return the path to the optional settings file."""

    return _config_dir() / _CONFIG_FILENAME


def load_settings() -> DebugSettings:
    """Load settings from disk + environment overrides."""

    data: dict[str, Any] = {}
    path = config_path()
    if path.exists():
        data = tomllib.loads(path.read_text(encoding="utf-8"))

    settings = DebugSettings(
        root_dir=Path(data.get("root_dir", _DEFAULT_ROOT)),
        log_level=str(data.get("log_level", "info")),
        log_format=str(data.get("log_format", "text")),
        profile_delay=int(data.get("profile_delay", _DEFAULT_PROFILE_DELAY)),
    ).merged(
        root_dir=os.environ.get(_ENV_ROOT),
        log_level=os.environ.get(_ENV_LOG_LEVEL),
        log_format=os.environ.get(_ENV_LOG_FORMAT),
    )
    settings = replace(
        settings,
        log_level=settings.log_level.lower(),
        log_format=settings.log_format.lower(),
    )
    if settings.log_level not in LOG_LEVELS:
        raise ValueError(f"Unsupported log level {settings.log_level!r}")
    if settings.log_format not in LOG_FORMATS:
        raise ValueError(f"Unsupported log format {settings.log_format!r}")
    return settings
