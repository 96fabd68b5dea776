"""Helpers for loading configuration from TOML."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import tomllib

DEFAULT_CONFIG_NAME = "curlkit.toml"
CONFIG_ENV_VAR = "CURLKIT_CONFIG"
_LOG_LEVELS = {"CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG"}


@dataclass(slots=True)
class HttpSettings:
    timeout: float | None = None
    verify: bool = True
    allow_redirects: bool = True
    user_agent: str | None = None

    def send_kwargs(self) -> dict[str, Any]:
        """Keyword arguments for ``requests.Session.send``."""

        return {
            "timeout": self.timeout,
            "verify": self.verify,
            "allow_redirects": self.allow_redirects,
        }


@dataclass(slots=True)
class AppConfig:
    http: HttpSettings = field(default_factory=HttpSettings)
    log_level: str = "WARNING"
    structured_logs: bool = True
    source: Path | None = None


def _config_path(explicit: str | os.PathLike[str] | None = None) -> tuple[Path, bool]:
    if explicit:
        return Path(explicit), True
    env_value = os.environ.get(CONFIG_ENV_VAR)
    if env_value:
        return Path(env_value), True
    return Path.cwd() / DEFAULT_CONFIG_NAME, False


def _load_toml(path: Path) -> dict[str, Any]:
    with path.open("rb") as fp:
        return tomllib.load(fp)


def _as_bool(value: Any, *, default: bool) -> bool:
    if value is None:
        return default
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        return value.strip().lower() in {"1", "true", "yes", "on"}
    return bool(value)


def _build_http(section: dict[str, Any]) -> HttpSettings:
    timeout_raw = section.get("timeout")
    timeout = float(timeout_raw) if timeout_raw is not None else None
    if timeout is not None and timeout <= 0:
        raise ValueError(f"http.timeout must be positive, got {timeout_raw!r}")
    user_agent = section.get("user_agent")
    return HttpSettings(
        timeout=timeout,
        verify=_as_bool(section.get("verify"), default=True),
        allow_redirects=_as_bool(section.get("allow_redirects"), default=True),
        user_agent=str(user_agent) if user_agent else None,
    )


def load_config(config_path: str | os.PathLike[str] | None = None) -> AppConfig:
    path, required = _config_path(config_path)
    if not path.exists():
        if required:
            raise FileNotFoundError(f"Config file not found: {path}")
        return AppConfig()

    data = _load_toml(path)
    http_section = data.get("http", {})
    logging_section = data.get("logging", {})

    level = str(logging_section.get("level", "WARNING")).upper()
    if level not in _LOG_LEVELS:
        available = ", ".join(sorted(_LOG_LEVELS))
        raise ValueError(f"Unknown logging.level {level!r}, expected one of: {available}")

    return AppConfig(
        http=_build_http(http_section),
        log_level=level,
        structured_logs=_as_bool(logging_section.get("structured"), default=True),
        source=path,
    )
