"""Settings package exports."""

from .loader import (
    CONFIG_ENV_VAR,
    AppConfig,
    HttpSettings,
    load_config,
)

__all__ = [
    "CONFIG_ENV_VAR",
    "AppConfig",
    "HttpSettings",
    "load_config",
]
