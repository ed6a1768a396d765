"""freenetconfd startup configuration."""

from __future__ import annotations

from .cli import main as cli_main
from .config import (
    ConfigError,
    ConfigLoader,
    DaemonConfig,
    MissingHostKey,
    StoreUnavailable,
    load_config,
)

__all__ = [
    "ConfigError",
    "ConfigLoader",
    "DaemonConfig",
    "MissingHostKey",
    "StoreUnavailable",
    "cli_main",
    "load_config",
]
