"""Exceptions raised while loading the daemon configuration."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:  # pragma: no cover - import for typing only
    from .schema import DaemonConfig


class ConfigError(RuntimeError):
    """Base class for configuration failures."""


class StoreUnavailable(ConfigError):
    """Raised when the settings store or the application namespace cannot be read."""


class MissingHostKey(ConfigError):
    """Raised when none of the host key options is set."""

    def __init__(self, config: "DaemonConfig") -> None:
        super().__init__("at least one host key must be set")
        self.config = config


class ConfigReleased(ConfigError):
    """Raised when the configuration is read before load() or after exit()."""


class DirectoryError(ConfigError):
    """Non-fatal failure to prepare the directory of a configured file."""

    def __init__(self, message: str, path: str, directory: Optional[Path] = None) -> None:
        super().__init__(message)
        self.path = path
        self.directory = directory


class InvalidPath(DirectoryError):
    """Raised when a file path has no directory component."""


class DirectoryCreateFailed(DirectoryError):
    """Raised when the parent directory of a file path cannot be created."""
