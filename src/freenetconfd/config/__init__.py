"""Configuration utilities for freenetconfd."""

from .errors import (
    ConfigError,
    ConfigReleased,
    DirectoryCreateFailed,
    DirectoryError,
    InvalidPath,
    MissingHostKey,
    StoreUnavailable,
)
from .schema import (
    CONFIG_OPTIONS,
    HOST_KEY_OPTIONS,
    DaemonConfig,
    Option,
    OptionDescriptor,
    OptionType,
)
from .store import Section, SettingsStore
from .loader import (
    APP_NAME,
    ENV_PREFIX,
    ConfigLoader,
    LoadResult,
    apply_options,
    discover_confdir,
    ensure_parent_directory,
    env_to_section,
    load_config,
    load_from_store,
    match_options,
    merge_sections,
    parse_cli_overrides,
    validate_config,
)

__all__ = [
    "APP_NAME",
    "CONFIG_OPTIONS",
    "ENV_PREFIX",
    "HOST_KEY_OPTIONS",
    "ConfigError",
    "ConfigLoader",
    "ConfigReleased",
    "DaemonConfig",
    "DirectoryCreateFailed",
    "DirectoryError",
    "InvalidPath",
    "LoadResult",
    "MissingHostKey",
    "Option",
    "OptionDescriptor",
    "OptionType",
    "Section",
    "SettingsStore",
    "StoreUnavailable",
    "apply_options",
    "discover_confdir",
    "ensure_parent_directory",
    "env_to_section",
    "load_config",
    "load_from_store",
    "match_options",
    "merge_sections",
    "parse_cli_overrides",
    "validate_config",
]
