"""Configuration loading, matching and post-processing."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence, Tuple

from platformdirs import site_config_dir, user_config_dir

from .errors import (
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
    MS_PER_SECOND,
    DaemonConfig,
    Option,
    OptionType,
)
from .store import PACKAGE_SUFFIX, Section, SettingsStore

APP_NAME = "freenetconfd"
ENV_PREFIX = "FREENETCONFD__"
CONFDIR_ENV = f"{ENV_PREFIX}CONFDIR"

KEY_DIRECTORY_MODE = 0o700

_TRUE_WORDS = {"1", "true", "yes", "on", "enabled"}
_FALSE_WORDS = {"0", "false", "no", "off", "disabled"}
_DESCRIPTORS = {descriptor.name: descriptor for descriptor in CONFIG_OPTIONS}

LOGGER = logging.getLogger(__name__)

MatchedOptions = Dict[Option, Any]


@dataclass(frozen=True)
class LoadResult:
    """A validated configuration plus the non-fatal problems met on the way."""

    config: DaemonConfig
    diagnostics: List[DirectoryError] = field(default_factory=list)


def parse_scalar(name: str, value: str) -> Any:
    """Coerce an override string into the type declared for option ``name``."""
    descriptor = _DESCRIPTORS.get(name)
    if descriptor is None or descriptor.type is OptionType.STRING:
        return value
    text = value.strip().lower()
    if descriptor.type is OptionType.BOOL:
        if text in _TRUE_WORDS:
            return True
        if text in _FALSE_WORDS:
            return False
        return value
    try:
        return int(text)
    except ValueError:
        return value


def env_to_section(env: Mapping[str, str]) -> Section:
    """Collect ``FREENETCONFD__<OPTION>`` variables into an override section."""
    options: Dict[str, Any] = {}
    for key, value in env.items():
        if not key.startswith(ENV_PREFIX) or key == CONFDIR_ENV:
            continue
        name = key[len(ENV_PREFIX) :].lower()
        options[name] = parse_scalar(name, value)
    return Section("environment", options)


def parse_cli_overrides(entries: Iterable[str]) -> Section:
    """Parse ``option=value`` pairs into an override section."""
    options: Dict[str, Any] = {}
    for entry in entries:
        if "=" not in entry:
            continue
        key, raw = entry.split("=", 1)
        name = key.strip()
        options[name] = parse_scalar(name, raw)
    return Section("cli", options)


def discover_confdir(explicit: str | Path | None, env: Mapping[str, str]) -> Path:
    """Determine the configuration directory based on precedence."""
    if explicit:
        return Path(explicit).expanduser()

    from_env = env.get(CONFDIR_ENV)
    if from_env:
        return Path(from_env).expanduser()

    filename = f"{APP_NAME}{PACKAGE_SUFFIX}"
    if Path(filename).exists():
        return Path(".")

    user_dir = Path(user_config_dir(APP_NAME))
    if (user_dir / filename).exists():
        return user_dir

    return Path(site_config_dir(APP_NAME))


def merge_sections(sections: Iterable[Section]) -> Dict[str, Any]:
    """Flatten sections into one mapping; later sections win."""
    merged: Dict[str, Any] = {}
    for section in sections:
        merged.update(section.options)
    return merged


def match_options(merged: Mapping[str, Any]) -> MatchedOptions:
    """Keep only known options whose value has the declared type."""
    matched: MatchedOptions = {}
    for descriptor in CONFIG_OPTIONS:
        if descriptor.name not in merged:
            continue
        value = merged[descriptor.name]
        if not descriptor.type.accepts(value):
            LOGGER.debug(
                "Ignoring option %s: expected %s, got %r", descriptor.name, descriptor.type.value, value
            )
            continue
        matched[descriptor.option] = value
    return matched


def ensure_parent_directory(path: str) -> Path:
    """Create the directory that will hold the file ``path``.

    Only the last directory level is created, with owner-only permissions.
    A bare filename is rejected rather than resolved to the working directory.
    """
    directory = Path(path).parent
    if str(directory) in ("", "."):
        raise InvalidPath(f"invalid directory path for '{path}'", path, directory)
    try:
        directory.stat()
        return directory
    except FileNotFoundError:
        pass
    except (OSError, ValueError) as exc:
        raise DirectoryCreateFailed(
            f"checking directory '{directory}' failed: {getattr(exc, 'strerror', None) or exc}",
            path,
            directory,
        ) from exc
    try:
        directory.mkdir(mode=KEY_DIRECTORY_MODE)
    except (OSError, ValueError) as exc:
        raise DirectoryCreateFailed(
            f"creating directory '{directory}' failed: {getattr(exc, 'strerror', None) or exc}",
            path,
            directory,
        ) from exc
    LOGGER.debug("Created directory %s", directory)
    return directory


def apply_options(matched: MatchedOptions) -> Tuple[DaemonConfig, List[DirectoryError]]:
    """Build the configuration from defaults and matched options.

    Host key directories are created as a side effect. Failures there are
    logged and returned instead of raised.
    """
    values: Dict[str, Any] = {}
    diagnostics: List[DirectoryError] = []

    for option, value in matched.items():
        if option is Option.SSH_PCAP_FILE:
            continue
        if option is Option.SSH_TIMEOUT_READ:
            value = value * MS_PER_SECOND
        values[option.value] = value

        if option in HOST_KEY_OPTIONS:
            try:
                ensure_parent_directory(value)
            except DirectoryError as exc:
                LOGGER.error("%s: %s", option.value, exc)
                diagnostics.append(exc)

    if values.get(Option.SSH_PCAP_ENABLE.value) and Option.SSH_PCAP_FILE in matched:
        values[Option.SSH_PCAP_FILE.value] = matched[Option.SSH_PCAP_FILE]

    return DaemonConfig(**values), diagnostics


def validate_config(config: DaemonConfig) -> None:
    """Raise ``MissingHostKey`` unless at least one host key path is set."""
    if not config.host_keys:
        raise MissingHostKey(config)


def load_from_store(
    store: SettingsStore,
    *,
    app_name: str = APP_NAME,
    overrides: Sequence[Section] = (),
) -> LoadResult:
    """Load ``app_name`` from ``store`` with ``overrides`` applied last."""
    try:
        sections = store.load(app_name)
    except StoreUnavailable as exc:
        LOGGER.error("%s", exc)
        raise

    matched = match_options(merge_sections([*sections, *overrides]))
    config, diagnostics = apply_options(matched)

    try:
        validate_config(config)
    except MissingHostKey as exc:
        LOGGER.error("%s", exc)
        raise

    return LoadResult(config=config, diagnostics=diagnostics)


def load_config(
    confdir: str | Path | None = None,
    cli_sets: Iterable[str] = (),
    *,
    app_name: str = APP_NAME,
    env: Optional[Mapping[str, str]] = None,
) -> LoadResult:
    """Load configuration using the precedence rules.

    Store sections come first in file order, followed by environment
    overrides and finally ``cli_sets``.
    """
    environ = os.environ if env is None else env
    store = SettingsStore(discover_confdir(confdir, environ))
    overrides = [env_to_section(environ), parse_cli_overrides(cli_sets)]
    return load_from_store(store, app_name=app_name, overrides=overrides)


class ConfigLoader:
    """Own the daemon configuration between ``load()`` and ``exit()``."""

    def __init__(
        self,
        confdir: str | Path | None = None,
        cli_sets: Iterable[str] = (),
        *,
        app_name: str = APP_NAME,
        env: Optional[Mapping[str, str]] = None,
    ) -> None:
        self.confdir = confdir
        self.cli_sets = list(cli_sets)
        self.app_name = app_name
        self.env = env
        self.diagnostics: List[DirectoryError] = []
        self._config: Optional[DaemonConfig] = None

    @property
    def loaded(self) -> bool:
        return self._config is not None

    @property
    def config(self) -> DaemonConfig:
        if self._config is None:
            raise ConfigReleased("configuration is not loaded")
        return self._config

    def load(self) -> DaemonConfig:
        """Load the configuration, replacing any previously loaded one."""
        try:
            result = load_config(self.confdir, self.cli_sets, app_name=self.app_name, env=self.env)
        except MissingHostKey:
            self._config = None
            self.diagnostics = []
            raise
        self._config = result.config
        self.diagnostics = result.diagnostics
        return result.config

    def exit(self) -> None:
        """Release the loaded configuration."""
        if self._config is None:
            LOGGER.debug("Configuration already released")
            return
        self._config = None
        self.diagnostics = []

    def __enter__(self) -> "ConfigLoader":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.exit()
