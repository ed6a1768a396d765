"""TOML backed settings store.

A store is a configuration directory holding one ``<package>.toml`` file per
application namespace. Every top-level table of the file is a named section,
every entry of an array of tables is an anonymous section, and loose
top-level keys form a leading ``@global`` section::

    [server]
    addr = "::"
    port = "830"

    [[keys]]
    host_rsa_key = "/etc/freenetconfd/keys/ssh_host_rsa_key"
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List

import tomllib

from .errors import StoreUnavailable

LOGGER = logging.getLogger(__name__)

PACKAGE_SUFFIX = ".toml"
GLOBAL_SECTION = "@global"

_SCALAR_TYPES = (str, int, float, bool)


@dataclass(frozen=True)
class Section:
    """A named group of option values read from the store."""

    name: str
    options: Dict[str, Any] = field(default_factory=dict)


def _scalar_options(name: str, table: Dict[str, Any]) -> Dict[str, Any]:
    options: Dict[str, Any] = {}
    for key, value in table.items():
        if isinstance(value, _SCALAR_TYPES):
            options[key] = value
        else:
            LOGGER.debug("Ignoring non-scalar option %s in section %s", key, name)
    return options


def parse_sections(document: Dict[str, Any]) -> List[Section]:
    """Split a parsed TOML document into sections, preserving document order."""
    sections: List[Section] = []
    loose: Dict[str, Any] = {}
    for key, value in document.items():
        if isinstance(value, dict):
            sections.append(Section(key, _scalar_options(key, value)))
        elif isinstance(value, list) and value and all(isinstance(item, dict) for item in value):
            for index, item in enumerate(value):
                name = f"@{key}[{index}]"
                sections.append(Section(name, _scalar_options(name, item)))
        else:
            loose[key] = value
    if loose:
        sections.insert(0, Section(GLOBAL_SECTION, _scalar_options(GLOBAL_SECTION, loose)))
    return sections


class SettingsStore:
    """Read namespaces from a configuration directory."""

    def __init__(self, confdir: Path) -> None:
        self.confdir = Path(confdir).expanduser()

    def package_path(self, package: str) -> Path:
        return self.confdir / f"{package}{PACKAGE_SUFFIX}"

    def load(self, package: str) -> List[Section]:
        """Return every section of ``package`` in file order."""
        path = self.package_path(package)
        try:
            with path.open("rb") as handle:
                document = tomllib.load(handle)
        except FileNotFoundError as exc:
            raise StoreUnavailable(f"configuration namespace '{package}' not found at {path}") from exc
        except OSError as exc:
            raise StoreUnavailable(f"failed to read {path}: {exc}") from exc
        except tomllib.TOMLDecodeError as exc:
            raise StoreUnavailable(f"failed to parse {path}: {exc}") from exc
        sections = parse_sections(document)
        LOGGER.debug("Loaded %d section(s) from %s", len(sections), path)
        return sections

    def __repr__(self) -> str:  # pragma: no cover - trivial
        return f"SettingsStore({str(self.confdir)!r})"
