"""Option catalog and the pydantic model for the daemon configuration."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional, Tuple

from pydantic import BaseModel, ConfigDict, field_validator, model_validator

INT32_MIN = -(2**31)
INT32_MAX = 2**31 - 1

MS_PER_SECOND = 1000


class OptionType(str, Enum):
    """Primitive value types an option may declare."""

    STRING = "string"
    INT32 = "int32"
    BOOL = "bool"

    def accepts(self, value: Any) -> bool:
        """Return True when ``value`` is a valid variant for this type."""
        if self is OptionType.STRING:
            return isinstance(value, str)
        if self is OptionType.BOOL:
            return isinstance(value, bool)
        # bool is an int subclass and must not satisfy integer options
        if isinstance(value, bool) or not isinstance(value, int):
            return False
        return INT32_MIN <= value <= INT32_MAX


class Option(str, Enum):
    """Names of every recognised configuration option."""

    ADDR = "addr"
    PORT = "port"
    USERNAME = "username"
    PASSWORD = "password"
    HOST_ECDSA_KEY = "host_ecdsa_key"
    HOST_DSA_KEY = "host_dsa_key"
    HOST_RSA_KEY = "host_rsa_key"
    AUTHORIZED_KEYS_FILE = "authorized_keys_file"
    LOG_LEVEL = "log_level"
    SSH_TIMEOUT_SOCKET = "ssh_timeout_socket"
    SSH_TIMEOUT_READ = "ssh_timeout_read"
    SSH_PCAP_ENABLE = "ssh_pcap_enable"
    SSH_PCAP_FILE = "ssh_pcap_file"
    YANG_DIR = "yang_dir"


@dataclass(frozen=True)
class OptionDescriptor:
    """A single schema entry: option name plus declared type."""

    option: Option
    type: OptionType

    @property
    def name(self) -> str:
        return self.option.value


CONFIG_OPTIONS: Tuple[OptionDescriptor, ...] = (
    OptionDescriptor(Option.ADDR, OptionType.STRING),
    OptionDescriptor(Option.PORT, OptionType.STRING),
    OptionDescriptor(Option.USERNAME, OptionType.STRING),
    OptionDescriptor(Option.PASSWORD, OptionType.STRING),
    OptionDescriptor(Option.HOST_ECDSA_KEY, OptionType.STRING),
    OptionDescriptor(Option.HOST_DSA_KEY, OptionType.STRING),
    OptionDescriptor(Option.HOST_RSA_KEY, OptionType.STRING),
    OptionDescriptor(Option.AUTHORIZED_KEYS_FILE, OptionType.STRING),
    OptionDescriptor(Option.LOG_LEVEL, OptionType.INT32),
    OptionDescriptor(Option.SSH_TIMEOUT_SOCKET, OptionType.INT32),
    OptionDescriptor(Option.SSH_TIMEOUT_READ, OptionType.INT32),
    OptionDescriptor(Option.SSH_PCAP_ENABLE, OptionType.BOOL),
    OptionDescriptor(Option.SSH_PCAP_FILE, OptionType.STRING),
    OptionDescriptor(Option.YANG_DIR, OptionType.STRING),
)

HOST_KEY_OPTIONS: Tuple[Option, ...] = (
    Option.HOST_ECDSA_KEY,
    Option.HOST_DSA_KEY,
    Option.HOST_RSA_KEY,
)


class DaemonConfig(BaseModel):
    """Process-wide configuration consumed by the SSH/NETCONF listener.

    Field defaults are the daemon's hard-coded defaults. ``ssh_timeout_read``
    is stored in milliseconds while ``ssh_timeout_socket`` stays in seconds.
    """

    model_config = ConfigDict(frozen=True)

    addr: Optional[str] = None
    port: Optional[str] = None
    username: Optional[str] = None
    password: Optional[str] = None
    host_ecdsa_key: Optional[str] = None
    host_dsa_key: Optional[str] = None
    host_rsa_key: Optional[str] = None
    authorized_keys_file: Optional[str] = None
    log_level: int = 0
    ssh_timeout_socket: int = 3
    ssh_timeout_read: int = 1 * MS_PER_SECOND
    ssh_pcap_enable: bool = False
    ssh_pcap_file: Optional[str] = None
    yang_dir: Optional[str] = None

    @field_validator("ssh_pcap_file", mode="before")
    @classmethod
    def _blank_to_none(cls, value: object) -> Optional[str]:
        if value is None:
            return None
        text = str(value)
        return text or None

    @model_validator(mode="after")
    def _check_pcap_file(self) -> "DaemonConfig":
        if self.ssh_pcap_file is not None and not self.ssh_pcap_enable:
            raise ValueError("ssh_pcap_file requires ssh_pcap_enable")
        return self

    @property
    def host_keys(self) -> Dict[str, str]:
        """Return the configured host key paths keyed by option name."""
        keys = {}
        for option in HOST_KEY_OPTIONS:
            path = getattr(self, option.value)
            if path:
                keys[option.value] = path
        return keys
