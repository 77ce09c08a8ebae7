"""Core types: error taxonomy, addresses and logging setup."""

from limeade.core.address import (
    CLIPBOARD_PATH,
    DEFAULT_BIND,
    DEFAULT_PORT,
    DEFAULT_SERVER,
    Endpoint,
    normalize_url,
    parse_bind_address,
)
from limeade.core.errors import (
    AddressError,
    ClipboardError,
    ConfigError,
    HttpParseError,
    LimeadeError,
    ResourceAccessError,
    ResourceBusyError,
    ServerStatusError,
    TransportError,
    UnsupportedLegacyOptionError,
)

__all__ = [
    "CLIPBOARD_PATH",
    "DEFAULT_BIND",
    "DEFAULT_PORT",
    "DEFAULT_SERVER",
    "Endpoint",
    "normalize_url",
    "parse_bind_address",
    "LimeadeError",
    "AddressError",
    "ClipboardError",
    "ConfigError",
    "HttpParseError",
    "ResourceAccessError",
    "ResourceBusyError",
    "ServerStatusError",
    "TransportError",
    "UnsupportedLegacyOptionError",
]
