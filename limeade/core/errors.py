"""Typed exception hierarchy for limeade."""

from __future__ import annotations


class LimeadeError(Exception):
    """Base class for all limeade errors."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class ConfigError(LimeadeError):
    """Raised for configuration issues (invalid JSON, validation failure)."""


class AddressError(LimeadeError):
    """Raised when a server or bind address is not a well-formed network address."""

    def __init__(self, address: str, reason: str) -> None:
        self.address = address
        self.reason = reason
        super().__init__(f"invalid addr '{address}': {reason}")


class TransportError(LimeadeError):
    """Raised for any failure establishing or maintaining the HTTP connection."""


class ServerStatusError(TransportError):
    """Raised by the client when the server answers with a non-200 status."""

    def __init__(self, status_code: int, detail: str = "") -> None:
        self.status_code = status_code
        self.detail = detail
        message = f"server responded {status_code}"
        if detail:
            message = f"{message}: {detail}"
        super().__init__(message)


class HttpParseError(TransportError):
    """Raised when an inbound HTTP request is malformed or truncated."""


class ClipboardError(LimeadeError):
    """Base class for clipboard adapter failures."""


class ResourceBusyError(ClipboardError):
    """The clipboard is currently held by another local actor."""


class ResourceAccessError(ClipboardError):
    """The clipboard could not be initialized or accessed for a non-busy reason."""


class UnsupportedLegacyOptionError(LimeadeError):
    """Raised when a legacy flag with no safe equivalent is supplied."""

    def __init__(self, flag: str) -> None:
        self.flag = flag
        super().__init__(f"legacy flag {flag} is not supported in limeade")
