"""Server endpoint and bind address parsing.

Client addresses may omit the scheme ("localhost:2490"), in which case plain
HTTP is assumed. Everything is validated up front so that a bad address fails
with AddressError before any socket is opened.
"""

from __future__ import annotations

import ipaddress
import re
from dataclasses import dataclass
from urllib.parse import urlsplit

from limeade.core.errors import AddressError

DEFAULT_PORT = 2490
DEFAULT_SERVER = f"localhost:{DEFAULT_PORT}"
DEFAULT_BIND = f"0.0.0.0:{DEFAULT_PORT}"
CLIPBOARD_PATH = "/clipboard"

SUPPORTED_SCHEMES = ("http", "https")

# RFC 1123 labels; underscores are tolerated since some LAN names use them
_HOST_LABEL = re.compile(r"^[A-Za-z0-9_](?:[A-Za-z0-9_-]{0,61}[A-Za-z0-9_])?$")


def normalize_url(address: str) -> str:
    """Prefix http:// onto an address that carries no scheme."""
    address = address.strip()
    if address.startswith(("http://", "https://")):
        return address
    return f"http://{address}"


def _validate_host(address: str, host: str) -> str:
    if host.startswith("[") and host.endswith("]"):
        host = host[1:-1]
    if ":" in host:
        try:
            return str(ipaddress.IPv6Address(host))
        except ValueError as e:
            raise AddressError(address, f"invalid IPv6 host: {e}") from e

    if len(host) > 253:
        raise AddressError(address, "host name too long")
    labels = host.rstrip(".").split(".")
    if not all(_HOST_LABEL.match(label) for label in labels):
        raise AddressError(address, f"invalid host {host!r}")
    return host.lower()


def _validate_port(address: str, port_str: str) -> int:
    # isdigit() alone accepts non-ASCII digits such as "²"
    if not (port_str.isascii() and port_str.isdigit()):
        raise AddressError(address, f"invalid port {port_str!r}")
    port = int(port_str)
    if port > 65535:
        raise AddressError(address, f"port out of range: {port}")
    return port


@dataclass(frozen=True)
class Endpoint:
    """Immutable handle on the target server.

    Attributes:
        scheme: "http" or "https".
        host: Host name or IP address (IPv6 without brackets).
        port: Explicit port, or None for the scheme default.
    """

    scheme: str
    host: str
    port: int | None = None

    @classmethod
    def parse(cls, address: str) -> Endpoint:
        """Build an Endpoint from a user-supplied address.

        Raises:
            AddressError: If the address is empty or not a well-formed URL.
        """
        if not address or not address.strip():
            raise AddressError(address, "empty address")

        url = normalize_url(address)
        try:
            parts = urlsplit(url)
        except ValueError as e:
            raise AddressError(address, str(e)) from e

        if parts.scheme not in SUPPORTED_SCHEMES:
            raise AddressError(address, f"unsupported scheme {parts.scheme!r}")
        if parts.username is not None or parts.password is not None:
            raise AddressError(address, "credentials are not supported")

        netloc = parts.netloc
        if not netloc:
            raise AddressError(address, "missing host")

        # Split host and port by hand: urlsplit silently accepts junk in both
        if netloc.startswith("["):
            end = netloc.find("]")
            if end == -1:
                raise AddressError(address, "unterminated IPv6 host")
            host_part, rest = netloc[: end + 1], netloc[end + 1 :]
            if rest and not rest.startswith(":"):
                raise AddressError(address, f"unexpected characters after host: {rest!r}")
            port_part = rest[1:] if rest else None
        elif ":" in netloc:
            host_part, port_part = netloc.rsplit(":", 1)
        else:
            host_part, port_part = netloc, None

        if not host_part:
            raise AddressError(address, "missing host")

        host = _validate_host(address, host_part)
        port = _validate_port(address, port_part) if port_part is not None else None
        return cls(scheme=parts.scheme, host=host, port=port)

    @property
    def base_url(self) -> str:
        host = f"[{self.host}]" if ":" in self.host else self.host
        if self.port is None:
            return f"{self.scheme}://{host}"
        return f"{self.scheme}://{host}:{self.port}"

    @property
    def clipboard_url(self) -> str:
        return self.base_url + CLIPBOARD_PATH

    def __str__(self) -> str:
        return self.base_url


def parse_bind_address(addr: str) -> tuple[str | None, int]:
    """Parse a server bind address of the form HOST:PORT.

    An empty host (":2490") or "0.0.0.0" binds all interfaces and is returned
    as None so asyncio listens on every interface family. A missing port falls
    back to DEFAULT_PORT.

    Raises:
        AddressError: If the host or port is malformed.
    """
    addr = addr.strip()
    if not addr:
        raise AddressError(addr, "empty bind address")

    if addr.startswith("["):
        end = addr.find("]")
        if end == -1:
            raise AddressError(addr, "unterminated IPv6 host")
        host_part, rest = addr[: end + 1], addr[end + 1 :]
        if rest and not rest.startswith(":"):
            raise AddressError(addr, f"unexpected characters after host: {rest!r}")
        port_part = rest[1:] if rest else ""
    elif ":" in addr:
        host_part, port_part = addr.rsplit(":", 1)
    else:
        host_part, port_part = addr, ""

    port = _validate_port(addr, port_part) if port_part else DEFAULT_PORT

    if host_part in ("", "0.0.0.0", "[::]", "*"):
        return None, port
    return _validate_host(addr, host_part), port
