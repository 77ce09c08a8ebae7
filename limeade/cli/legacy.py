"""Translation of lemonade's legacy flags.

Most flags either remap onto the server address or are accepted and ignored.
--trans-loopback and --trans-localfile have no equivalent and abort the
command before any request is made.
"""

from __future__ import annotations

import argparse
import logging
from dataclasses import dataclass, field

from limeade.core.address import DEFAULT_PORT, normalize_url
from limeade.core.errors import UnsupportedLegacyOptionError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LegacyOptions:
    """Legacy flags as supplied on the command line (None when absent)."""

    port: int | None = None
    host: str | None = None
    allow: list[str] = field(default_factory=list)
    line_ending: str | None = None
    no_fallback_messages: str | None = None
    trans_loopback: str | None = None
    trans_localfile: str | None = None
    log_level: int | None = None

    @classmethod
    def from_namespace(cls, args: argparse.Namespace) -> LegacyOptions:
        return cls(
            port=getattr(args, "port", None),
            host=getattr(args, "host", None),
            allow=list(getattr(args, "allow", None) or []),
            line_ending=getattr(args, "line_ending", None),
            no_fallback_messages=getattr(args, "no_fallback_messages", None),
            trans_loopback=getattr(args, "trans_loopback", None),
            trans_localfile=getattr(args, "trans_localfile", None),
            log_level=getattr(args, "log_level", None),
        )

    def check_supported(self) -> None:
        """Fail fast on flags limeade cannot honor.

        Raises:
            UnsupportedLegacyOptionError: If --trans-loopback or
                --trans-localfile was supplied.
        """
        if self.trans_loopback is not None:
            raise UnsupportedLegacyOptionError("--trans-loopback")
        if self.trans_localfile is not None:
            raise UnsupportedLegacyOptionError("--trans-localfile")

    def log_ignored(self) -> None:
        if self.allow:
            logger.debug("Ignoring legacy --allow %s", ", ".join(self.allow))
        if self.line_ending is not None:
            logger.debug("Ignoring legacy --line-ending %s", self.line_ending)
        if self.no_fallback_messages is not None:
            logger.debug("Ignoring legacy --no-fallback-messages")


UNSUPPORTED_FLAGS = ("--trans-loopback", "--trans-localfile")


def reject_unsupported_argv(argv: list[str]) -> None:
    """Fail on --trans-* flags before argparse sees the command line.

    A bare --trans-loopback in front of the subcommand would otherwise take
    the subcommand name as its value. Abbreviations accepted by argparse
    are matched too; anything after "--" is a literal argument.

    Raises:
        UnsupportedLegacyOptionError: If either flag appears in argv.
    """
    for arg in argv:
        if arg == "--":
            return
        name = arg.split("=", 1)[0]
        if len(name) <= len("--trans-"):
            continue
        for flag in UNSUPPORTED_FLAGS:
            if flag.startswith(name):
                raise UnsupportedLegacyOptionError(flag)


def build_server_url(server: str, legacy: LegacyOptions) -> str:
    """Work out the client target URL from --server and legacy --host/--port."""
    if legacy.host is not None and legacy.port is not None:
        return f"http://{legacy.host}:{legacy.port}"
    if legacy.host is not None:
        return f"http://{legacy.host}:{DEFAULT_PORT}"
    if legacy.port is not None:
        return f"http://localhost:{legacy.port}"
    return normalize_url(server)


def server_bind_address(addr: str, legacy: LegacyOptions) -> str:
    """Apply a legacy --port to the server bind address."""
    if legacy.port is None:
        return addr
    overridden = f":{legacy.port}"
    logger.warning("legacy --port used, overriding addr to %s", overridden)
    return overridden
