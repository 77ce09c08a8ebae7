"""Pydantic models for limeade configuration validation."""

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

from limeade.core.address import DEFAULT_BIND, DEFAULT_SERVER

LogLevel = Literal["debug", "info", "warning", "error"]


class ServerConfig(BaseModel):
    """Configuration for `limeade server`.

    Example in config.json:
        "server": {
            "addr": "0.0.0.0:2490",
            "backend": "system",
            "log_file": "~/.limeade/server.log"
        }
    """

    model_config = ConfigDict(extra="forbid")

    addr: str = DEFAULT_BIND
    """Address to bind to (HOST:PORT, ":PORT" for all interfaces)."""

    backend: Literal["system", "memory"] = "system"
    """Clipboard backend: the OS clipboard, or an in-process buffer."""

    log_file: str | None = None
    """Optional rotating log file for server events."""


class ClientConfig(BaseModel):
    """Configuration for the copy/paste commands."""

    model_config = ConfigDict(extra="forbid")

    server: str = DEFAULT_SERVER
    """Server to connect to; http:// is assumed when no scheme is given."""

    timeout: float = Field(default=30.0, gt=0)
    """Overall time limit in seconds for each copy or paste."""


class LimeadeConfig(BaseModel):
    """Root configuration model."""

    model_config = ConfigDict(extra="forbid")

    log_level: LogLevel = "info"
    """Default verbosity; overridden by $LIMEADE and --log-level."""

    server: ServerConfig = ServerConfig()
    client: ClientConfig = ClientConfig()

    @field_validator("log_level", mode="before")
    @classmethod
    def _lowercase_level(cls, value: object) -> object:
        if isinstance(value, str):
            value = value.strip().lower()
            return "warning" if value == "warn" else value
        return value
