"""Configuration loading and validation."""

from limeade.config.loader import load_config
from limeade.config.schema import ClientConfig, LimeadeConfig, ServerConfig

__all__ = ["ClientConfig", "LimeadeConfig", "ServerConfig", "load_config"]
