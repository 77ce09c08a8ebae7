"""Configuration loading with fail-fast behavior.

Layers, later ones winning:
    1. Pydantic defaults
    2. ~/.limeade/config.json, or the file named by $LIMEADE_CONFIG
    3. Environment: LIMEADE_SERVER (client target), LIMEADE_ADDR (bind address)

Command-line flags are applied on top by the CLI.
"""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from limeade.config.schema import LimeadeConfig
from limeade.core.errors import ConfigError

logger = logging.getLogger(__name__)

CONFIG_PATH_ENV = "LIMEADE_CONFIG"
SERVER_ENV = "LIMEADE_SERVER"
ADDR_ENV = "LIMEADE_ADDR"


def get_limeade_dir() -> Path:
    """Return the per-user limeade directory (~/.limeade)."""
    return Path.home() / ".limeade"


def default_config_path() -> Path:
    env_path = os.environ.get(CONFIG_PATH_ENV)
    if env_path:
        return Path(env_path).expanduser()
    return get_limeade_dir() / "config.json"


def load_json_file(path: Path) -> dict[str, Any]:
    """Load a JSON object from path.

    Raises:
        ConfigError: If the file can't be read, holds invalid JSON, or is not
            a JSON object.
    """
    try:
        content = path.read_text(encoding="utf-8-sig")
    except OSError as e:
        raise ConfigError(f"Failed to read config file {path}: {e}") from e

    # Empty file is valid
    content = content.strip()
    if not content:
        return {}

    try:
        result = json.loads(content)
    except json.JSONDecodeError as e:
        raise ConfigError(f"Invalid JSON in {path}: {e}") from e

    if not isinstance(result, dict):
        raise ConfigError(f"Expected object in {path}, got {type(result).__name__}")
    return result


def _apply_env(data: dict[str, Any]) -> dict[str, Any]:
    server_target = os.environ.get(SERVER_ENV)
    if server_target:
        data.setdefault("client", {})["server"] = server_target
    bind_addr = os.environ.get(ADDR_ENV)
    if bind_addr:
        data.setdefault("server", {})["addr"] = bind_addr
    return data


def load_config(path: Path | None = None) -> LimeadeConfig:
    """Load configuration from file and environment.

    Args:
        path: Explicit config file path (must exist). If None, the default
            location is used when present.

    Returns:
        Validated LimeadeConfig object.

    Raises:
        ConfigError: If the config file is unreadable, invalid JSON, or the
            merged config fails validation.
    """
    data: dict[str, Any] = {}
    source: Path | None = None

    if path is not None:
        if not path.exists():
            raise ConfigError(f"Config file not found: {path}")
        source = path
    else:
        candidate = default_config_path()
        if candidate.is_file():
            source = candidate

    if source is not None:
        data = load_json_file(source)
        logger.debug("Config loaded from: %s", source)
    else:
        logger.debug("No config file found, using defaults")

    data = _apply_env(data)

    try:
        return LimeadeConfig.model_validate(data)
    except ValidationError as e:
        origin = str(source) if source else "environment"
        raise ConfigError(f"Config validation failed ({origin}): {e}") from e
