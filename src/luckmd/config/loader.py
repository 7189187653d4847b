"""Configuration loader with TOML support and merge capability."""

from __future__ import annotations

import logging
import os
import tomllib
from pathlib import Path
from typing import Any

from luckmd.config.schema import LuckmdConfig

logger = logging.getLogger(__name__)

ENV_CONFIG_PATH = "LUCKMD_CONFIG"
PROJECT_CONFIG_NAME = "luckmd.toml"


def _deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Recursively merge override into base."""
    result = base.copy()
    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = _deep_merge(result[key], value)
        else:
            result[key] = value
    return result


def _expand_path(path: str | Path) -> Path:
    """Expand ~ and environment variables in path."""
    return Path(os.path.expandvars(str(path))).expanduser().resolve()


def _read_toml(path: Path) -> dict[str, Any]:
    with open(path, "rb") as f:
        return tomllib.load(f)


def user_config_path() -> Path:
    return Path.home() / ".config" / "luckmd" / "config.toml"


def load_config(
    config_path: Path | None = None,
    merge_user: bool = True,
) -> LuckmdConfig:
    """Load configuration with precedence.

    Priority (highest to lowest):
    1. Provided config_path (or $LUCKMD_CONFIG)
    2. ./luckmd.toml (project settings)
    3. ~/.config/luckmd/config.toml (user defaults)
    4. Built-in defaults (schema)

    Args:
        config_path: Explicit path to config file.
        merge_user: Whether to merge user config from ~/.config/luckmd/.

    Returns:
        Merged LuckmdConfig instance.

    Raises:
        FileNotFoundError: If an explicit config path does not exist.
        tomllib.TOMLDecodeError: If a config file is not valid TOML.
        pydantic.ValidationError: If merged values do not fit the schema.
    """
    env_config = os.environ.get(ENV_CONFIG_PATH)
    if config_path is None and env_config:
        config_path = Path(env_config).expanduser()

    config_data: dict[str, Any] = {}

    if merge_user:
        user_path = user_config_path()
        if user_path.exists():
            config_data = _deep_merge(config_data, _read_toml(user_path))
            logger.debug("Loaded user config from %s", user_path)

    local_path = Path(PROJECT_CONFIG_NAME)
    if local_path.exists():
        config_data = _deep_merge(config_data, _read_toml(local_path))
        logger.debug("Loaded project config from %s", local_path)

    if config_path is not None:
        if not config_path.exists():
            raise FileNotFoundError(f"Config file not found: {config_path}")
        config_data = _deep_merge(config_data, _read_toml(config_path))
        logger.debug("Loaded config from %s", config_path)

    # Expand paths in extension dirs
    extensions = config_data.get("extensions")
    if isinstance(extensions, dict) and "extension_dirs" in extensions:
        extensions["extension_dirs"] = [_expand_path(p) for p in extensions["extension_dirs"]]

    return LuckmdConfig(**config_data)
