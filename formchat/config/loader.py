"""Layered TOML configuration files.

`config/default.toml` is always read; `config/{FORMCHAT_ENV}.toml` is laid
over it when present. Tables merge key by key, any other value replaces
the one beneath it.
"""

import os
import tomllib
from pathlib import Path
from typing import Any

CONFIG_DIR_ENV = "FORMCHAT_CONFIG_DIR"
ENVIRONMENT_ENV = "FORMCHAT_ENV"
DEFAULT_ENVIRONMENT = "development"
BASE_FILE = "default.toml"

# How far above the working directory to look for config/
_SEARCH_DEPTH = 5


def get_config_dir() -> Path:
    """Locate the configuration directory.

    FORMCHAT_CONFIG_DIR wins when set; otherwise the nearest `config/`
    at or above the working directory.

    Raises:
        FileNotFoundError: If FORMCHAT_CONFIG_DIR points nowhere
    """
    override = os.environ.get(CONFIG_DIR_ENV)
    if override:
        path = Path(override)
        if not path.is_dir():
            raise FileNotFoundError(f"{CONFIG_DIR_ENV} is not a directory: {override}")
        return path

    here = Path.cwd()
    for candidate in [here, *here.parents][:_SEARCH_DEPTH]:
        if (candidate / "config").is_dir():
            return candidate / "config"
    return Path("config")


def get_environment() -> str:
    return os.environ.get(ENVIRONMENT_ENV, DEFAULT_ENVIRONMENT)


def load_toml(file_path: Path) -> dict[str, Any]:
    """Parse one TOML file.

    Raises:
        FileNotFoundError: If the file is missing
        tomllib.TOMLDecodeError: On invalid syntax
    """
    with file_path.open("rb") as f:
        return tomllib.load(f)


def deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Merge `override` onto a copy of `base`, recursing into tables."""
    merged = dict(base)
    for key, value in override.items():
        current = merged.get(key)
        if isinstance(current, dict) and isinstance(value, dict):
            merged[key] = deep_merge(current, value)
        else:
            merged[key] = value
    return merged


def load_config(config_dir: Path | None = None, environment: str | None = None) -> dict[str, Any]:
    """Read the base file and the environment overlay.

    Args:
        config_dir: Directory holding the TOML files, located if omitted
        environment: Overlay name, FORMCHAT_ENV if omitted

    Raises:
        FileNotFoundError: If default.toml is missing
    """
    directory = config_dir or get_config_dir()
    base_path = directory / BASE_FILE
    if not base_path.is_file():
        raise FileNotFoundError(
            f"{base_path} not found; create it or point {CONFIG_DIR_ENV} elsewhere"
        )

    config = load_toml(base_path)
    overlay = directory / f"{environment or get_environment()}.toml"
    if overlay.is_file():
        config = deep_merge(config, load_toml(overlay))
    return config
