"""
Configuration loading with multi-layer merging.

Implements the configuration precedence chain:
    defaults < user config < project config < env vars

Config files hold sections (``storage``, ``suggestions``, ``latency``);
a later layer replaces individual keys inside a section, never the whole
section.
"""

import json
import logging
import os
from pathlib import Path
from typing import Any

from pydantic import ValidationError as PydanticValidationError

from devdiary.core.errors import ValidationError

from .models import DiaryConfig

logger = logging.getLogger(__name__)

# Global cache to avoid reloading config multiple times per session
_config_cache: DiaryConfig | None = None

Layer = dict[str, Any]


def get_config_dir() -> Path:
    """
    Get the devdiary config directory.

    Returns:
        $XDG_CONFIG_HOME/devdiary, or ~/.config/devdiary when unset
    """
    base = os.environ.get("XDG_CONFIG_HOME") or os.path.expanduser("~/.config")
    return Path(base) / "devdiary"


def get_user_config_path() -> Path:
    """Get path to the user config file (config.json in the config dir)."""
    return get_config_dir() / "config.json"


def get_project_config_path(cwd: Path | None = None) -> Path:
    """
    Get path to project configuration file.

    Args:
        cwd: Working directory to search from (defaults to current directory)

    Returns:
        Path to .devdiary.json in the working directory
    """
    if cwd is None:
        cwd = Path.cwd()
    return cwd / ".devdiary.json"


def merge_layer(config: Layer, layer: Layer) -> Layer:
    """
    Apply one config layer on top of another.

    Sections present in both are merged key by key; anything else in
    ``layer`` replaces what ``config`` had. Neither input is modified.

    Example:
        >>> merge_layer({"storage": {"path": None, "serialize_mutations": False}},
        ...             {"storage": {"serialize_mutations": True}})
        {'storage': {'path': None, 'serialize_mutations': True}}
    """
    merged = dict(config)
    for section, values in layer.items():
        current = merged.get(section)
        if isinstance(current, dict) and isinstance(values, dict):
            merged[section] = {**current, **values}
        else:
            merged[section] = values
    return merged


def read_config_layer(path: Path) -> Layer:
    """
    Read one config file.

    A missing file is an empty layer. An unreadable or malformed file is
    logged and also treated as empty so the other layers still apply.

    Args:
        path: JSON config file

    Returns:
        The file's top-level object
    """
    if not path.is_file():
        return {}

    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (json.JSONDecodeError, OSError, UnicodeDecodeError) as e:
        logger.warning(f"Failed to parse config at {path}: {e}")
        return {}

    if not isinstance(data, dict):
        logger.warning(f"Ignoring config at {path}: expected an object, got {type(data).__name__}")
        return {}
    return data


def _set_nested(config: dict[str, Any], section: str, key: str, value: Any) -> None:
    if not isinstance(config.get(section), dict):
        config[section] = {}
    config[section][key] = value


def apply_env_overrides(config_dict: dict[str, Any]) -> dict[str, Any]:
    """
    Apply environment variable overrides to configuration.

    Env vars have the highest precedence and override all config files.

    Supported env vars:
        DEVDIARY_STORAGE_PATH - overrides storage.path
        DEVDIARY_SERIALIZE_MUTATIONS - overrides storage.serialize_mutations
        DEVDIARY_SUGGESTION_LIMIT - overrides suggestions.limit
        DEVDIARY_LATENCY_SCALE - overrides latency.scale

    Args:
        config_dict: Configuration dictionary to override

    Returns:
        Configuration dictionary with env var overrides applied
    """
    result = config_dict.copy()

    if storage_path := os.environ.get("DEVDIARY_STORAGE_PATH"):
        _set_nested(result, "storage", "path", os.path.expanduser(storage_path))

    if serialize_str := os.environ.get("DEVDIARY_SERIALIZE_MUTATIONS"):
        serialize = serialize_str.lower() not in ("false", "0", "")
        _set_nested(result, "storage", "serialize_mutations", serialize)

    if limit_str := os.environ.get("DEVDIARY_SUGGESTION_LIMIT"):
        try:
            limit = int(limit_str)
            if not 1 <= limit <= 4:
                logger.warning(
                    f"DEVDIARY_SUGGESTION_LIMIT must be between 1 and 4, got {limit}, ignoring"
                )
            else:
                _set_nested(result, "suggestions", "limit", limit)
        except ValueError:
            logger.warning(f"Invalid DEVDIARY_SUGGESTION_LIMIT value '{limit_str}', ignoring")

    if scale_str := os.environ.get("DEVDIARY_LATENCY_SCALE"):
        try:
            scale = float(scale_str)
            if scale < 0:
                logger.warning(f"DEVDIARY_LATENCY_SCALE must be >= 0, got {scale}, ignoring")
            else:
                _set_nested(result, "latency", "scale", scale)
        except ValueError:
            logger.warning(f"Invalid DEVDIARY_LATENCY_SCALE value '{scale_str}', ignoring")

    return result


def get_default_config() -> dict[str, Any]:
    """
    Get hardcoded default configuration.

    Returns:
        Dictionary with default configuration values
    """
    return {
        "storage": {"path": None, "serialize_mutations": False},
        "suggestions": {"limit": 4},
        "latency": {"scale": 0.0},
    }


def load_config(project_dir: Path | None = None, use_cache: bool = True) -> DiaryConfig:
    """
    Load configuration with multi-layer merging.

    Configuration precedence (highest to lowest):
        1. Environment variables (DEVDIARY_*)
        2. Project config (.devdiary.json)
        3. User config (~/.config/devdiary/config.json)
        4. Hardcoded defaults

    Args:
        project_dir: Directory to load .devdiary.json from (defaults to cwd)
        use_cache: If True, return cached config from previous load

    Returns:
        Validated DiaryConfig instance

    Raises:
        ValidationError: If a config file holds an invalid value
    """
    global _config_cache

    if use_cache and _config_cache is not None:
        return _config_cache

    merged = get_default_config()
    for path in (get_user_config_path(), get_project_config_path(project_dir)):
        merged = merge_layer(merged, read_config_layer(path))
    merged = apply_env_overrides(merged)

    try:
        config = DiaryConfig(**merged)
    except PydanticValidationError as e:
        problems = "; ".join(
            f"{'.'.join(str(part) for part in err['loc'])}: {err['msg']}" for err in e.errors()
        )
        raise ValidationError(f"Invalid configuration: {problems}") from e

    _config_cache = config

    return config


def clear_cache() -> None:
    """
    Clear the cached configuration.

    Useful for testing or when config files change during execution.
    """
    global _config_cache
    _config_cache = None
