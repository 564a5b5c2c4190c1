"""
Configuration models and loading.

This module provides Pydantic models for devdiary configuration
with multi-layer merging: defaults < user < project < env vars.
"""

from .env import load_layered_env
from .loader import (
    clear_cache,
    get_project_config_path,
    get_user_config_path,
    get_config_dir,
    load_config,
)
from .models import (
    DiaryConfig,
    LatencyConfig,
    StorageConfig,
    SuggestionsConfig,
)

__all__ = [
    # Models
    "DiaryConfig",
    "LatencyConfig",
    "StorageConfig",
    "SuggestionsConfig",
    # Loader functions
    "clear_cache",
    "get_project_config_path",
    "get_user_config_path",
    "get_config_dir",
    "load_config",
    "load_layered_env",
]
