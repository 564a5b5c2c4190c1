"""
.env support for DEVDIARY_* settings.

Settings can be kept in dotenv files instead of the shell profile:

    ~/.config/devdiary/.env        user defaults
    ./.env, ./.env.local           per-project values (later file wins)

Only DEVDIARY_* keys are taken from these files; anything else in a
project's .env belongs to that project and is left alone. A variable
already exported in the shell always beats a file.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Iterable
from pathlib import Path

from dotenv import dotenv_values

from .loader import get_config_dir

logger = logging.getLogger(__name__)

ENV_PREFIX = "DEVDIARY_"


def read_diary_env(path: Path) -> dict[str, str]:
    """
    Read the DEVDIARY_* assignments from one dotenv file.

    Args:
        path: dotenv file (missing files yield nothing)

    Returns:
        Mapping of variable name to value, without empty assignments
    """
    if not path.is_file():
        return {}

    found: dict[str, str] = {}
    ignored = 0
    for key, value in dotenv_values(path).items():
        if not key.startswith(ENV_PREFIX):
            ignored += 1
        elif value is not None:
            found[key] = value
    if ignored:
        logger.debug(f"{path}: ignored {ignored} non-{ENV_PREFIX} key(s)")
    return found


def load_layered_env(
    *,
    project_dir: Path | None = None,
    user_env_paths: Iterable[Path] | None = None,
    project_env_paths: Iterable[Path] | None = None,
) -> dict[str, str]:
    """
    Export DEVDIARY_* values from the user and project .env files.

    Project files override the user file; neither overrides a variable
    that was set before this call.

    Args:
        project_dir: Base for the default project files (defaults to cwd)
        user_env_paths: Replace the default user file list
        project_env_paths: Replace the default project file list

    Returns:
        The variables this call exported, with the file each came from
    """
    project_dir = project_dir or Path.cwd()
    if user_env_paths is None:
        user_env_paths = [get_config_dir() / ".env"]
    if project_env_paths is None:
        project_env_paths = [project_dir / ".env", project_dir / ".env.local"]

    layered: dict[str, str] = {}
    sources: dict[str, Path] = {}
    for path in [*user_env_paths, *project_env_paths]:
        for key, value in read_diary_env(Path(path)).items():
            if key in sources:
                logger.debug(f"{key} from {path} overrides {sources[key]}")
            layered[key] = value
            sources[key] = Path(path)

    exported: dict[str, str] = {}
    for key, value in layered.items():
        if key in os.environ:
            logger.debug(f"{key} is set in the environment, ignoring {sources[key]}")
            continue
        os.environ[key] = value
        exported[key] = str(sources[key])
    return exported
