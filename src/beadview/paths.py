"""Path helpers for locating beadview config and project beads stores."""

from __future__ import annotations

import os
from pathlib import Path

from platformdirs import user_config_dir

BEADVIEW_APP_NAME = "beadview"
CONFIG_DIR_ENV = "BEADVIEW_CONFIG_DIR"
PROJECTS_FILENAME = "projects.yaml"
BEADS_DIRNAME = ".beads"
BEADS_STORE_FILENAMES = ("beads.jsonl", "issues.jsonl")


def config_dir() -> Path:
    """Return the beadview user config directory.

    ``BEADVIEW_CONFIG_DIR`` wins when set; otherwise the platform config dir
    (``$XDG_CONFIG_HOME/beadview`` on Linux) is used.

    Returns:
        Path to the config directory.

    Example:
        >>> isinstance(config_dir(), Path)
        True
    """
    override = os.environ.get(CONFIG_DIR_ENV, "").strip()
    if override:
        return Path(override).expanduser()
    return Path(user_config_dir(BEADVIEW_APP_NAME))


def projects_config_path() -> Path:
    """Return the saved-projects config file path.

    Example:
        >>> projects_config_path().name == PROJECTS_FILENAME
        True
    """
    return config_dir() / PROJECTS_FILENAME


def beads_dir(project_path: Path) -> Path:
    """Return the ``.beads`` directory of a project.

    Example:
        >>> beads_dir(Path("/work/api")).as_posix()
        '/work/api/.beads'
    """
    return project_path / BEADS_DIRNAME


def beads_store_path(project_path: Path) -> Path | None:
    """Return the first existing JSONL store of a project, if any."""
    root = beads_dir(project_path)
    for filename in BEADS_STORE_FILENAMES:
        candidate = root / filename
        if candidate.is_file():
            return candidate
    return None


def absolute_project_path(value: str | Path) -> Path:
    """Return the absolute, user-expanded form of a project path.

    Example:
        >>> absolute_project_path("/work/api/").as_posix()
        '/work/api'
    """
    return Path(os.path.abspath(Path(value).expanduser()))
