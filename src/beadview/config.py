"""Saved-projects configuration.

The config is a YAML file listing projects in load order::

    projects:
      - name: api
        path: /work/api
      - name: web
        path: /work/web
        enabled: false
"""

from __future__ import annotations

from pathlib import Path

import yaml
from pydantic import ValidationError

from . import paths
from .models import ProjectsConfig
from .services.errors import IoFailedError


def resolve_config_path(path: Path | str | None = None) -> Path:
    """Return ``path`` or the default projects config location.

    Example:
        >>> resolve_config_path("/tmp/projects.yaml").as_posix()
        '/tmp/projects.yaml'
    """
    if path is None:
        return paths.projects_config_path()
    return Path(path).expanduser()


def parse_projects_config(payload: object, source: Path | str | None = None) -> ProjectsConfig:
    """Validate a decoded projects config payload.

    Example:
        >>> parse_projects_config({"projects": [{"path": "/work/api"}]}).enabled_paths()
        ['/work/api']
        >>> parse_projects_config(None).projects
        []
    """
    if payload is None:
        return ProjectsConfig()
    try:
        return ProjectsConfig.model_validate(payload)
    except ValidationError as exc:
        location = f" at {source}" if source else ""
        raise IoFailedError(
            f"invalid projects config{location}:\n{exc}",
            recovery_hint="fix the file or run 'beadview projects clear'",
        ) from exc


def load_projects_config(path: Path | str | None = None) -> ProjectsConfig:
    """Load the saved projects, returning an empty config when none exist.

    Raises:
        IoFailedError: The file exists but cannot be read or parsed.
    """
    config_path = resolve_config_path(path)
    if not config_path.exists():
        return ProjectsConfig()
    try:
        with config_path.open("r", encoding="utf-8") as fh:
            payload = yaml.safe_load(fh)
    except (OSError, yaml.YAMLError) as exc:
        raise IoFailedError(f"could not read projects config {config_path}: {exc}") from exc
    return parse_projects_config(payload, source=config_path)


def save_projects_config(config: ProjectsConfig, path: Path | str | None = None) -> Path:
    """Write the saved projects, creating the config directory if needed."""
    config_path = resolve_config_path(path)
    payload = config.model_dump(exclude_none=True)
    try:
        config_path.parent.mkdir(parents=True, exist_ok=True)
        with config_path.open("w", encoding="utf-8") as fh:
            yaml.safe_dump(payload, fh, sort_keys=False)
    except OSError as exc:
        raise IoFailedError(f"could not write projects config {config_path}: {exc}") from exc
    return config_path


def clear_projects_config(path: Path | str | None = None) -> bool:
    """Remove the saved projects file. Returns ``True`` when a file was removed."""
    config_path = resolve_config_path(path)
    try:
        config_path.unlink()
    except FileNotFoundError:
        return False
    except OSError as exc:
        raise IoFailedError(f"could not remove projects config {config_path}: {exc}") from exc
    return True


def remember_projects(
    project_paths: list[str] | list[Path], path: Path | str | None = None
) -> tuple[ProjectsConfig, list[str]]:
    """Add project paths to the saved config and persist it.

    Returns:
        The updated config and the absolute paths that were newly added.
    """
    config = load_projects_config(path)
    added: list[str] = []
    for project_path in project_paths:
        if config.add_project(project_path):
            added.append(str(paths.absolute_project_path(project_path)))
    save_projects_config(config, path)
    return config, added
