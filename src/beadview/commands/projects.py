"""Implementation for the ``beadview projects`` command group."""

from __future__ import annotations

import json

from rich import box
from rich.table import Table

from .. import config, namespace
from .. import log as beadview_log
from ..io import die, say
from ..models import ProjectsConfig
from ..paths import absolute_project_path
from ..projects import load_projects, select_projects
from ..services import ServiceFailure


def _config_path(args: object) -> str | None:
    value = getattr(args, "config", None)
    return str(value) if value else None


def _load(args: object) -> ProjectsConfig:
    try:
        return config.load_projects_config(_config_path(args))
    except ServiceFailure as exc:
        hint = f" ({exc.recovery_hint})" if exc.recovery_hint else ""
        die(f"{exc.message}{hint}")


def _save(args: object, payload: ProjectsConfig) -> None:
    try:
        config.save_projects_config(payload, _config_path(args))
    except ServiceFailure as exc:
        die(exc.message)


def _display_value(value: object) -> str:
    if value is None:
        return "-"
    if isinstance(value, bool):
        return "yes" if value else "no"
    return str(value)


def _project_rows(payload: ProjectsConfig) -> list[dict[str, object]]:
    selected = select_projects(None, payload)
    resolved = {
        project.path: project
        for project in namespace.assign_prefixes(load_projects(selected.projects))
    }
    rows: list[dict[str, object]] = []
    for entry in payload.projects:
        project = resolved.get(absolute_project_path(entry.path)) if entry.is_enabled else None
        rows.append(
            {
                "name": entry.display_name,
                "path": entry.path,
                "active": entry.is_enabled,
                "prefix": project.prefix if project else None,
                "issue_count": project.issue_count if project else None,
            }
        )
    return rows


def list_projects(args: object) -> None:
    """List saved projects with their prefixes and issue counts.

    Example:
        $ beadview projects list --format json
    """
    format_value = str(getattr(args, "format", "table") or "table").lower()
    if format_value not in {"table", "json"}:
        die(f"unsupported format: {format_value}")
    rows = _project_rows(_load(args))
    if format_value == "json":
        say(json.dumps({"projects": rows}, indent=2))
        return
    if not rows:
        say("No saved projects.")
        return
    table = Table(title="Projects", box=box.SIMPLE)
    table.add_column("Name", no_wrap=True)
    table.add_column("Prefix", no_wrap=True)
    table.add_column("Active")
    table.add_column("Issues", justify="right")
    table.add_column("Path", overflow="fold")
    for row in rows:
        table.add_row(
            _display_value(row["name"]),
            _display_value(row["prefix"]),
            _display_value(row["active"]),
            _display_value(row["issue_count"]),
            _display_value(row["path"]),
        )
    beadview_log.console().print(table)


def add_projects(args: object) -> None:
    paths = list(getattr(args, "paths", None) or [])
    if not paths:
        die("no project paths given")
    payload = _load(args)
    name = getattr(args, "name", None)
    if name and len(paths) > 1:
        die("--name can only be used with a single path")
    for path in paths:
        absolute = absolute_project_path(path)
        if not absolute.is_dir():
            beadview_log.warning(f"{absolute} is not a directory; saving anyway")
        if payload.add_project(absolute, name=name):
            beadview_log.success(f"added {absolute}")
        else:
            beadview_log.info(f"{absolute} is already saved")
    _save(args, payload)


def remove_projects(args: object) -> None:
    paths = list(getattr(args, "paths", None) or [])
    payload = _load(args)
    missing = [path for path in paths if not payload.remove_project(path)]
    if missing:
        die("not a saved project: " + ", ".join(str(path) for path in missing))
    _save(args, payload)
    for path in paths:
        beadview_log.success(f"removed {absolute_project_path(path)}")


def set_projects_enabled(args: object) -> None:
    """Enable or disable saved projects without removing them."""
    paths = list(getattr(args, "paths", None) or [])
    enabled = bool(getattr(args, "enabled", True))
    payload = _load(args)
    missing = [path for path in paths if not payload.set_enabled(path, enabled)]
    if missing:
        die("not a saved project: " + ", ".join(str(path) for path in missing))
    _save(args, payload)
    state = "enabled" if enabled else "disabled"
    for path in paths:
        beadview_log.success(f"{state} {absolute_project_path(path)}")


def clear_projects(args: object) -> None:
    try:
        removed = config.clear_projects_config(_config_path(args))
    except ServiceFailure as exc:
        die(exc.message)
    if removed:
        beadview_log.success("cleared saved projects")
    else:
        beadview_log.info("no saved projects to clear")
