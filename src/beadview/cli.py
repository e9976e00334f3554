"""Typer entry point for the ``beadview`` command."""

from __future__ import annotations

from pathlib import Path
from types import SimpleNamespace
from typing import Annotated

import typer

from . import __version__
from . import log as beadview_log
from .commands import add_projects as projects_add_cmd
from .commands import clear_projects as projects_clear_cmd
from .commands import full_report as report_cmd
from .commands import list_projects as projects_list_cmd
from .commands import plan as plan_cmd
from .commands import remove_projects as projects_remove_cmd
from .commands import set_projects_enabled as projects_enable_cmd
from .commands import triage as triage_cmd

app = typer.Typer(
    name="beadview",
    help="Plan and triage beads issues across several projects.",
    no_args_is_help=True,
    add_completion=False,
)
projects_app = typer.Typer(help="Manage the saved project list.", no_args_is_help=True)
app.add_typer(projects_app, name="projects")

ProjectOption = Annotated[
    list[Path] | None,
    typer.Option(
        "--project",
        "-p",
        help="project directory to include (repeatable; overrides saved projects)",
    ),
]
RepoOption = Annotated[
    str | None,
    typer.Option("--repo", help="only report issues whose prefix matches"),
]
FormatOption = Annotated[
    str,
    typer.Option("--format", help="output format (json|table)"),
]
SaveOption = Annotated[
    bool,
    typer.Option("--save-projects", help="remember the --project paths for later runs"),
]
ConfigOption = Annotated[
    Path | None,
    typer.Option("--config", help="projects config file (default: user config dir)"),
]
PathsArgument = Annotated[list[Path], typer.Argument(help="project directories")]


def _validate_log_level(value: str | None) -> str | None:
    if value is None:
        return None
    normalized = value.strip().lower()
    if normalized not in beadview_log.LEVEL_NAMES:
        raise typer.BadParameter(f"expected one of: {', '.join(beadview_log.LEVEL_NAMES)}")
    return normalized


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(__version__)
        raise typer.Exit()


@app.callback()
def main_callback(
    log_level: Annotated[
        str | None,
        typer.Option(
            "--log-level",
            help="log verbosity (trace|debug|info|success|warning|error)",
            callback=_validate_log_level,
        ),
    ] = None,
    no_color: Annotated[
        bool, typer.Option("--no-color", help="disable coloured output")
    ] = False,
    version: Annotated[
        bool,
        typer.Option(
            "--version",
            help="show the version and exit",
            callback=_version_callback,
            is_eager=True,
        ),
    ] = False,
) -> None:
    if log_level is not None:
        beadview_log.set_level(log_level)
    if no_color:
        beadview_log.set_no_color(True)


def _analysis_args(
    project: list[Path] | None,
    repo: str | None,
    format: str,
    save_projects: bool,
    config: Path | None,
) -> SimpleNamespace:
    return SimpleNamespace(
        project=[str(path) for path in project or []],
        repo=repo,
        format=format,
        save_projects=save_projects,
        config=str(config) if config else None,
    )


@app.command("triage")
def triage(
    project: ProjectOption = None,
    repo: RepoOption = None,
    format: FormatOption = "json",
    save_projects: SaveOption = False,
    config: ConfigOption = None,
) -> None:
    """Show counts and ranked recommendations."""
    triage_cmd(_analysis_args(project, repo, format, save_projects, config))


@app.command("plan")
def plan(
    project: ProjectOption = None,
    repo: RepoOption = None,
    format: FormatOption = "json",
    save_projects: SaveOption = False,
    config: ConfigOption = None,
) -> None:
    """Show the layered execution plan."""
    plan_cmd(_analysis_args(project, repo, format, save_projects, config))


@app.command("report")
def report(
    project: ProjectOption = None,
    repo: RepoOption = None,
    format: FormatOption = "json",
    save_projects: SaveOption = False,
    config: ConfigOption = None,
) -> None:
    """Show triage and the execution plan together."""
    report_cmd(_analysis_args(project, repo, format, save_projects, config))


@projects_app.command("list")
def projects_list(
    format: Annotated[
        str, typer.Option("--format", help="output format (table|json)")
    ] = "table",
    config: ConfigOption = None,
) -> None:
    """List saved projects."""
    projects_list_cmd(SimpleNamespace(format=format, config=config))


@projects_app.command("add")
def projects_add(
    paths: PathsArgument,
    name: Annotated[
        str | None, typer.Option("--name", help="display name for a single project")
    ] = None,
    config: ConfigOption = None,
) -> None:
    """Save project directories."""
    projects_add_cmd(SimpleNamespace(paths=paths, name=name, config=config))


@projects_app.command("remove")
def projects_remove(paths: PathsArgument, config: ConfigOption = None) -> None:
    """Forget saved project directories."""
    projects_remove_cmd(SimpleNamespace(paths=paths, config=config))


@projects_app.command("enable")
def projects_enable(paths: PathsArgument, config: ConfigOption = None) -> None:
    """Include saved projects in future runs."""
    projects_enable_cmd(SimpleNamespace(paths=paths, enabled=True, config=config))


@projects_app.command("disable")
def projects_disable(paths: PathsArgument, config: ConfigOption = None) -> None:
    """Skip saved projects without forgetting them."""
    projects_enable_cmd(SimpleNamespace(paths=paths, enabled=False, config=config))


@projects_app.command("clear")
def projects_clear(config: ConfigOption = None) -> None:
    """Remove the saved projects file."""
    projects_clear_cmd(SimpleNamespace(config=config))


def main() -> None:
    app()


if __name__ == "__main__":
    main()
