"""Project selection and concurrent loading of project beads stores."""

from __future__ import annotations

import concurrent.futures
from collections.abc import Callable, Iterable, Sequence
from dataclasses import dataclass, replace
from pathlib import Path

from . import beads_store
from . import log as beadview_log
from .issues import Issue
from .models import ProjectsConfig
from .paths import absolute_project_path

LoadIssuesFn = Callable[[Path], beads_store.LoadResult]
MAX_LOAD_WORKERS = 8


@dataclass(frozen=True)
class Project:
    """One project taking part in a merge.

    ``name`` is the directory name and ``path`` the absolute directory; the
    path is the project's identity. ``prefix`` stays empty until the
    namespace resolver assigns one.
    """

    name: str
    path: Path
    enabled: bool = True
    prefix: str = ""
    issues: tuple[Issue, ...] = ()
    warnings: tuple[str, ...] = ()

    @classmethod
    def from_path(cls, path: str | Path, *, enabled: bool = True) -> Project:
        absolute = absolute_project_path(path)
        return cls(name=absolute.name, path=absolute, enabled=enabled)

    @property
    def issue_count(self) -> int:
        return len(self.issues)


@dataclass(frozen=True)
class ProjectSelection:
    """Projects chosen for a run plus warnings about ignored duplicates."""

    projects: tuple[Project, ...] = ()
    warnings: tuple[str, ...] = ()


def _dedupe(projects: Iterable[Project]) -> ProjectSelection:
    selected: list[Project] = []
    warnings: list[str] = []
    seen: set[Path] = set()
    for project in projects:
        if project.path in seen:
            message = f"ignoring duplicate project path {project.path}"
            beadview_log.warning(message)
            warnings.append(message)
            continue
        seen.add(project.path)
        selected.append(project)
    return ProjectSelection(projects=tuple(selected), warnings=tuple(warnings))


def select_projects(
    explicit_paths: Sequence[str | Path] | None,
    config: ProjectsConfig | None,
) -> ProjectSelection:
    """Return the enabled projects for this run, in load order.

    Explicit paths win; otherwise enabled entries of the saved config are
    used in their saved order. Disabled entries are treated as absent.
    Repeated paths keep their first occurrence and add a warning.
    """
    if explicit_paths:
        return _dedupe(Project.from_path(path) for path in explicit_paths)
    if config is None:
        return ProjectSelection()
    return _dedupe(Project.from_path(entry.path) for entry in config.enabled_entries())


def load_projects(
    projects: Sequence[Project],
    *,
    load_issues: LoadIssuesFn = beads_store.load_issues,
    max_workers: int = MAX_LOAD_WORKERS,
) -> list[Project]:
    """Load every project's store, overlapping I/O across worker threads.

    Results come back in the input order regardless of completion order, so
    later prefix assignment stays deterministic.
    """
    if not projects:
        return []

    def load_one(project: Project) -> Project:
        result = load_issues(project.path)
        for message in result.warnings:
            beadview_log.warning(f"{project.name}: {message}")
        beadview_log.debug(f"loaded {len(result.issues)} issue(s) from {project.path}")
        return replace(project, issues=tuple(result.issues), warnings=tuple(result.warnings))

    workers = max(1, min(max_workers, len(projects)))
    with concurrent.futures.ThreadPoolExecutor(max_workers=workers) as executor:
        return list(executor.map(load_one, projects))
