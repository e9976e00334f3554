"""Load, namespace and merge projects, then plan and triage them."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field

from .. import beads_store, config, namespace
from .. import log as beadview_log
from ..merge import MergedUniverse, merge_projects
from ..models import ProjectsConfig, TriagePolicy
from ..planning import Plan, compute_plan
from ..projects import (
    LoadIssuesFn,
    Project,
    ProjectSelection,
    load_projects,
    select_projects,
)
from ..triage import TriageResult, compute_triage
from .base import BaseService
from .errors import CycleError, ValidationFailedError
from .result import ServiceResult, service_failure, service_success

LoadConfigFn = Callable[[Path | str | None], ProjectsConfig]


class AnalyzeRequest(BaseModel):
    """Input contract for one analysis run.

    Attributes:
        project_paths: Explicit project directories, in load order.
        repo_filter: Optional prefix restricting reported issues.
        config_path: Projects config location (default user config).
        fallback_path: Project used when nothing else is selected.
        policy: Triage weights; defaults to ``TriagePolicy()``.
        include_plan: Compute the execution plan.
        include_triage: Compute triage.
    """

    model_config = ConfigDict(extra="forbid")

    project_paths: list[str] = Field(default_factory=list)
    repo_filter: str | None = None
    config_path: str | None = None
    fallback_path: str | None = None
    policy: TriagePolicy | None = None
    include_plan: bool = True
    include_triage: bool = True


@dataclass(frozen=True)
class AnalysisOutcome:
    """Outcome of one analysis run.

    ``plan`` is a failure result when the graph has a cycle; triage is
    computed either way.
    """

    projects: tuple[Project, ...]
    universe: MergedUniverse
    plan: ServiceResult[Plan] | None
    triage: TriageResult | None
    warnings: tuple[str, ...]


class AnalyzeProjectsService(BaseService[AnalyzeRequest, AnalysisOutcome]):
    """Run the load → namespace → merge → {plan, triage} pipeline."""

    def __init__(
        self,
        *,
        load_issues: LoadIssuesFn = beads_store.load_issues,
        load_config: LoadConfigFn = config.load_projects_config,
    ) -> None:
        self._load_issues = load_issues
        self._load_config = load_config

    def select(self, request: AnalyzeRequest) -> ProjectSelection:
        if request.project_paths:
            return select_projects(request.project_paths, None)
        saved = self._load_config(request.config_path)
        selected = select_projects(None, saved)
        if selected.projects:
            return selected
        if request.fallback_path:
            beadview_log.debug(f"no saved projects; using {request.fallback_path}")
            return select_projects([request.fallback_path], None)
        raise ValidationFailedError(
            "no projects selected",
            recovery_hint="pass --project PATH or save projects with 'beadview projects add'",
        )

    def _run(self, request: AnalyzeRequest) -> AnalysisOutcome:
        selected = self.select(request)
        loaded = load_projects(selected.projects, load_issues=self._load_issues)
        resolved = namespace.assign_prefixes(loaded)
        for project in resolved:
            beadview_log.debug(f"project {project.path} -> prefix {project.prefix!r}")
        universe = merge_projects(resolved, repo_filter=request.repo_filter)
        for message in universe.warnings:
            beadview_log.warning(message)

        warnings = list(selected.warnings)
        warnings.extend(
            f"{project.name}: {message}" for project in resolved for message in project.warnings
        )
        warnings.extend(universe.warnings)

        plan_result: ServiceResult[Plan] | None = None
        if request.include_plan:
            try:
                plan_result = service_success(compute_plan(universe))
            except CycleError as exc:
                beadview_log.debug(f"planning failed: {exc.message}")
                plan_result = service_failure(exc)

        triage_result = None
        if request.include_triage:
            triage_result = compute_triage(universe, policy=request.policy)

        return AnalysisOutcome(
            projects=tuple(resolved),
            universe=universe,
            plan=plan_result,
            triage=triage_result,
            warnings=tuple(warnings),
        )
