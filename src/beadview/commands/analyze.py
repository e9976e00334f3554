"""Implementation for the ``beadview triage``, ``plan`` and ``report`` commands."""

from __future__ import annotations

import json
from pathlib import Path

from rich import box
from rich.table import Table

from .. import config, report
from .. import log as beadview_log
from ..io import die, say
from ..services import ServiceFailure, ServiceFailureResult
from ..services.analyze import AnalysisOutcome, AnalyzeProjectsService, AnalyzeRequest

_FORMATS = {"table", "json"}


def _format(args: object) -> str:
    format_value = str(getattr(args, "format", "json") or "json").lower()
    if format_value not in _FORMATS:
        die(f"unsupported format: {format_value}")
    return format_value


def _config_path(args: object) -> str | None:
    value = getattr(args, "config", None)
    return str(value) if value else None


def run_analysis(args: object, *, include_plan: bool, include_triage: bool) -> AnalysisOutcome:
    """Build a request from CLI args and run the analysis service."""
    project_paths = [str(path) for path in (getattr(args, "project", None) or [])]
    config_path = _config_path(args)
    if getattr(args, "save_projects", False):
        if not project_paths:
            die("--save-projects requires at least one --project")
        try:
            _, added = config.remember_projects(project_paths, config_path)
        except ServiceFailure as exc:
            die(exc.message)
        for path in added:
            beadview_log.success(f"saved project {path}")

    request = AnalyzeRequest(
        project_paths=project_paths,
        repo_filter=getattr(args, "repo", None),
        config_path=config_path,
        fallback_path=str(Path.cwd()),
        include_plan=include_plan,
        include_triage=include_triage,
    )
    try:
        return AnalyzeProjectsService()(request)
    except ServiceFailure as exc:
        hint = f" ({exc.recovery_hint})" if exc.recovery_hint else ""
        die(f"{exc.message}{hint}")


def _emit_json(payload: dict[str, object]) -> None:
    say(json.dumps(payload, indent=2))


def triage(args: object) -> None:
    """Print triage counts and ranked recommendations."""
    format_value = _format(args)
    outcome = run_analysis(args, include_plan=False, include_triage=True)
    assert outcome.triage is not None
    if format_value == "json":
        _emit_json(
            {
                "triage": report.triage_payload(outcome.triage),
                "projects": report.projects_payload(outcome.projects),
                "warnings": list(outcome.warnings),
            }
        )
        return
    _render_triage(outcome)


def plan(args: object) -> None:
    """Print the execution plan; exits non-zero on a dependency cycle."""
    format_value = _format(args)
    outcome = run_analysis(args, include_plan=True, include_triage=False)
    result = outcome.plan
    assert result is not None
    if isinstance(result, ServiceFailureResult):
        if format_value == "json":
            _emit_json(
                {
                    "plan": {"error": report.plan_failure_payload(result)},
                    "warnings": list(outcome.warnings),
                }
            )
        hint = f" ({result.recovery_hint})" if result.recovery_hint else ""
        die(f"{result.message}{hint}")
    if format_value == "json":
        _emit_json(
            {
                "plan": report.plan_payload(result.outcome, outcome.universe),
                "projects": report.projects_payload(outcome.projects),
                "warnings": list(outcome.warnings),
            }
        )
        return
    _render_plan(outcome)


def full_report(args: object) -> None:
    """Print triage and plan together; a cycle is reported, not fatal."""
    format_value = _format(args)
    outcome = run_analysis(args, include_plan=True, include_triage=True)
    if format_value == "json":
        assert outcome.triage is not None and outcome.plan is not None
        if isinstance(outcome.plan, ServiceFailureResult):
            plan_section: dict[str, object] = {"error": report.plan_failure_payload(outcome.plan)}
        else:
            plan_section = report.plan_payload(outcome.plan.outcome, outcome.universe)
        _emit_json(
            {
                "triage": report.triage_payload(outcome.triage),
                "plan": plan_section,
                "projects": report.projects_payload(outcome.projects),
                "warnings": list(outcome.warnings),
            }
        )
        return
    _render_triage(outcome)
    _render_plan(outcome)


def _render_triage(outcome: AnalysisOutcome) -> None:
    result = outcome.triage
    if result is None:
        return
    console = beadview_log.console()
    quick_ref = result.quick_ref
    overview = Table(title="Triage", box=box.SIMPLE, show_header=False)
    overview.add_column("Field", style="bold")
    overview.add_column("Value")
    overview.add_row("Projects", ", ".join(project.prefix for project in outcome.projects))
    if outcome.universe.repo_filter:
        overview.add_row("Repo filter", outcome.universe.repo_filter)
    overview.add_row("Open", str(quick_ref.open_count))
    overview.add_row("Ready", str(quick_ref.ready_count))
    overview.add_row("Blocked", str(quick_ref.blocked_count))
    overview.add_row("In progress", str(quick_ref.in_progress_count))
    overview.add_row("Closed", str(quick_ref.closed_count))
    console.print(overview)

    if result.recommendations:
        table = Table(title="Recommendations", box=box.SIMPLE)
        table.add_column("#", justify="right")
        table.add_column("Issue", no_wrap=True)
        table.add_column("Score", justify="right")
        table.add_column("P", justify="right")
        table.add_column("Type", no_wrap=True)
        table.add_column("Title", overflow="fold")
        table.add_column("Blocked by", overflow="fold")
        for index, rec in enumerate(result.recommendations, start=1):
            table.add_row(
                str(index),
                rec.id,
                f"{rec.score:g}",
                str(rec.priority),
                rec.issue_type,
                rec.title,
                ", ".join(rec.blocked_by),
            )
        console.print(table)

    for message in result.diagnostics:
        beadview_log.warning(message)


def _render_plan(outcome: AnalysisOutcome) -> None:
    result = outcome.plan
    if result is None:
        return
    if isinstance(result, ServiceFailureResult):
        beadview_log.error(result.message)
        return
    console = beadview_log.console()
    if not result.outcome.tracks:
        console.print("No open issues to plan.")
        return
    universe = outcome.universe
    for index, track in enumerate(result.outcome.tracks, start=1):
        table = Table(title=f"Track {index} (layer {track.layer})", box=box.SIMPLE)
        table.add_column("Issue", no_wrap=True)
        table.add_column("P", justify="right")
        table.add_column("Status", no_wrap=True)
        table.add_column("Title", overflow="fold")
        for issue_id in track.issue_ids:
            issue = universe.issues[issue_id]
            table.add_row(issue.id, str(issue.priority), issue.status_name, issue.title)
        console.print(table)
