"""JSON payload builders for plans, triage results and projects."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import asdict

from .merge import MergedUniverse
from .planning import Plan
from .projects import Project
from .services.errors import CycleError
from .services.result import ServiceFailureResult
from .triage import Recommendation, TriageResult


def recommendation_payload(recommendation: Recommendation) -> dict[str, object]:
    payload = asdict(recommendation)
    payload["blocked_by"] = list(recommendation.blocked_by)
    payload["reasons"] = list(recommendation.reasons)
    return payload


def triage_payload(result: TriageResult) -> dict[str, object]:
    return {
        "quick_ref": asdict(result.quick_ref),
        "recommendations": [recommendation_payload(rec) for rec in result.recommendations],
        "diagnostics": list(result.diagnostics),
    }


def plan_payload(plan: Plan, universe: MergedUniverse) -> dict[str, object]:
    tracks: list[dict[str, object]] = []
    for index, track in enumerate(plan.tracks, start=1):
        items = []
        for issue_id in track.issue_ids:
            issue = universe.issues[issue_id]
            items.append(
                {
                    "id": issue.id,
                    "title": issue.title,
                    "priority": issue.priority,
                    "status": issue.status_name,
                    "issue_type": issue.type_name,
                    "blocked_by": list(universe.open_blockers(issue.id)),
                }
            )
        tracks.append({"track_id": f"track-{index}", "layer": track.layer, "items": items})
    return {
        "tracks": tracks,
        "summary": {
            "track_count": len(plan.tracks),
            "issue_count": plan.issue_count,
        },
    }


def plan_failure_payload(failure: ServiceFailureResult) -> dict[str, object]:
    payload: dict[str, object] = {
        "code": failure.code,
        "message": failure.message,
        "recovery_hint": failure.recovery_hint,
    }
    if isinstance(failure.error, CycleError):
        payload["cycle"] = list(failure.error.cycle)
        payload["unresolved"] = list(failure.error.unresolved)
    return payload


def projects_payload(projects: Iterable[Project]) -> list[dict[str, object]]:
    return [
        {
            "name": project.name,
            "path": str(project.path),
            "prefix": project.prefix,
            "issue_count": project.issue_count,
            "warnings": list(project.warnings),
        }
        for project in projects
    ]
