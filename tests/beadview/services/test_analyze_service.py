from __future__ import annotations

from pathlib import Path

import pytest

from beadview import config
from beadview.beads_store import LoadResult
from beadview.models import ProjectsConfig
from beadview.services import ServiceFailureResult, ServiceSuccess, ValidationFailedError
from beadview.services.analyze import AnalyzeProjectsService, AnalyzeRequest
from tests.beadview.helpers import make_issue, record, write_store


def _write_two_projects(root: Path) -> tuple[Path, Path]:
    api = root / "api"
    web = root / "web"
    write_store(api, [record("API-1", priority=1), record("API-2")])
    write_store(web, [record("WEB-1", blocks_on=["api-API-1"]), record("WEB-2")])
    return api, web


def test_explicit_projects_are_planned_and_triaged(tmp_path: Path) -> None:
    api, web = _write_two_projects(tmp_path)

    outcome = AnalyzeProjectsService()(AnalyzeRequest(project_paths=[str(api), str(web)]))

    assert [project.prefix for project in outcome.projects] == ["api", "web"]
    assert outcome.triage is not None
    assert outcome.triage.quick_ref.open_count == 4
    assert isinstance(outcome.plan, ServiceSuccess)
    tracks = outcome.plan.outcome.tracks
    assert "api-API-1" in tracks[0].issue_ids
    assert any("web-WEB-1" in track.issue_ids for track in tracks[1:])
    assert outcome.warnings == ()


def test_saved_projects_are_used_when_none_are_given(tmp_path: Path) -> None:
    api, web = _write_two_projects(tmp_path)
    target = tmp_path / "projects.yaml"
    saved = ProjectsConfig()
    saved.add_project(web)
    saved.add_project(api)
    saved.set_enabled(api, False)
    config.save_projects_config(saved, target)

    outcome = AnalyzeProjectsService()(AnalyzeRequest(config_path=str(target)))

    assert [project.prefix for project in outcome.projects] == ["web"]
    assert outcome.triage is not None
    assert outcome.triage.quick_ref.open_count == 2


def test_fallback_project_is_used_last(tmp_path: Path) -> None:
    write_store(tmp_path / "solo", [record("S-1")])

    outcome = AnalyzeProjectsService()(
        AnalyzeRequest(
            config_path=str(tmp_path / "missing.yaml"),
            fallback_path=str(tmp_path / "solo"),
        )
    )

    assert [project.prefix for project in outcome.projects] == ["solo"]


def test_nothing_selected_is_a_validation_failure(tmp_path: Path) -> None:
    service = AnalyzeProjectsService()

    with pytest.raises(ValidationFailedError) as excinfo:
        service(AnalyzeRequest(config_path=str(tmp_path / "missing.yaml")))

    assert excinfo.value.recovery_hint


def test_cycle_fails_plan_but_not_triage(tmp_path: Path) -> None:
    write_store(
        tmp_path / "api",
        [record("A-1", blocks_on=["A-2"]), record("A-2", blocks_on=["A-1"])],
    )

    outcome = AnalyzeProjectsService()(AnalyzeRequest(project_paths=[str(tmp_path / "api")]))

    assert isinstance(outcome.plan, ServiceFailureResult)
    assert outcome.plan.code == "cycle_detected"
    assert outcome.triage is not None
    assert outcome.triage.quick_ref.blocked_count == 2


def test_store_warnings_are_collected_with_project_name(tmp_path: Path) -> None:
    (tmp_path / "empty").mkdir()

    outcome = AnalyzeProjectsService()(
        AnalyzeRequest(project_paths=[str(tmp_path / "empty")], repo_filter="other")
    )

    assert outcome.warnings[0].startswith("empty: no beads store found")
    assert "repo filter 'other'" in outcome.warnings[1]


def test_duplicate_project_paths_are_returned_as_warnings(tmp_path: Path) -> None:
    api, _ = _write_two_projects(tmp_path)

    outcome = AnalyzeProjectsService()(AnalyzeRequest(project_paths=[str(api), f"{api}/"]))

    assert [project.prefix for project in outcome.projects] == ["api"]
    assert outcome.warnings == (f"ignoring duplicate project path {api}",)


def test_injected_loader_and_selection_flags() -> None:
    calls: list[Path] = []

    def fake_load(path: Path) -> LoadResult:
        calls.append(path)
        return LoadResult(issues=(make_issue("X-1"),))

    service = AnalyzeProjectsService(load_issues=fake_load)
    outcome = service(
        AnalyzeRequest(project_paths=["/work/a", "/work/b"], include_plan=False)
    )

    assert calls == [Path("/work/a"), Path("/work/b")]
    assert outcome.plan is None
    assert outcome.triage is not None
    assert {rec.id for rec in outcome.triage.recommendations} == {"a-X-1", "b-X-1"}


def test_request_rejects_unknown_fields() -> None:
    with pytest.raises(ValueError):
        AnalyzeRequest(projects=["/work/a"])  # type: ignore[call-arg]
