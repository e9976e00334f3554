from __future__ import annotations

import time
from pathlib import Path

from beadview import projects
from beadview.beads_store import LoadResult
from beadview.models import ProjectsConfig
from tests.beadview.helpers import make_issue, record, write_store


def test_explicit_paths_win_over_config(tmp_path: Path) -> None:
    saved = ProjectsConfig()
    saved.add_project(tmp_path / "saved")

    selected = projects.select_projects([tmp_path / "api"], saved).projects

    assert [project.path for project in selected] == [tmp_path / "api"]
    assert selected[0].name == "api"


def test_config_selection_skips_disabled_and_duplicates(tmp_path: Path) -> None:
    saved = ProjectsConfig()
    saved.add_project(tmp_path / "api")
    saved.add_project(tmp_path / "web")
    saved.set_enabled(tmp_path / "web", False)

    assert [p.name for p in projects.select_projects(None, saved).projects] == ["api"]
    assert projects.select_projects(None, None) == projects.ProjectSelection()
    duplicated = projects.select_projects([tmp_path / "api", f"{tmp_path}/api/"], None)
    assert len(duplicated.projects) == 1


def test_duplicate_paths_are_reported_as_warnings(tmp_path: Path) -> None:
    saved = ProjectsConfig.model_validate(
        {"projects": [{"path": str(tmp_path / "api")}, {"path": f"{tmp_path}/api/"}]}
    )

    selection = projects.select_projects(None, saved)

    assert [project.path for project in selection.projects] == [tmp_path / "api"]
    assert selection.warnings == (f"ignoring duplicate project path {tmp_path / 'api'}",)


def test_load_projects_reads_each_store(tmp_path: Path) -> None:
    write_store(tmp_path / "api", [record("A-1"), record("A-2")])
    (tmp_path / "web").mkdir()

    loaded = projects.load_projects(
        projects.select_projects([tmp_path / "api", tmp_path / "web"], None).projects
    )

    assert [project.issue_count for project in loaded] == [2, 0]
    assert loaded[0].warnings == ()
    assert "no beads store found" in loaded[1].warnings[0]


def test_unreadable_project_does_not_abort_the_others(tmp_path: Path) -> None:
    write_store(tmp_path / "api", [record("A-1")])
    unreachable = tmp_path / ("x" * 300)

    loaded = projects.load_projects(
        [projects.Project.from_path(tmp_path / "api"), projects.Project.from_path(unreachable)]
    )

    assert [project.issue_count for project in loaded] == [1, 0]
    assert "could not read beads store" in loaded[1].warnings[0]


def test_load_projects_keeps_input_order_when_loads_overlap() -> None:
    names = ["slow", "medium", "fast"]
    delays = {"slow": 0.05, "medium": 0.02, "fast": 0.0}

    def fake_load(path: Path) -> LoadResult:
        time.sleep(delays[path.name])
        return LoadResult(issues=(make_issue(f"{path.name}-1"),))

    selected = projects.select_projects([f"/work/{name}" for name in names], None).projects
    loaded = projects.load_projects(selected, load_issues=fake_load)

    assert [project.name for project in loaded] == names
    assert [project.issues[0].id for project in loaded] == ["slow-1", "medium-1", "fast-1"]


def test_load_projects_with_nothing_selected() -> None:
    assert projects.load_projects([]) == []
