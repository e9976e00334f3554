from __future__ import annotations

import json
from pathlib import Path

import yaml
from typer.testing import CliRunner

import beadview.cli as cli
from tests.beadview.helpers import record, write_store


def _projects(root: Path) -> list[str]:
    api = root / "api"
    web = root / "web"
    write_store(api, [record("API-1", priority=1, issue_type="bug"), record("API-2")])
    write_store(web, [record("WEB-1", blocks_on=["api-API-1"]), record("WEB-2", priority=3)])
    return ["--project", str(api), "--project", str(web)]


def _invoke(args: list[str]) -> tuple[int, str]:
    runner = CliRunner()
    result = runner.invoke(cli.app, args)
    return result.exit_code, result.stdout


class TestTriageCommand:
    def test_json_output(self, tmp_path: Path) -> None:
        code, stdout = _invoke(["triage", *_projects(tmp_path)])

        assert code == 0
        payload = json.loads(stdout)
        quick_ref = payload["triage"]["quick_ref"]
        assert quick_ref["open_count"] == 4
        assert quick_ref["blocked_count"] == 1
        recommendations = payload["triage"]["recommendations"]
        assert recommendations[0]["id"] == "api-API-1"
        blocked = next(rec for rec in recommendations if rec["id"] == "web-WEB-1")
        assert blocked["blocked_by"] == ["api-API-1"]
        assert [project["prefix"] for project in payload["projects"]] == ["api", "web"]
        assert payload["warnings"] == []

    def test_repo_filter(self, tmp_path: Path) -> None:
        code, stdout = _invoke(["triage", *_projects(tmp_path), "--repo", "api"])

        assert code == 0
        payload = json.loads(stdout)
        assert payload["triage"]["quick_ref"]["open_count"] == 2
        ids = [rec["id"] for rec in payload["triage"]["recommendations"]]
        assert ids and all(issue_id.startswith("api-") for issue_id in ids)

    def test_table_output(self, tmp_path: Path) -> None:
        code, stdout = _invoke(["triage", *_projects(tmp_path), "--format", "table"])

        assert code == 0
        assert "Recommendations" in stdout
        assert "api-API-1" in stdout

    def test_unknown_format_fails(self, tmp_path: Path) -> None:
        runner = CliRunner()
        result = runner.invoke(cli.app, ["triage", *_projects(tmp_path), "--format", "xml"])

        assert result.exit_code == 1
        assert "unsupported format: xml" in result.output

    def test_save_projects_writes_config(self, tmp_path: Path) -> None:
        config_path = tmp_path / "cfg" / "projects.yaml"
        runner = CliRunner()
        result = runner.invoke(
            cli.app,
            ["triage", *_projects(tmp_path), "--save-projects", "--config", str(config_path)],
        )

        assert result.exit_code == 0
        saved = yaml.safe_load(config_path.read_text(encoding="utf-8"))
        assert [entry["path"] for entry in saved["projects"]] == [
            str(tmp_path / "api"),
            str(tmp_path / "web"),
        ]

        code, stdout = _invoke(["triage", "--config", str(config_path)])
        assert code == 0
        assert json.loads(stdout)["triage"]["quick_ref"]["open_count"] == 4


class TestPlanCommand:
    def test_json_output(self, tmp_path: Path) -> None:
        code, stdout = _invoke(["plan", *_projects(tmp_path)])

        assert code == 0
        plan = json.loads(stdout)["plan"]
        tracks = plan["tracks"]
        assert len(tracks) == 2
        assert [item["id"] for item in tracks[0]["items"]] == [
            "api-API-1",
            "api-API-2",
            "web-WEB-2",
        ]
        assert [item["id"] for item in tracks[1]["items"]] == ["web-WEB-1"]
        assert tracks[1]["items"][0]["blocked_by"] == ["api-API-1"]
        assert plan["summary"] == {"track_count": 2, "issue_count": 4}

    def test_cycle_exits_non_zero(self, tmp_path: Path) -> None:
        write_store(
            tmp_path / "api",
            [record("A-1", blocks_on=["A-2"]), record("A-2", blocks_on=["A-1"])],
        )
        runner = CliRunner()
        result = runner.invoke(cli.app, ["plan", "--project", str(tmp_path / "api")])

        assert result.exit_code == 1
        assert "dependency cycle detected: api-A-1 -> api-A-2 -> api-A-1" in result.output

    def test_table_output(self, tmp_path: Path) -> None:
        code, stdout = _invoke(["plan", *_projects(tmp_path), "--format", "table"])

        assert code == 0
        assert "Track 1 (layer 0)" in stdout
        assert "Track 2 (layer 1)" in stdout


class TestReportCommand:
    def test_includes_triage_and_plan(self, tmp_path: Path) -> None:
        code, stdout = _invoke(["report", *_projects(tmp_path)])

        assert code == 0
        payload = json.loads(stdout)
        assert payload["triage"]["quick_ref"]["open_count"] == 4
        assert payload["plan"]["summary"]["track_count"] == 2

    def test_cycle_is_reported_inside_plan(self, tmp_path: Path) -> None:
        write_store(
            tmp_path / "api",
            [record("A-1", blocks_on=["A-2"]), record("A-2", blocks_on=["A-1"]), record("A-3")],
        )

        code, stdout = _invoke(["report", "--project", str(tmp_path / "api")])

        assert code == 0
        payload = json.loads(stdout)
        error = payload["plan"]["error"]
        assert error["code"] == "cycle_detected"
        assert error["cycle"] == ["api-A-1", "api-A-2"]
        assert payload["triage"]["quick_ref"]["ready_count"] == 1
