# ruff: noqa: E402

from __future__ import annotations

import json
import sys
from collections.abc import Iterable, Mapping
from pathlib import Path

ROOT = Path(__file__).resolve().parents[2]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

from beadview import namespace
from beadview.issues import DependencyEdge, DependencyKind, Issue, IssueStatus, IssueType
from beadview.merge import MergedUniverse, merge_projects
from beadview.projects import Project


def record(
    issue_id: str,
    *,
    title: str | None = None,
    status: str = "open",
    priority: int = 2,
    issue_type: str = "task",
    blocks_on: Iterable[str] = (),
    **extra: object,
) -> dict[str, object]:
    """Build a beads JSONL record as ``bd`` writes it."""
    payload: dict[str, object] = {
        "id": issue_id,
        "title": title or f"Issue {issue_id}",
        "status": status,
        "priority": priority,
        "issue_type": issue_type,
        "dependencies": [
            {"issue_id": issue_id, "depends_on_id": target, "type": "blocks"}
            for target in blocks_on
        ],
    }
    payload.update(extra)
    return payload


def write_store(
    project_dir: Path,
    records: Iterable[Mapping[str, object] | str],
    *,
    filename: str = "beads.jsonl",
) -> Path:
    """Write ``records`` as ``<project>/.beads/<filename>``; strings are raw lines."""
    store = project_dir / ".beads" / filename
    store.parent.mkdir(parents=True, exist_ok=True)
    lines = [item if isinstance(item, str) else json.dumps(item) for item in records]
    store.write_text("\n".join(lines) + "\n", encoding="utf-8")
    return store


def make_issue(
    issue_id: str,
    *,
    status: IssueStatus = IssueStatus.OPEN,
    priority: int = 2,
    issue_type: IssueType = IssueType.TASK,
    blocks_on: Iterable[str] = (),
    title: str = "",
) -> Issue:
    return Issue(
        id=issue_id,
        title=title or f"Issue {issue_id}",
        status=status,
        priority=priority,
        issue_type=issue_type,
        dependencies=tuple(
            DependencyEdge(depends_on_id=target, kind=DependencyKind.BLOCKS)
            for target in blocks_on
        ),
    )


def make_project(name: str, issues: Iterable[Issue], *, parent: str = "/work") -> Project:
    return Project(name=name, path=Path(parent) / name, issues=tuple(issues))


def build_universe(
    projects: Iterable[Project], *, repo_filter: str | None = None
) -> MergedUniverse:
    return merge_projects(namespace.assign_prefixes(list(projects)), repo_filter=repo_filter)


def two_project_universe(*, repo_filter: str | None = None) -> MergedUniverse:
    api = make_project("api", [make_issue("API-1", priority=1), make_issue("API-2")])
    web = make_project(
        "web",
        [make_issue("WEB-1", blocks_on=["api-API-1"]), make_issue("WEB-2", priority=0)],
    )
    return build_universe([api, web], repo_filter=repo_filter)
