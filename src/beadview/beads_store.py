"""Read a project's beads JSONL store into ``Issue`` values."""

from __future__ import annotations

import json
from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path

from pydantic import BaseModel, ConfigDict, ValidationError, field_validator

from . import paths
from .issues import (
    DEFAULT_PRIORITY,
    DependencyEdge,
    DependencyKind,
    Issue,
    IssueStatus,
    IssueType,
)


def _clean_str(value: object) -> str | None:
    if not isinstance(value, str):
        return None
    cleaned = value.strip()
    return cleaned or None


class BeadsDependencyBoundary(BaseModel):
    """One ``dependencies`` entry of a beads record."""

    model_config = ConfigDict(extra="allow")

    depends_on_id: str
    type: str = ""

    @field_validator("depends_on_id", mode="before")
    @classmethod
    def _normalize_target(cls, value: object) -> object:
        normalized = _clean_str(value)
        if normalized is None:
            raise ValueError("missing depends_on_id")
        return normalized

    @field_validator("type", mode="before")
    @classmethod
    def _normalize_type(cls, value: object) -> object:
        return _clean_str(value) or ""


class BeadsIssueBoundary(BaseModel):
    """Validated beads record used to build ``Issue`` values."""

    model_config = ConfigDict(extra="allow")

    id: str
    title: str = ""
    status: str | None = None
    priority: int = DEFAULT_PRIORITY
    issue_type: str | None = None
    dependencies: tuple[BeadsDependencyBoundary, ...] = ()

    @field_validator("id", mode="before")
    @classmethod
    def _normalize_id(cls, value: object) -> object:
        normalized = _clean_str(value)
        if normalized is None:
            raise ValueError("missing issue id")
        return normalized

    @field_validator("title", mode="before")
    @classmethod
    def _normalize_title(cls, value: object) -> object:
        if value is None:
            return ""
        return value

    @field_validator("status", "issue_type", mode="before")
    @classmethod
    def _normalize_vocabulary(cls, value: object) -> object:
        return _clean_str(value) or None

    @field_validator("priority", mode="before")
    @classmethod
    def _normalize_priority(cls, value: object) -> object:
        if value is None:
            return DEFAULT_PRIORITY
        if isinstance(value, bool):
            raise ValueError("priority must be an integer")
        if isinstance(value, str):
            text = value.strip().upper().removeprefix("P")
            if text.isdigit():
                return int(text)
            raise ValueError(f"invalid priority {value!r}")
        return value

    @field_validator("dependencies", mode="before")
    @classmethod
    def _normalize_dependencies(cls, value: object) -> object:
        if value is None:
            return ()
        if not isinstance(value, list):
            raise ValueError("dependencies must be a list")
        entries: list[object] = []
        for entry in value:
            if isinstance(entry, str):
                entries.append({"depends_on_id": entry})
            else:
                entries.append(entry)
        return entries

    def to_issue(self) -> Issue:
        status = self.status or IssueStatus.OPEN.value
        issue_type = self.issue_type or IssueType.TASK.value
        return Issue(
            id=self.id,
            title=self.title,
            status=IssueStatus.parse(status),
            priority=self.priority,
            issue_type=IssueType.parse(issue_type),
            dependencies=tuple(
                DependencyEdge(
                    depends_on_id=dep.depends_on_id,
                    kind=DependencyKind.parse(dep.type),
                    raw_kind=dep.type or DependencyKind.BLOCKS.value,
                )
                for dep in self.dependencies
            ),
            raw_status=status,
            raw_issue_type=issue_type,
            original_id=self.id,
            extra=dict(self.model_extra or {}),
        )


@dataclass(frozen=True)
class LoadResult:
    """Issues read from one store plus any non-fatal load warnings."""

    issues: tuple[Issue, ...]
    warnings: tuple[str, ...] = ()
    store_path: Path | None = None


def parse_issue_record(payload: object, *, source: str) -> Issue:
    """Validate one decoded beads record.

    Raises:
        ValueError: The record is not an object or fails validation.
    """
    if not isinstance(payload, dict):
        raise ValueError(f"invalid beads record ({source}): expected an object")
    try:
        boundary = BeadsIssueBoundary.model_validate(payload)
    except ValidationError as exc:
        raise ValueError(f"invalid beads record ({source}): {exc}") from exc
    return boundary.to_issue()


def parse_issue_lines(lines: Sequence[str | bytes], *, source: str) -> LoadResult:
    """Parse JSONL lines, skipping blank lines and collecting bad records.

    Byte lines are decoded one at a time, so an undecodable record only
    costs that record.
    """
    issues: list[Issue] = []
    warnings: list[str] = []
    seen: set[str] = set()
    for number, line in enumerate(lines, start=1):
        location = f"{source}:{number}"
        if isinstance(line, bytes):
            try:
                line = line.decode("utf-8")
            except UnicodeDecodeError as exc:
                warnings.append(f"skipped undecodable record at {location}: {exc.reason}")
                continue
        text = line.strip()
        if not text:
            continue
        try:
            payload = json.loads(text)
        except json.JSONDecodeError as exc:
            warnings.append(f"skipped malformed JSON at {location}: {exc.msg}")
            continue
        try:
            issue = parse_issue_record(payload, source=location)
        except ValueError as exc:
            warnings.append(f"skipped {exc}")
            continue
        if issue.id in seen:
            warnings.append(f"skipped duplicate issue id {issue.id!r} at {location}")
            continue
        seen.add(issue.id)
        issues.append(issue)
    return LoadResult(issues=tuple(issues), warnings=tuple(warnings))


def load_issues(project_path: Path) -> LoadResult:
    """Load every issue of a project's beads store.

    Never raises for a missing or unreadable store: the result is empty and
    carries a warning instead.

    Args:
        project_path: Project directory containing ``.beads/``.

    Returns:
        ``LoadResult`` with issues in file order.
    """
    expected = paths.beads_dir(project_path) / paths.BEADS_STORE_FILENAMES[0]
    try:
        store_path = paths.beads_store_path(project_path)
    except OSError as exc:
        return LoadResult(
            issues=(), warnings=(f"could not read beads store {expected}: {exc}",)
        )
    if store_path is None:
        return LoadResult(issues=(), warnings=(f"no beads store found at {expected}",))
    try:
        data = store_path.read_bytes()
    except OSError as exc:
        return LoadResult(
            issues=(),
            warnings=(f"could not read beads store {store_path}: {exc}",),
            store_path=store_path,
        )
    parsed = parse_issue_lines(data.splitlines(), source=str(store_path))
    return LoadResult(issues=parsed.issues, warnings=parsed.warnings, store_path=store_path)
