"""Merge namespaced projects into one issue universe.

Dependency references are rewritten here because only the merger knows every
final ID. A reference that already names a final ID (``web`` pointing at
``api-API-1``) is a cross-project reference and is kept; anything else is an
intra-project reference and gets the owning project's prefix.
"""

from __future__ import annotations

from collections.abc import Collection, Iterator, Mapping, Sequence
from dataclasses import dataclass, replace
from types import MappingProxyType

from .issues import DependencyEdge, DependencyKind, Issue
from .namespace import prefixed_id
from .projects import Project
from .services.errors import IntegrityError


@dataclass(frozen=True)
class DanglingReference:
    """A dependency pointing at an ID no loaded project defines."""

    issue_id: str
    target_id: str
    raw_target_id: str
    kind: DependencyKind

    def describe(self) -> str:
        return f"{self.issue_id} depends on unknown issue {self.target_id} ({self.kind.value})"


@dataclass(frozen=True)
class MergedUniverse:
    """Read-only snapshot of every loaded issue and its blocking edges.

    ``issues`` and ``blocking`` cover all enabled projects. ``visible_ids``
    is the subset selected by ``repo_filter`` and is what plans and triage
    report on; blocking state is always computed on the full graph.
    """

    issues: Mapping[str, Issue]
    blocking: Mapping[str, tuple[str, ...]]
    dangling: tuple[DanglingReference, ...] = ()
    prefixes: tuple[str, ...] = ()
    repo_filter: str | None = None
    visible_ids: tuple[str, ...] = ()
    warnings: tuple[str, ...] = ()

    def __len__(self) -> int:
        return len(self.issues)

    def __iter__(self) -> Iterator[Issue]:
        return iter(self.issues.values())

    def is_visible(self, issue_id: str) -> bool:
        issue = self.issues.get(issue_id)
        if issue is None:
            return False
        return self.repo_filter is None or issue.prefix == self.repo_filter

    def visible_issues(self) -> list[Issue]:
        return [self.issues[issue_id] for issue_id in self.visible_ids]

    def open_blockers(self, issue_id: str) -> tuple[str, ...]:
        """Blocking dependencies of ``issue_id`` that are not closed yet.

        Dangling references never appear here, so they count as satisfied.
        """
        return tuple(
            target
            for target in self.blocking.get(issue_id, ())
            if not self.issues[target].is_closed
        )

    def is_blocked(self, issue_id: str) -> bool:
        issue = self.issues.get(issue_id)
        if issue is None or issue.is_closed:
            return False
        return bool(self.open_blockers(issue_id))


def rewrite_dependency_id(raw_id: str, prefix: str, final_ids: Collection[str]) -> str:
    """Return the final form of a dependency reference made inside ``prefix``.

    A reference that already equals a known final ID is returned unchanged,
    so applying the rewrite twice is a no-op for resolvable references.

    Example:
        >>> known = {"api-API-1", "web-WEB-1"}
        >>> rewrite_dependency_id("api-API-1", "web", known)
        'api-API-1'
        >>> rewrite_dependency_id("WEB-1", "web", known)
        'web-WEB-1'
    """
    if raw_id in final_ids:
        return raw_id
    return prefixed_id(prefix, raw_id)


def normalize_repo_filter(value: str | None) -> str | None:
    if value is None:
        return None
    normalized = value.strip().lower()
    return normalized or None


def merge_projects(
    projects: Sequence[Project], *, repo_filter: str | None = None
) -> MergedUniverse:
    """Combine namespaced projects into one ``MergedUniverse``.

    Args:
        projects: Projects with prefixes assigned, in load order.
        repo_filter: Optional prefix restricting what is reported.

    Returns:
        The merged universe.

    Raises:
        IntegrityError: Two issues share a final ID.
    """
    owners: dict[str, str] = {}
    namespaced: list[tuple[Project, Issue]] = []
    for project in projects:
        for issue in project.issues:
            previous = owners.get(issue.id)
            if previous is not None:
                raise IntegrityError(issue.id, sources=(previous, str(project.path)))
            owners[issue.id] = str(project.path)
            namespaced.append((project, issue))

    final_ids = frozenset(owners)
    issues: dict[str, Issue] = {}
    blocking: dict[str, tuple[str, ...]] = {}
    dangling: list[DanglingReference] = []
    for project, issue in namespaced:
        edges: list[DependencyEdge] = []
        blockers: list[str] = []
        for edge in issue.dependencies:
            target = rewrite_dependency_id(edge.depends_on_id, project.prefix, final_ids)
            edges.append(replace(edge, depends_on_id=target))
            if target not in final_ids:
                dangling.append(
                    DanglingReference(
                        issue_id=issue.id,
                        target_id=target,
                        raw_target_id=edge.depends_on_id,
                        kind=edge.kind,
                    )
                )
                continue
            if edge.is_blocking and target not in blockers:
                blockers.append(target)
        issues[issue.id] = replace(issue, dependencies=tuple(edges))
        blocking[issue.id] = tuple(blockers)

    prefixes = tuple(project.prefix for project in projects)
    token = normalize_repo_filter(repo_filter)
    warnings: list[str] = []
    if token is not None and token not in prefixes:
        known = ", ".join(prefixes) or "(none)"
        warnings.append(f"repo filter {token!r} matches no loaded project (known: {known})")
    visible_ids = tuple(
        issue_id for issue_id, issue in issues.items() if token is None or issue.prefix == token
    )
    return MergedUniverse(
        issues=MappingProxyType(issues),
        blocking=MappingProxyType(blocking),
        dangling=tuple(dangling),
        prefixes=prefixes,
        repo_filter=token,
        visible_ids=visible_ids,
        warnings=tuple(warnings),
    )
