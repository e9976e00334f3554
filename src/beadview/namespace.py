"""Assign collision-free namespace prefixes to projects and their issues.

Prefixes depend only on the order projects are given in: the first project
with a directory name gets the bare lowercase name, later ones get ``_1``,
``_2`` and so on.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field, replace

from .issues import Issue
from .projects import Project

PREFIX_SEPARATOR = "-"


def base_token(name: str) -> str:
    """Return the namespace base token for a project directory name.

    Example:
        >>> base_token("MyProject")
        'myproject'
    """
    return name.strip().lower()


def prefixed_id(prefix: str, issue_id: str) -> str:
    """Return the final, namespaced form of an issue ID.

    Example:
        >>> prefixed_id("api", "TASK-1")
        'api-TASK-1'
    """
    return f"{prefix}{PREFIX_SEPARATOR}{issue_id}"


@dataclass
class NamespaceRegistry:
    """Per-run record of handed-out prefixes.

    Example:
        >>> registry = NamespaceRegistry()
        >>> [registry.claim(name) for name in ("api", "web", "API", "api")]
        ['api', 'web', 'api_1', 'api_2']
    """

    uses: dict[str, int] = field(default_factory=dict)
    assigned: set[str] = field(default_factory=set)

    def claim(self, name: str) -> str:
        base = base_token(name)
        count = self.uses.get(base, 0)
        candidate = base if count == 0 else f"{base}_{count}"
        # A directory literally named e.g. "api_1" may already hold the suffix.
        while candidate in self.assigned:
            count += 1
            candidate = f"{base}_{count}"
        self.uses[base] = count + 1
        self.assigned.add(candidate)
        return candidate


def namespace_issue(issue: Issue, prefix: str) -> Issue:
    """Return ``issue`` with its ID rewritten into ``prefix``.

    Dependency references are left alone; they are rewritten by the merger,
    which knows every final ID.
    """
    return replace(issue, id=prefixed_id(prefix, issue.original_id), prefix=prefix)


def assign_prefixes(projects: Sequence[Project]) -> list[Project]:
    """Give every project a unique prefix and namespace its issues.

    Args:
        projects: Enabled projects in load order.

    Returns:
        New ``Project`` values with ``prefix`` set and issue IDs rewritten.
    """
    registry = NamespaceRegistry()
    resolved: list[Project] = []
    for project in projects:
        prefix = registry.claim(project.name)
        issues = tuple(namespace_issue(issue, prefix) for issue in project.issues)
        resolved.append(replace(project, prefix=prefix, issues=issues))
    return resolved
