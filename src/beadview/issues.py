"""Issue value objects and the closed vocabularies shared with beads stores.

Status, issue type and dependency kind come from loosely typed JSONL records.
Each is parsed once into a closed enum with an ``UNKNOWN`` member; the raw
string is kept alongside so unrecognized values survive untouched.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

DEFAULT_PRIORITY = 2


def _clean(value: object) -> str:
    if not isinstance(value, str):
        return ""
    return value.strip().lower()


class IssueStatus(str, Enum):
    OPEN = "open"
    IN_PROGRESS = "in_progress"
    BLOCKED = "blocked"
    DEFERRED = "deferred"
    CLOSED = "closed"
    UNKNOWN = "unknown"

    @classmethod
    def parse(cls, value: object) -> IssueStatus:
        normalized = _clean(value).replace("-", "_")
        normalized = _STATUS_ALIASES.get(normalized, normalized)
        for member in cls:
            if member.value == normalized:
                return member
        return cls.UNKNOWN


_STATUS_ALIASES = {
    "ready": "open",
    "planned": "deferred",
    "hooked": "in_progress",
    "done": "closed",
}


class IssueType(str, Enum):
    TASK = "task"
    BUG = "bug"
    FEATURE = "feature"
    EPIC = "epic"
    CHORE = "chore"
    UNKNOWN = "unknown"

    @classmethod
    def parse(cls, value: object) -> IssueType:
        normalized = _clean(value)
        for member in cls:
            if member.value == normalized:
                return member
        return cls.UNKNOWN


class DependencyKind(str, Enum):
    BLOCKS = "blocks"
    RELATED = "related"
    PARENT_CHILD = "parent-child"
    DISCOVERED_FROM = "discovered-from"
    UNKNOWN = "unknown"

    @classmethod
    def parse(cls, value: object) -> DependencyKind:
        normalized = _clean(value).replace("_", "-")
        if not normalized:
            # beads writes untyped dependency entries for plain blockers
            return cls.BLOCKS
        for member in cls:
            if member.value == normalized:
                return member
        return cls.UNKNOWN

    @property
    def is_blocking(self) -> bool:
        return self is DependencyKind.BLOCKS


@dataclass(frozen=True)
class DependencyEdge:
    """One dependency of an issue on another issue ID."""

    depends_on_id: str
    kind: DependencyKind = DependencyKind.BLOCKS
    raw_kind: str = DependencyKind.BLOCKS.value

    @property
    def is_blocking(self) -> bool:
        return self.kind.is_blocking


@dataclass(frozen=True)
class Issue:
    """A bead: one trackable unit of work.

    ``id`` is the store ID until the namespace resolver rewrites it to
    ``<prefix>-<original_id>``; ``original_id`` always holds the store ID.
    """

    id: str
    title: str = ""
    status: IssueStatus = IssueStatus.OPEN
    priority: int = DEFAULT_PRIORITY
    issue_type: IssueType = IssueType.TASK
    dependencies: tuple[DependencyEdge, ...] = ()
    raw_status: str = ""
    raw_issue_type: str = ""
    original_id: str = ""
    prefix: str = ""
    extra: dict[str, object] = field(default_factory=dict, compare=False, repr=False)

    def __post_init__(self) -> None:
        if not self.original_id:
            object.__setattr__(self, "original_id", self.id)
        if not self.raw_status:
            object.__setattr__(self, "raw_status", self.status.value)
        if not self.raw_issue_type:
            object.__setattr__(self, "raw_issue_type", self.issue_type.value)

    @property
    def is_closed(self) -> bool:
        return self.status is IssueStatus.CLOSED

    @property
    def blocking_dependencies(self) -> tuple[DependencyEdge, ...]:
        return tuple(edge for edge in self.dependencies if edge.is_blocking)

    @property
    def type_name(self) -> str:
        """Issue type as written in the store (unknown types keep their name)."""
        if self.issue_type is IssueType.UNKNOWN:
            return self.raw_issue_type or IssueType.UNKNOWN.value
        return self.issue_type.value

    @property
    def status_name(self) -> str:
        if self.status is IssueStatus.UNKNOWN:
            return self.raw_status or IssueStatus.UNKNOWN.value
        return self.status.value
