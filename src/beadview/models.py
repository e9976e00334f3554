"""Pydantic models for beadview configuration data."""

from __future__ import annotations

from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .paths import absolute_project_path


class ProjectEntry(BaseModel):
    """A saved project in the projects config.

    Attributes:
        name: Optional display name (defaults to the directory name).
        path: Absolute path to the project directory.
        enabled: Whether the project is loaded; ``None`` means enabled.

    Example:
        >>> ProjectEntry(path="/work/api").is_enabled
        True
        >>> ProjectEntry(path="/work/api", enabled=False).is_enabled
        False
    """

    model_config = ConfigDict(extra="ignore")

    name: str = ""
    path: str
    enabled: bool | None = None

    @field_validator("name", mode="before")
    @classmethod
    def normalize_name(cls, value: object) -> object:
        if value is None:
            return ""
        if isinstance(value, str):
            return value.strip()
        return value

    @field_validator("path", mode="before")
    @classmethod
    def normalize_path(cls, value: object) -> object:
        if isinstance(value, Path):
            return str(value)
        if isinstance(value, str):
            normalized = value.strip()
            if not normalized:
                raise ValueError("project path must not be empty")
            return normalized
        return value

    @property
    def is_enabled(self) -> bool:
        return True if self.enabled is None else self.enabled

    @property
    def display_name(self) -> str:
        return self.name or Path(self.path).name


class ProjectsConfig(BaseModel):
    """The user's saved project list, in load order.

    Example:
        >>> config = ProjectsConfig()
        >>> config.add_project("/work/api")
        True
        >>> config.add_project("/work/api/")
        False
        >>> config.enabled_paths()
        ['/work/api']
    """

    model_config = ConfigDict(extra="ignore")

    projects: list[ProjectEntry] = Field(default_factory=list)

    @field_validator("projects", mode="before")
    @classmethod
    def normalize_projects(cls, value: object) -> object:
        if value is None:
            return []
        return value

    def find(self, path: str | Path) -> ProjectEntry | None:
        target = str(absolute_project_path(path))
        for entry in self.projects:
            if entry.path == target:
                return entry
        return None

    def add_project(self, path: str | Path, *, name: str | None = None) -> bool:
        """Append a project unless its absolute path is already saved."""
        absolute = absolute_project_path(path)
        if self.find(absolute) is not None:
            return False
        self.projects.append(ProjectEntry(name=name or absolute.name, path=str(absolute)))
        return True

    def remove_project(self, path: str | Path) -> bool:
        """Remove a project by path. Returns ``True`` when one was removed."""
        entry = self.find(path)
        if entry is None:
            return False
        self.projects.remove(entry)
        return True

    def set_enabled(self, path: str | Path, enabled: bool) -> bool:
        """Toggle a saved project. Returns ``False`` when the path is unknown."""
        entry = self.find(path)
        if entry is None:
            return False
        entry.enabled = None if enabled else False
        return True

    def enabled_entries(self) -> list[ProjectEntry]:
        return [entry for entry in self.projects if entry.is_enabled]

    def enabled_paths(self) -> list[str]:
        return [entry.path for entry in self.enabled_entries()]


class TriagePolicy(BaseModel):
    """Weights used to score triage recommendations.

    Lower priority numbers are more urgent. The score is::

        priority_weight * (max_priority - clamp(priority, 0, max_priority))
        + type_weights[issue_type]
        - blocked_penalty (when blocked)

    ``blocked_penalty`` must be positive so a blocked issue always ranks below
    an otherwise identical ready one.

    Example:
        >>> TriagePolicy().type_weight("bug") > TriagePolicy().type_weight("task")
        True
        >>> TriagePolicy().type_weight("something-else")
        0.0
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    priority_weight: float = Field(default=10.0, gt=0)
    max_priority: int = Field(default=4, ge=0)
    blocked_penalty: float = Field(default=25.0, gt=0)
    type_weights: dict[str, float] = Field(
        default_factory=lambda: {
            "bug": 3.0,
            "feature": 2.0,
            "task": 1.0,
            "chore": 0.5,
            "epic": 0.0,
        }
    )

    def type_weight(self, issue_type: str) -> float:
        return float(self.type_weights.get(issue_type, 0.0))
