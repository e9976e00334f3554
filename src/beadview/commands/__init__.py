"""Command implementations exposed by the beadview CLI."""

from .analyze import full_report, plan, triage
from .projects import (
    add_projects,
    clear_projects,
    list_projects,
    remove_projects,
    set_projects_enabled,
)

__all__ = [
    "add_projects",
    "clear_projects",
    "full_report",
    "list_projects",
    "plan",
    "remove_projects",
    "set_projects_enabled",
    "triage",
]
