"""Service failure contracts.

Services return typed outcomes on success and raise ServiceFailure on expected
domain/integrity/runtime failures. Programmer bugs raise normal exceptions.
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import Literal

ServiceFailureCode = Literal[
    "validation_failed",
    "io_failed",
    "integrity_violation",
    "cycle_detected",
]


class ServiceFailure(Exception):
    """Expected service failure: validation, integrity, or runtime error.

    Raised by services instead of returning a failure value. Use ``raise
    ServiceFailure(...) from exc`` to chain a causing exception; it is
    available as ``__cause__``. Callers catch ServiceFailure and handle per
    their interface (the CLI dies, a dashboard shows the message).
    """

    def __init__(
        self,
        code: ServiceFailureCode,
        message: str,
        *,
        recovery_hint: str | None = None,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.message = message
        self.recovery_hint = recovery_hint


class ValidationFailedError(ServiceFailure):
    """Validation failed (invalid input, constraint violation)."""

    def __init__(self, message: str, *, recovery_hint: str | None = None) -> None:
        super().__init__("validation_failed", message, recovery_hint=recovery_hint)


class IoFailedError(ServiceFailure):
    """I/O operation failed (read, write, config)."""

    def __init__(self, message: str, *, recovery_hint: str | None = None) -> None:
        super().__init__("io_failed", message, recovery_hint=recovery_hint)


class IntegrityError(ServiceFailure):
    """Two issues resolved to the same final ID while merging projects.

    Namespacing makes this unreachable for valid input; seeing it means the
    resolver produced duplicate prefixes.
    """

    def __init__(self, issue_id: str, *, sources: tuple[str, str]) -> None:
        super().__init__(
            "integrity_violation",
            f"issue id collision for {issue_id!r} between {sources[0]} and {sources[1]}",
            recovery_hint="check that every loaded project received a distinct prefix",
        )
        self.issue_id = issue_id
        self.sources = sources


class CycleError(ServiceFailure):
    """Blocking dependencies form a cycle, so no execution plan exists.

    Attributes:
        cycle: Issue IDs along one concrete cycle, in dependency order.
        unresolved: Every issue that could not be placed in a layer.
    """

    def __init__(self, cycle: Iterable[str], *, unresolved: Iterable[str] = ()) -> None:
        self.cycle = tuple(cycle)
        self.unresolved = tuple(sorted(set(unresolved) | set(self.cycle)))
        path = " -> ".join((*self.cycle, self.cycle[0])) if self.cycle else "(empty)"
        super().__init__(
            "cycle_detected",
            f"dependency cycle detected: {path}",
            recovery_hint="remove or relax one of the blocking dependencies on the cycle",
        )

    @property
    def issue_ids(self) -> frozenset[str]:
        return frozenset(self.cycle)
