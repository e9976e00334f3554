"""Common service result contracts for failures returned as values."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, TypeVar

from .errors import ServiceFailure, ServiceFailureCode

T = TypeVar("T")


@dataclass(frozen=True)
class ServiceSuccess(Generic[T]):
    """Container for successful service outcomes.

    Args:
        outcome: Typed outcome payload returned by a service.
    """

    outcome: T

    @property
    def ok(self) -> bool:
        return True


@dataclass(frozen=True)
class ServiceFailureResult:
    """Deterministic failure result for expected service errors.

    Args:
        code: Stable failure code for callers and tests.
        message: Human-readable failure summary.
        recovery_hint: Optional actionable hint for recovery.
        error: The exception the failure was built from, when there is one.
    """

    code: ServiceFailureCode
    message: str
    recovery_hint: str | None = None
    error: ServiceFailure | None = None

    @property
    def ok(self) -> bool:
        return False


ServiceResult = ServiceSuccess[T] | ServiceFailureResult


def service_success(outcome: T) -> ServiceSuccess[T]:
    """Create a successful service result.

    Args:
        outcome: Typed outcome payload to return.

    Returns:
        ``ServiceSuccess`` wrapping ``outcome``.
    """

    return ServiceSuccess(outcome=outcome)


def service_failure(error: ServiceFailure) -> ServiceFailureResult:
    """Convert a raised ``ServiceFailure`` into a failure result.

    Args:
        error: The expected failure raised by a service step.

    Returns:
        ``ServiceFailureResult`` describing the failure.
    """

    return ServiceFailureResult(
        code=error.code,
        message=error.message,
        recovery_hint=error.recovery_hint,
        error=error,
    )
