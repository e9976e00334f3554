from .base import BaseService
from .errors import (
    CycleError,
    IntegrityError,
    IoFailedError,
    ServiceFailure,
    ValidationFailedError,
)
from .result import (
    ServiceFailureResult,
    ServiceResult,
    ServiceSuccess,
    service_failure,
    service_success,
)

__all__ = [
    "BaseService",
    "CycleError",
    "IntegrityError",
    "IoFailedError",
    "ServiceFailure",
    "ServiceFailureResult",
    "ServiceResult",
    "ServiceSuccess",
    "ValidationFailedError",
    "service_failure",
    "service_success",
]
