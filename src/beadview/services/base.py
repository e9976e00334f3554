"""Base class for beadview services.

A service turns one request model into one outcome. Expected failures are
raised as ``ServiceFailure``; anything else is a bug and propagates as is.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Generic, TypeVar

from .. import log as beadview_log
from .errors import ServiceFailure

R = TypeVar("R")
T = TypeVar("T")


class BaseService(ABC, Generic[R, T]):
    """Callable service wrapping ``_run``.

    ``_handle_failure`` sees every ``ServiceFailure`` raised by ``_run``. It
    re-raises by default so the CLI can report the message and hint;
    subclasses that can recover return an outcome instead.
    """

    def __call__(self, request: R) -> T:
        name = type(self).__name__
        beadview_log.trace(f"{name}: start")
        try:
            outcome = self._run(request)
        except ServiceFailure as exc:
            beadview_log.debug(f"{name}: {exc.code}: {exc.message}")
            return self._handle_failure(exc)
        beadview_log.trace(f"{name}: done")
        return outcome

    @abstractmethod
    def _run(self, request: R) -> T: ...

    def _handle_failure(self, error: ServiceFailure) -> T:
        raise error
