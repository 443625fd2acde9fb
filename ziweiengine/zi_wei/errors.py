"""Exceptions raised while deriving a Zi Wei chart."""

from __future__ import annotations

__all__ = ["ZiWeiError", "InvalidInput", "LookupMiss", "InvariantViolation"]


class ZiWeiError(RuntimeError):
    """Base class for chart calculation failures.

    ``stage`` names the pipeline stage that failed and ``key`` carries the
    offending lookup key or input value. The pipeline fills in ``stage`` when
    a lower-level helper raised without one.
    """

    def __init__(self, message: str, *, stage: str | None = None, key: object = None) -> None:
        super().__init__(message)
        self.message = message
        self.stage = stage
        self.key = key

    def __str__(self) -> str:
        if self.stage:
            return f"[{self.stage}] {self.message}"
        return self.message


class InvalidInput(ZiWeiError, ValueError):
    """Raised when birth data is rejected before any stage runs."""


class LookupMiss(ZiWeiError, LookupError):
    """Raised when a table, palace or star lookup finds no entry."""


class InvariantViolation(ZiWeiError):
    """Raised when a closed-case dispatch falls through or stages run out of order."""
