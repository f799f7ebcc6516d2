"""
Typed Exception Hierarchy for the Closing Kernel.

===============================================================================
WHY TYPED EXCEPTIONS
===============================================================================

Closing requests fail in a handful of well-defined ways, and the caller
reacts differently to each: a malformed request is fixed by the operator,
a deadline violation needs a privileged operator, an unavailable backend
is retried later.  Callers therefore catch by TYPE and read STRUCTURED
attributes, never by parsing message strings.

Every exception:
  1. Has a typed class (catch by type, not message)
  2. Has a CODE class attribute (machine-readable, API-safe)
  3. Carries its context as attributes and exposes them via ``details()``

Example:
    try:
        outcome = executor.execute(request)
    except DeadlineViolationError as e:
        for violation in e.violations:
            notify(violation.code, violation.reason)

===============================================================================
EXCEPTION HIERARCHY
===============================================================================

    ClosingEngineError (base)
    |
    +-- RequestShapeError
    |
    +-- ReferenceDataError
    |   +-- PeriodNotFoundError
    |   +-- ProcessNotFoundError
    |   +-- InvalidGracePeriodError
    |
    +-- DeadlineViolationError
    |
    +-- InvocationError
    |
    +-- InfrastructureError
    |
    +-- ConfigurationError

===============================================================================
ERROR CODES - QUICK REFERENCE
===============================================================================

Category        | Code                 | When Raised
----------------|----------------------|-----------------------------------------
Request         | INVALID_REQUEST      | Empty code list, month/year out of
                |                      | range, CPF without a specific company
----------------|----------------------|-----------------------------------------
Reference data  | PERIOD_NOT_FOUND     | No closing period for month/year
                | PROCESS_NOT_FOUND    | Process code absent or inactive
                | INVALID_GRACE_PERIOD | Catalog row with a negative grace period
----------------|----------------------|-----------------------------------------
Deadline        | DEADLINE_VIOLATION   | Processes past their window, no override
----------------|----------------------|-----------------------------------------
Invocation      | INVOCATION_FAILED    | Stored procedure raised (per process)
----------------|----------------------|-----------------------------------------
Infrastructure  | BACKEND_UNAVAILABLE  | Catalog/period/history read failed
----------------|----------------------|-----------------------------------------
Configuration   | INVALID_CONFIGURATION| Settings file missing keys / bad values

Request-level errors (everything except InvocationError) abort the request
before any procedure is invoked.  InvocationError is recovered per process
by the batch executor and reported in the outcome.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any


class ClosingEngineError(Exception):
    """
    Base exception for all closing engine errors.

    All subclasses must have a ``code`` class attribute for
    machine-readable error identification.
    """

    code: str = "CLOSING_ENGINE_ERROR"

    def details(self) -> dict[str, Any] | None:
        """Structured context for the caller-facing error body."""
        return None


class RequestShapeError(ClosingEngineError):
    """Malformed or incomplete execution request."""

    code: str = "INVALID_REQUEST"

    def __init__(self, message: str, field: str | None = None):
        self.field = field
        super().__init__(message)

    def details(self) -> dict[str, Any] | None:
        if self.field is None:
            return None
        return {"field": self.field}


# Reference-data exceptions


class ReferenceDataError(ClosingEngineError):
    """Base exception for missing reference data."""

    code: str = "REFERENCE_DATA_ERROR"


class PeriodNotFoundError(ReferenceDataError):
    """No closing period registered for the requested month/year."""

    code: str = "PERIOD_NOT_FOUND"

    def __init__(self, month: int, year: int):
        self.month = month
        self.year = year
        super().__init__(
            f"Closing period not registered for {month:02d}/{year}"
        )

    def details(self) -> dict[str, Any] | None:
        return {"month": self.month, "year": self.year}


class ProcessNotFoundError(ReferenceDataError):
    """Process code is not in the catalog or is inactive."""

    code: str = "PROCESS_NOT_FOUND"

    def __init__(self, process_code: str):
        self.process_code = process_code
        super().__init__(f"Process {process_code} not found")

    def details(self) -> dict[str, Any] | None:
        return {"process_code": self.process_code}


class InvalidGracePeriodError(ReferenceDataError):
    """Catalog row carries a negative grace period."""

    code: str = "INVALID_GRACE_PERIOD"

    def __init__(self, process_code: str, grace_period_days: int):
        self.process_code = process_code
        self.grace_period_days = grace_period_days
        super().__init__(
            f"Process {process_code} has a negative grace period ({grace_period_days} days)"
        )

    def details(self) -> dict[str, Any] | None:
        return {
            "process_code": self.process_code,
            "grace_period_days": self.grace_period_days,
        }


# Deadline exceptions


@dataclass(frozen=True)
class DeadlineViolation:
    """One process that is past its execution window."""

    code: str
    reason: str


class DeadlineViolationError(ClosingEngineError):
    """
    One or more processes are past their execution window.

    Raised as a single aggregate error: the whole batch is blocked and
    no process is invoked.
    """

    code: str = "DEADLINE_VIOLATION"

    def __init__(self, violations: tuple[DeadlineViolation, ...]):
        self.violations = tuple(violations)
        lines = "\n".join(f"{v.code}: {v.reason}" for v in self.violations)
        super().__init__(f"Processes past deadline:\n{lines}")

    @property
    def process_codes(self) -> tuple[str, ...]:
        return tuple(v.code for v in self.violations)

    def details(self) -> dict[str, Any] | None:
        return {
            "invalid": [
                {"code": v.code, "reason": v.reason} for v in self.violations
            ]
        }


# Backend exceptions


class InvocationError(ClosingEngineError):
    """
    The stored procedure for one process failed.

    ``str(error)`` is the backend's message, verbatim, so it can be
    surfaced unchanged in the execution outcome.
    """

    code: str = "INVOCATION_FAILED"

    def __init__(self, process_code: str, backend_message: str):
        self.process_code = process_code
        self.backend_message = backend_message
        super().__init__(backend_message)

    def details(self) -> dict[str, Any] | None:
        return {"process_code": self.process_code}


class InfrastructureError(ClosingEngineError):
    """A read path (catalog, period, history) could not reach the backend."""

    code: str = "BACKEND_UNAVAILABLE"

    def __init__(self, operation: str, reason: str):
        self.operation = operation
        self.reason = reason
        super().__init__(f"Backend unavailable during {operation}: {reason}")

    def details(self) -> dict[str, Any] | None:
        return {"operation": self.operation}


class ConfigurationError(ClosingEngineError):
    """Engine settings could not be loaded."""

    code: str = "INVALID_CONFIGURATION"

    def __init__(self, message: str, key: str | None = None):
        self.key = key
        super().__init__(message)
