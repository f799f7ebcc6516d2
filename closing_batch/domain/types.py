"""
closing_batch.domain.types -- Pure frozen dataclasses for closing runs.

ZERO I/O.  Frozen dataclasses with tuples for immutable collections.

Invariants enforced:
    - An ExecutionOutcome accounts for every attempted code exactly once:
      ``succeeded`` plus the codes in ``failed`` is the attempted set.
    - Codes keep the caller's order in both lists.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any

PROCESS_NOT_FOUND_MESSAGE = "process not found"


class ProcessRunStatus(str, Enum):
    """Per-process result within a closing run."""

    SUCCEEDED = "succeeded"
    FAILED = "failed"


@dataclass(frozen=True)
class ExecutionRequest:
    """One caller request to run closing processes for a reference period.

    ``scope_company`` may be the company-wide sentinel; the executor
    resolves it into an ExecutionScope.  ``actor`` falls back to the
    configured default actor when None.
    """

    category: str
    data_type: str
    month: int
    year: int
    process_codes: tuple[str, ...]
    purge_existing: bool = False
    preview: bool = False
    scope_company: str | None = None
    scope_carrier_code: str | None = None
    scope_cpf: str | None = None
    actor: str | None = None
    override_privilege: bool = False

    @property
    def period_label(self) -> str:
        return f"{self.month:02d}/{self.year}"


@dataclass(frozen=True)
class ExecutionScope:
    """Resolved company/carrier/beneficiary scope passed to every invocation."""

    all_companies: bool
    company: str | None = None
    carrier_code: str | None = None
    cpf: str | None = None


@dataclass(frozen=True)
class ProcessFailure:
    code: str
    error_message: str

    def to_dict(self) -> dict[str, str]:
        return {"code": self.code, "error": self.error_message}


@dataclass(frozen=True)
class ExecutionOutcome:
    """Immutable result of one closing run."""

    succeeded: tuple[str, ...] = ()
    failed: tuple[ProcessFailure, ...] = ()

    @property
    def attempted(self) -> int:
        return len(self.succeeded) + len(self.failed)

    @property
    def failed_codes(self) -> tuple[str, ...]:
        return tuple(f.code for f in self.failed)

    @property
    def summary_message(self) -> str:
        return (
            f"Execution completed: {len(self.succeeded)} success(es), "
            f"{len(self.failed)} error(s)"
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "succeeded": list(self.succeeded),
            "failed": [f.to_dict() for f in self.failed],
            "summaryMessage": self.summary_message,
        }
