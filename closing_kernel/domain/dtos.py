"""
DTOs -- Pure domain data transfer objects.

Responsibility:
    Immutable snapshots of the closing reference data (process definitions,
    closing periods, history entries) and of deadline decisions.  Selectors
    convert ORM rows into these at the persistence boundary so that
    validator and executor logic never touches ORM entities.

Architecture position:
    Kernel > Domain -- pure functional core, zero I/O.
    from_model() class methods exist as boundary converters but are only
    invoked from the selector layer (never from domain logic).
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import date, datetime
from typing import TYPE_CHECKING, Any

from closing_kernel.exceptions import DeadlineViolation

if TYPE_CHECKING:
    from closing_kernel.models.closing_period import ClosingPeriod as ClosingPeriodModel
    from closing_kernel.models.execution_log import (
        ExecutionLogEntry as ExecutionLogEntryModel,
    )
    from closing_kernel.models.process_definition import (
        ProcessDefinition as ProcessDefinitionModel,
    )


@dataclass(frozen=True)
class ProcessDefinitionInfo:
    """
    Pure domain representation of a closing process.

    ``last_run_at`` is only populated by catalog listings scoped to a
    reference period; it is None otherwise.
    """

    code: str
    category: str
    data_type: str
    description: str
    order: int
    grace_period_days: int
    active: bool
    last_run_at: datetime | None = None

    def matches(self, category: str, data_type: str) -> bool:
        """Check if this process belongs to the category/data-type partition."""
        return self.category == category and self.data_type == data_type

    def with_last_run(self, last_run_at: datetime | None) -> ProcessDefinitionInfo:
        return replace(self, last_run_at=last_run_at)

    def to_dict(self) -> dict[str, Any]:
        return {
            "code": self.code,
            "category": self.category,
            "dataType": self.data_type,
            "description": self.description,
            "order": self.order,
            "gracePeriodDays": self.grace_period_days,
            "active": self.active,
            "lastRunAt": self.last_run_at.isoformat() if self.last_run_at else None,
        }

    @classmethod
    def from_model(cls, model: ProcessDefinitionModel) -> ProcessDefinitionInfo:
        return cls(
            code=model.code,
            category=model.category,
            data_type=model.data_type,
            description=model.description,
            order=model.order or 0,
            grace_period_days=model.grace_period_days or 0,
            active=bool(model.active),
        )


@dataclass(frozen=True)
class ClosingPeriodInfo:
    """Cutoff date of a reference month."""

    month: int
    year: int
    cutoff_date: date

    @classmethod
    def from_model(cls, model: ClosingPeriodModel) -> ClosingPeriodInfo:
        cutoff = model.cutoff_date
        # Oracle DATE columns come back as datetime
        if isinstance(cutoff, datetime):
            cutoff = cutoff.date()
        return cls(month=model.month, year=model.year, cutoff_date=cutoff)


@dataclass(frozen=True)
class HistoryEntry:
    """One past invocation of a closing process, as logged by the procedure."""

    category: str
    process_code: str
    month: int
    year: int
    executed_at: datetime
    executed_by: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "category": self.category,
            "processCode": self.process_code,
            "month": self.month,
            "year": self.year,
            "executedAt": self.executed_at.isoformat(),
            "executedBy": self.executed_by,
        }

    @classmethod
    def from_model(cls, model: ExecutionLogEntryModel) -> HistoryEntry:
        return cls(
            category=model.category,
            process_code=model.process_code,
            month=model.month,
            year=model.year,
            executed_at=model.executed_at,
            executed_by=model.executed_by,
        )


@dataclass(frozen=True)
class DeadlineCheck:
    """Result of validating one process against its execution window.

    ``deadline`` is None when the period is historical (no window applies).
    """

    process_code: str
    allowed: bool
    reason: str | None = None
    deadline: date | None = None
    overridden: bool = False


@dataclass(frozen=True)
class DeadlineReport:
    """Batch form of the deadline check: every code lands in exactly one list."""

    valid: tuple[str, ...] = ()
    invalid: tuple[DeadlineViolation, ...] = ()

    @property
    def all_valid(self) -> bool:
        return not self.invalid
