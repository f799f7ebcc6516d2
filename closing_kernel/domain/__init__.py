"""
Pure domain layer.

Immutable DTOs and deadline rules with NO dependencies on:
- ORM (SQLAlchemy)
- Database
- Time/clock (callers pass "today" in)
"""

from closing_kernel.domain.clock import Clock, DeterministicClock, SystemClock
from closing_kernel.domain.deadline import (
    compute_deadline,
    deadline_reason,
    is_historical_period,
    within_window,
)
from closing_kernel.domain.dtos import (
    ClosingPeriodInfo,
    DeadlineCheck,
    DeadlineReport,
    HistoryEntry,
    ProcessDefinitionInfo,
)

__all__ = [
    "Clock",
    "ClosingPeriodInfo",
    "DeadlineCheck",
    "DeadlineReport",
    "DeterministicClock",
    "HistoryEntry",
    "ProcessDefinitionInfo",
    "SystemClock",
    "compute_deadline",
    "deadline_reason",
    "is_historical_period",
    "within_window",
]
