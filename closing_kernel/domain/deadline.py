"""
Deadline rules -- pure functions behind the execution-window check.

Responsibility:
    Decide whether a reference period is historical, compute a process's
    deadline from the closing cutoff and its grace period, and render the
    operator-facing message for a blocked process.

Architecture position:
    Kernel > Domain -- pure functional core, zero I/O.  "Today" is always
    passed in; nothing here reads a clock.

Rules:
    - A reference period other than the current calendar month is
      historical (backfill) and is never subject to a deadline.
    - deadline = cutoff_date + grace_period_days (calendar days).
    - Execution is permitted while today <= deadline.
"""

from datetime import date, timedelta

from closing_kernel.domain.dtos import ProcessDefinitionInfo


def is_historical_period(month: int, year: int, today: date) -> bool:
    """True when (month, year) is not the calendar month containing today."""
    return (month, year) != (today.month, today.year)


def compute_deadline(cutoff_date: date, grace_period_days: int) -> date:
    """Last calendar day on which the process may run without override."""
    if grace_period_days < 0:
        raise ValueError(
            f"grace_period_days must be non-negative, got {grace_period_days}"
        )
    return cutoff_date + timedelta(days=grace_period_days)


def within_window(today: date, deadline: date) -> bool:
    return today <= deadline


def deadline_reason(process: ProcessDefinitionInfo, deadline: date) -> str:
    """Operator-facing explanation for a process blocked by its deadline."""
    return (
        f'Process "{process.description}" ({process.code}) is past its '
        f"execution deadline. Grace period: {process.grace_period_days} "
        f"day(s); deadline: {deadline:%d/%m/%Y}. Override privilege is "
        f"required to run it outside the window."
    )
