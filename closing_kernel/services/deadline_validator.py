"""
DeadlineValidator -- per-process execution-window enforcement.

Responsibility:
    Decides, per process, whether "today" falls inside the process's
    execution window for a reference period: the closing cutoff date plus
    the process's grace period.  Privileged callers may override a missed
    window.

Architecture position:
    Kernel > Services -- imperative shell over the pure rules in
    ``closing_kernel.domain.deadline``.  Reads the closing calendar and
    the process catalog through selectors; writes nothing.

Rules (in evaluation order):
    1. A reference period other than the current calendar month is
       historical backfill and is always allowed.  No lookup is made.
    2. The closing period must exist (PeriodNotFoundError otherwise).
    3. The process must exist and be active (ProcessNotFoundError).
       Its grace period must be non-negative (InvalidGracePeriodError).
    4. deadline = cutoff_date + grace_period_days; compared as dates.
    5. allowed = today <= deadline, or override privilege.

Failure modes:
    - PeriodNotFoundError / ProcessNotFoundError /
      InvalidGracePeriodError: request-level, propagate.
    - InfrastructureError from the selectors: propagate.

Audit relevance:
    Every block and every override is logged at WARNING with the process,
    period, grace period and computed deadline.
"""

from collections.abc import Iterable
from datetime import tzinfo

from closing_kernel.domain.clock import Clock, SystemClock
from closing_kernel.domain.deadline import (
    compute_deadline,
    deadline_reason,
    is_historical_period,
    within_window,
)
from closing_kernel.domain.dtos import DeadlineCheck, DeadlineReport
from closing_kernel.exceptions import (
    DeadlineViolation,
    InvalidGracePeriodError,
    PeriodNotFoundError,
    ProcessNotFoundError,
)
from closing_kernel.logging_config import get_logger
from closing_kernel.selectors.period_selector import ClosingPeriodSelector
from closing_kernel.selectors.process_selector import ProcessSelector

logger = get_logger("services.deadline")


class DeadlineValidator:
    """
    Execution-window check for closing processes.

    Contract:
        ``validate()`` evaluates one process; ``validate_many()`` evaluates
        every code independently and partitions them into valid/invalid.

    Non-goals:
        - Does NOT cache periods or processes; every call reads fresh.
        - Does NOT decide what to do with invalid codes (the batch executor
          owns the all-or-nothing gate).
    """

    def __init__(
        self,
        periods: ClosingPeriodSelector,
        processes: ProcessSelector,
        clock: Clock | None = None,
        tz: tzinfo | None = None,
    ):
        self._periods = periods
        self._processes = processes
        self._clock = clock or SystemClock()
        self._tz = tz

    def validate(
        self,
        process_code: str,
        month: int,
        year: int,
        override_privilege: bool = False,
    ) -> DeadlineCheck:
        """
        Check one process against its execution window.

        Returns:
            DeadlineCheck with ``allowed`` and, when blocked, a ``reason``
            naming the process, its grace period and the deadline.

        Raises:
            PeriodNotFoundError: Current period has no closing calendar row.
            ProcessNotFoundError: Process absent or inactive.
            InvalidGracePeriodError: Catalog row has a negative grace period.
        """
        today = self._clock.today(self._tz)

        if is_historical_period(month, year, today):
            logger.info(
                "deadline_check_skipped_historical",
                extra={
                    "process_code": process_code,
                    "month": month,
                    "year": year,
                    "today": today,
                },
            )
            return DeadlineCheck(process_code=process_code, allowed=True)

        period = self._periods.find(month, year)
        if period is None:
            raise PeriodNotFoundError(month, year)

        process = self._processes.find(process_code)
        if process is None or not process.active:
            raise ProcessNotFoundError(process_code)
        if process.grace_period_days < 0:
            raise InvalidGracePeriodError(process_code, process.grace_period_days)

        deadline = compute_deadline(period.cutoff_date, process.grace_period_days)

        if within_window(today, deadline):
            logger.info(
                "deadline_check_passed",
                extra={
                    "process_code": process_code,
                    "deadline": deadline,
                    "today": today,
                },
            )
            return DeadlineCheck(
                process_code=process_code, allowed=True, deadline=deadline,
            )

        if override_privilege:
            logger.warning(
                "deadline_overridden",
                extra={
                    "process_code": process_code,
                    "grace_period_days": process.grace_period_days,
                    "deadline": deadline,
                    "today": today,
                },
            )
            return DeadlineCheck(
                process_code=process_code,
                allowed=True,
                deadline=deadline,
                overridden=True,
            )

        reason = deadline_reason(process, deadline)
        logger.warning(
            "deadline_exceeded",
            extra={
                "process_code": process_code,
                "grace_period_days": process.grace_period_days,
                "deadline": deadline,
                "today": today,
            },
        )
        return DeadlineCheck(
            process_code=process_code,
            allowed=False,
            reason=reason,
            deadline=deadline,
        )

    def validate_many(
        self,
        process_codes: Iterable[str],
        month: int,
        year: int,
        override_privilege: bool = False,
    ) -> DeadlineReport:
        """Validate every code; no short-circuit on the first invalid one."""
        valid: list[str] = []
        invalid: list[DeadlineViolation] = []

        for code in process_codes:
            check = self.validate(code, month, year, override_privilege)
            if check.allowed:
                valid.append(code)
            else:
                invalid.append(
                    DeadlineViolation(code=code, reason=check.reason or "Deadline expired")
                )

        return DeadlineReport(valid=tuple(valid), invalid=tuple(invalid))
