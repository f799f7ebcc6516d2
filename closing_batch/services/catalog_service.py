"""
CatalogService -- read operations offered to closing operators.

Contract:
    ``list_processes()`` returns the runnable catalog for a
    category/data type, annotated with the last run for a reference period
    when one is given.  ``list_history()`` returns the execution log of one
    process for one period, most recent first.

Non-goals:
    - Does NOT write; both operations are pure reads.
"""

from __future__ import annotations

from closing_kernel.domain.dtos import HistoryEntry, ProcessDefinitionInfo
from closing_kernel.exceptions import PeriodNotFoundError, RequestShapeError
from closing_kernel.logging_config import get_logger
from closing_kernel.selectors.history_selector import HistorySelector
from closing_kernel.selectors.period_selector import ClosingPeriodSelector
from closing_kernel.selectors.process_selector import ProcessSelector

from closing_batch.domain.rules import check_period

logger = get_logger("batch.catalog")


class CatalogService:
    """Process listings and execution history."""

    def __init__(
        self,
        processes: ProcessSelector,
        periods: ClosingPeriodSelector,
        history: HistorySelector,
    ):
        self._processes = processes
        self._periods = periods
        self._history = history

    def list_processes(
        self,
        category: str,
        data_type: str,
        month: int | None = None,
        year: int | None = None,
    ) -> list[ProcessDefinitionInfo]:
        """Active processes; with month and year, the period must exist and
        each row carries its latest run for that period.

        Raises:
            RequestShapeError: Missing category/data type or bad period.
            PeriodNotFoundError: Period not in the closing calendar.
        """
        if not category:
            raise RequestShapeError("Category is required", field="category")
        if not data_type:
            raise RequestShapeError("Data type is required", field="dataType")

        if month is None or year is None:
            return self._processes.list_active(category, data_type)

        check_period(month, year)
        if not self._periods.exists(month, year):
            logger.warning(
                "catalog_period_missing",
                extra={"month": month, "year": year},
            )
            raise PeriodNotFoundError(month, year)

        return self._processes.list_with_last_run(category, data_type, month, year)

    def list_history(
        self,
        category: str,
        process_code: str,
        month: int,
        year: int,
    ) -> list[HistoryEntry]:
        if not category:
            raise RequestShapeError("Category is required", field="category")
        if not process_code:
            raise RequestShapeError("Process code is required", field="processCode")
        check_period(month, year)
        return self._history.list_history(category, process_code, month, year)
