"""
Module: closing_kernel.selectors.history_selector
Responsibility: Read access to the execution history written by the
    closing procedure.

Invariants enforced:
    - Results are ordered most recent first (ties broken by executor name
      so repeated calls return identical sequences).
    - Pure read-through: the engine never writes history.
"""

from sqlalchemy import select

from closing_kernel.domain.dtos import HistoryEntry
from closing_kernel.logging_config import get_logger
from closing_kernel.models.execution_log import ExecutionLogEntry
from closing_kernel.selectors.base import BaseSelector

logger = get_logger("selectors.history")


class HistorySelector(BaseSelector):
    """Execution history reader."""

    def list_history(
        self, category: str, process_code: str, month: int, year: int,
    ) -> list[HistoryEntry]:
        stmt = (
            select(ExecutionLogEntry)
            .where(
                ExecutionLogEntry.category == category,
                ExecutionLogEntry.process_code == process_code,
                ExecutionLogEntry.month == month,
                ExecutionLogEntry.year == year,
            )
            .order_by(
                ExecutionLogEntry.executed_at.desc(),
                ExecutionLogEntry.executed_by,
            )
        )
        with self._backend_read("execution_history"):
            models = self.session.execute(stmt).scalars().all()

        logger.info(
            "execution_history_loaded",
            extra={
                "category": category,
                "process_code": process_code,
                "month": month,
                "year": year,
                "count": len(models),
            },
        )
        return [HistoryEntry.from_model(m) for m in models]
