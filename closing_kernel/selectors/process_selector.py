"""
Module: closing_kernel.selectors.process_selector
Responsibility: Read access to the closing process catalog.

Invariants enforced:
    - Catalog listings contain only active processes of the requested
      category/data type, ordered by their ``order`` field.
    - Reserved system codes never appear in a catalog listing.  The set is
      injected (see closing_config ``reserved_codes``), never inlined.
    - ``find()`` is a direct lookup by code and is not filtered; callers
      decide what inactive or mismatched rows mean for them.
"""

from collections.abc import Iterable

from sqlalchemy import func, literal, select
from sqlalchemy.orm import Session

from closing_kernel.db.base import YesNoFlag
from closing_kernel.domain.dtos import ProcessDefinitionInfo
from closing_kernel.logging_config import get_logger
from closing_kernel.models.execution_log import ExecutionLogEntry
from closing_kernel.models.process_definition import ProcessDefinition
from closing_kernel.selectors.base import BaseSelector

logger = get_logger("selectors.process")


class ProcessSelector(BaseSelector):
    """Process catalog reader."""

    def __init__(self, session: Session, reserved_codes: Iterable[str]):
        super().__init__(session)
        self.reserved_codes = frozenset(reserved_codes)

    def find(self, code: str) -> ProcessDefinitionInfo | None:
        """Look up a process by code, active or not."""
        with self._backend_read("process_lookup"):
            model = self.session.get(ProcessDefinition, code)
        if model is None:
            return None
        return ProcessDefinitionInfo.from_model(model)

    def list_active(
        self, category: str, data_type: str,
    ) -> list[ProcessDefinitionInfo]:
        """Active processes for a category/data type, reserved codes excluded."""
        stmt = self._catalog_query(select(ProcessDefinition), category, data_type)
        with self._backend_read("process_catalog"):
            models = self.session.execute(stmt).scalars().all()

        logger.debug(
            "process_catalog_loaded",
            extra={
                "category": category,
                "data_type": data_type,
                "count": len(models),
            },
        )
        return [ProcessDefinitionInfo.from_model(m) for m in models]

    def list_with_last_run(
        self, category: str, data_type: str, month: int, year: int,
    ) -> list[ProcessDefinitionInfo]:
        """Like ``list_active`` with each row annotated with its latest run
        for the given reference period (None if never run)."""
        last_run = (
            select(func.max(ExecutionLogEntry.executed_at))
            .where(
                ExecutionLogEntry.month == month,
                ExecutionLogEntry.year == year,
                ExecutionLogEntry.category == category,
                ExecutionLogEntry.process_code == ProcessDefinition.code,
            )
            .correlate(ProcessDefinition)
            .scalar_subquery()
        )
        stmt = self._catalog_query(
            select(ProcessDefinition, last_run.label("last_run_at")),
            category,
            data_type,
        )
        with self._backend_read("process_catalog"):
            rows = self.session.execute(stmt).all()

        return [
            ProcessDefinitionInfo.from_model(model).with_last_run(last_run_at)
            for model, last_run_at in rows
        ]

    def _catalog_query(self, stmt, category: str, data_type: str):
        stmt = stmt.where(
            ProcessDefinition.active == literal(True, YesNoFlag()),
            ProcessDefinition.category == category,
            ProcessDefinition.data_type == data_type,
        )
        if self.reserved_codes:
            stmt = stmt.where(ProcessDefinition.code.not_in(sorted(self.reserved_codes)))
        return stmt.order_by(ProcessDefinition.order, ProcessDefinition.code)
