"""
Module: closing_kernel.models.execution_log
Responsibility: ORM mapping of the execution history (``mcw_processo_log``).
Architecture position: Kernel > Models.  May import from db/base.py only.

Invariants enforced:
    - Append-only.  Rows are written by the closing procedure itself; the
      engine never inserts, updates or deletes them.

Audit relevance:
    This is the audit trail of closing runs: who ran which process for
    which reference period, and when.
"""

from datetime import datetime

from sqlalchemy import Index, String
from sqlalchemy.orm import Mapped, mapped_column

from closing_kernel.db.base import Base


class ExecutionLogEntry(Base):
    """One past invocation of a closing process."""

    __tablename__ = "mcw_processo_log"

    __table_args__ = (
        Index("idx_mcw_processo_log_ref", "categoria", "codigo", "mes_ref", "ano_ref"),
    )

    category: Mapped[str] = mapped_column("categoria", String(10), primary_key=True)
    process_code: Mapped[str] = mapped_column("codigo", String(20), primary_key=True)
    month: Mapped[int] = mapped_column("mes_ref", primary_key=True)
    year: Mapped[int] = mapped_column("ano_ref", primary_key=True)
    executed_at: Mapped[datetime] = mapped_column("data_proc", primary_key=True)
    executed_by: Mapped[str | None] = mapped_column("usuario", String(50), nullable=True)

    def __repr__(self) -> str:
        return (
            f"<ExecutionLogEntry {self.process_code} "
            f"{self.month:02d}/{self.year} at {self.executed_at}>"
        )
