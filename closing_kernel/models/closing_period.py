"""
Module: closing_kernel.models.closing_period
Responsibility: ORM mapping of the administrative closing calendar
    (``mcw_periodo``): one cutoff date per reference month/year.
Architecture position: Kernel > Models.  May import from db/base.py only.

Invariants enforced:
    - (mes_ref, ano_ref) is the natural key.

Failure modes:
    - PeriodNotFoundError (raised by callers) when no row exists for a
      requested month/year.
"""

from datetime import date

from sqlalchemy.orm import Mapped, mapped_column

from closing_kernel.db.base import Base


class ClosingPeriod(Base):
    """Cutoff date for a billing reference month."""

    __tablename__ = "mcw_periodo"

    month: Mapped[int] = mapped_column("mes_ref", primary_key=True)
    year: Mapped[int] = mapped_column("ano_ref", primary_key=True)
    cutoff_date: Mapped[date] = mapped_column("data_final", nullable=False)

    def __repr__(self) -> str:
        return f"<ClosingPeriod {self.month:02d}/{self.year}: {self.cutoff_date}>"
