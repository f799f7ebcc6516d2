"""
Module: closing_kernel.models.process_definition
Responsibility: ORM mapping of the closing process catalog (``mcw_processo``).
Architecture position: Kernel > Models.  May import from db/base.py only.

Invariants enforced:
    - ``codigo`` identifies a process; it is unique within
      (categoria, tipo_dado).
    - ``dias`` (grace period) is a non-negative day count.

Failure modes:
    - None at the ORM level.  Missing/inactive processes are reported by
      the selectors and the deadline validator.

Audit relevance:
    The catalog is reference data maintained outside the engine.  The
    engine only reads it; grace-period values read here drive every
    deadline decision.
"""

from sqlalchemy import Index, String
from sqlalchemy.orm import Mapped, mapped_column

from closing_kernel.db.base import Base


class ProcessDefinition(Base):
    """
    A unit of closing work, executed by the global closing procedure.

    Contract:
        Rows are externally maintained.  Inactive rows are invisible to
        catalog listings and to the deadline validator.

    Non-goals:
        - The ``procedure`` column is informational; every process runs
          through the single configured closing procedure.
    """

    __tablename__ = "mcw_processo"

    __table_args__ = (
        Index("idx_mcw_processo_cat_tipo", "categoria", "tipo_dado"),
    )

    code: Mapped[str] = mapped_column("codigo", String(20), primary_key=True)
    category: Mapped[str] = mapped_column("categoria", String(10), nullable=False)
    data_type: Mapped[str] = mapped_column("tipo_dado", String(10), nullable=False)
    description: Mapped[str] = mapped_column("descricao", String(200), nullable=False)
    procedure_name: Mapped[str | None] = mapped_column(
        "procedure", String(200), nullable=True,
    )
    order: Mapped[int] = mapped_column("ordem", nullable=False, default=0)
    grace_period_days: Mapped[int] = mapped_column("dias", nullable=False, default=0)
    company_type: Mapped[str | None] = mapped_column(
        "tipo_empresa", String(10), nullable=True,
    )
    active: Mapped[bool] = mapped_column("ativo", nullable=False, default=True)

    def __repr__(self) -> str:
        return f"<ProcessDefinition {self.code}: {self.description}>"
