"""
ProcedureInvoker -- bridge to the global closing stored procedure.

Responsibility:
    Translates one process execution into a call of the configured closing
    procedure, in the legacy positional parameter order, and surfaces any
    backend failure as an InvocationError carrying the driver's message.

Architecture position:
    Kernel > Services.  The only module in the engine that writes to the
    backend (indirectly, through the procedure).

Invariants enforced:
    - One SAVEPOINT per call: a failing procedure is rolled back without
      discarding work done by earlier processes in the same request.
    - Flags are sent as 'S'/'N'; absent scope values as empty strings.
    - The procedure name is validated as a dotted SQL identifier before it
      is ever interpolated into a statement.

Failure modes:
    - InvocationError: any DBAPIError raised by the call (constraint
      violation, data error, statement timeout).  ``str(error)`` is the
      backend message verbatim.
    - ValueError: procedure name is not a valid identifier.
"""

import re
from dataclasses import dataclass
from typing import Any, Protocol, runtime_checkable

from sqlalchemy import text
from sqlalchemy.exc import DBAPIError
from sqlalchemy.orm import Session
from sqlalchemy.sql.elements import TextClause

from closing_kernel.db.base import as_flag
from closing_kernel.exceptions import InvocationError
from closing_kernel.logging_config import get_logger

logger = get_logger("services.invoker")

DEFAULT_PROCEDURE_NAME = "GC.PGK_GLOBAL.P_MCW_FECHA_COMISSAO_GLOBAL"

# Positional order expected by the closing procedure.
PARAMETER_ORDER: tuple[str, ...] = (
    "p_codigo",
    "p_mes",
    "p_ano",
    "p_previa",
    "p_apagar",
    "p_usuario",
    "p_todas_empresas",
    "p_cod_empresa",
    "p_cod_band",
    "p_tipo_dado",
    "p_categoria",
    "p_cpf",
)

_IDENTIFIER = re.compile(r"^[A-Za-z_][A-Za-z0-9_$#]*(\.[A-Za-z_][A-Za-z0-9_$#]*){0,2}$")


@dataclass(frozen=True)
class ProcedureCall:
    """Fully resolved parameters of one closing-procedure invocation."""

    process_code: str
    month: int
    year: int
    preview: bool
    purge: bool
    actor: str
    scope_all: bool
    scope_company: str | None
    scope_carrier_code: str | None
    scope_cpf: str | None
    category: str
    data_type: str

    def bind_parameters(self) -> dict[str, Any]:
        return {
            "p_codigo": self.process_code,
            "p_mes": self.month,
            "p_ano": self.year,
            "p_previa": as_flag(self.preview),
            "p_apagar": as_flag(self.purge),
            "p_usuario": self.actor,
            "p_todas_empresas": as_flag(self.scope_all),
            "p_cod_empresa": self.scope_company or "",
            "p_cod_band": self.scope_carrier_code or "",
            "p_tipo_dado": self.data_type,
            "p_categoria": self.category,
            "p_cpf": self.scope_cpf or "",
        }


@runtime_checkable
class ProcedureInvoker(Protocol):
    """Anything that can run one closing process; fails loud on error."""

    def invoke(self, call: ProcedureCall) -> None: ...


class StoredProcedureInvoker:
    """
    SQLAlchemy-backed invoker.

    Oracle receives an anonymous PL/SQL block; other dialects (PostgreSQL)
    receive ``CALL``.

    Non-goals:
        - Does NOT call ``session.commit()`` -- caller controls boundaries.
        - Does NOT impose a timeout; the driver/pool timeout applies and
          surfaces as an InvocationError.
    """

    def __init__(self, session: Session, procedure_name: str = DEFAULT_PROCEDURE_NAME):
        if not _IDENTIFIER.match(procedure_name):
            raise ValueError(f"Invalid procedure name: {procedure_name!r}")
        self.session = session
        self.procedure_name = procedure_name

    def statement(self) -> TextClause:
        """The call statement for the session's dialect."""
        placeholders = ", ".join(f":{name}" for name in PARAMETER_ORDER)
        if self.session.get_bind().dialect.name == "oracle":
            return text(f"BEGIN {self.procedure_name}({placeholders}); END;")
        return text(f"CALL {self.procedure_name}({placeholders})")

    def invoke(self, call: ProcedureCall) -> None:
        logger.info(
            "procedure_invoked",
            extra={
                "procedure": self.procedure_name,
                "process_code": call.process_code,
                "month": call.month,
                "year": call.year,
                "preview": call.preview,
                "purge": call.purge,
                "scope_all": call.scope_all,
            },
        )
        try:
            with self.session.begin_nested():
                self.session.execute(self.statement(), call.bind_parameters())
        except DBAPIError as exc:
            message = str(exc.orig) if exc.orig is not None else str(exc)
            raise InvocationError(call.process_code, message) from exc
