"""Services for the closing kernel."""

from closing_kernel.services.deadline_validator import DeadlineValidator
from closing_kernel.services.procedure_invoker import (
    DEFAULT_PROCEDURE_NAME,
    ProcedureCall,
    ProcedureInvoker,
    StoredProcedureInvoker,
)

__all__ = [
    "DEFAULT_PROCEDURE_NAME",
    "DeadlineValidator",
    "ProcedureCall",
    "ProcedureInvoker",
    "StoredProcedureInvoker",
]
