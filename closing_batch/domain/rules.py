"""
closing_batch.domain.rules -- Pure request checks and scope resolution.

ZERO I/O.  Everything here runs before the first backend call.
"""

from __future__ import annotations

from closing_kernel.exceptions import RequestShapeError

from closing_batch.domain.types import ExecutionRequest, ExecutionScope

MIN_YEAR = 2000


def is_company_wide(company: str | None, sentinel: str) -> bool:
    """True when no specific company is named."""
    return not company or company == sentinel


def check_period(month: int, year: int) -> None:
    if not 1 <= month <= 12:
        raise RequestShapeError(
            f"Month must be between 1 and 12, got {month}", field="month",
        )
    if year < MIN_YEAR:
        raise RequestShapeError(
            f"Year must be {MIN_YEAR} or later, got {year}", field="year",
        )


def check_request_shape(request: ExecutionRequest, sentinel: str) -> None:
    """Reject a structurally invalid request.

    Raises:
        RequestShapeError: Empty or repeated code list, bad period, missing
            category/data type, or a CPF without a specific company.
    """
    if not request.process_codes:
        raise RequestShapeError(
            "At least one process must be selected", field="processCodes",
        )
    if any(not code for code in request.process_codes):
        raise RequestShapeError(
            "Process codes must not be blank", field="processCodes",
        )
    if len(set(request.process_codes)) != len(request.process_codes):
        raise RequestShapeError(
            "Process codes must not be repeated", field="processCodes",
        )
    check_period(request.month, request.year)
    if not request.category:
        raise RequestShapeError("Category is required", field="category")
    if not request.data_type:
        raise RequestShapeError("Data type is required", field="dataType")
    if request.scope_cpf and is_company_wide(request.scope_company, sentinel):
        raise RequestShapeError(
            "A CPF filter requires a specific company", field="cpf",
        )


def resolve_scope(request: ExecutionRequest, sentinel: str) -> ExecutionScope:
    """Company absent or equal to the sentinel means every company."""
    if is_company_wide(request.scope_company, sentinel):
        return ExecutionScope(
            all_companies=True,
            company=None,
            carrier_code=request.scope_carrier_code or None,
            cpf=None,
        )
    return ExecutionScope(
        all_companies=False,
        company=request.scope_company,
        carrier_code=request.scope_carrier_code or None,
        cpf=request.scope_cpf or None,
    )
