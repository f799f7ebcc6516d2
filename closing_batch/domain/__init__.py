"""
closing_batch.domain -- Pure types and rules for closing runs.

ZERO I/O.  All types are frozen dataclasses.
"""

from closing_batch.domain.rules import (
    check_period,
    check_request_shape,
    is_company_wide,
    resolve_scope,
)
from closing_batch.domain.types import (
    PROCESS_NOT_FOUND_MESSAGE,
    ExecutionOutcome,
    ExecutionRequest,
    ExecutionScope,
    ProcessFailure,
    ProcessRunStatus,
)

__all__ = [
    "PROCESS_NOT_FOUND_MESSAGE",
    "ExecutionOutcome",
    "ExecutionRequest",
    "ExecutionScope",
    "ProcessFailure",
    "ProcessRunStatus",
    "check_period",
    "check_request_shape",
    "is_company_wide",
    "resolve_scope",
]
