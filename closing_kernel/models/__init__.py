"""ORM mappings for the closing reference tables."""

from closing_kernel.models.closing_period import ClosingPeriod
from closing_kernel.models.execution_log import ExecutionLogEntry
from closing_kernel.models.process_definition import ProcessDefinition

__all__ = [
    "ClosingPeriod",
    "ExecutionLogEntry",
    "ProcessDefinition",
]
