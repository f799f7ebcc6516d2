"""Selectors for the closing kernel (read side)."""

from closing_kernel.selectors.history_selector import HistorySelector
from closing_kernel.selectors.period_selector import ClosingPeriodSelector
from closing_kernel.selectors.process_selector import ProcessSelector

__all__ = [
    "ClosingPeriodSelector",
    "HistorySelector",
    "ProcessSelector",
]
