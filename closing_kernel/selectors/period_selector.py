"""
Module: closing_kernel.selectors.period_selector
Responsibility: Read access to the closing calendar (cutoff date per
    reference month/year).
"""

from closing_kernel.domain.dtos import ClosingPeriodInfo
from closing_kernel.logging_config import get_logger
from closing_kernel.models.closing_period import ClosingPeriod
from closing_kernel.selectors.base import BaseSelector

logger = get_logger("selectors.period")


class ClosingPeriodSelector(BaseSelector):
    """Closing period store."""

    def find(self, month: int, year: int) -> ClosingPeriodInfo | None:
        """Cutoff for (month, year), or None when the period is not registered."""
        logger.debug(
            "closing_period_lookup", extra={"month": month, "year": year},
        )
        with self._backend_read("closing_period_lookup"):
            model = self.session.get(ClosingPeriod, (month, year))
        if model is None:
            return None
        return ClosingPeriodInfo.from_model(model)

    def exists(self, month: int, year: int) -> bool:
        return self.find(month, year) is not None
