"""
In-memory store of normalized payroll records keyed by period.
"""

import logging
from typing import Dict, List, Optional, Sequence

from .models import EmployeeRecord
from .period_extractor import sort_periods


class DatasetStore:
    """
    Mapping of period label to that period's employee records.

    The store only holds state. Whoever owns it is responsible for
    recomputing summaries and alerts after each insert or remove.
    """

    def __init__(self, ordering: str = "calendar"):
        self.ordering = ordering
        self._data: Dict[str, List[EmployeeRecord]] = {}
        self.logger = logging.getLogger(__name__)

    def insert(self, period: str, records: Sequence[EmployeeRecord]) -> None:
        """Add a period, replacing any records already stored under it."""
        if period in self._data:
            self.logger.warning(f"Replacing existing records for period {period}")
        self._data[period] = list(records)

    def remove(self, period: str) -> bool:
        """
        Delete a period.

        Returns:
            True if the period was present
        """
        if period not in self._data:
            return False
        del self._data[period]
        return True

    def periods(self) -> List[str]:
        """Chronologically ordered snapshot of the stored periods."""
        return sort_periods(self._data, self.ordering)

    def records(self, period: str) -> List[EmployeeRecord]:
        """Records for one period (a copy of the list)."""
        return list(self._data[period])

    def latest_period(self) -> Optional[str]:
        periods = self.periods()
        return periods[-1] if periods else None

    def latest(self) -> List[EmployeeRecord]:
        """Records of the chronologically last period, or an empty list."""
        period = self.latest_period()
        return self.records(period) if period is not None else []

    def snapshot(self) -> Dict[str, List[EmployeeRecord]]:
        """Read-only copy of the store, keyed in chronological order."""
        return {period: self.records(period) for period in self.periods()}

    def __contains__(self, period: object) -> bool:
        return period in self._data

    def __len__(self) -> int:
        return len(self._data)
