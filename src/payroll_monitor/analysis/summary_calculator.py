"""
Per-metric summary statistics for one payroll period.
"""

import logging
from typing import Dict, List, Optional, Sequence
from dataclasses import dataclass

import numpy as np

from ..config.settings import Settings
from ..data.models import EmployeeRecord
from ..utils.calculations import to_number


@dataclass(frozen=True)
class SummaryStat:
    """Aggregate of one metric across a period's employees."""
    metric: str
    total: float
    average: float
    min: float
    max: float
    count: int

    def to_dict(self) -> Dict[str, float]:
        return {
            'total': self.total,
            'avg': self.average,
            'min': self.min,
            'max': self.max,
            'count': self.count,
        }


class SummaryCalculator:
    """Computes totals, averages and ranges for the tracked metrics."""

    def __init__(self, settings: Settings, metrics: Optional[List[str]] = None):
        self.settings = settings
        self.metrics = list(metrics) if metrics is not None else settings.summary_metrics
        self.logger = logging.getLogger(__name__)

    def calculate(self, employees: Sequence[EmployeeRecord]) -> Dict[str, SummaryStat]:
        """
        Summarize one period.

        Null, non-numeric and zero values are left out of every statistic.
        A metric with no remaining values is omitted from the result rather
        than reported as zero.

        Args:
            employees: Employee records of a single period

        Returns:
            Mapping of metric name to SummaryStat
        """
        stats = {}

        for metric in self.metrics:
            values = self._collect_values(employees, metric)
            if not values:
                continue

            array = np.array(values, dtype=float)
            total = float(np.sum(array))
            stats[metric] = SummaryStat(
                metric=metric,
                total=total,
                average=total / len(values),
                min=float(np.min(array)),
                max=float(np.max(array)),
                count=len(values),
            )

        self.logger.debug(f"Summary computed for {len(stats)}/{len(self.metrics)} metrics over {len(employees)} employees")
        return stats

    def _collect_values(self, employees: Sequence[EmployeeRecord], metric: str) -> List[float]:
        values = []
        for employee in employees:
            value = to_number(employee.get(metric))
            if value is not None and value != 0:
                values.append(value)
        return values
