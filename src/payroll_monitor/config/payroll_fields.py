"""
Payroll extract field names and metric catalogue.
"""

from typing import List, Optional
from dataclasses import dataclass

CODE_FIELD = "Code"
NAME_FIELD = "Emp. Name"


@dataclass
class MetricInfo:
    """Payroll metric description."""
    field: str
    label: str
    description: str
    is_deduction: bool = False


class MetricCatalogue:
    """Lookup of known payroll metric columns."""

    def __init__(self):
        self.metrics = self._initialize_metrics()
        self.field_to_info = {metric.field: metric for metric in self.metrics}

    def _initialize_metrics(self) -> List[MetricInfo]:
        """Initialize the known extract metrics."""
        return [
            MetricInfo("Tot. Sal", "Total Salary", "Basic salary for the month"),
            MetricInfo("Add", "Additions", "Allowances and other additions"),
            MetricInfo("OT Amt", "Overtime", "Overtime amount"),
            MetricInfo("Gross", "Gross Pay", "Gross wages before deductions"),
            MetricInfo("NettWgs", "Net Wages", "Net wages paid out"),
            MetricInfo("PCB", "PCB", "Monthly tax deduction", True),
        ]

    def get_metric_info(self, field: str) -> Optional[MetricInfo]:
        """Get metric information by field name."""
        return self.field_to_info.get(field)
