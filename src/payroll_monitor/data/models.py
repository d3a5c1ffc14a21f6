"""
Data models for the payroll variance monitor.
"""

from typing import Any, Dict, List, Optional
from dataclasses import dataclass, field

# One worker's field values for one period, keyed by extract header
EmployeeRecord = Dict[str, Any]


@dataclass
class PayrollExtract:
    """Normalized contents of one monthly payroll extract."""
    period: str
    employees: List[EmployeeRecord] = field(default_factory=list)
    file_name: Optional[str] = None

    @property
    def employee_count(self) -> int:
        return len(self.employees)


@dataclass(frozen=True)
class UploadedFile:
    """Per-file metadata shown alongside the loaded periods."""
    period: str
    file_name: Optional[str]
    employee_count: int
