"""
Normalization of a decoded extract grid into per-employee records.
"""

import logging
from typing import Any, List, Optional, Sequence

import pandas as pd

from ..config.settings import Settings
from ..config.payroll_fields import CODE_FIELD
from .models import EmployeeRecord

Grid = Sequence[Optional[Sequence[Any]]]


def is_blank(value: Any) -> bool:
    """True for None and NaN-like scalars."""
    if value is None:
        return True
    try:
        return bool(pd.isna(value))
    except (TypeError, ValueError):
        return False


class RecordNormalizer:
    """Maps the header row and data rows of an extract to employee records."""

    def __init__(self, settings: Settings):
        self.settings = settings
        self.logger = logging.getLogger(__name__)

    def normalize(self, grid: Grid) -> List[EmployeeRecord]:
        """
        Build employee records from a decoded grid.

        Rows whose first cell is blank are trailing filler and are skipped.
        Cells under a blank header are dropped. Values are kept exactly as
        decoded; numeric coercion happens downstream. When an employee code
        repeats, the first row for that code is kept.

        Args:
            grid: Rows of raw cell values

        Returns:
            Employee records in extract order

        Raises:
            ValueError: If the grid has no header row at the configured offset
        """
        layout = self.settings.layout
        header_row = layout["header_row"]

        if len(grid) <= header_row or not grid[header_row]:
            raise ValueError(f"No header row found at row {header_row}")

        headers = [self._header_name(cell) for cell in grid[header_row]]
        employees = []
        seen_codes = set()
        duplicates = 0

        for row in grid[layout["data_start_row"]:]:
            if not row or is_blank(row[0]):
                continue

            record = {}
            for index, header in enumerate(headers):
                if header and index < len(row):
                    record[header] = row[index]

            code = record.get(CODE_FIELD)
            if not is_blank(code):
                if code in seen_codes:
                    duplicates += 1
                    continue
                seen_codes.add(code)

            employees.append(record)

        if duplicates:
            self.logger.warning(f"Dropped {duplicates} rows with a repeated {CODE_FIELD}; first occurrence kept")

        self.logger.debug(f"Normalized {len(employees)} employee records from {len(headers)} columns")
        return employees

    def _header_name(self, cell: Any) -> Optional[str]:
        if is_blank(cell):
            return None
        name = str(cell).strip()
        return name or None
