"""
Payroll extract loading: workbook decoding, period detection and normalization.
"""

import logging
from pathlib import Path
from typing import Any, List, Optional, Union

from openpyxl import load_workbook

from ..config.settings import Settings
from .models import PayrollExtract
from .normalizer import Grid, RecordNormalizer
from .period_extractor import extract_period


class PayrollFileError(Exception):
    """An extract that cannot be read or does not have the expected layout."""

    def __init__(self, file_path: str, reason: str):
        self.file_path = file_path
        self.reason = reason
        super().__init__(f"{file_path}: {reason}")


def read_grid(file_path: Union[str, Path], sheet: Union[int, str] = 0) -> List[List[Any]]:
    """
    Decode one worksheet into a grid of raw cell values.

    Row positions are preserved (blank rows come back as empty lists) so the
    fixed layout offsets stay valid. Trailing empty cells are trimmed.

    Args:
        file_path: Path to an .xlsx workbook
        sheet: Worksheet index or name

    Returns:
        List of rows of cell values

    Raises:
        PayrollFileError: If the workbook or sheet cannot be decoded, or the sheet is missing
    """
    path = Path(file_path)
    if not path.exists():
        raise PayrollFileError(str(file_path), "file not found")

    try:
        workbook = load_workbook(path, data_only=True)
    except Exception as e:
        raise PayrollFileError(str(file_path), f"unreadable workbook ({e})") from e

    try:
        if isinstance(sheet, int):
            if sheet >= len(workbook.worksheets):
                raise PayrollFileError(str(file_path), f"no worksheet at index {sheet}")
            worksheet = workbook.worksheets[sheet]
        else:
            if sheet not in workbook.sheetnames:
                raise PayrollFileError(str(file_path), f"no worksheet named {sheet!r}")
            worksheet = workbook[sheet]

        grid = []
        for row in worksheet.iter_rows(min_row=1, min_col=1, values_only=True):
            cells = list(row)
            while cells and cells[-1] is None:
                cells.pop()
            grid.append(cells)
        return grid
    except PayrollFileError:
        raise
    except Exception as e:
        raise PayrollFileError(str(file_path), f"unreadable worksheet ({e})") from e
    finally:
        workbook.close()


class PayrollFileLoader:
    """Turns payroll extract files into normalized PayrollExtract objects."""

    def __init__(self, settings: Settings):
        self.settings = settings
        self.normalizer = RecordNormalizer(settings)
        self.logger = logging.getLogger(__name__)

    def load(self, file_path: Union[str, Path]) -> PayrollExtract:
        """
        Load a payroll extract from an Excel file.

        Args:
            file_path: Path to the extract workbook

        Returns:
            PayrollExtract for the detected period

        Raises:
            PayrollFileError: If the file is unreadable or structurally invalid
        """
        self.logger.info(f"Loading payroll extract: {file_path}")
        grid = read_grid(file_path, self.settings.layout.get("sheet", 0))
        return self.load_grid(grid, Path(file_path).name, source=str(file_path))

    def load_grid(self, grid: Grid, file_name: Optional[str] = None,
                  source: Optional[str] = None) -> PayrollExtract:
        """
        Build a PayrollExtract from an already decoded grid.

        Args:
            grid: Rows of raw cell values
            file_name: Original file name, used for the period fallback
            source: Path reported in errors (defaults to file_name)

        Returns:
            PayrollExtract for the detected period
        """
        layout = self.settings.layout
        title = self._cell(grid, layout["title_row"], layout["title_col"])
        period = extract_period(title, file_name)

        try:
            employees = self.normalizer.normalize(grid)
        except ValueError as e:
            raise PayrollFileError(source or file_name or "<grid>", str(e)) from e

        self.logger.info(f"Extract {file_name or '<grid>'}: period {period}, {len(employees)} employees")
        return PayrollExtract(period=period, employees=employees, file_name=file_name)

    def _cell(self, grid: Grid, row: int, col: int) -> Any:
        if row >= len(grid) or not grid[row] or col >= len(grid[row]):
            return None
        return grid[row][col]
