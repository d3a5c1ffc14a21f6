"""
Unit tests for ExcelGenerator.
"""

import pytest
import sys
from pathlib import Path
from openpyxl import load_workbook

# Add src directory to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from payroll_monitor.config.settings import Settings
from payroll_monitor.data.models import PayrollExtract
from payroll_monitor.monitor import PayrollMonitor
from payroll_monitor.reports.excel_generator import ALERT_COLUMNS, ExcelGenerator


class TestExcelGenerator:
    """Test cases for ExcelGenerator."""

    @pytest.fixture
    def settings(self):
        """Create test settings."""
        return Settings()

    @pytest.fixture
    def monitor(self, settings):
        """Monitor loaded with two months."""
        monitor = PayrollMonitor(settings)
        monitor.add_extract(PayrollExtract("Jan 2024", [
            {"Code": "E1", "Emp. Name": "Alice", "Tot. Sal": 1000, "Gross": 1000, "PCB": 20},
            {"Code": "E2", "Emp. Name": "Bob", "Tot. Sal": 5000, "Gross": 5000, "PCB": 300},
        ], "jan.xlsx"))
        monitor.add_extract(PayrollExtract("Feb 2024", [
            {"Code": "E1", "Emp. Name": "Alice", "Tot. Sal": 1600, "Gross": 1600, "PCB": 40},
        ], "feb.xlsx"))
        return monitor

    def test_generate_report(self, settings, monitor, tmp_path):
        output = tmp_path / "reports" / "variance.xlsx"

        path = ExcelGenerator(settings).generate_report(monitor.snapshot(), output)

        assert Path(path).exists()
        workbook = load_workbook(path)
        assert workbook.sheetnames == ["Periods", "Summary", "Alerts"]

        periods = list(workbook["Periods"].iter_rows(values_only=True))
        assert periods[0] == ("Period", "File", "Employees")
        assert periods[1:] == [("Jan 2024", "jan.xlsx", 2), ("Feb 2024", "feb.xlsx", 1)]

        summary = list(workbook["Summary"].iter_rows(values_only=True))
        metrics = [row[0] for row in summary[1:]]
        assert metrics == ["Tot. Sal", "Gross", "PCB"]
        assert summary[3][2] == "YES"

        alerts = list(workbook["Alerts"].iter_rows(values_only=True))
        assert list(alerts[0]) == ALERT_COLUMNS
        assert len(alerts) - 1 == len(monitor.alerts)
        assert alerts[1][0] == "HIGH"

    def test_empty_report(self, settings, tmp_path):
        path = ExcelGenerator(settings).generate_report(PayrollMonitor(settings).snapshot(),
                                                        tmp_path / "empty.xlsx")

        workbook = load_workbook(path)
        assert workbook["Alerts"].max_row == 1
