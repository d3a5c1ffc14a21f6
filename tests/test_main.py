"""
Unit tests for the command line entry point and console logging.
"""

import logging
import pytest
import sys
import zipfile
from pathlib import Path
from colorama import Fore
from openpyxl import Workbook, load_workbook

# Add src directory to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from payroll_monitor.main import cli, main
from payroll_monitor.utils.logging_config import ColoredFormatter

HEADERS = ["Code", "Emp. Name", "Tot. Sal", "Gross"]


def write_extract(path, title, rows):
    workbook = Workbook()
    sheet = workbook.active
    sheet.cell(row=3, column=1, value=title)
    for c, header in enumerate(HEADERS, start=1):
        sheet.cell(row=7, column=c, value=header)
    for r, row in enumerate(rows, start=9):
        for c, value in enumerate(row, start=1):
            sheet.cell(row=r, column=c, value=value)
    workbook.save(path)
    return str(path)


@pytest.fixture(autouse=True)
def restore_logging():
    """setup_logging replaces the root handlers; put them back afterwards."""
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)


class TestMain:
    """Test cases for main() and cli()."""

    @pytest.fixture
    def extract_files(self, tmp_path):
        jan = write_extract(tmp_path / "jan.xlsx", "PAYROLL [January - 2024]",
                            [["E000", "Alice", 3000, 3000], ["E001", "Bob", 4000, 4000]])
        feb = write_extract(tmp_path / "feb.xlsx", "PAYROLL [February - 2024]",
                            [["E000", "Alice", 4500, 4500], ["E001", "Bob", 4000, 4000]])
        return [jan, feb]

    def test_run_writes_report(self, extract_files, tmp_path):
        output = tmp_path / "out" / "report.xlsx"

        assert main(input_files=extract_files, output_file=str(output)) == 0

        workbook = load_workbook(output)
        assert workbook.sheetnames == ["Periods", "Summary", "Alerts"]
        assert workbook["Alerts"].max_row > 1

    def test_run_for_one_employee(self, extract_files):
        assert main(input_files=extract_files, employee_code="E000") == 0

    def test_batch_directory(self, extract_files, tmp_path):
        assert main(batch_directory=str(tmp_path)) == 0

    def test_malformed_extract_returns_error_status(self, extract_files, tmp_path):
        broken = tmp_path / "broken.xlsx"
        with zipfile.ZipFile(extract_files[1]) as src, zipfile.ZipFile(broken, "w") as dst:
            for item in src.infolist():
                data = src.read(item.filename)
                if item.filename == "xl/worksheets/sheet1.xml":
                    data = data[:len(data) // 2]
                dst.writestr(item, data)

        assert main(input_files=[extract_files[0], str(broken)]) == 1

    def test_missing_directory_returns_error_status(self, tmp_path):
        assert main(batch_directory=str(tmp_path / "missing")) == 1

    def test_cli_exit_status(self, extract_files):
        with pytest.raises(SystemExit) as exc_info:
            cli(["-i", *extract_files, "-t", "20", "-e", "E000"])
        assert exc_info.value.code == 0

    def test_cli_rejects_unknown_threshold(self, extract_files):
        with pytest.raises(SystemExit) as exc_info:
            cli(["-i", *extract_files, "-t", "12"])
        assert exc_info.value.code == 2


class TestColoredFormatter:
    """Test cases for ColoredFormatter."""

    def make_record(self, **extra):
        record = logging.LogRecord("payroll_monitor.main", logging.WARNING, __file__, 1,
                                   "  [HIGH] %s", ("Gross changed",), None)
        record.__dict__.update(extra)
        return record

    def test_high_alert_message_is_coloured(self):
        record = self.make_record(alert_severity="high")

        output = ColoredFormatter("%(levelname)s %(message)s").format(record)

        assert Fore.RED in output
        assert "[HIGH] Gross changed" in output
        assert record.levelname == "WARNING"
        assert record.msg == "  [HIGH] %s"

    def test_plain_record_message_is_untouched(self):
        output = ColoredFormatter("%(message)s").format(self.make_record())
        assert output == "  [HIGH] Gross changed"
