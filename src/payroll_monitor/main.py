"""
Command line entry point for the payroll variance monitor.
"""

import argparse
import logging
import os
import sys
from typing import List, Optional

from .config.settings import Settings
from .monitor import PayrollMonitor
from .batch.batch_processor import BatchProcessor, BatchIngestionError
from .analysis.variance_engine import alerts_for_employee, calculate_alert_stats
from .reports.excel_generator import ExcelGenerator
from .utils.calculations import format_amount
from .utils.logging_config import setup_logging


def main(input_files: Optional[List[str]] = None, batch_directory: Optional[str] = None,
         batch_pattern: str = "*.xlsx", threshold: Optional[int] = None,
         output_file: Optional[str] = None, log_level: Optional[str] = None,
         log_file: Optional[str] = None, employee_code: Optional[str] = None) -> int:
    """
    Ingest payroll extracts, report the summary and alerts.

    Args:
        input_files: Extract files, ingested in the given order
        batch_directory: Directory to ingest instead of explicit files
        batch_pattern: File pattern for directory mode
        threshold: Alert threshold percentage (defaults to configuration)
        output_file: Optional path of an Excel report
        log_level: Logging level override
        log_file: Optional log file path
        employee_code: Only list the alerts raised for this employee

    Returns:
        Process exit status
    """
    setup_logging(log_level or os.getenv("LOG_LEVEL", "INFO"), log_file)
    logger = logging.getLogger(__name__)
    logger.info("Starting Payroll Variance Monitor")

    try:
        settings = Settings()
        monitor = PayrollMonitor(settings, threshold)
        processor = BatchProcessor(settings, monitor)

        if batch_directory:
            processor.process_directory(batch_directory, batch_pattern)
        else:
            processor.process_files(input_files or [])

        view = monitor.snapshot()
        _log_view(logger, view, employee_code)

        if output_file:
            ExcelGenerator(settings).generate_report(view, output_file)

        logger.info("Processing completed successfully")
        return 0

    except KeyboardInterrupt:
        logger.info("Processing interrupted by user")
        return 130
    except BatchIngestionError as e:
        logger.error(f"{e}")
        if e.committed:
            logger.error(f"Periods loaded before the failure: {', '.join(e.committed)}")
        return 1
    except ValueError as e:
        logger.error(f"Error during processing: {e}")
        return 1
    except Exception as e:
        logger.error(f"Unexpected error during processing: {e}")
        return 1


def _log_view(logger: logging.Logger, view, employee_code: Optional[str] = None) -> None:
    """Log loaded periods, the latest summary and all alerts."""
    logger.info(f"Periods loaded ({len(view.periods)}): {', '.join(view.periods) or 'none'}")
    for uploaded in view.uploaded_files:
        logger.info(f"  {uploaded.period}: {uploaded.employee_count} employees ({uploaded.file_name})")

    if view.latest_period:
        logger.info(f"Latest period {view.latest_period}: {view.latest_employee_count} employees, "
                    f"total gross {format_amount(view.total_gross)}")
    for metric, stat in view.summary.items():
        logger.info(f"  {metric}: total {format_amount(stat.total)}, avg {format_amount(stat.average)}, "
                    f"min {format_amount(stat.min)}, max {format_amount(stat.max)}, count {stat.count}")

    stats = calculate_alert_stats(view.alerts)
    if stats:
        by_severity = stats['by_severity']
        logger.info(f"Variance alerts at {view.threshold}%: {stats['total_alerts']} "
                    f"({by_severity['high']} high, {by_severity['medium']} medium), "
                    f"{stats['employees_flagged']} employees flagged")
    else:
        logger.info(f"Variance alerts at {view.threshold}%: none")

    alerts = alerts_for_employee(view.alerts, employee_code) if employee_code else view.alerts
    if employee_code:
        logger.info(f"Alerts for employee {employee_code}: {len(alerts)}")
    for alert in alerts:
        log = logger.warning if alert.is_high else logger.info
        log(f"  [{alert.severity.value.upper()}] {alert.message}",
            extra={'alert_severity': alert.severity.value})


def cli(argv: Optional[List[str]] = None) -> None:
    parser = argparse.ArgumentParser(
        description="Payroll Variance Monitor - flag month-to-month payroll changes",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Compare explicit monthly extracts
  payroll-monitor -i jan.xlsx feb.xlsx mar.xlsx

  # Every extract in a directory, stricter threshold, Excel report
  payroll-monitor -b data/raw/ -t 10 -o data/output/report.xlsx

  # Alerts for a single employee
  payroll-monitor -b data/raw/ -e E001
        """
    )

    input_group = parser.add_mutually_exclusive_group(required=True)
    input_group.add_argument(
        "-i", "--input",
        nargs="+",
        help="Payroll extract files, one per month"
    )
    input_group.add_argument(
        "-b", "--batch",
        help="Directory of payroll extracts"
    )

    parser.add_argument(
        "-p", "--pattern",
        default="*.xlsx",
        help="File pattern for directory mode (default: *.xlsx)"
    )
    parser.add_argument(
        "-t", "--threshold",
        type=int,
        choices=[10, 15, 20, 25],
        help="Alert threshold percentage (default: from configuration)"
    )
    parser.add_argument(
        "-o", "--output",
        help="Write an Excel report to this path"
    )
    parser.add_argument(
        "-e", "--employee",
        help="Only list alerts for this employee code"
    )
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level (default: LOG_LEVEL or INFO)"
    )
    parser.add_argument(
        "--log-file",
        help="Also write logs to this file"
    )

    args = parser.parse_args(argv)

    sys.exit(main(
        input_files=args.input,
        batch_directory=args.batch,
        batch_pattern=args.pattern,
        threshold=args.threshold,
        output_file=args.output,
        log_level=args.log_level,
        log_file=args.log_file,
        employee_code=args.employee,
    ))


if __name__ == "__main__":
    cli()
