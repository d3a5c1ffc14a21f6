"""
Excel export of the monitor's derived views.
"""

import logging
from pathlib import Path
from typing import Union

import pandas as pd

from ..config.settings import Settings
from ..config.payroll_fields import MetricCatalogue
from ..monitor import MonitorView
from .formatter import ExcelFormatter

ALERT_COLUMNS = [
    'Severity', 'Type', 'Current Period', 'Previous Period', 'Metric',
    'Employee Code', 'Employee Name', 'Variance', 'Current', 'Previous', 'Message'
]


class ExcelGenerator:
    """Writes periods, latest-period summary and alerts to a workbook."""

    def __init__(self, settings: Settings):
        self.settings = settings
        self.catalogue = MetricCatalogue()
        self.formatter = ExcelFormatter()
        self.logger = logging.getLogger(__name__)

    def generate_report(self, view: MonitorView, output_file: Union[str, Path]) -> str:
        """
        Write the report workbook.

        Args:
            view: Snapshot of the monitor state
            output_file: Destination .xlsx path

        Returns:
            Path of the written report
        """
        output_path = Path(output_file)
        output_path.parent.mkdir(parents=True, exist_ok=True)
        self.logger.info(f"Generating report to {output_path}")

        sheets = {
            'Periods': self._periods_frame(view),
            'Summary': self._summary_frame(view),
            'Alerts': self._alerts_frame(view),
        }

        with pd.ExcelWriter(output_path, engine='xlsxwriter') as writer:
            self.formatter.add_formats(writer.book)

            for sheet_name, df in sheets.items():
                df.to_excel(writer, sheet_name=sheet_name, index=False)
                worksheet = writer.sheets[sheet_name]
                self.formatter.write_headers(worksheet, df)
                self.formatter.adjust_column_widths(worksheet, df)

            self.formatter.apply_alert_formatting(writer.sheets['Alerts'], sheets['Alerts'])

        self.logger.info(f"Report written: {len(view.periods)} periods, {len(view.alerts)} alerts")
        return str(output_path)

    def _periods_frame(self, view: MonitorView) -> pd.DataFrame:
        rows = [
            {'Period': f.period, 'File': f.file_name, 'Employees': f.employee_count}
            for f in view.uploaded_files
        ]
        return pd.DataFrame(rows, columns=['Period', 'File', 'Employees'])

    def _summary_frame(self, view: MonitorView) -> pd.DataFrame:
        rows = []
        for metric, stat in view.summary.items():
            info = self.catalogue.get_metric_info(metric)
            rows.append({
                'Metric': metric,
                'Description': info.label if info else metric,
                'Deduction': 'YES' if info and info.is_deduction else 'NO',
                'Total': round(stat.total, 2),
                'Average': round(stat.average, 2),
                'Min': round(stat.min, 2),
                'Max': round(stat.max, 2),
                'Count': stat.count,
            })
        return pd.DataFrame(rows, columns=['Metric', 'Description', 'Deduction', 'Total',
                                           'Average', 'Min', 'Max', 'Count'])

    def _alerts_frame(self, view: MonitorView) -> pd.DataFrame:
        rows = []
        for alert in view.alerts:
            rows.append({
                'Severity': alert.severity.value.upper(),
                'Type': alert.kind.value,
                'Current Period': alert.current_period,
                'Previous Period': alert.previous_period,
                'Metric': alert.metric,
                'Employee Code': alert.employee_code,
                'Employee Name': alert.employee_name,
                'Variance': str(alert.variance) if alert.variance else f"{alert.headcount_delta:+d}",
                'Current': alert.current_value,
                'Previous': alert.previous_value,
                'Message': alert.message,
            })
        return pd.DataFrame(rows, columns=ALERT_COLUMNS)
