"""
Application layer: owns the dataset and keeps the derived views current.
"""

import logging
from typing import Dict, List, Optional
from dataclasses import dataclass

from .config.settings import Settings
from .data.dataset_store import DatasetStore
from .data.models import PayrollExtract, UploadedFile
from .analysis.summary_calculator import SummaryCalculator, SummaryStat
from .analysis.variance_engine import Alert, VarianceEngine

GROSS_METRIC = "Gross"


@dataclass
class MonitorView:
    """Everything the presentation layer needs, captured at one point in time."""
    periods: List[str]
    uploaded_files: List[UploadedFile]
    summary: Dict[str, SummaryStat]
    alerts: List[Alert]
    threshold: int
    latest_period: Optional[str] = None
    latest_employee_count: int = 0
    total_gross: Optional[float] = None


class PayrollMonitor:
    """
    Session state for a set of uploaded payroll extracts.

    Every mutation (adding or removing a period, changing the threshold)
    rebuilds the summary and the alert list from scratch.
    """

    def __init__(self, settings: Settings, threshold: Optional[int] = None):
        self.settings = settings
        self.store = DatasetStore(settings.period_ordering)
        self.summary_calculator = SummaryCalculator(settings)
        self.variance_engine = VarianceEngine(settings)
        self.threshold = settings.validate_threshold(
            threshold if threshold is not None else settings.variance_threshold
        )
        self.logger = logging.getLogger(__name__)

        self._files: Dict[str, UploadedFile] = {}
        self._summary: Dict[str, SummaryStat] = {}
        self._alerts: List[Alert] = []

    def add_extract(self, extract: PayrollExtract) -> None:
        """Insert (or replace) one period and recompute."""
        self.store.insert(extract.period, extract.employees)
        self._files[extract.period] = UploadedFile(
            period=extract.period,
            file_name=extract.file_name,
            employee_count=extract.employee_count,
        )
        self.recompute()

    def remove_period(self, period: str) -> bool:
        """
        Remove a period and recompute.

        Returns:
            True if the period was loaded
        """
        if not self.store.remove(period):
            self.logger.warning(f"Period {period} is not loaded, nothing to remove")
            return False

        self._files.pop(period, None)
        self.logger.info(f"Removed period {period}")
        self.recompute()
        return True

    def set_threshold(self, threshold: int) -> None:
        """Change the alert threshold and rebuild the alerts."""
        self.threshold = self.settings.validate_threshold(threshold)
        self.logger.info(f"Variance threshold set to {self.threshold}%")
        self._alerts = self.variance_engine.generate_alerts(self.store.snapshot(), self.threshold)

    def recompute(self) -> None:
        """Rebuild the latest-period summary and the alert list."""
        self._summary = self.summary_calculator.calculate(self.store.latest())
        self._alerts = self.variance_engine.generate_alerts(self.store.snapshot(), self.threshold)

    @property
    def periods(self) -> List[str]:
        return self.store.periods()

    @property
    def uploaded_files(self) -> List[UploadedFile]:
        """Per-file metadata in period order."""
        return [self._files[period] for period in self.store.periods()]

    @property
    def summary(self) -> Dict[str, SummaryStat]:
        return dict(self._summary)

    @property
    def alerts(self) -> List[Alert]:
        return list(self._alerts)

    @property
    def latest_period(self) -> Optional[str]:
        return self.store.latest_period()

    @property
    def latest_employee_count(self) -> int:
        return len(self.store.latest())

    @property
    def total_gross(self) -> Optional[float]:
        """Gross pay total of the latest period, if any gross pay was recorded."""
        stat = self._summary.get(GROSS_METRIC)
        return stat.total if stat else None

    def snapshot(self) -> MonitorView:
        """Capture all derived views."""
        return MonitorView(
            periods=self.periods,
            uploaded_files=self.uploaded_files,
            summary=self.summary,
            alerts=self.alerts,
            threshold=self.threshold,
            latest_period=self.latest_period,
            latest_employee_count=self.latest_employee_count,
            total_gross=self.total_gross,
        )
