"""
Period-over-period variance engine producing prioritized payroll alerts.
"""

import logging
from typing import Any, Dict, List, Mapping, Optional, Sequence
from dataclasses import dataclass
from enum import Enum

from ..config.settings import Settings
from ..config.payroll_fields import CODE_FIELD, NAME_FIELD
from ..data.models import EmployeeRecord
from ..data.normalizer import is_blank
from ..data.period_extractor import sort_periods
from ..utils.calculations import calculate_variance_amount, calculate_variance_percentage, value_or_zero


class AlertKind(Enum):
    """What an alert compares."""
    ORGANIZATION = "organization"
    EMPLOYEE = "employee"
    HEADCOUNT = "headcount"


class AlertSeverity(Enum):
    """Alert priority tiers."""
    HIGH = "high"
    MEDIUM = "medium"


class VarianceKind(Enum):
    NUMERIC = "numeric"
    NEW = "NEW"          # metric went from zero to a positive amount
    REMOVED = "REMOVED"  # metric went from a positive amount to zero


@dataclass(frozen=True)
class Variance:
    """Percentage change, or a marker for a metric appearing or disappearing."""
    kind: VarianceKind
    percent: Optional[float] = None

    @classmethod
    def numeric(cls, percent: float) -> "Variance":
        return cls(VarianceKind.NUMERIC, percent)

    @classmethod
    def new(cls) -> "Variance":
        return cls(VarianceKind.NEW)

    @classmethod
    def removed(cls) -> "Variance":
        return cls(VarianceKind.REMOVED)

    @property
    def is_sentinel(self) -> bool:
        return self.kind is not VarianceKind.NUMERIC

    def exceeds(self, threshold: float) -> bool:
        """Sentinels exceed every threshold."""
        return self.is_sentinel or abs(self.percent) >= threshold

    def __str__(self) -> str:
        if self.is_sentinel:
            return self.kind.value
        return f"{self.percent:.1f}"


@dataclass
class Alert:
    """A change flagged for review."""
    kind: AlertKind
    severity: AlertSeverity
    message: str
    current_period: str
    previous_period: str
    current_value: float
    previous_value: float
    metric: Optional[str] = None
    variance: Optional[Variance] = None
    employee_code: Any = None
    employee_name: Optional[str] = None
    headcount_delta: Optional[int] = None

    @property
    def is_high(self) -> bool:
        return self.severity is AlertSeverity.HIGH

    def to_dict(self) -> Dict[str, Any]:
        """Presentation form of the alert."""
        data = {
            'type': self.kind.value,
            'severity': self.severity.value,
            'message': self.message,
            'currentMonth': self.current_period,
            'previousMonth': self.previous_period,
        }
        if self.kind is AlertKind.HEADCOUNT:
            data['current'] = int(self.current_value)
            data['previous'] = int(self.previous_value)
            data['delta'] = self.headcount_delta
        else:
            data['metric'] = self.metric
            data['variance'] = str(self.variance)
            data['current'] = f"{self.current_value:.2f}"
            data['previous'] = f"{self.previous_value:.2f}"
        if self.kind is AlertKind.EMPLOYEE:
            data['employee'] = self.employee_name
            data['code'] = self.employee_code
        return data


class VarianceEngine:
    """Compares each pair of adjacent periods and ranks the resulting alerts."""

    def __init__(self, settings: Settings, metrics: Optional[List[str]] = None):
        self.settings = settings
        self.metrics = list(metrics) if metrics is not None else settings.alert_metrics
        self.organization_high = settings.get_severity_cutoff('organization_high')
        self.employee_high = settings.get_severity_cutoff('employee_high')
        self.headcount_high = settings.get_severity_cutoff('headcount_high')
        self.absolute_trigger = settings.get_severity_cutoff('employee_absolute_trigger')
        self.logger = logging.getLogger(__name__)

    def generate_alerts(self, dataset: Mapping[str, Sequence[EmployeeRecord]],
                        threshold: Optional[float] = None) -> List[Alert]:
        """
        Build the full, ordered alert list for a dataset.

        Args:
            dataset: Period label to employee records; never modified
            threshold: Minimum absolute variance percentage (defaults to the
                configured threshold)

        Returns:
            Alerts with high severity first, then most recent comparison first
        """
        if threshold is None:
            threshold = self.settings.variance_threshold

        periods = sort_periods(dataset, self.settings.period_ordering)
        if len(periods) < 2:
            return []

        alerts = []
        for previous_period, current_period in zip(periods, periods[1:]):
            previous = dataset[previous_period]
            current = dataset[current_period]

            alerts.extend(self._organization_alerts(current, previous, current_period, previous_period, threshold))
            alerts.extend(self._employee_alerts(current, previous, current_period, previous_period, threshold))

            headcount_alert = self._headcount_alert(current, previous, current_period, previous_period)
            if headcount_alert:
                alerts.append(headcount_alert)

        alerts = self._prioritize_alerts(alerts, periods)

        high_count = sum(1 for alert in alerts if alert.is_high)
        self.logger.info(f"Variance analysis over {len(periods)} periods at {threshold}%: "
                         f"{len(alerts)} alerts ({high_count} high)")
        return alerts

    def _organization_alerts(self, current: Sequence[EmployeeRecord], previous: Sequence[EmployeeRecord],
                             current_period: str, previous_period: str, threshold: float) -> List[Alert]:
        """Flag swings in metric totals across the whole roster."""
        alerts = []

        for metric in self.metrics:
            current_total = sum(value_or_zero(emp.get(metric)) for emp in current)
            previous_total = sum(value_or_zero(emp.get(metric)) for emp in previous)

            # No ratio without a positive base, so a metric appearing from zero is not flagged here
            variance_percent = calculate_variance_percentage(current_total, previous_total)
            if variance_percent is None or abs(variance_percent) < threshold:
                continue

            alerts.append(Alert(
                kind=AlertKind.ORGANIZATION,
                severity=AlertSeverity.HIGH if abs(variance_percent) >= self.organization_high else AlertSeverity.MEDIUM,
                message=f"{metric} changed by {variance_percent:.1f}% from {previous_period} to {current_period}",
                current_period=current_period,
                previous_period=previous_period,
                current_value=current_total,
                previous_value=previous_total,
                metric=metric,
                variance=Variance.numeric(variance_percent),
            ))

        return alerts

    def _employee_alerts(self, current: Sequence[EmployeeRecord], previous: Sequence[EmployeeRecord],
                         current_period: str, previous_period: str, threshold: float) -> List[Alert]:
        """Flag metric changes for employees present in both periods."""
        previous_by_code = {}
        for emp in previous:
            code = emp.get(CODE_FIELD)
            if not is_blank(code):
                previous_by_code.setdefault(code, emp)

        alerts = []
        for current_emp in current:
            code = current_emp.get(CODE_FIELD)
            if is_blank(code) or code not in previous_by_code:
                continue
            previous_emp = previous_by_code[code]

            for metric in self.metrics:
                current_value = value_or_zero(current_emp.get(metric))
                previous_value = value_or_zero(previous_emp.get(metric))

                if not self._should_check(current_value, previous_value, threshold):
                    continue

                variance = self._classify(current_value, previous_value)
                if variance is None or not variance.exceeds(threshold):
                    continue

                is_high = variance.is_sentinel or abs(variance.percent) >= self.employee_high
                alerts.append(Alert(
                    kind=AlertKind.EMPLOYEE,
                    severity=AlertSeverity.HIGH if is_high else AlertSeverity.MEDIUM,
                    message=self._employee_message(current_emp, metric, variance, current_period, previous_period),
                    current_period=current_period,
                    previous_period=previous_period,
                    current_value=current_value,
                    previous_value=previous_value,
                    metric=metric,
                    variance=variance,
                    employee_code=code,
                    employee_name=current_emp.get(NAME_FIELD),
                ))

        return alerts

    def _should_check(self, current_value: float, previous_value: float, threshold: float) -> bool:
        """Whether a change is large enough to classify."""
        if current_value == 0 and previous_value == 0:
            return False
        if abs(calculate_variance_amount(current_value, previous_value)) > self.absolute_trigger:
            return True
        variance_percent = calculate_variance_percentage(current_value, previous_value)
        return variance_percent is not None and abs(variance_percent) >= threshold

    def _classify(self, current_value: float, previous_value: float) -> Optional[Variance]:
        if previous_value == 0 and current_value > 0:
            return Variance.new()
        if previous_value > 0 and current_value == 0:
            return Variance.removed()
        if previous_value > 0:
            return Variance.numeric(calculate_variance_percentage(current_value, previous_value))
        # Negative or zero previous values have no meaningful ratio
        return None

    def _employee_message(self, employee: EmployeeRecord, metric: str, variance: Variance,
                          current_period: str, previous_period: str) -> str:
        who = f"{employee.get(NAME_FIELD)} ({employee.get(CODE_FIELD)})"
        if variance.kind is VarianceKind.NEW:
            return f"{who} - {metric} ADDED ({current_period})"
        if variance.kind is VarianceKind.REMOVED:
            return f"{who} - {metric} REMOVED ({current_period})"
        return f"{who} - {metric} changed by {variance}% ({previous_period} → {current_period})"

    def _headcount_alert(self, current: Sequence[EmployeeRecord], previous: Sequence[EmployeeRecord],
                         current_period: str, previous_period: str) -> Optional[Alert]:
        """Flag a change in the number of employees."""
        delta = len(current) - len(previous)
        if delta == 0:
            return None

        return Alert(
            kind=AlertKind.HEADCOUNT,
            severity=AlertSeverity.HIGH if abs(delta) >= self.headcount_high else AlertSeverity.MEDIUM,
            message=(f"Employee count changed by {delta:+d} from {previous_period} to {current_period} "
                     f"({len(previous)} → {len(current)})"),
            current_period=current_period,
            previous_period=previous_period,
            current_value=len(current),
            previous_value=len(previous),
            headcount_delta=delta,
        )

    def _prioritize_alerts(self, alerts: List[Alert], periods: List[str]) -> List[Alert]:
        """High severity first, then most recent period first; otherwise insertion order."""
        rank = {period: index for index, period in enumerate(periods)}
        return sorted(alerts, key=lambda alert: (not alert.is_high, -rank[alert.current_period]))


def filter_alerts(alerts: List[Alert], severity: Optional[AlertSeverity] = None,
                  kind: Optional[AlertKind] = None, period: Optional[str] = None) -> List[Alert]:
    """Filter alerts by severity, kind and/or current period, keeping order."""
    return [
        alert for alert in alerts
        if (severity is None or alert.severity is severity)
        and (kind is None or alert.kind is kind)
        and (period is None or alert.current_period == period)
    ]


def alerts_for_employee(alerts: List[Alert], code: Any) -> List[Alert]:
    """Employee alerts raised for one employee code."""
    return [alert for alert in alerts
            if alert.kind is AlertKind.EMPLOYEE and str(alert.employee_code) == str(code)]


def calculate_alert_stats(alerts: List[Alert]) -> Dict[str, Any]:
    """Count alerts by severity and by kind."""
    if not alerts:
        return {}

    return {
        'total_alerts': len(alerts),
        'by_severity': {severity.value: sum(1 for a in alerts if a.severity is severity) for severity in AlertSeverity},
        'by_kind': {kind.value: sum(1 for a in alerts if a.kind is kind) for kind in AlertKind},
        'employees_flagged': len({a.employee_code for a in alerts if a.kind is AlertKind.EMPLOYEE}),
    }
