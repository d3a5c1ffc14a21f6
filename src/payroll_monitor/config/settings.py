"""
Application settings and configuration management.
"""

import os
import logging
from pathlib import Path
from typing import Dict, Any, List, Optional, Union
import yaml
from dotenv import load_dotenv

load_dotenv()

PERIOD_ORDERINGS = ("calendar", "lexicographic")


class Settings:
    """Application settings and configuration."""

    def __init__(self, config_file: Optional[Union[str, Path]] = None):
        self.project_root = Path(__file__).parent.parent.parent.parent
        self.config_dir = self.project_root / "config"
        self.config_file = Path(config_file) if config_file else self.config_dir / "monitor.yaml"
        self.logger = logging.getLogger(__name__)

        self.config: Dict[str, Any] = {}

        self._load_config()
        self._validate_config()

    def _load_config(self):
        """Load configuration from YAML with fallback to defaults."""
        self.config = self._load_yaml_config(
            self.config_file,
            self._default_config,
            "monitor configuration"
        )

    def _load_yaml_config(self, file_path: Path, default_func, config_name: str) -> Dict[str, Any]:
        """Load a YAML config file with fallback to defaults."""
        try:
            if file_path.exists():
                with open(file_path, 'r', encoding='utf-8') as f:
                    config = yaml.safe_load(f)
                    if config is None:
                        self.logger.warning(f"Empty {config_name} file, using defaults")
                        return default_func()
                    self.logger.info(f"Loaded {config_name} from {file_path}")
                    return config
            else:
                self.logger.warning(f"{config_name} file not found at {file_path}, using defaults")
                return default_func()
        except yaml.YAMLError as e:
            self.logger.error(f"Error parsing {config_name} YAML: {e}, using defaults")
            return default_func()
        except OSError as e:
            self.logger.error(f"Error loading {config_name}: {e}, using defaults")
            return default_func()

    def _validate_config(self):
        """Validate loaded configuration."""
        try:
            self._validate_thresholds()
            self._validate_severity()
            self._validate_metrics()
            self._validate_layout()

            if self.period_ordering not in PERIOD_ORDERINGS:
                raise ValueError(
                    f"period_ordering must be one of {PERIOD_ORDERINGS}, got {self.period_ordering!r}"
                )

            self.logger.info("Configuration validation completed successfully")

        except (ValueError, TypeError) as e:
            self.logger.error(f"Configuration validation failed: {e}")
            raise

    def _validate_thresholds(self):
        """Validate the default threshold against the allowed set."""
        for key in ['variance_threshold', 'allowed_thresholds']:
            if key not in self.config:
                raise ValueError(f"Missing required configuration key: {key}")

        allowed = self.config['allowed_thresholds']
        if not isinstance(allowed, list) or not allowed:
            raise ValueError("allowed_thresholds must be a non-empty list")

        self.validate_threshold(self.config['variance_threshold'])

    def _validate_severity(self):
        """Validate severity cutoffs."""
        severity = self.config.get('severity')
        if not isinstance(severity, dict):
            raise ValueError("Missing required section: severity")

        required_keys = ['organization_high', 'employee_high', 'headcount_high', 'employee_absolute_trigger']
        for key in required_keys:
            if key not in severity:
                raise ValueError(f"Missing required severity key: {key}")
            if isinstance(severity[key], bool) or not isinstance(severity[key], (int, float)):
                raise ValueError(f"Severity cutoff {key} must be numeric")

    def _validate_metrics(self):
        """Validate tracked metric lists."""
        metrics = self.config.get('metrics')
        if not isinstance(metrics, dict):
            raise ValueError("Missing required section: metrics")

        for key in ['summary', 'alerts']:
            if not isinstance(metrics.get(key), list):
                raise ValueError(f"metrics.{key} must be a list of field names")

    def _validate_layout(self):
        """Validate extract layout offsets."""
        layout = self.config.get('layout')
        if not isinstance(layout, dict):
            raise ValueError("Missing required section: layout")

        for key in ['title_row', 'title_col', 'header_row', 'data_start_row']:
            if not isinstance(layout.get(key), int) or layout[key] < 0:
                raise ValueError(f"layout.{key} must be a non-negative integer")

        if layout['data_start_row'] <= layout['header_row']:
            raise ValueError("layout.data_start_row must come after layout.header_row")

    def _default_config(self) -> Dict[str, Any]:
        """Default monitor configuration."""
        return {
            "variance_threshold": int(os.getenv("VARIANCE_THRESHOLD", "15")),
            "allowed_thresholds": [10, 15, 20, 25],
            "severity": {
                "organization_high": 25.0,
                "employee_high": 50.0,
                "headcount_high": 5,
                "employee_absolute_trigger": 500.0
            },
            "metrics": {
                "summary": ["Tot. Sal", "Add", "OT Amt", "Gross", "NettWgs", "PCB"],
                "alerts": ["Tot. Sal", "Add", "Gross", "NettWgs", "OT Amt"]
            },
            "layout": {
                "sheet": 0,
                "title_row": 2,
                "title_col": 0,
                "header_row": 6,
                "data_start_row": 8
            },
            "period_ordering": os.getenv("PERIOD_ORDERING", "calendar")
        }

    @property
    def variance_threshold(self) -> int:
        """Default alert threshold percentage."""
        return self.config["variance_threshold"]

    @property
    def allowed_thresholds(self) -> List[int]:
        return list(self.config["allowed_thresholds"])

    @property
    def period_ordering(self) -> str:
        return self.config.get("period_ordering", "calendar")

    @property
    def summary_metrics(self) -> List[str]:
        """Metrics aggregated by the summary calculator."""
        return list(self.config["metrics"]["summary"])

    @property
    def alert_metrics(self) -> List[str]:
        """Metrics compared between periods by the variance engine."""
        return list(self.config["metrics"]["alerts"])

    @property
    def layout(self) -> Dict[str, int]:
        return dict(self.config["layout"])

    def validate_threshold(self, value: Any) -> int:
        """
        Check a threshold against the allowed set.

        Args:
            value: Candidate threshold percentage

        Returns:
            The threshold as an int

        Raises:
            ValueError: If the value is not one of the allowed thresholds
        """
        allowed = self.config.get("allowed_thresholds", [])
        if isinstance(value, bool) or value not in allowed:
            raise ValueError(f"Variance threshold must be one of {allowed}, got {value!r}")
        return int(value)

    def get_severity_cutoff(self, name: str) -> float:
        """Get a severity cutoff by name (e.g. 'employee_high')."""
        return self.config["severity"][name]
