"""
Logging configuration for the payroll variance monitor.
"""

import logging
import sys
from pathlib import Path
from typing import Optional
import colorama
from colorama import Fore, Style

colorama.init()

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
DATE_FORMAT = '%Y-%m-%d %H:%M:%S'

# Loggers that only add noise at INFO while workbooks are read and written
QUIET_LOGGERS = ('openpyxl', 'xlsxwriter', 'pandas')


class ColoredFormatter(logging.Formatter):
    """
    Console formatter that colours the level name.

    Records logged with ``extra={"alert_severity": ...}`` also get their
    message coloured by alert severity, so high alerts stand out in a long
    batch log.
    """

    COLORS = {
        'DEBUG': Fore.CYAN,
        'INFO': Fore.GREEN,
        'WARNING': Fore.YELLOW,
        'ERROR': Fore.RED,
        'CRITICAL': Fore.RED + Style.BRIGHT,
    }

    SEVERITY_COLORS = {
        'high': Fore.RED + Style.BRIGHT,
        'medium': Fore.YELLOW,
    }

    def format(self, record):
        record = logging.makeLogRecord(record.__dict__)
        record.levelname = f"{self.COLORS.get(record.levelname, '')}{record.levelname}{Style.RESET_ALL}"

        severity_color = self.SEVERITY_COLORS.get(getattr(record, 'alert_severity', None))
        if severity_color:
            record.msg = f"{severity_color}{record.getMessage()}{Style.RESET_ALL}"
            record.args = None
        return super().format(record)


def setup_logging(log_level: str = "INFO", log_file: Optional[str] = None) -> None:
    """
    Setup logging configuration.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_file: Optional log file path
    """
    numeric_level = getattr(logging, log_level.upper(), logging.INFO)

    if log_file:
        Path(log_file).parent.mkdir(parents=True, exist_ok=True)

    root_logger = logging.getLogger()
    root_logger.setLevel(numeric_level)
    root_logger.handlers.clear()

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(numeric_level)
    console_handler.setFormatter(ColoredFormatter(LOG_FORMAT, datefmt=DATE_FORMAT))
    root_logger.addHandler(console_handler)

    # File output stays uncoloured
    if log_file:
        file_handler = logging.FileHandler(log_file, mode='a', encoding='utf-8')
        file_handler.setLevel(numeric_level)
        file_handler.setFormatter(logging.Formatter(
            LOG_FORMAT + ' - [%(filename)s:%(lineno)d]', datefmt=DATE_FORMAT
        ))
        root_logger.addHandler(file_handler)

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    logger = logging.getLogger(__name__)
    logger.info(f"Logging configured - Level: {log_level}")
    if log_file:
        logger.info(f"Log file: {log_file}")
