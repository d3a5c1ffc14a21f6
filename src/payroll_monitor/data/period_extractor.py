"""
Reporting period detection and chronological ordering of period labels.
"""

import calendar
import logging
import re
from typing import Any, Iterable, List, Optional, Tuple

logger = logging.getLogger(__name__)

UNKNOWN_PERIOD = "Unknown"

# e.g. "PAYROLL SUMMARY [March - 2024]"
TITLE_PATTERN = re.compile(r"\[(.*?)-\s*(\d{4})\]")
# DDMMYY run embedded in a file name, e.g. "payroll_310324.xlsx"
FILENAME_PATTERN = re.compile(r"(\d{2})(\d{2})(\d{2})")

MONTH_ABBREVIATIONS = list(calendar.month_abbr)[1:]

_MONTH_LOOKUP = {name.lower(): index for index, name in enumerate(calendar.month_name) if name}
_MONTH_LOOKUP.update({name.lower(): index for index, name in enumerate(calendar.month_abbr) if name})
_MONTH_LOOKUP["sept"] = 9


def extract_period(title: Any, file_name: Optional[str] = None) -> str:
    """
    Derive the canonical period label for an extract.

    The report title is tried first ("[March - 2024]" gives "March 2024"),
    then a DDMMYY run in the file name ("pay_310324.xlsx" gives "Mar 2024").
    Anything else lands in the "Unknown" bucket.

    The two paths spell months differently, so one month read once from a
    title and once from a file name gives two distinct periods that sort
    next to each other and are compared as a pair.

    Args:
        title: Raw title cell from the extract header block
        file_name: Original file name of the extract

    Returns:
        Period label
    """
    title_text = title if isinstance(title, str) else ""
    match = TITLE_PATTERN.search(title_text)
    if match:
        return f"{match.group(1).strip()} {match.group(2)}"

    period = _period_from_file_name(file_name)
    if period:
        logger.debug(f"Period for {file_name} taken from file name: {period}")
        return period

    logger.warning(f"Could not determine period from title {title_text!r} or file name {file_name!r}")
    return UNKNOWN_PERIOD


def _period_from_file_name(file_name: Optional[str]) -> Optional[str]:
    if not file_name:
        return None

    match = FILENAME_PATTERN.search(file_name)
    if not match:
        return None

    month_number = int(match.group(2))
    if not 1 <= month_number <= 12:
        return None
    return f"{MONTH_ABBREVIATIONS[month_number - 1]} 20{match.group(3)}"


def parse_period(label: str) -> Optional[Tuple[int, int]]:
    """
    Parse a "<Month> <YYYY>" label.

    Returns:
        (year, month) or None when the label is not a recognizable month
    """
    parts = label.split() if isinstance(label, str) else []
    if len(parts) != 2 or not re.fullmatch(r"\d{4}", parts[1]):
        return None

    month = _MONTH_LOOKUP.get(parts[0].rstrip(".").lower())
    if month is None:
        return None
    return int(parts[1]), month


def period_sort_key(label: str, ordering: str = "calendar") -> tuple:
    """
    Sort key for period labels.

    Calendar ordering sorts by (year, month); labels that do not parse
    (including "Unknown") sort before every real month. Lexicographic
    ordering is the plain string sort.
    """
    if ordering == "lexicographic":
        return (label,)

    parsed = parse_period(label)
    if parsed is None:
        return (0, 0, 0, label)
    return (1, parsed[0], parsed[1], label)


def sort_periods(labels: Iterable[str], ordering: str = "calendar") -> List[str]:
    """Return period labels in chronological order."""
    return sorted(labels, key=lambda label: period_sort_key(label, ordering))
