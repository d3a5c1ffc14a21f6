"""
Numeric coercion and variance calculation utilities.
"""

import math
from typing import Any, Optional

import pandas as pd


def to_number(value: Any) -> Optional[float]:
    """
    Coerce a raw cell value to a float.

    Args:
        value: Raw cell value from the decoded grid

    Returns:
        The numeric value, or None for null, NaN, booleans and text that
        does not parse as a number
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, str):
        value = value.strip().replace(",", "")
        if not value:
            return None
    try:
        if pd.isna(value):
            return None
        number = float(value)
    except (ValueError, TypeError):
        return None
    if math.isnan(number) or math.isinf(number):
        return None
    return number


def value_or_zero(value: Any) -> float:
    """Coerce a raw cell value, treating anything non-numeric as zero."""
    number = to_number(value)
    return number if number is not None else 0.0


def calculate_variance_percentage(current: float, previous: float) -> Optional[float]:
    """
    Calculate variance percentage between two values.

    Args:
        current: Current period value
        previous: Previous period value

    Returns:
        Variance percentage, or None when the previous value is not
        strictly positive
    """
    if previous <= 0:
        return None
    return ((current - previous) / previous) * 100


def calculate_variance_amount(current: float, previous: float) -> float:
    """Calculate absolute variance amount between two values."""
    return current - previous


def format_amount(value: Optional[float]) -> str:
    """Format an amount with thousands separators and two decimals."""
    if value is None:
        return "N/A"
    return f"{value:,.2f}"
