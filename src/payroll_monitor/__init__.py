"""
Payroll Variance Monitor

Ingests monthly payroll extracts and flags significant month-to-month
changes at organization and employee level for human review.
"""

__version__ = "1.0.0"
__author__ = "Your Organization"
