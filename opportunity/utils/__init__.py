"""
Utility functions for the opportunity engine.

Date, logging and formatting helpers.
"""

from opportunity.utils.datetime_utils import ensure_utc, subtract_months, utc_now
from opportunity.utils.formatters import format_money, format_progress_summary, format_rate
from opportunity.utils.logging import setup_logging

__all__ = [
    "ensure_utc",
    "utc_now",
    "subtract_months",
    "format_money",
    "format_rate",
    "format_progress_summary",
    "setup_logging",
]
