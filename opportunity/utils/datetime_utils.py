"""
Datetime utilities.

Provides timezone-aware datetime functions.
"""

import calendar
from datetime import UTC, datetime


def utc_now() -> datetime:
    """
    Get current UTC datetime with timezone info.

    Returns:
        Current datetime in UTC with timezone awareness
    """
    return datetime.now(UTC)


def subtract_months(moment: datetime, months: int) -> datetime:
    """
    Roll a datetime back by whole calendar months.

    Time of day and tzinfo are preserved. When the day does not exist in
    the target month it is clamped to that month's last day.

    Args:
        moment: Starting datetime
        months: Number of calendar months to go back (>= 0)

    Returns:
        Datetime N calendar months before moment

    Example:
        >>> subtract_months(datetime(2024, 3, 31, tzinfo=UTC), 1)
        datetime.datetime(2024, 2, 29, 0, 0, tzinfo=datetime.timezone.utc)
    """
    if months < 0:
        raise ValueError(f"months must be >= 0, got {months}")

    month_index = moment.year * 12 + (moment.month - 1) - months
    year, month = divmod(month_index, 12)
    month += 1
    last_day = calendar.monthrange(year, month)[1]
    return moment.replace(year=year, month=month, day=min(moment.day, last_day))


def ensure_utc(moment: datetime) -> datetime:
    """Attach UTC to a naive datetime; aware datetimes are returned unchanged."""
    if moment.tzinfo is None:
        return moment.replace(tzinfo=UTC)
    return moment
