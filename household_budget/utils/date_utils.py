"""Date manipulation utilities"""

from datetime import date, timedelta
from dateutil.relativedelta import relativedelta


def add_days(from_date: date, days: int) -> date:
    """Shift a date by a number of calendar days"""
    return from_date + timedelta(days=days)


def add_months(from_date: date, months: int) -> date:
    """Shift a date by calendar months, clamping to the last day of shorter months"""
    return from_date + relativedelta(months=months)


def days_between(start: date, end: date) -> int:
    """Whole days from start to end (negative when end is earlier)"""
    return (end - start).days


def months_between(start: date, end: date) -> int:
    """Calendar month difference, ignoring the day of month"""
    return (end.year - start.year) * 12 + (end.month - start.month)
