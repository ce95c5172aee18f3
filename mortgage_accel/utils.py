"""Utility functions for the mortgage acceleration calculator.

This module provides helpers for parsing user input into Python data types and
for handling dates: adding months or days, normalizing year-month strings to
``datetime.date`` instances and measuring the distance between two dates in
(approximate) months.
"""

from __future__ import annotations

from datetime import date, timedelta
from decimal import Decimal, ROUND_FLOOR, getcontext
import calendar

getcontext().prec = 28  # increase decimal precision to avoid rounding errors


def parse_year_month(ym: str) -> date:
    """Parse a YYYY-MM string into a ``date`` object (first day of month).

    Parameters
    ----------
    ym: str
        A string in the form ``"YYYY-MM"``. The day component, if present,
        will be ignored.

    Returns
    -------
    date
        A date object representing the first day of the specified month.

    Raises
    ------
    ValueError
        If the string is not a valid year-month.
    """
    try:
        parts = ym.strip().split("-")
        if len(parts) < 2:
            raise ValueError
        year = int(parts[0])
        month = int(parts[1])
        return date(year, month, 1)
    except (AttributeError, ValueError) as exc:
        raise ValueError(f"Invalid year-month string: {ym}") from exc


def first_of_month(dt: date) -> date:
    return dt.replace(day=1)


def add_months(dt: date, months: int) -> date:
    """Return a new date a number of months after ``dt``.

    The day of the month is clamped to the last valid day if needed (e.g.,
    adding one month to Jan 31 yields Feb 28 or 29).
    """
    year = dt.year + (dt.month - 1 + months) // 12
    month = (dt.month - 1 + months) % 12 + 1
    day = min(dt.day, calendar.monthrange(year, month)[1])
    return date(year, month, day)


def add_days(dt: date, days: int) -> date:
    return dt + timedelta(days=days)


def month_key(dt: date) -> int:
    """Return a sortable integer identifying the calendar month of ``dt``."""
    return dt.year * 12 + (dt.month - 1)


def format_year_month(dt: date) -> str:
    return dt.strftime("%Y-%m")


def approximate_months_between(later: date, earlier: date, days_per_month: Decimal) -> int:
    """Return the number of months from ``earlier`` to ``later``.

    The distance is measured in days and divided by ``days_per_month``, then
    rounded to the nearest integer with halves going up (-2.5 becomes -2).
    It is an approximation: two dates one calendar month apart may differ by
    28 to 31 days.
    """
    days = Decimal((later - earlier).days)
    return int((days / days_per_month + Decimal("0.5")).to_integral_value(rounding=ROUND_FLOOR))


def decimal_from_str(value: str) -> Decimal:
    """Convert a numeric string into a ``Decimal``.

    The function strips any commas and dollar signs and handles both integer
    and float-like strings. It raises ``ValueError`` if conversion fails.
    """
    try:
        cleaned = value.replace(",", "").replace("$", "").strip()
        return Decimal(cleaned)
    except Exception as exc:
        raise ValueError(f"Invalid numeric value: {value}") from exc
