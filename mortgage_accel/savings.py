"""Comparison of a standard schedule against an accelerated one."""

from __future__ import annotations

from decimal import Decimal

from .data_models import SavingsSummary, ScheduleResult
from .utils import approximate_months_between, first_of_month

# Average days per calendar month used to turn a date difference into months.
DAYS_PER_MONTH = Decimal("30.44")


def _plural(count: int, unit: str) -> str:
    return f"{count} {unit}{'' if count == 1 else 's'}"


def format_time_saved(years: int, months: int) -> str:
    """Return e.g. ``"5 years, 1 month"``, or ``"No time saved"``."""
    if years > 0:
        text = _plural(years, "year")
        if months > 0:
            text += f", {_plural(months, 'month')}"
        return text
    if months > 0:
        return _plural(months, "month")
    return "No time saved"


def compare_schedules(standard: ScheduleResult, accelerated: ScheduleResult) -> SavingsSummary:
    """Return the time and interest saved by ``accelerated`` over ``standard``.

    Months saved come from the number of days between the two payoff dates
    divided by 30.44, rounded half up, so they may be off by one from an
    exact count of calendar months. Interest saved is negative when the
    accelerated schedule costs more; that is reported as is.
    """
    months_saved = approximate_months_between(
        first_of_month(standard.payoff_period), first_of_month(accelerated.payoff_period), DAYS_PER_MONTH
    )
    years_saved, remaining_months = divmod(months_saved, 12)
    if months_saved > 0:
        text = format_time_saved(years_saved, remaining_months)
    else:
        text = format_time_saved(0, 0)
    return SavingsSummary(
        months_saved=months_saved,
        years_saved=years_saved,
        remaining_months=remaining_months,
        time_saved_text=text,
        interest_saved=standard.total_interest - accelerated.total_interest,
        original_interest=standard.total_interest,
        accelerated_interest=accelerated.total_interest,
    )
