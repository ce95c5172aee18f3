"""Data models for the mortgage acceleration calculator.

This module defines dataclasses representing the entities used by the
calculator: the loan definition, the acceleration options applied on top of
it, individual ledger rows and the result of a scheduling pass. The classes
are frozen so that a schedule handed to a caller cannot be altered after the
engine built it.
"""

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from typing import Dict, Optional, Tuple

from .utils import format_year_month


@dataclass(frozen=True)
class LoanDefinition:
    """A fully amortizing fixed-rate loan.

    Attributes
    ----------
    principal: Decimal
        The amount borrowed.
    annual_rate_percent: Decimal
        Annual nominal interest rate in percent (``Decimal("6")`` is 6 %).
    term_years: int
        Loan term in whole years. The engine uses ``term_years * 12``
        monthly periods.
    start_period: date
        The month of the first payment. Dates are normalized to the first
        day of the month when parsed.
    """

    principal: Decimal
    annual_rate_percent: Decimal
    term_years: int
    start_period: date

    @property
    def term_months(self) -> int:
        return self.term_years * 12


@dataclass(frozen=True)
class AccelerationOptions:
    """Strategies that pay a loan off ahead of schedule.

    Every strategy is an independent toggle and all active ones are applied
    in the same pass.

    Attributes
    ----------
    extra_monthly_amount: Decimal
        Added to every monthly payment. In bi-weekly mode it is pro-rated
        per bi-weekly period.
    biweekly: bool
        Pay half the monthly payment every 14 days instead of monthly.
    lump_sum_amount: Decimal
        One-time payment applied on the first period on or after
        ``lump_sum_period``.
    lump_sum_period: Optional[date]
        Month of the lump sum. Without it the lump sum never fires.
    annual_extra_amount: Decimal
        Paid once per calendar year in the month given by
        ``annual_extra_month_index``.
    annual_extra_month_index: int
        0 for January through 11 for December.
    """

    extra_monthly_amount: Decimal = Decimal("0")
    biweekly: bool = False
    lump_sum_amount: Decimal = Decimal("0")
    lump_sum_period: Optional[date] = None
    annual_extra_amount: Decimal = Decimal("0")
    annual_extra_month_index: int = 11

    @property
    def is_active(self) -> bool:
        return (
            self.extra_monthly_amount > 0
            or self.biweekly
            or self.lump_sum_amount > 0
            or self.annual_extra_amount > 0
        )


@dataclass(frozen=True)
class PaymentRecord:
    """One row of the repayment ledger.

    ``scheduled_payment`` is the regular installment for the period and
    always equals ``principal_portion + interest_portion``. Extra money
    applied to the balance in the same period is reported separately in
    ``extra_applied``; the cash paid in the period is ``total_payment``.
    """

    sequence_number: int
    period: date
    scheduled_payment: Decimal
    principal_portion: Decimal
    interest_portion: Decimal
    extra_applied: Decimal
    ending_balance: Decimal
    cumulative_interest: Decimal
    biweekly: bool = False

    @property
    def total_payment(self) -> Decimal:
        return self.scheduled_payment + self.extra_applied

    @property
    def period_label(self) -> str:
        if self.biweekly:
            return self.period.isoformat()
        return format_year_month(self.period)

    def as_export_row(self) -> Dict[str, object]:
        """Return the record keyed by the column names export layers use."""
        return {
            "payment_number": self.sequence_number,
            "date": self.period_label,
            "payment": float(self.scheduled_payment),
            "principal": float(self.principal_portion),
            "interest": float(self.interest_portion),
            "extra_payment": float(self.extra_applied),
            "balance": float(self.ending_balance),
            "cumulative_interest": float(self.cumulative_interest),
        }


@dataclass(frozen=True)
class ScheduleResult:
    """The ledger produced by one scheduling pass plus its totals."""

    records: Tuple[PaymentRecord, ...]
    periodic_payment: Decimal
    total_interest: Decimal
    total_payment_count: int
    payoff_period: date
    biweekly: bool = False

    @property
    def total_principal(self) -> Decimal:
        return sum((r.principal_portion for r in self.records), Decimal("0"))

    @property
    def total_extra(self) -> Decimal:
        return sum((r.extra_applied for r in self.records), Decimal("0"))

    @property
    def total_paid(self) -> Decimal:
        return sum((r.total_payment for r in self.records), Decimal("0"))

    def summary(self) -> Dict[str, object]:
        """Aggregate metrics in a JSON-serializable form."""
        return {
            "periodic_payment": float(self.periodic_payment),
            "payment_frequency": "biweekly" if self.biweekly else "monthly",
            "total_interest": float(self.total_interest),
            "total_extra": float(self.total_extra),
            "total_paid": float(self.total_paid),
            "total_payments": self.total_payment_count,
            "payoff_date": format_year_month(self.payoff_period),
        }


@dataclass(frozen=True)
class SavingsSummary:
    """Difference between a standard and an accelerated schedule."""

    months_saved: int
    years_saved: int
    remaining_months: int
    time_saved_text: str
    interest_saved: Decimal
    original_interest: Decimal = field(default=Decimal("0"))
    accelerated_interest: Decimal = field(default=Decimal("0"))

    def as_dict(self) -> Dict[str, object]:
        return {
            "months_saved": self.months_saved,
            "years_saved": self.years_saved,
            "remaining_months": self.remaining_months,
            "time_saved": self.time_saved_text,
            "interest_saved": float(self.interest_saved),
            "original_interest": float(self.original_interest),
            "accelerated_interest": float(self.accelerated_interest),
        }
