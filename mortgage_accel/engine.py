"""Core calculation engine for the mortgage acceleration calculator.

This module implements the financial logic required to build amortization
schedules for a fixed-rate loan, both on the standard monthly plan and with
acceleration strategies applied: an extra amount every month, a bi-weekly
payment frequency, a one-time lump sum and a recurring annual extra payment.
Any combination of strategies is applied within the same pass.

Monthly and bi-weekly plans differ only in how a period advances and how
interest accrues over it. Both are expressed as a ``PeriodStepper`` so the
ledger loop and the extra-payment rules exist once.
"""

from __future__ import annotations

import logging
from datetime import date
from decimal import Decimal, getcontext
from typing import List, Optional

from .data_models import AccelerationOptions, LoanDefinition, PaymentRecord, ScheduleResult
from .utils import add_days, add_months, first_of_month, format_year_month, month_key

getcontext().prec = 28  # increase precision for financial calculations

logger = logging.getLogger(__name__)

# Balance at or below which the loan counts as repaid.
EPSILON = Decimal("0.01")

BIWEEKLY_PERIOD_DAYS = 14
DAYS_PER_YEAR = Decimal(365)

# Divides the extra monthly amount into a per-period amount in bi-weekly
# mode (26 periods / 12 months is 2.1667; 2.17 is the established value).
BIWEEKLY_EXTRA_DIVISOR = Decimal("2.17")

# Iteration caps, as multiples of the number of monthly periods in the term.
STANDARD_CEILING_FACTOR = 1
MONTHLY_CEILING_FACTOR = 2
BIWEEKLY_CEILING_FACTOR = 4


class AmortizationError(ValueError):
    """Base class for failures raised while building a schedule."""


class ScheduleCeilingError(AmortizationError):
    """The ledger loop hit its iteration cap with money still owed.

    This happens when the installment does not cover the interest accrued in
    a period (negative amortization), so the schedule would never end.
    """

    def __init__(self, ceiling: int, remaining_balance: Decimal) -> None:
        self.ceiling = ceiling
        self.remaining_balance = remaining_balance
        super().__init__(
            f"Loan not repaid after {ceiling} periods; "
            f"remaining balance {remaining_balance:.2f}"
        )


def compute_periodic_payment(principal: Decimal, annual_rate_percent: Decimal, term_years: int) -> Decimal:
    """Return the fixed monthly payment for a fully amortizing loan.

    The formula is:

        payment = P * (i * (1 + i)^n) / ((1 + i)^n - 1)

    where ``P`` is the principal, ``i`` is the monthly interest rate and
    ``n`` is the number of monthly payments. When the interest rate is zero,
    the payment is exactly ``P / n``.
    """
    term_months = term_years * 12
    if annual_rate_percent == 0:
        return principal / Decimal(term_months)
    rate_per_month = annual_rate_percent / Decimal(100) / Decimal(12)
    factor = (1 + rate_per_month) ** term_months
    return principal * (rate_per_month * factor) / (factor - 1)


class PeriodStepper:
    """Calendar and interest conventions of one payment frequency.

    Subclasses define the date of each period, the interest accrued on a
    balance over one period, the regular installment and how a monthly extra
    amount translates into a per-period amount.
    """

    biweekly = False

    def __init__(self, loan: LoanDefinition, monthly_payment: Decimal, ceiling_factor: int) -> None:
        self.loan = loan
        self.monthly_payment = monthly_payment
        self.ceiling = loan.term_months * ceiling_factor

    @property
    def installment(self) -> Decimal:
        raise NotImplementedError

    def period_date(self, sequence_number: int) -> date:
        raise NotImplementedError

    def interest(self, balance: Decimal) -> Decimal:
        raise NotImplementedError

    def prorate_extra_monthly(self, amount: Decimal) -> Decimal:
        raise NotImplementedError


class MonthlyStepper(PeriodStepper):
    """One period per calendar month, interest at ``rate / 12``."""

    def __init__(self, loan: LoanDefinition, monthly_payment: Decimal, ceiling_factor: int = STANDARD_CEILING_FACTOR) -> None:
        super().__init__(loan, monthly_payment, ceiling_factor)
        self.rate_per_month = loan.annual_rate_percent / Decimal(100) / Decimal(12)

    @property
    def installment(self) -> Decimal:
        return self.monthly_payment

    def period_date(self, sequence_number: int) -> date:
        return add_months(first_of_month(self.loan.start_period), sequence_number - 1)

    def interest(self, balance: Decimal) -> Decimal:
        return balance * self.rate_per_month

    def prorate_extra_monthly(self, amount: Decimal) -> Decimal:
        return amount


class BiweeklyStepper(PeriodStepper):
    """One period every 14 days, paying half the monthly payment.

    Interest uses simple daily accrual (``rate / 365`` per day, 14 days per
    period) rather than a rate derived from the monthly one.
    """

    biweekly = True

    def __init__(self, loan: LoanDefinition, monthly_payment: Decimal, ceiling_factor: int = BIWEEKLY_CEILING_FACTOR) -> None:
        super().__init__(loan, monthly_payment, ceiling_factor)
        self.daily_rate = loan.annual_rate_percent / Decimal(100) / DAYS_PER_YEAR

    @property
    def installment(self) -> Decimal:
        return self.monthly_payment / 2

    def period_date(self, sequence_number: int) -> date:
        return add_days(first_of_month(self.loan.start_period), BIWEEKLY_PERIOD_DAYS * (sequence_number - 1))

    def interest(self, balance: Decimal) -> Decimal:
        return balance * self.daily_rate * BIWEEKLY_PERIOD_DAYS

    def prorate_extra_monthly(self, amount: Decimal) -> Decimal:
        return amount / BIWEEKLY_EXTRA_DIVISOR


def _build_schedule(loan: LoanDefinition, stepper: PeriodStepper, options: AccelerationOptions) -> ScheduleResult:
    """Run the ledger loop for ``loan`` using ``stepper``'s conventions.

    The base principal (installment minus interest) is applied first and is
    capped at the balance; extra money then covers whatever balance remains,
    and anything beyond that is discarded. The loop stops right after the
    period that brings the balance to ``EPSILON`` or below.
    """
    balance = loan.principal
    cumulative_interest = Decimal("0")
    records: List[PaymentRecord] = []

    # Strategy state lives only for this pass.
    lump_sum_key: Optional[int] = None
    if options.lump_sum_amount > 0 and options.lump_sum_period is not None:
        lump_sum_key = month_key(options.lump_sum_period)
    lump_sum_applied = False

    sequence_number = 0
    while balance > EPSILON and sequence_number < stepper.ceiling:
        sequence_number += 1
        period = stepper.period_date(sequence_number)
        interest_payment = stepper.interest(balance)

        extra = Decimal("0")
        if options.extra_monthly_amount > 0:
            extra += stepper.prorate_extra_monthly(options.extra_monthly_amount)
        if not lump_sum_applied and lump_sum_key is not None and month_key(period) >= lump_sum_key:
            extra += options.lump_sum_amount
            lump_sum_applied = True
            logger.debug("Lump sum of %s applied in period %d (%s)", options.lump_sum_amount, sequence_number, period)
        if options.annual_extra_amount > 0 and period.month - 1 == options.annual_extra_month_index:
            previous = records[-1].period if records else None
            if previous is None or (previous.year, previous.month) != (period.year, period.month):
                extra += options.annual_extra_amount
                logger.debug("Annual extra of %s applied in period %d (%s)", options.annual_extra_amount, sequence_number, period)

        principal_payment = stepper.installment - interest_payment
        if principal_payment > balance:
            # Final payment
            principal_payment = balance
        extra_applied = max(Decimal("0"), min(extra, balance - principal_payment))

        balance -= principal_payment + extra_applied
        if balance < 0:
            balance = Decimal("0")
        cumulative_interest += interest_payment

        records.append(
            PaymentRecord(
                sequence_number=sequence_number,
                period=period,
                scheduled_payment=principal_payment + interest_payment,
                principal_portion=principal_payment,
                interest_portion=interest_payment,
                extra_applied=extra_applied,
                ending_balance=balance,
                cumulative_interest=cumulative_interest,
                biweekly=stepper.biweekly,
            )
        )

    if balance > EPSILON:
        logger.warning(
            "Schedule for principal %s at %s%% reached its ceiling of %d periods with %s outstanding",
            loan.principal,
            loan.annual_rate_percent,
            stepper.ceiling,
            balance,
        )
        raise ScheduleCeilingError(stepper.ceiling, balance)

    payoff_period = first_of_month(records[-1].period if records else loan.start_period)
    logger.debug(
        "Built %s schedule: %d payments, payoff %s, total interest %s",
        "bi-weekly" if stepper.biweekly else "monthly",
        len(records),
        format_year_month(payoff_period),
        cumulative_interest,
    )
    return ScheduleResult(
        records=tuple(records),
        periodic_payment=stepper.monthly_payment,
        total_interest=cumulative_interest,
        total_payment_count=len(records),
        payoff_period=payoff_period,
        biweekly=stepper.biweekly,
    )


def generate_standard_schedule(loan: LoanDefinition) -> ScheduleResult:
    """Compute the monthly amortization schedule with no acceleration.

    Parameters
    ----------
    loan: LoanDefinition
        The loan to amortize. Callers are expected to have validated it.

    Returns
    -------
    ScheduleResult
        One record per month until the balance is repaid. The schedule never
        exceeds ``loan.term_years * 12`` periods.

    Raises
    ------
    ScheduleCeilingError
        If the balance is still outstanding after the full term.
    """
    monthly_payment = compute_periodic_payment(loan.principal, loan.annual_rate_percent, loan.term_years)
    stepper = MonthlyStepper(loan, monthly_payment, STANDARD_CEILING_FACTOR)
    return _build_schedule(loan, stepper, AccelerationOptions())


def generate_accelerated_schedule(loan: LoanDefinition, options: AccelerationOptions) -> ScheduleResult:
    """Compute the schedule with every active acceleration strategy applied.

    With ``options.biweekly`` the ledger advances in 14-day periods paying
    half the monthly payment; otherwise it advances monthly. Strategies that
    cannot fire (a lump sum without a date, a month index outside 0-11) are
    ignored rather than rejected.

    Raises
    ------
    ScheduleCeilingError
        If the balance is still outstanding when the iteration cap is hit.
    """
    monthly_payment = compute_periodic_payment(loan.principal, loan.annual_rate_percent, loan.term_years)
    if options.biweekly:
        stepper: PeriodStepper = BiweeklyStepper(loan, monthly_payment, BIWEEKLY_CEILING_FACTOR)
    else:
        stepper = MonthlyStepper(loan, monthly_payment, MONTHLY_CEILING_FACTOR)
    return _build_schedule(loan, stepper, options)
