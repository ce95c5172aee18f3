"""Output helpers for the mortgage acceleration calculator.

This module provides simple functions to render schedules, their summaries
and the savings between two schedules in a tabular text format. We rely only
on built-in printing and string formatting.
"""

from __future__ import annotations

from typing import Iterable

from .data_models import PaymentRecord, SavingsSummary, ScheduleResult


def print_summary(result: ScheduleResult, title: str = "Summary") -> None:
    """Print a summary of schedule metrics in a human-readable format."""
    summary = result.summary()
    print(title)
    print("-" * 72)
    print(f"Monthly payment    : {summary['periodic_payment']:.2f}")
    print(f"Frequency          : {summary['payment_frequency']}")
    print(f"Total interest     : {summary['total_interest']:.2f}")
    if summary["total_extra"]:
        print(f"Total extra paid   : {summary['total_extra']:.2f}")
    print(f"Total paid         : {summary['total_paid']:.2f}")
    print(f"Payments made      : {summary['total_payments']}")
    print(f"Payoff date        : {summary['payoff_date']}")
    print("-" * 72)


def print_schedule(records: Iterable[PaymentRecord]) -> None:
    """Print the payment ledger as a simple table."""
    headers = [
        "No",
        "Date",
        "Payment",
        "Principal",
        "Interest",
        "Extra",
        "Balance",
        "CumInterest",
    ]
    print("\t".join(headers))
    for record in records:
        row = [
            str(record.sequence_number),
            record.period_label,
            f"{record.scheduled_payment:.2f}",
            f"{record.principal_portion:.2f}",
            f"{record.interest_portion:.2f}",
            f"{record.extra_applied:.2f}",
            f"{record.ending_balance:.2f}",
            f"{record.cumulative_interest:.2f}",
        ]
        print("\t".join(row))


def print_savings(savings: SavingsSummary) -> None:
    """Print the time and interest saved by the accelerated schedule.

    A negative interest figure means the accelerated schedule costs more.
    """
    print("Savings")
    print("=" * 72)
    print(f"Time saved         : {savings.time_saved_text}")
    print(f"Original interest  : {savings.original_interest:.2f}")
    print(f"Accelerated int.   : {savings.accelerated_interest:.2f}")
    print(f"Interest saved     : {savings.interest_saved:.2f}")
    print("=" * 72)
