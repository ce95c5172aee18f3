"""Command-line interface for the mortgage acceleration calculator.

This module uses the ``click`` library to implement a multi-command
interface. Users can compute the monthly payment, print or export a full
amortization schedule (standard, or accelerated when any acceleration option
is given) and compare a standard schedule with an accelerated one to see how
much time and interest the acceleration saves.
"""

from __future__ import annotations

import csv
import json
import logging
import os
from decimal import Decimal
from pathlib import Path
from typing import Optional

import click

from .data_models import AccelerationOptions, LoanDefinition, ScheduleResult
from .engine import (
    AmortizationError,
    compute_periodic_payment,
    generate_accelerated_schedule,
    generate_standard_schedule,
)
from .formatter import print_savings, print_schedule, print_summary
from .savings import compare_schedules
from .utils import decimal_from_str, parse_year_month
from .validation import validate_loan, validate_options

LOG_LEVEL_ENV = "MORTGAGE_ACCEL_LOG_LEVEL"
MAX_ROWS_ENV = "MORTGAGE_ACCEL_MAX_ROWS"
DEFAULT_MAX_ROWS = 120

CSV_HEADER = [
    "Payment #",
    "Date",
    "Payment",
    "Principal",
    "Interest",
    "Extra Payment",
    "Balance",
    "Cumulative Interest",
]


def parse_amount(value: str) -> Decimal:
    """Parse a numeric string with optional suffixes.

    Accepts plain numbers ("300000") and shorthand with ``k``/``m`` suffixes
    (e.g., "300k" meaning 300_000).
    """
    value = value.strip().lower()
    factor = Decimal(1)
    if value.endswith("k"):
        factor = Decimal(1_000)
        value = value[:-1]
    elif value.endswith("m"):
        factor = Decimal(1_000_000)
        value = value[:-1]
    try:
        return decimal_from_str(value) * factor
    except ValueError:
        raise click.BadParameter(f"Invalid amount: {value}")


def _raise_for_errors(errors) -> None:
    if errors:
        message = "; ".join(f"{field}: {text}" for field, text in errors.items())
        raise click.BadParameter(message)


def build_loan_from_options(principal: str, rate: str, term: int, start_date: str) -> LoanDefinition:
    try:
        start = parse_year_month(start_date)
    except ValueError as exc:
        raise click.BadParameter(str(exc))
    try:
        rate_value = decimal_from_str(rate.rstrip("%"))
    except ValueError as exc:
        raise click.BadParameter(str(exc))
    loan = LoanDefinition(
        principal=parse_amount(principal),
        annual_rate_percent=rate_value,
        term_years=term,
        start_period=start,
    )
    _raise_for_errors(validate_loan(loan))
    return loan


def build_options_from_options(
    extra_monthly: Optional[str],
    biweekly: bool,
    lump_sum: Optional[str],
    lump_sum_date: Optional[str],
    annual_extra: Optional[str],
    annual_extra_month: int,
) -> AccelerationOptions:
    lump_sum_period = None
    if lump_sum_date:
        try:
            lump_sum_period = parse_year_month(lump_sum_date)
        except ValueError as exc:
            raise click.BadParameter(str(exc))
    options = AccelerationOptions(
        extra_monthly_amount=parse_amount(extra_monthly) if extra_monthly else Decimal("0"),
        biweekly=biweekly,
        lump_sum_amount=parse_amount(lump_sum) if lump_sum else Decimal("0"),
        lump_sum_period=lump_sum_period,
        annual_extra_amount=parse_amount(annual_extra) if annual_extra else Decimal("0"),
        # The command line counts months from 1, the engine from 0.
        annual_extra_month_index=annual_extra_month - 1,
    )
    _raise_for_errors(validate_options(options))
    return options


def export_to_json(path: Path, result: ScheduleResult) -> None:
    """Export schedule and summary to a JSON file."""
    data = {
        "summary": result.summary(),
        "schedule": [record.as_export_row() for record in result.records],
    }
    with path.open("w", encoding="utf-8") as f:
        json.dump(data, f, indent=2)


def export_to_csv(path: Path, result: ScheduleResult) -> None:
    """Export schedule to a CSV file."""
    with path.open("w", newline="", encoding="utf-8") as f:
        writer = csv.writer(f)
        writer.writerow(CSV_HEADER)
        for record in result.records:
            row = record.as_export_row()
            writer.writerow(
                [
                    row["payment_number"],
                    row["date"],
                    f"{record.scheduled_payment:.2f}",
                    f"{record.principal_portion:.2f}",
                    f"{record.interest_portion:.2f}",
                    f"{record.extra_applied:.2f}",
                    f"{record.ending_balance:.2f}",
                    f"{record.cumulative_interest:.2f}",
                ]
            )


def _max_rows() -> int:
    try:
        return int(os.environ.get(MAX_ROWS_ENV, DEFAULT_MAX_ROWS))
    except ValueError:
        raise click.ClickException(f"{MAX_ROWS_ENV} must be an integer")


def _loan_options(func):
    options = [
        click.option("--principal", "-p", "principal", required=True, help="Loan amount (e.g. 300000 or 300k)"),
        click.option("--rate", "-r", "rate", required=True, help="Annual interest rate (percent)"),
        click.option("--term", "-t", "term", required=True, type=int, help="Loan term in years"),
        click.option("--start-date", "-s", "start_date", required=True, help="First payment month (YYYY-MM)"),
    ]
    for option in reversed(options):
        func = option(func)
    return func


def _acceleration_options(func):
    options = [
        click.option("--extra-monthly", "extra_monthly", help="Extra amount paid every month"),
        click.option("--biweekly", "biweekly", is_flag=True, default=False, help="Pay half the monthly payment every two weeks"),
        click.option("--lump-sum", "lump_sum", help="One-time extra payment"),
        click.option("--lump-sum-date", "lump_sum_date", help="Month of the lump sum (YYYY-MM)"),
        click.option("--annual-extra", "annual_extra", help="Extra payment made once a year"),
        click.option(
            "--annual-extra-month",
            "annual_extra_month",
            type=click.IntRange(1, 12),
            default=12,
            show_default=True,
            help="Month of the annual extra payment (1-12)",
        ),
    ]
    for option in reversed(options):
        func = option(func)
    return func


@click.group()
@click.option("--verbose", "-v", is_flag=True, default=False, help="Enable debug logging")
def cli(verbose: bool) -> None:
    """A command-line mortgage calculator for payoff acceleration strategies."""
    level = "DEBUG" if verbose else os.environ.get(LOG_LEVEL_ENV, "WARNING").upper()
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s")


@cli.command()
@_loan_options
def payment(principal: str, rate: str, term: int, start_date: str) -> None:
    """Print the monthly payment for a loan."""
    loan = build_loan_from_options(principal, rate, term, start_date)
    amount = compute_periodic_payment(loan.principal, loan.annual_rate_percent, loan.term_years)
    click.echo(f"{amount:.2f}")


@cli.command()
@_loan_options
@_acceleration_options
@click.option("--output", "output", type=str, help="Output file path (.json or .csv)")
def schedule(
    principal: str,
    rate: str,
    term: int,
    start_date: str,
    extra_monthly: Optional[str],
    biweekly: bool,
    lump_sum: Optional[str],
    lump_sum_date: Optional[str],
    annual_extra: Optional[str],
    annual_extra_month: int,
    output: Optional[str],
) -> None:
    """Compute and print the amortization schedule.

    The accelerated schedule is built when any acceleration option is given,
    otherwise the standard one.
    """
    loan = build_loan_from_options(principal, rate, term, start_date)
    options = build_options_from_options(
        extra_monthly, biweekly, lump_sum, lump_sum_date, annual_extra, annual_extra_month
    )
    try:
        if options.is_active:
            result = generate_accelerated_schedule(loan, options)
        else:
            result = generate_standard_schedule(loan)
    except AmortizationError as exc:
        raise click.ClickException(str(exc))

    if output:
        path = Path(output)
        if path.suffix.lower() == ".json":
            export_to_json(path, result)
        elif path.suffix.lower() == ".csv":
            export_to_csv(path, result)
        else:
            raise click.BadParameter("Unsupported output format; use .json or .csv")
        click.echo(f"Schedule exported to {path}")
        return

    print_summary(result)
    max_rows = _max_rows()
    if len(result.records) > max_rows:
        click.echo(f"Schedule has {len(result.records)} rows; showing first {max_rows} rows.")
        print_schedule(result.records[:max_rows])
    else:
        print_schedule(result.records)


@cli.command()
@_loan_options
@_acceleration_options
@click.option("--output", "output", type=str, help="Output file path (.json)")
def compare(
    principal: str,
    rate: str,
    term: int,
    start_date: str,
    extra_monthly: Optional[str],
    biweekly: bool,
    lump_sum: Optional[str],
    lump_sum_date: Optional[str],
    annual_extra: Optional[str],
    annual_extra_month: int,
    output: Optional[str],
) -> None:
    """Compare the standard schedule with the accelerated one.

    Example:

        mortgage-accel compare -p 300k -r 6 -t 30 -s 2024-01 --extra-monthly 200
    """
    loan = build_loan_from_options(principal, rate, term, start_date)
    options = build_options_from_options(
        extra_monthly, biweekly, lump_sum, lump_sum_date, annual_extra, annual_extra_month
    )
    try:
        standard = generate_standard_schedule(loan)
        accelerated = generate_accelerated_schedule(loan, options)
    except AmortizationError as exc:
        raise click.ClickException(str(exc))
    savings = compare_schedules(standard, accelerated)

    if output:
        path = Path(output)
        if path.suffix.lower() != ".json":
            raise click.BadParameter("Comparison export must use .json extension")
        data = {
            "standard": standard.summary(),
            "accelerated": accelerated.summary(),
            "savings": savings.as_dict(),
        }
        with path.open("w", encoding="utf-8") as f:
            json.dump(data, f, indent=2)
        click.echo(f"Comparison exported to {path}")
        return

    print_summary(standard, title="Standard schedule")
    print_summary(accelerated, title="Accelerated schedule")
    print_savings(savings)


if __name__ == "__main__":
    cli()
