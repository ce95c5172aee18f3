"""Input checks for callers of the engine.

The engine trusts its inputs. Front ends run these checks first and report
the messages back to the user. Each function returns a mapping of field name
to message; an empty mapping means the input is acceptable.
"""

from __future__ import annotations

from decimal import Decimal
from typing import Dict

from .data_models import AccelerationOptions, LoanDefinition

MIN_PRINCIPAL = Decimal("1000")
MAX_PRINCIPAL = Decimal("10000000")
MAX_RATE_PERCENT = Decimal("25")
MIN_TERM_YEARS = 1


def validate_loan(loan: LoanDefinition) -> Dict[str, str]:
    errors: Dict[str, str] = {}
    if loan.principal < MIN_PRINCIPAL:
        errors["principal"] = f"Loan amount must be at least {MIN_PRINCIPAL:,}"
    elif loan.principal > MAX_PRINCIPAL:
        errors["principal"] = f"Loan amount cannot exceed {MAX_PRINCIPAL:,}"

    if loan.annual_rate_percent < 0:
        errors["annual_rate_percent"] = "Interest rate cannot be negative"
    elif loan.annual_rate_percent > MAX_RATE_PERCENT:
        errors["annual_rate_percent"] = f"Interest rate cannot exceed {MAX_RATE_PERCENT}%"

    if loan.term_years < MIN_TERM_YEARS:
        errors["term_years"] = f"Loan term must be at least {MIN_TERM_YEARS} year"
    return errors


def validate_options(options: AccelerationOptions) -> Dict[str, str]:
    errors: Dict[str, str] = {}
    for name in ("extra_monthly_amount", "lump_sum_amount", "annual_extra_amount"):
        if getattr(options, name) < 0:
            errors[name] = "Amount cannot be negative"

    if options.lump_sum_amount > 0 and options.lump_sum_period is None:
        errors["lump_sum_period"] = "A lump sum needs the month it is paid"
    if options.annual_extra_amount > 0 and not 0 <= options.annual_extra_month_index <= 11:
        errors["annual_extra_month_index"] = "Month index must be between 0 and 11"
    return errors
