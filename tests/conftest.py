"""Shared fixtures for the engine tests.

Fixture loan: $300K at 6% for 30 years, first payment January 2024.
"""

from datetime import date
from decimal import Decimal

import pytest

from mortgage_accel.data_models import LoanDefinition


@pytest.fixture
def standard_loan() -> LoanDefinition:
    return LoanDefinition(
        principal=Decimal("300000"),
        annual_rate_percent=Decimal("6"),
        term_years=30,
        start_period=date(2024, 1, 1),
    )


@pytest.fixture
def small_loan() -> LoanDefinition:
    """$12K at 5% over one year."""
    return LoanDefinition(
        principal=Decimal("12000"),
        annual_rate_percent=Decimal("5"),
        term_years=1,
        start_period=date(2024, 1, 1),
    )
