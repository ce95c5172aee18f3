from collections import Counter
from datetime import date
from decimal import Decimal

import pytest

from mortgage_accel.data_models import AccelerationOptions
from mortgage_accel.engine import (
    BIWEEKLY_EXTRA_DIVISOR,
    EPSILON,
    generate_accelerated_schedule,
    generate_standard_schedule,
)


class TestExtraMonthly:
    def test_extra_shortens_schedule(self, standard_loan):
        standard = generate_standard_schedule(standard_loan)
        result = generate_accelerated_schedule(
            standard_loan, AccelerationOptions(extra_monthly_amount=Decimal("200"))
        )
        assert result.total_payment_count < 360
        assert result.total_interest < standard.total_interest
        assert result.records[0].extra_applied == Decimal("200")

    def test_no_options_matches_standard(self, standard_loan):
        standard = generate_standard_schedule(standard_loan)
        result = generate_accelerated_schedule(standard_loan, AccelerationOptions())
        assert result.total_payment_count == standard.total_payment_count
        assert result.total_interest == standard.total_interest

    def test_monotonic_in_extra_amount(self, standard_loan):
        previous = None
        for amount in ("0", "50", "200", "500", "2000"):
            result = generate_accelerated_schedule(
                standard_loan, AccelerationOptions(extra_monthly_amount=Decimal(amount))
            )
            if previous is not None:
                assert result.total_payment_count <= previous.total_payment_count
                assert result.total_interest <= previous.total_interest
            previous = result

    def test_extra_capped_at_remaining_balance(self, small_loan):
        result = generate_accelerated_schedule(
            small_loan, AccelerationOptions(extra_monthly_amount=Decimal("20000"))
        )
        assert result.total_payment_count == 1
        record = result.records[0]
        assert record.ending_balance <= EPSILON
        assert abs(record.principal_portion + record.extra_applied - small_loan.principal) < Decimal("0.000001")
        assert record.extra_applied < Decimal("20000")

    def test_ledger_invariants(self, standard_loan):
        options = AccelerationOptions(
            extra_monthly_amount=Decimal("300"),
            lump_sum_amount=Decimal("25000"),
            lump_sum_period=date(2030, 6, 1),
            annual_extra_amount=Decimal("2000"),
            annual_extra_month_index=5,
        )
        result = generate_accelerated_schedule(standard_loan, options)
        previous_balance = standard_loan.principal
        previous_interest = Decimal("0")
        for record in result.records:
            assert record.scheduled_payment == record.principal_portion + record.interest_portion
            expected = max(Decimal("0"), previous_balance - (record.principal_portion + record.extra_applied))
            assert abs(record.ending_balance - expected) < Decimal("0.000001")
            assert record.ending_balance >= 0
            assert record.cumulative_interest >= previous_interest
            assert record.total_payment == record.scheduled_payment + record.extra_applied
            previous_balance = record.ending_balance
            previous_interest = record.cumulative_interest
        assert result.records[-1].ending_balance <= EPSILON
        # No zero-balance rows after payoff.
        assert all(r.ending_balance > EPSILON for r in result.records[:-1])


class TestLumpSum:
    def test_lump_sum_applied_once(self, standard_loan):
        options = AccelerationOptions(lump_sum_amount=Decimal("10000"), lump_sum_period=date(2026, 1, 1))
        result = generate_accelerated_schedule(standard_loan, options)
        with_extra = [r for r in result.records if r.extra_applied > 0]
        assert len(with_extra) == 1
        record = with_extra[0]
        assert record.period == date(2026, 1, 1)
        assert record.sequence_number == 25
        assert record.extra_applied == Decimal("10000")
        previous = result.records[record.sequence_number - 2]
        drop = previous.ending_balance - record.ending_balance
        assert abs(drop - (record.principal_portion + Decimal("10000"))) < Decimal("0.000001")

    def test_lump_sum_with_extra_monthly(self, standard_loan):
        options = AccelerationOptions(
            extra_monthly_amount=Decimal("100"),
            lump_sum_amount=Decimal("10000"),
            lump_sum_period=date(2026, 1, 1),
        )
        result = generate_accelerated_schedule(standard_loan, options)
        assert result.records[24].extra_applied == Decimal("10100")
        assert result.records[25].extra_applied == Decimal("100")

    def test_lump_sum_before_start_fires_first_period(self, standard_loan):
        options = AccelerationOptions(lump_sum_amount=Decimal("5000"), lump_sum_period=date(2020, 1, 1))
        result = generate_accelerated_schedule(standard_loan, options)
        assert result.records[0].extra_applied == Decimal("5000")
        assert all(r.extra_applied == 0 for r in result.records[1:])

    def test_lump_sum_without_period_never_fires(self, standard_loan):
        options = AccelerationOptions(lump_sum_amount=Decimal("10000"))
        result = generate_accelerated_schedule(standard_loan, options)
        assert result.total_extra == 0
        assert result.total_payment_count == 360

    def test_lump_sum_after_payoff_never_fires(self, small_loan):
        options = AccelerationOptions(lump_sum_amount=Decimal("1000"), lump_sum_period=date(2040, 1, 1))
        result = generate_accelerated_schedule(small_loan, options)
        assert result.total_extra == 0


class TestAnnualExtra:
    def test_fires_once_a_year_in_chosen_month(self, standard_loan):
        options = AccelerationOptions(annual_extra_amount=Decimal("5000"), annual_extra_month_index=11)
        result = generate_accelerated_schedule(standard_loan, options)
        with_extra = [r for r in result.records if r.extra_applied > 0]
        assert [r.sequence_number for r in with_extra[:3]] == [12, 24, 36]
        assert all(r.period.month == 12 for r in with_extra)
        assert result.total_payment_count < 360

    def test_out_of_range_month_never_fires(self, standard_loan):
        options = AccelerationOptions(annual_extra_amount=Decimal("5000"), annual_extra_month_index=12)
        result = generate_accelerated_schedule(standard_loan, options)
        assert result.total_extra == 0


class TestBiweekly:
    def test_pays_off_sooner(self, standard_loan):
        standard = generate_standard_schedule(standard_loan)
        result = generate_accelerated_schedule(standard_loan, AccelerationOptions(biweekly=True))
        assert result.total_payment_count < standard_loan.term_years * 26
        assert result.payoff_period < standard.payoff_period
        assert result.total_interest < standard.total_interest
        assert result.biweekly

    def test_periods_are_fourteen_days_apart(self, standard_loan):
        records = generate_accelerated_schedule(standard_loan, AccelerationOptions(biweekly=True)).records
        assert records[0].period == date(2024, 1, 1)
        assert records[1].period == date(2024, 1, 15)
        assert records[2].period == date(2024, 1, 29)
        assert records[0].period_label == "2024-01-01"

    def test_half_payment_and_daily_interest(self, standard_loan):
        result = generate_accelerated_schedule(standard_loan, AccelerationOptions(biweekly=True))
        first = result.records[0]
        assert abs(first.scheduled_payment - result.periodic_payment / 2) < Decimal("0.000001")
        expected_interest = Decimal("300000") * Decimal("0.06") / Decimal(365) * 14
        assert abs(first.interest_portion - expected_interest) < Decimal("0.0001")

    def test_extra_monthly_prorated(self, standard_loan):
        options = AccelerationOptions(biweekly=True, extra_monthly_amount=Decimal("217"))
        result = generate_accelerated_schedule(standard_loan, options)
        assert result.records[0].extra_applied == Decimal("217") / BIWEEKLY_EXTRA_DIVISOR
        assert result.records[0].extra_applied == Decimal("100")

    def test_lump_sum_on_first_date_in_month(self, standard_loan):
        options = AccelerationOptions(
            biweekly=True, lump_sum_amount=Decimal("10000"), lump_sum_period=date(2024, 3, 1)
        )
        result = generate_accelerated_schedule(standard_loan, options)
        with_extra = [r for r in result.records if r.extra_applied > 0]
        assert len(with_extra) == 1
        assert with_extra[0].period == date(2024, 3, 11)
        assert with_extra[0].sequence_number == 6

    def test_annual_extra_once_per_year(self, standard_loan):
        options = AccelerationOptions(
            biweekly=True, annual_extra_amount=Decimal("3000"), annual_extra_month_index=0
        )
        result = generate_accelerated_schedule(standard_loan, options)
        with_extra = [r for r in result.records if r.extra_applied > 0]
        per_year = Counter(r.period.year for r in with_extra)
        assert with_extra
        assert all(count == 1 for count in per_year.values())
        assert all(r.period.month == 1 for r in with_extra)
        # The first January period of each year gets it.
        assert with_extra[0].period == date(2024, 1, 1)
        final_year = result.records[-1].period.year
        assert set(per_year) - {final_year} == {r.period.year for r in result.records} - {final_year}

    def test_payoff_period_is_last_record(self, standard_loan):
        result = generate_accelerated_schedule(standard_loan, AccelerationOptions(biweekly=True))
        assert result.payoff_period == result.records[-1].period.replace(day=1)
        assert result.records[-1].ending_balance <= EPSILON
        assert result.summary()["payment_frequency"] == "biweekly"


@pytest.mark.parametrize("biweekly", [False, True])
def test_accelerated_idempotent(standard_loan, biweekly):
    options = AccelerationOptions(
        biweekly=biweekly,
        extra_monthly_amount=Decimal("150"),
        lump_sum_amount=Decimal("5000"),
        lump_sum_period=date(2027, 7, 1),
    )
    assert generate_accelerated_schedule(standard_loan, options) == generate_accelerated_schedule(
        standard_loan, options
    )
