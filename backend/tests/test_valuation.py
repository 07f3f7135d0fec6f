from __future__ import annotations

from datetime import date, datetime, timedelta, timezone
from decimal import Decimal

import pytest

from backend.core.deposit import to_cents, valuate
from backend.models import InterestType

START = datetime(2020, 1, 1)


def years_after_start(years: float) -> datetime:
    return START + timedelta(days=365.25 * years)


def test_simple_interest_one_year(make_contract):
    contract = make_contract(interestType="simple")

    result = valuate(contract, years_after_start(1))

    assert result.currentValue == Decimal("1100.00")
    assert result.accruedInterest == Decimal("100.00")
    assert result.daysElapsed == 365
    assert result.monthsElapsed == 11
    assert result.yearsElapsed == Decimal("1.00")
    assert result.isMatured is False
    assert result.projectedMaturityValue is None


def test_compound_annual_two_years(make_contract):
    result = valuate(make_contract(), years_after_start(2))

    assert result.currentValue == Decimal("1210.00")
    assert result.accruedInterest == Decimal("210.00")


@pytest.mark.parametrize(
    "frequency, rate, expected",
    [
        ("monthly", "12", Decimal("1126.83")),  # 1000 * 1.01^12
        ("quarterly", "8", Decimal("1082.43")),  # 1000 * 1.02^4
        ("annually", "5", Decimal("1050.00")),
    ],
)
def test_compound_frequencies_over_one_year(make_contract, frequency, rate, expected):
    contract = make_contract(compoundingFrequency=frequency, annualRatePercent=rate)

    assert valuate(contract, years_after_start(1)).currentValue == expected


def test_more_frequent_compounding_grows_faster(make_contract):
    as_of = years_after_start(3)
    values = [
        valuate(make_contract(compoundingFrequency=frequency), as_of).currentValue
        for frequency in ("annually", "quarterly", "monthly", "daily")
    ]

    assert values == sorted(values)
    assert len(set(values)) == 4


@pytest.mark.parametrize("interest_type", [kind.value for kind in InterestType])
def test_zero_rate_keeps_principal(make_contract, interest_type):
    contract = make_contract(
        interestType=interest_type,
        annualRatePercent="0",
        progressiveSchedule=[{"durationMonths": 12, "ratePercent": "5"}],
        variableSchedule=[{"effectiveDate": "2020-06-01", "ratePercent": "5"}],
        tieredSchedule=[{"minBalance": "0", "ratePercent": "5"}],
    )

    result = valuate(contract, years_after_start(4))

    assert result.currentValue == Decimal("1000.00")
    assert result.accruedInterest == Decimal("0.00")


@pytest.mark.parametrize("principal", ["0", "-250"])
def test_non_positive_principal_is_flat(make_contract, principal):
    result = valuate(make_contract(principal=principal), years_after_start(2))

    assert result.currentValue == Decimal(principal)
    assert result.accruedInterest == Decimal("0.00")


def test_negative_rate_is_flat(make_contract):
    result = valuate(make_contract(annualRatePercent="-3"), years_after_start(2))

    assert result.currentValue == Decimal("1000.00")


def test_as_of_before_start_clamps_to_zero(make_contract):
    result = valuate(make_contract(), START - timedelta(days=40))

    assert result.daysElapsed == 0
    assert result.monthsElapsed == 0
    assert result.yearsElapsed == Decimal("0.00")
    assert result.currentValue == Decimal("1000.00")


def test_unknown_interest_type_is_valued_as_compound(make_contract):
    as_of = years_after_start(2.5)
    odd = make_contract(interestType="fixed-deluxe")

    assert odd.interestType == InterestType.COMPOUND
    assert valuate(odd, as_of) == valuate(make_contract(), as_of)


def test_accepts_plain_dates(make_contract):
    contract = make_contract(startDate=date(2020, 1, 1), maturityDate="2023-01-01")

    result = valuate(contract, date(2021, 1, 1))

    assert result.daysElapsed == 366
    assert result.isMatured is False
    assert result.projectedMaturityValue is not None


def test_accrued_interest_is_derived_from_rounded_value(make_contract):
    contract = make_contract(principal="1234.56", annualRatePercent="3.7", compoundingFrequency="monthly")

    result = valuate(contract, datetime(2023, 8, 17, 15, 30))

    assert result.accruedInterest == result.currentValue - Decimal("1234.56")


def test_valuation_does_not_depend_on_call_order(make_contract):
    contract = make_contract(compoundingFrequency="daily")
    first = valuate(contract, years_after_start(1))
    valuate(contract, years_after_start(9))

    assert valuate(contract, years_after_start(1)) == first


def test_half_cent_rounds_up(make_contract):
    # 1000 * (1 + 0.0005% * 1 year) = 1000.005
    contract = make_contract(interestType="simple", annualRatePercent="0.0005")

    assert valuate(contract, years_after_start(1)).currentValue == Decimal("1000.01")
    assert to_cents(Decimal("2.325")) == Decimal("2.33")
    assert to_cents(Decimal("-2.325")) == Decimal("-2.33")


def test_large_principal_is_rounded_without_losing_digits(make_contract):
    result = valuate(make_contract(principal="1e27"), years_after_start(1))

    assert result.currentValue == Decimal("1.1e27")
    assert result.accruedInterest == Decimal("1e26")


def test_sub_cent_principal_is_valued_in_whole_cents(make_contract):
    result = valuate(make_contract(principal="0.995", annualRatePercent="0"), years_after_start(3))

    assert result.currentValue == Decimal("1.00")
    assert result.accruedInterest == Decimal("0.00")


def test_offset_datetimes_are_compared_in_utc(make_contract):
    plus_two = timezone(timedelta(hours=2))
    contract = make_contract(startDate="2020-01-01T02:00:00+02:00")

    result = valuate(contract, datetime(2021, 1, 1, 2, 0, tzinfo=plus_two))

    assert contract.startDate == datetime(2020, 1, 1)
    assert result.daysElapsed == 366
    assert valuate(contract, datetime(2021, 1, 1, 1, 59, tzinfo=plus_two)).daysElapsed == 365
