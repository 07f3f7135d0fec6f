"""Yield, annuity, tax and display helpers built on top of a deposit valuation."""

from __future__ import annotations

from decimal import Decimal, InvalidOperation, Overflow
from typing import Dict, Union

from backend.core.deposit import DepositValuation, to_cents

Number = Union[Decimal, int, float, str]


def _dec(value: Number) -> Decimal:
    # str() first so floats keep their printed value instead of binary noise
    return value if isinstance(value, Decimal) else Decimal(str(value))


def calculate_apy(principal: Number, final_value: Number, years: Number) -> Decimal:
    """Annual percentage yield implied by growing principal into final_value over years."""
    principal, final_value, years = _dec(principal), _dec(final_value), _dec(years)
    if years <= 0 or principal <= 0 or final_value < 0:
        return Decimal("0.00")
    try:
        apy = ((final_value / principal) ** (1 / years) - 1) * 100
    except (InvalidOperation, Overflow):
        # tiny spans blow the annualised ratio past what Decimal can hold
        return Decimal("0.00")
    return to_cents(apy)


def monthly_interest_rate(annual_rate_percent: Number) -> Decimal:
    return _dec(annual_rate_percent) / 12 / 100


def recurring_deposit_future_value(
    monthly_amount: Number,
    annual_rate_percent: Number,
    months: int,
) -> Decimal:
    """Future value of an ordinary annuity: a payment at the end of every month."""
    monthly_amount = _dec(monthly_amount)
    months = max(0, int(months))
    monthly_rate = monthly_interest_rate(annual_rate_percent)

    if monthly_rate == 0:
        return to_cents(monthly_amount * months)
    future_value = monthly_amount * ((1 + monthly_rate) ** months - 1) / monthly_rate
    return to_cents(future_value)


def effective_annual_rate(nominal_rate: Number, periods_per_year: int) -> Decimal:
    """(1 + r/n)^n - 1, with r and the result as fractions (0.05 means 5%)."""
    if periods_per_year <= 0:
        return _dec(nominal_rate)
    return (1 + _dec(nominal_rate) / periods_per_year) ** periods_per_year - 1


def after_tax_interest(accrued_interest: Number, tax_rate_percent: Number) -> Dict[str, Decimal]:
    gross = _dec(accrued_interest)
    tax_rate = _dec(tax_rate_percent)

    # losses and empty tax settings are passed through untaxed
    if gross <= 0 or tax_rate <= 0:
        return {
            "grossInterest": to_cents(gross),
            "taxAmount": Decimal("0.00"),
            "netInterest": to_cents(gross),
            "taxRate": Decimal(0),
        }

    tax_amount = to_cents(gross * tax_rate / 100)
    return {
        "grossInterest": to_cents(gross),
        "taxAmount": tax_amount,
        "netInterest": to_cents(gross) - tax_amount,
        "taxRate": tax_rate,
    }


def _plural(count: int, unit: str) -> str:
    return f"{count} {unit}{'' if count == 1 else 's'}"


def format_duration(valuation: DepositValuation) -> str:
    years_elapsed = valuation.yearsElapsed

    if years_elapsed >= 1:
        years = int(years_elapsed)
        remaining_months = int((years_elapsed - years) * 12)
        if remaining_months > 0:
            return f"{_plural(years, 'year')}, {_plural(remaining_months, 'month')}"
        return _plural(years, "year")
    if valuation.monthsElapsed >= 1:
        return _plural(valuation.monthsElapsed, "month")
    return _plural(valuation.daysElapsed, "day")


def classify_status(valuation: DepositValuation) -> str:
    if valuation.isMatured:
        return "Matured"
    if valuation.yearsElapsed < Decimal("0.1"):
        return "Recently Started"
    return "Active"


__all__ = [
    "calculate_apy",
    "monthly_interest_rate",
    "recurring_deposit_future_value",
    "effective_annual_rate",
    "after_tax_interest",
    "format_duration",
    "classify_status",
]
