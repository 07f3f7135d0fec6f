"""Deposit valuation engine.

Values a fixed-principal deposit under one of five interest regimes
(simple, compound, progressive, variable, tiered) at a caller-supplied
instant, clamps growth at maturity and projects the value at maturity
with the same regime.

Every function here is pure: no clock, no I/O, no shared state, and no
exceptions for incomplete input. Missing schedules fall back to compound
interest at the base rate; non-positive principal or rate values the
deposit flat at its principal.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, datetime
from decimal import ROUND_HALF_UP, Decimal, localcontext
from typing import Callable, Dict, Optional, Tuple, Type, Union

from pydantic import BaseModel, ConfigDict

from backend.models import (
    BalanceTier,
    CompoundingFrequency,
    DepositContract,
    InterestType,
    ProgressiveStage,
    VariableRateChange,
    as_naive_datetime,
)

logger = logging.getLogger(__name__)

DAYS_PER_MONTH = Decimal("30.44")
DAYS_PER_YEAR = Decimal("365.25")
MONTHS_PER_YEAR = 12
CENT = Decimal("0.01")

_SECONDS_PER_DAY = Decimal(86400)
_MICROSECONDS_PER_DAY = Decimal(86400 * 10**6)


def to_cents(value: Decimal) -> Decimal:
    with localcontext() as ctx:
        # room for every integer digit plus the two cents digits
        ctx.prec = max(ctx.prec, value.adjusted() + 4)
        return value.quantize(CENT, rounding=ROUND_HALF_UP)


# -----------------------------
# Time math
# -----------------------------


@dataclass(frozen=True)
class Span:
    """A [start, end] window measured the way deposits count time.

    days/months are floored counts for display; years is the exact
    fraction (365.25-day year) used for growth."""

    start: datetime
    end: datetime
    days: int
    months: int
    years: Decimal


def measure_span(start: datetime, end: datetime) -> Span:
    if end < start:
        end = start
    delta = end - start
    exact_days = (
        Decimal(delta.days)
        + Decimal(delta.seconds) / _SECONDS_PER_DAY
        + Decimal(delta.microseconds) / _MICROSECONDS_PER_DAY
    )
    days = delta.days
    months = int(Decimal(days) / DAYS_PER_MONTH)
    return Span(start=start, end=end, days=days, months=months, years=exact_days / DAYS_PER_YEAR)


# -----------------------------
# Regimes (one variant per interest type)
# -----------------------------


@dataclass(frozen=True)
class SimpleRegime:
    rate: Decimal


@dataclass(frozen=True)
class CompoundRegime:
    rate: Decimal
    frequency: CompoundingFrequency


@dataclass(frozen=True)
class ProgressiveRegime:
    rate: Decimal
    frequency: CompoundingFrequency
    stages: Optional[Tuple[ProgressiveStage, ...]] = None


@dataclass(frozen=True)
class VariableRegime:
    rate: Decimal
    frequency: CompoundingFrequency
    changes: Optional[Tuple[VariableRateChange, ...]] = None


@dataclass(frozen=True)
class TieredRegime:
    rate: Decimal
    frequency: CompoundingFrequency
    tiers: Optional[Tuple[BalanceTier, ...]] = None


Regime = Union[SimpleRegime, CompoundRegime, ProgressiveRegime, VariableRegime, TieredRegime]


def _sorted_rows(rows, key):
    if not rows:
        return None
    return tuple(sorted(rows, key=key))


def regime_for(contract: DepositContract) -> Regime:
    """Build the regime variant for a contract, schedules sorted and empty ones dropped."""
    rate = contract.annualRatePercent
    frequency = contract.compoundingFrequency
    kind = contract.interestType

    if kind == InterestType.SIMPLE:
        return SimpleRegime(rate=rate)
    if kind == InterestType.PROGRESSIVE:
        stages = _sorted_rows(contract.progressiveSchedule, key=lambda stage: stage.durationMonths)
        return ProgressiveRegime(rate=rate, frequency=frequency, stages=stages)
    if kind == InterestType.VARIABLE:
        changes = _sorted_rows(contract.variableSchedule, key=lambda change: change.effectiveDate)
        return VariableRegime(rate=rate, frequency=frequency, changes=changes)
    if kind == InterestType.TIERED:
        tiers = _sorted_rows(contract.tieredSchedule, key=lambda tier: tier.minBalance)
        return TieredRegime(rate=rate, frequency=frequency, tiers=tiers)
    return CompoundRegime(rate=rate, frequency=frequency)


# -----------------------------
# Regime calculators
# -----------------------------


def simple_value(principal: Decimal, rate: Decimal, years: Decimal) -> Decimal:
    return principal * (1 + rate / 100 * years)


def compound_value(
    principal: Decimal,
    rate: Decimal,
    frequency: CompoundingFrequency,
    years: Decimal,
) -> Decimal:
    """A = P(1 + r/n)^(nt)"""
    periods = frequency.periods_per_year
    factor = 1 + rate / 100 / periods
    if factor <= 0:
        # a rate of -100% per period or worse wipes the deposit out
        return Decimal(0)
    return principal * factor ** (periods * years)


def _simple(principal: Decimal, regime: SimpleRegime, span: Span) -> Decimal:
    return simple_value(principal, regime.rate, span.years)


def _compound(principal: Decimal, regime: CompoundRegime, span: Span) -> Decimal:
    return compound_value(principal, regime.rate, regime.frequency, span.years)


def _progressive(principal: Decimal, regime: ProgressiveRegime, span: Span) -> Decimal:
    if not regime.stages:
        return compound_value(principal, regime.rate, regime.frequency, span.years)

    value = principal
    remaining = span.months

    for stage in regime.stages:
        if remaining <= 0:
            break
        months_at_rate = min(remaining, stage.durationMonths)
        if months_at_rate <= 0:
            continue

        stage_rate = stage.ratePercent / 100
        if regime.frequency == CompoundingFrequency.MONTHLY:
            value *= (1 + stage_rate / MONTHS_PER_YEAR) ** months_at_rate
        else:
            value *= 1 + stage_rate * Decimal(months_at_rate) / MONTHS_PER_YEAR

        remaining -= months_at_rate

    return value


def _variable(principal: Decimal, regime: VariableRegime, span: Span) -> Decimal:
    if not regime.changes:
        return compound_value(principal, regime.rate, regime.frequency, span.years)

    def interest_between(rate: Decimal, start: datetime, end: datetime) -> Decimal:
        years = measure_span(start, end).years
        return compound_value(principal, rate, regime.frequency, years) - principal

    value = principal
    rate = regime.rate
    cursor = span.start

    for change in regime.changes:
        if change.effectiveDate <= span.start:
            # already in force when the deposit opened
            rate = change.ratePercent
            continue
        if change.effectiveDate >= span.end:
            break
        value += interest_between(rate, cursor, change.effectiveDate)
        cursor = change.effectiveDate
        rate = change.ratePercent

    if cursor < span.end:
        value += interest_between(rate, cursor, span.end)

    return value


def select_tier(principal: Decimal, tiers: Tuple[BalanceTier, ...]) -> BalanceTier:
    """First tier containing the principal, else the highest tier."""
    for tier in tiers:
        if tier.contains(principal):
            return tier
    return tiers[-1]


def _tiered(principal: Decimal, regime: TieredRegime, span: Span) -> Decimal:
    if not regime.tiers:
        return compound_value(principal, regime.rate, regime.frequency, span.years)
    tier = select_tier(principal, regime.tiers)
    return compound_value(principal, tier.ratePercent, regime.frequency, span.years)


_CALCULATORS: Dict[Type, Callable[..., Decimal]] = {
    SimpleRegime: _simple,
    CompoundRegime: _compound,
    ProgressiveRegime: _progressive,
    VariableRegime: _variable,
    TieredRegime: _tiered,
}


def grow(principal: Decimal, regime: Regime, span: Span) -> Decimal:
    """Unrounded value of the deposit at span.end under the given regime."""
    if principal <= 0 or regime.rate <= 0:
        return principal
    return _CALCULATORS[type(regime)](principal, regime, span)


# -----------------------------
# Valuation
# -----------------------------


class DepositValuation(BaseModel):
    model_config = ConfigDict(frozen=True)

    currentValue: Decimal
    accruedInterest: Decimal
    daysElapsed: int
    monthsElapsed: int
    yearsElapsed: Decimal
    isMatured: bool
    projectedMaturityValue: Optional[Decimal] = None


def valuate(contract: DepositContract, as_of: Union[date, datetime]) -> DepositValuation:
    """Value the deposit at as_of.

    Once the maturity date has passed, growth is measured up to maturity only.
    While it is still ahead, projectedMaturityValue holds the value the same
    regime gives at maturity.
    """
    as_of = as_naive_datetime(as_of)
    start = contract.startDate
    maturity = contract.maturityDate
    regime = regime_for(contract)
    # valued in whole cents so accruedInterest is exactly currentValue - principal
    principal = to_cents(contract.principal)

    elapsed = measure_span(start, as_of)
    is_matured = maturity is not None and as_of >= maturity
    effective = measure_span(start, maturity) if is_matured else elapsed

    current = to_cents(grow(principal, regime, effective))

    projected: Optional[Decimal] = None
    if maturity is not None and not is_matured:
        projected = to_cents(grow(principal, regime, measure_span(start, maturity)))

    valuation = DepositValuation(
        currentValue=current,
        accruedInterest=to_cents(current - principal),
        daysElapsed=elapsed.days,
        monthsElapsed=elapsed.months,
        yearsElapsed=to_cents(Decimal(elapsed.days) / DAYS_PER_YEAR),
        isMatured=is_matured,
        projectedMaturityValue=projected,
    )
    logger.debug(
        "valued %s deposit of %s at %s: %s (matured=%s)",
        contract.interestType.value,
        principal,
        as_of.isoformat(),
        valuation.currentValue,
        is_matured,
    )
    return valuation


__all__ = [
    "DAYS_PER_MONTH",
    "DAYS_PER_YEAR",
    "Span",
    "measure_span",
    "SimpleRegime",
    "CompoundRegime",
    "ProgressiveRegime",
    "VariableRegime",
    "TieredRegime",
    "Regime",
    "regime_for",
    "simple_value",
    "compound_value",
    "select_tier",
    "grow",
    "DepositValuation",
    "valuate",
    "to_cents",
]
