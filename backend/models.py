from __future__ import annotations

from datetime import date, datetime, time, timezone
from decimal import Decimal
from enum import Enum
from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, field_validator


class InterestType(str, Enum):
    SIMPLE = "simple"
    COMPOUND = "compound"
    PROGRESSIVE = "progressive"
    VARIABLE = "variable"
    TIERED = "tiered"


class CompoundingFrequency(str, Enum):
    DAILY = "daily"
    MONTHLY = "monthly"
    QUARTERLY = "quarterly"
    ANNUALLY = "annually"

    @property
    def periods_per_year(self) -> int:
        return _PERIODS_PER_YEAR[self]


_PERIODS_PER_YEAR = {
    CompoundingFrequency.DAILY: 365,
    CompoundingFrequency.MONTHLY: 12,
    CompoundingFrequency.QUARTERLY: 4,
    CompoundingFrequency.ANNUALLY: 1,
}


def as_naive_datetime(value: Any) -> Any:
    """Turn dates into midnight datetimes and aware datetimes into naive UTC.

    Anything else is handed back untouched so pydantic can parse it."""
    if isinstance(value, datetime):
        if value.tzinfo is not None:
            return value.astimezone(timezone.utc).replace(tzinfo=None)
        return value
    if isinstance(value, date):
        return datetime.combine(value, time())
    if isinstance(value, str) and len(value.strip()) == 10:
        try:
            return datetime.combine(date.fromisoformat(value.strip()), time())
        except ValueError:
            return value
    return value


class ProgressiveStage(BaseModel):
    """One stage of a progressive deposit: ratePercent holds for durationMonths."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    durationMonths: int
    ratePercent: Decimal


class VariableRateChange(BaseModel):
    """ratePercent is in force from effectiveDate until the next change."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    effectiveDate: datetime
    ratePercent: Decimal

    @field_validator("effectiveDate", mode="before")
    @classmethod
    def _normalise_date(cls, value: Any) -> Any:
        return as_naive_datetime(value)

    @field_validator("effectiveDate", mode="after")
    @classmethod
    def _strip_tz(cls, value: datetime) -> datetime:
        return as_naive_datetime(value)


class BalanceTier(BaseModel):
    """Principal range [minBalance, maxBalance] mapped to one rate; open-ended when maxBalance is None."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    minBalance: Decimal
    maxBalance: Optional[Decimal] = None
    ratePercent: Decimal

    def contains(self, amount: Decimal) -> bool:
        if amount < self.minBalance:
            return False
        return self.maxBalance is None or amount <= self.maxBalance


class DepositContract(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    principal: Decimal
    annualRatePercent: Decimal
    startDate: datetime
    maturityDate: Optional[datetime] = None
    compoundingFrequency: CompoundingFrequency = CompoundingFrequency.ANNUALLY
    interestType: InterestType = InterestType.COMPOUND

    progressiveSchedule: Optional[List[ProgressiveStage]] = None
    variableSchedule: Optional[List[VariableRateChange]] = None
    tieredSchedule: Optional[List[BalanceTier]] = None

    @field_validator("startDate", "maturityDate", mode="before")
    @classmethod
    def _normalise_dates(cls, value: Any) -> Any:
        return as_naive_datetime(value)

    @field_validator("startDate", "maturityDate", mode="after")
    @classmethod
    def _strip_tz(cls, value: Optional[datetime]) -> Optional[datetime]:
        return as_naive_datetime(value)

    @field_validator("interestType", mode="before")
    @classmethod
    def _default_interest_type(cls, value: Any) -> Any:
        # anything we don't recognise is valued as plain compound interest
        if isinstance(value, InterestType):
            return value
        try:
            return InterestType(str(value).strip().lower())
        except ValueError:
            return InterestType.COMPOUND

    @field_validator("compoundingFrequency", mode="before")
    @classmethod
    def _default_frequency(cls, value: Any) -> Any:
        if isinstance(value, CompoundingFrequency):
            return value
        try:
            return CompoundingFrequency(str(value).strip().lower())
        except ValueError:
            return CompoundingFrequency.ANNUALLY
