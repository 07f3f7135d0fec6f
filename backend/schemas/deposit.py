"""Data contracts for the deposit endpoints."""

from datetime import datetime
from decimal import Decimal
from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from backend.core.deposit import DepositValuation
from backend.models import DepositContract, as_naive_datetime


class ValuationRequest(BaseModel):
    """A deposit contract and the instant to value it at."""

    model_config = ConfigDict(extra="forbid")

    contract: DepositContract
    asOf: Optional[datetime] = Field(
        None,
        description="Valuation instant; the current UTC time when omitted.",
    )
    taxRatePercent: Optional[Decimal] = Field(
        None,
        ge=0,
        le=100,
        description="Tax on accrued interest, as a percentage.",
    )

    @field_validator("asOf", mode="before")
    @classmethod
    def _normalise_as_of(cls, value: Any) -> Any:
        return as_naive_datetime(value)

    @field_validator("asOf", mode="after")
    @classmethod
    def _strip_tz(cls, value: Optional[datetime]) -> Optional[datetime]:
        return as_naive_datetime(value)


class AfterTaxInterest(BaseModel):
    grossInterest: Decimal
    taxAmount: Decimal
    netInterest: Decimal
    taxRate: Decimal


class ValuationResponse(DepositValuation):
    """Valuation plus the display fields the asset views show next to it."""

    asOf: datetime
    durationLabel: str
    status: str
    apy: Decimal
    afterTax: Optional[AfterTaxInterest] = None
    warnings: List[str] = []


class RecurringDepositRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")

    monthlyAmount: Decimal = Field(..., ge=0, description="Amount paid in at the end of each month.")
    annualRatePercent: Decimal = Field(..., description="Nominal annual rate as a percentage.")
    months: int = Field(..., ge=0, le=1200)


class RecurringDepositResponse(BaseModel):
    futureValue: Decimal
    totalPaidIn: Decimal


class ApyRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")

    principal: Decimal
    finalValue: Decimal
    years: Decimal


class ApyResponse(BaseModel):
    apy: Decimal
