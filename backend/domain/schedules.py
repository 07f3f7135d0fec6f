from __future__ import annotations

import logging
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Generic, List, Sequence, TypeVar

from backend.models import (
    BalanceTier,
    DepositContract,
    InterestType,
    ProgressiveStage,
    VariableRateChange,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass
class PreparedSchedule(Generic[T]):
    rows: List[T]
    warnings: List[str] = field(default_factory=list)


@dataclass
class PreparationResult:
    interest_type: InterestType
    row_count: int
    warnings: List[str]


def _is_sorted(keys: Sequence[object]) -> bool:
    return all(a <= b for a, b in zip(keys, keys[1:]))


def prepare_stages(stages: Sequence[ProgressiveStage]) -> PreparedSchedule[ProgressiveStage]:
    """Order progressive stages by duration, shortest first.

    Stages with a non-positive duration stay in the list; the walk simply
    consumes no months from them."""
    keys = [stage.durationMonths for stage in stages]
    rows = sorted(stages, key=lambda stage: stage.durationMonths)
    warnings: List[str] = []

    if not _is_sorted(keys):
        warnings.append("progressive stages were not ordered by durationMonths; sorted")
    for stage in rows:
        if stage.durationMonths <= 0:
            warnings.append(f"progressive stage at {stage.ratePercent}% has no duration and is skipped")

    return PreparedSchedule(rows=rows, warnings=warnings)


def prepare_rate_changes(changes: Sequence[VariableRateChange]) -> PreparedSchedule[VariableRateChange]:
    keys = [change.effectiveDate for change in changes]
    rows = sorted(changes, key=lambda change: change.effectiveDate)
    warnings: List[str] = []

    if not _is_sorted(keys):
        warnings.append("rate changes were not ordered by effectiveDate; sorted")

    previous = None
    for change in rows:
        if previous is not None and change.effectiveDate == previous.effectiveDate:
            warnings.append(
                f"duplicate rate change on {change.effectiveDate.date().isoformat()}; the later entry wins"
            )
        previous = change

    return PreparedSchedule(rows=rows, warnings=warnings)


def prepare_tiers(tiers: Sequence[BalanceTier]) -> PreparedSchedule[BalanceTier]:
    keys = [tier.minBalance for tier in tiers]
    rows = sorted(tiers, key=lambda tier: tier.minBalance)
    warnings: List[str] = []

    if not _is_sorted(keys):
        warnings.append("balance tiers were not ordered by minBalance; sorted")

    previous_max = None
    for index, tier in enumerate(rows):
        if tier.maxBalance is not None and tier.maxBalance < tier.minBalance:
            warnings.append(f"tier starting at {tier.minBalance} has maxBalance below minBalance")
        if index > 0:
            if previous_max is None:
                warnings.append(f"tier starting at {tier.minBalance} is shadowed by an open-ended tier")
            elif tier.minBalance <= previous_max:
                warnings.append(f"tier overlap at balances {tier.minBalance}-{previous_max}")
            elif tier.minBalance - previous_max > Decimal("1"):
                warnings.append(f"tier gap at balances {previous_max}-{tier.minBalance}")
        previous_max = tier.maxBalance

    return PreparedSchedule(rows=rows, warnings=warnings)


def prepare_contract(contract: DepositContract) -> PreparationResult:
    """Collect warnings for the schedule the contract's regime will walk.

    Missing schedules are not an error; the engine values those contracts as
    plain compound interest and we only mention it."""
    interest_type = contract.interestType
    schedule_by_type = {
        InterestType.PROGRESSIVE: (contract.progressiveSchedule, prepare_stages),
        InterestType.VARIABLE: (contract.variableSchedule, prepare_rate_changes),
        InterestType.TIERED: (contract.tieredSchedule, prepare_tiers),
    }

    if interest_type not in schedule_by_type:
        return PreparationResult(interest_type=interest_type, row_count=0, warnings=[])

    rows, prepare = schedule_by_type[interest_type]
    if not rows:
        warning = f"{interest_type.value} deposit has no schedule; valued as compound interest"
        logger.info(warning)
        return PreparationResult(interest_type=interest_type, row_count=0, warnings=[warning])

    prepared = prepare(rows)
    for warning in prepared.warnings:
        logger.info("schedule warning: %s", warning)
    return PreparationResult(
        interest_type=interest_type,
        row_count=len(prepared.rows),
        warnings=prepared.warnings,
    )
