"""Display names, descriptions and example schedules for each interest type."""

from decimal import Decimal
from typing import Dict, List

from backend.models import BalanceTier, InterestType, ProgressiveStage

_INTEREST_TYPE_INFO: Dict[InterestType, Dict[str, str]] = {
    InterestType.SIMPLE: {
        "name": "Simple Interest",
        "description": "Interest calculated only on the principal amount. I = P × R × T",
    },
    InterestType.COMPOUND: {
        "name": "Compound Interest",
        "description": (
            "Interest calculated on principal plus accumulated interest. "
            "More frequent compounding = higher returns"
        ),
    },
    InterestType.PROGRESSIVE: {
        "name": "Progressive Interest",
        "description": "Interest rate increases over time based on predefined schedule",
    },
    InterestType.VARIABLE: {
        "name": "Variable Interest",
        "description": "Interest rate changes at specific dates based on market conditions",
    },
    InterestType.TIERED: {
        "name": "Tiered Interest",
        "description": "Different interest rates apply based on balance ranges",
    },
}

_STANDARD_INFO = {"name": "Standard Interest", "description": "Standard interest calculation"}


def interest_type_info(interest_type: str) -> Dict[str, str]:
    try:
        key = InterestType(interest_type)
    except ValueError:
        return dict(_STANDARD_INFO)
    return dict(_INTEREST_TYPE_INFO[key])


def default_progressive_stages() -> List[ProgressiveStage]:
    return [
        ProgressiveStage(durationMonths=6, ratePercent=Decimal("3.0")),
        ProgressiveStage(durationMonths=6, ratePercent=Decimal("4.0")),
        ProgressiveStage(durationMonths=12, ratePercent=Decimal("5.0")),
    ]


def default_balance_tiers() -> List[BalanceTier]:
    return [
        BalanceTier(minBalance=Decimal("0"), maxBalance=Decimal("10000"), ratePercent=Decimal("3.0")),
        BalanceTier(minBalance=Decimal("10001"), maxBalance=Decimal("50000"), ratePercent=Decimal("4.0")),
        BalanceTier(minBalance=Decimal("50001"), ratePercent=Decimal("5.0")),
    ]


def interest_type_catalog() -> List[Dict[str, object]]:
    """One entry per interest type, with an example schedule where the type uses one."""
    examples = {
        InterestType.PROGRESSIVE: [stage.model_dump(mode="json") for stage in default_progressive_stages()],
        InterestType.TIERED: [tier.model_dump(mode="json") for tier in default_balance_tiers()],
    }
    return [
        {
            "type": kind.value,
            **_INTEREST_TYPE_INFO[kind],
            "exampleSchedule": examples.get(kind),
        }
        for kind in InterestType
    ]
