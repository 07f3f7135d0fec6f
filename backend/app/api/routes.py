"""HTTP routes for the Flask API."""

import logging
from datetime import datetime, timezone
from http import HTTPStatus
from typing import Any, Dict

from flask import Blueprint, jsonify, request
from pydantic import ValidationError
from werkzeug.exceptions import BadRequest

from backend.core.catalog import interest_type_catalog
from backend.core.deposit import measure_span, valuate
from backend.core.health import get_health_status
from backend.core.metrics import (
    after_tax_interest,
    calculate_apy,
    classify_status,
    format_duration,
    recurring_deposit_future_value,
)
from backend.domain.schedules import prepare_contract
from backend.schemas.deposit import (
    AfterTaxInterest,
    ApyRequest,
    ApyResponse,
    RecurringDepositRequest,
    RecurringDepositResponse,
    ValuationRequest,
    ValuationResponse,
)
from backend.schemas.health import HealthResponse

logger = logging.getLogger(__name__)

api_bp = Blueprint("api", __name__)


@api_bp.errorhandler(ValidationError)
def _handle_validation_error(exc: ValidationError):
    """Convert Pydantic validation errors into JSON responses."""
    return jsonify({"detail": exc.errors(include_url=False)}), HTTPStatus.UNPROCESSABLE_ENTITY


@api_bp.errorhandler(BadRequest)
def _handle_bad_request(exc: BadRequest):
    return jsonify({"detail": exc.description}), HTTPStatus.BAD_REQUEST


def _json_body() -> Dict[str, Any]:
    payload = request.get_json(force=True, silent=False)
    if not isinstance(payload, dict):
        raise BadRequest("request body must be a JSON object")
    return payload


@api_bp.get("/health")
def health() -> Any:
    """Health-check endpoint."""
    response = HealthResponse.model_validate(get_health_status())
    return jsonify(response.model_dump())


@api_bp.post("/deposits/valuation")
def deposit_valuation() -> Any:
    """Value a deposit contract, by default as of now."""
    payload = ValuationRequest.model_validate(_json_body())
    contract = payload.contract
    as_of = payload.asOf or datetime.now(timezone.utc).replace(tzinfo=None)

    valuation = valuate(contract, as_of)
    preparation = prepare_contract(contract)

    growth_end = contract.maturityDate if valuation.isMatured else as_of
    apy = calculate_apy(
        valuation.currentValue - valuation.accruedInterest,
        valuation.currentValue,
        measure_span(contract.startDate, growth_end).years,
    )
    after_tax = None
    if payload.taxRatePercent is not None:
        after_tax = AfterTaxInterest.model_validate(
            after_tax_interest(valuation.accruedInterest, payload.taxRatePercent)
        )

    response = ValuationResponse(
        **valuation.model_dump(),
        asOf=as_of,
        durationLabel=format_duration(valuation),
        status=classify_status(valuation),
        apy=apy,
        afterTax=after_tax,
        warnings=preparation.warnings,
    )
    logger.info(
        "valuation request: %s deposit, status=%s, warnings=%d",
        contract.interestType.value,
        response.status,
        len(response.warnings),
    )
    return jsonify(response.model_dump(mode="json"))


@api_bp.post("/deposits/recurring")
def recurring_deposit() -> Any:
    """Future value of a monthly recurring deposit."""
    payload = RecurringDepositRequest.model_validate(_json_body())
    future_value = recurring_deposit_future_value(
        payload.monthlyAmount,
        payload.annualRatePercent,
        payload.months,
    )
    response = RecurringDepositResponse(
        futureValue=future_value,
        totalPaidIn=payload.monthlyAmount * payload.months,
    )
    return jsonify(response.model_dump(mode="json"))


@api_bp.post("/deposits/apy")
def annual_percentage_yield() -> Any:
    payload = ApyRequest.model_validate(_json_body())
    response = ApyResponse(apy=calculate_apy(payload.principal, payload.finalValue, payload.years))
    return jsonify(response.model_dump(mode="json"))


@api_bp.get("/deposits/interest-types")
def interest_types() -> Any:
    return jsonify(interest_type_catalog())
