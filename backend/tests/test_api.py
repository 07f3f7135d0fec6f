from __future__ import annotations

from flask.testing import FlaskClient


def valuation_payload() -> dict:
    return {
        "contract": {
            "principal": 1000,
            "annualRatePercent": 10,
            "startDate": "2020-01-01",
            "maturityDate": "2023-01-01",
            "compoundingFrequency": "annually",
            "interestType": "compound",
        },
        # exactly two 365.25-day years after the start
        "asOf": "2021-12-31T12:00:00",
    }


def test_health_returns_ok(client: FlaskClient):
    response = client.get("/api/health")

    assert response.status_code == 200
    assert response.get_json() == {"status": "ok", "service": "deposit-valuation"}


def test_valuation_endpoint_returns_valuation_and_display_fields(client: FlaskClient):
    resp = client.post("/api/deposits/valuation", json=valuation_payload())

    assert resp.status_code == 200
    body = resp.get_json()
    assert body["currentValue"] == "1210.00"
    assert body["accruedInterest"] == "210.00"
    assert body["isMatured"] is False
    assert body["projectedMaturityValue"] is not None
    assert body["daysElapsed"] == 730
    assert body["durationLabel"] == "2 years"
    assert body["status"] == "Active"
    assert body["apy"] == "10.00"
    assert body["warnings"] == []
    assert body["afterTax"] is None


def test_valuation_endpoint_applies_tax_rate(client: FlaskClient):
    payload = valuation_payload()
    payload["taxRatePercent"] = 20

    body = client.post("/api/deposits/valuation", json=payload).get_json()

    assert body["afterTax"]["taxAmount"] == "42.00"
    assert body["afterTax"]["netInterest"] == "168.00"


def test_valuation_endpoint_reports_schedule_warnings(client: FlaskClient):
    payload = valuation_payload()
    payload["contract"]["interestType"] = "progressive"

    body = client.post("/api/deposits/valuation", json=payload).get_json()

    assert body["warnings"] == ["progressive deposit has no schedule; valued as compound interest"]
    assert body["currentValue"] == "1210.00"


def test_valuation_endpoint_defaults_as_of_to_now(client: FlaskClient):
    payload = valuation_payload()
    del payload["asOf"]

    body = client.post("/api/deposits/valuation", json=payload).get_json()

    assert body["isMatured"] is True
    assert body["status"] == "Matured"
    assert body["projectedMaturityValue"] is None


def test_invalid_contract_returns_422(client: FlaskClient):
    payload = valuation_payload()
    del payload["contract"]["principal"]

    resp = client.post("/api/deposits/valuation", json=payload)

    assert resp.status_code == 422
    body = resp.get_json()
    assert any(error["loc"] == ["contract", "principal"] for error in body["detail"])


def test_non_object_body_returns_400(client: FlaskClient):
    resp = client.post("/api/deposits/valuation", json=[1, 2, 3])

    assert resp.status_code == 400
    assert "detail" in resp.get_json()


def test_recurring_deposit_endpoint(client: FlaskClient):
    resp = client.post(
        "/api/deposits/recurring",
        json={"monthlyAmount": 100, "annualRatePercent": 12, "months": 12},
    )

    assert resp.status_code == 200
    assert resp.get_json() == {"futureValue": "1268.25", "totalPaidIn": "1200"}


def test_apy_endpoint(client: FlaskClient):
    resp = client.post("/api/deposits/apy", json={"principal": 1000, "finalValue": 1210, "years": 2})

    assert resp.status_code == 200
    assert resp.get_json() == {"apy": "10.00"}


def test_interest_types_endpoint(client: FlaskClient):
    resp = client.get("/api/deposits/interest-types")

    assert resp.status_code == 200
    names = [entry["name"] for entry in resp.get_json()]
    assert "Progressive Interest" in names


def test_valuation_one_second_after_start(client: FlaskClient):
    payload = valuation_payload()
    payload["contract"]["principal"] = "0.995"
    payload["asOf"] = "2020-01-01T00:00:01"

    resp = client.post("/api/deposits/valuation", json=payload)

    assert resp.status_code == 200
    body = resp.get_json()
    assert body["currentValue"] == "1.00"
    assert body["accruedInterest"] == "0.00"
    assert body["apy"] == "0.00"
