from datetime import datetime
from decimal import Decimal

import pytest
from flask.testing import FlaskClient

from backend.app import create_app
from backend.models import DepositContract

START = datetime(2020, 1, 1)


@pytest.fixture()
def client() -> FlaskClient:
    app = create_app()
    app.config.update(TESTING=True)
    with app.test_client() as test_client:
        yield test_client


@pytest.fixture()
def make_contract():
    """Factory for a 1000 @ 10% annually-compounded deposit opened on 2020-01-01."""

    def _make(**overrides) -> DepositContract:
        fields = {
            "principal": Decimal("1000"),
            "annualRatePercent": Decimal("10"),
            "startDate": START,
            "interestType": "compound",
            "compoundingFrequency": "annually",
        }
        fields.update(overrides)
        return DepositContract.model_validate(fields)

    return _make
