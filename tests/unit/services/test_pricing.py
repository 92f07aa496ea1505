from __future__ import annotations

from decimal import Decimal

import pytest

from freightmatch.core.exceptions import InvalidPricing, ValidationError
from freightmatch.services.pricing import PricingEngine


def test_client_total_is_amount_plus_fee():
    engine = PricingEngine()
    assert engine.calculate_client_total(500, 50) == Decimal("550.00")
    assert engine.calculate_client_total("199.99", "0.01") == Decimal("200.00")


def test_zero_fee_is_allowed():
    assert PricingEngine().calculate_client_total(Decimal("320.50"), 0) == Decimal("320.50")


@pytest.mark.parametrize(
    "amount, fee",
    [(0, 10), (-5, 10), (100, -1), ("abc", 10), (float("nan"), 10), (100, float("inf")), (None, 10), (True, 1)],
)
def test_invalid_pricing_is_rejected(amount, fee):
    with pytest.raises(InvalidPricing):
        PricingEngine().calculate_client_total(amount, fee)


def test_invalid_pricing_is_a_validation_error():
    with pytest.raises(ValidationError):
        PricingEngine().calculate_client_total(0, 0)


def test_commission_amount_is_independent_from_fee():
    engine = PricingEngine()
    assert engine.commission_amount(500, 10) == Decimal("50.00")
    assert engine.commission_amount(333, Decimal("12.5")) == Decimal("41.63")


def test_client_offer_amount_includes_commission():
    assert PricingEngine().client_offer_amount(1000, 10) == Decimal("1100.00")
