"""Pricing rules for transporter amount, platform fee and client total."""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

from freightmatch.core.exceptions import InvalidPricing

CENTS = Decimal("0.01")


def to_money(value: object, field: str) -> Decimal:
    """Coerce a numeric input to a finite 2-decimal Decimal."""
    if isinstance(value, bool) or value is None:
        raise InvalidPricing(f"{field} must be a number.")
    try:
        amount = value if isinstance(value, Decimal) else Decimal(str(value))
    except (InvalidOperation, ValueError) as exc:
        raise InvalidPricing(f"{field} must be a number.") from exc
    if not amount.is_finite():
        raise InvalidPricing(f"{field} must be finite.")
    return amount.quantize(CENTS, rounding=ROUND_HALF_UP)


class PricingEngine:
    """Pure pricing calculator; no state and no storage access."""

    def calculate_client_total(self, transporter_amount: object, platform_fee: object) -> Decimal:
        amount = to_money(transporter_amount, "transporter_amount")
        fee = to_money(platform_fee, "platform_fee")
        if amount <= 0:
            raise InvalidPricing("transporter_amount must be greater than 0.")
        if fee < 0:
            raise InvalidPricing("platform_fee must be greater than or equal to 0.")
        return amount + fee

    def commission_amount(self, amount: object, percentage: object) -> Decimal:
        """Informational commission on ``amount``; unrelated to the stored platform fee."""
        base = to_money(amount, "amount")
        pct = to_money(percentage, "commission_percentage")
        if pct < 0 or pct > 100:
            raise InvalidPricing("commission_percentage must be between 0 and 100.")
        return (base * pct / Decimal(100)).quantize(CENTS, rounding=ROUND_HALF_UP)

    def client_offer_amount(self, amount: object, percentage: object) -> Decimal:
        """Offer amount as shown to the client, commission included."""
        return to_money(amount, "amount") + self.commission_amount(amount, percentage)


pricing_engine = PricingEngine()
