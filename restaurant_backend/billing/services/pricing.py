# billing/services/pricing.py

"""
BILL PRICING CALCULATOR (PURE)

Order of operations (changing it changes the bill total):
1. base        = adult_price_gross * adult_count   (children are free)
2. after promo = base - promotion_discount          (absolute amount, precomputed)
3. loyalty     = one adult price when a free redemption is applied
4. manual      = PERCENT (x * (1 - v/100)) | AMOUNT (x - v) | NONE
5. clamp       = max(result, 0)
6. rounding    = whole-unit rounding of the clamped subtotal (NONE | UP |
                 DOWN | NEAREST), a per-restaurant setting defaulting to NONE
7. VAT         = subtotal - subtotal / (1 + vat_rate)   (tax-inclusive)

total_gross == subtotal_gross: VAT is a breakdown, never added on top.
With rounding_mode NONE, subtotal is exactly the clamped step-5 amount and
VAT is backed out of it; any other mode backs VAT out of the rounded amount.

GUARANTEES:
- No database access, no clock, no randomness
- Fixed local decimal context, independent of the caller's context
- Full precision is kept; callers quantize at the storage boundary
"""

from __future__ import annotations

from dataclasses import asdict, dataclass
from decimal import ROUND_HALF_EVEN, Decimal, localcontext

from billing.services.money import (
    HUNDRED,
    ONE,
    ROUNDING_NONE,
    ZERO,
    apply_rounding,
    clamp_non_negative,
    quantize_money,
    to_decimal,
)

DISCOUNT_NONE = "NONE"
DISCOUNT_PERCENT = "PERCENT"
DISCOUNT_AMOUNT = "AMOUNT"

DISCOUNT_TYPES = (DISCOUNT_NONE, DISCOUNT_PERCENT, DISCOUNT_AMOUNT)

PRICING_PRECISION = 28


@dataclass(frozen=True)
class PricingResult:
    base_gross: Decimal
    promo_gross_discount: Decimal
    after_promo_gross: Decimal
    loyalty_free: Decimal
    discounted_gross: Decimal
    subtotal_gross: Decimal
    vat_amount: Decimal
    total_gross: Decimal
    adult_paying_count: int

    def quantized(self) -> dict:
        """2dp snapshot for persistence and API payloads."""
        out = {}
        for key, value in asdict(self).items():
            out[key] = value if isinstance(value, int) else quantize_money(value)
        return out


def compute_pricing(
    *,
    adult_count: int,
    child_count: int,
    adult_price_gross,
    vat_rate,
    discount_type: str = DISCOUNT_NONE,
    discount_value=ZERO,
    promotion_discount=ZERO,
    loyalty_free_applied: bool = False,
    rounding_mode: str = ROUNDING_NONE,
) -> PricingResult:
    if adult_count < 0 or child_count < 0:
        raise ValueError("Head counts must be non-negative")

    discount_type = discount_type or DISCOUNT_NONE
    if discount_type not in DISCOUNT_TYPES:
        raise ValueError(f"Unknown discount type: {discount_type}")

    price = to_decimal(adult_price_gross)
    rate = to_decimal(vat_rate)
    manual = to_decimal(discount_value)
    promo = to_decimal(promotion_discount)

    with localcontext() as ctx:
        ctx.prec = PRICING_PRECISION
        ctx.rounding = ROUND_HALF_EVEN

        # child_count is informational only
        base = price * adult_count
        after_promo = base - promo

        loyalty_free = price if loyalty_free_applied else ZERO
        after_loyalty = after_promo - loyalty_free

        if discount_type == DISCOUNT_PERCENT:
            discounted = after_loyalty * (ONE - manual / HUNDRED)
        elif discount_type == DISCOUNT_AMOUNT:
            discounted = after_loyalty - manual
        else:
            discounted = after_loyalty

        subtotal = apply_rounding(clamp_non_negative(discounted), rounding_mode)
        vat = subtotal - subtotal / (ONE + rate)

        # unary plus rounds every field to the local context precision
        return PricingResult(
            base_gross=+base,
            promo_gross_discount=+promo,
            after_promo_gross=+after_promo,
            loyalty_free=+loyalty_free,
            discounted_gross=+discounted,
            subtotal_gross=+subtotal,
            vat_amount=+vat,
            total_gross=+subtotal,
            adult_paying_count=adult_count,
        )
