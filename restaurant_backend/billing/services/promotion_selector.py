# billing/services/promotion_selector.py

"""
PROMOTION SELECTOR (PURE)

Eligibility:
- active is True
- days_of_week empty (every day) OR contains today's day code
- expires_at is null OR strictly after `now`

Selection:
- exactly one promotion per bill
- deterministic order: priority desc, created_at asc, id asc

Discount:
- PERCENT: base * value / 100
- AMOUNT:  value (flat, independent of base)

`today` and `now` are always passed in by the caller (clock provider);
nothing here reads the wall clock.
"""

from __future__ import annotations

from datetime import date, datetime
from decimal import ROUND_HALF_EVEN, Decimal, localcontext
from typing import Iterable, Optional

from billing.services.money import HUNDRED, ZERO, to_decimal

DAY_CODES = ("MON", "TUE", "WED", "THU", "FRI", "SAT", "SUN")

PROMO_PERCENT = "PERCENT"
PROMO_AMOUNT = "AMOUNT"

PROMOTION_TYPES = (PROMO_PERCENT, PROMO_AMOUNT)


def day_code_for(day: date) -> str:
    return DAY_CODES[day.weekday()]


def is_eligible(promotion, today: str, *, now: datetime) -> bool:
    if not promotion.active:
        return False

    days = list(promotion.days_of_week or [])
    if days and today not in days:
        return False

    expires_at = promotion.expires_at
    if expires_at is not None and expires_at <= now:
        return False

    return True


def _selection_key(promotion):
    created_at = getattr(promotion, "created_at", None)
    return (
        -int(getattr(promotion, "priority", 0) or 0),
        created_at is None,
        created_at or datetime.min,
        str(promotion.id),
    )


def select_applicable_promotion(
    promotions: Iterable, today: str, *, now: datetime
) -> Optional[object]:
    eligible = [p for p in promotions if is_eligible(p, today, now=now)]
    if not eligible:
        return None
    return sorted(eligible, key=_selection_key)[0]


def promotion_discount(promotion, base) -> Decimal:
    if promotion is None:
        return ZERO

    value = to_decimal(promotion.value)
    if promotion.type == PROMO_PERCENT:
        with localcontext() as ctx:
            ctx.prec = 28
            ctx.rounding = ROUND_HALF_EVEN
            return to_decimal(base) * value / HUNDRED
    if promotion.type == PROMO_AMOUNT:
        return value

    raise ValueError(f"Unknown promotion type: {promotion.type}")
