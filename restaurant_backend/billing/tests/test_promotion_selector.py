# billing/tests/test_promotion_selector.py

import uuid
from datetime import date, datetime, timedelta
from datetime import timezone as dt_timezone
from decimal import Decimal
from types import SimpleNamespace

from django.test import SimpleTestCase

from billing.services.promotion_selector import (
    PROMO_AMOUNT,
    PROMO_PERCENT,
    day_code_for,
    is_eligible,
    promotion_discount,
    select_applicable_promotion,
)

NOW = datetime(2024, 6, 8, 12, 0, tzinfo=dt_timezone.utc)  # a Saturday


def _promo(**overrides):
    data = {
        "id": uuid.uuid4(),
        "key": "PROMO",
        "type": PROMO_PERCENT,
        "value": Decimal("10"),
        "days_of_week": [],
        "active": True,
        "expires_at": None,
        "priority": 0,
        "created_at": NOW - timedelta(days=30),
    }
    data.update(overrides)
    return SimpleNamespace(**data)


class PromotionEligibilityTests(SimpleTestCase):
    def test_day_codes(self):
        self.assertEqual(day_code_for(date(2024, 6, 8)), "SAT")
        self.assertEqual(day_code_for(date(2024, 6, 10)), "MON")

    def test_empty_days_means_every_day(self):
        self.assertTrue(is_eligible(_promo(), "TUE", now=NOW))

    def test_day_must_match(self):
        promo = _promo(days_of_week=["SAT", "SUN"])
        self.assertTrue(is_eligible(promo, "SAT", now=NOW))
        self.assertFalse(is_eligible(promo, "FRI", now=NOW))

    def test_inactive_is_never_eligible(self):
        self.assertFalse(is_eligible(_promo(active=False), "SAT", now=NOW))

    def test_expiry_is_exclusive(self):
        self.assertFalse(is_eligible(_promo(expires_at=NOW), "SAT", now=NOW))
        self.assertTrue(is_eligible(_promo(expires_at=NOW + timedelta(seconds=1)), "SAT", now=NOW))


class PromotionSelectionTests(SimpleTestCase):
    def test_none_when_nothing_eligible(self):
        promos = [_promo(days_of_week=["MON"]), _promo(active=False)]
        self.assertIsNone(select_applicable_promotion(promos, "SAT", now=NOW))

    def test_highest_priority_wins(self):
        low = _promo(key="LOW", priority=1)
        high = _promo(key="HIGH", priority=5)
        self.assertIs(select_applicable_promotion([low, high], "SAT", now=NOW), high)

    def test_oldest_wins_on_equal_priority(self):
        old = _promo(key="OLD", created_at=NOW - timedelta(days=10))
        new = _promo(key="NEW", created_at=NOW - timedelta(days=1))
        self.assertIs(select_applicable_promotion([new, old], "SAT", now=NOW), old)

    def test_selection_is_independent_of_input_order(self):
        promos = [_promo(key=f"P{i}", priority=i % 3) for i in range(6)]
        first = select_applicable_promotion(promos, "SAT", now=NOW)
        second = select_applicable_promotion(list(reversed(promos)), "SAT", now=NOW)
        self.assertIs(first, second)


class PromotionDiscountTests(SimpleTestCase):
    def test_percent_of_base(self):
        self.assertEqual(promotion_discount(_promo(), Decimal("1196.00")), Decimal("119.6"))

    def test_amount_is_flat(self):
        promo = _promo(type=PROMO_AMOUNT, value=Decimal("50"))
        self.assertEqual(promotion_discount(promo, Decimal("1196.00")), Decimal("50"))

    def test_no_promotion(self):
        self.assertEqual(promotion_discount(None, Decimal("1196.00")), Decimal("0"))
