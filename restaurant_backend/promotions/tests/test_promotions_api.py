# promotions/tests/test_promotions_api.py

from datetime import timedelta
from unittest import mock

from django.test import TestCase
from django.urls import reverse
from rest_framework import status
from rest_framework.test import APIClient

from billing.services.clock import SystemClock
from billing.tests.factories import SATURDAY_NOON, make_user, make_weekend_promotion
from promotions.models import Promotion


class PromotionQuerySetTests(TestCase):
    def test_active_at_excludes_inactive_and_expired(self):
        now = SATURDAY_NOON.now()
        live = make_weekend_promotion()
        make_weekend_promotion(key="OFF", active=False)
        make_weekend_promotion(key="OLD", expires_at=now - timedelta(hours=1))
        future = make_weekend_promotion(key="SOON_OVER", expires_at=now + timedelta(hours=1))

        self.assertEqual(set(Promotion.objects.active_at(now)), {live, future})


class PromotionApiTests(TestCase):
    def setUp(self):
        self.client = APIClient()
        self.admin = make_user("admin")
        self.cashier = make_user("cashier")

    def test_admin_creates_promotion(self):
        self.client.force_authenticate(self.admin)

        res = self.client.post(
            reverse("promotions-list"),
            {
                "key": "lunch_50",
                "name": "Lunch 50 off",
                "type": "AMOUNT",
                "value": "50.00",
                "days_of_week": ["fri", "MON", "MON"],
            },
            format="json",
        )

        self.assertEqual(res.status_code, status.HTTP_201_CREATED, res.data)
        self.assertEqual(res.data["key"], "LUNCH_50")
        self.assertEqual(res.data["days_of_week"], ["MON", "FRI"])

    def test_percent_over_100_rejected(self):
        self.client.force_authenticate(self.admin)
        res = self.client.post(
            reverse("promotions-list"),
            {"key": "HUGE", "name": "Huge", "type": "PERCENT", "value": "120"},
            format="json",
        )
        self.assertEqual(res.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(res.data["error"]["details"][0]["field"], "value")

    def test_unknown_day_rejected(self):
        self.client.force_authenticate(self.admin)
        res = self.client.post(
            reverse("promotions-list"),
            {"key": "X", "name": "X", "type": "PERCENT", "value": "5", "days_of_week": ["FUNDAY"]},
            format="json",
        )
        self.assertEqual(res.status_code, status.HTTP_400_BAD_REQUEST)

    def test_key_is_immutable(self):
        promo = make_weekend_promotion()
        self.client.force_authenticate(self.admin)

        res = self.client.patch(
            reverse("promotions-detail", args=[promo.id]), {"key": "RENAMED"}, format="json"
        )
        self.assertEqual(res.status_code, status.HTTP_400_BAD_REQUEST)

        res = self.client.patch(
            reverse("promotions-detail", args=[promo.id]), {"priority": 3}, format="json"
        )
        self.assertEqual(res.status_code, status.HTTP_200_OK)
        self.assertEqual(res.data["priority"], 3)

    def test_delete_deactivates(self):
        promo = make_weekend_promotion()
        self.client.force_authenticate(self.admin)

        res = self.client.delete(reverse("promotions-detail", args=[promo.id]))

        self.assertEqual(res.status_code, status.HTTP_204_NO_CONTENT)
        promo.refresh_from_db()
        self.assertFalse(promo.active)

    def test_cashier_cannot_manage(self):
        self.client.force_authenticate(self.cashier)
        res = self.client.get(reverse("promotions-list"))
        self.assertEqual(res.status_code, status.HTTP_403_FORBIDDEN)

    def test_cashier_sees_todays_promotion(self):
        make_weekend_promotion()
        make_weekend_promotion(key="MONDAYS", days_of_week=["MON"])
        self.client.force_authenticate(self.cashier)

        with mock.patch.object(SystemClock, "now", return_value=SATURDAY_NOON.now()):
            res = self.client.get(reverse("promotions-active"))

        self.assertEqual(res.status_code, status.HTTP_200_OK)
        self.assertEqual(res.data["day"], "SAT")
        self.assertEqual(res.data["selected"]["key"], "WEEKEND_10_OFF")
        self.assertEqual([p["key"] for p in res.data["promotions"]], ["WEEKEND_10_OFF"])
