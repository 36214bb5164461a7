# billing/tests/test_bill_api.py

from __future__ import annotations

from unittest import mock

from django.test import TestCase
from django.urls import reverse
from rest_framework import status
from rest_framework.test import APIClient

from billing.models import Bill
from billing.services.clock import SystemClock
from billing.tests.factories import (
    SATURDAY_NOON,
    WEDNESDAY_NOON,
    make_customer,
    make_settings,
    make_table,
    make_user,
    make_weekend_promotion,
)
from tables.models import Table


class BillApiTestCase(TestCase):
    """
    Cashier flow through the HTTP API.

    The wall clock is pinned so promotion eligibility is deterministic.
    """

    clock = WEDNESDAY_NOON

    def setUp(self):
        self.client = APIClient()
        self.cashier = make_user("cashier")
        self.admin = make_user("admin")
        self.viewer = make_user("read_only", email="viewer@example.com")
        make_settings()
        self.table = make_table(1)

        patcher = mock.patch.object(SystemClock, "now", return_value=self.clock.now())
        patcher.start()
        self.addCleanup(patcher.stop)

        self.client.force_authenticate(self.cashier)

    def _open(self, **payload):
        payload.setdefault("adult_count", 4)
        payload.setdefault("child_count", 2)
        return self.client.post(
            reverse("tables-open", args=[self.table.id]), payload, format="json"
        )

    def _open_bill_id(self, **payload):
        res = self._open(**payload)
        self.assertEqual(res.status_code, status.HTTP_201_CREATED, res.data)
        return res.data["bill"]["id"]

    def _action(self, name, bill_id, payload=None):
        return self.client.post(reverse(name, args=[bill_id]), payload or {}, format="json")


class OpenBillApiTests(BillApiTestCase):
    def test_open_returns_bill_table_and_pricing(self):
        res = self._open(customer_phone="0812345678")

        self.assertEqual(res.status_code, status.HTTP_201_CREATED)
        self.assertEqual(res.data["bill"]["status"], Bill.STATUS_OPEN)
        self.assertEqual(res.data["bill"]["total_gross"], "1196.00")
        self.assertEqual(res.data["bill"]["customer"]["phone"], "0812345678")
        self.assertEqual(res.data["table"]["status"], Table.STATUS_OCCUPIED)
        self.assertEqual(res.data["pricing"]["vat_amount"], "78.24")
        self.assertEqual(res.data["pricing"]["adult_paying_count"], 4)
        self.assertIsNone(res.data["promotion"])

    def test_open_occupied_table_returns_conflict_envelope(self):
        self._open()
        res = self._open()

        self.assertEqual(res.status_code, status.HTTP_409_CONFLICT)
        self.assertEqual(res.data["error"]["code"], "TABLE_OCCUPIED")

    def test_open_invalid_phone(self):
        res = self._open(customer_phone="0912")

        self.assertEqual(res.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(res.data["error"]["code"], "VALIDATION_ERROR")
        self.assertEqual(res.data["error"]["details"][0]["field"], "customer_phone")

    def test_open_huge_head_count_is_rejected(self):
        res = self._open(adult_count=100000000)

        self.assertEqual(res.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(res.data["error"]["code"], "VALIDATION_ERROR")
        self.assertEqual(res.data["error"]["details"][0]["field"], "adult_count")
        self.table.refresh_from_db()
        self.assertEqual(self.table.status, Table.STATUS_AVAILABLE)
        self.assertFalse(Bill.objects.exists())

    def test_read_only_cannot_open(self):
        self.client.force_authenticate(self.viewer)
        res = self._open()
        self.assertEqual(res.status_code, status.HTTP_403_FORBIDDEN)
        self.assertEqual(res.data["error"]["code"], "PERMISSION_DENIED")

    def test_anonymous_rejected(self):
        self.client.force_authenticate(None)
        res = self._open()
        self.assertEqual(res.status_code, status.HTTP_401_UNAUTHORIZED)
        self.assertEqual(res.data["error"]["code"], "NOT_AUTHENTICATED")


class WeekendApiTests(BillApiTestCase):
    clock = SATURDAY_NOON

    def test_open_on_saturday_applies_weekend_promotion(self):
        make_weekend_promotion()

        res = self._open()

        self.assertEqual(res.data["promotion"], "Weekend 10% Off")
        self.assertEqual(res.data["bill"]["promo_applied"], "WEEKEND_10_OFF")
        self.assertEqual(res.data["bill"]["total_gross"], "1076.40")

    def test_apply_promo_endpoint(self):
        bill_id = self._open_bill_id()
        make_weekend_promotion()

        res = self._action("bills-apply-promo", bill_id)

        self.assertEqual(res.status_code, status.HTTP_200_OK)
        self.assertEqual(res.data["promotion_applied"], "Weekend 10% Off")
        self.assertEqual(res.data["discount_amount"], "119.60")


class BillActionApiTests(BillApiTestCase):
    def test_edit_bill(self):
        bill_id = self._open_bill_id()

        res = self.client.patch(
            reverse("bills-detail", args=[bill_id]),
            {"adult_count": 2, "discount_type": "AMOUNT", "discount_value": "98.00"},
            format="json",
        )

        self.assertEqual(res.status_code, status.HTTP_200_OK)
        self.assertEqual(res.data["adult_count"], 2)
        self.assertEqual(res.data["total_gross"], "500.00")

    def test_edit_rejects_percent_over_100(self):
        bill_id = self._open_bill_id()
        res = self.client.patch(
            reverse("bills-detail", args=[bill_id]),
            {"discount_type": "PERCENT", "discount_value": "150"},
            format="json",
        )
        self.assertEqual(res.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(res.data["error"]["details"][0]["field"], "discount_value")

    def test_apply_promo_without_promotion(self):
        bill_id = self._open_bill_id()
        res = self._action("bills-apply-promo", bill_id)

        self.assertEqual(res.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(res.data["error"]["code"], "NO_PROMOTION")

    def test_apply_loyalty(self):
        make_customer(stamps=10)
        bill_id = self._open_bill_id(customer_phone="0812345678")

        res = self._action("bills-apply-loyalty", bill_id)

        self.assertEqual(res.status_code, status.HTTP_200_OK)
        self.assertEqual(res.data["free_amount"], "299.00")
        self.assertEqual(res.data["stamps_redeemed"], 10)
        self.assertEqual(res.data["customer"]["loyalty_stamps"], 0)
        self.assertEqual(res.data["bill"]["total_gross"], "897.00")

    def test_apply_loyalty_insufficient(self):
        make_customer(stamps=4)
        bill_id = self._open_bill_id(customer_phone="0812345678")

        res = self._action("bills-apply-loyalty", bill_id)

        self.assertEqual(res.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(res.data["error"]["code"], "INSUFFICIENT_STAMPS")
        self.assertEqual(res.data["error"]["message"], "Customer needs 10 stamps to redeem. Current: 4")

    def test_pay_with_change(self):
        bill_id = self._open_bill_id()

        res = self._action("bills-pay", bill_id, {"amount": "1200.00", "payment_method": "CASH"})

        self.assertEqual(res.status_code, status.HTTP_200_OK)
        self.assertEqual(res.data["status"], Bill.STATUS_CLOSED)
        self.assertEqual(res.data["change"], "4.00")
        self.assertEqual(res.data["total_amount"], "1196.00")

        self.table.refresh_from_db()
        self.assertEqual(self.table.status, Table.STATUS_AVAILABLE)

    def test_pay_insufficient(self):
        bill_id = self._open_bill_id()

        res = self._action("bills-pay", bill_id, {"amount": "1000.00"})

        self.assertEqual(res.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(res.data["error"]["code"], "INSUFFICIENT_PAYMENT")
        self.assertEqual(Bill.objects.get(pk=bill_id).status, Bill.STATUS_OPEN)

    def test_cashier_cannot_void(self):
        bill_id = self._open_bill_id()
        res = self._action("bills-void", bill_id)
        self.assertEqual(res.status_code, status.HTTP_403_FORBIDDEN)

    def test_admin_void(self):
        bill_id = self._open_bill_id()
        self.client.force_authenticate(self.admin)

        res = self._action("bills-void", bill_id)

        self.assertEqual(res.status_code, status.HTTP_200_OK)
        self.assertEqual(res.data["status"], Bill.STATUS_VOID)

        again = self._action("bills-void", bill_id)
        self.assertEqual(again.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(again.data["error"]["code"], "INVALID_STATE")

    def test_receipt_after_payment(self):
        bill_id = self._open_bill_id()
        self._action("bills-pay", bill_id, {"amount": "1200"})

        res = self.client.get(reverse("bills-receipt", args=[bill_id]))

        self.assertEqual(res.status_code, status.HTTP_200_OK)
        self.assertEqual(res.data["total"], "1196.00 THB")
        self.assertEqual(res.data["vat_included"], "78.24 THB")
        self.assertEqual(res.data["change"], "4.00 THB")
        self.assertEqual(res.data["table"], "TABLE-01")

    def test_unknown_bill_returns_not_found(self):
        res = self._action("bills-pay", "00000000-0000-0000-0000-000000000000", {"amount": "10"})
        self.assertEqual(res.status_code, status.HTTP_404_NOT_FOUND)
        self.assertEqual(res.data["error"]["code"], "NOT_FOUND")


class BillListApiTests(BillApiTestCase):
    def test_list_filters_by_status(self):
        bill_id = self._open_bill_id()
        self._action("bills-pay", bill_id, {"amount": "1196"})
        self._open_bill_id(adult_count=1)

        res = self.client.get(reverse("bills-list"), {"status": Bill.STATUS_OPEN})

        self.assertEqual(res.status_code, status.HTTP_200_OK)
        self.assertEqual(res.data["count"], 1)
        self.assertEqual(res.data["results"][0]["adult_count"], 1)

    def test_viewer_can_read(self):
        bill_id = self._open_bill_id()
        self.client.force_authenticate(self.viewer)

        res = self.client.get(reverse("bills-detail", args=[bill_id]))

        self.assertEqual(res.status_code, status.HTTP_200_OK)
        self.assertEqual(res.data["table_code"], "TABLE-01")
