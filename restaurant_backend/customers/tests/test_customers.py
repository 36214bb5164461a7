# customers/tests/test_customers.py

from decimal import Decimal

from django.test import TestCase
from django.urls import reverse
from rest_framework import status
from rest_framework.test import APIClient

from billing.models import Bill
from billing.services.exceptions import BillValidationError, NotFoundError
from billing.tests.factories import WEDNESDAY_NOON, make_customer, make_table, make_user
from customers.services import customer_service


class CustomerServiceTests(TestCase):
    def setUp(self):
        self.admin = make_user("admin")
        self.customer = make_customer(stamps=4)

    def test_find_by_phone(self):
        self.assertEqual(customer_service.find_by_phone(" 0812345678 "), self.customer)

    def test_find_rejects_malformed_phone(self):
        with self.assertRaises(BillValidationError):
            customer_service.find_by_phone("+66812345678")

    def test_find_unknown(self):
        with self.assertRaises(NotFoundError):
            customer_service.find_by_phone("0899999999")

    def test_adjust_stamps(self):
        customer = customer_service.adjust_stamps(
            user=self.admin, customer_id=self.customer.id, adjustment=6, reason="migration"
        )
        self.assertEqual(customer.loyalty_stamps, 10)

    def test_adjust_cannot_go_negative(self):
        with self.assertRaises(BillValidationError) as ctx:
            customer_service.adjust_stamps(user=self.admin, customer_id=self.customer.id, adjustment=-5)
        self.assertEqual(ctx.exception.message, "Stamps cannot go below zero. Current: 4")

        self.customer.refresh_from_db()
        self.assertEqual(self.customer.loyalty_stamps, 4)

    def test_update_name_blank_clears(self):
        customer = customer_service.update_name(customer_id=self.customer.id, name="   ")
        self.assertIsNone(customer.name)

    def test_customers_are_never_deleted(self):
        with self.assertRaises(ValueError):
            self.customer.delete()


class CustomerApiTests(TestCase):
    def setUp(self):
        self.client = APIClient()
        self.admin = make_user("admin")
        self.cashier = make_user("cashier")
        self.customer = make_customer(stamps=11, name="Ploy")

        table = make_table(1)
        for i in range(7):
            Bill.objects.create(
                table=table,
                customer=self.customer,
                status=Bill.STATUS_CLOSED,
                adult_count=i + 1,
                total_gross=Decimal("299.00") * (i + 1),
                opened_at=WEDNESDAY_NOON.now(),
                closed_at=WEDNESDAY_NOON.now().replace(minute=i),
            )

    def test_lookup_by_phone_returns_recent_bills(self):
        self.client.force_authenticate(self.cashier)

        res = self.client.get(reverse("customers-lookup"), {"phone": "0812345678"})

        self.assertEqual(res.status_code, status.HTTP_200_OK)
        self.assertEqual(res.data["name"], "Ploy")
        self.assertTrue(res.data["can_redeem"])
        self.assertEqual(len(res.data["recent_bills"]), 5)
        self.assertEqual(res.data["recent_bills"][0]["adult_count"], 7)

    def test_lookup_invalid_phone(self):
        self.client.force_authenticate(self.cashier)
        res = self.client.get(reverse("customers-lookup"), {"phone": "12"})
        self.assertEqual(res.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(res.data["error"]["details"][0]["field"], "phone")

    def test_lookup_unknown(self):
        self.client.force_authenticate(self.cashier)
        res = self.client.get(reverse("customers-lookup"), {"phone": "0899999999"})
        self.assertEqual(res.status_code, status.HTTP_404_NOT_FOUND)
        self.assertEqual(res.data["error"]["code"], "NOT_FOUND")

    def test_detail_returns_ten_recent_bills(self):
        self.client.force_authenticate(self.cashier)
        res = self.client.get(reverse("customers-detail", args=[self.customer.id]))

        self.assertEqual(res.status_code, status.HTTP_200_OK)
        self.assertEqual(len(res.data["recent_bills"]), 7)

    def test_cashier_renames_customer(self):
        self.client.force_authenticate(self.cashier)
        res = self.client.patch(
            reverse("customers-detail", args=[self.customer.id]), {"name": "Ploy S."}, format="json"
        )
        self.assertEqual(res.status_code, status.HTTP_200_OK)
        self.assertEqual(res.data["name"], "Ploy S.")

    def test_stamp_adjustment_is_admin_only(self):
        url = reverse("customers-stamps", args=[self.customer.id])

        self.client.force_authenticate(self.cashier)
        res = self.client.patch(url, {"adjustment": 5}, format="json")
        self.assertEqual(res.status_code, status.HTTP_403_FORBIDDEN)

        self.client.force_authenticate(self.admin)
        res = self.client.patch(url, {"adjustment": -1, "reason": "duplicate stamp"}, format="json")
        self.assertEqual(res.status_code, status.HTTP_200_OK)
        self.assertEqual(res.data["loyalty_stamps"], 10)

    def test_zero_adjustment_rejected(self):
        self.client.force_authenticate(self.admin)
        res = self.client.patch(
            reverse("customers-stamps", args=[self.customer.id]), {"adjustment": 0}, format="json"
        )
        self.assertEqual(res.status_code, status.HTTP_400_BAD_REQUEST)

    def test_negative_balance_rejected(self):
        self.client.force_authenticate(self.admin)
        res = self.client.patch(
            reverse("customers-stamps", args=[self.customer.id]), {"adjustment": -12}, format="json"
        )
        self.assertEqual(res.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(res.data["error"]["message"], "Stamps cannot go below zero. Current: 11")
