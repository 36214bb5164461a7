# billing/tests/test_reports.py

from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal

from django.test import TestCase
from django.urls import reverse
from rest_framework import status
from rest_framework.test import APIClient

from billing.models import Bill
from billing.services.reports import daily_report, monthly_report
from billing.tests.factories import BANGKOK, make_table, make_user


def _bill(table, *, opened, status=Bill.STATUS_CLOSED, total="1196.00", vat="78.24", **extra):
    return Bill.objects.create(
        table=table,
        status=status,
        adult_count=extra.pop("adult_count", 4),
        child_count=extra.pop("child_count", 2),
        total_gross=Decimal(total),
        subtotal_gross=Decimal(total),
        vat_amount=Decimal(vat),
        paid_amount=Decimal(extra.pop("paid", total)),
        payment_method=extra.pop("payment_method", Bill.PAYMENT_CASH if status == Bill.STATUS_CLOSED else None),
        opened_at=opened,
        closed_at=opened,
        **extra,
    )


class ReportServiceTests(TestCase):
    def setUp(self):
        self.t1 = make_table(1)
        self.t2 = make_table(2)

        _bill(self.t1, opened=datetime(2024, 6, 5, 11, 30, tzinfo=BANGKOK))
        _bill(
            self.t2,
            opened=datetime(2024, 6, 5, 18, 5, tzinfo=BANGKOK),
            total="1076.40",
            vat="70.42",
            paid="1100.00",
            payment_method=Bill.PAYMENT_PROMPTPAY,
            promo_applied="WEEKEND_10_OFF",
        )
        _bill(self.t1, opened=datetime(2024, 6, 5, 19, 0, tzinfo=BANGKOK), status=Bill.STATUS_VOID)
        # open bills and other days are excluded from the daily report
        _bill(self.t2, opened=datetime(2024, 6, 5, 20, 0, tzinfo=BANGKOK), status=Bill.STATUS_OPEN)
        _bill(self.t1, opened=datetime(2024, 6, 6, 0, 10, tzinfo=BANGKOK))

    def test_daily_summary(self):
        report = daily_report(date(2024, 6, 5))
        summary = report["summary"]

        self.assertEqual(report["date"], "2024-06-05")
        self.assertEqual(summary["total_sales_gross"], "2272.40")
        self.assertEqual(summary["total_vat"], "148.66")
        self.assertEqual(summary["bills_count"], 2)
        self.assertEqual(summary["void_bills_count"], 1)
        self.assertEqual(summary["table_turns"], 2)
        self.assertEqual(summary["total_adults"], 8)
        self.assertEqual(summary["total_children"], 4)
        self.assertEqual(summary["total_customers"], 12)
        self.assertEqual(summary["average_bill"], "1136.20")

    def test_daily_breakdowns(self):
        report = daily_report(date(2024, 6, 5))

        self.assertEqual([row["hour"] for row in report["hourly_breakdown"]], [11, 18])
        morning = report["hourly_breakdown"][0]
        self.assertEqual(morning["sales"], "1196.00")
        self.assertEqual(morning["bills"], 1)
        self.assertEqual(morning["customers"], 6)
        methods = {row["method"]: row for row in report["payment_methods"]}
        self.assertEqual(methods["PROMPTPAY"]["paid_amount"], "1100.00")
        self.assertEqual(methods["CASH"]["transaction_count"], 1)
        self.assertEqual(report["promotion_usage"][0]["promotion"], "WEEKEND_10_OFF")

    def test_empty_day(self):
        report = daily_report(date(2024, 1, 1))
        self.assertEqual(report["summary"]["total_sales_gross"], "0.00")
        self.assertEqual(report["summary"]["average_bill"], "0.00")
        self.assertEqual(report["hourly_breakdown"], [])

    def test_monthly(self):
        report = monthly_report(2024, 6)

        self.assertEqual(report["month"], "2024-06")
        self.assertEqual(report["summary"]["total_bills"], 3)
        self.assertEqual(report["summary"]["total_sales_gross"], "3468.40")
        statuses = {row["status"]: row["bill_count"] for row in report["breakdown"]}
        self.assertEqual(statuses, {Bill.STATUS_OPEN: 1, Bill.STATUS_CLOSED: 3, Bill.STATUS_VOID: 1})
        closed = next(row for row in report["breakdown"] if row["status"] == Bill.STATUS_CLOSED)
        self.assertEqual(closed["average_bill"], "1156.13")
        self.assertEqual(closed["average_adults"], "4.00")


class ReportApiTests(TestCase):
    def setUp(self):
        self.client = APIClient()
        self.viewer = make_user("read_only", email="viewer@example.com")
        self.cashier = make_user("cashier")

    def test_viewer_reads_daily_report(self):
        self.client.force_authenticate(self.viewer)
        res = self.client.get(reverse("reports-daily"), {"date": "2024-06-05"})

        self.assertEqual(res.status_code, status.HTTP_200_OK)
        self.assertEqual(res.data["date"], "2024-06-05")

    def test_bad_date(self):
        self.client.force_authenticate(self.viewer)
        res = self.client.get(reverse("reports-daily"), {"date": "05/06/2024"})

        self.assertEqual(res.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(res.data["error"]["code"], "VALIDATION_ERROR")

    def test_monthly_report(self):
        self.client.force_authenticate(self.viewer)
        res = self.client.get(reverse("reports-monthly"), {"month": "2024-06"})
        self.assertEqual(res.status_code, status.HTTP_200_OK)
        self.assertEqual(res.data["month"], "2024-06")

    def test_cashier_cannot_read_reports(self):
        self.client.force_authenticate(self.cashier)
        res = self.client.get(reverse("reports-daily"))
        self.assertEqual(res.status_code, status.HTTP_403_FORBIDDEN)
