# billing/services/reports.py

"""
RESTAURANT REPORTS

Daily:
- bills OPENED within the local day [00:00, 24:00) that are CLOSED or VOID
- sales / VAT / head counts / averages come from CLOSED bills only
- table turns = distinct tables with a closed bill
- hourly breakdown keyed by the local opening hour
- payment-method and promotion breakdowns (closed bills)

Monthly:
- every bill opened in the local month, grouped by status
- summary totals from CLOSED bills

Totals are aggregated in the database; money is emitted as 2dp strings.
"""

from __future__ import annotations

from datetime import date, datetime, time, timedelta
from decimal import Decimal

from django.db.models import Count, F, Q, Sum
from django.db.models.functions import TruncHour
from django.utils import timezone

from billing.models import Bill
from billing.services.money import ZERO, quantize_money


def _local_bounds(start_day: date, end_day: date):
    tz = timezone.get_current_timezone()
    start = timezone.make_aware(datetime.combine(start_day, time.min), tz)
    end = timezone.make_aware(datetime.combine(end_day, time.min), tz)
    return start, end


def _m(value) -> str:
    return str(quantize_money(value or ZERO))


def _average(total, count: int):
    if not count:
        return ZERO
    return Decimal(total or 0) / count


def _bills_opened_between(start, end):
    return Bill.objects.filter(opened_at__gte=start, opened_at__lt=end)


# ============================================================
# DAILY
# ============================================================


def daily_report(day: date) -> dict:
    start, end = _local_bounds(day, day + timedelta(days=1))
    tz = timezone.get_current_timezone()

    finished = _bills_opened_between(start, end).filter(
        status__in=[Bill.STATUS_CLOSED, Bill.STATUS_VOID]
    )
    closed = finished.filter(status=Bill.STATUS_CLOSED)

    void_count = finished.filter(status=Bill.STATUS_VOID).count()

    totals = closed.aggregate(
        bills_count=Count("id"),
        total_sales=Sum("total_gross"),
        total_vat=Sum("vat_amount"),
        total_adults=Sum("adult_count"),
        total_children=Sum("child_count"),
        table_turns=Count("table", distinct=True),
        loyalty_free=Count("id", filter=Q(loyalty_free_applied=True)),
    )

    bills_count = totals["bills_count"]
    total_adults = totals["total_adults"] or 0
    total_children = totals["total_children"] or 0

    hourly = (
        closed.annotate(hour=TruncHour("opened_at", tzinfo=tz))
        .values("hour")
        .annotate(
            sales=Sum("total_gross"),
            bills=Count("id"),
            customers=Sum(F("adult_count") + F("child_count")),
        )
        .order_by("hour")
    )

    methods = (
        closed.values("payment_method")
        .annotate(
            total=Sum("total_gross"),
            paid=Sum("paid_amount"),
            count=Count("id"),
        )
        .order_by("payment_method")
    )

    promotions = (
        closed.exclude(promo_applied__isnull=True)
        .exclude(promo_applied="")
        .values("promo_applied")
        .annotate(total=Sum("total_gross"), count=Count("id"))
        .order_by("promo_applied")
    )

    return {
        "date": day.isoformat(),
        "summary": {
            "total_sales_gross": _m(totals["total_sales"]),
            "total_vat": _m(totals["total_vat"]),
            "table_turns": totals["table_turns"],
            "total_adults": total_adults,
            "total_children": total_children,
            "total_customers": total_adults + total_children,
            "bills_count": bills_count,
            "void_bills_count": void_count,
            "average_bill": _m(_average(totals["total_sales"], bills_count)),
            "loyalty_free_applied": totals["loyalty_free"],
        },
        "hourly_breakdown": [
            {
                "hour": timezone.localtime(row["hour"], tz).hour,
                "sales": _m(row["sales"]),
                "bills": row["bills"],
                "customers": row["customers"] or 0,
            }
            for row in hourly
        ],
        "payment_methods": [
            {
                "method": row["payment_method"] or None,
                "total_amount": _m(row["total"]),
                "paid_amount": _m(row["paid"]),
                "transaction_count": row["count"],
            }
            for row in methods
        ],
        "promotion_usage": [
            {
                "promotion": row["promo_applied"],
                "total_sales": _m(row["total"]),
                "usage_count": row["count"],
            }
            for row in promotions
        ],
    }


# ============================================================
# MONTHLY
# ============================================================


def monthly_report(year: int, month: int) -> dict:
    first = date(year, month, 1)
    next_first = date(year + 1, 1, 1) if month == 12 else date(year, month + 1, 1)
    start, end = _local_bounds(first, next_first)

    bills = _bills_opened_between(start, end)

    by_status = {
        row["status"]: row
        for row in bills.values("status")
        .annotate(
            count=Count("id"),
            sales=Sum("total_gross"),
            vat=Sum("vat_amount"),
            adults=Sum("adult_count"),
            children=Sum("child_count"),
        )
        .order_by("status")
    }

    breakdown = []
    for status, _label in Bill.STATUS_CHOICES:
        row = by_status.get(status)
        if row is None:
            continue
        count = row["count"]
        breakdown.append(
            {
                "status": status,
                "total_sales": _m(row["sales"]),
                "total_vat": _m(row["vat"]),
                "bill_count": count,
                "average_bill": _m(_average(row["sales"], count)),
                "average_adults": _m(_average(row["adults"], count)),
                "average_children": _m(_average(row["children"], count)),
            }
        )

    closed = by_status.get(Bill.STATUS_CLOSED, {})
    closed_count = closed.get("count", 0)

    return {
        "month": f"{year:04d}-{month:02d}",
        "summary": {
            "total_sales_gross": _m(closed.get("sales")),
            "total_vat": _m(closed.get("vat")),
            "total_bills": closed_count,
            "total_customers": (closed.get("adults") or 0) + (closed.get("children") or 0),
            "average_bill": _m(_average(closed.get("sales"), closed_count)),
        },
        "breakdown": breakdown,
    }
