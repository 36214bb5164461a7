# billing/serializers/bill.py

from rest_framework import serializers

from billing.models import Bill
from customers.serializers import CustomerBriefSerializer


class BillSummarySerializer(serializers.ModelSerializer):
    """Compact form used inside table listings and customer history."""

    class Meta:
        model = Bill
        fields = [
            "id",
            "status",
            "adult_count",
            "child_count",
            "total_gross",
            "opened_at",
            "closed_at",
        ]
        read_only_fields = fields


class BillSerializer(serializers.ModelSerializer):
    """
    Read-only bill representation.

    Monetary values are the persisted 2dp snapshot; the dashboard never
    recomputes totals.
    """

    table_code = serializers.CharField(source="table.code", read_only=True)
    table_name = serializers.CharField(source="table.name", read_only=True)
    customer = CustomerBriefSerializer(read_only=True)
    opened_by_email = serializers.EmailField(source="opened_by.email", read_only=True, default=None)
    closed_by_email = serializers.EmailField(source="closed_by.email", read_only=True, default=None)

    class Meta:
        model = Bill
        fields = [
            "id",
            "table",
            "table_code",
            "table_name",
            "customer",
            "status",
            "adult_count",
            "child_count",
            "adult_price_gross",
            "vat_rate",
            "discount_type",
            "discount_value",
            "promo_applied",
            "loyalty_free_applied",
            "base_gross",
            "promo_discount_gross",
            "loyalty_free_gross",
            "subtotal_gross",
            "vat_amount",
            "total_gross",
            "paid_amount",
            "payment_method",
            "opened_by",
            "opened_by_email",
            "closed_by",
            "closed_by_email",
            "opened_at",
            "closed_at",
        ]
        read_only_fields = fields


def pricing_payload(pricing) -> dict:
    """PricingResult -> JSON-safe 2dp breakdown (money as strings)."""
    return {
        key: value if isinstance(value, int) else str(value)
        for key, value in pricing.quantized().items()
    }
