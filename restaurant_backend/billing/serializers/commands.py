# billing/serializers/commands.py

"""
BILL COMMAND INPUTS

Input validation only; the bill service re-checks every precondition.
"""

from decimal import Decimal

from rest_framework import serializers

from billing.models import MAX_HEAD_COUNT, Bill
from customers.models import PHONE_RE


class OpenBillInputSerializer(serializers.Serializer):
    adult_count = serializers.IntegerField(min_value=0, max_value=MAX_HEAD_COUNT)
    child_count = serializers.IntegerField(
        min_value=0, max_value=MAX_HEAD_COUNT, required=False, default=0
    )
    customer_phone = serializers.RegexField(
        PHONE_RE,
        required=False,
        allow_null=True,
        allow_blank=True,
        error_messages={"invalid": "Phone must be 10 digits starting with 0"},
    )
    customer_name = serializers.CharField(
        max_length=120, required=False, allow_null=True, allow_blank=True
    )


class EditBillInputSerializer(serializers.Serializer):
    adult_count = serializers.IntegerField(
        min_value=0, max_value=MAX_HEAD_COUNT, required=False
    )
    child_count = serializers.IntegerField(
        min_value=0, max_value=MAX_HEAD_COUNT, required=False
    )
    discount_type = serializers.ChoiceField(
        choices=[c[0] for c in Bill.DISCOUNT_CHOICES], required=False
    )
    discount_value = serializers.DecimalField(
        max_digits=12, decimal_places=2, min_value=Decimal("0.00"), required=False
    )
    customer_id = serializers.UUIDField(required=False, allow_null=True)

    def validate(self, attrs):
        if (
            attrs.get("discount_type") == Bill.DISCOUNT_PERCENT
            and attrs.get("discount_value") is not None
            and attrs["discount_value"] > Decimal("100")
        ):
            raise serializers.ValidationError(
                {"discount_value": "Percent discount cannot exceed 100"}
            )
        return attrs


class PayBillInputSerializer(serializers.Serializer):
    amount = serializers.DecimalField(
        max_digits=12, decimal_places=2, min_value=Decimal("0.01")
    )
    payment_method = serializers.ChoiceField(
        choices=[c[0] for c in Bill.PAYMENT_CHOICES],
        required=False,
        default=Bill.PAYMENT_CASH,
    )
