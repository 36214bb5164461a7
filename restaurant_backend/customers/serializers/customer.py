# customers/serializers/customer.py

from rest_framework import serializers

from billing.services.loyalty import can_redeem
from customers.models import PHONE_RE, Customer


class CustomerBriefSerializer(serializers.ModelSerializer):
    class Meta:
        model = Customer
        fields = ["id", "phone", "name", "loyalty_stamps"]
        read_only_fields = fields


class CustomerSerializer(serializers.ModelSerializer):
    """
    Customer with loyalty state.

    `recent_bills` is filled by the view (lookup: 5, detail: 10 closed bills).
    """

    can_redeem = serializers.SerializerMethodField()

    class Meta:
        model = Customer
        fields = [
            "id",
            "phone",
            "name",
            "loyalty_stamps",
            "can_redeem",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields

    def get_can_redeem(self, obj):
        return can_redeem(obj.loyalty_stamps)


class PhoneLookupSerializer(serializers.Serializer):
    phone = serializers.RegexField(
        PHONE_RE,
        error_messages={"invalid": "Phone must be 10 digits starting with 0"},
    )


class CustomerNameSerializer(serializers.Serializer):
    name = serializers.CharField(max_length=120, allow_blank=True, allow_null=True)


class StampAdjustmentSerializer(serializers.Serializer):
    adjustment = serializers.IntegerField()
    reason = serializers.CharField(max_length=255, required=False, allow_blank=True, default="")

    def validate_adjustment(self, value):
        if value == 0:
            raise serializers.ValidationError("Adjustment cannot be zero")
        return value
