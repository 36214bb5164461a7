# promotions/serializers/promotion.py

from decimal import Decimal

from rest_framework import serializers

from billing.services.promotion_selector import DAY_CODES
from promotions.models import Promotion


class PromotionSerializer(serializers.ModelSerializer):
    """
    Promotion CRUD payload.

    Rules:
    - key is immutable once created (bills keep it as a denormalised label)
    - value > 0; PERCENT value <= 100
    - days_of_week: unique MON..SUN codes (empty = every day)
    """

    days_of_week = serializers.ListField(
        child=serializers.CharField(max_length=3),
        required=False,
        allow_empty=True,
    )

    class Meta:
        model = Promotion
        fields = [
            "id",
            "key",
            "name",
            "type",
            "value",
            "days_of_week",
            "active",
            "expires_at",
            "priority",
            "created_at",
            "updated_at",
        ]
        read_only_fields = ["id", "created_at", "updated_at"]

    def validate_key(self, value):
        value = (value or "").strip().upper()
        if not value:
            raise serializers.ValidationError("Key is required")
        if self.instance is not None and value != self.instance.key:
            raise serializers.ValidationError("Key cannot be changed")
        return value

    def validate_value(self, value):
        if value <= 0:
            raise serializers.ValidationError("Value must be greater than 0")
        return value

    def validate_days_of_week(self, value):
        days = [str(d).strip().upper() for d in value]
        unknown = [d for d in days if d not in DAY_CODES]
        if unknown:
            raise serializers.ValidationError(
                f"Unknown day codes: {', '.join(unknown)}. Use {', '.join(DAY_CODES)}"
            )
        # keep calendar order, drop duplicates
        return [d for d in DAY_CODES if d in days]

    def validate(self, attrs):
        promo_type = attrs.get("type", getattr(self.instance, "type", None))
        value = attrs.get("value", getattr(self.instance, "value", None))
        if promo_type == Promotion.TYPE_PERCENT and value is not None and value > Decimal("100"):
            raise serializers.ValidationError({"value": "Percent promotion cannot exceed 100"})
        return attrs
