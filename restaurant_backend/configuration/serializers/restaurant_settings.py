# configuration/serializers/restaurant_settings.py

from decimal import Decimal

from rest_framework import serializers

from configuration.models import RestaurantSettings


class RestaurantSettingsSerializer(serializers.ModelSerializer):
    class Meta:
        model = RestaurantSettings
        fields = [
            "adult_price_gross",
            "vat_rate",
            "currency",
            "rounding_mode",
            "prompt_pay_target",
            "updated_at",
        ]
        read_only_fields = ["updated_at"]

    def validate_adult_price_gross(self, value):
        if value <= 0:
            raise serializers.ValidationError("Adult price must be greater than 0")
        return value

    def validate_vat_rate(self, value):
        if value < 0 or value > Decimal("1"):
            raise serializers.ValidationError("VAT rate must be between 0 and 1")
        return value

    def validate_currency(self, value):
        value = (value or "").strip().upper()
        if not value:
            raise serializers.ValidationError("Currency is required")
        return value
