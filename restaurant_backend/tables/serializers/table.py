# tables/serializers/table.py

from django.db import transaction
from rest_framework import serializers

from billing.serializers import BillSummarySerializer
from tables.models import Table

OCCUPIED_MESSAGE = "Cannot modify a table that has an open bill"


class TableSerializer(serializers.ModelSerializer):
    current_bill = BillSummarySerializer(read_only=True)

    class Meta:
        model = Table
        fields = ["id", "code", "name", "status", "current_bill", "updated_at"]
        read_only_fields = fields


class TableUpdateSerializer(serializers.ModelSerializer):
    """
    Admin edits: name and non-occupancy statuses only.

    OCCUPIED is owned by the bill lifecycle and can't be set by hand.
    The occupancy check is repeated on the locked row at save time, and
    only name / status are written back.
    """

    status = serializers.ChoiceField(
        choices=[
            Table.STATUS_AVAILABLE,
            Table.STATUS_RESERVED,
            Table.STATUS_MAINTENANCE,
        ],
        required=False,
    )

    class Meta:
        model = Table
        fields = ["name", "status"]

    def validate(self, attrs):
        if self.instance is not None and self.instance.status == Table.STATUS_OCCUPIED:
            raise serializers.ValidationError(OCCUPIED_MESSAGE)
        return attrs

    @transaction.atomic
    def update(self, instance, validated_data):
        table = Table.objects.select_for_update().get(pk=instance.pk)

        # a bill may have been opened since the instance was read
        if table.status == Table.STATUS_OCCUPIED:
            raise serializers.ValidationError(OCCUPIED_MESSAGE)

        changed = []
        for field in ("name", "status"):
            if field in validated_data:
                setattr(table, field, validated_data[field])
                changed.append(field)

        if changed:
            table.save(update_fields=[*changed, "updated_at"])
        return table
