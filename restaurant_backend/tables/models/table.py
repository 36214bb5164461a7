# tables/models/table.py

import re
import uuid

from django.core.exceptions import ValidationError
from django.db import models

TABLE_CODE_RE = re.compile(r"^TABLE-(0[1-9]|[1-4][0-9]|50)$")


def table_code_for(number: int) -> str:
    return f"TABLE-{number:02d}"


def validate_table_code(value: str):
    if not TABLE_CODE_RE.match(value or ""):
        raise ValidationError("Table code must be TABLE-01 .. TABLE-50")


class Table(models.Model):
    """
    Dining table from the fixed pool.

    GUARANTEES:
    - current_bill is set iff status == OCCUPIED with an OPEN bill
    - status / current_bill change only through the occupancy coordinator
    - never deleted, only status-cycled
    """

    STATUS_AVAILABLE = "AVAILABLE"
    STATUS_OCCUPIED = "OCCUPIED"
    STATUS_RESERVED = "RESERVED"
    STATUS_MAINTENANCE = "MAINTENANCE"

    STATUS_CHOICES = [
        (STATUS_AVAILABLE, "Available"),
        (STATUS_OCCUPIED, "Occupied"),
        (STATUS_RESERVED, "Reserved"),
        (STATUS_MAINTENANCE, "Maintenance"),
    ]

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    code = models.CharField(max_length=16, unique=True, validators=[validate_table_code])
    name = models.CharField(max_length=64)

    status = models.CharField(
        max_length=16,
        choices=STATUS_CHOICES,
        default=STATUS_AVAILABLE,
    )

    current_bill = models.OneToOneField(
        "billing.Bill",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="+",
    )

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["code"]
        indexes = [
            models.Index(fields=["status"], name="tables_table_status_idx"),
        ]

    def __str__(self):
        return f"{self.code} ({self.status})"

    def delete(self, *args, **kwargs):
        raise ValueError("Tables cannot be deleted")

    @property
    def is_available(self) -> bool:
        return self.status == self.STATUS_AVAILABLE
