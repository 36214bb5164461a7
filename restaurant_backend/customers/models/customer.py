# customers/models/customer.py

import re
import uuid

from django.core.exceptions import ValidationError
from django.db import models

# 10-digit local mobile format, e.g. 0812345678
PHONE_RE = re.compile(r"^0[0-9]{9}$")


def validate_phone(value: str):
    if not PHONE_RE.match(value or ""):
        raise ValidationError("Phone must be 10 digits starting with 0")


class Customer(models.Model):
    """
    Loyalty customer, identified by phone.

    - created on first check-in (upsert by phone)
    - loyalty_stamps never goes below zero
    - never deleted
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    phone = models.CharField(max_length=10, unique=True, validators=[validate_phone])
    name = models.CharField(max_length=120, null=True, blank=True)

    loyalty_stamps = models.PositiveIntegerField(default=0)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-created_at"]

    def __str__(self):
        return f"{self.phone} ({self.loyalty_stamps} stamps)"

    def delete(self, *args, **kwargs):
        raise ValueError("Customers cannot be deleted")
