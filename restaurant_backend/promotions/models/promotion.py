# promotions/models/promotion.py

import uuid
from decimal import Decimal

from django.db import models
from django.db.models import Q

from billing.services.promotion_selector import PROMO_AMOUNT, PROMO_PERCENT


class PromotionQuerySet(models.QuerySet):
    def active_at(self, now):
        """Active and not expired at `now` (day-of-week is checked by the selector)."""
        return self.filter(active=True).filter(
            Q(expires_at__isnull=True) | Q(expires_at__gt=now)
        )


class Promotion(models.Model):
    """
    Day-of-week scoped discount rule.

    - key is unique and immutable after creation (denormalised onto bills)
    - days_of_week: list of MON..SUN codes; empty means every day
    - priority: higher wins when several promotions are eligible
    """

    TYPE_PERCENT = PROMO_PERCENT
    TYPE_AMOUNT = PROMO_AMOUNT

    TYPE_CHOICES = [
        (TYPE_PERCENT, "Percent"),
        (TYPE_AMOUNT, "Amount"),
    ]

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    key = models.CharField(max_length=64, unique=True)
    name = models.CharField(max_length=120)

    type = models.CharField(max_length=10, choices=TYPE_CHOICES)
    value = models.DecimalField(max_digits=10, decimal_places=2, default=Decimal("0.00"))

    days_of_week = models.JSONField(default=list, blank=True)

    active = models.BooleanField(default=True)
    expires_at = models.DateTimeField(null=True, blank=True)
    priority = models.IntegerField(default=0)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = PromotionQuerySet.as_manager()

    class Meta:
        ordering = ["-priority", "created_at", "id"]

    def __str__(self):
        return f"{self.key} ({self.type} {self.value})"
