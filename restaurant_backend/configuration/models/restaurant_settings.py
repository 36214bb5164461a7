# configuration/models/restaurant_settings.py

"""
RESTAURANT SETTINGS (SINGLETON)

One row (pk=1) holding the pricing configuration shared by every bill:
- adult_price_gross (VAT inclusive)
- vat_rate (fraction, e.g. 0.07)
- currency
- rounding_mode (NONE | UP | DOWN | NEAREST)
- prompt_pay_target (optional receipt payee)

Lifecycle:
- created at bootstrap (seed_restaurant) or lazily by load()
- mutated by admins only
- never deleted
"""

from decimal import Decimal

from django.conf import settings as django_settings
from django.db import models

from billing.services.money import (
    ROUNDING_DOWN,
    ROUNDING_NEAREST,
    ROUNDING_NONE,
    ROUNDING_UP,
    quantize_money,
)

SINGLETON_PK = 1


def _defaults() -> dict:
    conf = getattr(django_settings, "RESTAURANT_DEFAULTS", {}) or {}
    return {
        "adult_price_gross": quantize_money(conf.get("ADULT_PRICE_GROSS", "299.00")),
        "vat_rate": Decimal(str(conf.get("VAT_RATE", "0.07"))),
        "currency": str(conf.get("CURRENCY", "THB")),
        "rounding_mode": ROUNDING_NONE,
    }


class RestaurantSettings(models.Model):
    ROUNDING_CHOICES = [
        (ROUNDING_NONE, "None"),
        (ROUNDING_UP, "Up"),
        (ROUNDING_DOWN, "Down"),
        (ROUNDING_NEAREST, "Nearest"),
    ]

    id = models.PositiveSmallIntegerField(primary_key=True, default=SINGLETON_PK, editable=False)

    adult_price_gross = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        default=Decimal("299.00"),
        help_text="Adult buffet price, VAT inclusive.",
    )
    vat_rate = models.DecimalField(
        max_digits=5,
        decimal_places=4,
        default=Decimal("0.07"),
        help_text="VAT as a fraction (0.07 = 7%).",
    )
    currency = models.CharField(max_length=8, default="THB")
    rounding_mode = models.CharField(
        max_length=10,
        choices=ROUNDING_CHOICES,
        default=ROUNDING_NONE,
    )
    prompt_pay_target = models.CharField(max_length=64, null=True, blank=True)

    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = "restaurant settings"
        verbose_name_plural = "restaurant settings"

    def __str__(self):
        return f"{self.adult_price_gross} {self.currency} (VAT {self.vat_rate})"

    def save(self, *args, **kwargs):
        self.pk = SINGLETON_PK
        # a fresh instance overwrites the existing row instead of inserting
        if self._state.adding and type(self).objects.filter(pk=SINGLETON_PK).exists():
            self._state.adding = False
        super().save(*args, **kwargs)

    def delete(self, *args, **kwargs):
        raise ValueError("Restaurant settings cannot be deleted")

    @classmethod
    def load(cls) -> "RestaurantSettings":
        obj, _ = cls.objects.get_or_create(pk=SINGLETON_PK, defaults=_defaults())
        return obj
